"""Artifact models — one named unit of content in an archive."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

ENTRY_SUFFIX = ".json"


def _check_identifier(value: str) -> str:
    if not value:
        raise ValueError("identifier must not be empty")
    if "/" in value or "\\" in value:
        raise ValueError(f"identifier {value!r} must not contain path separators")
    if value in (".", ".."):
        raise ValueError(f"identifier {value!r} is not a valid filename")
    return value


class ArtifactRef(BaseModel):
    """A listed artifact, not yet fetched.

    The identifier becomes a filename component inside the archive, so it
    must not contain path separators.
    """

    model_config = ConfigDict(frozen=True)

    identifier: str
    title: str = ""

    @field_validator("identifier")
    @classmethod
    def check_identifier(cls, value: str) -> str:
        return _check_identifier(value)

    @property
    def entry_name(self) -> str:
        """Name of the tar entry this artifact is stored under."""
        return f"{self.identifier}{ENTRY_SUFFIX}"


class Artifact(BaseModel):
    """A fetched artifact.  Content is immutable once produced."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    content: bytes

    @field_validator("identifier")
    @classmethod
    def check_identifier(cls, value: str) -> str:
        return _check_identifier(value)

    @property
    def entry_name(self) -> str:
        return f"{self.identifier}{ENTRY_SUFFIX}"

    @property
    def size_bytes(self) -> int:
        return len(self.content)


class ArchiveReport(BaseModel):
    """Summary of one archive build.

    ``archived + failed == total`` always holds.  A report with
    ``failed > 0`` still describes a successful (partial) archive.
    """

    model_config = ConfigDict(frozen=True)

    total: int
    archived: int
    failed: int
    failed_identifiers: list[str] = []
    size_bytes: int = 0
    sha256: str = ""

    @property
    def is_partial(self) -> bool:
        return self.failed > 0
