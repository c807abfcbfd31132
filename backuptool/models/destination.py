"""Date-partitioned destination paths.

Layout: ``[prefix/]YYYY/M/D/<filename>`` — month and day are not zero
padded.  The prefix is always relative to the sink root; surrounding
``/`` characters are stripped, so ``/mnt/backups`` becomes ``mnt/backups``.
A destination is computed once per run and never reused; the sink's
existence check rejects collisions rather than overwriting.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

ARCHIVE_EXTENSION = ".tgz"


class DestinationPath(BaseModel):
    """Where one run's archive is written inside a sink."""

    model_config = ConfigDict(frozen=True)

    prefix: str = ""
    year: int = Field(ge=1)
    month: int = Field(ge=1, le=12)
    day: int = Field(ge=1, le=31)
    filename: str

    @field_validator("prefix")
    @classmethod
    def normalize_prefix(cls, value: str) -> str:
        return value.strip().strip("/")

    @field_validator("filename")
    @classmethod
    def check_filename(cls, value: str) -> str:
        if not value or "/" in value or "\\" in value:
            raise ValueError(f"invalid archive filename {value!r}")
        return value

    @classmethod
    def for_time(
        cls, now: datetime, filename: str, prefix: str = ""
    ) -> DestinationPath:
        """Build the destination for an archive created at *now*."""
        return cls(
            prefix=prefix,
            year=now.year,
            month=now.month,
            day=now.day,
            filename=filename,
        )

    @property
    def parts(self) -> list[str]:
        parts = [self.prefix] if self.prefix else []
        parts.extend([str(self.year), str(self.month), str(self.day), self.filename])
        return parts

    def __str__(self) -> str:
        return "/".join(self.parts)


def archive_filename(archive_name: str, now: datetime) -> str:
    """Return ``<archive_name>-HHMM.tgz`` for an archive created at *now*."""
    return f"{archive_name}-{now:%H%M}{ARCHIVE_EXTENSION}"
