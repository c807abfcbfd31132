"""Local file source — archives files from a directory.

Layout: every regular file directly under ``root`` that matches ``pattern``
(all files by default) is one artifact, identified by its file name.  Files
are listed in name order so archives of an unchanged directory are
byte-identical.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from backuptool.config import FileSourceSettings
from backuptool.core.errors import ConnectivityError, FetchError, ListingError
from backuptool.models.artifacts import ArtifactRef

logger = logging.getLogger(__name__)


class LocalFileSource:
    """Reads artifacts from files below a root directory.

    Parameters
    ----------
    root:
        Directory to enumerate.  Must exist when ``init()`` is called.
    pattern:
        Glob pattern selecting files.  Defaults to ``*``.
    """

    def __init__(self, root: Path | str, pattern: str = "*") -> None:
        self._root = Path(root)
        self._pattern = pattern

    @classmethod
    def from_settings(cls, settings: FileSourceSettings) -> LocalFileSource:
        return cls(settings.root, settings.pattern)

    @property
    def source_name(self) -> str:
        return "file"

    @property
    def archive_name(self) -> str:
        return "files"

    @property
    def root(self) -> Path:
        return self._root

    def init(self) -> None:
        if not self._root.is_dir():
            raise ConnectivityError(f"source directory {self._root} not found")
        logger.info("reading files from %s", self._root)

    def list_artifacts(self) -> list[ArtifactRef]:
        try:
            paths = sorted(p for p in self._root.glob(self._pattern) if p.is_file())
            refs = [ArtifactRef(identifier=p.name, title=p.name) for p in paths]
        except (OSError, ValidationError) as exc:
            raise ListingError(f"listing {self._root}: {exc}") from exc

        logger.debug("found %d files in %s", len(refs), self._root)
        return refs

    def fetch(self, ref: ArtifactRef) -> bytes:
        path = self._root / ref.identifier
        try:
            return path.read_bytes()
        except OSError as exc:
            raise FetchError(ref.identifier, f"reading {path}: {exc}") from exc

    def close(self) -> None:
        """Nothing to release; files are opened per fetch."""
