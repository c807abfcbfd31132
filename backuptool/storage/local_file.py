"""Local filesystem sink — writes archives below a root directory.

Layout: {root}/{destination}, e.g. ``./2024/3/15/dashboards-0300.tgz``.
"""

from __future__ import annotations

import contextlib
import logging
import shutil
from pathlib import Path
from typing import Any, BinaryIO

from backuptool.core.errors import ConfigurationError, SinkWriteError, WriteConflictError

logger = logging.getLogger(__name__)


class LocalFileSink:
    """Copies archive streams into new files.

    Parameters
    ----------
    root:
        Root directory for archives.  Defaults to the working directory.
    """

    def __init__(self, root: Path | str | None = None) -> None:
        self._root = Path(root) if root else Path(".")

    @property
    def sink_name(self) -> str:
        return "local"

    @property
    def root(self) -> Path:
        return self._root

    def init(self) -> None:
        """Validate the configured root.  No files are created here."""
        if self._root.exists() and not self._root.is_dir():
            raise ConfigurationError(f"local storage root {self._root} is not a directory")

    def write(self, stream: BinaryIO, destination: str) -> None:
        target = self._root / destination

        if target.exists():
            raise WriteConflictError(destination, f"file at {target} already exists")

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise SinkWriteError(f"creating directory path {target.parent}: {exc}") from exc

        try:
            # "x" mode fails if another writer created the file since the check
            out = target.open("xb")
        except FileExistsError as exc:
            raise WriteConflictError(destination, f"file at {target} already exists") from exc
        except OSError as exc:
            raise SinkWriteError(f"creating file {target}: {exc}") from exc

        try:
            with out:
                shutil.copyfileobj(stream, out)
        except OSError as exc:
            with contextlib.suppress(OSError):
                target.unlink(missing_ok=True)
            raise SinkWriteError(f"writing to file {target}: {exc}") from exc

        logger.debug("LocalFileSink: wrote %s", target)

    def close(self) -> None:
        """Nothing to release; each write opens and closes its own file."""

    def __enter__(self) -> LocalFileSink:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
