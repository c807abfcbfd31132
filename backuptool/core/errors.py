"""Error taxonomy for backup runs.

Every error raised by backup-tool components derives from ``BackupError``.
Only ``FetchError`` is recoverable: the archive builder logs it, counts it,
and moves on to the next artifact.  Everything else aborts the run and is
surfaced by the CLI as a non-zero exit.
"""

from __future__ import annotations


class BackupError(RuntimeError):
    """Base class for all backup-tool errors."""


class ConfigurationError(BackupError):
    """Required settings are missing or invalid.

    Raised before any network or disk I/O is attempted.
    """


class ConnectivityError(BackupError):
    """A source or sink could not be reached during ``init()``."""


class ListingError(BackupError):
    """The bulk artifact listing failed; there is nothing to archive."""


class FetchError(BackupError):
    """Retrieving a single artifact failed.

    Recoverable: the artifact is skipped and the run continues.
    """

    def __init__(self, identifier: str, message: str) -> None:
        self.identifier = identifier
        super().__init__(message)


class ArchiveFormatError(BackupError):
    """Writing the tar/gzip stream failed; the archive would be corrupt."""


class WriteConflictError(BackupError):
    """The destination already exists in the sink.  Nothing was written."""

    def __init__(self, destination: str, message: str | None = None) -> None:
        self.destination = destination
        super().__init__(message or f"destination {destination} already exists")


class SinkWriteError(BackupError):
    """Persisting the archive to the sink failed partway."""
