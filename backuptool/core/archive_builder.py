"""Streaming tar/gzip archive builder with partial-failure tolerance.

Artifacts are fetched one at a time in listing order and appended to a
tar stream that is gzip-compressed on the fly into a spooled temporary
file (kept in memory, spilled to disk past ``spool_max_size``).

Failure policy
--------------
- ``ListingError`` from the source propagates; nothing is built.
- ``FetchError`` for a single artifact is logged, counted and skipped.
- Any failure writing the tar/gzip stream raises ``ArchiveFormatError``.

Entries carry a fixed mode and a zero mtime, and the gzip header carries a
zero mtime, so identical inputs produce byte-identical archives.
"""

from __future__ import annotations

import gzip
import io
import logging
import tarfile
import tempfile
from typing import Any, BinaryIO

from backuptool.core.errors import ArchiveFormatError, FetchError
from backuptool.core.hasher import sha256_stream
from backuptool.models.artifacts import ArchiveReport, Artifact
from backuptool.sources import ArtifactSource

logger = logging.getLogger(__name__)

DEFAULT_SPOOL_MAX_SIZE = 8 * 1024 * 1024
DEFAULT_ENTRY_MODE = 0o644


class BuiltArchive:
    """A finished archive: a readable stream plus its build report.

    The stream is positioned at offset 0.  Use as a context manager, or call
    ``close()``, to release the underlying spool file.
    """

    def __init__(self, stream: BinaryIO, report: ArchiveReport) -> None:
        self.stream = stream
        self.report = report

    def close(self) -> None:
        self.stream.close()

    def __enter__(self) -> BuiltArchive:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


class ArchiveBuilder:
    """Turns an artifact source into one gzip-compressed tar stream.

    Parameters
    ----------
    spool_max_size:
        Bytes of compressed output kept in memory before spilling to disk.
    entry_mode:
        Permission bits recorded on every tar entry.
    """

    def __init__(
        self,
        spool_max_size: int = DEFAULT_SPOOL_MAX_SIZE,
        entry_mode: int = DEFAULT_ENTRY_MODE,
    ) -> None:
        self._spool_max_size = spool_max_size
        self._entry_mode = entry_mode

    def build(self, source: ArtifactSource) -> BuiltArchive:
        """List, fetch and archive every artifact from *source*."""
        logger.info("archiving artifacts from %s", source.source_name)
        refs = source.list_artifacts()

        spool = tempfile.SpooledTemporaryFile(max_size=self._spool_max_size)
        failed: list[str] = []
        try:
            # tar closes (end-of-archive blocks) before gzip writes its trailer
            with gzip.GzipFile(fileobj=spool, mode="wb", mtime=0) as gz, \
                    tarfile.open(fileobj=gz, mode="w", format=tarfile.PAX_FORMAT) as tar:
                for ref in refs:
                    try:
                        content = source.fetch(ref)
                    except FetchError as exc:
                        logger.error(
                            "getting artifact %s: %s. Skipping...", ref.identifier, exc
                        )
                        failed.append(ref.identifier)
                        continue
                    self._add_entry(tar, Artifact(identifier=ref.identifier, content=content))
            sha256, size = sha256_stream(spool)
        except (OSError, tarfile.TarError) as exc:
            spool.close()
            raise ArchiveFormatError(f"writing tar.gz archive: {exc}") from exc
        except BaseException:
            spool.close()
            raise

        report = ArchiveReport(
            total=len(refs),
            archived=len(refs) - len(failed),
            failed=len(failed),
            failed_identifiers=failed,
            size_bytes=size,
            sha256=sha256,
        )
        logger.info(
            "successfully archived %d of %d artifacts (%d failed)",
            report.archived,
            report.total,
            report.failed,
        )
        return BuiltArchive(spool, report)

    def _add_entry(self, tar: tarfile.TarFile, artifact: Artifact) -> None:
        info = tarfile.TarInfo(name=artifact.entry_name)
        info.mode = self._entry_mode
        info.size = artifact.size_bytes
        info.mtime = 0
        tar.addfile(info, io.BytesIO(artifact.content))
        logger.debug("added %s (%d bytes)", artifact.entry_name, artifact.size_bytes)
