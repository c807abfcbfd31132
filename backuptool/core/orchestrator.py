"""Backup run orchestrator — drives Source → Archive Builder → Sink.

A run is a strictly linear sequence of steps:

    configure → init_source → init_sink → build_archive
              → compute_destination → write_to_sink → done

Any fatal error moves the run to ``failed`` and propagates to the caller.
There is no checkpoint or resume between steps and nothing is retried.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict

from backuptool.core.archive_builder import ArchiveBuilder
from backuptool.models.artifacts import ArchiveReport
from backuptool.models.destination import DestinationPath, archive_filename
from backuptool.sources import ArtifactSource
from backuptool.storage import StorageSink

logger = logging.getLogger(__name__)


class RunStep(str, Enum):
    """Position of a run in its linear lifecycle."""

    CONFIGURE = "configure"
    INIT_SOURCE = "init_source"
    INIT_SINK = "init_sink"
    BUILD_ARCHIVE = "build_archive"
    COMPUTE_DESTINATION = "compute_destination"
    WRITE_TO_SINK = "write_to_sink"
    DONE = "done"
    FAILED = "failed"


class RunResult(BaseModel):
    """Outcome of a completed run."""

    model_config = ConfigDict(frozen=True)

    source_name: str
    sink_name: str
    destination: str
    report: ArchiveReport
    started_at: datetime
    finished_at: datetime


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BackupRun:
    """One backup run over a configured source and sink.

    Parameters
    ----------
    source:
        Where artifacts come from.
    sink:
        Where the archive is written.
    prefix:
        Optional leading path segment for the destination.
    builder:
        Archive builder.  Uses defaults if not provided.
    clock:
        Returns the current time.  Defaults to UTC wall-clock time.
    """

    def __init__(
        self,
        source: ArtifactSource,
        sink: StorageSink,
        *,
        prefix: str = "",
        builder: ArchiveBuilder | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.source = source
        self.sink = sink
        self.prefix = prefix
        self.builder = builder or ArchiveBuilder()
        self._clock = clock or _utc_now
        self.step = RunStep.CONFIGURE
        self.destination: DestinationPath | None = None

    def _enter(self, step: RunStep) -> None:
        self.step = step
        logger.debug("run step: %s", step.value)

    def run(self) -> RunResult:
        """Execute every step in order and return the result.

        Raises whatever ``BackupError`` the failing step raised.
        """
        started_at = self._clock()
        try:
            self._enter(RunStep.INIT_SOURCE)
            self.source.init()

            self._enter(RunStep.INIT_SINK)
            self.sink.init()

            self._enter(RunStep.BUILD_ARCHIVE)
            with self.builder.build(self.source) as archive:
                self._enter(RunStep.COMPUTE_DESTINATION)
                now = self._clock()
                self.destination = DestinationPath.for_time(
                    now,
                    archive_filename(self.source.archive_name, now),
                    prefix=self.prefix,
                )

                self._enter(RunStep.WRITE_TO_SINK)
                logger.info(
                    "writing archive to %s storage as %s",
                    self.sink.sink_name,
                    self.destination,
                )
                self.sink.write(archive.stream, str(self.destination))
                report = archive.report
        except Exception as exc:
            failed_step = self.step
            self.step = RunStep.FAILED
            logger.error("backup failed during %s: %s", failed_step.value, exc)
            raise

        self._enter(RunStep.DONE)
        logger.info("done")
        return RunResult(
            source_name=self.source.source_name,
            sink_name=self.sink.sink_name,
            destination=str(self.destination),
            report=report,
            started_at=started_at,
            finished_at=self._clock(),
        )
