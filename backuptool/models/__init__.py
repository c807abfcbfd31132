"""backup-tool data models — all Pydantic v2, all frozen (immutable)."""

from backuptool.models.artifacts import ArchiveReport, Artifact, ArtifactRef
from backuptool.models.config import DataSourceType, RunOptions, StorageType
from backuptool.models.destination import DestinationPath, archive_filename

__all__ = [
    # artifacts
    "Artifact",
    "ArtifactRef",
    "ArchiveReport",
    # destination
    "DestinationPath",
    "archive_filename",
    # config
    "DataSourceType",
    "StorageType",
    "RunOptions",
]
