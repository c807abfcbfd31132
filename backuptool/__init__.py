"""backup-tool: scheduled backups of exportable artifacts into tar.gz archives.

Pulls artifacts (Grafana dashboards, local files) from a data source,
bundles them into one gzip-compressed tar stream and writes it to a
storage sink (local filesystem, Azure Blob Storage) under a
date-partitioned path.
"""

__version__ = "0.2.0"

from backuptool.core.archive_builder import ArchiveBuilder, BuiltArchive
from backuptool.core.orchestrator import BackupRun, RunResult

__all__ = ["ArchiveBuilder", "BuiltArchive", "BackupRun", "RunResult", "__version__"]
