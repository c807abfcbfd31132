"""Source and sink selection from the closed set of variants.

Variant settings are loaded here, so a missing environment variable fails
with ``ConfigurationError`` before any network or disk I/O happens.
"""

from __future__ import annotations

from backuptool.config import (
    AzureStorageSettings,
    BackupSettings,
    FileSourceSettings,
    GrafanaSettings,
    load_settings,
)
from backuptool.models.config import DataSourceType, StorageType
from backuptool.sources import ArtifactSource
from backuptool.sources.grafana import GrafanaSource
from backuptool.sources.local_file import LocalFileSource
from backuptool.storage import StorageSink
from backuptool.storage.azure_blob import AzureBlobSink
from backuptool.storage.local_file import LocalFileSink


def build_source(kind: DataSourceType, settings: BackupSettings) -> ArtifactSource:
    """Construct the artifact source selected by *kind*."""
    if kind is DataSourceType.GRAFANA:
        return GrafanaSource.from_settings(
            load_settings(GrafanaSettings), timeout=settings.http_timeout
        )
    if kind is DataSourceType.FILE:
        return LocalFileSource.from_settings(load_settings(FileSourceSettings))
    raise ValueError(f"unknown data source: {kind!r}")


def build_sink(kind: StorageType, settings: BackupSettings) -> StorageSink:
    """Construct the storage sink selected by *kind*."""
    if kind is StorageType.LOCAL:
        return LocalFileSink(settings.local_root)
    if kind is StorageType.AZURE:
        return AzureBlobSink.from_settings(load_settings(AzureStorageSettings))
    raise ValueError(f"unknown storage type: {kind!r}")
