"""Run selection models — which source and sink a run uses."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class StorageType(str, Enum):
    """Closed set of storage sinks."""

    LOCAL = "local"
    AZURE = "azure"


class DataSourceType(str, Enum):
    """Closed set of artifact sources."""

    FILE = "file"
    GRAFANA = "grafana"


class RunOptions(BaseModel):
    """Operator selections for one run, taken from the command line."""

    model_config = ConfigDict(frozen=True)

    storage_type: StorageType
    datasource: DataSourceType
    output_prefix: str = ""
