"""Environment-driven configuration.

Centralized settings using pydantic-settings.  Each data source and storage
backend has its own settings class so that only the variables for the
selected variants are required.  All classes read from a ``.env`` file in
the working directory as well as the process environment.

Examples
--------
Back up Grafana dashboards to Azure Blob Storage::

    export GRAFANA_URL=https://grafana.example.com
    export GRAFANA_TOKEN=glsa_xxx
    export AZURE_STORAGE_ACCOUNT=backups
    export AZURE_STORAGE_CONTAINER=grafana
    export AZURE_STORAGE_KEY=...
    backup-tool --storage.type azure --datasource grafana
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, TypeVar

from pydantic import SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from backuptool.core.errors import ConfigurationError

SettingsT = TypeVar("SettingsT", bound=BaseSettings)


class BackupSettings(BaseSettings):
    """General runtime settings (``BACKUP_*``)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BACKUP_",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    log_level: str = "INFO"

    # Root directory the local sink writes below
    local_root: Path = Path(".")

    # Per-call HTTP timeout in seconds
    http_timeout: float = 5.0

    # Default destination prefix; the CLI flag takes precedence
    output_prefix: str = ""


class GrafanaSettings(BaseSettings):
    """Grafana connection settings (``GRAFANA_URL``, ``GRAFANA_TOKEN``)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="GRAFANA_",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    url: str
    token: SecretStr  # API key with read permissions

    @field_validator("url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value:
            raise ValueError("must not be empty")
        return value


class AzureStorageSettings(BaseSettings):
    """Azure Blob Storage settings (``AZURE_STORAGE_*``)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="AZURE_STORAGE_",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    account: str
    container: str
    key: SecretStr
    endpoint: str | None = None  # e.g. an Azurite URL

    @property
    def account_url(self) -> str:
        """Blob service URL, honoring an explicit endpoint override."""
        if self.endpoint:
            return self.endpoint.rstrip("/")
        return f"https://{self.account}.blob.core.windows.net"


class FileSourceSettings(BaseSettings):
    """Local file source settings (``BACKUP_SOURCE_*``)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BACKUP_SOURCE_",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    root: Path
    pattern: str = "*"


def load_settings(cls: type[SettingsT], **overrides: Any) -> SettingsT:
    """Instantiate a settings class, converting validation failures.

    Raises
    ------
    ConfigurationError
        Naming every missing or invalid environment variable.
    """
    try:
        return cls(**overrides)
    except ValidationError as exc:
        prefix = cls.model_config.get("env_prefix", "")
        problems = [
            f"{prefix}{'.'.join(str(p) for p in err['loc'])}".upper() + f": {err['msg']}"
            for err in exc.errors()
        ]
        raise ConfigurationError(
            f"invalid {cls.__name__} configuration: " + "; ".join(problems)
        ) from exc
