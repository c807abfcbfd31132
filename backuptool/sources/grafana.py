"""Grafana dashboard source — every dashboard becomes one artifact.

The dashboard UID is the artifact identifier, so archive entries are named
``<uid>.json`` and contain the exact bytes Grafana returned.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from backuptool.config import GrafanaSettings
from backuptool.core.errors import ConnectivityError, FetchError, ListingError
from backuptool.models.artifacts import ArtifactRef
from backuptool.sources.grafana_api import DEFAULT_TIMEOUT, GrafanaAPIError, GrafanaClient

logger = logging.getLogger(__name__)


class GrafanaSource:
    """Archives dashboards from a Grafana server.

    Parameters
    ----------
    client:
        The API client to read dashboards through.
    """

    def __init__(self, client: GrafanaClient) -> None:
        self._client = client

    @classmethod
    def from_settings(
        cls,
        settings: GrafanaSettings,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.Client | None = None,
    ) -> GrafanaSource:
        client = GrafanaClient(
            settings.url,
            settings.token.get_secret_value(),
            timeout=timeout,
            http_client=http_client,
        )
        return cls(client)

    @property
    def source_name(self) -> str:
        return "grafana"

    @property
    def archive_name(self) -> str:
        return "dashboards"

    def init(self) -> None:
        """Ping Grafana; an unreachable server aborts the run."""
        try:
            self._client.ping()
        except GrafanaAPIError as exc:
            raise ConnectivityError(f"pinging {self._client.address}: {exc}") from exc
        logger.info("connected to Grafana at %s", self._client.address)

    def list_artifacts(self) -> list[ArtifactRef]:
        try:
            results = self._client.search_dashboards()
            refs = [ArtifactRef(identifier=r.uid, title=r.title) for r in results]
        except (GrafanaAPIError, ValidationError) as exc:
            raise ListingError(f"searching dashboards: {exc}") from exc
        logger.debug("found %d dashboards", len(refs))
        return refs

    def fetch(self, ref: ArtifactRef) -> bytes:
        try:
            return self._client.get_dashboard(ref.identifier)
        except GrafanaAPIError as exc:
            raise FetchError(
                ref.identifier, f"getting dashboard {ref.identifier}: {exc}"
            ) from exc

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> GrafanaSource:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
