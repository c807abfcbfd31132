"""Minimal Grafana HTTP API client.

Endpoints used
--------------
- ``GET /api/health`` — availability probe (unauthenticated)
- ``GET /api/search?type=dash-db`` — list every dashboard
- ``GET /api/dashboards/uid/{uid}`` — raw JSON of one dashboard

Authenticated calls carry ``Authorization: Bearer <token>``.  Any response
with a status code of 400 or above is treated as a failure.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


class GrafanaAPIError(RuntimeError):
    """Raised when a Grafana API call fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class SearchResult(BaseModel):
    """One hit from a dashboard search.

    Example JSON representation::

        {"id": 8, "uid": "sd", "title": "Some dashboard",
         "uri": "db/some-dashboard", "url": "/d/sd/some-dashboard",
         "type": "dash-db", "tags": [], "isStarred": false}
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    uid: str
    title: str = ""
    uri: str = ""
    url: str = ""


_SEARCH_RESULTS = TypeAdapter(list[SearchResult])


class GrafanaClient:
    """Synchronous client for a Grafana server's API.

    Parameters
    ----------
    address:
        Base URL of the Grafana server, e.g. ``https://grafana.example.com``.
    token:
        Grafana API key with read permissions.
    timeout:
        Per-call timeout in seconds.
    http_client:
        Optional pre-built ``httpx.Client``; the caller keeps ownership of
        its transport but ``close()`` still closes it.
    """

    def __init__(
        self,
        address: str,
        token: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.address = address.rstrip("/")
        self._token = token
        self._http = http_client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> GrafanaClient:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # API calls
    # ------------------------------------------------------------------

    def ping(self) -> None:
        """Verify that the server is available.

        Does not verify that the token is functional.
        """
        logger.debug("testing connection to Grafana at %s", self.address)
        uri = f"{self.address}/api/health"
        try:
            response = self._http.get(uri)
        except httpx.HTTPError as exc:
            raise GrafanaAPIError(f"calling {uri}: {exc}") from exc
        if response.is_error:
            raise GrafanaAPIError(
                f"calling {uri} got status: {response.status_code}",
                status_code=response.status_code,
            )

    def search_dashboards(self) -> list[SearchResult]:
        """Search for every dashboard stored in Grafana's database."""
        logger.debug("searching dashboards")
        response = self._get_with_auth("/api/search", params={"type": "dash-db"})
        try:
            return _SEARCH_RESULTS.validate_json(response.content)
        except ValidationError as exc:
            raise GrafanaAPIError(f"decoding search response: {exc}") from exc

    def get_dashboard(self, uid: str) -> bytes:
        """Return the raw JSON bytes of the dashboard identified by *uid*."""
        logger.debug("getting dashboard with uid %s", uid)
        return self._get_with_auth(f"/api/dashboards/uid/{uid}").content

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_with_auth(
        self, path: str, params: dict[str, str] | None = None
    ) -> httpx.Response:
        uri = f"{self.address}{path}"
        headers = {"Authorization": f"Bearer {self._token}"}
        try:
            response = self._http.get(uri, params=params, headers=headers)
        except httpx.HTTPError as exc:
            raise GrafanaAPIError(f"requesting {uri}: {exc}") from exc
        if response.is_error:
            raise GrafanaAPIError(
                f"requesting {uri}: got status code {response.status_code}",
                status_code=response.status_code,
            )
        return response
