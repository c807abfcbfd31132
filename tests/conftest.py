"""Shared test fixtures for backup-tool."""

from __future__ import annotations

import gzip
import io
import json
import tarfile
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from pathlib import Path

import httpx
import pytest

from backuptool.core.errors import ConnectivityError, FetchError
from backuptool.models.artifacts import ArtifactRef
from backuptool.sources.grafana import GrafanaSource
from backuptool.sources.grafana_api import GrafanaClient
from backuptool.storage.local_file import LocalFileSink

GRAFANA_URL = "http://grafana.test"
GRAFANA_TOKEN = "test-token"


# ---------------------------------------------------------------------------
# In-memory source
# ---------------------------------------------------------------------------


class FakeSource:
    """An artifact source backed by a dict, with scripted failures."""

    def __init__(
        self,
        artifacts: dict[str, bytes] | None = None,
        failing: Iterable[str] = (),
        *,
        reachable: bool = True,
    ) -> None:
        self.artifacts = dict(artifacts or {})
        self.failing = set(failing)
        self.reachable = reachable
        self.fetched: list[str] = []
        self.closed = False

    @property
    def source_name(self) -> str:
        return "fake"

    @property
    def archive_name(self) -> str:
        return "archive"

    def init(self) -> None:
        if not self.reachable:
            raise ConnectivityError("fake source unreachable")

    def list_artifacts(self) -> list[ArtifactRef]:
        return [ArtifactRef(identifier=name) for name in self.artifacts]

    def fetch(self, ref: ArtifactRef) -> bytes:
        self.fetched.append(ref.identifier)
        if ref.identifier in self.failing:
            raise FetchError(ref.identifier, f"simulated failure for {ref.identifier}")
        return self.artifacts[ref.identifier]

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def make_source() -> Callable[..., FakeSource]:
    """Factory fixture: build a FakeSource."""

    def _factory(
        artifacts: dict[str, bytes] | None = None,
        failing: Iterable[str] = (),
        **kwargs,
    ) -> FakeSource:
        return FakeSource(artifacts, failing, **kwargs)

    return _factory


# ---------------------------------------------------------------------------
# Archive helpers
# ---------------------------------------------------------------------------


def read_archive(data: bytes) -> dict[str, bytes]:
    """Decompress and untar archive bytes into {entry_name: content}."""
    entries: dict[str, bytes] = {}
    with gzip.GzipFile(fileobj=io.BytesIO(data)) as gz:
        with tarfile.open(fileobj=gz, mode="r:") as tar:
            for member in tar.getmembers():
                extracted = tar.extractfile(member)
                assert extracted is not None
                entries[member.name] = extracted.read()
    return entries


@pytest.fixture
def unpack() -> Callable[[bytes], dict[str, bytes]]:
    """Provide the archive reader: bytes -> {entry_name: content}."""
    return read_archive


@pytest.fixture
def fixed_now() -> datetime:
    """A deterministic run time: 2024-03-15 03:00 UTC."""
    return datetime(2024, 3, 15, 3, 0, tzinfo=timezone.utc)


@pytest.fixture
def local_sink(tmp_path: Path) -> LocalFileSink:
    """Provide a LocalFileSink rooted in a temp directory."""
    return LocalFileSink(tmp_path / "backups")


# ---------------------------------------------------------------------------
# Grafana over httpx.MockTransport
# ---------------------------------------------------------------------------


def dashboard_json(uid: str) -> bytes:
    return json.dumps(
        {"dashboard": {"uid": uid, "title": f"Dashboard {uid}"}, "meta": {}}
    ).encode("utf-8")


class FakeGrafana:
    """Routes Grafana API requests against an in-memory dashboard set."""

    dashboard = staticmethod(dashboard_json)

    def __init__(self, uids: list[str]) -> None:
        self.uids = list(uids)
        self.requests: list[httpx.Request] = []
        self.health_status = 200
        self.search_status = 200
        self.search_body: bytes | None = None
        self.broken_uids: set[str] = set()

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        authorized = request.headers.get("Authorization") == f"Bearer {GRAFANA_TOKEN}"

        if path == "/api/health":
            return httpx.Response(self.health_status, json={"database": "ok"})
        if not authorized:
            return httpx.Response(401, json={"message": "Unauthorized"})
        if path == "/api/search":
            if self.search_status >= 400:
                return httpx.Response(self.search_status)
            if self.search_body is not None:
                return httpx.Response(200, content=self.search_body)
            return httpx.Response(
                200,
                json=[
                    {
                        "id": i + 1,
                        "uid": uid,
                        "title": f"Dashboard {uid}",
                        "uri": f"db/{uid}",
                        "url": f"/d/{uid}/{uid}",
                        "type": "dash-db",
                        "tags": [],
                        "isStarred": False,
                    }
                    for i, uid in enumerate(self.uids)
                ],
            )
        prefix = "/api/dashboards/uid/"
        if path.startswith(prefix):
            uid = path[len(prefix):]
            if uid in self.broken_uids or uid not in self.uids:
                return httpx.Response(404, json={"message": "Dashboard not found"})
            return httpx.Response(200, content=dashboard_json(uid))
        return httpx.Response(404)

    def client(self, token: str = GRAFANA_TOKEN) -> GrafanaClient:
        http = httpx.Client(transport=httpx.MockTransport(self.handler))
        return GrafanaClient(GRAFANA_URL, token, http_client=http)

    def source(self, token: str = GRAFANA_TOKEN) -> GrafanaSource:
        return GrafanaSource(self.client(token))


@pytest.fixture
def fake_grafana() -> FakeGrafana:
    """Provide a FakeGrafana with three dashboards."""
    return FakeGrafana(["a", "b", "c"])
