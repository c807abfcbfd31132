"""Unit tests for the storage sinks — LocalFileSink and AzureBlobSink.

The Azure SDK is replaced with ``MagicMock`` container and blob clients.
"""

from __future__ import annotations

import io
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from azure.core.exceptions import (
    HttpResponseError,
    ResourceExistsError,
    ServiceRequestError,
)

from backuptool.config import AzureStorageSettings
from backuptool.core.errors import (
    ConfigurationError,
    ConnectivityError,
    SinkWriteError,
    WriteConflictError,
)
from backuptool.storage import StorageSink
from backuptool.storage.azure_blob import AzureBlobSink
from backuptool.storage.local_file import LocalFileSink


class _BrokenStream(io.RawIOBase):
    """Yields some bytes, then fails like a dropped connection."""

    def __init__(self) -> None:
        self._sent = False

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        if not self._sent:
            self._sent = True
            buffer[:4] = b"part"
            return 4
        raise OSError("stream interrupted")


# ---------------------------------------------------------------------------
# LocalFileSink
# ---------------------------------------------------------------------------


class TestLocalFileSink:
    def test_satisfies_protocol(self, local_sink: LocalFileSink):
        assert isinstance(local_sink, StorageSink)
        assert local_sink.sink_name == "local"

    def test_write_creates_intermediate_directories(self, local_sink: LocalFileSink):
        local_sink.init()
        local_sink.write(io.BytesIO(b"archive"), "2024/3/15/archive.tgz")
        target = local_sink.root / "2024" / "3" / "15" / "archive.tgz"
        assert target.read_bytes() == b"archive"

    def test_second_write_to_same_path_conflicts(self, local_sink: LocalFileSink):
        local_sink.write(io.BytesIO(b"first"), "2024/3/15/archive.tgz")
        with pytest.raises(WriteConflictError) as exc_info:
            local_sink.write(io.BytesIO(b"second"), "2024/3/15/archive.tgz")
        assert exc_info.value.destination == "2024/3/15/archive.tgz"
        target = local_sink.root / "2024/3/15/archive.tgz"
        assert target.read_bytes() == b"first"

    def test_failed_copy_removes_partial_file(self, local_sink: LocalFileSink):
        with pytest.raises(SinkWriteError, match="stream interrupted"):
            local_sink.write(_BrokenStream(), "2024/3/15/archive.tgz")
        assert not (local_sink.root / "2024/3/15/archive.tgz").exists()

    def test_init_rejects_file_root(self, tmp_path: Path):
        root = tmp_path / "not-a-dir"
        root.write_text("x")
        with pytest.raises(ConfigurationError):
            LocalFileSink(root).init()

    def test_init_does_not_create_root(self, tmp_path: Path):
        sink = LocalFileSink(tmp_path / "later")
        sink.init()
        assert not (tmp_path / "later").exists()

    def test_default_root_is_working_directory(self):
        assert LocalFileSink().root == Path(".")


# ---------------------------------------------------------------------------
# AzureBlobSink
# ---------------------------------------------------------------------------


@pytest.fixture
def container() -> MagicMock:
    container = MagicMock()
    container.container_name = "backups"
    container.exists.return_value = True
    blob = MagicMock()
    blob.exists.return_value = False
    container.get_blob_client.return_value = blob
    return container


class TestAzureBlobSink:
    def test_satisfies_protocol(self, container: MagicMock):
        sink = AzureBlobSink(container)
        assert isinstance(sink, StorageSink)
        assert sink.sink_name == "azure"

    def test_init_missing_container(self, container: MagicMock):
        container.exists.return_value = False
        with pytest.raises(ConnectivityError, match="container backups not found"):
            AzureBlobSink(container).init()

    def test_init_unreachable_account(self, container: MagicMock):
        container.exists.side_effect = ServiceRequestError("name resolution failed")
        with pytest.raises(ConnectivityError, match="looking up container backups"):
            AzureBlobSink(container).init()

    def test_write_before_init_is_refused(self, container: MagicMock):
        with pytest.raises(SinkWriteError):
            AzureBlobSink(container).write(io.BytesIO(b"x"), "2024/3/15/a.tgz")
        container.get_blob_client.assert_not_called()

    def test_write_uploads_once_without_overwrite(self, container: MagicMock):
        sink = AzureBlobSink(container)
        sink.init()
        stream = io.BytesIO(b"archive")
        sink.write(stream, "2024/3/15/a.tgz")

        container.get_blob_client.assert_called_once_with("2024/3/15/a.tgz")
        blob = container.get_blob_client.return_value
        blob.upload_blob.assert_called_once_with(stream, overwrite=False)

    def test_existing_blob_conflicts_without_upload(self, container: MagicMock):
        blob = container.get_blob_client.return_value
        blob.exists.return_value = True
        sink = AzureBlobSink(container)
        sink.init()
        with pytest.raises(WriteConflictError):
            sink.write(io.BytesIO(b"x"), "2024/3/15/a.tgz")
        blob.upload_blob.assert_not_called()
        blob.delete_blob.assert_not_called()

    def test_race_on_upload_is_conflict_and_keeps_blob(self, container: MagicMock):
        blob = container.get_blob_client.return_value
        blob.upload_blob.side_effect = ResourceExistsError("BlobAlreadyExists")
        sink = AzureBlobSink(container)
        sink.init()
        with pytest.raises(WriteConflictError):
            sink.write(io.BytesIO(b"x"), "2024/3/15/a.tgz")
        blob.delete_blob.assert_not_called()

    def test_failed_upload_deletes_partial_blob(self, container: MagicMock):
        blob = container.get_blob_client.return_value
        blob.upload_blob.side_effect = HttpResponseError("server busy")
        sink = AzureBlobSink(container)
        sink.init()
        with pytest.raises(SinkWriteError, match="writing to blob"):
            sink.write(io.BytesIO(b"x"), "2024/3/15/a.tgz")
        blob.delete_blob.assert_called_once()

    def test_from_settings_builds_container_client(self):
        settings = AzureStorageSettings(
            account="acct", container="grafana", key="a2V5"
        )
        sink = AzureBlobSink.from_settings(settings)
        assert sink.container_name == "grafana"
        assert settings.account_url == "https://acct.blob.core.windows.net"


class TestSinkClose:
    """Sinks release their clients on close and as context managers."""

    def test_azure_close_closes_container_client(self, container: MagicMock):
        AzureBlobSink(container).close()
        container.close.assert_called_once_with()

    def test_azure_context_manager_closes_on_error(self, container: MagicMock):
        container.exists.return_value = False
        with pytest.raises(ConnectivityError):
            with AzureBlobSink(container) as sink:
                sink.init()
        container.close.assert_called_once_with()

    def test_local_close_is_repeatable(self, local_sink: LocalFileSink):
        with local_sink as sink:
            sink.write(io.BytesIO(b"x"), "a.tgz")
        local_sink.close()
        assert (local_sink.root / "a.tgz").read_bytes() == b"x"
