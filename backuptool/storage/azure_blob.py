"""Azure Blob Storage sink — uploads each archive as a new block blob.

The target container must already exist; ``init()`` verifies this and
fails fast otherwise.  Blob names are the destination paths, so the
date-partitioned hierarchy is implied by the ``/`` separators.
"""

from __future__ import annotations

import contextlib
import logging
from typing import Any, BinaryIO

from azure.core.credentials import AzureNamedKeyCredential
from azure.core.exceptions import AzureError, ResourceExistsError
from azure.storage.blob import ContainerClient

from backuptool.config import AzureStorageSettings
from backuptool.core.errors import (
    ConfigurationError,
    ConnectivityError,
    SinkWriteError,
    WriteConflictError,
)

logger = logging.getLogger(__name__)


class AzureBlobSink:
    """Writes archives to a blob container.

    Parameters
    ----------
    container:
        A ``ContainerClient`` for the target container.
    """

    def __init__(self, container: ContainerClient) -> None:
        self._container = container
        self._verified = False

    @classmethod
    def from_settings(cls, settings: AzureStorageSettings) -> AzureBlobSink:
        """Build the sink from ``AZURE_STORAGE_*`` settings.

        No network calls are made until ``init()``.
        """
        credential = AzureNamedKeyCredential(
            settings.account, settings.key.get_secret_value()
        )
        try:
            container = ContainerClient(
                account_url=settings.account_url,
                container_name=settings.container,
                credential=credential,
            )
        except ValueError as exc:
            raise ConfigurationError(f"configuring azure storage client: {exc}") from exc
        return cls(container)

    @property
    def sink_name(self) -> str:
        return "azure"

    @property
    def container_name(self) -> str:
        return self._container.container_name

    def init(self) -> None:
        """Verify the container exists and is reachable."""
        name = self.container_name
        logger.debug("connecting to container %s", name)
        try:
            exists = self._container.exists()
        except AzureError as exc:
            raise ConnectivityError(f"looking up container {name}: {exc}") from exc
        if not exists:
            raise ConnectivityError(f"container {name} not found")
        self._verified = True

    def write(self, stream: BinaryIO, destination: str) -> None:
        if not self._verified:
            raise SinkWriteError("azure sink used before init()")

        blob = self._container.get_blob_client(destination)

        logger.debug("preparing to write to new blob %s", destination)
        try:
            exists = blob.exists()
        except AzureError as exc:
            raise SinkWriteError(f"looking up blob {destination}: {exc}") from exc
        if exists:
            raise WriteConflictError(destination, f"blob {destination} already exists")

        logger.debug("writing to new blob %s", destination)
        try:
            blob.upload_blob(stream, overwrite=False)
        except ResourceExistsError as exc:
            # Created by someone else between the check and the upload
            raise WriteConflictError(destination, f"blob {destination} already exists") from exc
        except AzureError as exc:
            with contextlib.suppress(AzureError):
                blob.delete_blob()
            raise SinkWriteError(f"writing to blob {destination}: {exc}") from exc

        logger.debug("successfully wrote to new blob %s", destination)

    def close(self) -> None:
        """Close the container client and its HTTP pipeline."""
        self._container.close()

    def __enter__(self) -> AzureBlobSink:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
