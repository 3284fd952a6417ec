"""Azure Blob storage adapter for uploaded files."""

import logging

from azure.core.exceptions import HttpResponseError, ResourceNotFoundError
from azure.storage.blob import BlobServiceClient, ContainerClient

from softadmin.errors import BlobStoreError
from softadmin.storage.base import BlobStore

logger = logging.getLogger(__name__)


class AzureBlobStore(BlobStore):
    """Blob store backed by one Azure Blob Storage container."""

    def __init__(self, container_client: ContainerClient):
        self._container = container_client

    @classmethod
    def from_connection_string(cls, connection_string: str, container: str) -> "AzureBlobStore":
        if not connection_string:
            raise BlobStoreError("Azure Blob connection string is required")
        service = BlobServiceClient.from_connection_string(conn_str=connection_string)
        return cls(service.get_container_client(container))

    def put(self, name: str, data: bytes) -> str:
        try:
            self._container.upload_blob(name, data, overwrite=True)
        except HttpResponseError as exc:
            logger.error(f"Failed to upload blob {name}: {exc}")
            raise BlobStoreError("failed to store uploaded file") from exc
        return self.public_path(name)

    def get(self, name: str) -> bytes | None:
        try:
            return self._container.download_blob(name).readall()
        except ResourceNotFoundError:
            return None
        except HttpResponseError as exc:
            logger.error(f"Failed to download blob {name}: {exc}")
            raise BlobStoreError("failed to read uploaded file") from exc

    def delete(self, name: str) -> None:
        try:
            self._container.delete_blob(name)
        except ResourceNotFoundError:
            return
        except HttpResponseError as exc:
            logger.error(f"Failed to delete blob {name}: {exc}")
            raise BlobStoreError("failed to delete uploaded file") from exc
