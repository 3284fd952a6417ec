import logging

from softadmin.config import Settings
from softadmin.storage.base import BlobStore, RegistryStore

logger = logging.getLogger(__name__)


def build_registry_store(settings: Settings) -> RegistryStore:
    if settings.registry_backend == "redis":
        from softadmin.storage.redis_kv import RedisRegistryStore

        logger.info(f"Registry backend: redis key {settings.redis_key!r}")
        return RedisRegistryStore.from_url(settings.redis_url, key=settings.redis_key)
    if settings.registry_backend == "file":
        from softadmin.storage.local import JsonFileRegistryStore

        logger.info(f"Registry backend: file {settings.db_file}")
        return JsonFileRegistryStore(settings.db_file)
    raise ValueError(f"Unknown registry backend: {settings.registry_backend}")


def build_blob_store(settings: Settings) -> BlobStore:
    if settings.blob_backend == "azure":
        from softadmin.storage.azure_blob import AzureBlobStore

        logger.info(f"Blob backend: azure container {settings.azure_container!r}")
        return AzureBlobStore.from_connection_string(
            settings.azure_connection_string, settings.azure_container
        )
    if settings.blob_backend == "local":
        from softadmin.storage.local import LocalBlobStore

        logger.info(f"Blob backend: local directory {settings.upload_dir}")
        return LocalBlobStore(settings.upload_dir)
    raise ValueError(f"Unknown blob backend: {settings.blob_backend}")


__all__ = [
    "BlobStore",
    "RegistryStore",
    "build_blob_store",
    "build_registry_store",
]
