import json
import logging
from unittest.mock import MagicMock

import pytest
from azure.core.exceptions import HttpResponseError, ResourceNotFoundError

from softadmin.config import Settings
from softadmin.errors import BlobStoreError
from softadmin.models.registry import RegistryDocument
from softadmin.models.software import SoftwareEntry
from softadmin.storage import build_blob_store, build_registry_store
from softadmin.storage.azure_blob import AzureBlobStore
from softadmin.storage.local import JsonFileRegistryStore, LocalBlobStore
from softadmin.storage.redis_kv import RedisRegistryStore


# --- Registry document stores ---


def test_missing_document_loads_default(registry_store):
    document = registry_store.load()
    assert [u.username for u in document.users] == ["admin"]
    assert document.users[0].role == "admin"
    assert document.softwares == []


def test_save_then_load(registry_store):
    document = RegistryDocument.default()
    document.softwares.append(
        SoftwareEntry(id=1, name="Tool", version="1.0", create_time="2024/01/01 10:00:00")
    )
    registry_store.save(document)

    loaded = registry_store.load()
    assert loaded.softwares[0].create_time == "2024/01/01 10:00:00"
    assert loaded.softwares[0].enabled is False


def test_malformed_document_falls_back_to_default(tmp_path, caplog):
    path = tmp_path / "db.json"
    path.write_text("{not json")
    store = JsonFileRegistryStore(path)

    with caplog.at_level(logging.WARNING):
        document = store.load()

    assert [u.username for u in document.users] == ["admin"]
    assert "unreadable" in caplog.text


def test_blank_document_falls_back_to_default(tmp_path):
    path = tmp_path / "db.json"
    path.write_text("   \n")
    assert JsonFileRegistryStore(path).load().users[0].username == "admin"


def test_invalid_shape_falls_back_to_default(fake_redis):
    client = fake_redis
    client.data["db"] = json.dumps({"users": "nope"})
    assert RedisRegistryStore(client).load().users[0].username == "admin"


def test_file_store_initialize_writes_default(tmp_path):
    path = tmp_path / "data" / "db.json"
    JsonFileRegistryStore(path).initialize()
    stored = json.loads(path.read_text())
    assert stored == {
        "users": [{"username": "admin", "password": "123456", "role": "admin"}],
        "softwares": [],
    }


def test_file_store_initialize_keeps_existing(tmp_path):
    path = tmp_path / "db.json"
    path.write_text(json.dumps({"users": [], "softwares": []}))
    JsonFileRegistryStore(path).initialize()
    assert json.loads(path.read_text())["users"] == []


def test_file_store_reads_documents_without_optional_fields(tmp_path):
    path = tmp_path / "db.json"
    path.write_text(
        json.dumps(
            {
                "users": [{"username": "old", "password": "pw"}],
                "softwares": [{"id": 7, "name": "Legacy", "version": "0.1"}],
            }
        )
    )
    document = JsonFileRegistryStore(path).load()
    assert document.users[0].role == "user"
    assert document.softwares[0].desc == ""
    assert document.softwares[0].enabled is False


def test_file_store_coerces_loose_enabled_flags(tmp_path):
    path = tmp_path / "db.json"
    softwares = [
        {"id": 1, "name": "Null", "version": "1", "enabled": None},
        {"id": 2, "name": "Zero", "version": "1", "enabled": 0},
        {"id": 3, "name": "Text", "version": "1", "enabled": "x"},
        {"id": 4, "name": "Plain", "version": "1", "enabled": True},
    ]
    path.write_text(json.dumps({"users": [{"username": "kept", "password": "pw"}], "softwares": softwares}))

    document = JsonFileRegistryStore(path).load()
    assert document.users[0].username == "kept"
    assert [s.enabled for s in document.softwares] == [False, False, True, True]


def test_redis_store_uses_single_key(fake_redis):
    client = fake_redis
    store = RedisRegistryStore(client, key="registry")
    store.initialize()
    assert client.data == {}

    store.save(RegistryDocument.default())
    assert list(client.data) == ["registry"]
    assert json.loads(client.data["registry"])["users"][0]["username"] == "admin"


def test_redis_store_decodes_bytes():
    client = MagicMock()
    client.get.return_value = json.dumps({"users": [], "softwares": []}).encode()
    assert RedisRegistryStore(client).load().users == []
    client.get.assert_called_once_with("db")


# --- Blob stores ---


def test_local_blob_store(tmp_path):
    store = LocalBlobStore(tmp_path / "uploads")
    store.initialize()
    assert store.put("1.zip", b"data") == "/uploads/1.zip"
    assert store.get("1.zip") == b"data"

    store.delete("1.zip")
    assert store.get("1.zip") is None
    store.delete("1.zip")


def test_local_blob_store_confines_names(tmp_path):
    store = LocalBlobStore(tmp_path / "uploads")
    store.initialize()
    (tmp_path / "secret.txt").write_text("x")

    assert store.get("../secret.txt") is None
    with pytest.raises(BlobStoreError):
        store.put("../evil.bin", b"x")
    store.delete("../secret.txt")
    assert (tmp_path / "secret.txt").exists()


def test_azure_blob_store_put_and_get():
    container = MagicMock()
    container.download_blob.return_value.readall.return_value = b"payload"
    store = AzureBlobStore(container)

    assert store.put("1.zip", b"payload") == "/uploads/1.zip"
    container.upload_blob.assert_called_once_with("1.zip", b"payload", overwrite=True)
    assert store.get("1.zip") == b"payload"


def test_azure_blob_store_missing_blob():
    container = MagicMock()
    container.download_blob.side_effect = ResourceNotFoundError("missing")
    container.delete_blob.side_effect = ResourceNotFoundError("missing")
    store = AzureBlobStore(container)

    assert store.get("gone.zip") is None
    store.delete("gone.zip")


def test_azure_blob_store_surfaces_failures():
    container = MagicMock()
    container.delete_blob.side_effect = HttpResponseError("boom")
    container.upload_blob.side_effect = HttpResponseError("boom")
    store = AzureBlobStore(container)

    with pytest.raises(BlobStoreError):
        store.delete("1.zip")
    with pytest.raises(BlobStoreError):
        store.put("1.zip", b"x")


def test_azure_blob_store_requires_connection_string():
    with pytest.raises(BlobStoreError):
        AzureBlobStore.from_connection_string("", "uploads")


# --- Backend selection ---


def test_build_local_backends(tmp_path):
    settings = Settings(db_file=str(tmp_path / "db.json"), upload_dir=str(tmp_path / "up"))
    assert isinstance(build_registry_store(settings), JsonFileRegistryStore)
    assert isinstance(build_blob_store(settings), LocalBlobStore)


def test_build_redis_backend():
    store = build_registry_store(
        Settings(registry_backend="redis", redis_url="redis://cache:6380/2", redis_key="reg")
    )
    assert isinstance(store, RedisRegistryStore)
    assert store.key == "reg"


def test_build_unknown_backend():
    with pytest.raises(ValueError):
        build_registry_store(Settings(registry_backend="sqlite"))
    with pytest.raises(ValueError):
        build_blob_store(Settings(blob_backend="s3"))
