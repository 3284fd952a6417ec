import pytest
from fastapi.testclient import TestClient

from softadmin.config import Settings
from softadmin.main import create_app
from softadmin.storage.local import JsonFileRegistryStore, LocalBlobStore
from softadmin.storage.redis_kv import RedisRegistryStore


class FakeRedis:
    """The two string commands the registry store uses."""

    def __init__(self):
        self.data: dict[str, str] = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value
        return True


def _cookie(token: str) -> dict:
    return {"Cookie": f"sessionId={token}"}


@pytest.fixture
def auth():
    """Build request headers carrying a session cookie."""
    return _cookie


@pytest.fixture(name="settings")
def settings_fixture(tmp_path) -> Settings:
    return Settings(
        db_file=str(tmp_path / "db.json"),
        upload_dir=str(tmp_path / "uploads"),
        public_dir=str(tmp_path / "public"),
    )


@pytest.fixture(name="client")
def client_fixture(settings: Settings):
    app = create_app(settings)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture(params=["file", "redis"])
def registry_store(request, tmp_path):
    """Each backend the registry document can live in."""
    if request.param == "file":
        return JsonFileRegistryStore(tmp_path / "db.json")
    return RedisRegistryStore(FakeRedis(), key="db")


@pytest.fixture
def blob_store(tmp_path) -> LocalBlobStore:
    store = LocalBlobStore(tmp_path / "uploads")
    store.initialize()
    return store


def _login(client: TestClient, username: str, password: str) -> str:
    response = client.post(
        "/api/login",
        json={"username": username, "password": password},
    )
    token = response.cookies["sessionId"]
    # Tests pass the cookie explicitly per request.
    client.cookies.clear()
    return token


@pytest.fixture
def admin_token(client: TestClient) -> str:
    return _login(client, "admin", "123456")


@pytest.fixture
def user_token(client: TestClient) -> str:
    client.post(
        "/api/register",
        json={"username": "testuser", "password": "testpass"},
    )
    return _login(client, "testuser", "testpass")


@pytest.fixture
def add_software(client: TestClient, admin_token: str):
    def _add(name: str = "Tool", version: str = "1.0", **fields) -> int:
        response = client.post(
            "/api/software",
            data={"name": name, "version": version, **fields},
            headers=_cookie(admin_token),
        )
        return response.json()["data"]["id"]

    return _add
