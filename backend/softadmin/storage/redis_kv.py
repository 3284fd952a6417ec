import redis

from softadmin.storage.base import RegistryStore


class RedisRegistryStore(RegistryStore):
    """Registry document kept as one JSON string under a single Redis key.

    Nothing is written until the first mutation; until then readers get
    the default document.
    """

    def __init__(self, client: redis.Redis, key: str = "db"):
        self.client = client
        self.key = key

    @classmethod
    def from_url(cls, url: str, key: str = "db") -> "RedisRegistryStore":
        return cls(redis.Redis.from_url(url, decode_responses=True), key=key)

    def _read(self) -> str | None:
        value = self.client.get(self.key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def _write(self, text: str) -> None:
        self.client.set(self.key, text)
