import json
import logging
import os
import tempfile
from pathlib import Path

from softadmin.errors import BlobStoreError, PersistenceFailure
from softadmin.models.registry import RegistryDocument
from softadmin.storage.base import BlobStore, RegistryStore

logger = logging.getLogger(__name__)


class JsonFileRegistryStore(RegistryStore):
    """Registry document kept in a pretty-printed JSON file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def initialize(self) -> None:
        if not self.path.exists():
            self.save(RegistryDocument.default())
            logger.info(f"Created registry document at {self.path}")

    def _read(self) -> str | None:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise PersistenceFailure(str(exc)) from exc

    def _encode(self, document: RegistryDocument) -> str:
        return json.dumps(document.to_wire(), ensure_ascii=False, indent=2)

    def _write(self, text: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Readers never observe a half-written document.
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".db-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise


class LocalBlobStore(BlobStore):
    """Uploaded files kept flat in one directory."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def initialize(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, name: str) -> Path | None:
        if not name or Path(name).name != name or name in (".", ".."):
            return None
        return self.directory / name

    def put(self, name: str, data: bytes) -> str:
        path = self._path(name)
        if path is None:
            raise BlobStoreError(f"invalid upload name: {name}")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            logger.error(f"Failed to store upload {name}: {exc}")
            raise BlobStoreError("failed to store uploaded file") from exc
        return self.public_path(name)

    def get(self, name: str) -> bytes | None:
        path = self._path(name)
        if path is None or not path.is_file():
            return None
        return path.read_bytes()

    def delete(self, name: str) -> None:
        path = self._path(name)
        if path is None:
            return
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.error(f"Failed to delete upload {name}: {exc}")
            raise BlobStoreError("failed to delete uploaded file") from exc
