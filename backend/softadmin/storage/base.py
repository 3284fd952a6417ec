"""Persistence and blob store ports.

The registry is persisted as one whole document: every mutation loads it,
changes it in memory and saves it back. Adapters only move text and bytes.
"""

import json
import logging
from abc import ABC, abstractmethod

from pydantic import ValidationError

from softadmin.errors import PersistenceFailure
from softadmin.models.registry import RegistryDocument

logger = logging.getLogger(__name__)

UPLOADS_PREFIX = "/uploads/"


def decode_document(text: str) -> RegistryDocument:
    try:
        return RegistryDocument.model_validate(json.loads(text))
    except (ValueError, ValidationError) as exc:
        raise PersistenceFailure(str(exc)) from exc


class RegistryStore(ABC):
    """Whole-document persistence for the registry."""

    @abstractmethod
    def _read(self) -> str | None:
        """Return the stored text, or None when nothing is stored yet."""

    @abstractmethod
    def _write(self, text: str) -> None: ...

    def _encode(self, document: RegistryDocument) -> str:
        return json.dumps(document.to_wire(), ensure_ascii=False)

    def initialize(self) -> None:
        """Prepare backing storage at process start."""

    def load(self) -> RegistryDocument:
        try:
            text = self._read()
            if text is None or not text.strip():
                return RegistryDocument.default()
            return decode_document(text)
        except PersistenceFailure as exc:
            logger.warning(f"Registry document unreadable, using default: {exc}")
            return RegistryDocument.default()

    def save(self, document: RegistryDocument) -> None:
        self._write(self._encode(document))


class BlobStore(ABC):
    """Storage for uploaded software binaries, addressed by generated name."""

    @abstractmethod
    def put(self, name: str, data: bytes) -> str:
        """Store ``data`` under ``name`` and return its public path."""

    @abstractmethod
    def get(self, name: str) -> bytes | None: ...

    @abstractmethod
    def delete(self, name: str) -> None:
        """Remove ``name``. Removing a missing blob is not an error."""

    def initialize(self) -> None:
        """Prepare backing storage at process start."""

    @staticmethod
    def public_path(name: str) -> str:
        return f"{UPLOADS_PREFIX}{name}"
