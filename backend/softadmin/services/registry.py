import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import PurePath

from softadmin.auth import home_page
from softadmin.errors import BlobStoreError, DuplicateUser, InvalidCredentials, MissingField, MissingKeyword, NotFound
from softadmin.models.registry import RegistryDocument
from softadmin.models.session import Identity
from softadmin.models.software import SoftwareEntry
from softadmin.models.user import USER, User
from softadmin.services.permissions import (
    PublicPermission,
    SoftwarePermission,
    match_entries,
    resolve,
    resolve_public,
)
from softadmin.sessions import SessionStore, now_millis
from softadmin.storage.base import BlobStore, RegistryStore

logger = logging.getLogger(__name__)

CREATE_TIME_FORMAT = "%Y/%m/%d %H:%M:%S"


@dataclass
class LoginResult:
    token: str
    identity: Identity
    redirect: str


@dataclass
class SoftwarePage:
    total: int
    items: list[SoftwareEntry]


@dataclass
class Upload:
    filename: str
    data: bytes


def _next_id(document: RegistryDocument) -> int:
    newest = max((s.id for s in document.softwares), default=0)
    return max(now_millis(), newest + 1)


class RegistryService:
    """User accounts, software entries and permission lookups.

    Every operation reads the whole registry document from the store, and
    every mutation writes the whole document back. Role checks happen
    before these methods are called.
    """

    def __init__(self, store: RegistryStore, blobs: BlobStore, sessions: SessionStore):
        self.store = store
        self.blobs = blobs
        self.sessions = sessions

    # --- Accounts ---

    def login(self, username: str | None, password: str | None) -> LoginResult:
        document = self.store.load()
        user = next(
            (u for u in document.users if u.username == username and u.password == password),
            None,
        )
        if user is None:
            logger.info(f"Rejected login for {username!r}")
            raise InvalidCredentials()
        token, identity = self.sessions.create(user)
        logger.info(f"User {user.username} logged in as {user.role}")
        return LoginResult(token=token, identity=identity, redirect=home_page(user.role))

    def register(self, username: str | None, password: str | None) -> User:
        if not username or not password:
            raise MissingField("username and password are required")
        document = self.store.load()
        if document.find_user(username) is not None:
            raise DuplicateUser(username)
        user = User(username=username, password=password, role=USER)
        document.users.append(user)
        self.store.save(document)
        logger.info(f"Registered user {username}")
        return user

    def logout(self, token: str | None) -> None:
        self.sessions.revoke(token)

    # --- Software entries ---

    def list_software(self, page: int = 1, limit: int = 10, keyword: str = "") -> SoftwarePage:
        entries = self.store.load().softwares
        if keyword:
            entries = [s for s in entries if keyword in s.name or keyword in s.desc]
        start = (max(page, 1) - 1) * max(limit, 0)
        return SoftwarePage(total=len(entries), items=entries[start : start + max(limit, 0)])

    def add_software(
        self,
        name: str | None,
        version: str | None,
        author: str | None = "",
        desc: str | None = "",
        upload: Upload | None = None,
    ) -> SoftwareEntry:
        if not name or not version:
            raise MissingField("name and version are required")
        document = self.store.load()
        software_id = _next_id(document)

        filename = filepath = ""
        if upload is not None:
            filename = f"{software_id}{PurePath(upload.filename).suffix}"
            filepath = self.blobs.put(filename, upload.data)

        entry = SoftwareEntry(
            id=software_id,
            name=name,
            version=version,
            author=author or "",
            desc=desc or "",
            filename=filename,
            filepath=filepath,
            create_time=datetime.now().strftime(CREATE_TIME_FORMAT),
            enabled=False,
        )
        # Newest first; listings rely on this order.
        document.softwares.insert(0, entry)
        try:
            self.store.save(document)
        except Exception:
            if filename:
                try:
                    self.blobs.delete(filename)
                except BlobStoreError:
                    logger.warning(f"Left orphaned upload {filename} after failed save")
            raise
        logger.info(f"Added software {entry.id} ({name} {version})")
        return entry

    def delete_software(self, software_id: int) -> None:
        document = self.store.load()
        entry = document.find_software(software_id)
        if entry is None:
            return
        if entry.filename:
            self.blobs.delete(entry.filename)
        document.softwares = [s for s in document.softwares if s.id != software_id]
        self.store.save(document)
        logger.info(f"Deleted software {software_id}")

    def toggle_software(self, software_id: int, enabled: bool) -> SoftwareEntry:
        document = self.store.load()
        entry = document.find_software(software_id)
        if entry is None:
            raise NotFound(software_id)
        entry.enabled = enabled
        self.store.save(document)
        logger.info(f"Software {software_id} {'enabled' if enabled else 'disabled'}")
        return entry

    def get_status(self, software_id: int) -> SoftwareEntry:
        entry = self.store.load().find_software(software_id)
        if entry is None:
            raise NotFound(software_id)
        return entry

    # --- Permission queries ---

    def query_by_user(self, keyword: str | None) -> list[SoftwarePermission]:
        if not keyword:
            raise MissingKeyword()
        return [resolve(s) for s in match_entries(self.store.load().softwares, keyword)]

    def query_public(self, software_id: int) -> PublicPermission:
        return resolve_public(self.store.load().find_software(software_id))
