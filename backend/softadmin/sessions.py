"""Process-local session store.

Sessions live only in this process: a restart or another worker process
does not see them. There is no expiry sweep; a session lasts until it is
revoked or the process stops.
"""

import secrets
import time

from softadmin.models.session import Identity
from softadmin.models.user import User


def generate_token() -> str:
    return secrets.token_urlsafe(18)


def now_millis() -> int:
    return int(time.time() * 1000)


class SessionStore:
    def __init__(self):
        self._sessions: dict[str, Identity] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, user: User) -> tuple[str, Identity]:
        """Open a session for ``user`` and return its token and identity."""
        identity = Identity(
            username=user.username,
            role=user.role,
            login_time=now_millis(),
        )
        token = generate_token()
        self._sessions[token] = identity
        return token, identity

    def lookup(self, token: str | None) -> Identity | None:
        if not token:
            return None
        return self._sessions.get(token)

    def revoke(self, token: str | None) -> None:
        if token:
            self._sessions.pop(token, None)

    def clear(self) -> None:
        self._sessions.clear()
