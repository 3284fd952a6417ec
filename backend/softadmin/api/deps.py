from fastapi import Depends, Request

from softadmin.auth import require_admin, require_session
from softadmin.models.session import Identity
from softadmin.services.registry import RegistryService
from softadmin.sessions import SessionStore
from softadmin.storage.base import BlobStore


def get_sessions(request: Request) -> SessionStore:
    return request.app.state.sessions


def get_registry(request: Request) -> RegistryService:
    return request.app.state.registry


def get_blobs(request: Request) -> BlobStore:
    return request.app.state.blobs


def session_token(request: Request) -> str | None:
    return request.cookies.get(request.app.state.settings.session_cookie)


async def get_current_identity(
    token: str | None = Depends(session_token),
    sessions: SessionStore = Depends(get_sessions),
) -> Identity:
    return require_session(sessions, token)


async def get_admin_identity(identity: Identity = Depends(get_current_identity)) -> Identity:
    require_admin(identity)
    return identity
