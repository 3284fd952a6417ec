"""Guarded UI pages and uploaded file downloads."""

import mimetypes

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, RedirectResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.types import Scope

from softadmin.api.deps import get_blobs
from softadmin.auth import LOGIN_PAGE
from softadmin.models.session import Identity
from softadmin.storage.base import BlobStore

ADMIN_PAGES = {"admin-list.html", "admin-add.html"}
USER_PAGES = {"user-index.html"}

router = APIRouter(tags=["pages"])


def page_allowed(page: str, identity: Identity | None) -> bool:
    if page in ADMIN_PAGES:
        return identity is not None and identity.is_admin
    if page in USER_PAGES:
        return identity is not None
    return True


class GuardedStaticFiles(StaticFiles):
    """Static UI files; guarded pages redirect to the login page.

    ``path`` is already normalized here, so ``/admin-list.html/`` and other
    spellings of a guarded file are checked like the plain one.
    """

    async def get_response(self, path: str, scope: Scope) -> Response:
        request = Request(scope)
        state = request.app.state
        identity = state.sessions.lookup(request.cookies.get(state.settings.session_cookie))
        if not page_allowed(path, identity):
            return RedirectResponse(LOGIN_PAGE, status_code=302)
        return await super().get_response(path, scope)


@router.get("/uploads/{name}")
async def download_upload(name: str, blobs: BlobStore = Depends(get_blobs)):
    data = blobs.get(name)
    if data is None:
        return PlainTextResponse("File not found", status_code=404)
    media_type = mimetypes.guess_type(name)[0] or "application/octet-stream"
    return Response(content=data, media_type=media_type)
