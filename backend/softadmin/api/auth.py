from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel

from softadmin.api.deps import get_current_identity, get_registry, session_token
from softadmin.models.session import Identity
from softadmin.services.registry import RegistryService

router = APIRouter(tags=["auth"])


class CredentialsRequest(BaseModel):
    username: str | None = None
    password: str | None = None


@router.post("/login")
async def login(
    body: CredentialsRequest,
    request: Request,
    response: Response,
    registry: RegistryService = Depends(get_registry),
):
    result = registry.login(body.username, body.password)
    settings = request.app.state.settings
    response.set_cookie(
        settings.session_cookie,
        result.token,
        max_age=settings.session_max_age,
        path="/",
        httponly=True,
    )
    return {
        "code": 0,
        "msg": "login successful",
        "data": {
            "username": result.identity.username,
            "role": result.identity.role,
            "redirect": result.redirect,
        },
    }


@router.post("/register")
async def register(
    body: CredentialsRequest,
    registry: RegistryService = Depends(get_registry),
):
    registry.register(body.username, body.password)
    return {"code": 0, "msg": "registration successful"}


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    token: str | None = Depends(session_token),
    registry: RegistryService = Depends(get_registry),
):
    registry.logout(token)
    response.delete_cookie(request.app.state.settings.session_cookie, path="/", httponly=True)
    return {"code": 0, "msg": "logged out"}


@router.get("/user/info")
async def user_info(identity: Identity = Depends(get_current_identity)):
    return {"code": 0, "data": {"username": identity.username, "role": identity.role}}
