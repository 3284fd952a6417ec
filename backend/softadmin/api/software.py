from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import BaseModel, StrictBool

from softadmin.api.deps import get_admin_identity, get_current_identity, get_registry
from softadmin.errors import MissingField
from softadmin.models.session import Identity
from softadmin.services.registry import RegistryService, Upload

router = APIRouter(prefix="/software", tags=["software"])


class ToggleRequest(BaseModel):
    enabled: StrictBool | None = None


# --- Admin ---


@router.get("")
async def list_software(
    page: int = 1,
    limit: int = 10,
    keyword: str = "",
    registry: RegistryService = Depends(get_registry),
    _admin: Identity = Depends(get_admin_identity),
):
    result = registry.list_software(page=page, limit=limit, keyword=keyword)
    return {"code": 0, "total": result.total, "data": [s.to_wire() for s in result.items]}


@router.post("")
async def add_software(
    name: str | None = Form(None),
    version: str | None = Form(None),
    author: str | None = Form(None),
    desc: str | None = Form(None),
    file: UploadFile | None = File(None),
    registry: RegistryService = Depends(get_registry),
    _admin: Identity = Depends(get_admin_identity),
):
    upload = None
    if file is not None and file.filename:
        upload = Upload(filename=file.filename, data=await file.read())
    entry = registry.add_software(name, version, author, desc, upload=upload)
    return {"code": 0, "msg": "software added", "data": {"id": entry.id}}


@router.delete("/{software_id:int}")
async def delete_software(
    software_id: int,
    registry: RegistryService = Depends(get_registry),
    _admin: Identity = Depends(get_admin_identity),
):
    registry.delete_software(software_id)
    return {"code": 0, "msg": "software deleted"}


@router.put("/{software_id:int}/toggle")
async def toggle_software(
    software_id: int,
    body: ToggleRequest,
    registry: RegistryService = Depends(get_registry),
    _admin: Identity = Depends(get_admin_identity),
):
    if body.enabled is None:
        raise MissingField("enabled is required")
    entry = registry.toggle_software(software_id, body.enabled)
    return {"code": 0, "msg": "enabled" if entry.enabled else "disabled"}


@router.get("/{software_id:int}/status")
async def software_status(
    software_id: int,
    registry: RegistryService = Depends(get_registry),
    _admin: Identity = Depends(get_admin_identity),
):
    entry = registry.get_status(software_id)
    return {"code": 0, "data": {"id": entry.id, "enabled": entry.enabled}}


# --- Any signed-in user ---


@router.get("/query")
async def query_software(
    keyword: str | None = None,
    registry: RegistryService = Depends(get_registry),
    _user: Identity = Depends(get_current_identity),
):
    permissions = registry.query_by_user(keyword)
    msg = f"found {len(permissions)} software" if permissions else "no matching software found"
    return {
        "code": 0,
        "data": {"list": [p.model_dump(by_alias=True) for p in permissions], "msg": msg},
    }


# --- Public ---


@router.get("/{software_id:int}/permission")
async def software_permission(
    software_id: int,
    registry: RegistryService = Depends(get_registry),
):
    """Startup check for client applications. No session required."""
    permission = registry.query_public(software_id)
    return {"code": 0 if permission.registered else -1, "data": permission.to_wire()}
