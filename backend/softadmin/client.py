"""
Startup permission check for client applications.

Call :func:`check_software_permission` before starting the real program and
refuse to run unless it reports ``can_run``. ``main`` does exactly that for
one configured software id and exits with status 1 on refusal or failure.
"""

import logging
import sys
from dataclasses import dataclass

import httpx
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


class PermissionCheckError(Exception):
    """The permission server could not be reached or answered garbage."""


class UpstreamTimeout(PermissionCheckError):
    """The permission server did not answer in time."""


@dataclass
class PermissionResult:
    can_run: bool
    reason: str
    software: dict | None = None


class ClientSettings(BaseSettings):
    server: str = "http://127.0.0.1:3000"
    software_id: int = 0
    timeout: float = DEFAULT_TIMEOUT

    class Config:
        env_prefix = "SOFTADMIN_CHECK_"


def parse_permission(payload: dict) -> PermissionResult:
    data = payload.get("data") or {}
    return PermissionResult(
        can_run=bool(data.get("canRun", False)),
        reason=data.get("reason") or payload.get("msg") or "unknown error",
        software=data.get("software") or None,
    )


def check_software_permission(
    server: str,
    software_id: int,
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.BaseTransport | None = None,
) -> PermissionResult:
    url = f"{server.rstrip('/')}/api/software/{software_id}/permission"
    try:
        with httpx.Client(timeout=timeout, transport=transport) as client:
            resp = client.get(url)
    except httpx.TimeoutException as exc:
        raise UpstreamTimeout("permission server timed out") from exc
    except httpx.HTTPError as exc:
        raise PermissionCheckError(f"cannot reach permission server: {exc}") from exc

    try:
        payload = resp.json()
    except ValueError as exc:
        raise PermissionCheckError(f"unparseable permission response: {exc}") from exc
    if not isinstance(payload, dict):
        raise PermissionCheckError("unparseable permission response: not an object")
    return parse_permission(payload)


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    config = ClientSettings()
    logger.info(f"[permission] checking software {config.software_id}")
    try:
        result = check_software_permission(config.server, config.software_id, config.timeout)
    except PermissionCheckError as exc:
        logger.error(f"[refused] {exc}")
        return 1

    if not result.can_run:
        logger.error(f"[refused] {result.reason}")
        return 1
    logger.info(f"[allowed] {result.reason}")
    if result.software:
        logger.info(
            f"[software] {result.software.get('name')} {result.software.get('version')}"
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
