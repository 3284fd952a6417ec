"""
Permission resolution.

Maps software entries to what a client is told about running them. Two
views exist: the per-user query, which matches a keyword against ids and
names, and the public single-id lookup used by the startup check.
"""

import re

from pydantic import BaseModel, ConfigDict, Field

from softadmin.models.software import SoftwareEntry

AUTHORIZED = "authorized"
DISABLED = "disabled"
NOT_REGISTERED = "software not registered"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class SoftwarePermission(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    version: str
    enabled: bool
    can_run: bool = Field(alias="canRun")
    reason: str


class SoftwareBrief(BaseModel):
    name: str
    version: str


class PublicPermission(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    registered: bool = Field(exclude=True)
    can_run: bool = Field(alias="canRun")
    reason: str
    software: SoftwareBrief | None = None

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


def reason_for(enabled: bool) -> str:
    return AUTHORIZED if enabled else DISABLED


def parse_id_keyword(keyword: str) -> int | None:
    """Return the integer a keyword starts with, if any.

    ``"42"`` and ``" 42abc"`` both yield 42; ``"abc"`` yields None.
    """
    match = _LEADING_INT.match(keyword)
    return int(match.group(1)) if match else None


def match_entries(softwares: list[SoftwareEntry], keyword: str) -> list[SoftwareEntry]:
    """Find entries for a user keyword.

    An exact id match comes first, followed by every case-insensitive name
    match in registry order. Each id appears once, at its first position.
    """
    candidates: list[SoftwareEntry] = []
    software_id = parse_id_keyword(keyword)
    if software_id is not None:
        by_id = next((s for s in softwares if s.id == software_id), None)
        if by_id is not None:
            candidates.append(by_id)

    needle = keyword.lower()
    candidates.extend(s for s in softwares if needle in s.name.lower())

    seen: set[int] = set()
    results = []
    for entry in candidates:
        if entry.id in seen:
            continue
        seen.add(entry.id)
        results.append(entry)
    return results


def resolve(entry: SoftwareEntry) -> SoftwarePermission:
    return SoftwarePermission(
        id=entry.id,
        name=entry.name,
        version=entry.version,
        enabled=entry.enabled,
        can_run=entry.enabled,
        reason=reason_for(entry.enabled),
    )


def resolve_public(entry: SoftwareEntry | None) -> PublicPermission:
    if entry is None:
        return PublicPermission(registered=False, can_run=False, reason=NOT_REGISTERED)
    return PublicPermission(
        registered=True,
        can_run=entry.enabled,
        reason=reason_for(entry.enabled),
        software=SoftwareBrief(name=entry.name, version=entry.version),
    )
