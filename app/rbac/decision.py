"""
Access decision engine.

Pure functions over an already-resolved membership and the role catalog:
no storage access, no per-request state.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from app.models.enums import Role
from app.models.membership import Membership
from app.rbac.perms import ROLE_PERMISSIONS, Permission, permissions_for

INSUFFICIENT_ROLE = "insufficient_role"

class Mode(str, Enum):
    ANY = "any"
    ALL = "all"

@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str | None = None
    missing: frozenset[Permission] = field(default_factory=frozenset)

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, missing: Iterable[Permission], reason: str = INSUFFICIENT_ROLE) -> "Decision":
        return cls(allowed=False, reason=reason, missing=frozenset(missing))

    def __bool__(self) -> bool:
        return self.allowed

def normalize_required(required: Permission | Iterable[Permission]) -> frozenset[Permission]:
    if isinstance(required, Permission):
        return frozenset({required})
    perms = frozenset(required)
    if not perms:
        raise ValueError("at least one permission is required")
    for p in perms:
        if not isinstance(p, Permission):
            raise TypeError(f"not a Permission: {p!r}")
    return perms

def decide(
    role: Role,
    required: Permission | Iterable[Permission],
    mode: Mode = Mode.ALL,
    catalog: Mapping[Role, frozenset[Permission]] = ROLE_PERMISSIONS,
) -> Decision:
    wanted = normalize_required(required)
    granted = permissions_for(role, catalog)
    missing = wanted - granted

    if mode is Mode.ALL:
        ok = not missing
    else:
        ok = len(missing) < len(wanted)

    return Decision.allow() if ok else Decision.deny(missing)

def authorize(
    membership: Membership,
    required: Permission | Iterable[Permission],
    mode: Mode = Mode.ALL,
    catalog: Mapping[Role, frozenset[Permission]] = ROLE_PERMISSIONS,
) -> Decision:
    return decide(membership.role, required, mode, catalog)
