from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType

from app.models.enums import Role

class Permission(str, Enum):
    """Atomic capabilities. No permission implies another."""

    # workspace
    CREATE_WORKSPACE = "workspace:create"
    DELETE_WORKSPACE = "workspace:delete"
    EDIT_WORKSPACE = "workspace:edit"
    MANAGE_WORKSPACE_SETTINGS = "workspace:manage_settings"

    # members
    ADD_MEMBER = "member:add"
    CHANGE_MEMBER_ROLE = "member:change_role"
    REMOVE_MEMBER = "member:remove"

    # projects
    CREATE_PROJECT = "project:create"
    EDIT_PROJECT = "project:edit"
    DELETE_PROJECT = "project:delete"

    # tasks
    CREATE_TASK = "task:create"
    EDIT_TASK = "task:edit"
    DELETE_TASK = "task:delete"
    ASSIGN_TASK = "task:assign"

_OWNER = frozenset(Permission)

# admins get everything but workspace deletion
_ADMIN = _OWNER - {Permission.DELETE_WORKSPACE}

_MEMBER = frozenset(
    {
        Permission.CREATE_WORKSPACE,
        Permission.CREATE_TASK,
        Permission.EDIT_TASK,
        Permission.ASSIGN_TASK,
    }
)

# read-only after import
ROLE_PERMISSIONS: Mapping[Role, frozenset[Permission]] = MappingProxyType(
    {
        Role.owner: _OWNER,
        Role.admin: _ADMIN,
        Role.member: _MEMBER,
    }
)

def permissions_for(
    role: Role,
    catalog: Mapping[Role, frozenset[Permission]] = ROLE_PERMISSIONS,
) -> frozenset[Permission]:
    return catalog[role]

# roles an actor may hand out or manage (invite, promote, demote, remove)
# strictly below the actor, so nobody hands out owner
MANAGEABLE_ROLES: Mapping[Role, frozenset[Role]] = MappingProxyType(
    {actor: frozenset(r for r in Role if r.rank < actor.rank) for actor in Role}
)
