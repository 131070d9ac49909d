"""
Guard orchestrator: the single entry point in front of every protected
operation.

    resolve chain (project/task) -> resolve membership -> decide -> context

The returned :class:`WorkspaceContext` is handed to the route explicitly;
nothing is stashed on the request.
"""
from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from dataclasses import dataclass

from app.models.enums import Role
from app.models.membership import Membership
from app.models.project import Project
from app.models.task import Task
from app.models.workspace import Workspace
from app.rbac.chain import ResourceKind, resolve_chain
from app.rbac.decision import Mode, authorize
from app.rbac.errors import AuthzError, Forbidden, LastOwnerViolation
from app.rbac.perms import MANAGEABLE_ROLES, Permission
from app.rbac.resolver import resolve_membership
from app.store import Store

logger = logging.getLogger(__name__)

Required = Permission | Iterable[Permission] | None

@dataclass(frozen=True)
class WorkspaceContext:
    actor_id: uuid.UUID
    workspace: Workspace
    membership: Membership
    project: Project | None = None
    task: Task | None = None

    @property
    def role(self) -> Role:
        return self.membership.role

    def require(self, required: Permission | Iterable[Permission], mode: Mode = Mode.ALL) -> None:
        """Re-check against the already resolved membership, e.g. for payload-dependent permissions."""
        _enforce(self.actor_id, self.workspace.id, self.membership, required, mode)

def _enforce(
    actor_id: uuid.UUID,
    workspace_id: uuid.UUID,
    membership: Membership,
    required: Permission | Iterable[Permission],
    mode: Mode,
) -> None:
    decision = authorize(membership, required, mode)
    if not decision.allowed:
        missing = sorted(p.value for p in decision.missing)
        logger.info(
            "authz denied code=%s reason=%s actor=%s workspace=%s role=%s mode=%s missing=%s",
            Forbidden.code,
            decision.reason,
            actor_id,
            workspace_id,
            membership.role.value,
            mode.value,
            missing,
        )
        raise Forbidden(
            f"role {membership.role.value} lacks {', '.join(missing)}",
            reason=decision.reason or "insufficient_role",
            missing=decision.missing,
        )

def guard(
    store: Store,
    actor_id: uuid.UUID,
    workspace_id: uuid.UUID,
    required: Required = None,
    mode: Mode = Mode.ALL,
) -> WorkspaceContext:
    """Authorize ``actor_id`` against ``workspace_id``.

    ``required=None`` only checks membership (read endpoints).
    """
    try:
        workspace, membership = resolve_membership(store, actor_id, workspace_id)
    except AuthzError as e:
        logger.info("authz denied code=%s actor=%s workspace=%s", e.code, actor_id, workspace_id)
        raise

    if required is not None:
        _enforce(actor_id, workspace_id, membership, required, mode)

    return WorkspaceContext(actor_id=actor_id, workspace=workspace, membership=membership)

def guard_resource(
    store: Store,
    actor_id: uuid.UUID,
    kind: ResourceKind,
    resource_id: uuid.UUID,
    required: Required = None,
    mode: Mode = Mode.ALL,
) -> WorkspaceContext:
    """Same as :func:`guard`, for a project or task: authorization is always
    decided by the membership in the resource's root workspace."""
    chain = resolve_chain(store, kind, resource_id)
    ctx = guard(store, actor_id, chain.workspace_id, required, mode)
    return WorkspaceContext(
        actor_id=ctx.actor_id,
        workspace=ctx.workspace,
        membership=ctx.membership,
        project=chain.project,
        task=chain.task,
    )

# membership management

def ensure_owner_retained(store: Store, target: Membership, new_role: Role | None = None) -> None:
    """Refuse to leave a live workspace without an owner.

    ``new_role=None`` means the membership is being removed. Applies whoever
    asks, including the owner themselves.
    """
    if target.role != Role.owner or new_role == Role.owner:
        return

    owners = store.list_owner_memberships(target.workspace_id, for_update=True)
    others = [m for m in owners if m.user_id != target.user_id]
    if not others:
        logger.info(
            "authz denied code=%s workspace=%s target=%s",
            LastOwnerViolation.code,
            target.workspace_id,
            target.user_id,
        )
        raise LastOwnerViolation("workspace must keep at least one owner")

def _ensure_manageable(ctx: WorkspaceContext, role: Role, what: str) -> None:
    if role not in MANAGEABLE_ROLES[ctx.role]:
        logger.info(
            "authz denied code=%s reason=role_rank actor=%s workspace=%s actor_role=%s %s=%s",
            Forbidden.code,
            ctx.actor_id,
            ctx.workspace.id,
            ctx.role.value,
            what,
            role.value,
        )
        raise Forbidden(f"{ctx.role.value} cannot manage {what} {role.value}", reason="role_rank")

def check_invite_role(ctx: WorkspaceContext, role: Role) -> None:
    ctx.require(Permission.ADD_MEMBER)
    _ensure_manageable(ctx, role, "role")

def check_role_change(store: Store, ctx: WorkspaceContext, target: Membership, new_role: Role) -> None:
    # owner rule first: it holds no matter who asks
    ensure_owner_retained(store, target, new_role)
    ctx.require(Permission.CHANGE_MEMBER_ROLE)
    if target.role == new_role:
        return
    _ensure_manageable(ctx, target.role, "member with role")
    _ensure_manageable(ctx, new_role, "role")

def check_member_removal(store: Store, ctx: WorkspaceContext, target: Membership) -> None:
    ensure_owner_retained(store, target)
    # leaving needs no permission
    if target.user_id != ctx.actor_id:
        ctx.require(Permission.REMOVE_MEMBER)
        _ensure_manageable(ctx, target.role, "member with role")
