import uuid

from fastapi import APIRouter, Depends, HTTPException

from app.rbac.deps import get_store, get_workspace_context, require_perm
from app.rbac.guard import WorkspaceContext, check_invite_role, check_member_removal, check_role_change
from app.rbac.perms import Permission
from app.schemas.workspaces import InviteIn, MemberOut, RoleChangeIn
from app.store import Store

router = APIRouter(prefix="/workspaces/{workspace_id}/members", tags=["members"])

def _out(m) -> MemberOut:
    return MemberOut(user_id=m.user_id, workspace_id=m.workspace_id, role=m.role)

@router.get("", response_model=list[MemberOut])
def list_members(
    ctx: WorkspaceContext = Depends(get_workspace_context),
    store: Store = Depends(get_store),
) -> list[MemberOut]:
    return [_out(m) for m in store.list_memberships(ctx.workspace.id)]

@router.post("", response_model=MemberOut)
def add_member(
    workspace_id: uuid.UUID,
    payload: InviteIn,
    ctx: WorkspaceContext = Depends(require_perm(Permission.ADD_MEMBER)),
    store: Store = Depends(get_store),
) -> MemberOut:
    check_invite_role(ctx, payload.role)

    invited = store.get_or_create_user(payload.email)
    existing = store.get_membership(invited.id, workspace_id)
    if existing is not None:
        if existing.role != payload.role:
            raise HTTPException(status_code=409, detail="already a member; change the role with PATCH")
        return _out(existing)

    return _out(store.add_membership(invited.id, workspace_id, payload.role))

def _target(store: Store, workspace_id: uuid.UUID, user_id: uuid.UUID):
    target = store.get_membership(user_id, workspace_id)
    if target is None:
        # caller is a member already, existence here isn't sensitive
        raise HTTPException(status_code=404, detail="member not found")
    return target

@router.patch("/{user_id}", response_model=MemberOut)
def change_member_role(
    workspace_id: uuid.UUID,
    user_id: uuid.UUID,
    payload: RoleChangeIn,
    ctx: WorkspaceContext = Depends(get_workspace_context),
    store: Store = Depends(get_store),
) -> MemberOut:
    target = _target(store, workspace_id, user_id)
    check_role_change(store, ctx, target, payload.role)

    if target.role == payload.role:
        return _out(target)
    return _out(store.set_role(target, payload.role))

@router.delete("/{user_id}")
def remove_member(
    workspace_id: uuid.UUID,
    user_id: uuid.UUID,
    ctx: WorkspaceContext = Depends(get_workspace_context),
    store: Store = Depends(get_store),
) -> dict:
    target = _target(store, workspace_id, user_id)
    check_member_removal(store, ctx, target)

    store.remove_membership(target)
    return {"removed": True}
