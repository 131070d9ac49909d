import uuid

from fastapi import APIRouter, Depends

from app.auth.deps import get_current_user
from app.models.enums import Role
from app.models.user import User
from app.rbac.decision import Mode
from app.rbac.deps import get_store, get_workspace_context, require_perm
from app.rbac.guard import WorkspaceContext
from app.rbac.perms import Permission
from app.schemas.workspaces import (
    WorkspaceCreateIn,
    WorkspaceOut,
    WorkspaceSettingsIn,
    WorkspaceSettingsOut,
    WorkspaceUpdateIn,
)
from app.store import Store

router = APIRouter(prefix="/workspaces", tags=["workspaces"])

@router.post("", response_model=WorkspaceOut)
def create_workspace(
    payload: WorkspaceCreateIn,
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
) -> WorkspaceOut:
    # no workspace to check against yet; creator becomes owner
    ws = store.create_workspace(payload.name, owner_id=user.id, description=payload.description)
    return WorkspaceOut(id=ws.id, name=ws.name, description=ws.description, role=Role.owner)

@router.get("", response_model=list[WorkspaceOut])
def list_workspaces(
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
) -> list[WorkspaceOut]:
    out = []
    for ws in store.list_workspaces_for(user.id):
        m = store.get_membership(user.id, ws.id)
        out.append(WorkspaceOut(id=ws.id, name=ws.name, description=ws.description, role=m.role if m else None))
    return out

@router.get("/{workspace_id}", response_model=WorkspaceOut)
def get_workspace(ctx: WorkspaceContext = Depends(get_workspace_context)) -> WorkspaceOut:
    ws = ctx.workspace
    return WorkspaceOut(id=ws.id, name=ws.name, description=ws.description, role=ctx.role)

@router.patch("/{workspace_id}", response_model=WorkspaceOut)
def update_workspace(
    workspace_id: uuid.UUID,
    payload: WorkspaceUpdateIn,
    ctx: WorkspaceContext = Depends(require_perm(Permission.EDIT_WORKSPACE)),
    store: Store = Depends(get_store),
) -> WorkspaceOut:
    ws = ctx.workspace
    if payload.name is not None:
        ws.name = payload.name
    if "description" in payload.model_fields_set:
        ws.description = payload.description
    ws = store.save(ws)
    return WorkspaceOut(id=ws.id, name=ws.name, description=ws.description, role=ctx.role)

@router.get("/{workspace_id}/settings", response_model=WorkspaceSettingsOut)
def get_workspace_settings(
    workspace_id: uuid.UUID,
    ctx: WorkspaceContext = Depends(
        require_perm(Permission.EDIT_WORKSPACE, Permission.MANAGE_WORKSPACE_SETTINGS, mode=Mode.ANY)
    ),
) -> WorkspaceSettingsOut:
    return WorkspaceSettingsOut(workspace_id=ctx.workspace.id, settings=dict(ctx.workspace.settings or {}))

@router.put("/{workspace_id}/settings", response_model=WorkspaceSettingsOut)
def put_workspace_settings(
    workspace_id: uuid.UUID,
    payload: WorkspaceSettingsIn,
    ctx: WorkspaceContext = Depends(require_perm(Permission.MANAGE_WORKSPACE_SETTINGS)),
    store: Store = Depends(get_store),
) -> WorkspaceSettingsOut:
    ws = ctx.workspace
    ws.settings = dict(payload.settings)
    ws = store.save(ws)
    return WorkspaceSettingsOut(workspace_id=ws.id, settings=dict(ws.settings))

@router.delete("/{workspace_id}")
def delete_workspace(
    workspace_id: uuid.UUID,
    ctx: WorkspaceContext = Depends(require_perm(Permission.DELETE_WORKSPACE)),
    store: Store = Depends(get_store),
) -> dict:
    store.delete_workspace(ctx.workspace)
    return {"deleted": True}
