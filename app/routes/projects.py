import uuid

from fastapi import APIRouter, Depends

from app.models.project import Project
from app.rbac.deps import get_store, get_workspace_context, require_perm, require_project_perm
from app.rbac.guard import WorkspaceContext
from app.rbac.perms import Permission
from app.schemas.projects import ProjectCreateIn, ProjectOut, ProjectUpdateIn
from app.store import Store

router = APIRouter(tags=["projects"])

def _out(p: Project) -> ProjectOut:
    return ProjectOut(id=p.id, workspace_id=p.workspace_id, name=p.name)

@router.post("/workspaces/{workspace_id}/projects", response_model=ProjectOut)
def create_project(
    workspace_id: uuid.UUID,
    payload: ProjectCreateIn,
    ctx: WorkspaceContext = Depends(require_perm(Permission.CREATE_PROJECT)),
    store: Store = Depends(get_store),
) -> ProjectOut:
    return _out(store.create_project(ctx.workspace.id, payload.name))

@router.get("/workspaces/{workspace_id}/projects", response_model=list[ProjectOut])
def list_projects(
    workspace_id: uuid.UUID,
    ctx: WorkspaceContext = Depends(get_workspace_context),
    store: Store = Depends(get_store),
) -> list[ProjectOut]:
    return [_out(r) for r in store.list_projects(ctx.workspace.id)]

@router.get("/projects/{project_id}", response_model=ProjectOut)
def get_project(ctx: WorkspaceContext = Depends(require_project_perm())) -> ProjectOut:
    return _out(ctx.project)

@router.patch("/projects/{project_id}", response_model=ProjectOut)
def update_project(
    project_id: uuid.UUID,
    payload: ProjectUpdateIn,
    ctx: WorkspaceContext = Depends(require_project_perm(Permission.EDIT_PROJECT)),
    store: Store = Depends(get_store),
) -> ProjectOut:
    p = ctx.project
    p.name = payload.name
    return _out(store.save(p))

@router.delete("/projects/{project_id}")
def delete_project(
    project_id: uuid.UUID,
    ctx: WorkspaceContext = Depends(require_project_perm(Permission.DELETE_PROJECT)),
    store: Store = Depends(get_store),
) -> dict:
    store.delete_project(ctx.project)
    return {"deleted": True}
