import uuid

from fastapi import APIRouter, Depends, HTTPException
from app.auth.deps import get_current_user
from app.models.task import Task
from app.models.user import User
from app.rbac.deps import get_store, require_project_perm, require_task_perm
from app.rbac.guard import WorkspaceContext
from app.rbac.perms import Permission
from app.schemas.tasks import AssigneeIn, TaskCreateIn, TaskOut, TaskUpdateIn
from app.store import Store

router = APIRouter(tags=["tasks"])

def _out(t: Task, workspace_id: uuid.UUID) -> TaskOut:
    return TaskOut(
        id=t.id,
        workspace_id=workspace_id,
        project_id=t.project_id,
        title=t.title,
        status=t.status,
        created_by=t.created_by,
        assigned_to=t.assigned_to,
    )

def _check_assignee(store: Store, ctx: WorkspaceContext, assignee_id: uuid.UUID | None) -> None:
    if assignee_id is None:
        return
    if store.get_membership(assignee_id, ctx.workspace.id) is None:
        raise HTTPException(status_code=400, detail="assignee is not a member of this workspace")

@router.post("/projects/{project_id}/tasks", response_model=TaskOut)
def create_task(
    project_id: uuid.UUID,
    payload: TaskCreateIn,
    ctx: WorkspaceContext = Depends(require_project_perm(Permission.CREATE_TASK)),
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
) -> TaskOut:
    if payload.assigned_to is not None:
        ctx.require(Permission.ASSIGN_TASK)
        _check_assignee(store, ctx, payload.assigned_to)

    t = store.create_task(ctx.project.id, payload.title, created_by=user.id, assigned_to=payload.assigned_to)
    return _out(t, ctx.workspace.id)

@router.get("/projects/{project_id}/tasks", response_model=list[TaskOut])
def list_tasks(
    project_id: uuid.UUID,
    ctx: WorkspaceContext = Depends(require_project_perm()),
    store: Store = Depends(get_store),
) -> list[TaskOut]:
    return [_out(r, ctx.workspace.id) for r in store.list_tasks(ctx.project.id)]

@router.get("/tasks/{task_id}", response_model=TaskOut)
def get_task(ctx: WorkspaceContext = Depends(require_task_perm())) -> TaskOut:
    return _out(ctx.task, ctx.workspace.id)

@router.patch("/tasks/{task_id}", response_model=TaskOut)
def update_task(
    task_id: uuid.UUID,
    payload: TaskUpdateIn,
    ctx: WorkspaceContext = Depends(require_task_perm(Permission.EDIT_TASK)),
    store: Store = Depends(get_store),
) -> TaskOut:
    t = ctx.task

    # allow explicit unassign by sending null
    reassign = "assigned_to" in payload.model_fields_set and payload.assigned_to != t.assigned_to
    if reassign:
        ctx.require({Permission.EDIT_TASK, Permission.ASSIGN_TASK})
        _check_assignee(store, ctx, payload.assigned_to)
        t.assigned_to = payload.assigned_to

    if payload.title is not None:
        t.title = payload.title
    if payload.status is not None:
        t.status = payload.status

    return _out(store.save(t), ctx.workspace.id)

@router.put("/tasks/{task_id}/assignee", response_model=TaskOut)
def assign_task(
    task_id: uuid.UUID,
    payload: AssigneeIn,
    ctx: WorkspaceContext = Depends(require_task_perm(Permission.ASSIGN_TASK)),
    store: Store = Depends(get_store),
) -> TaskOut:
    _check_assignee(store, ctx, payload.assigned_to)

    t = ctx.task
    t.assigned_to = payload.assigned_to
    return _out(store.save(t), ctx.workspace.id)

@router.delete("/tasks/{task_id}")
def delete_task(
    task_id: uuid.UUID,
    ctx: WorkspaceContext = Depends(require_task_perm(Permission.DELETE_TASK)),
    store: Store = Depends(get_store),
) -> dict:
    store.delete_task(ctx.task)
    return {"deleted": True}
