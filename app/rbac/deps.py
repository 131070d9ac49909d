import uuid

from fastapi import Depends
from sqlalchemy.orm import Session

from app.auth.deps import get_current_user
from app.db import get_db
from app.models.user import User
from app.rbac.chain import ResourceKind
from app.rbac.decision import Mode
from app.rbac.guard import WorkspaceContext, guard, guard_resource
from app.rbac.perms import Permission
from app.store import Store

def get_store(db: Session = Depends(get_db)) -> Store:
    return Store(db)

def get_workspace_context(
    workspace_id: uuid.UUID,
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
) -> WorkspaceContext:
    return guard(store, user.id, workspace_id)

def require_perm(*required: Permission, mode: Mode = Mode.ALL):
    if not required:
        raise RuntimeError("require_perm needs at least one permission")

    def _checker(
        workspace_id: uuid.UUID,
        user: User = Depends(get_current_user),
        store: Store = Depends(get_store),
    ) -> WorkspaceContext:
        return guard(store, user.id, workspace_id, required, mode)

    return _checker

def require_project_perm(*required: Permission, mode: Mode = Mode.ALL):
    # no permissions = membership in the project's workspace is enough
    def _checker(
        project_id: uuid.UUID,
        user: User = Depends(get_current_user),
        store: Store = Depends(get_store),
    ) -> WorkspaceContext:
        return guard_resource(store, user.id, ResourceKind.project, project_id, required or None, mode)

    return _checker

def require_task_perm(*required: Permission, mode: Mode = Mode.ALL):
    def _checker(
        task_id: uuid.UUID,
        user: User = Depends(get_current_user),
        store: Store = Depends(get_store),
    ) -> WorkspaceContext:
        return guard_resource(store, user.id, ResourceKind.task, task_id, required or None, mode)

    return _checker
