import logging
import uuid
from dataclasses import dataclass
from enum import Enum

from app.models.project import Project
from app.models.task import Task
from app.rbac.errors import ResourceNotFound
from app.store import Store

logger = logging.getLogger(__name__)

class ResourceKind(str, Enum):
    project = "project"
    task = "task"

@dataclass(frozen=True)
class ResourceChain:
    workspace_id: uuid.UUID
    project: Project
    task: Task | None = None

def _missing(kind: str, resource_id: uuid.UUID, via: str | None = None) -> ResourceNotFound:
    logger.info("ownership chain broken code=%s kind=%s id=%s via=%s", ResourceNotFound.code, kind, resource_id, via)
    return ResourceNotFound(f"{kind} {resource_id} not found")

def resolve_chain(store: Store, kind: ResourceKind, resource_id: uuid.UUID) -> ResourceChain:
    """Walk task -> project -> workspace. Projects and tasks never carry their own grants."""
    if kind is ResourceKind.project:
        project = store.get_project(resource_id)
        if project is None:
            raise _missing("project", resource_id)
        return ResourceChain(workspace_id=project.workspace_id, project=project)

    if kind is ResourceKind.task:
        task = store.get_task(resource_id)
        if task is None:
            raise _missing("task", resource_id)
        project = store.get_project(task.project_id)
        if project is None:
            # dangling parent
            raise _missing("project", task.project_id, via=f"task {resource_id}")
        return ResourceChain(workspace_id=project.workspace_id, project=project, task=task)

    raise ValueError(f"unknown resource kind: {kind!r}")

def workspace_of(store: Store, kind: ResourceKind, resource_id: uuid.UUID) -> uuid.UUID:
    return resolve_chain(store, kind, resource_id).workspace_id
