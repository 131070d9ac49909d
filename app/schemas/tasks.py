import uuid
from pydantic import BaseModel, Field

from app.models.enums import TaskStatus

class TaskCreateIn(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    assigned_to: uuid.UUID | None = None

class TaskUpdateIn(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=300)
    status: TaskStatus | None = None
    assigned_to: uuid.UUID | None = None

class AssigneeIn(BaseModel):
    assigned_to: uuid.UUID | None

class TaskOut(BaseModel):
    id: uuid.UUID
    workspace_id: uuid.UUID
    project_id: uuid.UUID
    title: str
    status: TaskStatus
    created_by: uuid.UUID
    assigned_to: uuid.UUID | None
