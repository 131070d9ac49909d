import uuid
from typing import Any

from pydantic import BaseModel, EmailStr, Field

from app.models.enums import Role

class WorkspaceCreateIn(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    description: str | None = None

class WorkspaceUpdateIn(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    description: str | None = None

class WorkspaceOut(BaseModel):
    id: uuid.UUID
    name: str
    description: str | None = None
    role: Role | None = None

class WorkspaceSettingsIn(BaseModel):
    settings: dict[str, Any]

class WorkspaceSettingsOut(BaseModel):
    workspace_id: uuid.UUID
    settings: dict[str, Any]

class InviteIn(BaseModel):
    email: EmailStr
    role: Role = Role.member

class RoleChangeIn(BaseModel):
    role: Role

class MemberOut(BaseModel):
    user_id: uuid.UUID
    workspace_id: uuid.UUID
    role: Role
