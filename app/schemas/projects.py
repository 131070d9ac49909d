import uuid
from pydantic import BaseModel, Field

class ProjectCreateIn(BaseModel):
    name: str = Field(min_length=1, max_length=200)

class ProjectUpdateIn(BaseModel):
    name: str = Field(min_length=1, max_length=200)

class ProjectOut(BaseModel):
    id: uuid.UUID
    workspace_id: uuid.UUID
    name: str
