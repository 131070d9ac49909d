from app.models.membership import Membership
from app.models.project import Project
from app.models.task import Task
from app.models.user import User
from app.models.workspace import Workspace

__all__ = ["User", "Workspace", "Membership", "Project", "Task"]
