"""
Storage collaborator used by the authorization core.

Lookups return ``None`` for "not found"; any database failure surfaces as
:class:`StorageUnavailable` so callers never confuse an outage with a denial.
"""
from __future__ import annotations

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.enums import Role
from app.models.membership import Membership
from app.models.project import Project
from app.models.task import Task
from app.models.user import User
from app.models.workspace import Workspace

logger = logging.getLogger(__name__)

class StorageUnavailable(Exception):
    """The backing store failed (timeout, lost connection, ...)."""

@contextmanager
def _storage_errors(op: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as e:
        raise StorageUnavailable(f"{op} failed: {e.__class__.__name__}") from e

class Store:
    def __init__(self, db: Session):
        self.db = db

    # reads

    def get_workspace(self, workspace_id: uuid.UUID) -> Workspace | None:
        with _storage_errors("get_workspace"):
            return self.db.get(Workspace, workspace_id)

    def get_membership(self, user_id: uuid.UUID, workspace_id: uuid.UUID) -> Membership | None:
        with _storage_errors("get_membership"):
            return self.db.get(Membership, {"user_id": user_id, "workspace_id": workspace_id})

    def get_project(self, project_id: uuid.UUID) -> Project | None:
        with _storage_errors("get_project"):
            return self.db.get(Project, project_id)

    def get_task(self, task_id: uuid.UUID) -> Task | None:
        with _storage_errors("get_task"):
            return self.db.get(Task, task_id)

    def get_user(self, user_id: uuid.UUID) -> User | None:
        with _storage_errors("get_user"):
            return self.db.get(User, user_id)

    def list_owner_memberships(self, workspace_id: uuid.UUID, *, for_update: bool = False) -> list[Membership]:
        q = select(Membership).where(
            Membership.workspace_id == workspace_id,
            Membership.role == Role.owner,
        )
        if for_update:
            # row locks on postgres; ignored by sqlite
            q = q.with_for_update()
        with _storage_errors("list_owner_memberships"):
            return list(self.db.scalars(q).all())

    def list_memberships(self, workspace_id: uuid.UUID) -> list[Membership]:
        q = (
            select(Membership)
            .where(Membership.workspace_id == workspace_id)
            .order_by(Membership.created_at)
        )
        with _storage_errors("list_memberships"):
            return list(self.db.scalars(q).all())

    def list_workspaces_for(self, user_id: uuid.UUID) -> list[Workspace]:
        q = (
            select(Workspace)
            .join(Membership, Membership.workspace_id == Workspace.id)
            .where(Membership.user_id == user_id)
            .order_by(Workspace.created_at.desc())
        )
        with _storage_errors("list_workspaces_for"):
            return list(self.db.scalars(q).all())

    # writes

    def get_or_create_user(self, email: str, name: str | None = None) -> User:
        email = email.lower().strip()
        with _storage_errors("get_or_create_user"):
            user = self.db.scalar(select(User).where(User.email == email))
            if user is None:
                user = User(email=email, name=name)
                self.db.add(user)
                self.db.flush()
            return user

    def create_workspace(self, name: str, owner_id: uuid.UUID, description: str | None = None) -> Workspace:
        # workspace + owner membership land in one commit
        with _storage_errors("create_workspace"):
            ws = Workspace(name=name, description=description, settings={}, created_by=owner_id)
            self.db.add(ws)
            self.db.flush()
            self.db.add(Membership(user_id=owner_id, workspace_id=ws.id, role=Role.owner))
            self.db.commit()
            self.db.refresh(ws)
        logger.info("workspace created workspace=%s owner=%s", ws.id, owner_id)
        return ws

    def add_membership(self, user_id: uuid.UUID, workspace_id: uuid.UUID, role: Role) -> Membership:
        with _storage_errors("add_membership"):
            m = Membership(user_id=user_id, workspace_id=workspace_id, role=role)
            self.db.add(m)
            self.db.commit()
            self.db.refresh(m)
        return m

    def set_role(self, membership: Membership, role: Role) -> Membership:
        with _storage_errors("set_role"):
            membership.role = role
            self.db.add(membership)
            self.db.commit()
            self.db.refresh(membership)
        return membership

    def remove_membership(self, membership: Membership) -> None:
        with _storage_errors("remove_membership"):
            self.db.delete(membership)
            self.db.commit()

    def save(self, row):
        """Commit pending edits on a loaded row (workspace, project, task)."""
        with _storage_errors("save"):
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        return row

    def create_project(self, workspace_id: uuid.UUID, name: str) -> Project:
        return self.save(Project(workspace_id=workspace_id, name=name))

    def list_projects(self, workspace_id: uuid.UUID) -> list[Project]:
        q = select(Project).where(Project.workspace_id == workspace_id).order_by(Project.created_at.desc())
        with _storage_errors("list_projects"):
            return list(self.db.scalars(q).all())

    def create_task(
        self,
        project_id: uuid.UUID,
        title: str,
        created_by: uuid.UUID,
        assigned_to: uuid.UUID | None = None,
    ) -> Task:
        return self.save(Task(project_id=project_id, title=title, created_by=created_by, assigned_to=assigned_to))

    def list_tasks(self, project_id: uuid.UUID) -> list[Task]:
        q = select(Task).where(Task.project_id == project_id).order_by(Task.created_at.desc())
        with _storage_errors("list_tasks"):
            return list(self.db.scalars(q).all())

    def delete_task(self, task: Task) -> None:
        with _storage_errors("delete_task"):
            self.db.delete(task)
            self.db.commit()

    def delete_project(self, project: Project) -> None:
        with _storage_errors("delete_project"):
            self.db.execute(delete(Task).where(Task.project_id == project.id))
            self.db.delete(project)
            self.db.commit()

    def delete_workspace(self, workspace: Workspace) -> None:
        project_ids = select(Project.id).where(Project.workspace_id == workspace.id)
        with _storage_errors("delete_workspace"):
            self.db.execute(delete(Task).where(Task.project_id.in_(project_ids)))
            self.db.execute(delete(Project).where(Project.workspace_id == workspace.id))
            self.db.execute(delete(Membership).where(Membership.workspace_id == workspace.id))
            self.db.delete(workspace)
            self.db.commit()
        logger.info("workspace deleted workspace=%s", workspace.id)
