import uuid
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

import app.models  # noqa: F401
from app.auth.tokens import issue_access_token
from app.db import Base, SessionLocal, engine
from app.models.enums import Role
from app.models.membership import Membership
from app.models.project import Project
from app.models.task import Task
from app.models.user import User
from app.models.workspace import Workspace
from app.store import Store

@dataclass
class SeedResult:
    users: dict[str, tuple[str, uuid.UUID]]
    workspace_id: uuid.UUID
    project_id: uuid.UUID
    task_id: uuid.UUID

def get_or_create_membership(db: Session, user_id: uuid.UUID, workspace_id: uuid.UUID, role: Role) -> Membership:
    m = db.get(Membership, {"user_id": user_id, "workspace_id": workspace_id})
    if m is None:
        m = Membership(user_id=user_id, workspace_id=workspace_id, role=role)
        db.add(m)
        db.flush()
    elif m.role != role:
        m.role = role
        db.add(m)
        db.flush()
    return m

def get_or_create_workspace(db: Session, name: str, owner: User) -> Workspace:
    w = db.scalar(select(Workspace).where(Workspace.name == name))
    if w is None:
        w = Workspace(name=name, settings={}, created_by=owner.id)
        db.add(w)
        db.flush()
    return w

def get_or_create_project(db: Session, workspace_id: uuid.UUID, name: str) -> Project:
    p = db.scalar(select(Project).where(Project.workspace_id == workspace_id, Project.name == name))
    if p is None:
        p = Project(workspace_id=workspace_id, name=name)
        db.add(p)
        db.flush()
    return p

def get_or_create_task(
    db: Session,
    project_id: uuid.UUID,
    title: str,
    created_by: uuid.UUID,
    assigned_to: uuid.UUID | None,
) -> Task:
    t = db.scalar(select(Task).where(Task.project_id == project_id, Task.title == title))
    if t is None:
        t = Task(project_id=project_id, title=title, created_by=created_by, assigned_to=assigned_to)
        db.add(t)
        db.flush()
    elif t.assigned_to != assigned_to:
        # keep it stable if you re-run seed
        t.assigned_to = assigned_to
        db.add(t)
        db.flush()
    return t

def seed() -> SeedResult:
    Base.metadata.create_all(engine)
    db = SessionLocal()
    try:
        store = Store(db)
        owner = store.get_or_create_user("owner@example.com", "owner")
        admin = store.get_or_create_user("admin@example.com", "admin")
        member = store.get_or_create_user("member@example.com", "member")

        ws = get_or_create_workspace(db, "seeded workspace", owner)

        get_or_create_membership(db, owner.id, ws.id, Role.owner)
        get_or_create_membership(db, admin.id, ws.id, Role.admin)
        get_or_create_membership(db, member.id, ws.id, Role.member)

        project = get_or_create_project(db, ws.id, "seeded project")
        task = get_or_create_task(db, project.id, "seeded task", created_by=owner.id, assigned_to=member.id)

        db.commit()

        return SeedResult(
            users={role: (u.email, u.id) for role, u in (("owner", owner), ("admin", admin), ("member", member))},
            workspace_id=ws.id,
            project_id=project.id,
            task_id=task.id,
        )
    finally:
        db.close()

if __name__ == "__main__":
    r = seed()
    print("seed complete")
    print(f"workspace_id={r.workspace_id}")
    print(f"project_id={r.project_id}")
    print(f"task_id={r.task_id}")
    print("users:")
    for role, (email, user_id) in r.users.items():
        print(f"  {role}: {email}")
        print(f"    token: {issue_access_token(user_id)}")
