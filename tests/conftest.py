import os

# the app module builds an engine at import time
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.db import Base, get_db
from app.main import create_app
from app.models.enums import Role
from app.models.membership import Membership
from app.models.project import Project
from app.models.task import Task
from app.models.user import User
from app.store import Store

@pytest.fixture()
def db_session() -> Session:
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session: Session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()

@pytest.fixture()
def store(db_session: Session) -> Store:
    return Store(db_session)

@pytest.fixture()
def client(db_session: Session) -> TestClient:
    app = create_app()

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    return TestClient(app)

@pytest.fixture()
def make_user(db_session: Session):
    def _make(prefix: str = "user") -> User:
        # unique per test run to avoid collisions
        u = User(email=f"{prefix}+{uuid.uuid4().hex[:10]}@example.com", name=prefix)
        db_session.add(u)
        db_session.commit()
        db_session.refresh(u)
        return u

    return _make

@pytest.fixture()
def make_member(store: Store):
    def _make(user: User, workspace_id: uuid.UUID, role: Role) -> Membership:
        return store.add_membership(user.id, workspace_id, role)

    return _make

@pytest.fixture()
def make_project(store: Store):
    def _make(workspace_id: uuid.UUID, name: str = "p") -> Project:
        return store.create_project(workspace_id, name)

    return _make

@pytest.fixture()
def make_task(store: Store):
    def _make(project_id: uuid.UUID, created_by: uuid.UUID, title: str = "t") -> Task:
        return store.create_task(project_id, title, created_by=created_by)

    return _make
