import uuid

from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from app.auth.tokens import issue_access_token
from app.models.membership import Membership
from app.models.project import Project
from app.models.task import Task
from app.rbac.deps import get_store
from app.store import Store

def auth(user) -> dict[str, str]:
    return {"authorization": f"bearer {issue_access_token(user.id)}"}

def setup_workspace(client, owner, *members):
    ws = client.post("/workspaces", json={"name": "w"}, headers=auth(owner)).json()["id"]
    for user, role in members:
        r = client.post(f"/workspaces/{ws}/members", json={"email": user.email, "role": role}, headers=auth(owner))
        assert r.status_code == 200, r.text
    return ws

def test_sole_owner_cannot_leave(client, make_user):
    owner = make_user("owner")
    ws = setup_workspace(client, owner)

    r = client.delete(f"/workspaces/{ws}/members/{owner.id}", headers=auth(owner))
    assert r.status_code == 409
    assert r.json()["code"] == "last_owner_violation"

def test_admin_cannot_remove_sole_owner(client, make_user):
    owner = make_user("owner")
    admin = make_user("admin")
    ws = setup_workspace(client, owner, (admin, "admin"))

    r = client.delete(f"/workspaces/{ws}/members/{owner.id}", headers=auth(admin))
    assert r.status_code == 409

    r = client.patch(f"/workspaces/{ws}/members/{owner.id}", json={"role": "member"}, headers=auth(admin))
    assert r.status_code == 409

def test_member_leaves_but_cannot_kick(client, make_user):
    owner = make_user("owner")
    m1 = make_user("m1")
    m2 = make_user("m2")
    ws = setup_workspace(client, owner, (m1, "member"), (m2, "member"))

    r = client.delete(f"/workspaces/{ws}/members/{m2.id}", headers=auth(m1))
    assert r.status_code == 403

    r = client.delete(f"/workspaces/{ws}/members/{m1.id}", headers=auth(m1))
    assert r.status_code == 200

    # gone for good
    r = client.get(f"/workspaces/{ws}", headers=auth(m1))
    assert r.status_code == 403

def test_admin_manages_members_only(client, make_user):
    owner = make_user("owner")
    a1 = make_user("a1")
    a2 = make_user("a2")
    m = make_user("m")
    ws = setup_workspace(client, owner, (a1, "admin"), (a2, "admin"), (m, "member"))

    assert client.patch(f"/workspaces/{ws}/members/{a2.id}", json={"role": "member"}, headers=auth(a1)).status_code == 403
    assert client.delete(f"/workspaces/{ws}/members/{a2.id}", headers=auth(a1)).status_code == 403
    assert client.patch(f"/workspaces/{ws}/members/{m.id}", json={"role": "admin"}, headers=auth(a1)).status_code == 403
    assert client.delete(f"/workspaces/{ws}/members/{m.id}", headers=auth(a1)).status_code == 200

    # owner can demote an admin
    r = client.patch(f"/workspaces/{ws}/members/{a2.id}", json={"role": "member"}, headers=auth(owner))
    assert r.status_code == 200
    assert r.json()["role"] == "member"

def test_unknown_member(client, make_user):
    owner = make_user("owner")
    ws = setup_workspace(client, owner)
    r = client.delete(f"/workspaces/{ws}/members/{uuid.uuid4()}", headers=auth(owner))
    assert r.status_code == 404

def test_workspace_delete_cascades(client, db_session, make_user):
    owner = make_user("owner")
    m = make_user("m")
    ws = setup_workspace(client, owner, (m, "member"))

    project = client.post(f"/workspaces/{ws}/projects", json={"name": "p"}, headers=auth(owner)).json()["id"]
    client.post(f"/projects/{project}/tasks", json={"title": "t"}, headers=auth(m))

    # member can't, owner can
    assert client.delete(f"/workspaces/{ws}", headers=auth(m)).status_code == 403
    r = client.delete(f"/workspaces/{ws}", headers=auth(owner))
    assert r.status_code == 200

    ws_id = uuid.UUID(ws)
    assert db_session.scalar(select(func.count()).select_from(Membership).where(Membership.workspace_id == ws_id)) == 0
    assert db_session.scalar(select(func.count()).select_from(Project).where(Project.workspace_id == ws_id)) == 0
    assert db_session.scalar(select(func.count()).select_from(Task)) == 0

    assert client.get(f"/workspaces/{ws}", headers=auth(owner)).status_code == 403

def test_project_delete_removes_tasks(client, db_session, make_user):
    owner = make_user("owner")
    ws = setup_workspace(client, owner)
    project = client.post(f"/workspaces/{ws}/projects", json={"name": "p"}, headers=auth(owner)).json()["id"]
    task = client.post(f"/projects/{project}/tasks", json={"title": "t"}, headers=auth(owner)).json()["id"]

    assert client.delete(f"/projects/{project}", headers=auth(owner)).status_code == 200
    assert client.get(f"/tasks/{task}", headers=auth(owner)).status_code == 403
    assert db_session.scalar(select(func.count()).select_from(Task)) == 0

class _BrokenSession:
    def _fail(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    get = _fail
    scalars = _fail
    scalar = _fail

def test_storage_outage_is_503_not_403(client, make_user):
    owner = make_user("owner")
    ws = setup_workspace(client, owner)

    client.app.dependency_overrides[get_store] = lambda: Store(_BrokenSession())
    r = client.get(f"/workspaces/{ws}", headers=auth(owner))
    assert r.status_code == 503
    assert r.json()["code"] == "storage_unavailable"

def test_member_hits_last_owner_rule_before_permissions(client, make_user):
    owner = make_user("owner")
    m = make_user("m")
    other = make_user("other")
    ws = setup_workspace(client, owner, (m, "member"), (other, "member"))

    r = client.delete(f"/workspaces/{ws}/members/{owner.id}", headers=auth(m))
    assert r.status_code == 409
    assert r.json()["code"] == "last_owner_violation"

    r = client.patch(f"/workspaces/{ws}/members/{owner.id}", json={"role": "member"}, headers=auth(m))
    assert r.status_code == 409
    assert r.json()["code"] == "last_owner_violation"

    # other members are still off limits
    r = client.patch(f"/workspaces/{ws}/members/{other.id}", json={"role": "admin"}, headers=auth(m))
    assert r.status_code == 403

def test_owner_keeping_own_role_is_a_noop(client, make_user):
    owner = make_user("owner")
    admin = make_user("admin")
    ws = setup_workspace(client, owner, (admin, "admin"))

    r = client.patch(f"/workspaces/{ws}/members/{owner.id}", json={"role": "owner"}, headers=auth(owner))
    assert r.status_code == 200
    assert r.json()["role"] == "owner"

    r = client.patch(f"/workspaces/{ws}/members/{admin.id}", json={"role": "admin"}, headers=auth(owner))
    assert r.status_code == 200
    assert r.json()["role"] == "admin"

class _CommitFails:
    """Reads go to the real session; every commit fails."""

    def __init__(self, db):
        self._db = db

    def __getattr__(self, name):
        return getattr(self._db, name)

    def commit(self):
        raise OperationalError("COMMIT", {}, Exception("connection reset"))

def test_write_outage_is_503_on_projects_and_tasks(client, db_session, make_user):
    owner = make_user("owner")
    ws = setup_workspace(client, owner)
    project = client.post(f"/workspaces/{ws}/projects", json={"name": "p"}, headers=auth(owner)).json()["id"]
    task = client.post(f"/projects/{project}/tasks", json={"title": "t"}, headers=auth(owner)).json()["id"]

    client.app.dependency_overrides[get_store] = lambda: Store(_CommitFails(db_session))

    calls = [
        ("post", f"/workspaces/{ws}/projects", {"name": "p2"}),
        ("patch", f"/projects/{project}", {"name": "renamed"}),
        ("post", f"/projects/{project}/tasks", {"title": "t2"}),
        ("patch", f"/tasks/{task}", {"title": "renamed"}),
        ("delete", f"/tasks/{task}", None),
        ("put", f"/workspaces/{ws}/settings", {"settings": {"theme": "dark"}}),
        ("patch", f"/workspaces/{ws}", {"name": "renamed"}),
    ]
    for method, url, body in calls:
        kwargs = {"headers": auth(owner)}
        if body is not None:
            kwargs["json"] = body
        r = client.request(method.upper(), url, **kwargs)
        assert r.status_code == 503, (method, url, r.text)
        assert r.json()["code"] == "storage_unavailable"
        db_session.rollback()
