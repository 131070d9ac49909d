from app.auth.tokens import issue_access_token

def auth(user) -> dict[str, str]:
    return {"authorization": f"bearer {issue_access_token(user.id)}"}

def test_owner_admin_member_lifecycle(client, make_user):
    u1 = make_user("u1")
    u2 = make_user("u2")

    # creator gets owner automatically
    r = client.post("/workspaces", json={"name": "w"}, headers=auth(u1))
    assert r.status_code == 200, r.text
    assert r.json()["role"] == "owner"
    ws = r.json()["id"]

    r = client.get(f"/workspaces/{ws}/members", headers=auth(u1))
    assert r.status_code == 200
    assert [(m["user_id"], m["role"]) for m in r.json()] == [(str(u1.id), "owner")]

    # owner invites u2 as member
    r = client.post(f"/workspaces/{ws}/members", json={"email": u2.email, "role": "member"}, headers=auth(u1))
    assert r.status_code == 200, r.text
    assert r.json()["role"] == "member"

    r = client.post(f"/workspaces/{ws}/projects", json={"name": "p"}, headers=auth(u1))
    assert r.status_code == 200, r.text
    project = r.json()["id"]

    # member lacks DELETE_PROJECT
    r = client.delete(f"/projects/{project}", headers=auth(u2))
    assert r.status_code == 403

    # promote to admin, same call now goes through
    r = client.patch(f"/workspaces/{ws}/members/{u2.id}", json={"role": "admin"}, headers=auth(u1))
    assert r.status_code == 200, r.text
    assert r.json()["role"] == "admin"

    r = client.delete(f"/projects/{project}", headers=auth(u2))
    assert r.status_code == 200, r.text

    # admin never deletes the workspace
    r = client.delete(f"/workspaces/{ws}", headers=auth(u2))
    assert r.status_code == 403

    # sole owner demoting self
    r = client.patch(f"/workspaces/{ws}/members/{u1.id}", json={"role": "member"}, headers=auth(u1))
    assert r.status_code == 409
    assert r.json()["code"] == "last_owner_violation"

    r = client.get(f"/workspaces/{ws}/members", headers=auth(u1))
    roles = {m["user_id"]: m["role"] for m in r.json()}
    assert roles == {str(u1.id): "owner", str(u2.id): "admin"}

def test_rbac_projects_and_tasks(client, make_user):
    owner = make_user("owner")
    admin = make_user("admin")
    member = make_user("member")

    r = client.post("/workspaces", json={"name": "rbac-ws"}, headers=auth(owner))
    assert r.status_code == 200
    ws = r.json()["id"]

    for u, role in ((admin, "admin"), (member, "member")):
        r = client.post(f"/workspaces/{ws}/members", json={"email": u.email, "role": role}, headers=auth(owner))
        assert r.status_code == 200, r.text

    # owner can create project
    r = client.post(f"/workspaces/{ws}/projects", json={"name": "p-owner"}, headers=auth(owner))
    assert r.status_code == 200

    # admin can create project
    r = client.post(f"/workspaces/{ws}/projects", json={"name": "p-admin"}, headers=auth(admin))
    assert r.status_code == 200
    project_id = r.json()["id"]

    # member cannot create project
    r = client.post(f"/workspaces/{ws}/projects", json={"name": "p-member"}, headers=auth(member))
    assert r.status_code == 403

    # member can create task
    r = client.post(f"/projects/{project_id}/tasks", json={"title": "t-member"}, headers=auth(member))
    assert r.status_code == 200, r.text
    assert r.json()["workspace_id"] == ws
    task_id = r.json()["id"]

    # member can edit but not delete
    r = client.patch(f"/tasks/{task_id}", json={"title": "t-member-2", "status": "doing"}, headers=auth(member))
    assert r.status_code == 200
    assert r.json()["status"] == "doing"

    r = client.delete(f"/tasks/{task_id}", headers=auth(member))
    assert r.status_code == 403

    r = client.delete(f"/tasks/{task_id}", headers=auth(admin))
    assert r.status_code == 200
