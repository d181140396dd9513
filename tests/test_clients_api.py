from sqlalchemy.exc import ProgrammingError

from mspdesk.app.api import app
from mspdesk.app.db import get_db
from mspdesk.app.models import ActivityLog


def test_create_and_list_sorted(client, make_client):
    make_client("Zeta Ltd")
    make_client("Acme Corp", email="it@acme.test")
    names = [c["name"] for c in client.get("/api/clients").json()]
    assert names == ["Acme Corp", "Zeta Ltd"]


def test_name_is_required(client, db):
    r = client.post("/api/clients", json={"name": "   "})
    assert r.status_code == 422
    assert client.get("/api/clients").json() == []
    assert db.query(ActivityLog).count() == 0


def test_update_client(client, make_client):
    acme = make_client("Acme Corp")
    r = client.patch(f"/api/clients/{acme['id']}", json={"phone": "555-0100", "name": None})
    assert r.status_code == 200
    assert r.json()["phone"] == "555-0100"
    assert r.json()["name"] == "Acme Corp"


def test_delete_client_cascades(client, make_client):
    acme = make_client("Acme Corp")
    client.post("/api/packages", json={"client_id": acme["id"], "package_type": "Laptop", "received_by": "A"})
    client.post(f"/api/clients/{acme['id']}/printers", json={"location": "Lobby"})

    assert client.delete(f"/api/clients/{acme['id']}").json() == {"ok": True}
    assert client.get(f"/api/clients/{acme['id']}").status_code == 404
    assert client.get("/api/packages", params={"show_completed": True}).json()["count"] == 0


def test_activity_written_for_each_change(client, make_client, db):
    acme = make_client("Acme Corp")
    client.patch(f"/api/clients/{acme['id']}", json={"notes": "VIP"})
    client.delete(f"/api/clients/{acme['id']}")

    kinds = [(a.action_type, a.details) for a in db.query(ActivityLog).order_by(ActivityLog.id)]
    assert kinds == [
        ("CREATE", "Created new client: Acme Corp"),
        ("UPDATE", "Updated client: Acme Corp"),
        ("DELETE", "Deleted client: Acme Corp"),
    ]


def test_no_actor_no_activity(client, db):
    r = client.post("/api/clients", json={"name": "Acme Corp"}, headers={"X-Actor": ""})
    assert r.status_code == 201
    assert db.query(ActivityLog).count() == 0


class _Denied:
    pgcode = "42501"


class _DeniedSession:
    def query(self, *args, **kwargs):
        raise ProgrammingError("SELECT * FROM clients", {}, _Denied())

    def close(self):
        pass


def test_permission_error_redirects_to_login(client):
    app.dependency_overrides[get_db] = lambda: _DeniedSession()
    r = client.get("/api/clients", follow_redirects=False)
    assert r.status_code == 401
    assert r.json()["login_url"] == "/login"
    assert r.headers["location"] == "/login"


def test_other_store_errors_are_500(client):
    class _Broken(_DeniedSession):
        def query(self, *args, **kwargs):
            raise ProgrammingError("SELECT * FROM clients", {}, Exception("boom"))

    app.dependency_overrides[get_db] = lambda: _Broken()
    r = client.get("/api/clients")
    assert r.status_code == 500
    assert r.json() == {"detail": "database error"}
