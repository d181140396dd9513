import pytest


@pytest.fixture
def acme(make_client):
    return make_client("Acme Corp")


def test_printers_crud(client, acme):
    base = f"/api/clients/{acme['id']}/printers"
    client.post(base, json={"location": "Upstairs", "ip_address": "10.0.0.20", "vendor": "HP"})
    r = client.post(base, json={"location": "Lobby", "model": "M479"})
    assert r.status_code == 201
    printer = r.json()

    assert [p["location"] for p in client.get(base).json()] == ["Lobby", "Upstairs"]

    r = client.put(f"/api/printers/{printer['id']}", json={"location": "Lobby", "model": "M480"})
    assert r.json()["model"] == "M480"

    assert client.delete(f"/api/printers/{printer['id']}").json() == {"ok": True}
    assert len(client.get(base).json()) == 1


def test_assets_crud(client, acme):
    base = f"/api/clients/{acme['id']}/assets"
    r = client.post(base, json={"name": "FW-01", "type": "Firewall", "purchase_date": "2023-05-02"})
    assert r.status_code == 201
    asset = r.json()
    assert asset["status"] == "ACTIVE"
    assert asset["purchase_date"] == "2023-05-02"

    r = client.put(f"/api/assets/{asset['id']}", json={"name": "FW-01", "status": "RETIRED"})
    assert r.json()["status"] == "RETIRED"

    assert client.post(base, json={"name": "X", "status": "LOST"}).status_code == 422
    assert client.delete(f"/api/assets/{asset['id']}").status_code == 200
    assert client.delete(f"/api/assets/{asset['id']}").status_code == 404


def test_applications_crud(client, acme):
    base = f"/api/clients/{acme['id']}/applications"
    client.post(base, json={"name": "QuickBooks", "critical": True, "expiry_date": "2025-12-31"})
    client.post(base, json={"name": "Adobe Reader"})

    apps = client.get(base).json()
    assert [a["name"] for a in apps] == ["Adobe Reader", "QuickBooks"]
    assert apps[1]["critical"] is True

    r = client.put(f"/api/applications/{apps[0]['id']}", json={"name": "Acrobat Reader", "version": "24"})
    assert r.json()["version"] == "24"


def test_panels_scoped_to_existing_client(client):
    assert client.get("/api/clients/999/printers").status_code == 404
    assert client.post("/api/clients/999/assets", json={"name": "x"}).status_code == 404
