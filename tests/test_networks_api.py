import pytest
from sqlalchemy.exc import ProgrammingError

from mspdesk.app.routes import networks


class _Denied:
    pgcode = "42501"


@pytest.fixture
def acme(make_client):
    return make_client("Acme Corp")


def subnet(address, vlan=1, dns=None):
    return {"subnet_address": address, "gateway": address.rsplit(".", 1)[0] + ".1",
            "dns": dns if dns is not None else ["1.1.1.1"], "dhcp_range": "", "vlan": vlan}


@pytest.fixture
def office_lan(client, acme):
    r = client.post(f"/api/clients/{acme['id']}/networks", json={
        "name": "Office", "network_type": "LAN", "description": "main floor",
        "subnets": [subnet("10.0.0.0/24"), subnet("10.0.1.0/24", vlan=20)],
    })
    assert r.status_code == 201, r.text
    return r.json()


def test_create_network_with_subnets(office_lan):
    assert office_lan["name"] == "Office"
    assert [s["subnet_address"] for s in office_lan["subnets"]] == ["10.0.0.0/24", "10.0.1.0/24"]
    assert office_lan["subnets"][1]["vlan"] == 20


def test_blank_dns_entries_dropped(client, acme):
    r = client.post(f"/api/clients/{acme['id']}/networks", json={
        "name": "Guest", "subnets": [subnet("192.168.5.0/24", dns=["", " 8.8.8.8 "])],
    })
    assert r.json()["subnets"][0]["dns"] == ["8.8.8.8"]


def test_list_by_type(client, acme, office_lan):
    client.post(f"/api/clients/{acme['id']}/networks",
                json={"name": "ISP uplink", "network_type": "WAN", "subnets": []})

    lan = client.get(f"/api/clients/{acme['id']}/networks", params={"network_type": "LAN"}).json()
    wan = client.get(f"/api/clients/{acme['id']}/networks", params={"network_type": "WAN"}).json()
    assert [n["name"] for n in lan] == ["Office"]
    assert [n["name"] for n in wan] == ["ISP uplink"]
    assert len(client.get(f"/api/clients/{acme['id']}/networks").json()) == 2


def test_update_replaces_subnets(client, office_lan):
    r = client.put(f"/api/networks/{office_lan['id']}", json={
        "name": "Office (new)", "description": "rewired", "subnets": [subnet("172.16.0.0/16")],
    })
    assert r.status_code == 200
    body = r.json()
    assert body["name"] == "Office (new)"
    assert [s["subnet_address"] for s in body["subnets"]] == ["172.16.0.0/16"]


def test_failed_subnet_insert_keeps_old_subnets(client, office_lan, monkeypatch):
    def broken_insert(db, network_id, subnets):
        raise RuntimeError("store went away")

    monkeypatch.setattr(networks, "insert_subnets", broken_insert)

    r = client.put(f"/api/networks/{office_lan['id']}", json={
        "name": "Office (new)", "subnets": [subnet("172.16.0.0/16")],
    })
    assert r.status_code == 500

    after = client.get(f"/api/networks/{office_lan['id']}").json()
    assert after["name"] == "Office"
    assert [s["subnet_address"] for s in after["subnets"]] == ["10.0.0.0/24", "10.0.1.0/24"]


def test_denied_subnet_insert_redirects_to_login(client, office_lan, monkeypatch):
    def denied_insert(db, network_id, subnets):
        raise ProgrammingError("INSERT INTO subnets", {}, _Denied())

    monkeypatch.setattr(networks, "insert_subnets", denied_insert)

    r = client.put(f"/api/networks/{office_lan['id']}", json={
        "name": "Office (new)", "subnets": [subnet("172.16.0.0/16")],
    })
    assert r.status_code == 401
    assert r.json()["login_url"] == "/login"

    after = client.get(f"/api/networks/{office_lan['id']}").json()
    assert after["name"] == "Office"
    assert len(after["subnets"]) == 2


def test_denied_network_create_redirects_to_login(client, acme, monkeypatch):
    def denied_insert(db, network_id, subnets):
        raise ProgrammingError("INSERT INTO subnets", {}, _Denied())

    monkeypatch.setattr(networks, "insert_subnets", denied_insert)

    r = client.post(f"/api/clients/{acme['id']}/networks", json={"name": "Office", "subnets": []})
    assert r.status_code == 401
    assert client.get(f"/api/clients/{acme['id']}/networks").json() == []


def test_delete_network(client, office_lan):
    assert client.delete(f"/api/networks/{office_lan['id']}").json() == {"ok": True}
    assert client.get(f"/api/networks/{office_lan['id']}").status_code == 404


def test_network_requires_name(client, acme):
    r = client.post(f"/api/clients/{acme['id']}/networks", json={"name": "  "})
    assert r.status_code == 422


def test_unknown_network(client):
    assert client.put("/api/networks/77", json={"name": "x"}).status_code == 404
