from datetime import date, timedelta


def test_dashboard_summary(client, make_client):
    acme = make_client("Acme Corp")
    make_client("Globex")
    old = (date.today() - timedelta(days=30)).isoformat()
    future = (date.today() + timedelta(days=5)).isoformat()

    for expected in (old, future):
        client.post("/api/packages", json={"client_id": acme["id"], "package_type": "Laptop",
                                           "received_by": "Alice", "expected_date": expected})
    done = client.post("/api/packages", json={"client_id": acme["id"], "package_type": "Server",
                                              "received_by": "Bob", "expected_date": old}).json()
    client.post(f"/api/packages/{done['id']}/complete")

    data = client.get("/api/dashboard").json()
    assert data["total_clients"] == 2
    assert data["pending_inbound"] == 2
    assert data["overdue_inbound"] == 1
    assert data["tiers"] == {"ok": 1, "warning": 0, "critical": 1}
    assert len(data["recent_activity"]) == 5
    assert data["recent_activity"][0]["details"].startswith("Completed inbound package")
    assert len(data["recent_inbound"]) == 3
    assert data["recent_inbound"][0]["client_name"] == "Acme Corp"


def test_activity_feed_limit(client, make_client):
    for i in range(3):
        make_client(f"Client {i}")
    feed = client.get("/api/activity", params={"limit": 2}).json()
    assert [a["details"] for a in feed] == ["Created new client: Client 2", "Created new client: Client 1"]
    assert feed[0]["actor"] == "tech@example.com"
