def test_root_ok(client):
    r = client.get("/")
    assert r.status_code == 200
    data = r.json()
    assert "message" in data


def test_version_ok(client):
    r = client.get("/version")
    assert r.status_code == 200
    assert set(r.json()) == {"sha", "message", "env"}


def test_requires_auth(client):
    assert client.get("/profile").status_code == 401
    assert client.get("/groups").status_code == 401
    bad = {"Authorization": "Bearer not-a-token"}
    assert client.get("/profile", headers=bad).status_code == 401


def test_log_and_list_feed(client, new_group):
    group, owner = new_group()
    payload = {
        "date": "2025-01-01",
        "miles": 5.0,
        "notes": "Test walk",
    }
    cr = client.post(f"/groups/{group['id']}/entries", json=payload, headers=owner.headers)
    assert cr.status_code == 201, cr.text
    entry = cr.json()["entry"]
    assert entry["miles"] == 5.0

    lr = client.get(f"/groups/{group['id']}/feed", headers=owner.headers)
    assert lr.status_code == 200
    arr = lr.json()
    assert any(r["notes"] == "Test walk" for r in arr)
