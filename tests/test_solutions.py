def test_solution_crud(client, admin_headers, editor_headers):
    r = client.post(
        "/solutions",
        json={
            "name": "CCTV with AI Analytics",
            "description": "Detect events that matter",
            "benefits": ["Real-time alerts"],
            "features": ["People counting", "Line crossing detection"],
        },
        headers=editor_headers,
    )
    assert r.status_code == 201
    sol = r.json["data"]
    assert sol["slug"] == "cctv-with-ai-analytics"
    assert sol["features"] == ["People counting", "Line crossing detection"]

    assert client.get("/solutions/cctv-with-ai-analytics").json["data"]["id"] == sol["id"]
    assert client.get(f"/solutions/id/{sol['id']}").json["data"]["benefits"] == ["Real-time alerts"]

    r = client.patch(f"/solutions/{sol['id']}", json={"benefits": ["Remote playback"]}, headers=editor_headers)
    assert r.json["data"]["benefits"] == ["Remote playback"]
    assert r.json["data"]["features"] == ["People counting", "Line crossing detection"]

    assert client.delete(f"/solutions/{sol['id']}", headers=editor_headers).status_code == 403
    assert client.delete(f"/solutions/{sol['id']}", headers=admin_headers).status_code == 200
    assert client.get("/solutions/cctv-with-ai-analytics").status_code == 404


def test_solution_list_and_search(client, editor_headers):
    client.post("/solutions", json={"name": "Guard Patrolling", "description": "RFID tours"}, headers=editor_headers)
    client.post("/solutions", json={"name": "Access Control"}, headers=editor_headers)

    r = client.get("/solutions")
    assert [s["name"] for s in r.json["data"]] == ["Access Control", "Guard Patrolling"]

    r = client.get("/solutions?search=rfid")
    assert [s["name"] for s in r.json["data"]] == ["Guard Patrolling"]


def test_solution_requires_name(client, editor_headers):
    assert client.post("/solutions", json={"description": "nameless"}, headers=editor_headers).status_code == 400
