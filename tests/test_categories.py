def test_categories_ordered_by_name_with_post_count(client, editor_headers):
    zeta = client.post("/categories", json={"name": "Zeta"}, headers=editor_headers).json["data"]
    alpha = client.post("/categories", json={"name": "Alpha"}, headers=editor_headers).json["data"]
    assert alpha["postCount"] == 0

    client.post("/posts", json={"title": "One", "categoryIds": [zeta["id"]]}, headers=editor_headers)
    client.post("/posts", json={"title": "Two", "categoryIds": [zeta["id"], alpha["id"]]}, headers=editor_headers)

    r = client.get("/categories")
    assert r.status_code == 200
    assert [(c["name"], c["postCount"]) for c in r.json["data"]] == [("Alpha", 1), ("Zeta", 2)]


def test_category_detail(client, editor_headers):
    cat = client.post("/categories", json={"name": "Access Control"}, headers=editor_headers).json["data"]
    assert cat["slug"] == "access-control"
    assert client.get(f"/categories/id/{cat['id']}").json["data"]["name"] == "Access Control"
    assert client.get("/categories/id/999").status_code == 404


def test_rename_category_updates_slug(client, editor_headers):
    cat = client.post("/categories", json={"name": "Old"}, headers=editor_headers).json["data"]
    r = client.patch(f"/categories/{cat['id']}", json={"name": "New Name"}, headers=editor_headers)
    assert r.status_code == 200
    assert r.json["data"]["slug"] == "new-name"


def test_delete_category_detaches_posts(client, admin_headers, editor_headers):
    cat = client.post("/categories", json={"name": "Temp"}, headers=editor_headers).json["data"]
    post = client.post("/posts", json={"title": "Kept", "categoryIds": [cat["id"]]}, headers=editor_headers).json["data"]

    assert client.delete(f"/categories/{cat['id']}", headers=editor_headers).status_code == 403
    assert client.delete(f"/categories/{cat['id']}", headers=admin_headers).status_code == 200

    r = client.get(f"/posts/id/{post['id']}", headers=editor_headers)
    assert r.status_code == 200
    assert r.json["data"]["categories"] == []


def test_post_count_follows_post_delete(client, admin_headers, editor_headers):
    cat = client.post("/categories", json={"name": "News"}, headers=editor_headers).json["data"]
    post = client.post("/posts", json={"title": "Gone soon", "categoryIds": [cat["id"]]}, headers=editor_headers)
    assert client.get(f"/categories/id/{cat['id']}").json["data"]["postCount"] == 1

    assert client.delete(f"/posts/{post.json['data']['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"/categories/id/{cat['id']}").json["data"]["postCount"] == 0
