from app.imatrix.db import session_scope
from app.imatrix.modules.products import service as products_service
from app.imatrix.models import Media, product_media


def _media(app, name: str = "photo.jpg") -> int:
    with session_scope(app) as s:
        m = Media(url=f"/uploads/{name}", file_name=name, type="image", storage_key=name, content_type="image/jpeg")
        s.add(m)
        s.flush()
        return m.id


def test_create_product(client, editor_headers):
    r = client.post(
        "/products",
        json={
            "name": "i4-AC05 Terminal",
            "summary": "Fingerprint + RFID",
            "specs": {"capacity": "3000 templates", "connectivity": ["TCP/IP", "USB"]},
            "price": "Contact for pricing",
            "featured": True,
        },
        headers=editor_headers,
    )
    assert r.status_code == 201
    data = r.json["data"]
    assert data["slug"] == "i4-ac05-terminal"
    assert data["specs"]["connectivity"] == ["TCP/IP", "USB"]
    assert data["featured"] is True
    assert data["media"] == []


def test_list_featured_first_then_newest(client, editor_headers):
    for name, featured in (("Old Plain", False), ("Star", True), ("New Plain", False)):
        client.post("/products", json={"name": name, "featured": featured}, headers=editor_headers)

    r = client.get("/products")
    assert [p["name"] for p in r.json["data"]] == ["Star", "New Plain", "Old Plain"]

    r = client.get("/products?featured=true")
    assert [p["name"] for p in r.json["data"]] == ["Star"]


def test_search_name_and_summary(client, editor_headers):
    client.post("/products", json={"name": "Door Phone", "summary": "video intercom"}, headers=editor_headers)
    client.post("/products", json={"name": "Alarm", "summary": "GSM"}, headers=editor_headers)
    r = client.get("/products?search=intercom")
    assert [p["name"] for p in r.json["data"]] == ["Door Phone"]


def test_get_by_id_and_slug(client, editor_headers):
    pid = client.post("/products", json={"name": "Turnstile"}, headers=editor_headers).json["data"]["id"]
    assert client.get(f"/products/id/{pid}").json["data"]["name"] == "Turnstile"
    assert client.get("/products/turnstile").json["data"]["id"] == pid
    r = client.get("/products/missing")
    assert r.status_code == 404
    assert r.json["error"] == "Product not found"


def test_update_only_given_fields(client, editor_headers):
    pid = client.post(
        "/products", json={"name": "Reader", "summary": "keep me", "price": "100"}, headers=editor_headers
    ).json["data"]["id"]
    r = client.patch(f"/products/{pid}", json={"price": "120"}, headers=editor_headers)
    assert r.status_code == 200
    assert r.json["data"]["price"] == "120"
    assert r.json["data"]["summary"] == "keep me"
    assert r.json["data"]["slug"] == "reader"

    r = client.patch(f"/products/{pid}", json={"name": "Reader Pro"}, headers=editor_headers)
    assert r.json["data"]["slug"] == "reader-pro"


def test_update_rejects_null_name(client, editor_headers):
    pid = client.post("/products", json={"name": "Reader"}, headers=editor_headers).json["data"]["id"]
    assert client.patch(f"/products/{pid}", json={"name": None}, headers=editor_headers).status_code == 400


def test_add_media_idempotent(app, client, editor_headers):
    pid = client.post("/products", json={"name": "Camera"}, headers=editor_headers).json["data"]["id"]
    mid = _media(app)

    for _ in range(2):
        r = client.post(f"/products/{pid}/media", json={"mediaId": mid}, headers=editor_headers)
        assert r.status_code == 200
    assert [m["id"] for m in r.json["data"]["media"]] == [mid]

    assert client.post(f"/products/{pid}/media", json={"mediaId": 999}, headers=editor_headers).status_code == 404
    assert client.post("/products/999/media", json={"mediaId": mid}, headers=editor_headers).status_code == 404


def test_delete_product_cascades_media_links(app, client, admin_headers, editor_headers):
    pid = client.post("/products", json={"name": "Gone"}, headers=editor_headers).json["data"]["id"]
    mid = _media(app)
    client.post(f"/products/{pid}/media", json={"mediaId": mid}, headers=editor_headers)

    assert client.delete(f"/products/{pid}", headers=editor_headers).status_code == 403
    assert client.delete(f"/products/{pid}", headers=admin_headers).status_code == 200
    assert client.get(f"/products/id/{pid}").status_code == 404

    with session_scope(app) as s:
        assert s.query(product_media).count() == 0
        assert s.get(Media, mid) is not None


def test_duplicate_slug_at_commit_is_conflict(client, editor_headers, monkeypatch):
    assert client.post("/products", json={"name": "Eagle-i PRO"}, headers=editor_headers).status_code == 201

    # a concurrent writer taking the slug between lookup and commit
    monkeypatch.setattr(products_service, "unique_slug", lambda *a, **kw: "eagle-i-pro")
    r = client.post("/products", json={"name": "Eagle-i PRO"}, headers=editor_headers)
    assert r.status_code == 409
    assert r.json["ok"] is False
