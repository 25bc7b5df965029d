import pytest

from app.imatrix.storage import LocalStorage, StorageError


def test_health_ok(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json["ok"] is True
    assert r.json["status"] == "healthy"
    assert r.json["environment"] == "test"
    assert r.json["uptime"] >= 0


def test_healthz_plain(client):
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.data == b"ok"


def test_index_lists_endpoints(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json["endpoints"]["products"] == "/products"
    assert r.json["endpoints"]["audit"] == "/audit"


def test_unknown_route_is_json_404(client):
    r = client.get("/nope")
    assert r.status_code == 404
    assert r.json == {"ok": False, "error": "Route not found", "path": "/nope"}


def test_method_not_allowed(client):
    r = client.put("/health")
    assert r.status_code == 405
    assert r.json["ok"] is False


def test_cors_allowed_origin_gets_headers(client):
    r = client.get("/health", headers={"Origin": "http://localhost:5173"})
    assert r.status_code == 200
    assert r.headers["Access-Control-Allow-Origin"] == "http://localhost:5173"
    assert r.headers["Access-Control-Allow-Credentials"] == "true"


def test_cors_preflight(client):
    r = client.options(
        "/posts",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Authorization, Content-Type",
        },
    )
    assert r.status_code == 204
    assert "Authorization" in r.headers["Access-Control-Allow-Headers"]


def test_cors_rejects_unknown_origin(client):
    r = client.get("/products", headers={"Origin": "https://evil.example"})
    assert r.status_code == 403
    assert r.json["error"] == "CORS policy violation"


def test_malformed_json_body(client, admin_headers):
    r = client.post("/categories", data="{not json", headers={**admin_headers, "Content-Type": "application/json"})
    assert r.status_code == 400
    assert r.json["error"] == "Malformed JSON body"


def test_validation_error_shape(client, admin_headers):
    r = client.post("/categories", json={}, headers=admin_headers)
    assert r.status_code == 400
    assert r.json["ok"] is False
    assert r.json["error"][0]["field"] == "name"


def test_invalid_limit(client):
    r = client.get("/products?limit=abc")
    assert r.status_code == 400


def _boom():
    raise RuntimeError("database exploded")


def test_unhandled_error_shows_message_outside_production(app):
    app.view_functions["routes.healthz"] = _boom
    r = app.test_client().get("/healthz")
    assert r.status_code == 500
    assert r.json == {"ok": False, "error": "database exploded"}


def test_unhandled_error_hidden_in_production(app):
    app.view_functions["routes.healthz"] = _boom
    app.config["ENV"] = "production"
    r = app.test_client().get("/healthz")
    assert r.status_code == 500
    assert r.json["error"] == "Internal server error"


def test_uploads_are_public_to_any_origin(app, client, tmp_path):
    (tmp_path / "uploads").mkdir(parents=True, exist_ok=True)
    (tmp_path / "uploads" / "brochure.pdf").write_bytes(b"%PDF-1.4")
    r = client.get("/uploads/brochure.pdf", headers={"Origin": "https://evil.example"})
    assert r.status_code == 200
    assert r.headers["Access-Control-Allow-Origin"] == "*"
    assert r.data == b"%PDF-1.4"


def test_uploads_cannot_escape_upload_dir(client, tmp_path):
    (tmp_path / "secret.txt").write_text("top secret")
    r = client.get("/uploads/..%2fsecret.txt")
    assert r.status_code == 404
    assert b"top secret" not in r.data
    assert client.get("/uploads/..%2f..%2fetc/passwd").status_code == 404


def test_local_storage_rejects_traversal(tmp_path):
    storage = LocalStorage(root=tmp_path / "uploads")
    with pytest.raises(StorageError):
        storage.open("../secret.txt")
    with pytest.raises(StorageError):
        storage.exists("../../etc/passwd")
