from app.imatrix import audit as audit_module
from app.imatrix.audit import audit_log
from app.imatrix.db import session_scope
from app.imatrix.models import AuditLog


def test_audit_log_writes_row(app):
    with app.app_context():
        assert audit_log("someone@example.com", "CREATE", "Product", 7, {"name": "Widget"}) is True
    with session_scope(app) as s:
        log = s.query(AuditLog).one()
        assert log.entity_id == "7"
        assert log.meta == {"name": "Widget"}
        assert log.request_id is None


def test_audit_failure_is_swallowed(app, monkeypatch):
    def _boom(_app):
        raise RuntimeError("db down")

    monkeypatch.setattr(audit_module, "session_scope", _boom)
    with app.app_context():
        assert audit_log("someone@example.com", "CREATE", "Product", 1) is False


def test_audit_failure_does_not_break_create(app, client, editor_headers, monkeypatch):
    def _boom(_app):
        raise RuntimeError("db down")

    monkeypatch.setattr(audit_module, "session_scope", _boom)
    r = client.post("/products", json={"name": "Sturdy Gate"}, headers=editor_headers)
    assert r.status_code == 201
    assert r.json["data"]["slug"] == "sturdy-gate"


def test_audit_list_filters(client, admin_headers, editor_headers):
    client.post("/categories", json={"name": "Alpha"}, headers=editor_headers)
    client.post("/products", json={"name": "Beta"}, headers=admin_headers)

    r = client.get("/audit", headers=admin_headers)
    assert r.status_code == 200
    actions = [(a["action"], a["entity"]) for a in r.json["data"]]
    # newest first
    assert actions[0] == ("CREATE", "Product")

    r = client.get("/audit?actor=EDITOR@", headers=admin_headers)
    assert {a["actorEmail"] for a in r.json["data"]} == {"editor@example.com"}

    r = client.get("/audit?entity=Category&action=CREATE", headers=admin_headers)
    assert len(r.json["data"]) == 1
    assert r.json["data"][0]["meta"] == {"name": "Alpha"}

    r = client.get("/audit?limit=1", headers=admin_headers)
    assert len(r.json["data"]) == 1


def test_audit_admin_only(client, editor_headers):
    assert client.get("/audit", headers=editor_headers).status_code == 403
