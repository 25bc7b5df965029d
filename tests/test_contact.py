from email.errors import HeaderParseError

from app.imatrix.modules.contact import service as contact_service


class _FakeSMTP:
    sent: list = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        pass

    def login(self, username, password):
        pass

    def send_message(self, msg):
        # flatten like smtplib does so header errors surface here
        msg.as_string()
        _FakeSMTP.sent.append(msg)


class _BadHeaderSMTP(_FakeSMTP):
    def send_message(self, msg):
        raise HeaderParseError("header value appears to contain an embedded header")


class _DownSMTP(_FakeSMTP):
    def __init__(self, host, port, timeout=None):
        raise ConnectionRefusedError("smtp down")


MESSAGE = {
    "name": "Nimal Perera",
    "email": "nimal@example.com",
    "phone": "+94 77 123 4567",
    "company": "Acme",
    "message": "Please send a quote for 10 terminals.",
}


def test_submit_contact(client, editor_headers):
    r = client.post("/contact", json=MESSAGE)
    assert r.status_code == 201
    assert r.json == {"ok": True, "message": "Message sent successfully"}

    r = client.get("/contact", headers=editor_headers)
    assert r.status_code == 200
    assert r.json["data"][0]["company"] == "Acme"

    mid = r.json["data"][0]["id"]
    assert client.get(f"/contact/{mid}", headers=editor_headers).json["data"]["email"] == "nimal@example.com"


def test_submit_validation(client):
    r = client.post("/contact", json={"name": "x", "email": "bad", "message": ""})
    assert r.status_code == 400
    fields = {e["field"] for e in r.json["error"]}
    assert {"email", "message"} <= fields


def test_inbox_requires_editor(client, viewer_headers):
    assert client.get("/contact").status_code == 401
    assert client.get("/contact", headers=viewer_headers).status_code == 403


def test_delete_message(client, admin_headers, editor_headers):
    client.post("/contact", json=MESSAGE)
    mid = client.get("/contact", headers=editor_headers).json["data"][0]["id"]

    assert client.delete(f"/contact/{mid}", headers=editor_headers).status_code == 403
    assert client.delete(f"/contact/{mid}", headers=admin_headers).status_code == 200
    r = client.delete(f"/contact/{mid}", headers=admin_headers)
    assert r.status_code == 404
    assert r.json["error"] == "Message not found"


def test_notification_sent_when_configured(app, client, monkeypatch):
    monkeypatch.setattr(contact_service.smtplib, "SMTP", _FakeSMTP)
    _FakeSMTP.sent = []
    app.config["SMTP_HOST"] = "smtp.example.com"
    app.config["CONTACT_NOTIFY_EMAIL"] = "sales@example.com"

    assert client.post("/contact", json=MESSAGE).status_code == 201
    assert len(_FakeSMTP.sent) == 1
    msg = _FakeSMTP.sent[0]
    assert msg["To"] == "sales@example.com"
    assert msg["Reply-To"] == "nimal@example.com"
    assert "Nimal Perera" in msg["Subject"]


def test_notification_skipped_without_config(client, monkeypatch):
    monkeypatch.setattr(contact_service.smtplib, "SMTP", _DownSMTP)
    assert client.post("/contact", json=MESSAGE).status_code == 201


def test_notification_failure_does_not_fail_submission(app, client, editor_headers, monkeypatch):
    monkeypatch.setattr(contact_service.smtplib, "SMTP", _DownSMTP)
    app.config["SMTP_HOST"] = "smtp.example.com"
    app.config["CONTACT_NOTIFY_EMAIL"] = "sales@example.com"

    assert client.post("/contact", json=MESSAGE).status_code == 201
    assert len(client.get("/contact", headers=editor_headers).json["data"]) == 1


def test_name_with_newline_does_not_inject_headers(app, client, editor_headers, monkeypatch):
    monkeypatch.setattr(contact_service.smtplib, "SMTP", _FakeSMTP)
    _FakeSMTP.sent = []
    app.config["SMTP_HOST"] = "smtp.example.com"
    app.config["CONTACT_NOTIFY_EMAIL"] = "sales@example.com"

    r = client.post("/contact", json={**MESSAGE, "name": "Nimal\nBcc: victim@example.com"})
    assert r.status_code == 201
    msg = _FakeSMTP.sent[0]
    assert msg["Bcc"] is None
    assert "\n" not in msg["Subject"]
    assert len(client.get("/contact", headers=editor_headers).json["data"]) == 1


def test_header_error_while_sending_is_logged_not_raised(app, client, monkeypatch):
    monkeypatch.setattr(contact_service.smtplib, "SMTP", _BadHeaderSMTP)
    app.config["SMTP_HOST"] = "smtp.example.com"
    app.config["CONTACT_NOTIFY_EMAIL"] = "sales@example.com"

    assert client.post("/contact", json=MESSAGE).status_code == 201
