import pytest
from werkzeug.security import generate_password_hash

from app.imatrix import create_app
from app.imatrix.db import session_scope
from app.imatrix.models import Base, User

PASSWORD = "pw-123456"


@pytest.fixture()
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("JWT_SECRET", "test-jwt-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("STORAGE_BACKEND", "local")
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "uploads"))
    for k in (
        "S3_ENDPOINT",
        "S3_REGION",
        "S3_BUCKET",
        "S3_ACCESS_KEY_ID",
        "S3_SECRET_ACCESS_KEY",
        "PUBLIC_BASE_URL",
        "CORS_ORIGIN",
        "SMTP_HOST",
        "CONTACT_NOTIFY_EMAIL",
        "MAX_FILE_SIZE",
        "MAX_DOWNLOAD_FILE_SIZE",
    ):
        monkeypatch.delenv(k, raising=False)

    app = create_app()
    engine = app.extensions["sqlalchemy_engine"]
    Base.metadata.create_all(bind=engine)

    with session_scope(app) as s:
        for email, role in (
            ("admin@example.com", "ADMIN"),
            ("editor@example.com", "EDITOR"),
            ("viewer@example.com", "VIEWER"),
        ):
            s.add(User(email=email, password_hash=generate_password_hash(PASSWORD), role=role, is_active=True))

    return app


@pytest.fixture()
def client(app):
    return app.test_client()


def login(client, email: str, password: str = PASSWORD) -> dict:
    r = client.post("/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.json
    return {"Authorization": f"Bearer {r.json['data']['token']}"}


@pytest.fixture()
def admin_headers(client):
    return login(client, "admin@example.com")


@pytest.fixture()
def editor_headers(client):
    return login(client, "editor@example.com")


@pytest.fixture()
def viewer_headers(client):
    return login(client, "viewer@example.com")
