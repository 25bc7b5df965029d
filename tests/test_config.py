import pytest

from app.imatrix import create_app
from app.imatrix.config import DEFAULT_CORS_ORIGINS, load_config


def test_defaults(monkeypatch):
    for k in ("ENV", "DATABASE_URL", "JWT_EXPIRES_HOURS", "UPLOAD_DIR", "MAX_FILE_SIZE", "CORS_ORIGIN"):
        monkeypatch.delenv(k, raising=False)
    cfg = load_config()
    assert cfg["DATABASE_URL"] == "sqlite:///imatrix.db"
    assert cfg["JWT_EXPIRES_HOURS"] == 24
    assert cfg["UPLOAD_DIR"] == "public/uploads"
    assert cfg["MAX_FILE_SIZE"] == 10 * 1024 * 1024
    assert cfg["MAX_DOWNLOAD_FILE_SIZE"] == 50 * 1024 * 1024
    assert cfg["CORS_ORIGINS"] == DEFAULT_CORS_ORIGINS


def test_cors_origin_env_is_appended(monkeypatch):
    monkeypatch.setenv("CORS_ORIGIN", "https://imatix.netlify.app/, http://localhost:5173")
    origins = load_config()["CORS_ORIGINS"]
    assert origins[-1] == "https://imatix.netlify.app"
    assert origins.count("http://localhost:5173") == 1


def test_bad_integer(monkeypatch):
    monkeypatch.setenv("MAX_FILE_SIZE", "ten")
    with pytest.raises(RuntimeError, match="MAX_FILE_SIZE"):
        load_config()


def test_production_requires_postgres(monkeypatch):
    monkeypatch.setenv("ENV", "production")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///prod.db")
    monkeypatch.setenv("SECRET_KEY", "s3cret")
    monkeypatch.setenv("JWT_SECRET", "jwt-s3cret")
    with pytest.raises(RuntimeError, match="Postgres"):
        create_app()


def test_production_requires_jwt_secret(monkeypatch):
    monkeypatch.setenv("ENV", "production")
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@localhost/imatrix")
    monkeypatch.setenv("SECRET_KEY", "s3cret")
    monkeypatch.delenv("JWT_SECRET", raising=False)
    with pytest.raises(RuntimeError, match="JWT_SECRET"):
        create_app()
