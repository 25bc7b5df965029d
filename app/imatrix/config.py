import os
from dataclasses import dataclass


DEFAULT_CORS_ORIGINS = (
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
)


@dataclass(frozen=True)
class Settings:
    secret_key: str
    env: str
    database_url: str
    log_level: str

    jwt_secret: str
    jwt_expires_hours: int

    public_base_url: str
    cors_origins: tuple[str, ...]

    storage_backend: str
    upload_dir: str
    max_file_size: int
    max_download_file_size: int
    s3_endpoint: str
    s3_region: str
    s3_bucket: str
    s3_access_key_id: str
    s3_secret_access_key: str

    smtp_host: str
    smtp_port: int
    smtp_username: str
    smtp_password: str
    smtp_from: str
    contact_notify_email: str


def _getenv(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


def _getenv_int(name: str, default: int) -> int:
    raw = _getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer (got {raw!r}).") from None


def _split_origins(raw: str) -> tuple[str, ...]:
    extra = [o.strip().rstrip("/") for o in raw.split(",") if o.strip()]
    # de-duplicate, keep order
    return tuple(dict.fromkeys([*DEFAULT_CORS_ORIGINS, *extra]))


def load_settings() -> Settings:
    return Settings(
        secret_key=_getenv("SECRET_KEY", "change-me"),
        env=_getenv("ENV", "development"),
        database_url=_getenv("DATABASE_URL", "sqlite:///imatrix.db"),
        log_level=_getenv("LOG_LEVEL", "INFO").upper(),
        jwt_secret=_getenv("JWT_SECRET", "change-me"),
        jwt_expires_hours=_getenv_int("JWT_EXPIRES_HOURS", 24),
        public_base_url=_getenv("PUBLIC_BASE_URL", "").rstrip("/"),
        cors_origins=_split_origins(_getenv("CORS_ORIGIN", "")),
        storage_backend=_getenv("STORAGE_BACKEND", "local"),
        upload_dir=_getenv("UPLOAD_DIR", "public/uploads"),
        max_file_size=_getenv_int("MAX_FILE_SIZE", 10 * 1024 * 1024),
        max_download_file_size=_getenv_int("MAX_DOWNLOAD_FILE_SIZE", 50 * 1024 * 1024),
        s3_endpoint=_getenv("S3_ENDPOINT", ""),
        s3_region=_getenv("S3_REGION", "nyc3"),
        s3_bucket=_getenv("S3_BUCKET", ""),
        s3_access_key_id=_getenv("S3_ACCESS_KEY_ID", ""),
        s3_secret_access_key=_getenv("S3_SECRET_ACCESS_KEY", ""),
        smtp_host=_getenv("SMTP_HOST", ""),
        smtp_port=_getenv_int("SMTP_PORT", 587),
        smtp_username=_getenv("SMTP_USERNAME", ""),
        smtp_password=_getenv("SMTP_PASSWORD", ""),
        smtp_from=_getenv("SMTP_FROM", ""),
        contact_notify_email=_getenv("CONTACT_NOTIFY_EMAIL", ""),
    )


def load_config() -> dict:
    s = load_settings()
    return {
        "SECRET_KEY": s.secret_key,
        "ENV": s.env,
        "DATABASE_URL": s.database_url,
        "LOG_LEVEL": s.log_level,
        "JWT_SECRET": s.jwt_secret,
        "JWT_EXPIRES_HOURS": s.jwt_expires_hours,
        "PUBLIC_BASE_URL": s.public_base_url,
        "CORS_ORIGINS": s.cors_origins,
        "STORAGE_BACKEND": s.storage_backend,
        "UPLOAD_DIR": s.upload_dir,
        "MAX_FILE_SIZE": s.max_file_size,
        "MAX_DOWNLOAD_FILE_SIZE": s.max_download_file_size,
        "S3_ENDPOINT": s.s3_endpoint,
        "S3_REGION": s.s3_region,
        "S3_BUCKET": s.s3_bucket,
        "S3_ACCESS_KEY_ID": s.s3_access_key_id,
        "S3_SECRET_ACCESS_KEY": s.s3_secret_access_key,
        "SMTP_HOST": s.smtp_host,
        "SMTP_PORT": s.smtp_port,
        "SMTP_USERNAME": s.smtp_username,
        "SMTP_PASSWORD": s.smtp_password,
        "SMTP_FROM": s.smtp_from,
        "CONTACT_NOTIFY_EMAIL": s.contact_notify_email,
        # request body ceiling; per-endpoint limits are enforced in the upload helpers
        "MAX_CONTENT_LENGTH": max(s.max_file_size, s.max_download_file_size) + 1024 * 1024,
    }
