import logging
import os
import time

from flask import Flask, g, request
from dotenv import load_dotenv

from app.imatrix.config import load_config
from app.imatrix.db import init_db, teardown_db_session
from app.imatrix.api import register_error_handlers
from app.imatrix.security import init_cors
from app.imatrix.routes import bp as routes_bp
from app.imatrix.auth import bp as auth_bp, load_current_user
from app.imatrix.admin import bp as admin_bp
from app.imatrix.modules.posts.routes import bp as posts_bp
from app.imatrix.modules.products.routes import bp as products_bp
from app.imatrix.modules.solutions.routes import bp as solutions_bp
from app.imatrix.modules.categories.routes import bp as categories_bp
from app.imatrix.modules.downloads.routes import bp as downloads_bp
from app.imatrix.modules.media.routes import bp as media_bp
from app.imatrix.modules.contact.routes import bp as contact_bp


def _configure_logging(app: Flask) -> None:
    level = getattr(logging, app.config.get("LOG_LEVEL") or "INFO", logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    app.logger.setLevel(level)


def create_app() -> Flask:
    load_dotenv()
    app = Flask(__name__)
    app.config.from_mapping(load_config())
    app.json.sort_keys = False
    _configure_logging(app)

    # Production guardrails (fail fast with clear logs)
    env = (app.config.get("ENV") or "").strip().lower()
    if env in ("prod", "production"):
        if not app.config.get("DATABASE_URL") or str(app.config["DATABASE_URL"]).strip() == "":
            raise RuntimeError("DATABASE_URL is required in production.")
        if str(app.config["DATABASE_URL"]).startswith("sqlite"):
            raise RuntimeError("DATABASE_URL must be Postgres in production (not sqlite).")
        if not app.config.get("SECRET_KEY") or str(app.config["SECRET_KEY"]) in ("", "change-me"):
            raise RuntimeError("SECRET_KEY must be set to a strong value in production (not default).")
        if not app.config.get("JWT_SECRET") or str(app.config["JWT_SECRET"]) in ("", "change-me"):
            raise RuntimeError("JWT_SECRET must be set to a strong value in production (not default).")

    init_db(app)
    app.extensions["started_at"] = time.monotonic()

    def _dispose_engine_on_fork() -> None:
        if hasattr(os, "register_at_fork"):
            def _after_fork_child():
                engine = app.extensions.get("sqlalchemy_engine")
                if engine:
                    engine.dispose()
                    app.logger.info("Disposed DB engine after fork (pid=%s)", os.getpid())

            os.register_at_fork(after_in_child=_after_fork_child)

    _dispose_engine_on_fork()

    # Storage config check (fail loudly on misconfiguration)
    if app.config.get("STORAGE_BACKEND") == "s3":
        missing_s3 = [
            key
            for key in ("S3_ENDPOINT", "S3_BUCKET", "S3_ACCESS_KEY_ID", "S3_SECRET_ACCESS_KEY")
            if not app.config.get(key)
        ]
        if missing_s3:
            app.logger.error("STORAGE CONFIG ERROR: Missing required S3 env vars: %s", ", ".join(missing_s3))

    init_cors(app)

    app.register_blueprint(routes_bp)
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(admin_bp)
    app.register_blueprint(posts_bp, url_prefix="/posts")
    app.register_blueprint(products_bp, url_prefix="/products")
    app.register_blueprint(solutions_bp, url_prefix="/solutions")
    app.register_blueprint(categories_bp, url_prefix="/categories")
    app.register_blueprint(downloads_bp, url_prefix="/downloads")
    app.register_blueprint(media_bp, url_prefix="/media")
    app.register_blueprint(contact_bp, url_prefix="/contact")

    def _load_user_wrapper():
        if request.path.startswith(("/uploads/", "/health", "/healthz")):
            g.current_user = None
            return None
        load_current_user()
        app.logger.info(
            "%s %s ip=%s origin=%s request_id=%s",
            request.method,
            request.path,
            request.remote_addr,
            request.headers.get("Origin"),
            g.request_id,
        )
        return None

    app.before_request(_load_user_wrapper)
    app.teardown_appcontext(teardown_db_session)
    register_error_handlers(app)

    logging.getLogger(__name__).info("create_app() complete; app ready to serve")

    return app
