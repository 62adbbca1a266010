# -*- coding: utf-8 -*-
import os

from flask import Flask
from flask_cors import CORS
from flask_jwt_extended import JWTManager

from fishmarket.config import Config
from fishmarket.database import db

# Observability imports
from fishmarket.services.metrics import init_metrics
from fishmarket.services.request_context import init_request_context
from fishmarket.services.structured_logging import init_logging


def _normalize_db_url(url: str) -> str:
    """
    Normalize DATABASE_URL so SQLAlchemy loads the right DBAPI.
    We standardize on the psycopg v3 driver ('+psycopg').
    """
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql://") and "+psycopg://" not in url:
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


def _migrate_db(app):
    """Run Alembic migrations to head using the app's DB URL."""
    from pathlib import Path

    from alembic import command
    from alembic.config import Config as AlembicConfig

    base_dir = Path(__file__).resolve().parent.parent
    cfg = AlembicConfig()  # in-memory config, avoid alembic.ini dependency
    cfg.set_main_option("script_location", str(base_dir / "migrations"))
    cfg.set_main_option("sqlalchemy.url", app.config["SQLALCHEMY_DATABASE_URI"])

    command.upgrade(cfg, "head")
    app.logger.info("Database migrations applied successfully")


def create_app() -> Flask:
    app = Flask(__name__)
    app.url_map.strict_slashes = False

    # --- Core config ---
    app.config.from_object(Config())

    # --- DB config ---
    db_url = app.config.get("SQLALCHEMY_DATABASE_URI")
    if not db_url:
        db_path = os.path.join(
            os.path.dirname(__file__),
            "..",
            "instance",
            "fishmarket.db")
        os.makedirs(os.path.dirname(db_path), exist_ok=True)
        db_url = f"sqlite:///{os.path.abspath(db_path)}"
    else:
        db_url = _normalize_db_url(db_url)

    app.config["SQLALCHEMY_DATABASE_URI"] = db_url
    db.init_app(app)

    # --- JWT (bearer header only) ---
    app.config["JWT_TOKEN_LOCATION"] = ["headers"]
    JWTManager(app)

    # --- CORS ---
    cors_origins = [
        origin.strip()
        for origin in app.config["CORS_ALLOWED_ORIGINS"].split(",")
        if origin.strip()
    ]
    CORS(app, resources={
        r"/api/*": {
            "origins": cors_origins,
            "methods": ["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization", "X-Request-ID"],
            "supports_credentials": False,
            "max_age": 600,
        }}
    )

    # --- Initialize observability ---
    init_logging(app)
    init_request_context(app)
    init_metrics(app)

    # --- Error handlers ---
    from fishmarket.middleware.errors import register_error_handlers
    register_error_handlers(app)

    # --- Mount blueprints ---
    from fishmarket.routes import ads, auth, categories, health, membership, payments, users
    app.register_blueprint(health.health_bp)
    app.register_blueprint(auth.auth_bp)
    app.register_blueprint(users.users_bp)
    app.register_blueprint(categories.categories_bp)
    app.register_blueprint(membership.membership_bp)
    app.register_blueprint(ads.ads_bp)
    app.register_blueprint(payments.payments_bp)

    # --- CLI ---
    from fishmarket.cli import register_cli
    register_cli(app)

    # --- DB init ---
    with app.app_context():
        # Tables are created directly in testing; everywhere else Alembic owns the schema
        is_testing = app.config.get("TESTING")
        if is_testing:
            db.create_all()
        elif os.getenv("FISHMARKET_DB_MIGRATE_ON_START", "true").lower() == "true":
            try:
                _migrate_db(app)
            except Exception as e:
                app.logger.error(f"Failed to run migrations: {e}")
                raise

        if app.config.get("SEED_REFERENCE_DATA"):
            from fishmarket.database.seed import seed_reference_data
            seed_reference_data()

    return app
