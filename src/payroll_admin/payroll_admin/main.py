from __future__ import annotations

import atexit
import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, request

from config import get_settings_module

from .activity.controller import register as register_activity
from .common.responses import fail, ok, register_error_handlers
from .container import Container, build_container
from .dashboard.controller import register as register_dashboard
from .database.bootstrap import apply_schema, list_tables, seed_defaults
from .database.connection import DatabaseConnection, DBConfig
from .employees.controller import register as register_employees
from .payroll.controller import register as register_payroll
from .permissions.controller import register as register_permissions
from .roles.controller import register as register_roles
from .users.controller import register as register_users

logger = logging.getLogger("payroll_admin")

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _open_database(settings) -> DatabaseConnection:
    config = DBConfig.from_mapping(getattr(settings, "DB_CONFIG"), pool_size=int(getattr(settings, "DB_POOL_SIZE", 5)))
    logger.info("settings=%s db=%s@%s:%s/%s", settings.__name__, config.user, config.host, config.port, config.database)

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(config, schema_path=SCHEMA_PATH)
        logger.info("Schema ready (tables=%s)", len(list_tables(config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        seed_defaults(
            config,
            admin_email=str(getattr(settings, "ADMIN_EMAIL")),
            admin_password=str(getattr(settings, "ADMIN_PASSWORD")),
        )

    conn = DatabaseConnection(config).open()
    atexit.register(conn.close)
    return conn


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    """Build the API app. Tests pass a container wired on in-memory repositories."""
    load_dotenv(override=False)
    settings = importlib.import_module(settings_module or get_settings_module())
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["API_PREFIX"] = str(getattr(settings, "API_PREFIX", "/api")).rstrip("/")

    if container is None:
        container = build_container(conn=_open_database(settings), settings=settings)
    app.extensions["container"] = container

    @app.before_request
    def log_request():
        # Never log the credential itself.
        logger.debug(
            "%s %s bearer=%s",
            request.method,
            request.path,
            request.headers.get("Authorization", "").startswith("Bearer "),
        )

    register_error_handlers(app)

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        if container.conn is None:
            return ok({"status": "ok", "database": "not_configured"})
        if container.conn.ping():
            return ok({"status": "ok", "database": "up"})
        return fail("Database unreachable", status=503, code="DATABASE_DOWN", data={"status": "degraded", "database": "down"})

    register_users(app, container)
    register_roles(app, container)
    register_permissions(app, container)
    register_employees(app, container)
    register_payroll(app, container)
    register_activity(app, container)
    register_dashboard(app, container)

    return app
