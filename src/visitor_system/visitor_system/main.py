from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .container import Container, build_container
from .core.constants import DEFAULT_MAX_UPLOAD_BYTES, DEFAULT_PUBLIC_BASE_URL
from .core.exceptions import DomainError
from .core.logging_config import setup_logging
from .database.bootstrap import apply_schema, list_tables
from .employees.controller import register as register_employees
from .organization.controller import register as register_organization
from .uploads.controller import register as register_uploads
from .visitors.controller import register as register_visitors

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        if e.http_status >= 500:
            logger.error("%s: %s", e.code, e.message)
        return jsonify(e.to_dict()), e.http_status

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return e
        logger.exception("unhandled error")
        return jsonify({"success": False, "code": "INTERNAL_ERROR", "message": "Lỗi hệ thống"}), 500


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["MAX_CONTENT_LENGTH"] = int(getattr(settings, "MAX_CONTENT_LENGTH", DEFAULT_MAX_UPLOAD_BYTES))

    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_FILE", None))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            public_base_url=getattr(settings, "PUBLIC_BASE_URL", DEFAULT_PUBLIC_BASE_URL),
            upload_folder=getattr(settings, "UPLOAD_FOLDER", "uploads"),
            signout_policy=getattr(settings, "SIGNOUT_POLICY", "strict"),
            auth_policy=getattr(settings, "AUTH_POLICY", "allow"),
            api_token=getattr(settings, "API_TOKEN", None),
        )

    @app.route("/", methods=["GET"], endpoint="index")
    def index():
        return "VMS API is running"

    register_error_handlers(app)
    register_visitors(app, container)
    register_organization(app, container)
    register_employees(app, container)
    register_uploads(app, container)

    logger.info(
        "app ready (auth=%s, signout=%s)",
        container.auth_policy.name,
        container.visitor_service.signout_policy.value,
    )
    return app
