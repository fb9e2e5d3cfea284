from __future__ import annotations

import importlib
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .advances.controller import register as register_advances
from .container import build_container
from .core.exceptions import ConflictError, DomainError, NotFoundError, ValidationError
from .database.bootstrap import apply_schema, apply_sqlite_schema, ensure_demo_employees, list_sqlite_tables, list_tables
from .employees.controller import register as register_employees
from .payroll.controller import register as register_payroll
from .payroll.model import PayrollPolicy
from .time_entries.controller import register as register_time_entries

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
REPO_ROOT = Path(__file__).resolve().parents[3]


def configure_logging(level: str | int = "INFO") -> None:
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)


def _status_for(error: DomainError) -> tuple[int, str]:
    if isinstance(error, ValidationError):
        return 400, "Validation Error"
    if isinstance(error, NotFoundError):
        return 404, "Not Found"
    if isinstance(error, ConflictError):
        return 409, "Conflict"
    return 400, "Bad Request"


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status, label = _status_for(e)
        return jsonify({"error": label, "message": str(e)}), status

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"error": e.name, "message": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error")
        message = str(e) if app.config.get("DEBUG") else "Something went wrong"
        return jsonify({"error": "Internal Server Error", "message": message}), 500


def create_app(settings_module: Optional[str] = None, **overrides: Any) -> Flask:
    """Application factory.

    ``overrides`` replace attributes of the settings module (tests pass
    ``DB_BACKEND``/``SQLITE_PATH`` this way).
    """

    load_dotenv(override=False)
    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)

    def setting(name: str, default: Any = None) -> Any:
        if name in overrides:
            return overrides[name]
        return getattr(settings, name, default)

    debug = bool(setting("DEBUG", False))
    configure_logging(setting("LOG_LEVEL") or ("DEBUG" if debug else "INFO"))

    app = Flask(__name__)
    app.secret_key = setting("SECRET_KEY")
    app.config["DEBUG"] = debug
    app.config["TESTING"] = bool(setting("TESTING", False))
    app.json.sort_keys = False

    db_backend = str(setting("DB_BACKEND", "mysql")).lower()
    db_config = dict(setting("DB_CONFIG") or {})
    sqlite_path = setting("SQLITE_PATH")
    policy = PayrollPolicy(
        default_work_days=int(setting("PAYROLL_DEFAULT_WORK_DAYS", 30)),
        default_daily_work_hours=Decimal(str(setting("PAYROLL_DAILY_WORK_HOURS", 8))),
        overtime_multiplier=Decimal(str(setting("PAYROLL_OVERTIME_MULTIPLIER", "1.5"))),
        advance_limit_ratio=Decimal(str(setting("PAYROLL_ADVANCE_LIMIT_RATIO", "0.5"))),
    )

    if db_backend == "sqlite":
        logger.info("settings=%s db=sqlite:%s", settings_module, sqlite_path)
    else:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

    if bool(setting("AUTO_INIT_DB", False)):
        if db_backend == "sqlite":
            apply_sqlite_schema(sqlite_path, schema_path=REPO_ROOT / "database" / "schema_sqlite.sql")
            logger.info("schema ready (tables=%d)", len(list_sqlite_tables(sqlite_path)))
        else:
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

    container = build_container(
        db_backend=db_backend,
        db_config=db_config,
        sqlite_path=sqlite_path,
        policy=policy,
    )

    if bool(setting("AUTO_SEED_DB", False)):
        ensure_demo_employees(container.employees_repo)

    register_error_handlers(app)
    register_employees(app, container)
    register_advances(app, container)
    register_time_entries(app, container)
    register_payroll(app, container)

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok", "backend": db_backend})

    app.extensions["payroll_container"] = container
    return app
