from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .attendance.controller import serialize_record as serialize_attendance
from .common.http import register_error_handlers
from .common.log_setup import setup_logging
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .payroll.controller import register as register_payroll
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def create_app(*, container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    """Build the Flask app.

    `container` replaces the MySQL-backed wiring (tests pass one built on fakes);
    when given, the schema bootstrap is skipped.
    """

    load_dotenv(override=False)
    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)

    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_FILE", None))

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    db_config = getattr(settings, "DB_CONFIG")

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        container = build_container(db_config=db_config, payroll_rates=getattr(settings, "PAYROLL_RATES", None))

    register_users(app, container)
    register_attendance(app, container)
    register_payroll(app, container)
    register_error_handlers(app, serialize_attendance=serialize_attendance)

    return app
