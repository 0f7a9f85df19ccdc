from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import Container, build_container
from .core.constants import DEFAULT_EXCLUDED_WEEKDAY, DEFAULT_TIMEZONE
from .database.bootstrap import apply_schema, list_tables
from .attendance.controller import register as register_attendance
from .deductions.controller import register as register_deductions
from .holidays.controller import register as register_holidays
from .leaves.controller import register as register_leaves
from .loans.controller import register as register_loans
from .payroll.controller import register as register_payroll
from .settings.controller import register as register_settings

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def register_routes(app: Flask, container: Container) -> None:
    register_attendance(app, container)
    register_settings(app, container)
    register_payroll(app, container)
    register_loans(app, container)
    register_deductions(app, container)
    register_leaves(app, container)
    register_holidays(app, container)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    db_config = getattr(settings, "DB_CONFIG")

    if container is None:
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
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            timezone=getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE),
            excluded_weekday=int(getattr(settings, "EXCLUDED_WEEKDAY", DEFAULT_EXCLUDED_WEEKDAY)),
        )

    app.extensions["hr_backoffice"] = container
    register_routes(app, container)
    return app
