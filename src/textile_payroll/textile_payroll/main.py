from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.logging_setup import configure_logging
from .container import build_container
from .database.bootstrap import apply_schema, list_tables
from .payroll.controller import register as register_payroll

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

    container = build_container(
        db_config=db_config,
        weekend_days=getattr(settings, "WEEKEND_DAYS", (5, 6)),
        auto_payroll_day=int(getattr(settings, "AUTO_PAYROLL_DAY", 1)),
        auto_payroll_hour=int(getattr(settings, "AUTO_PAYROLL_HOUR", 0)),
        auto_payroll_tick_seconds=float(getattr(settings, "AUTO_PAYROLL_TICK_SECONDS", 60)),
    )
    app.extensions["textile_payroll"] = container

    register_payroll(app, container)

    if bool(getattr(settings, "AUTO_PAYROLL_ENABLED", False)):
        container.scheduler.enable()
        container.scheduler.start()

    return app
