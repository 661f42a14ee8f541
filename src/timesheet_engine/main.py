from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.http import register_error_handlers
from .common.logger import configure_logging
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .scheduler.controller import register as register_scheduler
from .timesheets.controller import register as register_timesheets

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

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
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            reference_timezone=getattr(settings, "REFERENCE_TIMEZONE", "UTC"),
            batch_pool_size=int(getattr(settings, "BATCH_POOL_SIZE", 4)),
            schedule_weekday=int(getattr(settings, "SCHEDULE_WEEKDAY", 0)),
            schedule_hour=int(getattr(settings, "SCHEDULE_HOUR", 1)),
            schedule_minute=int(getattr(settings, "SCHEDULE_MINUTE", 0)),
            manual_timeout=float(getattr(settings, "MANUAL_TRIGGER_TIMEOUT_SECONDS", 30)),
            trigger_pool_size=int(getattr(settings, "TRIGGER_POOL_SIZE", 4)),
        )

        if bool(getattr(settings, "SCHEDULER_ENABLED", False)):
            container.scheduler.start()

    app.extensions["timesheet_container"] = container

    register_error_handlers(app)
    register_timesheets(app, container)
    register_scheduler(app, container)

    return app
