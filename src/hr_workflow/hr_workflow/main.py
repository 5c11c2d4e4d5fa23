from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.web import register_error_handlers
from .container import Container, build_container
from .core.constants import DEFAULT_APP_TIMEZONE, DEFAULT_TOLERANCE_MINUTES
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_employees, list_tables
from .leaves.controller import register as register_leaves
from .notifications.controller import register as register_notifications

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
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
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            app_timezone=getattr(settings, "APP_TIMEZONE", DEFAULT_APP_TIMEZONE),
            tolerance_minutes=int(getattr(settings, "SHIFT_TOLERANCE_MINUTES", DEFAULT_TOLERANCE_MINUTES)),
            geofence_enabled=bool(getattr(settings, "CHECK_IN_GEOFENCE", False)),
        )

        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
            ensure_demo_employees(db_config, year=container.time_engine.current_year())
            logger.info("Demo seed ready")

    app.extensions["hr_workflow"] = container

    register_error_handlers(app)
    register_attendance(app, container)
    register_leaves(app, container)
    register_notifications(app, container)

    return app
