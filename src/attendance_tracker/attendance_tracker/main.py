from __future__ import annotations

import atexit
import importlib
import logging
import os
from pathlib import Path

from apscheduler.schedulers.background import BackgroundScheduler
from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .absence.scheduler import build_scheduler
from .attendance.controller import register as register_attendance
from .common.datetime_utils import parse_clock
from .container import Container, build_container
from .core.constants import DEFAULT_SWEEP_TIME
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_employees, list_tables

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def configure_logging(settings) -> None:
    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _is_reloader_parent(app: Flask) -> bool:
    # The debug reloader imports the app twice; only the child serves requests.
    return app.debug and os.environ.get("WERKZEUG_RUN_MAIN") != "true"


def _shutdown_scheduler(scheduler: BackgroundScheduler) -> None:
    if scheduler.running:
        scheduler.shutdown(wait=False)


def start_absence_scheduler(app: Flask, container: Container, settings) -> BackgroundScheduler | None:
    if _is_reloader_parent(app):
        logger.info("debug reloader parent: absence scheduler left to the serving process")
        return None

    scheduler = build_scheduler(
        container.absence_sweeper,
        timezone=container.policy.timezone,
        sweep_time=parse_clock(getattr(settings, "SWEEP_TIME", DEFAULT_SWEEP_TIME)),
    )
    scheduler.start()
    atexit.register(_shutdown_scheduler, scheduler)
    app.extensions["absence_scheduler"] = scheduler
    return scheduler


def create_app(container: Container | None = None) -> Flask:
    """Flask app factory.

    Passing ``container`` skips settings-driven DB wiring (used by tests and
    embedding callers that build their own stores).
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(settings)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

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
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
            ensure_demo_employees(db_config)
            logger.info("demo seed ready")

        container = build_container(db_config=db_config, settings=settings)

    register_attendance(app, container)
    app.extensions["attendance_container"] = container

    if bool(getattr(settings, "SWEEP_ENABLED", False)):
        start_absence_scheduler(app, container, settings)

    return app
