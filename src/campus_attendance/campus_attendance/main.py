from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import build_container
from .core.constants import DEFAULT_BRANCHES, DEFAULT_LOW_ATTENDANCE_THRESHOLD
from .core.enums import StoreBackend
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .marking.controller import register as register_marking
from .reports.controller import register as register_reports

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["BRANCHES"] = list(getattr(settings, "BRANCHES", DEFAULT_BRANCHES))
    app.config["DEPARTMENT_MAP"] = dict(getattr(settings, "DEPARTMENT_MAP", {}))

    db_config = getattr(settings, "DB_CONFIG", {})
    store_backend = getattr(settings, "STORE_BACKEND", StoreBackend.MYSQL.value)
    logger.info("settings=%s store=%s", settings_module, store_backend)

    if store_backend == StoreBackend.MYSQL.value:
        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            logger.info("demo seed ready")

    container = build_container(
        db_config=db_config,
        store_backend=store_backend,
        low_threshold=int(getattr(settings, "LOW_ATTENDANCE_THRESHOLD", DEFAULT_LOW_ATTENDANCE_THRESHOLD)),
    )

    app.extensions["container"] = container

    register_marking(app, container)
    register_reports(app, container)

    return app
