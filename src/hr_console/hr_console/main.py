from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.logging_config import setup_logging
from .container import build_container
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_default_registry, list_tables
from .leaves.controller import register as register_leaves

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app(settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    setup_logging(level=str(getattr(settings, "LOG_LEVEL", "INFO")), json_format=bool(getattr(settings, "LOG_JSON", False)))

    db_config = getattr(settings, "DB_CONFIG")
    logger.info(
        "settings=%s leave_store=%s registry=%s audit=%s",
        settings_module,
        getattr(settings, "LEAVE_STORE", "memory"),
        getattr(settings, "REGISTRY_BACKEND", "static"),
        getattr(settings, "AUDIT_BACKEND", "memory"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        ensure_default_registry(db_config, with_demo_users=bool(getattr(settings, "DEMO_USERS", False)))
        apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
        logger.info("demo seed ready")

    container = build_container(settings)
    app.extensions["hr_console"] = container

    register_leaves(app, container)

    return app
