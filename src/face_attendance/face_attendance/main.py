from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .employees.controller import register as register_employees

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app. Tests pass a container wired over in-memory repositories."""

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if container is None:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module, db_config.get("user"), db_config.get("host"),
            db_config.get("port", 3306), db_config.get("database"),
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            match_threshold=float(getattr(settings, "MATCH_THRESHOLD", 0.95)),
            duplicate_window_minutes=int(getattr(settings, "DUPLICATE_WINDOW_MINUTES", 5)),
            embedding_dim=getattr(settings, "EMBEDDING_DIM", None),
            history_days=int(getattr(settings, "HISTORY_DAYS", 30)),
        )

    register_employees(app, container)
    register_attendance(app, container)

    return app
