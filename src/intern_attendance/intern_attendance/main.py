from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.http import register_error_handlers
from .container import build_container
from .core.constants import DEFAULT_ORG_TIMEZONE, DEFAULT_QR_HISTORY_DAYS
from .database.bootstrap import apply_schema, list_tables
from .attendance.controller import register as register_attendance
from .performance.controller import register as register_performance
from .qrcodes.controller import register as register_qrcodes

logger = logging.getLogger(__name__)

_OPTION_KEYS = (
    "ORG_TIMEZONE",
    "DEFAULT_LATE_THRESHOLD",
    "ATTENDANCE_POINTS",
    "GEOCODER_URL",
    "GEOCODER_TIMEOUT",
    "UPLOAD_FOLDER",
    "MAX_PHOTO_BYTES",
    "QR_HISTORY_DAYS",
)


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
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["ORG_TIMEZONE"] = DEFAULT_ORG_TIMEZONE
    app.config["QR_HISTORY_DAYS"] = DEFAULT_QR_HISTORY_DAYS
    for key in _OPTION_KEYS:
        if hasattr(settings, key):
            app.config[key] = getattr(settings, key)
    if "MAX_PHOTO_BYTES" in app.config:
        # multipart overhead on top of the photo itself
        app.config["MAX_CONTENT_LENGTH"] = int(app.config["MAX_PHOTO_BYTES"]) + 1024 * 1024

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
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

    container = build_container(db_config=db_config, options=app.config)

    register_error_handlers(app)
    register_qrcodes(app, container)
    register_attendance(app, container)
    register_performance(app, container)

    return app
