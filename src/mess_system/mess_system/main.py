from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .billing.controller import register as register_billing
from .common.http import register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .leaves.controller import register as register_leaves
from .payments.controller import register as register_payments
from .reports.controller import register as register_reports
from .users.controller import register as register_users
from .waste.controller import register as register_waste

logger = logging.getLogger(__name__)


def _configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level_name).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    """Build the Flask app.

    Pass `container` to run against pre-built (e.g. in-memory) repositories;
    otherwise one is built from the active settings module's DB_CONFIG.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

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
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            meal_prices=getattr(settings, "MEAL_PRICES", None),
            package_prices=getattr(settings, "PACKAGE_PRICES", None),
        )

    app.extensions["mess_container"] = container

    register_error_handlers(app)
    register_users(app, container)
    register_attendance(app, container)
    register_billing(app, container)
    register_leaves(app, container)
    register_payments(app, container)
    register_waste(app, container)
    register_reports(app, container)

    @app.route("/", endpoint="health")
    def health():
        return jsonify({"service": "mess-system", "status": "ok"})

    return app
