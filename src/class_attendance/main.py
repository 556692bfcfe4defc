from __future__ import annotations

import importlib
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .config import get_settings_module
from .container import Container, build_container
from .core.constants import DEFAULT_LATE_GRACE_MINUTES
from .core.logging import setup_logging
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .enrollments.controller import register as register_enrollments
from .gateway.errors import register_error_handlers
from .qrcodes.controller import register as register_qrcodes
from .schedules.controller import register as register_schedules
from .sections.controller import register as register_sections
from .subjects.controller import register as register_subjects
from .users.controller import register as register_users


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    """Build the Flask app.

    Without `container` the MySQL-backed container is built from the settings
    module (APP_ENV). Tests pass an in-memory container instead.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["JSON_SORT_KEYS"] = False

    log = setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        log.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            log.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config)
            ensure_demo_users(db_config)
            log.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            late_grace_minutes=int(getattr(settings, "LATE_GRACE_MINUTES", DEFAULT_LATE_GRACE_MINUTES)),
        )

    app.extensions["container"] = container
    register_error_handlers(app)

    register_users(app, container)
    register_subjects(app, container)
    register_sections(app, container)
    register_schedules(app, container)
    register_enrollments(app, container)
    register_attendance(app, container)
    register_qrcodes(app, container)

    return app
