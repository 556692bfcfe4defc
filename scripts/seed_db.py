from __future__ import annotations

import importlib

from dotenv import load_dotenv

from class_attendance.config import get_settings_module
from class_attendance.core.logging import setup_logging
from class_attendance.database.bootstrap import DEMO_PASSWORD, apply_seed_sql, ensure_demo_users


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    log = setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config)
    ensure_demo_users(db_config)

    log.info(
        "seeded %s@%s:%s/%s (admin, teacher, student; password %r)",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        DEMO_PASSWORD,
    )


if __name__ == "__main__":
    main()
