"""Create the attendance tables in the configured MySQL database.

Usage: APP_ENV=development python scripts/init_db.py
"""

from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv

from campus_attendance.config import get_settings_module
from campus_attendance.database.bootstrap import apply_schema, list_tables
from campus_attendance.main import SCHEMA_PATH, configure_logging

logger = logging.getLogger("campus_attendance.init_db")


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=SCHEMA_PATH)
    tables = list_tables(db_config)
    logger.info(
        "applied %s -> %s@%s:%s/%s (tables=%s)",
        SCHEMA_PATH.name,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        ", ".join(tables),
    )


if __name__ == "__main__":
    main()
