"""Create the database (if needed) and apply database/schema.sql.

Exits non-zero when a table the application relies on is still missing.
"""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "hr_workflow"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from dotenv import load_dotenv

from config import get_settings_module

from hr_workflow.database.bootstrap import apply_schema, list_tables
from hr_workflow.main import configure_logging

REQUIRED_TABLES = (
    "employees",
    "check_in_locations",
    "attendance_records",
    "leave_types",
    "leave_balances",
    "leave_requests",
    "notifications",
)


def main() -> int:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    log = logging.getLogger("init_db")

    db_config = dict(settings.DB_CONFIG)
    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")

    missing = sorted(set(REQUIRED_TABLES) - set(list_tables(db_config)))
    if missing:
        log.error("Schema applied but tables are missing: %s", ", ".join(missing))
        return 1

    log.info("Schema ready on %s@%s/%s", db_config.get("user"), db_config.get("host"), db_config.get("database"))
    return 0


if __name__ == "__main__":
    sys.exit(main())
