from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "hr_workflow"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from dotenv import load_dotenv

from config import get_settings_module

from hr_workflow.core.constants import DEFAULT_APP_TIMEZONE
from hr_workflow.database.bootstrap import apply_seed_sql, ensure_demo_employees
from hr_workflow.time_engine import TimeEngine


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    year = TimeEngine(getattr(settings, "APP_TIMEZONE", DEFAULT_APP_TIMEZONE)).current_year()

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    ensure_demo_employees(db_config, year=year)

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(balances for {year})"
    )


if __name__ == "__main__":
    main()
