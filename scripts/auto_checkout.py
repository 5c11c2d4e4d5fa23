"""Close attendance records whose check-out was forgotten.

Meant to run hourly from cron, e.g.::

    0 * * * * cd /srv/hr-workflow && APP_ENV=production python scripts/auto_checkout.py
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

from hr_workflow.container import build_container
from hr_workflow.core.constants import DEFAULT_APP_TIMEZONE, DEFAULT_TOLERANCE_MINUTES
from hr_workflow.main import configure_logging


def main() -> int:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        app_timezone=getattr(settings, "APP_TIMEZONE", DEFAULT_APP_TIMEZONE),
        tolerance_minutes=int(getattr(settings, "SHIFT_TOLERANCE_MINUTES", DEFAULT_TOLERANCE_MINUTES)),
    )
    summary = container.attendance_service.auto_checkout_forgotten()

    logging.getLogger("auto_checkout").info(
        "date=%s processed=%s employees=%s errors=%s",
        summary.work_date,
        summary.processed_count,
        summary.employee_ids,
        len(summary.errors),
    )
    return 1 if summary.errors else 0


if __name__ == "__main__":
    sys.exit(main())
