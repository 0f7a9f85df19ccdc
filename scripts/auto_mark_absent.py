"""Close a working day by marking everyone without a time-in ABSENT.

Meant for cron, e.g. every 15 minutes after the cutoff:

    python scripts/auto_mark_absent.py            # today
    python scripts/auto_mark_absent.py 2025-03-14 # a past day
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.hr_backoffice.hr_backoffice.common.datetime_utils import parse_optional_date
from src.hr_backoffice.hr_backoffice.container import build_container
from src.hr_backoffice.hr_backoffice.core.exceptions import DomainError

logger = logging.getLogger("auto_mark_absent")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("date", nargs="?", help="civil date YYYY-MM-DD (default: today)")
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        timezone=settings.TIMEZONE,
        excluded_weekday=settings.EXCLUDED_WEEKDAY,
    )

    try:
        result = container.attendance_service.auto_mark_absent(parse_optional_date(args.date))
    except DomainError as e:
        logger.error("Absent sweep failed: %s", e)
        return 1

    if result.skipped:
        logger.info("Absent sweep skipped for %s: %s", result.work_date, result.reason)
    return 0


if __name__ == "__main__":
    sys.exit(main())
