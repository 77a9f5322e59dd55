"""Delete read notifications older than the retention period.

Meant for cron, e.g. once a night:
    python scripts/cleanup_notifications.py --days 30
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

from src.emotion_checkin.emotion_checkin.container import build_container


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())

    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--days",
        type=int,
        default=int(getattr(settings, "NOTIFICATION_RETENTION_DAYS", 30)),
        help="delete read notifications older than this many days",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    container = build_container(db_config=dict(settings.DB_CONFIG), timezone=getattr(settings, "APP_TIMEZONE"))
    deleted = container.notification_service.cleanup_old_notifications(args.days)
    print(f"OK: deleted {deleted} read notifications older than {args.days} days")


if __name__ == "__main__":
    main()
