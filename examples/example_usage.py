"""Example: call the service layer directly, without Flask.

Controllers stay thin; the rules live in the services, so a script can reuse them.
"""

import importlib
import json

from dotenv import load_dotenv

from config import get_settings_module

from src.emotion_checkin.emotion_checkin.container import build_container


def main():
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, timezone=settings.APP_TIMEZONE)

    admin = container.users_repo.get_by_email("admin@example.com")
    if not admin:
        print("Run scripts/seed_db.py first to create the demo users.")
        return

    dashboard = container.dashboard_service.admin_dashboard(admin.user_id)
    print(json.dumps(dashboard, ensure_ascii=False, indent=2, default=str))


if __name__ == "__main__":
    main()
