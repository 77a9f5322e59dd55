from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .audit.controller import register as register_audit
from .checkins.controller import register as register_checkins
from .common.http import register_error_handlers
from .container import Container, build_container
from .core.constants import DEFAULT_TIMEZONE
from .dashboard.controller import register as register_dashboard
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .notifications.controller import register as register_notifications
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.json.ensure_ascii = False

    logging.basicConfig(
        level=logging.DEBUG if app.config["DEBUG"] else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
            ensure_demo_users(db_config)
            logger.info("emotion catalog and demo users ready")

        container = build_container(
            db_config=db_config,
            nlp_api_key=getattr(settings, "GOOGLE_NLP_API_KEY", ""),
            nlp_endpoint=getattr(settings, "GOOGLE_NLP_ENDPOINT"),
            nlp_timeout=float(getattr(settings, "NLP_TIMEOUT_SECONDS", 10)),
            timezone=getattr(settings, "APP_TIMEZONE", DEFAULT_TIMEZONE),
        )
        if not getattr(settings, "GOOGLE_NLP_API_KEY", ""):
            logger.warning("GOOGLE_NLP_API_KEY is not set; comments will get a NEUTRAL sentiment")

    app.extensions["container"] = container

    register_error_handlers(app)
    register_users(app, container)
    register_checkins(app, container)
    register_dashboard(app, container)
    register_notifications(app, container)
    register_audit(app, container)

    return app
