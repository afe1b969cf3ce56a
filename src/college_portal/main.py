from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from flask_mail import Mail

from config import get_settings_module

from .accounts.controller import register as register_accounts
from .accounts.mailer import FlaskMailResetMailer
from .attendance.controller import register as register_attendance
from .common.web import register_error_handlers
from .container import Container, build_container
from .dashboard.controller import register as register_dashboard
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_accounts, list_tables
from .fees.controller import register as register_fees
from .library.controller import register as register_library
from .marks.controller import register as register_marks
from .students.controller import register as register_students
from .subjects.controller import register as register_subjects
from .teachers.controller import register as register_teachers

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[2] / "database"

MAIL_SETTINGS = (
    "MAIL_SERVER",
    "MAIL_PORT",
    "MAIL_USE_TLS",
    "MAIL_USE_SSL",
    "MAIL_USERNAME",
    "MAIL_PASSWORD",
    "MAIL_DEFAULT_SENDER",
    "MAIL_SUPPRESS_SEND",
)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def auth_settings_from(settings) -> dict:
    return {
        "secret_key": getattr(settings, "SECRET_KEY"),
        "admin_email": getattr(settings, "ADMIN_EMAIL", ""),
        "teacher_domain": getattr(settings, "TEACHER_EMAIL_DOMAIN", "sgsteacher.com"),
        "student_domain": getattr(settings, "STUDENT_EMAIL_DOMAIN", "sgs.com"),
        "reset_max_age": getattr(settings, "PASSWORD_RESET_MAX_AGE", 3600),
    }


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    With ``container`` given (tests), no database is touched; otherwise the
    MySQL-backed container is built from the settings module picked by APP_ENV.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.permanent_session_lifetime = timedelta(days=int(getattr(settings, "SESSION_LIFETIME_DAYS", 7)))
    for key in MAIL_SETTINGS:
        if hasattr(settings, key):
            app.config[key] = getattr(settings, key)
    mail = Mail(app)

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            auth = auth_settings_from(settings)
            ensure_demo_accounts(
                db_config,
                admin_email=auth["admin_email"],
                teacher_domain=auth["teacher_domain"],
                student_domain=auth["student_domain"],
            )
            logger.info("Demo seed ready")

        mailer = FlaskMailResetMailer(mail, reset_url=getattr(settings, "PASSWORD_RESET_URL", "/reset-password"))
        container = build_container(
            db_config=db_config,
            auth_settings=auth_settings_from(settings),
            mailer=mailer,
        )

    register_error_handlers(app)
    register_accounts(app, container)
    register_dashboard(app, container)
    register_teachers(app, container)
    register_students(app, container)
    register_subjects(app, container)
    register_attendance(app, container)
    register_marks(app, container)
    register_fees(app, container)
    register_library(app, container)

    return app
