import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "college_portal_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

ADMIN_EMAIL = "admin@sgs.com"
TEACHER_EMAIL_DOMAIN = "sgsteacher.com"
STUDENT_EMAIL_DOMAIN = "sgs.com"

PASSWORD_RESET_MAX_AGE = 3600

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

SESSION_LIFETIME_DAYS = 7

PASSWORD_RESET_URL = "http://portal.test/reset-password"
MAIL_DEFAULT_SENDER = "no-reply@sgs.com"
MAIL_SUPPRESS_SEND = True
