from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from dotenv import load_dotenv

from config import get_settings_module

from college_portal.database.bootstrap import apply_seed_sql, ensure_demo_accounts


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    ensure_demo_accounts(
        db_config,
        admin_email=settings.ADMIN_EMAIL,
        teacher_domain=settings.TEACHER_EMAIL_DOMAIN,
        student_domain=settings.STUDENT_EMAIL_DOMAIN,
    )

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )
    print(f"  admin:   {settings.ADMIN_EMAIL} / admin123")
    print(f"  teacher: 1001@{settings.TEACHER_EMAIL_DOMAIN} / teacher123")
    print(f"  student: cs001@{settings.STUDENT_EMAIL_DOMAIN} / 123456")


if __name__ == "__main__":
    main()
