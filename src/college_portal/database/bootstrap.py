"""Schema / seed helpers used at start-up and by scripts/init_db.py, scripts/seed_db.py."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable
from uuid import uuid4

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig

logger = logging.getLogger(__name__)


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = {
        "host": target.host,
        "port": target.port,
        "user": target.user,
        "password": target.password,
        "use_pure": True,
    }
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_file(db_config: dict, path: str | Path) -> int:
    sql = _strip_comments(_strip_create_db_and_use(Path(path).read_text(encoding="utf-8")))
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        count = 0
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
        return count
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _run_file(db_config, schema_path)
    logger.info("Applied %s (%d statements)", Path(schema_path).name, count)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    count = _run_file(db_config, seed_path)
    logger.info("Applied %s (%d statements)", Path(seed_path).name, count)


def ensure_demo_accounts(
    db_config: dict,
    *,
    admin_email: str,
    teacher_domain: str,
    student_domain: str,
) -> None:
    """Create (or reset the password of) one admin, one teacher and one student."""
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor(dictionary=True)

        def upsert_account(email: str, password: str, role: str) -> str:
            email = email.lower()
            password_hash = generate_password_hash(password)
            cur.execute("SELECT uid FROM accounts WHERE email=%s", (email,))
            existing = cur.fetchone()
            if existing:
                cur.execute(
                    "UPDATE accounts SET password_hash=%s, role=%s, is_active=1 WHERE uid=%s",
                    (password_hash, role, existing["uid"]),
                )
                return str(existing["uid"])
            uid = uuid4().hex
            cur.execute(
                "INSERT INTO accounts(uid, email, password_hash, role) VALUES(%s,%s,%s,%s)",
                (uid, email, password_hash, role),
            )
            return uid

        upsert_account(admin_email, "admin123", "admin")

        teacher_email = f"1001@{teacher_domain}"
        teacher_uid = upsert_account(teacher_email, "teacher123", "teacher")
        cur.execute("SELECT teacher_id FROM teachers WHERE teacher_id=%s", ("1001",))
        if not cur.fetchone():
            cur.execute(
                """
                INSERT INTO teachers(teacher_id, uid, name, department, email, salary, is_librarian, account_handler)
                VALUES(%s,%s,%s,%s,%s,%s,1,1)
                """,
                ("1001", teacher_uid, "Demo Teacher", "Computer Science", teacher_email.lower(), 45000),
            )

        student_uid = upsert_account(f"cs001@{student_domain}", "123456", "student")
        cur.execute("SELECT student_id FROM students WHERE roll_no=%s", ("CS001",))
        if not cur.fetchone():
            cur.execute(
                """
                INSERT INTO students(uid, roll_no, name, course, semester, email, phone, fee_status, optional_fees)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (student_uid, "CS001", "Demo Student", "B.Tech CSE", 1, "", "", "{}", '{"1": {"hostel": true}}'),
            )

        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
