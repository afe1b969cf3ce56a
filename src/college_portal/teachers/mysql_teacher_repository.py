from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Teacher
from .repository import TeacherRepository

_COLUMNS = """
    teacher_id, uid, name, department, email, salary, salary_paid, last_salary_paid,
    is_librarian, account_handler, is_admin
"""

FLAG_COLUMNS = frozenset({"is_librarian", "account_handler", "is_admin"})


def _to_teacher(row: dict) -> Teacher:
    return Teacher(
        teacher_id=str(row["teacher_id"]),
        uid=row.get("uid"),
        name=row["name"],
        department=row["department"],
        email=row.get("email") or "",
        salary=float(row.get("salary") or 0),
        salary_paid=bool(row.get("salary_paid")),
        last_salary_paid=row.get("last_salary_paid"),
        is_librarian=bool(row.get("is_librarian")),
        account_handler=bool(row.get("account_handler")),
        is_admin=bool(row.get("is_admin")),
    )


class MySQLTeacherRepository(TeacherRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, teacher_id: str) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers WHERE teacher_id=%s", (teacher_id,))
            row = fetchone(cur)
            return _to_teacher(row) if row else None

    def get_by_uid(self, uid: str) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers WHERE uid=%s", (uid,))
            row = fetchone(cur)
            return _to_teacher(row) if row else None

    def list_all(self) -> Sequence[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers ORDER BY name")
            return [_to_teacher(r) for r in fetchall(cur)]

    def create_teacher(self, teacher: Teacher) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO teachers(teacher_id, uid, name, department, email, salary,
                                     salary_paid, is_librarian, account_handler, is_admin)
                VALUES(%s,%s,%s,%s,%s,%s,0,%s,%s,%s)
                """,
                (
                    teacher.teacher_id,
                    teacher.uid,
                    teacher.name,
                    teacher.department,
                    teacher.email,
                    teacher.salary,
                    int(teacher.is_librarian),
                    int(teacher.account_handler),
                    int(teacher.is_admin),
                ),
            )
        return teacher.teacher_id

    def update_teacher(
        self,
        teacher_id: str,
        *,
        name: str,
        department: str,
        salary: float,
        account_handler: bool,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE teachers
                SET name=%s, department=%s, salary=%s, account_handler=%s
                WHERE teacher_id=%s
                """,
                (name, department, salary, int(account_handler), teacher_id),
            )
            return cur.rowcount > 0

    def set_flag(self, teacher_id: str, *, flag: str, value: bool) -> bool:
        if flag not in FLAG_COLUMNS:
            raise ValueError(f"Unsupported teacher flag: {flag!r}")
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE teachers SET {flag}=%s WHERE teacher_id=%s", (int(value), teacher_id))
            return cur.rowcount > 0

    def mark_salary_paid(self, teacher_id: str, *, paid_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE teachers SET salary_paid=1, last_salary_paid=%s WHERE teacher_id=%s",
                (paid_at, teacher_id),
            )
            return cur.rowcount > 0

    def delete_by_id(self, teacher_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM teachers WHERE teacher_id=%s", (teacher_id,))
            return cur.rowcount > 0
