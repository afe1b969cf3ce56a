from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from .model import Student
from .repository import StudentRepository

_COLUMNS = "student_id, uid, roll_no, name, course, semester, email, phone, fee_status, optional_fees"


def _to_student(row: dict) -> Student:
    return Student(
        student_id=int(row["student_id"]),
        uid=row.get("uid"),
        roll_no=str(row["roll_no"]),
        name=row["name"],
        course=row["course"],
        semester=int(row.get("semester") or 1),
        email=row.get("email") or "",
        phone=row.get("phone") or "",
        fee_status=load_json(row.get("fee_status"), {}),
        optional_fees=load_json(row.get("optional_fees"), {}),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_where(self, column: str, value) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE {column}=%s", (value,))
            row = fetchone(cur)
            return _to_student(row) if row else None

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self._get_where("student_id", int(student_id))

    def get_by_uid(self, uid: str) -> Optional[Student]:
        return self._get_where("uid", uid)

    def get_by_roll_no(self, roll_no: str) -> Optional[Student]:
        return self._get_where("roll_no", roll_no)

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students ORDER BY roll_no")
            return [_to_student(r) for r in fetchall(cur)]

    def create_student(
        self,
        *,
        uid: Optional[str],
        roll_no: str,
        name: str,
        course: str,
        semester: int,
        email: str,
        phone: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(uid, roll_no, name, course, semester, email, phone, fee_status, optional_fees)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (uid, roll_no, name, course, semester, email, phone, dump_json({}), dump_json({})),
            )
            return int(cur.lastrowid)

    def update_student(
        self,
        student_id: int,
        *,
        roll_no: str,
        name: str,
        course: str,
        semester: int,
        email: str,
        phone: str,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE students
                SET roll_no=%s, name=%s, course=%s, semester=%s, email=%s, phone=%s
                WHERE student_id=%s
                """,
                (roll_no, name, course, semester, email, phone, int(student_id)),
            )
            return cur.rowcount > 0

    def update_optional_fees(self, student_id: int, *, optional_fees: dict) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE students SET optional_fees=%s WHERE student_id=%s",
                (dump_json(optional_fees), int(student_id)),
            )
            return cur.rowcount > 0

    def update_fee_status(self, student_id: int, *, fee_status: dict) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE students SET fee_status=%s WHERE student_id=%s",
                (dump_json(fee_status), int(student_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE student_id=%s", (int(student_id),))
            return cur.rowcount > 0
