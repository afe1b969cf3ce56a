from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from .model import RosterStudent, Subject, SubjectTeacher
from .repository import SubjectRepository


def _to_subject(row: dict) -> Subject:
    teachers = load_json(row.get("teachers"), [])
    students = load_json(row.get("students"), [])
    return Subject(
        subject_id=int(row["subject_id"]),
        subject_code=row["subject_code"],
        subject_name=row["subject_name"],
        teachers=tuple(SubjectTeacher(id=str(t.get("id")), name=t.get("name") or "") for t in teachers),
        students=tuple(
            RosterStudent(
                id=str(s["id"]) if s.get("id") is not None else None,
                roll_no=str(s.get("roll_no") or ""),
                name=s.get("name") or "",
            )
            for s in students
        ),
    )


class MySQLSubjectRepository(SubjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT subject_id, subject_code, subject_name, teachers, students FROM subjects WHERE subject_id=%s",
                (int(subject_id),),
            )
            row = fetchone(cur)
            return _to_subject(row) if row else None

    def list_all(self) -> Sequence[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT subject_id, subject_code, subject_name, teachers, students FROM subjects ORDER BY subject_code"
            )
            return [_to_subject(r) for r in fetchall(cur)]

    def create_subject(
        self,
        *,
        subject_code: str,
        subject_name: str,
        teachers: Sequence[SubjectTeacher],
        students: Sequence[RosterStudent],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO subjects(subject_code, subject_name, teachers, students)
                VALUES(%s,%s,%s,%s)
                """,
                (
                    subject_code,
                    subject_name,
                    dump_json([{"id": t.id, "name": t.name} for t in teachers]),
                    dump_json([{"id": s.id, "roll_no": s.roll_no, "name": s.name} for s in students]),
                ),
            )
            return int(cur.lastrowid)

    def delete_by_id(self, subject_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM subjects WHERE subject_id=%s", (int(subject_id),))
            return cur.rowcount > 0
