from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SubjectTeacher:
    id: str
    name: str


@dataclass(frozen=True)
class RosterStudent:
    """Student entry embedded in a subject at creation time."""

    id: Optional[str]
    roll_no: str
    name: str


@dataclass(frozen=True)
class Subject:
    subject_id: int
    subject_code: str
    subject_name: str
    teachers: tuple[SubjectTeacher, ...] = ()
    students: tuple[RosterStudent, ...] = ()

    def is_taught_by(self, teacher_id: str) -> bool:
        return any(t.id == teacher_id for t in self.teachers)

    def has_student(self, roll_no: str) -> bool:
        return any(s.roll_no == roll_no for s in self.students)

    def to_dict(self) -> dict:
        return {
            "id": self.subject_id,
            "subject_code": self.subject_code,
            "subject_name": self.subject_name,
            "teachers": [{"id": t.id, "name": t.name} for t in self.teachers],
            "students": [{"id": s.id, "roll_no": s.roll_no, "name": s.name} for s in self.students],
        }
