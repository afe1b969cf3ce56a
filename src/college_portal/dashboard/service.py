from __future__ import annotations

from ..attendance.service import AttendanceService
from ..fees.service import FeeService
from ..students.repository import StudentRepository
from ..subjects.service import SubjectService
from ..teachers.service import TeacherService


class DashboardService:
    """Read-only counters for the admin and teacher landing pages."""

    def __init__(
        self,
        students: StudentRepository,
        teachers: TeacherService,
        subjects: SubjectService,
        attendance: AttendanceService,
        fees: FeeService,
    ):
        self._students = students
        self._teachers = teachers
        self._subjects = subjects
        self._attendance = attendance
        self._fees = fees

    def admin_stats(self) -> dict:
        salary = self._teachers.salary_totals()
        return {
            "students": len(self._students.list_all()),
            "teachers": len(self._teachers.list_teachers()),
            "subjects": len(self._subjects.list_subjects()),
            "fee_collection": self._fees.total_collection(),
            "salary_paid": salary["paid"],
            "salary_pending": salary["pending"],
            "account_handlers": salary["account_handlers"],
        }

    def teacher_dashboard(self, teacher_id: str) -> dict:
        subjects = self._subjects.subjects_for_teacher(teacher_id)
        return {
            "subjects": [
                {
                    "id": s.subject_id,
                    "subject_code": s.subject_code,
                    "subject_name": s.subject_name,
                    "students": len(s.students),
                    "sessions": self._attendance.session_count(s.subject_id),
                }
                for s in subjects
            ],
            "total_students": len({st.roll_no for s in subjects for st in s.students}),
        }
