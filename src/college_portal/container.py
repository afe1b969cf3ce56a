from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .accounts.mailer import PasswordResetMailer
from .accounts.mysql_account_repository import MySQLAccountRepository
from .accounts.repository import AccountRepository
from .accounts.service import AuthService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .fees.mysql_fee_repository import MySQLFeeRepository
from .fees.repository import FeeRepository
from .fees.service import FeeService
from .library.mysql_library_repository import MySQLLibraryRepository
from .library.repository import LibraryRepository
from .library.service import LibraryService
from .marks.mysql_marks_repository import MySQLMarksRepository
from .marks.repository import MarksRepository
from .marks.service import MarksService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService
from .subjects.mysql_subject_repository import MySQLSubjectRepository
from .subjects.repository import SubjectRepository
from .subjects.service import SubjectService
from .teachers.mysql_teacher_repository import MySQLTeacherRepository
from .teachers.repository import TeacherRepository
from .teachers.service import TeacherService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    accounts_repo: AccountRepository
    teachers_repo: TeacherRepository
    students_repo: StudentRepository
    subjects_repo: SubjectRepository
    attendance_repo: AttendanceRepository
    marks_repo: MarksRepository
    fees_repo: FeeRepository
    library_repo: LibraryRepository

    auth_service: AuthService
    teacher_service: TeacherService
    student_service: StudentService
    subject_service: SubjectService
    attendance_service: AttendanceService
    marks_service: MarksService
    fee_service: FeeService
    library_service: LibraryService
    dashboard_service: DashboardService


def build_services(
    *,
    accounts_repo: AccountRepository,
    teachers_repo: TeacherRepository,
    students_repo: StudentRepository,
    subjects_repo: SubjectRepository,
    attendance_repo: AttendanceRepository,
    marks_repo: MarksRepository,
    fees_repo: FeeRepository,
    library_repo: LibraryRepository,
    auth_settings: dict,
    mailer: PasswordResetMailer,
    conn: Optional[DatabaseConnection] = None,
    clock: Any = None,
) -> Container:
    """Wire services on top of any set of repositories (MySQL in the app, fakes in tests)."""
    timing = {"clock": clock} if clock is not None else {}

    auth_service = AuthService(
        accounts_repo,
        teachers_repo,
        students_repo,
        secret_key=str(auth_settings["secret_key"]),
        admin_email=str(auth_settings.get("admin_email", "")),
        teacher_domain=str(auth_settings.get("teacher_domain", "sgsteacher.com")),
        student_domain=str(auth_settings.get("student_domain", "sgs.com")),
        reset_max_age=int(auth_settings.get("reset_max_age", 3600)),
        mailer=mailer,
    )
    teacher_service = TeacherService(teachers_repo, auth_service, **timing)
    student_service = StudentService(students_repo, auth_service)
    subject_service = SubjectService(subjects_repo, teachers_repo, students_repo)
    attendance_service = AttendanceService(attendance_repo, marks_repo, subject_service, **timing)
    marks_service = MarksService(marks_repo, subject_service, **timing)
    fee_service = FeeService(fees_repo, students_repo, **timing)
    library_service = LibraryService(library_repo, students_repo, **timing)
    dashboard_service = DashboardService(
        students_repo,
        teacher_service,
        subject_service,
        attendance_service,
        fee_service,
    )

    return Container(
        conn=conn,
        accounts_repo=accounts_repo,
        teachers_repo=teachers_repo,
        students_repo=students_repo,
        subjects_repo=subjects_repo,
        attendance_repo=attendance_repo,
        marks_repo=marks_repo,
        fees_repo=fees_repo,
        library_repo=library_repo,
        auth_service=auth_service,
        teacher_service=teacher_service,
        student_service=student_service,
        subject_service=subject_service,
        attendance_service=attendance_service,
        marks_service=marks_service,
        fee_service=fee_service,
        library_service=library_service,
        dashboard_service=dashboard_service,
    )


def build_container(*, db_config: dict, auth_settings: dict, mailer: PasswordResetMailer) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return build_services(
        conn=conn,
        accounts_repo=MySQLAccountRepository(conn),
        teachers_repo=MySQLTeacherRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        subjects_repo=MySQLSubjectRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        marks_repo=MySQLMarksRepository(conn),
        fees_repo=MySQLFeeRepository(conn),
        library_repo=MySQLLibraryRepository(conn),
        auth_settings=auth_settings,
        mailer=mailer,
    )
