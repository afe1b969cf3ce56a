from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from types import SimpleNamespace
from typing import Optional

import pytest

from college_portal.accounts.model import Account, SessionUser
from college_portal.attendance.model import AttendanceEntry, AttendanceSession
from college_portal.container import build_services
from college_portal.core.enums import IssueStatus, Role
from college_portal.fees.model import FeePayment, FeeStructure
from college_portal.library.model import Book, IssuedBook
from college_portal.marks.model import MarksRecord
from college_portal.students.model import Student
from college_portal.subjects.model import Subject
from college_portal.teachers.model import Teacher

FIXED_NOW = datetime(2024, 3, 1, 10, 0, 0)

AUTH_SETTINGS = {
    "secret_key": "test-secret",
    "admin_email": "admin@sgs.com",
    "teacher_domain": "sgsteacher.com",
    "student_domain": "sgs.com",
    "reset_max_age": 3600,
}


class InMemoryAccounts:
    def __init__(self):
        self.accounts: dict[str, Account] = {}
        self._seq = 0

    def get_by_uid(self, uid: str) -> Optional[Account]:
        return self.accounts.get(uid)

    def get_by_email(self, email: str) -> Optional[Account]:
        for account in self.accounts.values():
            if account.email == email.lower():
                return account
        return None

    def create_account(self, *, email: str, password_hash: str, role: Role) -> str:
        self._seq += 1
        uid = f"uid-{self._seq}"
        self.accounts[uid] = Account(uid=uid, email=email, password_hash=password_hash, role=role)
        return uid

    def update_password(self, uid: str, *, password_hash: str) -> bool:
        if uid not in self.accounts:
            return False
        self.accounts[uid] = replace(self.accounts[uid], password_hash=password_hash)
        return True

    def update_email(self, uid: str, *, email: str) -> bool:
        if uid not in self.accounts:
            return False
        self.accounts[uid] = replace(self.accounts[uid], email=email)
        return True

    def delete_by_uid(self, uid: str) -> bool:
        return self.accounts.pop(uid, None) is not None


class InMemoryTeachers:
    def __init__(self):
        self.teachers: dict[str, Teacher] = {}

    def get_by_id(self, teacher_id: str) -> Optional[Teacher]:
        return self.teachers.get(teacher_id)

    def get_by_uid(self, uid: str) -> Optional[Teacher]:
        return next((t for t in self.teachers.values() if t.uid == uid), None)

    def list_all(self):
        return sorted(self.teachers.values(), key=lambda t: t.name)

    def create_teacher(self, teacher: Teacher) -> str:
        self.teachers[teacher.teacher_id] = teacher
        return teacher.teacher_id

    def update_teacher(self, teacher_id: str, **fields) -> bool:
        self.teachers[teacher_id] = replace(self.teachers[teacher_id], **fields)
        return True

    def set_flag(self, teacher_id: str, *, flag: str, value: bool) -> bool:
        self.teachers[teacher_id] = replace(self.teachers[teacher_id], **{flag: value})
        return True

    def mark_salary_paid(self, teacher_id: str, *, paid_at: datetime) -> bool:
        self.teachers[teacher_id] = replace(self.teachers[teacher_id], salary_paid=True, last_salary_paid=paid_at)
        return True

    def delete_by_id(self, teacher_id: str) -> bool:
        return self.teachers.pop(teacher_id, None) is not None


class InMemoryStudents:
    def __init__(self):
        self.students: dict[int, Student] = {}
        self._seq = 0

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self.students.get(int(student_id))

    def get_by_uid(self, uid: str) -> Optional[Student]:
        return next((s for s in self.students.values() if s.uid == uid), None)

    def get_by_roll_no(self, roll_no: str) -> Optional[Student]:
        return next((s for s in self.students.values() if s.roll_no == roll_no), None)

    def list_all(self):
        return list(self.students.values())

    def create_student(self, *, uid, roll_no, name, course, semester, email, phone) -> int:
        self._seq += 1
        self.students[self._seq] = Student(
            student_id=self._seq,
            uid=uid,
            roll_no=roll_no,
            name=name,
            course=course,
            semester=semester,
            email=email,
            phone=phone,
        )
        return self._seq

    def update_student(self, student_id: int, **fields) -> bool:
        self.students[student_id] = replace(self.students[student_id], **fields)
        return True

    def update_optional_fees(self, student_id: int, *, optional_fees: dict) -> bool:
        self.students[student_id] = replace(self.students[student_id], optional_fees=optional_fees)
        return True

    def update_fee_status(self, student_id: int, *, fee_status: dict) -> bool:
        self.students[student_id] = replace(self.students[student_id], fee_status=fee_status)
        return True

    def delete_by_id(self, student_id: int) -> bool:
        return self.students.pop(int(student_id), None) is not None


class InMemorySubjects:
    def __init__(self):
        self.subjects: dict[int, Subject] = {}
        self._seq = 0

    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        return self.subjects.get(int(subject_id))

    def list_all(self):
        return list(self.subjects.values())

    def create_subject(self, *, subject_code, subject_name, teachers, students) -> int:
        self._seq += 1
        self.subjects[self._seq] = Subject(
            subject_id=self._seq,
            subject_code=subject_code,
            subject_name=subject_name,
            teachers=tuple(teachers),
            students=tuple(students),
        )
        return self._seq

    def delete_by_id(self, subject_id: int) -> bool:
        return self.subjects.pop(int(subject_id), None) is not None


class InMemoryAttendance:
    def __init__(self):
        self.sessions: list[AttendanceSession] = []

    def list_for_subject(self, subject_id: int):
        items = [s for s in self.sessions if s.subject_id == subject_id]
        return sorted(items, key=lambda s: (s.date, s.session_id))

    def create_session(self, *, subject_id, subject_code, subject_name, session_date: date, records) -> int:
        session_id = len(self.sessions) + 1
        self.sessions.append(
            AttendanceSession(
                session_id=session_id,
                subject_id=subject_id,
                subject_code=subject_code,
                subject_name=subject_name,
                date=session_date.isoformat(),
                records=tuple(records),
            )
        )
        return session_id


class InMemoryMarks:
    def __init__(self):
        self.records: list[MarksRecord] = []

    def list_for_subject(self, subject_id: int):
        return [r for r in self.records if r.subject_id == subject_id]

    def list_for_roll_no(self, roll_no: str):
        return [r for r in self.records if r.roll_no == roll_no]

    def add_records(self, records) -> int:
        for rec in records:
            self.records.append(replace(rec, record_id=len(self.records) + 1))
        return len(records)


class InMemoryFees:
    """Payment log plus running totals; ``fail_on_call`` makes the n-th payment raise."""

    def __init__(self, students: InMemoryStudents):
        self._students = students
        self.structures: dict[int, FeeStructure] = {}
        self.payments: list[FeePayment] = []
        self.fail_on_call: Optional[int] = None
        self._calls = 0

    def list_structures(self):
        return sorted(self.structures.values(), key=lambda f: (f.semester, f.fee_structure_id))

    def get_structure(self, fee_structure_id: int) -> Optional[FeeStructure]:
        return self.structures.get(int(fee_structure_id))

    def create_structure(self, *, semester, fee_type, amount, due_date, description="") -> int:
        structure_id = len(self.structures) + 1
        self.structures[structure_id] = FeeStructure(
            fee_structure_id=structure_id,
            semester=semester,
            fee_type=fee_type,
            amount=amount,
            due_date=due_date,
            description=description,
        )
        return structure_id

    def update_structure(self, fee_structure_id, **fields) -> bool:
        self.structures[fee_structure_id] = replace(self.structures[fee_structure_id], **fields)
        return True

    def list_payments(self, *, student_id=None, limit=None):
        items = [p for p in reversed(self.payments) if student_id is None or p.student_id == student_id]
        return items[:limit] if limit else items

    def record_payment(self, payment: FeePayment, *, fee_status: dict) -> int:
        self._calls += 1
        if self.fail_on_call is not None and self._calls == self.fail_on_call:
            raise RuntimeError("payment store unavailable")
        payment_id = len(self.payments) + 1
        self.payments.append(replace(payment, payment_id=payment_id))
        self._students.update_fee_status(payment.student_id, fee_status=fee_status)
        return payment_id


class InMemoryLibrary:
    def __init__(self):
        self.books: dict[int, Book] = {}
        self.issues: dict[int, IssuedBook] = {}
        self._issue_seq = 0

    def list_books(self):
        return sorted(self.books.values(), key=lambda b: b.book_id, reverse=True)

    def get_book(self, book_id: int) -> Optional[Book]:
        return self.books.get(int(book_id))

    def create_book(self, *, title, branch, quantity, description="", year=None, semester=None, price=0) -> int:
        book_id = len(self.books) + 1
        self.books[book_id] = Book(
            book_id=book_id,
            title=title,
            branch=branch,
            total_quantity=quantity,
            available_quantity=quantity,
            description=description,
            year=year,
            semester=semester,
            price=price,
        )
        return book_id

    def update_book(self, book_id, *, quantity, **fields) -> bool:
        self.books[book_id] = replace(self.books[book_id], total_quantity=quantity, **fields)
        return True

    def delete_book(self, book_id: int) -> bool:
        return self.books.pop(int(book_id), None) is not None

    def list_issued(self, *, teacher_id=None, roll_no=None, status=None):
        return [
            i
            for i in self.issues.values()
            if (teacher_id is None or i.teacher_id == teacher_id)
            and (roll_no is None or i.student_roll_no == roll_no)
            and (status is None or i.status == status)
        ]

    def get_issue(self, issue_id: int) -> Optional[IssuedBook]:
        return self.issues.get(int(issue_id))

    def issue_book(self, *, book, student_roll_no, student_name, teacher_id, teacher_name, issue_date, due_date) -> int:
        self._issue_seq += 1
        self.issues[self._issue_seq] = IssuedBook(
            issue_id=self._issue_seq,
            book_id=book.book_id,
            book_title=book.title,
            student_roll_no=student_roll_no,
            student_name=student_name,
            teacher_id=teacher_id,
            teacher_name=teacher_name,
            issue_date=issue_date,
            due_date=due_date,
            status=IssueStatus.ISSUED,
        )
        current = self.books[book.book_id]
        self.books[book.book_id] = replace(
            current,
            issued_quantity=current.issued_quantity + 1,
            available_quantity=current.available_quantity - 1,
        )
        return self._issue_seq

    def return_book(self, issue: IssuedBook) -> bool:
        if self.issues.pop(issue.issue_id, None) is None:
            return False
        current = self.books[issue.book_id]
        self.books[issue.book_id] = replace(
            current,
            issued_quantity=current.issued_quantity - 1,
            available_quantity=current.available_quantity + 1,
        )
        return True

    def renew(self, issue_id: int, *, due_date: datetime) -> bool:
        issue = self.issues[issue_id]
        self.issues[issue_id] = replace(issue, due_date=due_date, renewal_count=issue.renewal_count + 1)
        return True


class RecordingMailer:
    def __init__(self):
        self.sent: list[tuple[str, str]] = []

    def send_password_reset(self, email: str, token: str) -> None:
        self.sent.append((email, token))


class Clock:
    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture()
def clock() -> Clock:
    return Clock()


@pytest.fixture()
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture()
def repos():
    students = InMemoryStudents()
    return SimpleNamespace(
        accounts=InMemoryAccounts(),
        teachers=InMemoryTeachers(),
        students=students,
        subjects=InMemorySubjects(),
        attendance=InMemoryAttendance(),
        marks=InMemoryMarks(),
        fees=InMemoryFees(students),
        library=InMemoryLibrary(),
    )


@pytest.fixture()
def container(repos, clock, mailer):
    return build_services(
        accounts_repo=repos.accounts,
        teachers_repo=repos.teachers,
        students_repo=repos.students,
        subjects_repo=repos.subjects,
        attendance_repo=repos.attendance,
        marks_repo=repos.marks,
        fees_repo=repos.fees,
        library_repo=repos.library,
        auth_settings=AUTH_SETTINGS,
        mailer=mailer,
        clock=clock,
    )


@pytest.fixture()
def admin() -> SessionUser:
    return SessionUser(uid="admin-uid", email="admin@sgs.com", role=Role.ADMIN, name="Administrator")


@pytest.fixture()
def school(container):
    """One teacher with an account, three students and subject CS101 taught by the teacher."""
    container.teacher_service.add_teacher(
        teacher_id="1001",
        name="Asha Rao",
        department="Computer Science",
        password="teacher123",
        salary=40000,
    )
    container.teacher_service.add_teacher(teacher_id="1002", name="Vikram Shah", department="Physics", salary=35000)

    ids = {}
    for roll_no, name in (("CS10", "Meera"), ("CS2", "Arjun"), ("CS1", "Kiran")):
        ids[roll_no] = container.student_service.add_student(
            name=name,
            roll_no=roll_no,
            course="B.Tech CSE",
            semester=1,
        )

    subject_id = container.subject_service.create_subject(
        subject_code="CS101",
        subject_name="Programming Fundamentals",
        teacher_ids=["1001"],
        student_ids=list(ids.values()),
    )
    teacher = container.auth_service.sign_in("1001@sgsteacher.com", "teacher123")
    return SimpleNamespace(subject_id=subject_id, student_ids=ids, teacher=teacher)
