from __future__ import annotations

import pytest

from college_portal.core.exceptions import NotFoundError, ValidationError


def test_add_teacher_creates_login_account(container, repos):
    container.teacher_service.add_teacher(
        teacher_id="2001",
        name="Nina Das",
        department="Maths",
        password="secret12",
    )

    teacher = container.teacher_service.get_teacher("2001")
    assert teacher.email == "2001@sgsteacher.com"
    assert repos.accounts.get_by_uid(teacher.uid).email == "2001@sgsteacher.com"


def test_add_teacher_without_password_has_no_account(container, repos):
    container.teacher_service.add_teacher(teacher_id="2002", name="Om", department="Maths")

    assert container.teacher_service.get_teacher("2002").uid is None
    assert repos.accounts.accounts == {}


def test_duplicate_and_missing_fields_are_rejected(container, school):
    with pytest.raises(ValidationError, match="already exists"):
        container.teacher_service.add_teacher(teacher_id="1001", name="X", department="Y")
    with pytest.raises(ValidationError, match="Department is required"):
        container.teacher_service.add_teacher(teacher_id="3001", name="X", department="")


def test_list_teachers_filters_by_name_or_id(container, school):
    assert [t.teacher_id for t in container.teacher_service.list_teachers()] == ["1001", "1002"]
    assert [t.teacher_id for t in container.teacher_service.list_teachers(query="vik")] == ["1002"]
    assert [t.teacher_id for t in container.teacher_service.list_teachers(query="1001")] == ["1001"]


def test_update_teacher(container, school):
    updated = container.teacher_service.update_teacher(
        "1002",
        name="Vikram S.",
        department="Physics",
        salary=36000,
        account_handler=True,
    )

    assert updated.account_handler
    assert container.teacher_service.get_teacher("1002").salary == 36000


def test_flags_and_salary(container, school, clock):
    container.teacher_service.set_librarian("1002", True)
    container.teacher_service.set_admin("1002", True)
    paid = container.teacher_service.mark_salary_paid("1001")

    teacher = container.teacher_service.get_teacher("1002")
    assert teacher.is_librarian and teacher.is_admin
    assert paid.last_salary_paid == clock.now
    assert container.teacher_service.salary_totals() == {"paid": 40000, "pending": 35000, "account_handlers": 0}


def test_delete_teacher_removes_account(container, repos, school):
    uid = container.teacher_service.get_teacher("1001").uid

    container.teacher_service.delete_teacher("1001")

    assert repos.accounts.get_by_uid(uid) is None
    with pytest.raises(NotFoundError):
        container.teacher_service.get_teacher("1001")
