from __future__ import annotations

from dataclasses import replace
from datetime import timedelta

import pytest

from college_portal.core.exceptions import AuthorizationError, NotFoundError, ValidationError


@pytest.fixture()
def librarian(school):
    return replace(school.teacher, is_librarian=True)


@pytest.fixture()
def book_id(container, librarian):
    return container.library_service.add_book(librarian, title="Introduction to Algorithms", branch="CSE", quantity=2)


def test_only_librarians_manage_the_catalog(container, school):
    with pytest.raises(AuthorizationError):
        container.library_service.add_book(school.teacher, title="X", branch="CSE", quantity=1)


def test_catalog_search(container, librarian, book_id):
    container.library_service.add_book(librarian, title="Engineering Physics", branch="PHY", quantity=1)

    assert [b.title for b in container.library_service.list_books(query="algo")] == ["Introduction to Algorithms"]
    assert [b.branch for b in container.library_service.list_books(branch="PHY")] == ["PHY"]


def test_issue_and_return_move_copies(container, librarian, book_id, clock):
    service = container.library_service

    issue_id = service.issue_book(librarian, book_id=book_id, roll_no="CS1")

    book = service.get_book(book_id)
    assert (book.issued_quantity, book.available_quantity) == (1, 1)
    issue = service.issued_books(roll_no="CS1")[0]
    assert issue.due_date == clock.now + timedelta(days=30)
    assert issue.student_name == "Kiran"
    assert issue.teacher_id == "1001"

    clock.now = issue.due_date + timedelta(days=3)
    assert service.issued_books(roll_no="CS1")[0].fine == 15
    assert service.return_book(librarian, issue_id) == 15

    book = service.get_book(book_id)
    assert (book.issued_quantity, book.available_quantity) == (0, 2)
    assert service.issued_books(roll_no="CS1") == []


def test_same_book_twice_and_no_copies_left(container, librarian, book_id):
    service = container.library_service
    service.issue_book(librarian, book_id=book_id, roll_no="CS1")

    with pytest.raises(ValidationError, match="already has this book"):
        service.issue_book(librarian, book_id=book_id, roll_no="CS1")

    service.issue_book(librarian, book_id=book_id, roll_no="CS2")
    with pytest.raises(ValidationError, match="No copies available"):
        service.issue_book(librarian, book_id=book_id, roll_no="CS10")


def test_student_book_limit(container, librarian):
    service = container.library_service
    for n in range(6):
        service.add_book(librarian, title=f"Book {n}", branch="CSE", quantity=1)

    for n in range(1, 6):
        service.issue_book(librarian, book_id=n, roll_no="CS1")

    with pytest.raises(ValidationError, match="more than 5"):
        service.issue_book(librarian, book_id=6, roll_no="CS1")


def test_unknown_student(container, librarian, book_id):
    with pytest.raises(NotFoundError):
        container.library_service.issue_book(librarian, book_id=book_id, roll_no="ZZ9")


def test_renew_extends_from_current_due_date(container, librarian, book_id, repos):
    service = container.library_service
    issue_id = service.issue_book(librarian, book_id=book_id, roll_no="CS1")
    due = repos.library.get_issue(issue_id).due_date

    new_due = service.renew_book(librarian, issue_id)

    assert new_due == due + timedelta(days=30)
    assert repos.library.get_issue(issue_id).renewal_count == 1


def test_book_with_issued_copies_cannot_be_deleted_or_shrunk(container, librarian, book_id):
    service = container.library_service
    service.issue_book(librarian, book_id=book_id, roll_no="CS1")
    service.issue_book(librarian, book_id=book_id, roll_no="CS2")

    with pytest.raises(ValidationError, match="issued copies"):
        service.delete_book(librarian, book_id)
    with pytest.raises(ValidationError, match="cannot be lower"):
        service.update_book(librarian, book_id, title="CLRS", branch="CSE", quantity=1)

    service.update_book(librarian, book_id, title="CLRS", branch="CSE", quantity=5)
    book = service.get_book(book_id)
    assert (book.title, book.total_quantity, book.available_quantity) == ("CLRS", 5, 3)
