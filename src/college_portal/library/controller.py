from __future__ import annotations

from flask import Flask, request

from ..common.web import current_user, json_body, librarian_required, login_required, ok, student_required
from ..container import Container


def _book_fields(data: dict) -> dict:
    return {
        "title": data.get("title", ""),
        "branch": data.get("branch", ""),
        "quantity": data.get("quantity"),
        "description": data.get("description", ""),
        "year": data.get("year"),
        "semester": data.get("semester"),
        "price": data.get("price"),
    }


def register(app: Flask, container: Container) -> None:
    service = container.library_service

    @app.route("/api/library/books", endpoint="list_books")
    @login_required
    def list_books():
        books = service.list_books(query=request.args.get("q"), branch=request.args.get("branch"))
        return ok(books=[b.to_dict() for b in books])

    @app.route("/api/library/books", methods=["POST"], endpoint="add_book")
    @librarian_required
    def add_book():
        book_id = service.add_book(current_user(), **_book_fields(json_body()))
        return ok(status=201, book_id=book_id)

    @app.route("/api/library/books/<int:book_id>", methods=["PUT"], endpoint="update_book")
    @librarian_required
    def update_book(book_id: int):
        service.update_book(current_user(), book_id, **_book_fields(json_body()))
        return ok(book=service.get_book(book_id).to_dict())

    @app.route("/api/library/books/<int:book_id>", methods=["DELETE"], endpoint="delete_book")
    @librarian_required
    def delete_book(book_id: int):
        service.delete_book(current_user(), book_id)
        return ok(message="Book deleted")

    @app.route("/api/library/issues", endpoint="list_issues")
    @librarian_required
    def list_issues():
        issues = service.issued_books(roll_no=request.args.get("roll_no") or None)
        return ok(issues=[i.to_dict() for i in issues])

    @app.route("/api/library/issues", methods=["POST"], endpoint="issue_book")
    @librarian_required
    def issue_book():
        data = json_body()
        issue_id = service.issue_book(current_user(), book_id=data.get("book_id"), roll_no=data.get("roll_no", ""))
        return ok(status=201, issue_id=issue_id)

    @app.route("/api/library/issues/<int:issue_id>/return", methods=["POST"], endpoint="return_book")
    @librarian_required
    def return_book(issue_id: int):
        fine = service.return_book(current_user(), issue_id)
        return ok(fine=fine, message="Book returned")

    @app.route("/api/library/issues/<int:issue_id>/renew", methods=["POST"], endpoint="renew_book")
    @librarian_required
    def renew_book(issue_id: int):
        due_date = service.renew_book(current_user(), issue_id)
        return ok(due_date=due_date.isoformat(), message="Book renewed")

    @app.route("/api/student/books", endpoint="my_books")
    @student_required
    def my_books():
        student = container.student_service.get_by_uid(current_user().uid)
        return ok(issues=[i.to_dict() for i in service.issued_books(roll_no=student.roll_no)])
