from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_required, current_user, json_body, ok, student_required
from ..container import Container


def _student_fields(data: dict) -> dict:
    return {
        "name": data.get("name", ""),
        "roll_no": data.get("roll_no", ""),
        "course": data.get("course", ""),
        "semester": data.get("semester"),
        "email": data.get("email", ""),
        "phone": data.get("phone", ""),
    }


def register(app: Flask, container: Container) -> None:
    service = container.student_service

    @app.route("/api/students", endpoint="list_students")
    @admin_required
    def list_students():
        semester = request.args.get("semester", type=int)
        students = service.list_students(
            query=request.args.get("q"),
            course=request.args.get("course"),
            semester=semester,
        )
        return ok(students=[s.to_dict() for s in students], courses=service.courses())

    @app.route("/api/students", methods=["POST"], endpoint="add_student")
    @admin_required
    def add_student():
        data = json_body()
        fields = _student_fields(data)
        if data.get("password"):
            fields["password"] = data["password"]
        student_id = service.add_student(**fields)
        return ok(status=201, student_id=student_id)

    @app.route("/api/students/<int:student_id>", endpoint="get_student")
    @admin_required
    def get_student(student_id: int):
        return ok(student=service.get_student(student_id).to_dict())

    @app.route("/api/students/<int:student_id>", methods=["PUT"], endpoint="update_student")
    @admin_required
    def update_student(student_id: int):
        service.update_student(student_id, **_student_fields(json_body()))
        return ok(student=service.get_student(student_id).to_dict())

    @app.route("/api/students/<int:student_id>", methods=["DELETE"], endpoint="delete_student")
    @admin_required
    def delete_student(student_id: int):
        service.delete_student(student_id)
        return ok(message="Student deleted")

    @app.route("/api/students/<int:student_id>/optional-fees", methods=["POST"], endpoint="toggle_optional_fee")
    @admin_required
    def toggle_optional_fee(student_id: int):
        data = json_body()
        enabled = service.toggle_optional_fee(
            student_id,
            fee_type=data.get("fee_type", ""),
            semester=data.get("semester"),
        )
        return ok(enabled=enabled)

    @app.route("/api/student/profile", endpoint="student_profile")
    @student_required
    def student_profile():
        return ok(student=service.get_by_uid(current_user().uid).to_dict())
