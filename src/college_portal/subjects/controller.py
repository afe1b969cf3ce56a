from __future__ import annotations

from flask import Flask

from ..common.web import admin_required, current_user, json_body, login_required, ok
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    service = container.subject_service

    @app.route("/api/subjects", endpoint="list_subjects")
    @login_required
    def list_subjects():
        user = current_user()
        if user.has_admin_rights:
            subjects = service.list_subjects()
        elif user.role == Role.TEACHER:
            subjects = service.subjects_for_teacher(str(user.profile_id))
        else:
            roll_no = container.student_service.get_by_uid(user.uid).roll_no
            subjects = service.subjects_for_student(roll_no)
        return ok(subjects=[s.to_dict() for s in subjects])

    @app.route("/api/subjects", methods=["POST"], endpoint="create_subject")
    @admin_required
    def create_subject():
        data = json_body()
        subject_id = service.create_subject(
            subject_code=data.get("subject_code", ""),
            subject_name=data.get("subject_name", ""),
            teacher_ids=data.get("teacher_ids") or [],
            student_ids=data.get("student_ids") or [],
        )
        return ok(status=201, subject_id=subject_id)

    @app.route("/api/subjects/<int:subject_id>", endpoint="get_subject")
    @login_required
    def get_subject(subject_id: int):
        return ok(subject=service.get_subject(subject_id).to_dict())

    @app.route("/api/subjects/<int:subject_id>", methods=["DELETE"], endpoint="delete_subject")
    @admin_required
    def delete_subject(subject_id: int):
        service.delete_subject(subject_id)
        return ok(message="Subject deleted")
