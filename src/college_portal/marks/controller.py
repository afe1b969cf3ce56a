from __future__ import annotations

from flask import Flask

from ..common.web import current_user, json_body, ok, student_required, teacher_required
from ..container import Container
from ..subjects.service import ensure_teaches


def register(app: Flask, container: Container) -> None:
    service = container.marks_service

    @app.route("/api/subjects/<int:subject_id>/marks", methods=["POST"], endpoint="submit_marks")
    @teacher_required
    def submit_marks(subject_id: int):
        data = json_body()
        count = service.submit_marks(
            teacher=current_user(),
            subject_id=subject_id,
            exam_id=data.get("exam_id", ""),
            marks=data.get("marks") or {},
        )
        return ok(status=201, saved=count, message="Marks saved")

    @app.route("/api/subjects/<int:subject_id>/marks", endpoint="subject_marks")
    @teacher_required
    def subject_marks(subject_id: int):
        ensure_teaches(current_user(), container.subject_service.get_subject(subject_id))
        return ok(service.marks_for_subject(subject_id))

    @app.route("/api/student/marks", endpoint="student_marks")
    @student_required
    def student_marks():
        student = container.student_service.get_by_uid(current_user().uid)
        return ok(subjects=service.marks_for_student(student.roll_no))
