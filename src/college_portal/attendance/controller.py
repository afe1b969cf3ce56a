from __future__ import annotations

from flask import Flask, request

from ..common.web import current_user, json_body, ok, student_required, teacher_required
from ..container import Container
from ..subjects.service import ensure_teaches


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/subjects/<int:subject_id>/attendance", methods=["POST"], endpoint="submit_attendance")
    @teacher_required
    def submit_attendance(subject_id: int):
        data = json_body()
        session_id = service.submit_attendance(
            teacher=current_user(),
            subject_id=subject_id,
            statuses=data.get("statuses") or {},
            on=data.get("date"),
        )
        return ok(status=201, session_id=session_id, message="Attendance saved")

    @app.route("/api/subjects/<int:subject_id>/attendance", endpoint="subject_attendance")
    @teacher_required
    def subject_attendance(subject_id: int):
        ensure_teaches(current_user(), container.subject_service.get_subject(subject_id))
        return ok(service.subject_report(subject_id, query=request.args.get("q", "")))

    @app.route("/api/student/attendance", endpoint="student_attendance")
    @student_required
    def student_attendance():
        student = container.student_service.get_by_uid(current_user().uid)
        return ok(subjects=service.student_overview(student.roll_no))
