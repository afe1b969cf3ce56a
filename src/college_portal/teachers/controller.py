from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_required, fail, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.teacher_service

    @app.route("/api/teachers", endpoint="list_teachers")
    @admin_required
    def list_teachers():
        teachers = service.list_teachers(query=request.args.get("q"))
        return ok(teachers=[t.to_dict() for t in teachers])

    @app.route("/api/teachers", methods=["POST"], endpoint="add_teacher")
    @admin_required
    def add_teacher():
        data = json_body()
        teacher_id = service.add_teacher(
            teacher_id=data.get("teacher_id", ""),
            name=data.get("name", ""),
            department=data.get("department", ""),
            password=data.get("password"),
            salary=data.get("salary") or 0,
            account_handler=bool(data.get("account_handler")),
        )
        return ok(status=201, teacher_id=teacher_id)

    @app.route("/api/teachers/salary-totals", endpoint="salary_totals")
    @admin_required
    def salary_totals():
        return ok(service.salary_totals())

    @app.route("/api/teachers/<teacher_id>", endpoint="get_teacher")
    @admin_required
    def get_teacher(teacher_id: str):
        return ok(teacher=service.get_teacher(teacher_id).to_dict())

    @app.route("/api/teachers/<teacher_id>", methods=["PUT"], endpoint="update_teacher")
    @admin_required
    def update_teacher(teacher_id: str):
        data = json_body()
        teacher = service.update_teacher(
            teacher_id,
            name=data.get("name", ""),
            department=data.get("department", ""),
            salary=data.get("salary") or 0,
            account_handler=bool(data.get("account_handler")),
        )
        return ok(teacher=teacher.to_dict())

    @app.route("/api/teachers/<teacher_id>", methods=["DELETE"], endpoint="delete_teacher")
    @admin_required
    def delete_teacher(teacher_id: str):
        service.delete_teacher(teacher_id)
        return ok(message="Teacher deleted")

    flag_setters = {
        "account-handler": service.set_account_handler,
        "librarian": service.set_librarian,
        "admin": service.set_admin,
    }

    @app.route("/api/teachers/<teacher_id>/flags/<flag>", methods=["POST"], endpoint="set_teacher_flag")
    @admin_required
    def set_teacher_flag(teacher_id: str, flag: str):
        setter = flag_setters.get(flag)
        if setter is None:
            return fail(f"Unknown flag: {flag}", 404)
        teacher = setter(teacher_id, bool(json_body().get("value")))
        return ok(teacher=teacher.to_dict())

    @app.route("/api/teachers/<teacher_id>/salary-paid", methods=["POST"], endpoint="mark_salary_paid")
    @admin_required
    def mark_salary_paid(teacher_id: str):
        return ok(teacher=service.mark_salary_paid(teacher_id).to_dict())
