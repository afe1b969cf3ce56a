from __future__ import annotations

from flask import Flask

from ..common.web import current_user, login_required, ok
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/dashboard", endpoint="dashboard")
    @login_required
    def dashboard():
        user = current_user()
        if user.has_admin_rights:
            return ok(role=user.role.value, stats=container.dashboard_service.admin_stats())
        if user.role == Role.TEACHER:
            return ok(role=user.role.value, **container.dashboard_service.teacher_dashboard(str(user.profile_id)))
        return ok(role=user.role.value, name=user.name)
