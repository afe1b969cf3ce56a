from __future__ import annotations

import logging

from flask import Flask, session

from ..common.web import SESSION_KEY, current_user, json_body, login_required, ok
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        user = container.auth_service.sign_in(data.get("email", ""), data.get("password", ""))

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        session[SESSION_KEY] = user.to_session()

        logger.info("Signed in %s as %s", user.email, user.role.value)
        return ok(user=user.to_session())

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok(message="Signed out")

    @app.route("/api/auth/me", endpoint="me")
    @login_required
    def me():
        return ok(user=current_user().to_session())

    @app.route("/api/auth/password-reset", methods=["POST"], endpoint="request_password_reset")
    def request_password_reset():
        container.auth_service.request_password_reset(json_body().get("email", ""))
        return ok(message="If the account exists, a reset link has been sent")

    @app.route("/api/auth/password-reset/confirm", methods=["POST"], endpoint="reset_password")
    def reset_password():
        data = json_body()
        container.auth_service.reset_password(data.get("token", ""), data.get("password", ""))
        return ok(message="Password updated")
