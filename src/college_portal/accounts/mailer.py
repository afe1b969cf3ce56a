from __future__ import annotations

import logging
from typing import Optional, Protocol

from flask_mail import Mail, Message

logger = logging.getLogger(__name__)

RESET_SUBJECT = "College Portal password reset"


class PasswordResetMailer(Protocol):
    def send_password_reset(self, email: str, token: str) -> None:
        raise NotImplementedError


class FlaskMailResetMailer(PasswordResetMailer):
    """Sends the reset link through Flask-Mail (SMTP settings come from MAIL_* config).

    ``reset_url`` is the page that accepts the token, e.g. the portal's
    ``/reset-password`` route; the token is appended as ``?token=...``.
    """

    def __init__(self, mail: Mail, *, reset_url: str, sender: Optional[str] = None):
        self._mail = mail
        self._reset_url = reset_url.rstrip("?")
        self._sender = sender

    def reset_link(self, token: str) -> str:
        joiner = "&" if "?" in self._reset_url else "?"
        return f"{self._reset_url}{joiner}token={token}"

    def send_password_reset(self, email: str, token: str) -> None:
        link = self.reset_link(token)
        msg = Message(subject=RESET_SUBJECT, recipients=[email], sender=self._sender)
        msg.body = (
            f"Use this link to choose a new password:\n{link}\n\n"
            "The link works once. If you did not ask for a reset, ignore this email."
        )
        msg.html = (
            "<p>Use this link to choose a new password:</p>"
            f'<p><a href="{link}">Reset password</a></p>'
            "<p>The link works once. If you did not ask for a reset, ignore this email.</p>"
        )
        self._mail.send(msg)
        logger.info("Password reset email sent to %s", email)
