from __future__ import annotations

import hashlib
import logging
import re
from typing import Optional

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from ..students.repository import StudentRepository
from ..teachers.repository import TeacherRepository
from .mailer import PasswordResetMailer
from .model import SessionUser
from .repository import AccountRepository

logger = logging.getLogger(__name__)

_RESET_SALT = "password-reset"


def _hash_fingerprint(password_hash: str) -> str:
    return hashlib.sha256((password_hash or "").encode("utf-8")).hexdigest()[:16]


class AuthService:
    """Use cases: account creation, sign-in and password reset."""

    def __init__(
        self,
        accounts: AccountRepository,
        teachers: TeacherRepository,
        students: StudentRepository,
        *,
        secret_key: str,
        admin_email: str = "",
        teacher_domain: str = "sgsteacher.com",
        student_domain: str = "sgs.com",
        reset_max_age: int = 3600,
        mailer: PasswordResetMailer,
    ):
        self._accounts = accounts
        self._teachers = teachers
        self._students = students
        self._admin_email = (admin_email or "").strip().lower()
        self._teacher_domain = teacher_domain.lower()
        self._student_domain = student_domain.lower()
        self._reset_max_age = int(reset_max_age)
        self._serializer = URLSafeTimedSerializer(secret_key, salt=_RESET_SALT)
        self._mailer = mailer
        self._teacher_email_re = re.compile(rf"^\d+@{re.escape(self._teacher_domain)}$")

    def teacher_email(self, teacher_id: str) -> str:
        return f"{teacher_id}@{self._teacher_domain}".lower()

    def student_email(self, roll_no: str) -> str:
        return f"{roll_no}@{self._student_domain}".lower()

    def role_for_email(self, email: str) -> Role:
        email = email.strip().lower()
        if self._admin_email and email == self._admin_email:
            return Role.ADMIN
        if self._teacher_email_re.match(email):
            return Role.TEACHER
        return Role.STUDENT

    def create_account(self, *, email: str, password: str, role: Optional[Role] = None) -> str:
        email = require_non_empty(email, "Email").lower()
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._accounts.get_by_email(email):
            raise ValidationError("An account with this email already exists")

        role = role or self.role_for_email(email)
        uid = self._accounts.create_account(
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
        )
        logger.info("Created %s account %s", role.value, email)
        return uid

    def change_login_email(self, uid: str, *, email: str) -> None:
        email = require_non_empty(email, "Email").lower()
        existing = self._accounts.get_by_email(email)
        if existing and existing.uid != uid:
            raise ValidationError("An account with this email already exists")
        self._accounts.update_email(uid, email=email)

    def delete_account(self, uid: str) -> None:
        self._accounts.delete_by_uid(uid)

    def sign_in(self, email: str, password: str) -> SessionUser:
        email = (email or "").strip().lower()
        account = self._accounts.get_by_email(email)
        if not account or not account.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(account.password_hash, password or "")
        except Exception:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        role = Role.ADMIN if self._admin_email and email == self._admin_email else account.role
        return self._session_user(account.uid, email, role)

    def _session_user(self, uid: str, email: str, role: Role) -> SessionUser:
        if role == Role.TEACHER:
            teacher = self._teachers.get_by_uid(uid)
            if not teacher:
                raise AuthenticationError("No teacher profile is linked to this account")
            return SessionUser(
                uid=uid,
                email=email,
                role=role,
                name=teacher.name,
                profile_id=teacher.teacher_id,
                is_librarian=teacher.is_librarian,
                account_handler=teacher.account_handler,
                is_admin=teacher.is_admin,
            )

        if role == Role.STUDENT:
            student = self._students.get_by_uid(uid)
            if not student:
                raise AuthenticationError("No student profile is linked to this account")
            return SessionUser(uid=uid, email=email, role=role, name=student.name, profile_id=str(student.student_id))

        return SessionUser(uid=uid, email=email, role=role, name="Administrator")

    def request_password_reset(self, email: str) -> Optional[str]:
        """Issue a reset token and hand it to the mailer.

        Unknown addresses get no token; callers respond the same way either way.
        The token carries a fingerprint of the current password hash, so it
        stops working once the password changes.
        """
        email = (email or "").strip().lower()
        account = self._accounts.get_by_email(email)
        if not account or not account.is_active:
            logger.info("Password reset requested for unknown account %s", email)
            return None

        token = self._serializer.dumps({"uid": account.uid, "pw": _hash_fingerprint(account.password_hash)})
        self._mailer.send_password_reset(email, token)
        return token

    def reset_password(self, token: str, new_password: str) -> None:
        require_min_length(new_password, "Password", MIN_PASSWORD_LENGTH)
        try:
            payload = self._serializer.loads(token, max_age=self._reset_max_age)
        except SignatureExpired:
            raise ValidationError("Password reset link has expired")
        except BadSignature:
            raise ValidationError("Password reset link is invalid")

        if not isinstance(payload, dict):
            raise ValidationError("Password reset link is invalid")
        account = self._accounts.get_by_uid(str(payload.get("uid", "")))
        if not account or not account.is_active:
            raise ValidationError("Password reset link is invalid")
        if payload.get("pw") != _hash_fingerprint(account.password_hash):
            raise ValidationError("Password reset link has already been used")

        if not self._accounts.update_password(account.uid, password_hash=generate_password_hash(new_password)):
            raise ValidationError("Password reset link is invalid")
        logger.info("Password reset completed for account %s", account.uid)
