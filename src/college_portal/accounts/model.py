from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Account:
    """Sign-in record held by the auth store (no profile data)."""

    uid: str
    email: str
    password_hash: str
    role: Role
    is_active: bool = True


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after sign-in."""

    uid: str
    email: str
    role: Role
    name: str = ""
    profile_id: Optional[str] = None
    is_librarian: bool = False
    account_handler: bool = False
    is_admin: bool = False

    @property
    def has_admin_rights(self) -> bool:
        return self.role == Role.ADMIN or self.is_admin

    @property
    def can_handle_accounts(self) -> bool:
        return self.has_admin_rights or self.account_handler

    @property
    def can_run_library(self) -> bool:
        return self.has_admin_rights or self.is_librarian

    def to_session(self) -> dict:
        return {
            "uid": self.uid,
            "email": self.email,
            "role": self.role.value,
            "name": self.name,
            "profile_id": self.profile_id,
            "is_librarian": self.is_librarian,
            "account_handler": self.account_handler,
            "is_admin": self.is_admin,
        }

    @classmethod
    def from_session(cls, data: dict) -> "SessionUser":
        return cls(
            uid=data["uid"],
            email=data.get("email", ""),
            role=Role(data["role"]),
            name=data.get("name", ""),
            profile_id=data.get("profile_id"),
            is_librarian=bool(data.get("is_librarian")),
            account_handler=bool(data.get("account_handler")),
            is_admin=bool(data.get("is_admin")),
        )
