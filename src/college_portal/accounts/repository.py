from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import Role
from .model import Account


class AccountRepository(Protocol):
    """Repository interface for sign-in accounts.

    Services depend on this interface, not on a concrete store.
    """

    def get_by_uid(self, uid: str) -> Optional[Account]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Account]:
        raise NotImplementedError

    def create_account(self, *, email: str, password_hash: str, role: Role) -> str:
        raise NotImplementedError

    def update_password(self, uid: str, *, password_hash: str) -> bool:
        raise NotImplementedError

    def update_email(self, uid: str, *, email: str) -> bool:
        raise NotImplementedError

    def delete_by_uid(self, uid: str) -> bool:
        raise NotImplementedError
