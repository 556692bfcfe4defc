from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Identity store interface.

    Services depend on this protocol, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def list_by_role(self, role: Optional[Role] = None) -> Sequence[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        username: str,
        email: str,
        password_hash: str,
        full_name: str,
        role: Role,
        profile_picture: Optional[str] = None,
    ) -> User:
        """Insert a user; raises DuplicateUsernameError if the username is taken."""

        raise NotImplementedError

    def update_user(self, user_id: int, changes: dict) -> Optional[User]:
        """Apply column changes (snake_case keys). Returns None if the user does not exist."""

        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        """Delete the user together with the rows that reference it."""

        raise NotImplementedError
