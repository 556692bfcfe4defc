from __future__ import annotations

from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_str, require_email, require_enum, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DuplicateUsernameError,
    NotFoundError,
    ValidationError,
)
from ..core.logging import get_logger
from .model import User
from .repository import UserRepository

log = get_logger(__name__)


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> User:
        user = self._users.get_by_username((username or "").strip())
        if not user:
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid username or password")
        return user

    def resolve_session_user(self, user_id: Optional[int]) -> User:
        """Reload the session's user; the store decides whether the session is still valid."""
        if not user_id:
            raise AuthenticationError("Not authenticated")
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise AuthenticationError("Not authenticated")
        return user


class UserService:
    """Use case: manage users."""

    def __init__(self, users: UserRepository):
        self._users = users

    def list_users(self, role: Optional[Role] = None) -> Sequence[User]:
        return self._users.list_by_role(role)

    def get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def create_account(
        self,
        *,
        username: str,
        email: str,
        password: str,
        full_name: str,
        role: str | Role,
        profile_picture: Optional[str] = None,
    ) -> User:
        username = require_non_empty(username, "username")
        email = require_email(email)
        require_min_length(password, "password", MIN_PASSWORD_LENGTH)
        full_name = require_non_empty(full_name, "fullName")
        role = require_enum(Role, role, "role")

        if self._users.get_by_username(username):
            raise DuplicateUsernameError("Username already exists")

        user = self._users.create_user(
            username=username,
            email=email,
            password_hash=generate_password_hash(password),
            full_name=full_name,
            role=role,
            profile_picture=optional_str(profile_picture),
        )
        log.info("created %s account %s (id=%s)", role.value, username, user.user_id)
        return user

    def update_user(self, *, actor: User, user_id: int, updates: dict) -> User:
        """Apply a partial update.

        Non-admins may only edit their own profile and never their role.
        """
        target = self.get_user(user_id)
        is_admin = actor.role == Role.SUPERADMIN
        if not is_admin and actor.user_id != target.user_id:
            raise AuthorizationError("You can only update your own profile")

        changes: dict = {}
        if "username" in updates:
            username = require_non_empty(updates["username"], "username")
            if username != target.username:
                if self._users.get_by_username(username):
                    raise DuplicateUsernameError("Username already exists")
                changes["username"] = username
        if "email" in updates:
            changes["email"] = require_email(updates["email"])
        if "fullName" in updates:
            changes["full_name"] = require_non_empty(updates["fullName"], "fullName")
        if "profilePicture" in updates:
            changes["profile_picture"] = optional_str(updates["profilePicture"])
        if updates.get("password"):
            require_min_length(updates["password"], "password", MIN_PASSWORD_LENGTH)
            changes["password_hash"] = generate_password_hash(updates["password"])
        if "role" in updates:
            role = require_enum(Role, updates["role"], "role")
            if role != target.role:
                if not is_admin:
                    raise AuthorizationError("Only administrators can change roles")
                changes["role"] = role

        updated = self._users.update_user(target.user_id, changes)
        if not updated:
            raise NotFoundError("User not found")
        return updated

    def delete_user(self, *, actor: User, user_id: int) -> None:
        if actor.user_id == int(user_id):
            raise ValidationError("You cannot delete your own account")
        if not self._users.delete_by_id(int(user_id)):
            raise NotFoundError("User not found")
        log.info("user %s deleted by %s", user_id, actor.user_id)
