from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector

from ..core.enums import Role
from ..core.exceptions import DuplicateUsernameError, StoreUnavailableError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import User, row_to_user
from .repository import UserRepository

USER_COLUMNS = "id, username, email, password_hash, full_name, role, profile_picture, created_at"

UPDATABLE_COLUMNS = frozenset({"username", "email", "password_hash", "full_name", "role", "profile_picture"})


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {USER_COLUMNS} FROM users WHERE id=%s", (int(user_id),))
            row = fetchone(cur)
            return row_to_user(row) if row else None

    def get_by_username(self, username: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {USER_COLUMNS} FROM users WHERE username=%s", (username,))
            row = fetchone(cur)
            return row_to_user(row) if row else None

    def list_by_role(self, role: Optional[Role] = None) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            if role is None:
                cur.execute(f"SELECT {USER_COLUMNS} FROM users ORDER BY full_name")
            else:
                cur.execute(f"SELECT {USER_COLUMNS} FROM users WHERE role=%s ORDER BY full_name", (role.value,))
            return [row_to_user(r) for r in fetchall(cur)]

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
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(username, email, password_hash, full_name, role, profile_picture)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (username, email, password_hash, full_name, role.value, profile_picture),
                )
                cur.execute(f"SELECT {USER_COLUMNS} FROM users WHERE id=%s", (int(cur.lastrowid),))
                return row_to_user(fetchone(cur))
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise DuplicateUsernameError("Username already exists") from e
            raise StoreUnavailableError("Could not create user") from e

    def update_user(self, user_id: int, changes: dict) -> Optional[User]:
        unknown = set(changes) - UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Unsupported user columns: {sorted(unknown)}")

        try:
            with db_cursor(self._conn_factory) as (_, cur):
                if changes:
                    assignments = ", ".join(f"{col}=%s" for col in changes)
                    values = [v.value if isinstance(v, Role) else v for v in changes.values()]
                    cur.execute(f"UPDATE users SET {assignments} WHERE id=%s", (*values, int(user_id)))
                cur.execute(f"SELECT {USER_COLUMNS} FROM users WHERE id=%s", (int(user_id),))
                row = fetchone(cur)
                return row_to_user(row) if row else None
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise DuplicateUsernameError("Username already exists") from e
            raise StoreUnavailableError("Could not update user") from e

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            uid = int(user_id)
            cur.execute("DELETE FROM enrollments WHERE student_id=%s", (uid,))
            cur.execute("DELETE FROM section_enrollments WHERE student_id=%s", (uid,))
            cur.execute("DELETE FROM attendance WHERE student_id=%s", (uid,))
            cur.execute("UPDATE subjects SET teacher_id=NULL WHERE teacher_id=%s", (uid,))
            cur.execute("DELETE FROM users WHERE id=%s", (uid,))
            return cur.rowcount > 0
