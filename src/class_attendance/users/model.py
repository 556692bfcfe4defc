from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Plain data object, no database access. `password_hash` never leaves the
    service layer; the gateway serializer drops it.
    """

    user_id: int
    username: str
    email: str
    password_hash: str
    full_name: str
    role: Role
    profile_picture: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_student(self) -> bool:
        return self.role == Role.STUDENT


def row_to_user(row: Mapping[str, Any]) -> User:
    return User(
        user_id=int(row["id"]),
        username=row["username"],
        email=row.get("email") or "",
        password_hash=row.get("password_hash") or "",
        full_name=row["full_name"],
        role=Role(row["role"]),
        profile_picture=row.get("profile_picture"),
        created_at=row.get("created_at"),
    )
