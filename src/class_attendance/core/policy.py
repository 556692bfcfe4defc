"""Role policy table.

One entry per role: which gateway endpoints the role may call and how rows are
filtered for it. The gateway evaluates `endpoints` once per request; services
read the row filters so the same rules apply outside HTTP.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, FrozenSet, Optional

from .enums import Role


class SubjectScope(str, Enum):
    ENROLLED = "enrolled"
    OWNED = "owned"
    ALL = "all"


def _own_rows_only(actor_id: int, requested_student_id: Optional[int]) -> Optional[int]:
    return actor_id


def _requested_rows(actor_id: int, requested_student_id: Optional[int]) -> Optional[int]:
    return requested_student_id


@dataclass(frozen=True)
class RolePolicy:
    endpoints: FrozenSet[str]
    subject_scope: SubjectScope
    # (actor_id, requested student filter) -> student filter applied to attendance list and summary
    attendance_student_filter: Callable[[int, Optional[int]], Optional[int]]

    def allows(self, endpoint: Optional[str]) -> bool:
        return endpoint in self.endpoints


AUTHENTICATED = frozenset(
    {
        "current_user",
        "users_list",
        "users_update",
        "subjects_list",
        "subjects_get",
        "subjects_students",
        "schedules_by_subject",
        "attendance_list",
        "attendance_summary",
    }
)

CATALOG_EDITORS = frozenset(
    {
        "subjects_create",
        "subjects_update",
        "subjects_delete",
        "subjects_enroll",
        "subjects_enroll_bulk",
        "subjects_unenroll",
        "subjects_available",
        "sections_list",
        "sections_get",
        "sections_students",
        "attendance_mark",
        "qr_generate",
        "qr_active",
        "qr_image",
        "schedules_create",
        "schedules_delete",
    }
)

ADMIN_ONLY = frozenset(
    {
        "users_create",
        "users_delete",
        "sections_create",
        "sections_update",
        "sections_delete",
        "sections_enroll",
        "sections_unenroll",
    }
)

POLICIES: Dict[Role, RolePolicy] = {
    Role.STUDENT: RolePolicy(
        endpoints=AUTHENTICATED | {"attendance_checkin"},
        subject_scope=SubjectScope.ENROLLED,
        attendance_student_filter=_own_rows_only,
    ),
    Role.TEACHER: RolePolicy(
        endpoints=AUTHENTICATED | CATALOG_EDITORS | {"schedules_teacher"},
        subject_scope=SubjectScope.OWNED,
        attendance_student_filter=_requested_rows,
    ),
    Role.SUPERADMIN: RolePolicy(
        endpoints=AUTHENTICATED | CATALOG_EDITORS | ADMIN_ONLY,
        subject_scope=SubjectScope.ALL,
        attendance_student_filter=_requested_rows,
    ),
}


def policy_for(role: Role) -> RolePolicy:
    return POLICIES[Role(role)]
