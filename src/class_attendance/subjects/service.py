from __future__ import annotations

from typing import Optional, Sequence

from ..common.validators import optional_int, optional_str, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..core.policy import SubjectScope, policy_for
from ..users.model import User
from ..users.repository import UserRepository
from .model import Subject
from .repository import SubjectRepository


class SubjectService:
    """Catalog use cases for subjects. Deletion lives in MembershipService (cascade)."""

    def __init__(self, subjects: SubjectRepository, users: UserRepository):
        self._subjects = subjects
        self._users = users

    def get(self, subject_id: int) -> Subject:
        subject = self._subjects.get_by_id(int(subject_id))
        if not subject:
            raise NotFoundError("Subject not found")
        return subject

    def list_for(self, actor: User) -> Sequence[Subject]:
        scope = policy_for(actor.role).subject_scope
        if scope == SubjectScope.ENROLLED:
            return self._subjects.list_by_student(actor.user_id)
        if scope == SubjectScope.OWNED:
            return self._subjects.list_by_teacher(actor.user_id)
        return self._subjects.list_all()

    def require_manageable(self, actor: User, subject_id: int) -> Subject:
        """Load a subject the actor may edit: admins any, teachers only their own."""
        subject = self.get(subject_id)
        if actor.role == Role.TEACHER and subject.teacher_id != actor.user_id:
            raise AuthorizationError("You can only manage your own subjects")
        if actor.role not in (Role.TEACHER, Role.SUPERADMIN):
            raise AuthorizationError("You do not have permission to manage subjects")
        return subject

    def _resolve_teacher(self, actor: User, teacher_id: Optional[int]) -> Optional[int]:
        if actor.role == Role.TEACHER:
            if teacher_id is not None and teacher_id != actor.user_id:
                raise AuthorizationError("Teachers can only assign subjects to themselves")
            return actor.user_id

        if teacher_id is None:
            return None
        teacher = self._users.get_by_id(teacher_id)
        if not teacher or teacher.role != Role.TEACHER:
            raise ValidationError("teacherId must reference a teacher", field="teacherId")
        return teacher_id

    def create(self, *, actor: User, data: dict) -> Subject:
        name = require_non_empty(data.get("name"), "name")
        code = require_non_empty(data.get("code"), "code")
        teacher_id = self._resolve_teacher(actor, optional_int(data.get("teacherId"), "teacherId"))
        return self._subjects.create(
            name=name,
            code=code,
            description=optional_str(data.get("description")),
            teacher_id=teacher_id,
        )

    def update(self, *, actor: User, subject_id: int, data: dict) -> Subject:
        subject = self.require_manageable(actor, subject_id)

        changes: dict = {}
        if "name" in data:
            changes["name"] = require_non_empty(data.get("name"), "name")
        if "code" in data:
            changes["code"] = require_non_empty(data.get("code"), "code")
        if "description" in data:
            changes["description"] = optional_str(data.get("description"))
        if "teacherId" in data:
            changes["teacher_id"] = self._resolve_teacher(actor, optional_int(data.get("teacherId"), "teacherId"))

        updated = self._subjects.update(subject.subject_id, changes)
        if not updated:
            raise NotFoundError("Subject not found")
        return updated
