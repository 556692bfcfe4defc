from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from ..common.validators import require_int
from ..core.enums import Role
from ..core.exceptions import DuplicateMembershipError, NotFoundError, ValidationError
from ..core.logging import get_logger
from ..sections.service import SectionService
from ..subjects.model import Subject
from ..subjects.repository import SubjectRepository
from ..subjects.service import SubjectService
from ..users.model import User
from ..users.repository import UserRepository
from .model import Enrollment, SectionEnrollment
from .repository import EnrollmentRepository

log = get_logger(__name__)


class MembershipService:
    """Section and subject membership.

    Two independent relations: section <-> student and subject <-> student.
    "Available" students are every student minus the subject's enrolled set,
    optionally narrowed to one section's members.
    """

    def __init__(
        self,
        enrollments: EnrollmentRepository,
        users: UserRepository,
        subjects: SubjectService,
        subject_repo: SubjectRepository,
        sections: SectionService,
    ):
        self._enrollments = enrollments
        self._users = users
        self._subjects = subjects
        self._subject_repo = subject_repo
        self._sections = sections

    def _require_student(self, student_id: int) -> User:
        student = self._users.get_by_id(int(student_id))
        if not student or student.role != Role.STUDENT:
            raise NotFoundError("Student not found")
        return student

    def _students_by_ids(self, ids: Iterable[int]) -> List[User]:
        wanted = set(ids)
        return [u for u in self._users.list_by_role(Role.STUDENT) if u.user_id in wanted]

    # queries

    def list_enrolled(self, subject_id: int) -> List[User]:
        self._subjects.get(subject_id)
        return self._students_by_ids(self._enrollments.student_ids_for_subject(int(subject_id)))

    def list_available(self, subject_id: int, section_id: Optional[int] = None) -> List[User]:
        self._subjects.get(subject_id)
        enrolled = self._enrollments.student_ids_for_subject(int(subject_id))

        members = None
        if section_id is not None:
            self._sections.get(section_id)
            members = self._enrollments.student_ids_for_section(int(section_id))

        return [
            s
            for s in self._users.list_by_role(Role.STUDENT)
            if s.user_id not in enrolled and (members is None or s.user_id in members)
        ]

    def list_section_students(self, section_id: int) -> List[User]:
        self._sections.get(section_id)
        return self._students_by_ids(self._enrollments.student_ids_for_section(int(section_id)))

    def list_student_subjects(self, student_id: int) -> Sequence[Subject]:
        self._require_student(student_id)
        return self._subject_repo.list_by_student(int(student_id))

    # subject membership

    def enroll_one(self, *, actor: User, subject_id: int, student_id: int) -> Enrollment:
        subject = self._subjects.require_manageable(actor, subject_id)
        student = self._require_student(student_id)

        if student.user_id in self._enrollments.student_ids_for_subject(subject.subject_id):
            raise DuplicateMembershipError("Student is already enrolled in this subject")

        enrollment = self._enrollments.insert(subject_id=subject.subject_id, student_id=student.user_id)
        log.info("student %s enrolled in subject %s by %s", student.user_id, subject.subject_id, actor.user_id)
        return enrollment

    def enroll_bulk(self, *, actor: User, subject_id: int, student_ids: Sequence) -> int:
        """Enroll many students at once. Returns how many new rows were inserted.

        Pairs that already exist are skipped up front; the remaining inserts are
        all-or-nothing.
        """
        if not isinstance(student_ids, (list, tuple)) or not student_ids:
            raise ValidationError("studentIds must be a non-empty list", field="studentIds")

        ids = list(dict.fromkeys(require_int(s, "studentIds") for s in student_ids))
        subject = self._subjects.require_manageable(actor, subject_id)

        known = {u.user_id for u in self._students_by_ids(ids)}
        missing = [i for i in ids if i not in known]
        if missing:
            raise NotFoundError(f"Students not found: {', '.join(str(i) for i in missing)}")

        enrolled = self._enrollments.student_ids_for_subject(subject.subject_id)
        new_ids = [i for i in ids if i not in enrolled]
        if not new_ids:
            return 0

        count = self._enrollments.insert_many(subject_id=subject.subject_id, student_ids=new_ids)
        log.info(
            "bulk enrolled %d student(s) in subject %s (%d already enrolled) by %s",
            count,
            subject.subject_id,
            len(ids) - len(new_ids),
            actor.user_id,
        )
        return count

    def unenroll(self, *, actor: User, subject_id: int, student_id: int) -> None:
        """Remove the enrollment only; the student's attendance rows for the subject stay."""
        subject = self._subjects.require_manageable(actor, subject_id)
        if not self._enrollments.delete(subject_id=subject.subject_id, student_id=int(student_id)):
            raise NotFoundError("Enrollment not found")
        log.info("student %s unenrolled from subject %s by %s", student_id, subject_id, actor.user_id)

    def delete_subject(self, *, actor: User, subject_id: int) -> None:
        subject = self._subjects.require_manageable(actor, subject_id)
        if not self._enrollments.delete_subject_cascade(subject.subject_id):
            raise NotFoundError("Subject not found")
        log.info("subject %s (%s) deleted by %s", subject.subject_id, subject.code, actor.user_id)

    # section membership

    def enroll_in_section(self, *, section_id: int, student_id: int) -> SectionEnrollment:
        section = self._sections.get(section_id)
        student = self._require_student(student_id)
        if student.user_id in self._enrollments.student_ids_for_section(section.section_id):
            raise DuplicateMembershipError("Student is already enrolled in this section")
        return self._enrollments.insert_section_member(section_id=section.section_id, student_id=student.user_id)

    def unenroll_from_section(self, *, section_id: int, student_id: int) -> None:
        if not self._enrollments.delete_section_member(section_id=int(section_id), student_id=int(student_id)):
            raise NotFoundError("Section enrollment not found")

    def delete_section(self, section_id: int) -> None:
        if not self._enrollments.delete_section_cascade(int(section_id)):
            raise NotFoundError("Section not found")
        log.info("section %s deleted", section_id)
