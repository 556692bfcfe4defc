from __future__ import annotations

from typing import AbstractSet, Protocol, Sequence

from .model import Enrollment, SectionEnrollment


class EnrollmentRepository(Protocol):
    """Store for the two membership relations and the cascades that clean them up.

    Inserts raise DuplicateMembershipError when the store's unique key rejects a pair.
    """

    # subject <-> student

    def student_ids_for_subject(self, subject_id: int) -> AbstractSet[int]:
        raise NotImplementedError

    def insert(self, *, subject_id: int, student_id: int) -> Enrollment:
        raise NotImplementedError

    def insert_many(self, *, subject_id: int, student_ids: Sequence[int]) -> int:
        """Insert every pair in one transaction; on any failure nothing is inserted."""

        raise NotImplementedError

    def delete(self, *, subject_id: int, student_id: int) -> bool:
        raise NotImplementedError

    def delete_subject_cascade(self, subject_id: int) -> bool:
        """Delete enrollments, schedules, QR codes and attendance of the subject, then the subject."""

        raise NotImplementedError

    # section <-> student

    def student_ids_for_section(self, section_id: int) -> AbstractSet[int]:
        raise NotImplementedError

    def insert_section_member(self, *, section_id: int, student_id: int) -> SectionEnrollment:
        raise NotImplementedError

    def delete_section_member(self, *, section_id: int, student_id: int) -> bool:
        raise NotImplementedError

    def delete_section_cascade(self, section_id: int) -> bool:
        """Delete section enrollments, then the section."""

        raise NotImplementedError
