from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Subject


class SubjectRepository(Protocol):
    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Subject]:
        raise NotImplementedError

    def list_by_teacher(self, teacher_id: int) -> Sequence[Subject]:
        raise NotImplementedError

    def list_by_student(self, student_id: int) -> Sequence[Subject]:
        """Subjects the student is enrolled in."""

        raise NotImplementedError

    def create(self, *, name: str, code: str, description: Optional[str], teacher_id: Optional[int]) -> Subject:
        raise NotImplementedError

    def update(self, subject_id: int, changes: dict) -> Optional[Subject]:
        raise NotImplementedError
