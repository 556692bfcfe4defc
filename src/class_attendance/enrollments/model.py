from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class Enrollment:
    """Membership of a student in a subject. (student_id, subject_id) is unique."""

    enrollment_id: int
    student_id: int
    subject_id: int
    enrolled_at: Optional[datetime] = None


@dataclass(frozen=True)
class SectionEnrollment:
    """Membership of a student in a section. (section_id, student_id) is unique."""

    enrollment_id: int
    section_id: int
    student_id: int
    enrolled_at: Optional[datetime] = None


def row_to_enrollment(row: Mapping[str, Any]) -> Enrollment:
    return Enrollment(
        enrollment_id=int(row["id"]),
        student_id=int(row["student_id"]),
        subject_id=int(row["subject_id"]),
        enrolled_at=row.get("enrolled_at"),
    )


def row_to_section_enrollment(row: Mapping[str, Any]) -> SectionEnrollment:
    return SectionEnrollment(
        enrollment_id=int(row["id"]),
        section_id=int(row["section_id"]),
        student_id=int(row["student_id"]),
        enrolled_at=row.get("enrolled_at"),
    )
