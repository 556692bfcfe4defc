from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Mapping, Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance mark of a student in a subject on a day."""

    attendance_id: int
    student_id: int
    subject_id: int
    date: date
    status: AttendanceStatus
    time_in: Optional[datetime] = None
    remarks: Optional[str] = None


@dataclass(frozen=True)
class AttendanceQuery:
    """Filters for listing; None means any."""

    student_id: Optional[int] = None
    subject_id: Optional[int] = None
    date: Optional[date] = None


def row_to_attendance(row: Mapping[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(row["id"]),
        student_id=int(row["student_id"]),
        subject_id=int(row["subject_id"]),
        date=row["date"],
        status=AttendanceStatus(row["status"]),
        time_in=row.get("time_in"),
        remarks=row.get("remarks"),
    )
