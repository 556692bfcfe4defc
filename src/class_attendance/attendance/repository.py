from __future__ import annotations

from datetime import date, datetime
from typing import Dict, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceQuery, AttendanceRecord


class AttendanceRepository(Protocol):
    def create(
        self,
        *,
        student_id: int,
        subject_id: int,
        date: date,
        status: AttendanceStatus,
        time_in: datetime,
        remarks: Optional[str] = None,
    ) -> AttendanceRecord:
        raise NotImplementedError

    def list(self, query: AttendanceQuery) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_once_per_day(
        self,
        *,
        student_id: int,
        subject_id: int,
        date: date,
        status: AttendanceStatus,
        time_in: datetime,
        remarks: Optional[str] = None,
    ) -> Optional[AttendanceRecord]:
        """Insert unless the student already has a row for the subject on `date`.

        Check and insert run in one transaction serialized on the enrollment
        row. Returns None when a row already exists.
        """

        raise NotImplementedError

    def count_by_status(self, *, subject_id: int, student_id: Optional[int] = None) -> Dict[AttendanceStatus, int]:
        raise NotImplementedError
