from __future__ import annotations

from datetime import time
from typing import Optional, Protocol, Sequence

from ..core.enums import DayOfWeek
from .model import Schedule


class ScheduleRepository(Protocol):
    def get_by_id(self, schedule_id: int) -> Optional[Schedule]:
        raise NotImplementedError

    def list_by_subject(self, subject_id: int) -> Sequence[Schedule]:
        raise NotImplementedError

    def list_by_teacher(self, teacher_id: int) -> Sequence[Schedule]:
        """Schedules of every subject taught by the teacher (joined with subject name/code)."""

        raise NotImplementedError

    def create(
        self,
        *,
        subject_id: int,
        day_of_week: DayOfWeek,
        start_time: time,
        end_time: time,
        room: str,
    ) -> Schedule:
        raise NotImplementedError

    def delete(self, schedule_id: int) -> bool:
        raise NotImplementedError
