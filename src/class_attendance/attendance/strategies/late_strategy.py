from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...schedules.model import Schedule
from .base import CheckInStrategy, StatusDecision


class LateStrategy(CheckInStrategy):
    def decide(self, *, now: datetime, schedule: Optional[Schedule]) -> StatusDecision:
        if schedule is None:
            return StatusDecision(status=AttendanceStatus.LATE, remarks="QR check-in")
        start = datetime.combine(now.date(), schedule.start_time)
        minutes = int((now - start).total_seconds() // 60)
        return StatusDecision(status=AttendanceStatus.LATE, remarks=f"QR check-in, {minutes} min late")
