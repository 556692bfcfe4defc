from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...schedules.model import Schedule
from .base import CheckInStrategy, StatusDecision


class OnTimeStrategy(CheckInStrategy):
    """Checked in within the grace period, or no class scheduled today."""

    def decide(self, *, now: datetime, schedule: Optional[Schedule]) -> StatusDecision:
        if schedule is None:
            return StatusDecision(status=AttendanceStatus.PRESENT, remarks="QR check-in (unscheduled)")
        return StatusDecision(status=AttendanceStatus.PRESENT, remarks="QR check-in")
