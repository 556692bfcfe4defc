from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Sequence, Tuple

from ..core.enums import DayOfWeek
from ..schedules.model import Schedule
from .strategies.base import CheckInStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.on_time_strategy import OnTimeStrategy


def current_schedule(now: datetime, schedules: Sequence[Schedule]) -> Optional[Schedule]:
    """The class meeting a check-in at `now` belongs to.

    Among today's slots, the first one that has not ended yet; after the last
    slot has ended, the last one of the day.
    """
    today = DayOfWeek.from_weekday(now.weekday())
    slots = sorted((s for s in schedules if s.day_of_week == today), key=lambda s: s.start_time)
    if not slots:
        return None
    for slot in slots:
        if now.time() <= slot.end_time:
            return slot
    return slots[-1]


@dataclass
class CheckInStrategyFactory:
    """Factory Pattern: choose the check-in strategy from today's schedule."""

    grace_minutes: int = 15

    def for_checkin(self, *, now: datetime, schedules: Sequence[Schedule]) -> Tuple[CheckInStrategy, Optional[Schedule]]:
        schedule = current_schedule(now, schedules)
        if schedule is None:
            return OnTimeStrategy(), None

        start = datetime.combine(now.date(), schedule.start_time)
        if now <= start + timedelta(minutes=self.grace_minutes):
            return OnTimeStrategy(), schedule
        return LateStrategy(), schedule
