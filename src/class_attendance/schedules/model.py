from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Any, Mapping, Optional

from ..core.enums import DayOfWeek
from ..database.mysql_base import normalize_mysql_time


@dataclass(frozen=True)
class Schedule:
    """A recurring weekly slot of a subject."""

    schedule_id: int
    subject_id: int
    day_of_week: DayOfWeek
    start_time: time
    end_time: time
    room: str
    subject_name: Optional[str] = None
    subject_code: Optional[str] = None


def row_to_schedule(row: Mapping[str, Any]) -> Schedule:
    return Schedule(
        schedule_id=int(row["id"]),
        subject_id=int(row["subject_id"]),
        day_of_week=DayOfWeek(row["day_of_week"]),
        start_time=normalize_mysql_time(row["start_time"]),
        end_time=normalize_mysql_time(row["end_time"]),
        room=row["room"],
        subject_name=row.get("subject_name"),
        subject_code=row.get("subject_code"),
    )
