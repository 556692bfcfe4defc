from __future__ import annotations

from datetime import time
from typing import Optional, Sequence

from ..core.enums import DayOfWeek
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Schedule, row_to_schedule
from .repository import ScheduleRepository

SCHEDULE_SELECT = """
    SELECT sc.id, sc.subject_id, sc.day_of_week, sc.start_time, sc.end_time, sc.room,
           s.name AS subject_name, s.code AS subject_code
    FROM schedules sc
    JOIN subjects s ON s.id = sc.subject_id
"""

# FIELD() keeps weekday order instead of alphabetical.
ORDER_BY_WEEK = """
    ORDER BY FIELD(sc.day_of_week, 'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday'),
             sc.start_time
"""


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, schedule_id: int) -> Optional[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{SCHEDULE_SELECT} WHERE sc.id=%s", (int(schedule_id),))
            row = fetchone(cur)
            return row_to_schedule(row) if row else None

    def list_by_subject(self, subject_id: int) -> Sequence[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{SCHEDULE_SELECT} WHERE sc.subject_id=%s {ORDER_BY_WEEK}", (int(subject_id),))
            return [row_to_schedule(r) for r in fetchall(cur)]

    def list_by_teacher(self, teacher_id: int) -> Sequence[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{SCHEDULE_SELECT} WHERE s.teacher_id=%s {ORDER_BY_WEEK}", (int(teacher_id),))
            return [row_to_schedule(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        subject_id: int,
        day_of_week: DayOfWeek,
        start_time: time,
        end_time: time,
        room: str,
    ) -> Schedule:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO schedules(subject_id, day_of_week, start_time, end_time, room)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(subject_id), day_of_week.value, start_time, end_time, room),
            )
            cur.execute(f"{SCHEDULE_SELECT} WHERE sc.id=%s", (int(cur.lastrowid),))
            return row_to_schedule(fetchone(cur))

    def delete(self, schedule_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM schedules WHERE id=%s", (int(schedule_id),))
            return cur.rowcount > 0
