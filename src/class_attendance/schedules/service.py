from __future__ import annotations

from typing import Sequence

from ..common.datetime_utils import parse_hhmm
from ..common.validators import require_enum, require_int, require_non_empty
from ..core.enums import DayOfWeek
from ..core.exceptions import NotFoundError, ValidationError
from ..subjects.service import SubjectService
from ..users.model import User
from .model import Schedule
from .repository import ScheduleRepository


class ScheduleService:
    def __init__(self, schedules: ScheduleRepository, subjects: SubjectService):
        self._schedules = schedules
        self._subjects = subjects

    def list_by_subject(self, subject_id: int) -> Sequence[Schedule]:
        self._subjects.get(subject_id)
        return self._schedules.list_by_subject(int(subject_id))

    def list_for_teacher(self, teacher: User) -> Sequence[Schedule]:
        return self._schedules.list_by_teacher(teacher.user_id)

    def create(self, *, actor: User, data: dict) -> Schedule:
        subject_id = require_int(data.get("subjectId"), "subjectId")
        day = require_enum(DayOfWeek, data.get("dayOfWeek"), "dayOfWeek")
        start = parse_hhmm(data.get("startTime"), "startTime")
        end = parse_hhmm(data.get("endTime"), "endTime")
        room = require_non_empty(data.get("room"), "room")
        if end <= start:
            raise ValidationError("endTime must be after startTime", field="endTime")

        self._subjects.require_manageable(actor, subject_id)
        return self._schedules.create(
            subject_id=subject_id,
            day_of_week=day,
            start_time=start,
            end_time=end,
            room=room,
        )

    def delete(self, *, actor: User, schedule_id: int) -> None:
        schedule = self._schedules.get_by_id(int(schedule_id))
        if not schedule:
            raise NotFoundError("Schedule not found")
        self._subjects.require_manageable(actor, schedule.subject_id)
        self._schedules.delete(schedule.schedule_id)
