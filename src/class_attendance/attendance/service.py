from __future__ import annotations

from datetime import date, datetime
from typing import Dict, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_str, require_non_empty
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..core.logging import get_logger
from ..core.policy import policy_for
from ..enrollments.repository import EnrollmentRepository
from ..qrcodes.repository import QrCodeRepository
from ..schedules.repository import ScheduleRepository
from ..subjects.service import SubjectService
from ..users.model import User
from ..users.repository import UserRepository
from .factory import CheckInStrategyFactory
from .model import AttendanceQuery, AttendanceRecord
from .repository import AttendanceRepository

log = get_logger(__name__)


class AttendanceLedger:
    """Records and queries attendance.

    Marks are appended; marking the same student, subject and day twice keeps
    both rows. Listing as a student always narrows to the student's own rows.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        subjects: SubjectService,
        enrollments: EnrollmentRepository,
        qr_codes: QrCodeRepository,
        schedules: ScheduleRepository,
        *,
        strategy_factory: CheckInStrategyFactory | None = None,
    ):
        self._attendance = attendance
        self._users = users
        self._subjects = subjects
        self._enrollments = enrollments
        self._qr_codes = qr_codes
        self._schedules = schedules
        self._factory = strategy_factory or CheckInStrategyFactory()

    def _require_enrolled(self, student_id: int, subject_id: int) -> None:
        if int(student_id) not in self._enrollments.student_ids_for_subject(int(subject_id)):
            raise ValidationError("Student is not enrolled in this subject", field="studentId")

    def mark(
        self,
        *,
        actor: User,
        student_id: int,
        subject_id: int,
        date: date,
        status: AttendanceStatus,
        remarks: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        subject = self._subjects.require_manageable(actor, subject_id)

        student = self._users.get_by_id(int(student_id))
        if not student or student.role != Role.STUDENT:
            raise NotFoundError("Student not found")
        self._require_enrolled(student.user_id, subject.subject_id)

        record = self._attendance.create(
            student_id=student.user_id,
            subject_id=subject.subject_id,
            date=date,
            status=AttendanceStatus(status),
            time_in=now,
            remarks=optional_str(remarks),
        )
        log.info(
            "attendance %s marked %s for student %s in subject %s on %s",
            record.attendance_id,
            record.status.value,
            record.student_id,
            record.subject_id,
            record.date,
        )
        return record

    def list(
        self,
        *,
        actor: User,
        student_id: Optional[int] = None,
        subject_id: Optional[int] = None,
        date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        student_id = policy_for(actor.role).attendance_student_filter(actor.user_id, student_id)
        return self._attendance.list(AttendanceQuery(student_id=student_id, subject_id=subject_id, date=date))

    def check_in_with_code(self, *, actor: User, code: str, now: datetime | None = None) -> AttendanceRecord:
        """A student checks in by presenting the subject's active QR code."""
        if actor.role != Role.STUDENT:
            raise AuthorizationError("Only students can check in")

        now = now or now_local()
        code = require_non_empty(code, "code")

        qr = self._qr_codes.find_active_by_code(code, student_id=actor.user_id)
        if not qr:
            if self._qr_codes.find_active_by_code(code):
                raise ValidationError("Student is not enrolled in this subject", field="code")
            raise ValidationError("QR code is invalid or expired", field="code")

        strategy, schedule = self._factory.for_checkin(now=now, schedules=self._schedules.list_by_subject(qr.subject_id))
        decision = strategy.decide(now=now, schedule=schedule)

        record = self._attendance.create_once_per_day(
            student_id=actor.user_id,
            subject_id=qr.subject_id,
            date=now.date(),
            status=decision.status,
            time_in=now,
            remarks=decision.remarks,
        )
        if record is None:
            raise ValidationError("You have already checked in today", field="code")
        return record

    def summary(self, *, actor: User, subject_id: int) -> Dict[AttendanceStatus, int]:
        """Per-status counts, scoped like `list`: students count only their own rows."""
        subject = self._subjects.get(subject_id)
        student_id = policy_for(actor.role).attendance_student_filter(actor.user_id, None)
        return self._attendance.count_by_status(subject_id=subject.subject_id, student_id=student_id)
