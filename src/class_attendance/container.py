from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.factory import CheckInStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceLedger
from .core.constants import DEFAULT_LATE_GRACE_MINUTES
from .database.connection import DBConfig, DatabaseConnection
from .enrollments.mysql_enrollment_repository import MySQLEnrollmentRepository
from .enrollments.repository import EnrollmentRepository
from .enrollments.service import MembershipService
from .qrcodes.mysql_qr_code_repository import MySQLQrCodeRepository
from .qrcodes.repository import QrCodeRepository
from .qrcodes.service import QrCodeService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleService
from .sections.mysql_section_repository import MySQLSectionRepository
from .sections.repository import SectionRepository
from .sections.service import SectionService
from .subjects.mysql_subject_repository import MySQLSubjectRepository
from .subjects.repository import SubjectRepository
from .subjects.service import SubjectService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    subjects_repo: SubjectRepository
    sections_repo: SectionRepository
    schedules_repo: ScheduleRepository
    enrollments_repo: EnrollmentRepository
    attendance_repo: AttendanceRepository
    qr_codes_repo: QrCodeRepository

    auth_service: AuthService
    user_service: UserService
    subject_service: SubjectService
    section_service: SectionService
    schedule_service: ScheduleService
    membership_service: MembershipService
    attendance_ledger: AttendanceLedger
    qr_service: QrCodeService

    conn: Optional[DatabaseConnection] = None


def assemble_container(
    *,
    users_repo: UserRepository,
    subjects_repo: SubjectRepository,
    sections_repo: SectionRepository,
    schedules_repo: ScheduleRepository,
    enrollments_repo: EnrollmentRepository,
    attendance_repo: AttendanceRepository,
    qr_codes_repo: QrCodeRepository,
    late_grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over any set of repositories (MySQL in the app, in-memory in tests)."""
    subject_service = SubjectService(subjects_repo, users_repo)
    section_service = SectionService(sections_repo)

    return Container(
        users_repo=users_repo,
        subjects_repo=subjects_repo,
        sections_repo=sections_repo,
        schedules_repo=schedules_repo,
        enrollments_repo=enrollments_repo,
        attendance_repo=attendance_repo,
        qr_codes_repo=qr_codes_repo,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        subject_service=subject_service,
        section_service=section_service,
        schedule_service=ScheduleService(schedules_repo, subject_service),
        membership_service=MembershipService(
            enrollments_repo,
            users_repo,
            subject_service,
            subjects_repo,
            section_service,
        ),
        attendance_ledger=AttendanceLedger(
            attendance_repo,
            users_repo,
            subject_service,
            enrollments_repo,
            qr_codes_repo,
            schedules_repo,
            strategy_factory=CheckInStrategyFactory(grace_minutes=int(late_grace_minutes)),
        ),
        qr_service=QrCodeService(qr_codes_repo, subject_service),
        conn=conn,
    )


def build_container(*, db_config: dict, late_grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble_container(
        users_repo=MySQLUserRepository(conn),
        subjects_repo=MySQLSubjectRepository(conn),
        sections_repo=MySQLSectionRepository(conn),
        schedules_repo=MySQLScheduleRepository(conn),
        enrollments_repo=MySQLEnrollmentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        qr_codes_repo=MySQLQrCodeRepository(conn),
        late_grace_minutes=late_grace_minutes,
        conn=conn,
    )
