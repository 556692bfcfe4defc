"""Domain objects -> JSON bodies (camelCase keys).

One function per entity. `serialize_user` is the only way users leave the
gateway and it never includes the password hash.
"""
from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Dict, Iterable, List, Optional

from ..attendance.model import AttendanceRecord
from ..core.enums import AttendanceStatus
from ..enrollments.model import Enrollment, SectionEnrollment
from ..qrcodes.model import QrCode
from ..schedules.model import Schedule
from ..sections.model import Section
from ..subjects.model import Subject
from ..users.model import User


def _iso(value: Optional[date | datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _hhmm(value: Optional[time]) -> Optional[str]:
    return value.strftime("%H:%M") if value is not None else None


def serialize_user(user: User) -> Dict[str, Any]:
    return {
        "id": user.user_id,
        "username": user.username,
        "email": user.email,
        "fullName": user.full_name,
        "role": user.role.value,
        "profilePicture": user.profile_picture,
        "createdAt": _iso(user.created_at),
    }


def serialize_subject(subject: Subject) -> Dict[str, Any]:
    return {
        "id": subject.subject_id,
        "name": subject.name,
        "code": subject.code,
        "description": subject.description,
        "teacherId": subject.teacher_id,
        "createdAt": _iso(subject.created_at),
    }


def serialize_section(section: Section) -> Dict[str, Any]:
    return {
        "id": section.section_id,
        "name": section.name,
        "code": section.code,
        "description": section.description,
        "createdAt": _iso(section.created_at),
    }


def serialize_schedule(schedule: Schedule) -> Dict[str, Any]:
    return {
        "id": schedule.schedule_id,
        "subjectId": schedule.subject_id,
        "dayOfWeek": schedule.day_of_week.value,
        "startTime": _hhmm(schedule.start_time),
        "endTime": _hhmm(schedule.end_time),
        "room": schedule.room,
        "subjectName": schedule.subject_name,
        "subjectCode": schedule.subject_code,
    }


def serialize_enrollment(enrollment: Enrollment) -> Dict[str, Any]:
    return {
        "id": enrollment.enrollment_id,
        "studentId": enrollment.student_id,
        "subjectId": enrollment.subject_id,
        "enrolledAt": _iso(enrollment.enrolled_at),
    }


def serialize_section_enrollment(enrollment: SectionEnrollment) -> Dict[str, Any]:
    return {
        "id": enrollment.enrollment_id,
        "sectionId": enrollment.section_id,
        "studentId": enrollment.student_id,
        "enrolledAt": _iso(enrollment.enrolled_at),
    }


def serialize_attendance(record: AttendanceRecord) -> Dict[str, Any]:
    return {
        "id": record.attendance_id,
        "studentId": record.student_id,
        "subjectId": record.subject_id,
        "date": _iso(record.date),
        "status": record.status.value,
        "timeIn": _iso(record.time_in),
        "remarks": record.remarks,
    }


def serialize_status_counts(counts: Dict[AttendanceStatus, int]) -> Dict[str, int]:
    out = {status.value: int(counts.get(status, 0)) for status in AttendanceStatus}
    out["total"] = sum(out.values())
    return out


def serialize_qr_code(qr: QrCode) -> Dict[str, Any]:
    return {
        "id": qr.qr_id,
        "subjectId": qr.subject_id,
        "code": qr.code,
        "active": qr.active,
        "createdAt": _iso(qr.created_at),
    }


def serialize_many(serializer, items: Iterable) -> List[Dict[str, Any]]:
    return [serializer(item) for item in items]
