from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time
from typing import Dict, Optional

import pytest
from werkzeug.security import generate_password_hash

from class_attendance.attendance.model import AttendanceQuery, AttendanceRecord
from class_attendance.container import assemble_container
from class_attendance.core.enums import AttendanceStatus, DayOfWeek, Role
from class_attendance.core.exceptions import DuplicateMembershipError, DuplicateUsernameError, StoreUnavailableError
from class_attendance.enrollments.model import Enrollment, SectionEnrollment
from class_attendance.main import create_app
from class_attendance.qrcodes.model import QrCode
from class_attendance.schedules.model import Schedule
from class_attendance.sections.model import Section
from class_attendance.subjects.model import Subject
from class_attendance.users.model import User

PASSWORD = "password"
PASSWORD_HASH = generate_password_hash(PASSWORD)

ADMIN_ID = 1
TEACHER_ID = 2
OTHER_TEACHER_ID = 3
STUDENT_ID = 4
SUBJECT_ID = 1
OTHER_SUBJECT_ID = 2
SECTION_ID = 1


class InMemoryStore:
    """Tables shared by the in-memory repositories so cascades see each other."""

    def __init__(self):
        self.users: Dict[int, User] = {}
        self.subjects: Dict[int, Subject] = {}
        self.sections: Dict[int, Section] = {}
        self.schedules: Dict[int, Schedule] = {}
        self.enrollments: Dict[int, Enrollment] = {}
        self.section_enrollments: Dict[int, SectionEnrollment] = {}
        self.attendance: Dict[int, AttendanceRecord] = {}
        self.qr_codes: Dict[int, QrCode] = {}
        self._ids: Dict[str, int] = {}

    def next_id(self, table: str) -> int:
        self._ids[table] = self._ids.get(table, 0) + 1
        return self._ids[table]

    def add_user(self, user_id: int, username: str, role: Role, full_name: str) -> User:
        user = User(
            user_id=user_id,
            username=username,
            email=f"{username}@school.edu",
            password_hash=PASSWORD_HASH,
            full_name=full_name,
            role=role,
        )
        self.users[user_id] = user
        self._ids["users"] = max(self._ids.get("users", 0), user_id)
        return user


class InMemoryUsers:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._s.users.get(user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self._s.users.values() if u.username == username), None)

    def list_by_role(self, role: Optional[Role] = None):
        users = [u for u in self._s.users.values() if role is None or u.role == role]
        return sorted(users, key=lambda u: u.full_name)

    def create_user(self, *, username, email, password_hash, full_name, role, profile_picture=None) -> User:
        if self.get_by_username(username):
            raise DuplicateUsernameError("Username already exists")
        user = User(
            user_id=self._s.next_id("users"),
            username=username,
            email=email,
            password_hash=password_hash,
            full_name=full_name,
            role=role,
            profile_picture=profile_picture,
        )
        self._s.users[user.user_id] = user
        return user

    def update_user(self, user_id: int, changes: dict) -> Optional[User]:
        user = self._s.users.get(user_id)
        if not user:
            return None
        self._s.users[user_id] = replace(user, **changes)
        return self._s.users[user_id]

    def delete_by_id(self, user_id: int) -> bool:
        if user_id not in self._s.users:
            return False
        for table in (self._s.enrollments, self._s.section_enrollments, self._s.attendance):
            for key in [k for k, v in table.items() if v.student_id == user_id]:
                del table[key]
        for sid, subject in list(self._s.subjects.items()):
            if subject.teacher_id == user_id:
                self._s.subjects[sid] = replace(subject, teacher_id=None)
        del self._s.users[user_id]
        return True


class InMemorySubjects:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        return self._s.subjects.get(subject_id)

    def list_all(self):
        return sorted(self._s.subjects.values(), key=lambda s: s.name)

    def list_by_teacher(self, teacher_id: int):
        return [s for s in self.list_all() if s.teacher_id == teacher_id]

    def list_by_student(self, student_id: int):
        ids = {e.subject_id for e in self._s.enrollments.values() if e.student_id == student_id}
        return [s for s in self.list_all() if s.subject_id in ids]

    def create(self, *, name, code, description, teacher_id) -> Subject:
        subject = Subject(
            subject_id=self._s.next_id("subjects"),
            name=name,
            code=code,
            description=description,
            teacher_id=teacher_id,
        )
        self._s.subjects[subject.subject_id] = subject
        return subject

    def update(self, subject_id: int, changes: dict) -> Optional[Subject]:
        subject = self._s.subjects.get(subject_id)
        if not subject:
            return None
        self._s.subjects[subject_id] = replace(subject, **changes)
        return self._s.subjects[subject_id]


class InMemorySections:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_id(self, section_id: int) -> Optional[Section]:
        return self._s.sections.get(section_id)

    def list_all(self):
        return sorted(self._s.sections.values(), key=lambda s: s.name)

    def create(self, *, name, code, description) -> Section:
        section = Section(section_id=self._s.next_id("sections"), name=name, code=code, description=description)
        self._s.sections[section.section_id] = section
        return section

    def update(self, section_id: int, changes: dict) -> Optional[Section]:
        section = self._s.sections.get(section_id)
        if not section:
            return None
        self._s.sections[section_id] = replace(section, **changes)
        return self._s.sections[section_id]


class InMemorySchedules:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_id(self, schedule_id: int) -> Optional[Schedule]:
        return self._s.schedules.get(schedule_id)

    def list_by_subject(self, subject_id: int):
        return [s for s in self._s.schedules.values() if s.subject_id == subject_id]

    def list_by_teacher(self, teacher_id: int):
        owned = {s.subject_id: s for s in self._s.subjects.values() if s.teacher_id == teacher_id}
        return [
            replace(sc, subject_name=owned[sc.subject_id].name, subject_code=owned[sc.subject_id].code)
            for sc in self._s.schedules.values()
            if sc.subject_id in owned
        ]

    def create(self, *, subject_id, day_of_week, start_time, end_time, room) -> Schedule:
        schedule = Schedule(
            schedule_id=self._s.next_id("schedules"),
            subject_id=subject_id,
            day_of_week=day_of_week,
            start_time=start_time,
            end_time=end_time,
            room=room,
        )
        self._s.schedules[schedule.schedule_id] = schedule
        return schedule

    def delete(self, schedule_id: int) -> bool:
        return self._s.schedules.pop(schedule_id, None) is not None


class InMemoryEnrollments:
    """Enrollment store. `fail_on_student` makes insert_many fault when it reaches that id."""

    def __init__(self, store: InMemoryStore):
        self._s = store
        self.fail_on_student: Optional[int] = None

    def student_ids_for_subject(self, subject_id: int):
        return frozenset(e.student_id for e in self._s.enrollments.values() if e.subject_id == subject_id)

    def _new(self, subject_id: int, student_id: int) -> Enrollment:
        if student_id in self.student_ids_for_subject(subject_id):
            raise DuplicateMembershipError("Student is already enrolled in this subject")
        return Enrollment(enrollment_id=self._s.next_id("enrollments"), student_id=student_id, subject_id=subject_id)

    def insert(self, *, subject_id: int, student_id: int) -> Enrollment:
        enrollment = self._new(subject_id, student_id)
        self._s.enrollments[enrollment.enrollment_id] = enrollment
        return enrollment

    def insert_many(self, *, subject_id: int, student_ids) -> int:
        staged = []
        for student_id in student_ids:
            if student_id == self.fail_on_student:
                raise StoreUnavailableError("Database operation failed")
            staged.append(self._new(subject_id, student_id))
        for enrollment in staged:
            self._s.enrollments[enrollment.enrollment_id] = enrollment
        return len(staged)

    def delete(self, *, subject_id: int, student_id: int) -> bool:
        keys = [k for k, e in self._s.enrollments.items() if e.subject_id == subject_id and e.student_id == student_id]
        for k in keys:
            del self._s.enrollments[k]
        return bool(keys)

    def delete_subject_cascade(self, subject_id: int) -> bool:
        if subject_id not in self._s.subjects:
            return False
        for table in (self._s.enrollments, self._s.schedules, self._s.qr_codes, self._s.attendance):
            for key in [k for k, v in table.items() if v.subject_id == subject_id]:
                del table[key]
        del self._s.subjects[subject_id]
        return True

    def student_ids_for_section(self, section_id: int):
        return frozenset(e.student_id for e in self._s.section_enrollments.values() if e.section_id == section_id)

    def insert_section_member(self, *, section_id: int, student_id: int) -> SectionEnrollment:
        if student_id in self.student_ids_for_section(section_id):
            raise DuplicateMembershipError("Student is already enrolled in this section")
        member = SectionEnrollment(
            enrollment_id=self._s.next_id("section_enrollments"),
            section_id=section_id,
            student_id=student_id,
        )
        self._s.section_enrollments[member.enrollment_id] = member
        return member

    def delete_section_member(self, *, section_id: int, student_id: int) -> bool:
        keys = [
            k
            for k, e in self._s.section_enrollments.items()
            if e.section_id == section_id and e.student_id == student_id
        ]
        for k in keys:
            del self._s.section_enrollments[k]
        return bool(keys)

    def delete_section_cascade(self, section_id: int) -> bool:
        if section_id not in self._s.sections:
            return False
        for key in [k for k, e in self._s.section_enrollments.items() if e.section_id == section_id]:
            del self._s.section_enrollments[key]
        del self._s.sections[section_id]
        return True


class InMemoryAttendance:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def create(self, *, student_id, subject_id, date, status, time_in, remarks=None) -> AttendanceRecord:
        record = AttendanceRecord(
            attendance_id=self._s.next_id("attendance"),
            student_id=student_id,
            subject_id=subject_id,
            date=date,
            status=status,
            time_in=time_in,
            remarks=remarks,
        )
        self._s.attendance[record.attendance_id] = record
        return record

    def list(self, query: AttendanceQuery):
        rows = [
            r
            for r in self._s.attendance.values()
            if (query.student_id is None or r.student_id == query.student_id)
            and (query.subject_id is None or r.subject_id == query.subject_id)
            and (query.date is None or r.date == query.date)
        ]
        return sorted(rows, key=lambda r: (r.date, r.time_in or datetime.min, r.attendance_id), reverse=True)

    def create_once_per_day(self, *, student_id, subject_id, date, status, time_in, remarks=None):
        if self.list(AttendanceQuery(student_id=student_id, subject_id=subject_id, date=date)):
            return None
        return self.create(
            student_id=student_id,
            subject_id=subject_id,
            date=date,
            status=status,
            time_in=time_in,
            remarks=remarks,
        )

    def count_by_status(self, *, subject_id: int, student_id: Optional[int] = None):
        counts: Dict[AttendanceStatus, int] = {}
        for r in self.list(AttendanceQuery(student_id=student_id, subject_id=subject_id)):
            counts[r.status] = counts.get(r.status, 0) + 1
        return counts


class InMemoryQrCodes:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def replace_active(self, *, subject_id: int, code: str) -> Optional[QrCode]:
        if subject_id not in self._s.subjects:
            return None
        for qr_id, qr in list(self._s.qr_codes.items()):
            if qr.subject_id == subject_id and qr.active:
                self._s.qr_codes[qr_id] = replace(qr, active=False)
        qr = QrCode(qr_id=self._s.next_id("qr_codes"), subject_id=subject_id, code=code, active=True)
        self._s.qr_codes[qr.qr_id] = qr
        return qr

    def list_active(self, subject_id: int):
        return [q for q in self._s.qr_codes.values() if q.subject_id == subject_id and q.active]

    def get_active(self, subject_id: int) -> Optional[QrCode]:
        active = self.list_active(subject_id)
        return active[-1] if active else None

    def find_active_by_code(self, code: str, *, student_id: Optional[int] = None) -> Optional[QrCode]:
        enrolled = {e.subject_id for e in self._s.enrollments.values() if e.student_id == student_id}
        matches = [
            q
            for q in self._s.qr_codes.values()
            if q.code == code and q.active and (student_id is None or q.subject_id in enrolled)
        ]
        # newest first, like ORDER BY id DESC
        return max(matches, key=lambda q: q.qr_id, default=None)


@pytest.fixture
def fixed_now():
    # Monday, ten minutes after the 09:00 class starts.
    return datetime(2026, 2, 2, 9, 10, 0)


@pytest.fixture
def store() -> InMemoryStore:
    s = InMemoryStore()
    s.add_user(ADMIN_ID, "admin", Role.SUPERADMIN, "System Administrator")
    s.add_user(TEACHER_ID, "teacher", Role.TEACHER, "Dr. Jose Rizal")
    s.add_user(OTHER_TEACHER_ID, "teacher2", Role.TEACHER, "Andres Bonifacio")
    s.add_user(STUDENT_ID, "student", Role.STUDENT, "Juan Dela Cruz")
    for user_id, username, full_name in (
        (5, "mclara", "Maria Clara"),
        (6, "cibarra", "Crisostomo Ibarra"),
        (7, "ssisa", "Sisa"),
        (8, "basilio", "Basilio"),
        (9, "crispin", "Crispin"),
    ):
        s.add_user(user_id, username, Role.STUDENT, full_name)

    s.subjects[SUBJECT_ID] = Subject(SUBJECT_ID, "Software Engineering", "SE101", teacher_id=TEACHER_ID)
    s.subjects[OTHER_SUBJECT_ID] = Subject(OTHER_SUBJECT_ID, "Data Structures", "CS201", teacher_id=OTHER_TEACHER_ID)
    s._ids["subjects"] = 2

    s.schedules[1] = Schedule(1, SUBJECT_ID, DayOfWeek.MONDAY, time(9, 0), time(10, 30), "Q3212")
    s._ids["schedules"] = 1

    s.sections[SECTION_ID] = Section(SECTION_ID, "BSCS 1-A", "BSCS-1A")
    s._ids["sections"] = 1
    for student_id in (STUDENT_ID, 5):
        member = SectionEnrollment(s.next_id("section_enrollments"), SECTION_ID, student_id)
        s.section_enrollments[member.enrollment_id] = member
    return s


@pytest.fixture
def container(store):
    return assemble_container(
        users_repo=InMemoryUsers(store),
        subjects_repo=InMemorySubjects(store),
        sections_repo=InMemorySections(store),
        schedules_repo=InMemorySchedules(store),
        enrollments_repo=InMemoryEnrollments(store),
        attendance_repo=InMemoryAttendance(store),
        qr_codes_repo=InMemoryQrCodes(store),
        late_grace_minutes=15,
    )


@pytest.fixture
def app(container):
    return create_app(container, settings_module="class_attendance.config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login_as(client):
    def _login(user_id: int):
        with client.session_transaction() as sess:
            sess["user_id"] = user_id
        return client

    return _login
