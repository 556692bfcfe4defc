from __future__ import annotations

from typing import AbstractSet, Sequence

import mysql.connector

from ..core.exceptions import DuplicateMembershipError, NotFoundError, StoreUnavailableError
from ..core.logging import get_logger
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Enrollment, SectionEnrollment, row_to_enrollment, row_to_section_enrollment
from .repository import EnrollmentRepository

log = get_logger(__name__)

MYSQL_MISSING_PARENT_ERRNO = 1452


def _translate_integrity_error(error: mysql.connector.IntegrityError, what: str) -> Exception:
    if is_duplicate_key(error):
        return DuplicateMembershipError(f"Student is already enrolled in this {what}")
    if getattr(error, "errno", None) == MYSQL_MISSING_PARENT_ERRNO:
        return NotFoundError(f"Student or {what} not found")
    return StoreUnavailableError("Could not save enrollment")


class MySQLEnrollmentRepository(EnrollmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def student_ids_for_subject(self, subject_id: int) -> AbstractSet[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT student_id FROM enrollments WHERE subject_id=%s", (int(subject_id),))
            return frozenset(int(r["student_id"]) for r in fetchall(cur))

    def insert(self, *, subject_id: int, student_id: int) -> Enrollment:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO enrollments(student_id, subject_id) VALUES(%s,%s)",
                    (int(student_id), int(subject_id)),
                )
                cur.execute(
                    "SELECT id, student_id, subject_id, enrolled_at FROM enrollments WHERE id=%s",
                    (int(cur.lastrowid),),
                )
                return row_to_enrollment(fetchone(cur))
        except mysql.connector.IntegrityError as e:
            raise _translate_integrity_error(e, "subject") from e

    def insert_many(self, *, subject_id: int, student_ids: Sequence[int]) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                for student_id in student_ids:
                    cur.execute(
                        "INSERT INTO enrollments(student_id, subject_id) VALUES(%s,%s)",
                        (int(student_id), int(subject_id)),
                    )
                return len(student_ids)
        except mysql.connector.IntegrityError as e:
            log.warning("bulk enroll into subject %s rolled back: %s", subject_id, e)
            raise _translate_integrity_error(e, "subject") from e

    def delete(self, *, subject_id: int, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM enrollments WHERE subject_id=%s AND student_id=%s",
                (int(subject_id), int(student_id)),
            )
            return cur.rowcount > 0

    def delete_subject_cascade(self, subject_id: int) -> bool:
        sid = int(subject_id)
        with db_cursor(self._conn_factory) as (_, cur):
            # Lock the subject so concurrent enrolls wait for the cascade.
            cur.execute("SELECT id FROM subjects WHERE id=%s FOR UPDATE", (sid,))
            if not fetchone(cur):
                return False
            cur.execute("DELETE FROM enrollments WHERE subject_id=%s", (sid,))
            cur.execute("DELETE FROM schedules WHERE subject_id=%s", (sid,))
            cur.execute("DELETE FROM qr_codes WHERE subject_id=%s", (sid,))
            cur.execute("DELETE FROM attendance WHERE subject_id=%s", (sid,))
            cur.execute("DELETE FROM subjects WHERE id=%s", (sid,))
            return cur.rowcount > 0

    def student_ids_for_section(self, section_id: int) -> AbstractSet[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT student_id FROM section_enrollments WHERE section_id=%s", (int(section_id),))
            return frozenset(int(r["student_id"]) for r in fetchall(cur))

    def insert_section_member(self, *, section_id: int, student_id: int) -> SectionEnrollment:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO section_enrollments(section_id, student_id) VALUES(%s,%s)",
                    (int(section_id), int(student_id)),
                )
                cur.execute(
                    "SELECT id, section_id, student_id, enrolled_at FROM section_enrollments WHERE id=%s",
                    (int(cur.lastrowid),),
                )
                return row_to_section_enrollment(fetchone(cur))
        except mysql.connector.IntegrityError as e:
            raise _translate_integrity_error(e, "section") from e

    def delete_section_member(self, *, section_id: int, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM section_enrollments WHERE section_id=%s AND student_id=%s",
                (int(section_id), int(student_id)),
            )
            return cur.rowcount > 0

    def delete_section_cascade(self, section_id: int) -> bool:
        sid = int(section_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM section_enrollments WHERE section_id=%s", (sid,))
            cur.execute("DELETE FROM sections WHERE id=%s", (sid,))
            return cur.rowcount > 0
