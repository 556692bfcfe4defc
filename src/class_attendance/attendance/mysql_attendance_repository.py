from __future__ import annotations

from datetime import date, datetime
from typing import Dict, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceQuery, AttendanceRecord, row_to_attendance
from .repository import AttendanceRepository

ATTENDANCE_COLUMNS = "id, student_id, subject_id, date, status, time_in, remarks"


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        student_id: int,
        subject_id: int,
        date: date,
        status: AttendanceStatus,
        time_in: datetime,
        remarks: Optional[str] = None,
    ) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(student_id, subject_id, date, status, time_in, remarks)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(student_id), int(subject_id), date, status.value, time_in, remarks),
            )
            cur.execute(f"SELECT {ATTENDANCE_COLUMNS} FROM attendance WHERE id=%s", (int(cur.lastrowid),))
            return row_to_attendance(fetchone(cur))

    def list(self, query: AttendanceQuery) -> Sequence[AttendanceRecord]:
        clauses: list[str] = []
        params: list[object] = []
        if query.student_id is not None:
            clauses.append("student_id=%s")
            params.append(int(query.student_id))
        if query.subject_id is not None:
            clauses.append("subject_id=%s")
            params.append(int(query.subject_id))
        if query.date is not None:
            clauses.append("date=%s")
            params.append(query.date)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {ATTENDANCE_COLUMNS} FROM attendance {where} ORDER BY date DESC, time_in DESC, id DESC",
                tuple(params),
            )
            return [row_to_attendance(r) for r in fetchall(cur)]

    def create_once_per_day(
        self,
        *,
        student_id: int,
        subject_id: int,
        date: date,
        status: AttendanceStatus,
        time_in: datetime,
        remarks: Optional[str] = None,
    ) -> Optional[AttendanceRecord]:
        pair = (int(student_id), int(subject_id))
        with db_cursor(self._conn_factory) as (_, cur):
            # Concurrent check-ins of the same student wait here until this one commits.
            cur.execute("SELECT id FROM enrollments WHERE student_id=%s AND subject_id=%s FOR UPDATE", pair)
            fetchone(cur)
            cur.execute(
                "SELECT 1 AS hit FROM attendance WHERE student_id=%s AND subject_id=%s AND date=%s LIMIT 1",
                (*pair, date),
            )
            if fetchone(cur):
                return None
            cur.execute(
                """
                INSERT INTO attendance(student_id, subject_id, date, status, time_in, remarks)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (*pair, date, status.value, time_in, remarks),
            )
            cur.execute(f"SELECT {ATTENDANCE_COLUMNS} FROM attendance WHERE id=%s", (int(cur.lastrowid),))
            return row_to_attendance(fetchone(cur))

    def count_by_status(self, *, subject_id: int, student_id: Optional[int] = None) -> Dict[AttendanceStatus, int]:
        sql = "SELECT status, COUNT(*) AS total FROM attendance WHERE subject_id=%s"
        params: list[object] = [int(subject_id)]
        if student_id is not None:
            sql += " AND student_id=%s"
            params.append(int(student_id))
        sql += " GROUP BY status"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            counts = {status: 0 for status in AttendanceStatus}
            for r in fetchall(cur):
                counts[AttendanceStatus(r["status"])] = int(r["total"])
            return counts
