from __future__ import annotations

from datetime import date, datetime

import mysql.connector
import pytest

from class_attendance.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from class_attendance.core.enums import AttendanceStatus
from class_attendance.core.exceptions import DuplicateMembershipError, NotFoundError, StoreUnavailableError
from class_attendance.enrollments.mysql_enrollment_repository import MySQLEnrollmentRepository
from class_attendance.qrcodes.mysql_qr_code_repository import MySQLQrCodeRepository


class FakeCursor:
    """Records statements; raises `fail_with` on the `fail_at`-th INSERT."""

    def __init__(self, conn):
        self._conn = conn
        self.lastrowid = 0
        self.rowcount = 0
        self._result = []

    def execute(self, sql, params=()):
        statement = " ".join(sql.split())
        if statement.startswith("INSERT"):
            self._conn.inserts += 1
            if self._conn.fail_at is not None and self._conn.inserts == self._conn.fail_at:
                raise self._conn.fail_with
            self.lastrowid = self._conn.inserts
        self._conn.statements.append((statement, tuple(params)))
        self._result = list(self._conn.results.pop(0)) if statement.startswith("SELECT") and self._conn.results else []
        self.rowcount = 1

    def fetchone(self):
        return self._result[0] if self._result else None

    def fetchall(self):
        return self._result

    def close(self):
        pass


class FakeConnection:
    def __init__(self, *, fail_at=None, fail_with=None, results=None):
        self.fail_at = fail_at
        self.fail_with = fail_with
        self.results = list(results or [])
        self.inserts = 0
        self.statements = []
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return FakeCursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeConnFactory:
    def __init__(self, conn: FakeConnection):
        self.conn = conn

    def connect(self):
        return self.conn


def test_insert_many_commits_once():
    conn = FakeConnection()
    repo = MySQLEnrollmentRepository(FakeConnFactory(conn))

    assert repo.insert_many(subject_id=1, student_ids=[4, 5, 6, 7, 8]) == 5

    assert conn.inserts == 5
    assert conn.committed and not conn.rolled_back and conn.closed


def test_insert_many_store_fault_rolls_back():
    conn = FakeConnection(fail_at=3, fail_with=mysql.connector.OperationalError(msg="Lost connection", errno=2013))
    repo = MySQLEnrollmentRepository(FakeConnFactory(conn))

    with pytest.raises(StoreUnavailableError):
        repo.insert_many(subject_id=1, student_ids=[4, 5, 6, 7, 8])

    assert conn.rolled_back
    assert not conn.committed
    assert conn.closed


def test_insert_many_duplicate_rolls_back():
    conn = FakeConnection(fail_at=2, fail_with=mysql.connector.IntegrityError(msg="Duplicate entry", errno=1062))
    repo = MySQLEnrollmentRepository(FakeConnFactory(conn))

    with pytest.raises(DuplicateMembershipError):
        repo.insert_many(subject_id=1, student_ids=[4, 5, 6])

    assert conn.rolled_back and not conn.committed


def test_insert_missing_parent_is_not_found():
    conn = FakeConnection(fail_at=1, fail_with=mysql.connector.IntegrityError(msg="FK", errno=1452))
    repo = MySQLEnrollmentRepository(FakeConnFactory(conn))

    with pytest.raises(NotFoundError):
        repo.insert(subject_id=99, student_id=4)


def test_connection_failure_is_store_unavailable():
    class DownFactory:
        def connect(self):
            raise mysql.connector.InterfaceError(msg="Can't connect", errno=2003)

    with pytest.raises(StoreUnavailableError):
        MySQLEnrollmentRepository(DownFactory()).student_ids_for_subject(1)


def test_delete_subject_cascade_locks_subject_first():
    conn = FakeConnection(results=[[{"id": 1}]])
    repo = MySQLEnrollmentRepository(FakeConnFactory(conn))

    assert repo.delete_subject_cascade(1) is True

    sql = [s for s, _ in conn.statements]
    assert sql[0] == "SELECT id FROM subjects WHERE id=%s FOR UPDATE"
    assert sql[-1] == "DELETE FROM subjects WHERE id=%s"
    assert "DELETE FROM enrollments WHERE subject_id=%s" in sql
    assert conn.committed


def test_delete_subject_cascade_missing_subject():
    conn = FakeConnection(results=[[]])
    repo = MySQLEnrollmentRepository(FakeConnFactory(conn))

    assert repo.delete_subject_cascade(42) is False
    assert len(conn.statements) == 1


def test_qr_replace_active_deactivates_before_insert():
    new_row = {"id": 1, "subject_id": 1, "code": "XYZ789", "active": 1, "created_at": None}
    conn = FakeConnection(results=[[{"id": 1}], [new_row]])
    repo = MySQLQrCodeRepository(FakeConnFactory(conn))

    qr = repo.replace_active(subject_id=1, code="XYZ789")

    sql = [s for s, _ in conn.statements]
    assert sql[0].endswith("FOR UPDATE")
    assert sql.index("UPDATE qr_codes SET active=0 WHERE subject_id=%s AND active=1") < sql.index(
        "INSERT INTO qr_codes(subject_id, code, active) VALUES(%s,%s,1)"
    )
    assert qr.code == "XYZ789" and qr.active


def test_qr_find_by_code_scoped_to_enrollments():
    conn = FakeConnection(results=[[{"id": 3, "subject_id": 1, "code": "ABC123", "active": 1}]])
    repo = MySQLQrCodeRepository(FakeConnFactory(conn))

    qr = repo.find_active_by_code("ABC123", student_id=4)

    sql, params = conn.statements[0]
    assert "subject_id IN (SELECT subject_id FROM enrollments WHERE student_id=%s)" in sql
    assert sql.endswith("ORDER BY id DESC LIMIT 1")
    assert params == ("ABC123", 4)
    assert qr.subject_id == 1


def _check_in(repo):
    return repo.create_once_per_day(
        student_id=4,
        subject_id=1,
        date=date(2026, 2, 2),
        status=AttendanceStatus.PRESENT,
        time_in=datetime(2026, 2, 2, 9, 5),
        remarks="QR check-in",
    )


def test_checkin_locks_enrollment_before_insert():
    new_row = {
        "id": 1,
        "student_id": 4,
        "subject_id": 1,
        "date": date(2026, 2, 2),
        "status": "present",
        "time_in": datetime(2026, 2, 2, 9, 5),
        "remarks": "QR check-in",
    }
    conn = FakeConnection(results=[[{"id": 7}], [], [new_row]])
    repo = MySQLAttendanceRepository(FakeConnFactory(conn))

    record = _check_in(repo)

    sql = [s for s, _ in conn.statements]
    assert sql[0] == "SELECT id FROM enrollments WHERE student_id=%s AND subject_id=%s FOR UPDATE"
    assert sql[1].startswith("SELECT 1 AS hit FROM attendance")
    assert sql[2].startswith("INSERT INTO attendance")
    assert conn.inserts == 1
    assert conn.committed and conn.closed
    assert record.status == AttendanceStatus.PRESENT


def test_checkin_same_day_inserts_nothing():
    conn = FakeConnection(results=[[{"id": 7}], [{"hit": 1}]])
    repo = MySQLAttendanceRepository(FakeConnFactory(conn))

    assert _check_in(repo) is None
    assert conn.inserts == 0
    assert len(conn.statements) == 2
