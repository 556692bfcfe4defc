from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Subject, row_to_subject
from .repository import SubjectRepository

SUBJECT_COLUMNS = "s.id, s.name, s.code, s.description, s.teacher_id, s.created_at"

UPDATABLE_COLUMNS = frozenset({"name", "code", "description", "teacher_id"})


class MySQLSubjectRepository(SubjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {SUBJECT_COLUMNS} FROM subjects s WHERE s.id=%s", (int(subject_id),))
            row = fetchone(cur)
            return row_to_subject(row) if row else None

    def list_all(self) -> Sequence[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {SUBJECT_COLUMNS} FROM subjects s ORDER BY s.code")
            return [row_to_subject(r) for r in fetchall(cur)]

    def list_by_teacher(self, teacher_id: int) -> Sequence[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {SUBJECT_COLUMNS} FROM subjects s WHERE s.teacher_id=%s ORDER BY s.code",
                (int(teacher_id),),
            )
            return [row_to_subject(r) for r in fetchall(cur)]

    def list_by_student(self, student_id: int) -> Sequence[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {SUBJECT_COLUMNS}
                FROM subjects s
                JOIN enrollments e ON e.subject_id = s.id
                WHERE e.student_id=%s
                ORDER BY s.code
                """,
                (int(student_id),),
            )
            return [row_to_subject(r) for r in fetchall(cur)]

    def create(self, *, name: str, code: str, description: Optional[str], teacher_id: Optional[int]) -> Subject:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO subjects(name, code, description, teacher_id) VALUES(%s,%s,%s,%s)",
                (name, code, description, teacher_id),
            )
            cur.execute(f"SELECT {SUBJECT_COLUMNS} FROM subjects s WHERE s.id=%s", (int(cur.lastrowid),))
            return row_to_subject(fetchone(cur))

    def update(self, subject_id: int, changes: dict) -> Optional[Subject]:
        unknown = set(changes) - UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Unsupported subject columns: {sorted(unknown)}")

        with db_cursor(self._conn_factory) as (_, cur):
            if changes:
                assignments = ", ".join(f"{col}=%s" for col in changes)
                cur.execute(f"UPDATE subjects SET {assignments} WHERE id=%s", (*changes.values(), int(subject_id)))
            cur.execute(f"SELECT {SUBJECT_COLUMNS} FROM subjects s WHERE s.id=%s", (int(subject_id),))
            row = fetchone(cur)
            return row_to_subject(row) if row else None
