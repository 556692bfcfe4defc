from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import QrCode, row_to_qr_code
from .repository import QrCodeRepository

QR_COLUMNS = "id, subject_id, code, active, created_at"


class MySQLQrCodeRepository(QrCodeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def replace_active(self, *, subject_id: int, code: str) -> Optional[QrCode]:
        sid = int(subject_id)
        with db_cursor(self._conn_factory) as (_, cur):
            # Row lock on the subject serializes concurrent generate calls for it.
            cur.execute("SELECT id FROM subjects WHERE id=%s FOR UPDATE", (sid,))
            if not fetchone(cur):
                return None
            cur.execute("UPDATE qr_codes SET active=0 WHERE subject_id=%s AND active=1", (sid,))
            cur.execute("INSERT INTO qr_codes(subject_id, code, active) VALUES(%s,%s,1)", (sid, code))
            cur.execute(f"SELECT {QR_COLUMNS} FROM qr_codes WHERE id=%s", (int(cur.lastrowid),))
            return row_to_qr_code(fetchone(cur))

    def get_active(self, subject_id: int) -> Optional[QrCode]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {QR_COLUMNS} FROM qr_codes WHERE subject_id=%s AND active=1 ORDER BY id DESC LIMIT 1",
                (int(subject_id),),
            )
            row = fetchone(cur)
            return row_to_qr_code(row) if row else None

    def list_active(self, subject_id: int) -> Sequence[QrCode]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {QR_COLUMNS} FROM qr_codes WHERE subject_id=%s AND active=1", (int(subject_id),))
            return [row_to_qr_code(r) for r in fetchall(cur)]

    def find_active_by_code(self, code: str, *, student_id: Optional[int] = None) -> Optional[QrCode]:
        sql = f"SELECT {QR_COLUMNS} FROM qr_codes WHERE code=%s AND active=1"
        params: list[object] = [code]
        if student_id is not None:
            sql += " AND subject_id IN (SELECT subject_id FROM enrollments WHERE student_id=%s)"
            params.append(int(student_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{sql} ORDER BY id DESC LIMIT 1", tuple(params))
            row = fetchone(cur)
            return row_to_qr_code(row) if row else None
