from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Section, row_to_section
from .repository import SectionRepository

SECTION_COLUMNS = "id, name, code, description, created_at"

UPDATABLE_COLUMNS = frozenset({"name", "code", "description"})


class MySQLSectionRepository(SectionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, section_id: int) -> Optional[Section]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {SECTION_COLUMNS} FROM sections WHERE id=%s", (int(section_id),))
            row = fetchone(cur)
            return row_to_section(row) if row else None

    def list_all(self) -> Sequence[Section]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {SECTION_COLUMNS} FROM sections ORDER BY name")
            return [row_to_section(r) for r in fetchall(cur)]

    def create(self, *, name: str, code: str, description: Optional[str]) -> Section:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO sections(name, code, description) VALUES(%s,%s,%s)",
                (name, code, description),
            )
            cur.execute(f"SELECT {SECTION_COLUMNS} FROM sections WHERE id=%s", (int(cur.lastrowid),))
            return row_to_section(fetchone(cur))

    def update(self, section_id: int, changes: dict) -> Optional[Section]:
        unknown = set(changes) - UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Unsupported section columns: {sorted(unknown)}")

        with db_cursor(self._conn_factory) as (_, cur):
            if changes:
                assignments = ", ".join(f"{col}=%s" for col in changes)
                cur.execute(f"UPDATE sections SET {assignments} WHERE id=%s", (*changes.values(), int(section_id)))
            cur.execute(f"SELECT {SECTION_COLUMNS} FROM sections WHERE id=%s", (int(section_id),))
            row = fetchone(cur)
            return row_to_section(row) if row else None
