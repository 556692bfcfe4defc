from __future__ import annotations

import re
from datetime import date
from pathlib import Path
from typing import Iterable, Optional

import mysql.connector
from werkzeug.security import generate_password_hash

from ..core.logging import get_logger
from .connection import DBConfig

log = get_logger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
SEED_PATH = Path(__file__).resolve().parents[3] / "database" / "seed.sql"

DEMO_PASSWORD = "password"

# (day_of_week, start, end, room) for the demo subject.
DEMO_SCHEDULES = (
    ("Monday", "09:00", "10:30", "Q3212"),
    ("Wednesday", "09:00", "10:30", "Q3212"),
    ("Friday", "09:00", "10:30", "Q3212"),
)


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        connection_timeout=target.connection_timeout,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql usable regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?m)^\s*--.*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ';' outside of quoted strings."""
    buf: list[str] = []
    quote: Optional[str] = None
    escape = False

    for ch in sql:
        buf.append(ch)
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf[:-1]).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(db_config: dict, path: Path) -> None:
    target = DBConfig.from_dict(db_config)
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    ensure_database_exists(db_config)
    _run_script(db_config, Path(schema_path))
    log.info("schema applied from %s", schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path = SEED_PATH) -> None:
    _run_script(db_config, Path(seed_path))
    log.info("seed applied from %s", seed_path)


def ensure_demo_users(db_config: dict) -> None:
    """Upsert the demo admin/teacher/student and, on first run, the SE101 subject."""
    target = DBConfig.from_dict(db_config)

    conn = _connect(target)
    try:
        cur = conn.cursor(dictionary=True)

        def upsert_user(username: str, email: str, full_name: str, role: str) -> int:
            password_hash = generate_password_hash(DEMO_PASSWORD)
            cur.execute("SELECT id FROM users WHERE username=%s", (username,))
            existing = cur.fetchone()
            if existing:
                cur.execute(
                    "UPDATE users SET email=%s, full_name=%s, password_hash=%s, role=%s WHERE id=%s",
                    (email, full_name, password_hash, role, existing["id"]),
                )
                return int(existing["id"])
            cur.execute(
                """
                INSERT INTO users (username, email, password_hash, full_name, role)
                VALUES (%s, %s, %s, %s, %s)
                """,
                (username, email, password_hash, full_name, role),
            )
            return int(cur.lastrowid)

        upsert_user("admin", "admin@school.edu", "System Administrator", "superadmin")
        teacher_id = upsert_user("teacher", "teacher@school.edu", "Dr. Jose Rizal", "teacher")
        student_id = upsert_user("student", "student@school.edu", "Juan Dela Cruz", "student")

        cur.execute("SELECT id FROM subjects WHERE code=%s", ("SE101",))
        if not cur.fetchone():
            cur.execute(
                "INSERT INTO subjects (name, code, description, teacher_id) VALUES (%s, %s, %s, %s)",
                ("Software Engineering", "SE101", "Introduction to Software Engineering", teacher_id),
            )
            subject_id = int(cur.lastrowid)
            for day, start, end, room in DEMO_SCHEDULES:
                cur.execute(
                    """
                    INSERT INTO schedules (subject_id, day_of_week, start_time, end_time, room)
                    VALUES (%s, %s, %s, %s, %s)
                    """,
                    (subject_id, day, start, end, room),
                )
            cur.execute(
                "INSERT INTO enrollments (student_id, subject_id) VALUES (%s, %s)",
                (student_id, subject_id),
            )
            cur.execute(
                """
                INSERT INTO attendance (student_id, subject_id, date, status, time_in, remarks)
                VALUES (%s, %s, %s, 'present', NOW(), 'On time')
                """,
                (student_id, subject_id, date.today()),
            )

        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
