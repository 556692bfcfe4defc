from __future__ import annotations

import re
from datetime import time, timedelta

import pytest

from class_attendance.database.bootstrap import SCHEMA_PATH, SEED_PATH, _strip_create_db_and_use, iter_sql_statements
from class_attendance.database.mysql_base import normalize_mysql_time


def test_iter_sql_statements_ignores_semicolons_in_quotes():
    sql = "INSERT INTO t VALUES ('a;b');\nINSERT INTO t VALUES (\"c;d\");\nSELECT 1"

    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        'INSERT INTO t VALUES ("c;d")',
        "SELECT 1",
    ]


def test_strip_create_db_and_use():
    sql = "CREATE DATABASE IF NOT EXISTS x;\nUSE x;\n-- comment; with semicolon\nCREATE TABLE a (id INT);"

    assert list(iter_sql_statements(_strip_create_db_and_use(sql))) == ["CREATE TABLE a (id INT)"]


def test_schema_script_creates_every_table():
    statements = list(iter_sql_statements(_strip_create_db_and_use(SCHEMA_PATH.read_text(encoding="utf-8"))))
    created = {re.match(r"CREATE TABLE IF NOT EXISTS (\w+)", s).group(1) for s in statements if s.startswith("CREATE TABLE")}

    assert created == {
        "users",
        "subjects",
        "sections",
        "schedules",
        "enrollments",
        "section_enrollments",
        "attendance",
        "qr_codes",
    }


def test_seed_script_splits():
    assert list(iter_sql_statements(_strip_create_db_and_use(SEED_PATH.read_text(encoding="utf-8"))))


@pytest.mark.parametrize(
    "value, expected",
    [
        (time(8, 30), time(8, 30)),
        (timedelta(hours=8, minutes=30), time(8, 30)),
        ("08:30:15", time(8, 30, 15)),
        ("08:30", time(8, 30)),
        (None, None),
    ],
)
def test_normalize_mysql_time(value, expected):
    assert normalize_mysql_time(value) == expected
