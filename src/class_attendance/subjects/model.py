from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class Subject:
    subject_id: int
    name: str
    code: str
    description: Optional[str] = None
    teacher_id: Optional[int] = None
    created_at: Optional[datetime] = None


def row_to_subject(row: Mapping[str, Any]) -> Subject:
    teacher_id = row.get("teacher_id")
    return Subject(
        subject_id=int(row["id"]),
        name=row["name"],
        code=row["code"],
        description=row.get("description"),
        teacher_id=int(teacher_id) if teacher_id is not None else None,
        created_at=row.get("created_at"),
    )
