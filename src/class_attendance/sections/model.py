from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class Section:
    """Administrative grouping of students, independent of subject enrollment."""

    section_id: int
    name: str
    code: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None


def row_to_section(row: Mapping[str, Any]) -> Section:
    return Section(
        section_id=int(row["id"]),
        name=row["name"],
        code=row["code"],
        description=row.get("description"),
        created_at=row.get("created_at"),
    )
