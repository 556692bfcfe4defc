from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class QrCode:
    """Check-in code of a subject. At most one code per subject is active."""

    qr_id: int
    subject_id: int
    code: str
    active: bool
    created_at: Optional[datetime] = None


def row_to_qr_code(row: Mapping[str, Any]) -> QrCode:
    return QrCode(
        qr_id=int(row["id"]),
        subject_id=int(row["subject_id"]),
        code=row["code"],
        active=bool(row["active"]),
        created_at=row.get("created_at"),
    )
