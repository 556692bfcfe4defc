from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...schedules.model import Schedule


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    remarks: Optional[str] = None


class CheckInStrategy(ABC):
    """Strategy Pattern: encapsulate how a QR check-in status is decided."""

    @abstractmethod
    def decide(self, *, now: datetime, schedule: Optional[Schedule]) -> StatusDecision:
        raise NotImplementedError
