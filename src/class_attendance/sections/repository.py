from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Section


class SectionRepository(Protocol):
    def get_by_id(self, section_id: int) -> Optional[Section]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Section]:
        raise NotImplementedError

    def create(self, *, name: str, code: str, description: Optional[str]) -> Section:
        raise NotImplementedError

    def update(self, section_id: int, changes: dict) -> Optional[Section]:
        raise NotImplementedError
