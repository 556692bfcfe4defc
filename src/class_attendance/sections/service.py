from __future__ import annotations

from typing import Sequence

from ..common.validators import optional_str, require_non_empty
from ..core.exceptions import NotFoundError
from .model import Section
from .repository import SectionRepository


class SectionService:
    def __init__(self, sections: SectionRepository):
        self._sections = sections

    def list_all(self) -> Sequence[Section]:
        return self._sections.list_all()

    def get(self, section_id: int) -> Section:
        section = self._sections.get_by_id(int(section_id))
        if not section:
            raise NotFoundError("Section not found")
        return section

    def create(self, data: dict) -> Section:
        return self._sections.create(
            name=require_non_empty(data.get("name"), "name"),
            code=require_non_empty(data.get("code"), "code"),
            description=optional_str(data.get("description")),
        )

    def update(self, section_id: int, data: dict) -> Section:
        changes: dict = {}
        if "name" in data:
            changes["name"] = require_non_empty(data.get("name"), "name")
        if "code" in data:
            changes["code"] = require_non_empty(data.get("code"), "code")
        if "description" in data:
            changes["description"] = optional_str(data.get("description"))

        updated = self._sections.update(int(section_id), changes)
        if not updated:
            raise NotFoundError("Section not found")
        return updated
