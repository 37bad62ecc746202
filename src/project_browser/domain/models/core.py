from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional, Tuple, Union

from project_browser.errors import InvalidFilterValueError

# Sentinel accepted by the status filter meaning "no status constraint"
STATUS_ALL = "all"


class ProjectStatus(str, Enum):
    ACTIVE = "active"
    PLANNING = "planning"
    PAUSED = "paused"
    COMPLETED = "completed"

    @classmethod
    def parse_filter(cls, value: Union[str, "ProjectStatus", None]) -> Optional["ProjectStatus"]:
        """Return the status for a filter value; ``None`` means "all"."""
        if value is None or isinstance(value, cls):
            return value
        if isinstance(value, str):
            if value == STATUS_ALL:
                return None
            for member in cls:
                if member.value == value:
                    return member
        raise InvalidFilterValueError(f"Unknown project status filter: {value!r}")


class UpdatedSince(str, Enum):
    ANY = "any"
    DAYS_7 = "7d"
    DAYS_30 = "30d"
    DAYS_90 = "90d"

    @property
    def days(self) -> Optional[int]:
        return _UPDATED_SINCE_DAYS[self]

    @property
    def threshold(self) -> Optional[timedelta]:
        days = self.days
        return None if days is None else timedelta(days=days)

    @classmethod
    def parse(cls, value: Union[str, "UpdatedSince"]) -> "UpdatedSince":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.value == value:
                    return member
        raise InvalidFilterValueError(f"Unknown updated-since filter: {value!r}")


_UPDATED_SINCE_DAYS = {
    UpdatedSince.ANY: None,
    UpdatedSince.DAYS_7: 7,
    UpdatedSince.DAYS_30: 30,
    UpdatedSince.DAYS_90: 90,
}


@dataclass(frozen=True)
class Project:
    id: str
    name: str
    summary: str
    category: str
    owner: str
    status: ProjectStatus
    updated_at: datetime
    description: str = ""
    tags: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def search_text(self) -> str:
        """Haystack used by the free-text search."""
        return f"{self.name} {self.summary} {' '.join(self.tags)}"
