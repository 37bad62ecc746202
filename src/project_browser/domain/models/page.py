"""Result of fetching a single page of projects."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from project_browser.config import DEFAULT_PAGE_SIZE

from .core import Project


@dataclass(frozen=True)
class PageResult:
    items: Tuple[Project, ...] = field(default_factory=tuple)
    page: int = 0
    page_size: int = DEFAULT_PAGE_SIZE
    total_count: int = 0

    @property
    def has_more(self) -> bool:
        """True when rows exist beyond the end of this page."""
        return (self.page + 1) * self.page_size < self.total_count

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0 or self.total_count <= 0:
            return 0
        return (self.total_count + self.page_size - 1) // self.page_size
