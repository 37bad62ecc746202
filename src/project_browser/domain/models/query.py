from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Iterable, List, Optional, Union

from project_browser.config import DEFAULT_PAGE_SIZE
from project_browser.errors import InvalidFilterValueError

from .core import STATUS_ALL, ProjectStatus, UpdatedSince


def normalize_selection(values: Iterable[str], label: str) -> FrozenSet[str]:
    """Coerce *values* into a frozenset of strings, rejecting anything else."""
    if isinstance(values, str):
        # A bare string would otherwise be split into characters
        raise InvalidFilterValueError(f"{label} filter expects a collection of strings, got {values!r}")
    try:
        selection = frozenset(values)
    except TypeError as exc:
        raise InvalidFilterValueError(f"{label} filter expects a collection of strings") from exc
    for value in selection:
        if not isinstance(value, str):
            raise InvalidFilterValueError(f"{label} filter values must be strings, got {value!r}")
    return selection


@dataclass(frozen=True)
class ProjectFilters:
    """Filter selection - every field is independent of the others."""

    status: Optional[ProjectStatus] = None
    categories: FrozenSet[str] = field(default_factory=frozenset)
    owners: FrozenSet[str] = field(default_factory=frozenset)
    tags: FrozenSet[str] = field(default_factory=frozenset)
    updated_since: UpdatedSince = UpdatedSince.ANY

    @classmethod
    def create(
        cls,
        status: Union[str, ProjectStatus, None] = None,
        categories: Iterable[str] = (),
        owners: Iterable[str] = (),
        tags: Iterable[str] = (),
        updated_since: Union[str, UpdatedSince] = UpdatedSince.ANY,
    ) -> "ProjectFilters":
        return cls(
            status=ProjectStatus.parse_filter(status),
            categories=normalize_selection(categories, "category"),
            owners=normalize_selection(owners, "owner"),
            tags=normalize_selection(tags, "tag"),
            updated_since=UpdatedSince.parse(updated_since),
        )

    def with_status(self, status: Union[str, ProjectStatus, None]) -> "ProjectFilters":
        return replace(self, status=ProjectStatus.parse_filter(status))

    def with_categories(self, categories: Iterable[str]) -> "ProjectFilters":
        return replace(self, categories=normalize_selection(categories, "category"))

    def with_owners(self, owners: Iterable[str]) -> "ProjectFilters":
        return replace(self, owners=normalize_selection(owners, "owner"))

    def with_tags(self, tags: Iterable[str]) -> "ProjectFilters":
        return replace(self, tags=normalize_selection(tags, "tag"))

    def with_updated_since(self, updated_since: Union[str, UpdatedSince]) -> "ProjectFilters":
        return replace(self, updated_since=UpdatedSince.parse(updated_since))

    @property
    def active_count(self) -> int:
        count = len(self.categories) + len(self.owners) + len(self.tags)
        if self.status is not None:
            count += 1
        if self.updated_since is not UpdatedSince.ANY:
            count += 1
        return count

    @property
    def is_empty(self) -> bool:
        return self.active_count == 0


@dataclass(frozen=True)
class ProjectQuery:
    """Search text, filter selection and page size of the list view."""

    search: str = ""
    filters: ProjectFilters = field(default_factory=ProjectFilters)
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self):
        if not isinstance(self.search, str):
            raise InvalidFilterValueError(f"Search text must be a string, got {self.search!r}")
        if isinstance(self.page_size, bool) or not isinstance(self.page_size, int) or self.page_size <= 0:
            raise InvalidFilterValueError(f"Page size must be a positive integer, got {self.page_size!r}")

    def with_search(self, search: str) -> "ProjectQuery":
        return replace(self, search=search)

    def with_filters(self, filters: ProjectFilters) -> "ProjectQuery":
        return replace(self, filters=filters)

    def with_page_size(self, page_size: int) -> "ProjectQuery":
        return replace(self, page_size=page_size)

    def to_params(self, page: int) -> Dict[str, Union[str, int, List[str]]]:
        """Serialize the query for a remote endpoint's query string.

        Multi-valued filters are emitted as sorted lists so equal queries
        always produce identical URLs.
        """
        params: Dict[str, Union[str, int, List[str]]] = {
            "page": page,
            "pageSize": self.page_size,
        }
        if self.search:
            params["search"] = self.search
        params["status"] = self.filters.status.value if self.filters.status else STATUS_ALL
        if self.filters.categories:
            params["category"] = sorted(self.filters.categories)
        if self.filters.owners:
            params["owner"] = sorted(self.filters.owners)
        if self.filters.tags:
            params["tag"] = sorted(self.filters.tags)
        params["updatedSince"] = self.filters.updated_since.value
        return params
