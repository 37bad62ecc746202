"""Predicate pipeline deciding whether a project belongs to a result set.

Each sub-predicate is a pure function of the project and one filter field so
they can be tested in isolation.  :func:`matches` combines all five with a
logical AND.  Category and owner selections are OR-matched (the project's
single value must be one of the selected values) whereas the tag selection
is AND-matched (the project must carry every selected tag).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Optional

from .models import Project, ProjectFilters, ProjectStatus, UpdatedSince


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def normalize_search(search: str) -> str:
    return search.strip().casefold()


def matches_search(project: Project, search: str) -> bool:
    needle = normalize_search(search)
    if not needle:
        return True
    return needle in project.search_text.casefold()


def matches_status(project: Project, status: Optional[ProjectStatus]) -> bool:
    return status is None or project.status == status


def matches_category(project: Project, categories: Iterable[str]) -> bool:
    return not categories or project.category in categories


def matches_owner(project: Project, owners: Iterable[str]) -> bool:
    return not owners or project.owner in owners


def matches_tags(project: Project, tags: Iterable[str]) -> bool:
    if not tags:
        return True
    present = set(project.tags)
    return all(tag in present for tag in tags)


def matches_updated_since(project: Project, updated_since: UpdatedSince, now: datetime) -> bool:
    threshold = updated_since.threshold
    if threshold is None:
        return True
    return _as_utc(now) - _as_utc(project.updated_at) <= threshold


def matches(
    project: Project,
    search: str,
    filters: ProjectFilters,
    now: Optional[datetime] = None,
) -> bool:
    """Return True when *project* satisfies the search and every filter."""
    if now is None:
        now = utc_now()
    return (
        matches_search(project, search)
        and matches_status(project, filters.status)
        and matches_category(project, filters.categories)
        and matches_owner(project, filters.owners)
        and matches_tags(project, filters.tags)
        and matches_updated_since(project, filters.updated_since, now)
    )


def filter_projects(
    projects: Iterable[Project],
    search: str,
    filters: ProjectFilters,
    now: Optional[datetime] = None,
) -> List[Project]:
    """Apply :func:`matches` to *projects*, keeping source order.

    ``now`` is sampled once so every record of a single query is judged
    against the same instant.
    """
    if now is None:
        now = utc_now()
    return [project for project in projects if matches(project, search, filters, now)]
