"""In-memory project collection used as the list's backing data source."""

import logging
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from dateutil import parser as date_parser

from project_browser.config import (
    PROJECT_CATEGORIES,
    PROJECT_OWNERS,
    PROJECT_TAGS,
    TOTAL_PROJECTS,
)
from project_browser.domain.models import Project, ProjectStatus
from project_browser.domain.repositories import IProjectRepository
from project_browser.errors import DataLoadError, ProjectNotFoundError
from project_browser.utils.jsonio import read_json

_logger = logging.getLogger(__name__)

_STATUS_CYCLE = tuple(ProjectStatus)


def generate_projects(count: int = TOTAL_PROJECTS, today: Optional[datetime] = None) -> List[Project]:
    """Build *count* deterministic mock projects.

    Status, category and owner cycle with the index; tag ``t`` is attached
    when ``(t + index) % 3 == 0``; each project is one day older than the
    previous one.
    """
    today = today or datetime.now(timezone.utc)
    projects: List[Project] = []
    for index in range(count):
        status = _STATUS_CYCLE[index % len(_STATUS_CYCLE)]
        category = PROJECT_CATEGORIES[index % len(PROJECT_CATEGORIES)]
        owner = PROJECT_OWNERS[index % len(PROJECT_OWNERS)]
        name = f"Project {index + 1}"
        description = " ".join([
            f"{name} focuses on delivering incremental value for our {category.lower()} roadmap.",
            f"Led by {owner}, the team is ensuring smooth collaboration across stakeholders.",
            f"Current status: {status.value.upper()}.",
        ])
        projects.append(Project(
            id=str(index + 1),
            name=name,
            summary=f"Deliver the next milestone for {category.lower()} initiatives.",
            description=description,
            category=category,
            owner=owner,
            status=status,
            tags=tuple(
                tag for tag_index, tag in enumerate(PROJECT_TAGS)
                if (tag_index + index) % 3 == 0
            ),
            updated_at=today - timedelta(days=index),
        ))
    return projects


def _parse_tags(value) -> Tuple[str, ...]:
    if not isinstance(value, (list, tuple)) or not all(isinstance(tag, str) for tag in value):
        raise TypeError(f"tags must be a list of strings, got {value!r}")
    return tuple(value)


def _project_from_row(row: Dict) -> Project:
    try:
        updated_at = date_parser.isoparse(row["updatedAt"])
        if updated_at.tzinfo is None:
            updated_at = updated_at.replace(tzinfo=timezone.utc)
        return Project(
            id=str(row["id"]),
            name=row["name"],
            summary=row.get("summary", ""),
            description=row.get("description", ""),
            category=row["category"],
            owner=row["owner"],
            status=ProjectStatus(row["status"]),
            tags=_parse_tags(row.get("tags", ())),
            updated_at=updated_at,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise DataLoadError(f"Malformed project record: {row!r}") from exc


class InMemoryProjectRepository(IProjectRepository):
    """Immutable-record collection with a version counter.

    Records are never mutated; :meth:`replace_all` swaps the whole tuple and
    bumps :attr:`version` so memoized query results keyed on the old
    snapshot are no longer used.
    """

    def __init__(self, projects: Iterable[Project] = ()):
        self._lock = threading.Lock()
        self._projects: Tuple[Project, ...] = ()
        self._by_id: Dict[str, Project] = {}
        self._version = 0
        self.replace_all(projects)

    @classmethod
    def generate(cls, count: int = TOTAL_PROJECTS, today: Optional[datetime] = None) -> "InMemoryProjectRepository":
        return cls(generate_projects(count, today))

    @classmethod
    def from_json(cls, path: Path) -> "InMemoryProjectRepository":
        payload = read_json(path)
        rows = payload.get("projects") if isinstance(payload, dict) else payload
        if not isinstance(rows, list):
            raise DataLoadError(f"Expected a list of projects in {path}")
        repo = cls(_project_from_row(row) for row in rows)
        _logger.info("Loaded %d projects from %s", len(rows), path)
        return repo

    def replace_all(self, projects: Iterable[Project]) -> None:
        snapshot = tuple(projects)
        by_id = {project.id: project for project in snapshot}
        with self._lock:
            self._projects = snapshot
            self._by_id = by_id
            self._version += 1

    def all(self) -> Sequence[Project]:
        return self._projects

    def snapshot(self) -> Tuple[int, Tuple[Project, ...]]:
        """Return the version and records captured together."""
        with self._lock:
            return self._version, self._projects

    def find_by_id(self, project_id: str) -> Optional[Project]:
        return self._by_id.get(project_id)

    def get(self, project_id: str) -> Project:
        project = self.find_by_id(project_id)
        if project is None:
            raise ProjectNotFoundError(f"Project not found: {project_id}")
        return project

    @property
    def version(self) -> int:
        return self._version

    def __len__(self) -> int:
        return len(self._projects)
