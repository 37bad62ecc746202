from .core import STATUS_ALL, Project, ProjectStatus, UpdatedSince
from .page import PageResult
from .query import ProjectFilters, ProjectQuery, normalize_selection

__all__ = [
    "PageResult",
    "Project",
    "ProjectFilters",
    "ProjectQuery",
    "ProjectStatus",
    "STATUS_ALL",
    "UpdatedSince",
    "normalize_selection",
]
