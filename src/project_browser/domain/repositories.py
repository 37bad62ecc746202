from abc import ABC, abstractmethod
from typing import Optional, Protocol, Sequence, runtime_checkable

from .models import PageResult, Project, ProjectFilters


@runtime_checkable
class ProjectSource(Protocol):
    """Asynchronous page provider consumed by the list view-model."""

    async def fetch(
        self,
        page: int,
        page_size: int,
        search: str,
        filters: ProjectFilters,
    ) -> PageResult: ...


@runtime_checkable
class ProjectLookup(Protocol):
    def find_by_id(self, project_id: str) -> Optional[Project]: ...


class IProjectRepository(ABC):
    @abstractmethod
    def all(self) -> Sequence[Project]:
        """Return the backing collection in source order"""
        pass

    @abstractmethod
    def find_by_id(self, project_id: str) -> Optional[Project]:
        """Find a single project by ID"""
        pass

    @abstractmethod
    def get(self, project_id: str) -> Project:
        """Return the project or raise ProjectNotFoundError"""
        pass

    @property
    @abstractmethod
    def version(self) -> int:
        """Counter bumped whenever the collection changes"""
        pass
