"""Application-wide context wiring the list components together."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - only for type checking
    from .application.services.query_executor import QueryExecutor
    from .errors.handler import ErrorHandler
    from .events.bus import EventBus
    from .gui.ui.widgets.virtual_list import VirtualRowList
    from .gui.viewmodels.project_list_viewmodel import ProjectListViewModel
    from .infrastructure.repositories.memory_project_repository import InMemoryProjectRepository
    from .settings.manager import SettingsManager

LOGGER = logging.getLogger(__name__)


def _create_settings_manager() -> "SettingsManager":
    from .settings.manager import SettingsManager

    manager = SettingsManager()
    manager.load()
    return manager


def _create_event_bus() -> "EventBus":
    from .events.bus import EventBus

    return EventBus(logging.getLogger("project_browser.events"))


@dataclass
class AppContext:
    """Container object shared by the CLI and GUI front ends.

    ``repository`` defaults to the JSON file named by the ``data.source_path``
    setting, or to the generated mock portfolio when none is configured.
    ``delay_ms`` overrides the configured network delay.
    """

    settings: "SettingsManager" = field(default_factory=_create_settings_manager)
    event_bus: "EventBus" = field(default_factory=_create_event_bus)
    repository: Optional["InMemoryProjectRepository"] = None
    delay_ms: Optional[int] = None
    executor: "QueryExecutor" = field(init=False)
    error_handler: "ErrorHandler" = field(init=False)
    viewmodel: "ProjectListViewModel" = field(init=False)

    def __post_init__(self) -> None:
        from .application.services.query_executor import QueryExecutor
        from .domain.models import ProjectQuery
        from .errors.handler import ErrorHandler
        from .gui.viewmodels.project_list_viewmodel import ProjectListViewModel

        if self.repository is None:
            self.repository = _load_repository(self.settings.source_path)
        delay = self.settings.network_delay_ms if self.delay_ms is None else self.delay_ms
        self.executor = QueryExecutor(
            self.repository,
            delay_ms=delay,
            cache_size=self.settings.query_cache_size,
        )
        self.error_handler = ErrorHandler(logging.getLogger("project_browser"), self.event_bus)
        self.viewmodel = ProjectListViewModel(
            self.executor,
            query=ProjectQuery(page_size=self.settings.page_size),
            event_bus=self.event_bus,
        )
        self.error_handler.bind_viewmodel(self.viewmodel)

    def create_virtual_list(self) -> "VirtualRowList":
        """Return a virtual list configured from settings and bound to the view-model."""

        from .gui.ui.widgets.virtual_list import VirtualRowList

        virtual_list = VirtualRowList(
            estimated_row_height=self.settings.row_height,
            overscan=self.settings.overscan,
        )
        virtual_list.bind_viewmodel(self.viewmodel)
        return virtual_list

    def shutdown(self) -> None:
        self.viewmodel.dispose()
        self.event_bus.shutdown()


def _load_repository(source_path: Optional[Path]) -> "InMemoryProjectRepository":
    from .infrastructure.repositories.memory_project_repository import InMemoryProjectRepository

    if source_path is not None:
        LOGGER.info("Loading projects from %s", source_path)
        return InMemoryProjectRepository.from_json(source_path)
    return InMemoryProjectRepository.generate()
