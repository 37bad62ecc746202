import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from project_browser.application.services.query_executor import QueryExecutor  # noqa: E402
from project_browser.infrastructure.repositories.memory_project_repository import (  # noqa: E402
    InMemoryProjectRepository,
)

# Fixed instant shared by the mock data and the executor clock so that
# updated-since filters are deterministic.
NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def repository() -> InMemoryProjectRepository:
    return InMemoryProjectRepository.generate(today=NOW)


@pytest.fixture
def executor(repository: InMemoryProjectRepository) -> QueryExecutor:
    return QueryExecutor(repository, delay_ms=0, clock=lambda: NOW)
