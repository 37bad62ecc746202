"""Default configuration values for the project browser."""

from __future__ import annotations

from typing import Final

# ---------------------------------------------------------------------------
# Data source defaults
# ---------------------------------------------------------------------------

# The mock backing collection mirrors a small team portfolio.  Records are
# generated deterministically from their index so that searches such as
# "Project 1" always produce the same result set.
TOTAL_PROJECTS: Final[int] = 200

# Artificial latency applied by the in-memory query executor to simulate a
# network round trip.  Zero disables the delay entirely.
NETWORK_DELAY_MS: Final[int] = 150

DEFAULT_PAGE_SIZE: Final[int] = 24

# Upper bound for the optional filtered-result memo held by the executor.
QUERY_CACHE_SIZE: Final[int] = 32

# ---------------------------------------------------------------------------
# Vocabularies
# ---------------------------------------------------------------------------

PROJECT_CATEGORIES: Final[tuple[str, ...]] = (
    "Web",
    "Mobile",
    "Infrastructure",
    "Machine Learning",
    "Internal Tools",
)
PROJECT_TAGS: Final[tuple[str, ...]] = (
    "priority",
    "refactor",
    "launch",
    "design",
    "research",
    "observability",
    "growth",
    "migration",
)
PROJECT_OWNERS: Final[tuple[str, ...]] = (
    "Avery",
    "Jordan",
    "Kai",
    "Morgan",
    "River",
    "Skyler",
    "Tatum",
    "Zion",
)

# ---------------------------------------------------------------------------
# Virtual list constants
# ---------------------------------------------------------------------------

ESTIMATED_ROW_HEIGHT: Final[int] = 168
OVERSCAN_ROWS: Final[int] = 8
DEFAULT_VIEWPORT_HEIGHT: Final[int] = 680

SENTINEL_LOADING_TEXT: Final[str] = "Loading more projects…"
SENTINEL_END_TEXT: Final[str] = "You’ve reached the end."
