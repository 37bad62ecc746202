"""Custom exception hierarchy for the project browser."""

from __future__ import annotations


class ProjectBrowserError(Exception):
    """Base class for all custom errors raised by the project browser."""


# --- 3-layer hierarchy ---

class DomainError(ProjectBrowserError):
    """Base class for domain-level errors."""


class InfrastructureError(ProjectBrowserError):
    """Base class for infrastructure-level errors."""


class ApplicationError(ProjectBrowserError):
    """Base class for application-level errors."""


# --- Domain errors ---

class InvalidFilterValueError(DomainError, ValueError):
    """Raised when a filter or query value is rejected at a setter boundary."""


class ProjectNotFoundError(DomainError):
    """Raised when the requested project cannot be located."""


# --- Infrastructure errors ---

class TransientFetchError(InfrastructureError):
    """Raised when a page fetch fails; callers may retry with a fresh fetch."""


class DataLoadError(InfrastructureError):
    """Raised when a backing collection cannot be read from disk."""


# --- Settings ---

class SettingsError(ProjectBrowserError):
    """Base class for settings related failures."""


class SettingsLoadError(SettingsError):
    """Raised when the settings file cannot be parsed or loaded."""


class SettingsValidationError(SettingsError):
    """Raised when settings data fails schema validation."""


__all__ = [
    "ApplicationError",
    "DataLoadError",
    "DomainError",
    "InfrastructureError",
    "InvalidFilterValueError",
    "ProjectBrowserError",
    "ProjectNotFoundError",
    "SettingsError",
    "SettingsLoadError",
    "SettingsValidationError",
    "TransientFetchError",
]
