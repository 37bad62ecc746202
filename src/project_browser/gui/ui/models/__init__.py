"""Expose Qt models used by the GUI."""

from .project_list_model import ProjectListModel
from .roles import Roles, role_names

__all__ = ["ProjectListModel", "Roles", "role_names"]
