"""Searchable, filterable project list with incremental loading."""

__version__ = "0.1.0"
