"""Headless widgets used by the project list views."""

from .virtual_list import EMPTY_RANGE, RowKind, VirtualRange, VirtualRow, VirtualRowList

__all__ = ["EMPTY_RANGE", "RowKind", "VirtualRange", "VirtualRow", "VirtualRowList"]
