"""Core enumerations used across the package."""

from __future__ import annotations

from enum import Enum


class FieldKind(str, Enum):
    """Value-type classification of a field.

    Values are strings to ease serialization and CLI output.
    """

    ID = "ID"
    STRING = "String"
    INT = "Int"
    FLOAT = "Float"
    BOOLEAN = "Boolean"
    DATE = "Date"
    JSON = "JSON"
    LIST = "List"
    OBJECT = "Object"
    NODE = "Node"


class ResolutionKind(str, Enum):
    """Outcome of resolving one field of one node as a reference."""

    FILE_LINK = "file_link"
    DIRECT_ID = "direct_id"
    PATH_FALLBACK = "path_fallback"
    UNRESOLVED = "unresolved"
    EMPTY = "empty"


__all__ = ["FieldKind", "ResolutionKind"]
