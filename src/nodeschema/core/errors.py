"""Exception types raised while loading nodes and building node types."""

from __future__ import annotations


class NodeSchemaError(Exception):
    """Base class for all errors raised by the package."""


class NodeLoadError(NodeSchemaError, ValueError):
    """A raw node record is malformed (e.g. missing ``id`` or ``type``)."""


class PluginExtensionError(NodeSchemaError):
    """A plugin failed while extending a node type.

    Attributes:
        type_name: Type tag whose extension failed.
    """

    def __init__(self, type_name: str, message: str) -> None:
        super().__init__(f"Failed to extend node type '{type_name}': {message}")
        self.type_name = type_name


__all__ = ["NodeSchemaError", "NodeLoadError", "PluginExtensionError"]
