"""Schema construction constants.

This module centralizes the naming conventions and tunables used while
building node types. Adjust these constants to change how raw nodes are
grouped, sampled and linked.

Conventions:
    - Reserved root tags: structural markers that are not content types
    - Type separator: ``fieldName___TargetType`` encodes a link target
    - File type: the node type that represents files on disk
"""

from __future__ import annotations

from typing import Dict, Tuple

from .enums import FieldKind

# ============================================================================
# NODE CONVENTIONS
# ============================================================================

# Tags marking the root of the node tree rather than content
RESERVED_ROOT_TYPES: Tuple[str, ...] = ("root", "rootDirectory")

# Separator between a field's base name and its target type
TYPE_SEPARATOR = "___"

# Node type representing files on the filesystem
FILE_TYPE = "File"

# Attribute of a File node holding its parent directory
FILE_DIR_ATTRIBUTE = "dir"

# Raw attribute names with a fixed meaning on every node
PATH_ATTRIBUTE = "___path"
SOURCE_NODE_ATTRIBUTE = "_sourceNodeId"
DEFAULT_FIELD_NAMES: Tuple[str, ...] = ("id", "type", "parent", "children")
RESERVED_ATTRIBUTES: Tuple[str, ...] = DEFAULT_FIELD_NAMES + (
    PATH_ATTRIBUTE,
    SOURCE_NODE_ATTRIBUTE,
)

# MIME type assigned to anything not recognized as a concrete file type
GENERIC_MIME_TYPE = "application/octet-stream"


# ============================================================================
# INFERENCE TUNABLES
# ============================================================================

# Maximum number of nodes sampled per type for structural inference
INFERENCE_SAMPLE_SIZE = 500


# ============================================================================
# FILTER OPERATORS
# ============================================================================
# Format: {field_kind: operators accepted by the filter engine}

STRING_OPERATORS: Tuple[str, ...] = ("eq", "ne", "in", "nin", "regex", "glob")
NUMBER_OPERATORS: Tuple[str, ...] = ("eq", "ne", "in", "nin", "gt", "gte", "lt", "lte")
BOOLEAN_OPERATORS: Tuple[str, ...] = ("eq", "ne")

_OPERATOR_MAP: Dict[FieldKind, Tuple[str, ...]] = {
    FieldKind.ID: STRING_OPERATORS,
    FieldKind.STRING: STRING_OPERATORS,
    FieldKind.DATE: STRING_OPERATORS,
    FieldKind.INT: NUMBER_OPERATORS,
    FieldKind.FLOAT: NUMBER_OPERATORS,
    FieldKind.BOOLEAN: BOOLEAN_OPERATORS,
}

ALL_OPERATORS = frozenset(STRING_OPERATORS + NUMBER_OPERATORS)


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def get_operators(kind: FieldKind) -> Tuple[str, ...]:
    """Get the filter operators supported for a field kind.

    Args:
        kind: Value-type classification of the field.

    Returns:
        Tuple of operator names; empty for kinds that cannot be filtered.

    Examples:
        >>> get_operators(FieldKind.BOOLEAN)
        ('eq', 'ne')
        >>> get_operators(FieldKind.JSON)
        ()
    """
    return _OPERATOR_MAP.get(kind, ())


def is_reserved_root(type_name: str) -> bool:
    """Return True if a type tag marks the structural root, not content."""
    return type_name in RESERVED_ROOT_TYPES
