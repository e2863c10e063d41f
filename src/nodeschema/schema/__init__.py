"""Schema construction for node types.

This package turns grouped nodes into typed descriptors:

- **Models**: FieldDescriptor, TypeDescriptor, TypeRegistry and friends
- **Grouping**: group_nodes() partitions nodes by type tag
- **Fields**: default fields and the plugin > inferred > default merge
- **Resolver**: decide_reference() / resolve_reference() follow soft links
- **Builder**: build_node_types() (see schema/builder.py) assembles the registry

Usage:
    >>> from nodeschema.schema.builder import build_node_types_sync
    >>> registry = build_node_types_sync(nodes)
    >>> registry["person"].fields["name"].kind
    <FieldKind.STRING: 'String'>
"""

from __future__ import annotations

from .fields import create_node_fields, default_node_fields, merge_fields
from .grouping import group_nodes
from .models import (
    NODE_INTERFACE,
    ArgumentDescriptor,
    FieldDescriptor,
    NodeInterface,
    ObjectTypeDefinition,
    SingularField,
    TypeDescriptor,
    TypeField,
    TypeRegistry,
)
from .resolver import Resolution, ResolveContext, decide_reference, resolve_reference

__all__ = [
    # Data models
    "ArgumentDescriptor",
    "FieldDescriptor",
    "NodeInterface",
    "NODE_INTERFACE",
    "ObjectTypeDefinition",
    "SingularField",
    "TypeDescriptor",
    "TypeField",
    "TypeRegistry",
    # Construction
    "group_nodes",
    "default_node_fields",
    "merge_fields",
    "create_node_fields",
    # Resolution
    "ResolveContext",
    "Resolution",
    "decide_reference",
    "resolve_reference",
]
