"""Field set construction for node types.

Three sources contribute fields to a type, merged with fixed precedence
(later sources override same-named fields from earlier ones):

1. default fields: identity and hierarchy, present on every type
2. inferred fields: structure sampled from the type's nodes
3. plugin fields: contributed by extensions for the type
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from nodeschema.core.enums import FieldKind
from nodeschema.core.nodes import Node
from .models import FieldDescriptor, FieldMap, TypeDescriptor

StructureInferencer = Callable[..., FieldMap]


def default_node_fields() -> FieldMap:
    """Return the identity and hierarchy fields every node type carries."""
    return {
        "id": FieldDescriptor(
            kind=FieldKind.ID,
            non_null=True,
            description="The id of this node.",
        ),
        "type": FieldDescriptor(
            kind=FieldKind.STRING,
            description="The type of this node",
        ),
        "parent": FieldDescriptor(
            kind=FieldKind.NODE,
            description="The parent of this node.",
        ),
        "children": FieldDescriptor(
            kind=FieldKind.LIST,
            of_kind=FieldKind.NODE,
            description="The children of this node.",
        ),
    }


def merge_fields(*sources: Optional[FieldMap]) -> FieldMap:
    """Shallow-merge field maps; later maps win on name collisions."""
    merged: FieldMap = {}
    for source in sources:
        if source:
            merged.update(source)
    return merged


def create_node_fields(
    node_type: TypeDescriptor,
    types: Sequence[TypeDescriptor],
    all_nodes: Sequence[Node],
    infer: StructureInferencer,
) -> FieldMap:
    """Build the merged field set of a node type.

    Args:
        node_type: Descriptor whose fields are built; its ``fields_from_plugins``
            must already be set.
        types: Descriptors registered so far, used for cross-type link hints.
        all_nodes: Every node of the build pass.
        infer: Structural inferencer called as
            ``infer(nodes=..., types=..., all_nodes=...)``.

    Returns:
        Field map with precedence plugin > inferred > default.
    """
    inferred_fields = infer(nodes=node_type.nodes, types=list(types), all_nodes=all_nodes)
    return merge_fields(default_node_fields(), inferred_fields, node_type.fields_from_plugins)


__all__ = ["default_node_fields", "merge_fields", "create_node_fields"]
