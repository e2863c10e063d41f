"""Structural field inference over a sample of nodes.

The fields of a node type are not declared anywhere; they are read off the
nodes themselves. A sample of the type's nodes is loaded into a pandas
DataFrame and every column is classified. Fields that link to other node
types (``base___Target`` names, or string values naming files) are turned
into NODE fields resolved through the target type's cross-reference field.
Keys of nested objects never link: they keep their scalar kind.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from nodeschema.core.config import FILE_TYPE, INFERENCE_SAMPLE_SIZE, RESERVED_ATTRIBUTES
from nodeschema.core.enums import FieldKind
from nodeschema.core.nodes import Node
from nodeschema.core.utils import capitalize, is_file_link, split_type_suffix
from nodeschema.schema.models import FieldDescriptor, FieldMap, TypeDescriptor
from ._common import (
    classify_scalars,
    container_kind,
    flatten_items,
    node_records,
    present_values,
    sample_frame,
)

logger = logging.getLogger(__name__)


def _find_type(types: Sequence[TypeDescriptor], type_name: str) -> Optional[TypeDescriptor]:
    for descriptor in types:
        if descriptor.name == type_name:
            return descriptor
    return None


def _link_field(
    name: str, values: pd.Series, types: Sequence[TypeDescriptor]
) -> Optional[FieldDescriptor]:
    """Return a NODE field if the column links to a registered type."""
    suffix = split_type_suffix(name)
    if suffix is not None:
        target = _find_type(types, capitalize(suffix))
        if target is not None and target.field is not None:
            return FieldDescriptor(
                kind=FieldKind.NODE,
                target_type=target.name,
                description=f"Link to a {target.name} node.",
                resolver=target.field.resolve,
            )
        logger.debug("Field '%s' names type %s which has no nodes", name, capitalize(suffix))
        return None

    if is_file_link(values.iloc[0]):
        files = _find_type(types, FILE_TYPE)
        if files is not None and files.field is not None:
            return FieldDescriptor(
                kind=FieldKind.NODE,
                target_type=FILE_TYPE,
                description="Link to a File node.",
                resolver=files.field.resolve,
            )
    return None


def _infer_column(
    name: str, values: pd.Series, types: Sequence[TypeDescriptor]
) -> Optional[FieldDescriptor]:
    kind = container_kind(values)

    # resolvers read fields off the node itself, so only top-level columns link
    if kind == FieldKind.OBJECT:
        nested = infer_fields_from_records(list(values))
        return FieldDescriptor(kind=FieldKind.OBJECT, fields=nested)

    if kind == FieldKind.LIST:
        items = flatten_items(values)
        if items.empty:
            return None
        item_kind = container_kind(items)
        if item_kind == FieldKind.OBJECT:
            nested = infer_fields_from_records(list(items))
            return FieldDescriptor(
                kind=FieldKind.LIST, of_kind=FieldKind.OBJECT, fields=nested
            )
        if item_kind is not None:
            return FieldDescriptor(kind=FieldKind.LIST, of_kind=FieldKind.JSON)
        return FieldDescriptor(kind=FieldKind.LIST, of_kind=classify_scalars(items))

    if kind == FieldKind.JSON:
        return FieldDescriptor(kind=FieldKind.JSON)

    scalar_kind = classify_scalars(values)
    if scalar_kind == FieldKind.STRING or split_type_suffix(name) is not None:
        link = _link_field(name, values, types)
        if link is not None:
            return link
    return FieldDescriptor(kind=scalar_kind)


def infer_fields_from_records(
    records: Sequence[Dict[str, Any]],
    types: Sequence[TypeDescriptor] = (),
    sample_size: int = INFERENCE_SAMPLE_SIZE,
) -> FieldMap:
    """Infer a field map from plain attribute records.

    Args:
        records: Attribute dicts (one per node or nested object).
        types: Registered node types, used to recognize links.
        sample_size: Maximum number of records sampled.

    Returns:
        Field map in first-seen column order; columns with no values are skipped.
    """
    frame = sample_frame(records, sample_size)
    fields: FieldMap = {}
    for name in frame.columns:
        values = present_values(frame[name])
        if values.empty:
            continue
        descriptor = _infer_column(str(name), values, types)
        if descriptor is not None:
            fields[str(name)] = descriptor
    return fields


def infer_object_structure(
    nodes: Sequence[Node],
    types: Sequence[TypeDescriptor] = (),
    all_nodes: Sequence[Node] = (),
    sample_size: int = INFERENCE_SAMPLE_SIZE,
) -> FieldMap:
    """Infer the structural fields of a node type from its nodes.

    Args:
        nodes: Nodes of the type.
        types: Other node types registered in the same build pass.
        all_nodes: Every node of the build pass (unused by the default
            inferencer, part of the inferencer signature).
        sample_size: Maximum number of nodes sampled.

    Returns:
        Field map excluding identity and hierarchy attributes.

    Examples:
        >>> nodes = [Node.from_dict({"id": "a", "type": "Post", "title": "Hi"})]
        >>> infer_object_structure(nodes)["title"].kind
        <FieldKind.STRING: 'String'>
    """
    records: List[Dict[str, Any]] = node_records(nodes, exclude=RESERVED_ATTRIBUTES)
    fields = infer_fields_from_records(records, types, sample_size)
    logger.debug("Inferred %d fields from %d nodes", len(fields), min(len(nodes), sample_size))
    return fields


__all__ = ["infer_object_structure", "infer_fields_from_records"]
