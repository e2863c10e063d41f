"""Filter-argument inference for a type's singular lookup field."""

from __future__ import annotations

from typing import Dict, Sequence

from nodeschema.core.config import RESERVED_ATTRIBUTES, get_operators
from nodeschema.core.enums import FieldKind
from nodeschema.core.nodes import Node
from nodeschema.schema.models import ArgumentDescriptor, FieldMap
from ._common import node_records
from .structure import infer_fields_from_records


def _join(prefix: str, name: str) -> str:
    return f"{prefix}.{name}" if prefix else name


def _arguments_from_fields(fields: FieldMap, prefix: str) -> Dict[str, ArgumentDescriptor]:
    args: Dict[str, ArgumentDescriptor] = {}
    for name, descriptor in fields.items():
        path = _join(prefix, name)
        if descriptor.kind == FieldKind.OBJECT or (
            descriptor.kind == FieldKind.LIST and descriptor.of_kind == FieldKind.OBJECT
        ):
            nested = _arguments_from_fields(descriptor.fields or {}, path)
            if nested:
                args[name] = ArgumentDescriptor(name=path, kind=FieldKind.OBJECT, fields=nested)
            continue

        # list fields filter on their items
        kind = descriptor.of_kind if descriptor.kind == FieldKind.LIST else descriptor.kind
        operators = get_operators(kind)
        if operators:
            args[name] = ArgumentDescriptor(name=path, kind=kind, operators=operators)
    return args


def infer_input_arguments(
    nodes: Sequence[Node], prefix: str = "", type_name: str = ""
) -> Dict[str, ArgumentDescriptor]:
    """Infer the filter arguments accepted by a node type's lookup field.

    Args:
        nodes: Nodes of the type.
        prefix: Dotted path prepended to every argument name.
        type_name: Type tag of the nodes (kept for inferencer compatibility).

    Returns:
        Mapping of field name to ArgumentDescriptor. ``id`` and ``type`` are
        always present; OBJECT fields nest their own arguments.

    Examples:
        >>> args = infer_input_arguments(nodes, "", "Person")
        >>> args["id"].operators
        ('eq', 'ne', 'in', 'nin', 'regex', 'glob')
    """
    args: Dict[str, ArgumentDescriptor] = {
        "id": ArgumentDescriptor(
            name=_join(prefix, "id"), kind=FieldKind.ID, operators=get_operators(FieldKind.ID)
        ),
        "type": ArgumentDescriptor(
            name=_join(prefix, "type"),
            kind=FieldKind.STRING,
            operators=get_operators(FieldKind.STRING),
        ),
    }
    fields = infer_fields_from_records(node_records(nodes, exclude=RESERVED_ATTRIBUTES))
    args.update(_arguments_from_fields(fields, prefix))
    return args


__all__ = ["infer_input_arguments"]
