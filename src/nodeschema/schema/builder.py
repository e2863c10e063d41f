"""Node type construction and registry assembly.

This module orchestrates schema construction:
- build_node_type(): builds the descriptor of one type tag
- build_node_types(): groups all nodes and builds every type concurrently
- build_node_types_sync(): blocking wrapper for scripts and the CLI

Each type is built in its own task. The registry is only assembled after
every task has finished; a failing plugin call fails the whole pass and no
registry is returned.

Usage:
    >>> from nodeschema.core.nodes import load_nodes
    >>> registry = build_node_types_sync(load_nodes(Path("nodes.json")))
    >>> registry["markdownRemark"].node.resolve({"id": {"eq": "post-1"}})
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Sequence

from nodeschema.core.nodes import Node, NodeCollection
from nodeschema.core.site import SiteConfig
from nodeschema.core.utils import camel_case
from nodeschema.inference.input_fields import infer_input_arguments
from nodeschema.inference.structure import infer_object_structure
from nodeschema.plugins.runner import PluginRunner, merge_plugin_fields
from nodeschema.query.sift import run_sift
from .fields import StructureInferencer, create_node_fields
from .grouping import group_nodes
from .models import (
    ArgumentDescriptor,
    FieldMap,
    ObjectTypeDefinition,
    SingularField,
    TypeDescriptor,
    TypeField,
    TypeRegistry,
)
from .resolver import ResolveContext, resolve_reference

logger = logging.getLogger(__name__)

Extender = Callable[[TypeDescriptor, Sequence[Node]], Awaitable[List[FieldMap]]]
InputInferencer = Callable[[Sequence[Node], str, str], Dict[str, ArgumentDescriptor]]
NodeFilter = Callable[[Dict[str, Any], Sequence[Node]], List[Node]]


async def build_node_type(
    type_name: str,
    nodes: List[Node],
    *,
    all_nodes: NodeCollection,
    processed_types: Dict[str, TypeDescriptor],
    extend: Extender,
    infer_structure: StructureInferencer = infer_object_structure,
    infer_input: InputInferencer = infer_input_arguments,
    sift: NodeFilter = run_sift,
) -> TypeDescriptor:
    """Build the descriptor of one node type.

    Args:
        type_name: Type tag shared by ``nodes``.
        nodes: Nodes of the type.
        all_nodes: Every node of the build pass.
        processed_types: Registry under construction; read lazily when the
            type's fields are computed, so it may still be incomplete here.
        extend: Plugin hook returning the field maps contributed for the type.
        infer_structure: Structural inferencer for the lazy field set.
        infer_input: Filter-argument inferencer for the lookup field.
        sift: Filter engine backing the lookup field.

    Returns:
        TypeDescriptor with object type, lookup field and cross-reference field.
    """
    node_type = TypeDescriptor(name=type_name, nodes=nodes)

    fields_from_plugins = await extend(node_type, all_nodes)
    node_type.fields_from_plugins = merge_plugin_fields(fields_from_plugins)

    input_args = infer_input(nodes, "", type_name)

    node_type.object_type = ObjectTypeDefinition(
        name=type_name,
        description=f"Node of type {type_name}",
        fields_thunk=lambda: create_node_fields(
            node_type, list(processed_types.values()), all_nodes, infer_structure
        ),
    )

    def resolve_node(args: Dict[str, Any]) -> Optional[Node]:
        matches = sift(args, nodes)
        return matches[0] if matches else None

    node_type.node = SingularField(
        name=type_name,
        type=node_type.object_type,
        args=dict(input_args),
        resolver=resolve_node,
    )
    node_type.field = TypeField(
        name=camel_case(f"{type_name} field"),
        type=node_type.object_type,
        resolver=resolve_reference,
    )
    return node_type


def _check_unique_names(type_names: Iterable[str]) -> None:
    seen: Dict[str, str] = {}
    for type_name in type_names:
        key = camel_case(type_name)
        if key in seen:
            raise ValueError(
                f"Node types '{seen[key]}' and '{type_name}' both normalize to '{key}'"
            )
        seen[key] = type_name


async def build_node_types(
    nodes: Iterable[Node],
    *,
    plugins: Iterable[object] = (),
    extend: Optional[Extender] = None,
    config: Optional[SiteConfig] = None,
    infer_structure: StructureInferencer = infer_object_structure,
    infer_input: InputInferencer = infer_input_arguments,
    sift: NodeFilter = run_sift,
) -> TypeRegistry:
    """Group nodes by type and build a descriptor for every type concurrently.

    Args:
        nodes: Every node of the build pass (a NodeCollection or any iterable).
        plugins: Plugins implementing ``extend_node_type``; ignored when
            ``extend`` is given.
        extend: Custom plugin hook ``(node_type, all_nodes) -> [field maps]``.
        config: Site configuration handed to field resolvers.
        infer_structure: Structural inferencer.
        infer_input: Filter-argument inferencer.
        sift: Filter engine for singular lookup fields.

    Returns:
        Completed TypeRegistry keyed by camel-cased type name.

    Raises:
        PluginExtensionError: If extending any type fails (from PluginRunner).
        ValueError: If two type tags normalize to the same name.
    """
    all_nodes = nodes if isinstance(nodes, NodeCollection) else NodeCollection(nodes)
    groups = group_nodes(all_nodes)
    _check_unique_names(groups)

    if extend is None:
        extend = PluginRunner(plugins).run

    processed_types: Dict[str, TypeDescriptor] = {}

    async def build(type_name: str, group: List[Node]) -> None:
        descriptor = await build_node_type(
            type_name,
            group,
            all_nodes=all_nodes,
            processed_types=processed_types,
            extend=extend,
            infer_structure=infer_structure,
            infer_input=infer_input,
            sift=sift,
        )
        processed_types[descriptor.camel_name] = descriptor
        logger.debug("Built node type %s (%d nodes)", type_name, len(group))

    await asyncio.gather(*(build(type_name, group) for type_name, group in groups.items()))

    logger.info("Built %d node types from %d nodes", len(processed_types), len(all_nodes))
    return TypeRegistry(
        processed_types, ResolveContext(nodes=all_nodes, config=config or SiteConfig())
    )


def build_node_types_sync(nodes: Iterable[Node], **kwargs: Any) -> TypeRegistry:
    """Run :func:`build_node_types` to completion in a fresh event loop."""
    return asyncio.run(build_node_types(nodes, **kwargs))


__all__ = ["build_node_type", "build_node_types", "build_node_types_sync"]
