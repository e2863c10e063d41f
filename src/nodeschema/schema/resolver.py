"""Reference resolution between nodes.

A field of a node may hold a soft reference to another node. Resolution
tries, in order:

1. File link: a string value naming a concrete file type is resolved
   relative to the directory of the File node the current node was sourced
   from, and matched against File node ids.
2. Typed field name: ``base___Target`` names the target type. The value is
   matched against the ids of nodes of that type and, for File targets, as
   a path relative to the source directory.
3. Empty values resolve to None without lookup.

The outcome of every attempt is an explicit :class:`Resolution` so that each
branch can be inspected on its own; :func:`resolve_reference` reduces it to
the linked node (or None) and logs references that could not be found.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from nodeschema.core.config import FILE_DIR_ATTRIBUTE, FILE_TYPE
from nodeschema.core.enums import ResolutionKind
from nodeschema.core.nodes import Node, NodeCollection
from nodeschema.core.site import SiteConfig
from nodeschema.core.utils import capitalize, is_file_link, resolve_link_path, split_type_suffix

logger = logging.getLogger(__name__)

_LINKED_KINDS = (
    ResolutionKind.FILE_LINK,
    ResolutionKind.DIRECT_ID,
    ResolutionKind.PATH_FALLBACK,
)


@dataclass(frozen=True)
class ResolveContext:
    """Explicit state available to field resolvers at call time.

    Attributes:
        nodes: Every node of the build pass.
        config: Site configuration (link mapping).
    """

    nodes: NodeCollection
    config: SiteConfig = field(default_factory=SiteConfig)


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one field of one node.

    Attributes:
        kind: Which rule produced the outcome.
        node: Linked node for FILE_LINK, DIRECT_ID and PATH_FALLBACK; None otherwise.
        target_type: Target type derived from the field name or config mapping.
        link_path: Absolute path tried for file-based outcomes.
    """

    kind: ResolutionKind
    node: Optional[Node] = None
    target_type: Optional[str] = None
    link_path: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate that only linked outcomes carry a node."""
        if self.kind in _LINKED_KINDS and self.node is None:
            raise ValueError(f"{self.kind.value} resolution requires a node")
        if self.kind not in _LINKED_KINDS and self.node is not None:
            raise ValueError(f"{self.kind.value} resolution must not carry a node")


def _is_empty(value: Any) -> bool:
    if value is None or value is False:
        return True
    # zero and NaN count as absent, like any other falsy scalar
    if isinstance(value, (int, float)) and (value == 0 or value != value):
        return True
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) == 0
    return False


def source_directory(node: Node, context: ResolveContext) -> Optional[str]:
    """Return the directory of the File node ``node`` was sourced from, if known."""
    source = context.nodes.find(FILE_TYPE, node.source_node_id)
    if source is None:
        return None
    directory = source.get(FILE_DIR_ATTRIBUTE)
    return directory if isinstance(directory, str) and directory else None


def linked_type(node: Node, field_name: str, config: SiteConfig) -> Optional[str]:
    """Derive the type a field links to.

    The ``base___Target`` convention wins; otherwise the site config mapping
    is consulted with ``Type.field`` and ``<node path>.field`` selectors.

    Examples:
        >>> linked_type(node, "author___person", SiteConfig())
        'Person'
    """
    suffix = split_type_suffix(field_name)
    if suffix is not None:
        return capitalize(suffix)
    selectors = [f"{node.type}.{field_name}"]
    if node.path:
        selectors.append(f"{node.path}.{field_name}")
    return config.mapped_type(*selectors)


def _find_file(context: ResolveContext, source_dir: Optional[str], value: Any):
    if source_dir is None or not isinstance(value, str):
        return None, None
    link_path = resolve_link_path(source_dir, value)
    return context.nodes.find(FILE_TYPE, link_path), link_path


def decide_reference(node: Node, field_name: str, context: ResolveContext) -> Resolution:
    """Decide whether ``node[field_name]`` links to another node.

    Args:
        node: Node owning the field.
        field_name: Raw name of the field being read.
        context: Node collection and site config of the build pass.

    Returns:
        Resolution describing which rule matched (or that none did).
    """
    value = node.get(field_name)
    if _is_empty(value):
        # empty values never link, so no lookup is made
        return Resolution(
            ResolutionKind.EMPTY, target_type=linked_type(node, field_name, context.config)
        )

    source_dir = source_directory(node, context)

    # Tried first for every field, whatever its name says.
    if is_file_link(value):
        linked, link_path = _find_file(context, source_dir, value)
        if linked is not None:
            return Resolution(
                ResolutionKind.FILE_LINK, node=linked, target_type=FILE_TYPE, link_path=link_path
            )

    target_type = linked_type(node, field_name, context.config)
    if target_type:
        direct = context.nodes.find(target_type, value)
        if direct is not None:
            return Resolution(ResolutionKind.DIRECT_ID, node=direct, target_type=target_type)

    if target_type == FILE_TYPE:
        linked, link_path = _find_file(context, source_dir, value)
        if linked is not None:
            return Resolution(
                ResolutionKind.PATH_FALLBACK,
                node=linked,
                target_type=target_type,
                link_path=link_path,
            )
        return Resolution(ResolutionKind.UNRESOLVED, target_type=target_type, link_path=link_path)

    return Resolution(ResolutionKind.UNRESOLVED, target_type=target_type)


def resolve_reference(node: Node, field_name: str, context: ResolveContext) -> Optional[Node]:
    """Resolve ``node[field_name]`` to the node it links to, or None.

    Unresolvable references are logged and resolve to None; they never raise.
    """
    resolution = decide_reference(node, field_name, context)
    if resolution.kind == ResolutionKind.UNRESOLVED:
        logger.error(
            "Unable to load the linked %s for field '%s' of node %s (%s)",
            resolution.target_type or "node",
            field_name,
            node.id,
            node.path or node.type,
        )
    return resolution.node


__all__ = [
    "ResolveContext",
    "Resolution",
    "decide_reference",
    "resolve_reference",
    "linked_type",
    "source_directory",
]
