"""Node data model and loading helpers.

A node is an untyped content record: besides its identity and hierarchy
attributes it carries arbitrary fields whose names and value types are only
discovered at schema construction time.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, overload

import yaml

from .config import PATH_ATTRIBUTE, SOURCE_NODE_ATTRIBUTE
from .errors import NodeLoadError


@dataclass(frozen=True)
class Node:
    """Immutable snapshot of one content record.

    Attributes:
        id: Unique identifier of the node.
        type: Type tag grouping the node with others of its kind.
        parent: Identifier of the parent node, if any.
        children: Identifiers of child nodes.
        path: Structural path marker used for diagnostics (``___path``).
        source_node_id: Identifier of the node this one was sourced from,
            typically a File node (``_sourceNodeId``).
        fields: Every other attribute of the record.

    Examples:
        >>> node = Node.from_dict({"id": "p1", "type": "Person", "name": "Ada"})
        >>> node.get("name")
        'Ada'
    """

    id: str
    type: str
    parent: Optional[str] = None
    children: Tuple[str, ...] = ()
    path: Optional[str] = None
    source_node_id: Optional[str] = None
    fields: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate identity attributes."""
        if not isinstance(self.id, str) or not self.id:
            raise NodeLoadError(f"Node id must be a non-empty string, got {self.id!r}")
        if not isinstance(self.type, str) or not self.type:
            raise NodeLoadError(f"Node {self.id!r} has no type tag")

    def get(self, name: str, default: Any = None) -> Any:
        """Read any attribute by its raw record name."""
        if name == "id":
            return self.id
        if name == "type":
            return self.type
        if name == "parent":
            return self.parent
        if name == "children":
            return list(self.children)
        if name == PATH_ATTRIBUTE:
            return self.path
        if name == SOURCE_NODE_ATTRIBUTE:
            return self.source_node_id
        return self.fields.get(name, default)

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "Node":
        """Build a node from a raw record.

        Raises:
            NodeLoadError: If the record is not a mapping or lacks ``id``/``type``.
        """
        if not isinstance(record, dict):
            raise NodeLoadError(f"Node record must be a mapping, got {type(record).__name__}")
        if "id" not in record or "type" not in record:
            raise NodeLoadError(f"Node record is missing 'id' or 'type': {record!r}")

        children = []
        for child in record.get("children") or []:
            # children may be given inline; only their ids are kept
            children.append(child["id"] if isinstance(child, dict) else str(child))

        parent = record.get("parent")
        if isinstance(parent, dict):
            parent = parent.get("id")

        reserved = {"id", "type", "parent", "children", PATH_ATTRIBUTE, SOURCE_NODE_ATTRIBUTE}
        return cls(
            id=record["id"],
            type=record["type"],
            parent=parent,
            children=tuple(children),
            path=record.get(PATH_ATTRIBUTE),
            source_node_id=record.get(SOURCE_NODE_ATTRIBUTE),
            fields={k: v for k, v in record.items() if k not in reserved},
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return the node as a raw record (inverse of :meth:`from_dict`)."""
        out: Dict[str, Any] = {"id": self.id, "type": self.type}
        if self.parent is not None:
            out["parent"] = self.parent
        if self.children:
            out["children"] = list(self.children)
        if self.path is not None:
            out[PATH_ATTRIBUTE] = self.path
        if self.source_node_id is not None:
            out[SOURCE_NODE_ATTRIBUTE] = self.source_node_id
        out.update(self.fields)
        return out


class NodeCollection(Sequence[Node]):
    """Read-only, indexed collection of every node in a build pass.

    Lookups by ``(type, id)`` return the first node in collection order,
    matching a linear scan.
    """

    def __init__(self, nodes: Iterable[Node]) -> None:
        self._nodes: List[Node] = list(nodes)
        self._by_id: Dict[str, Node] = {}
        self._by_type_id: Dict[Tuple[str, str], Node] = {}
        for node in self._nodes:
            self._by_id.setdefault(node.id, node)
            self._by_type_id.setdefault((node.type, node.id), node)

    @overload
    def __getitem__(self, index: int) -> Node: ...

    @overload
    def __getitem__(self, index: slice) -> List[Node]: ...

    def __getitem__(self, index):
        return self._nodes[index]

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def get(self, node_id: Optional[str]) -> Optional[Node]:
        """Return the node with the given id, or None."""
        if node_id is None:
            return None
        return self._by_id.get(node_id)

    def find(self, type_name: str, node_id: Any) -> Optional[Node]:
        """Return the node of ``type_name`` whose id equals ``node_id``, or None."""
        if not isinstance(node_id, str):
            return None
        return self._by_type_id.get((type_name, node_id))

    def of_type(self, type_name: str) -> List[Node]:
        """Return all nodes carrying the given type tag, in collection order."""
        return [n for n in self._nodes if n.type == type_name]

    def types(self) -> List[str]:
        """Return the distinct type tags in first-seen order."""
        return list(dict.fromkeys(n.type for n in self._nodes))

    @classmethod
    def from_records(cls, records: Iterable[Dict[str, Any]]) -> "NodeCollection":
        """Build a collection from raw node records."""
        return cls(Node.from_dict(r) for r in records)


def load_nodes(path: Path) -> NodeCollection:
    """Load a node collection from a JSON or YAML file.

    The file holds either a list of node records or a mapping with a
    ``nodes`` list.

    Args:
        path: Path to a ``.json``, ``.yaml`` or ``.yml`` file.

    Returns:
        NodeCollection with every record of the file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file cannot be parsed or has an unexpected shape.
        NodeLoadError: If a record is malformed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Nodes file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            if path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValueError(f"Failed to read nodes file {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("nodes")
    if not isinstance(data, list):
        raise ValueError(f"Nodes file {path} must contain a list of nodes")

    return NodeCollection.from_records(data)


__all__ = ["Node", "NodeCollection", "load_nodes"]
