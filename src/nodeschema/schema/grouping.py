from __future__ import annotations

from typing import Dict, Iterable, List

from nodeschema.core.config import is_reserved_root
from nodeschema.core.nodes import Node


def group_nodes(nodes: Iterable[Node]) -> Dict[str, List[Node]]:
    """Group nodes by type tag, dropping the structural root markers.

    Groups keep collection order and appear in first-seen order.
    """
    groups: Dict[str, List[Node]] = {}
    for node in nodes:
        groups.setdefault(node.type, []).append(node)
    for type_name in list(groups):
        if is_reserved_root(type_name):
            del groups[type_name]
    return groups
