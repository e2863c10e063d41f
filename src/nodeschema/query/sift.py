"""Node-set filtering for singular lookup fields.

Filter arguments are nested mappings mirroring the node structure, with
operator mappings at the leaves::

    {"id": {"eq": "p1"}}
    {"frontmatter": {"title": {"regex": "/^hello/i"}}}

All conditions are ANDed and the input order of the nodes is preserved.
"""

from __future__ import annotations

import fnmatch
import re
from typing import Any, Dict, List, Mapping, Sequence, Tuple

import pandas as pd

from nodeschema.core.config import ALL_OPERATORS
from nodeschema.core.nodes import Node

Condition = Tuple[Tuple[str, ...], str, Any]


def _is_operator_map(value: Any) -> bool:
    return isinstance(value, Mapping) and bool(value) and all(k in ALL_OPERATORS for k in value)


def flatten_filters(args: Mapping[str, Any], prefix: Tuple[str, ...] = ()) -> List[Condition]:
    """Flatten nested filter arguments into ``(path, operator, value)`` conditions.

    Raises:
        ValueError: If a leaf is not an operator mapping or names an unknown operator.

    Examples:
        >>> flatten_filters({"frontmatter": {"title": {"eq": "Hi"}}})
        [(('frontmatter', 'title'), 'eq', 'Hi')]
    """
    conditions: List[Condition] = []
    for name, value in args.items():
        path = prefix + (name,)
        if _is_operator_map(value):
            for op, operand in value.items():
                conditions.append((path, op, operand))
        elif isinstance(value, Mapping) and value:
            conditions.extend(flatten_filters(value, path))
        else:
            raise ValueError(
                f"Invalid filter for '{'.'.join(path)}': expected an operator mapping "
                f"with one of {sorted(ALL_OPERATORS)}, got {value!r}"
            )
    return conditions


def _get_path(node: Node, path: Tuple[str, ...]) -> Any:
    value: Any = node.get(path[0])
    for key in path[1:]:
        if not isinstance(value, Mapping):
            return None
        value = value.get(key)
    return value


def _compile_regex(pattern: str) -> "re.Pattern[str]":
    """Compile ``/pattern/flags`` literals as well as bare patterns.

    Raises:
        ValueError: If the pattern is not a valid regular expression.
    """
    body, flags = pattern, 0
    if len(pattern) > 1 and pattern.startswith("/") and pattern.rfind("/") > 0:
        end = pattern.rfind("/")
        body = pattern[1:end]
        for flag in pattern[end + 1 :]:
            if flag == "i":
                flags |= re.IGNORECASE
            elif flag == "m":
                flags |= re.MULTILINE
            elif flag == "s":
                flags |= re.DOTALL
    try:
        return re.compile(body, flags)
    except re.error as e:
        raise ValueError(f"Invalid regex filter {pattern!r}: {e}") from e


def _compare(value: Any, operand: Any, op: str) -> bool:
    if value is None or operand is None:
        return False
    try:
        if op == "gt":
            return value > operand
        if op == "gte":
            return value >= operand
        if op == "lt":
            return value < operand
        return value <= operand
    except TypeError:
        return False


def _match(value: Any, op: str, operand: Any) -> bool:
    """Evaluate one operator against one value; lists match if any item matches."""
    if isinstance(value, (list, tuple)) and op not in ("ne", "nin"):
        return any(_match(item, op, operand) for item in value)

    if op == "eq":
        return value == operand
    if op == "ne":
        if isinstance(value, (list, tuple)):
            return operand not in value
        return value != operand
    if op == "in":
        return value in (operand if isinstance(operand, (list, tuple, set)) else [operand])
    if op == "nin":
        choices = operand if isinstance(operand, (list, tuple, set)) else [operand]
        if isinstance(value, (list, tuple)):
            return not any(item in choices for item in value)
        return value not in choices
    if op == "regex":
        return isinstance(value, str) and _compile_regex(str(operand)).search(value) is not None
    if op == "glob":
        return isinstance(value, str) and fnmatch.fnmatchcase(value, str(operand))
    if op in ("gt", "gte", "lt", "lte"):
        return _compare(value, operand, op)
    raise ValueError(f"Unsupported filter operator: {op}")


def run_sift(args: Mapping[str, Any], nodes: Sequence[Node]) -> List[Node]:
    """Return the nodes matching every filter condition, in input order.

    Args:
        args: Nested filter arguments; empty arguments match every node.
        nodes: Nodes to filter.

    Returns:
        Matching nodes.

    Raises:
        ValueError: If the arguments are malformed or use an unknown operator.
    """
    nodes = list(nodes)
    conditions = flatten_filters(args or {})
    if not conditions or not nodes:
        return nodes

    frame = pd.DataFrame(
        {".".join(path): pd.Series([_get_path(n, path) for n in nodes], dtype=object)
         for path, _, _ in conditions}
    )
    mask = pd.Series(True, index=frame.index)
    for path, op, operand in conditions:
        column = frame[".".join(path)]
        mask &= column.map(lambda v, op=op, operand=operand: _match(v, op, operand)).astype(bool)
    return [node for node, keep in zip(nodes, mask) if keep]


__all__ = ["run_sift", "flatten_filters"]
