"""Shared sampling and classification helpers for inference."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from nodeschema.core.config import INFERENCE_SAMPLE_SIZE
from nodeschema.core.enums import FieldKind
from nodeschema.core.nodes import Node


_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}([T ]\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}:?\d{2})?)?$")

# pandas.api.types.infer_dtype result → field kind
_DTYPE_KINDS: Dict[str, FieldKind] = {
    "string": FieldKind.STRING,
    "integer": FieldKind.INT,
    "floating": FieldKind.FLOAT,
    "mixed-integer-float": FieldKind.FLOAT,
    "decimal": FieldKind.FLOAT,
    "boolean": FieldKind.BOOLEAN,
    "date": FieldKind.DATE,
    "datetime": FieldKind.DATE,
    "datetime64": FieldKind.DATE,
}


def sample_frame(
    records: Sequence[Dict[str, Any]], sample_size: int = INFERENCE_SAMPLE_SIZE
) -> pd.DataFrame:
    """Load up to ``sample_size`` records into an object-typed DataFrame.

    Object dtype keeps Python values intact (integers stay integers when
    some records lack the field).
    """
    sample = [r for r in list(records)[:sample_size] if isinstance(r, dict)]
    if not sample:
        return pd.DataFrame()
    return pd.DataFrame(sample, dtype=object)


def node_records(nodes: Sequence[Node], exclude: Sequence[str] = ()) -> List[Dict[str, Any]]:
    """Return the open-ended attributes of each node as plain dicts."""
    return [{k: v for k, v in n.fields.items() if k not in exclude} for n in nodes]


def present_values(column: pd.Series) -> pd.Series:
    """Drop missing values from a sampled column."""
    return column[[not _is_missing(v) for v in column]]


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and value != value:
        return True
    return False


def is_date_series(values: pd.Series) -> bool:
    """Return True if every value is an ISO-8601 date or datetime string."""
    if values.empty or not all(isinstance(v, str) and _ISO_DATE_RE.match(v) for v in values):
        return False
    parsed = pd.to_datetime(values, format="ISO8601", errors="coerce", utc=True)
    return bool(parsed.notna().all())


def classify_scalars(values: pd.Series) -> FieldKind:
    """Classify a column of scalar values.

    Columns pandas cannot narrow to one scalar type are classified as JSON.

    Examples:
        >>> classify_scalars(pd.Series([1, 2], dtype=object))
        <FieldKind.INT: 'Int'>
    """
    inferred = pd.api.types.infer_dtype(values, skipna=True)
    kind = _DTYPE_KINDS.get(inferred, FieldKind.JSON)
    if kind == FieldKind.STRING and is_date_series(values):
        return FieldKind.DATE
    return kind


def container_kind(values: pd.Series) -> Optional[FieldKind]:
    """Return LIST or OBJECT if every value is a list or a dict, else None."""
    if values.empty:
        return None
    if all(isinstance(v, (list, tuple)) for v in values):
        return FieldKind.LIST
    if all(isinstance(v, dict) for v in values):
        return FieldKind.OBJECT
    if any(isinstance(v, (list, tuple, dict)) for v in values):
        return FieldKind.JSON
    return None


def flatten_items(values: pd.Series) -> pd.Series:
    """Flatten a column of lists into a column of their items."""
    items = [item for v in values for item in v if not _is_missing(item)]
    return pd.Series(items, dtype=object)


__all__ = [
    "sample_frame",
    "node_records",
    "present_values",
    "is_date_series",
    "classify_scalars",
    "container_kind",
    "flatten_items",
]
