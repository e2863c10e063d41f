"""Default structural and filter-argument inferencers."""

from .input_fields import infer_input_arguments
from .structure import infer_fields_from_records, infer_object_structure

__all__ = [
    "infer_object_structure",
    "infer_fields_from_records",
    "infer_input_arguments",
]
