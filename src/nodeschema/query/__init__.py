"""Node-set filter engine used by singular lookup fields."""

from .sift import flatten_filters, run_sift

__all__ = ["run_sift", "flatten_filters"]
