"""Node schema builder: infer typed schemas over untyped content nodes.

The package groups raw content nodes by their type tag, infers a field set
for every group, merges plugin-contributed fields on top, and builds field
resolvers that follow string references between nodes (including relative
file paths).
"""

__all__ = [
    "__version__",
    "build_node_types",
    "build_node_types_sync",
]

__version__ = "0.1.0"

from .schema.builder import build_node_types, build_node_types_sync  # noqa: E402
