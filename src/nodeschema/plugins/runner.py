from __future__ import annotations

import inspect
import logging
from typing import Iterable, List, Optional, Protocol, Sequence

from nodeschema.core.errors import PluginExtensionError
from nodeschema.core.nodes import Node
from nodeschema.schema.models import FieldMap, TypeDescriptor

logger = logging.getLogger(__name__)


class NodeTypeExtender(Protocol):
    """Protocol for plugins contributing fields to node types.

    Use duck typing (Protocol) - no need to inherit from a base class.
    Plugins without an ``extend_node_type`` method are skipped.
    """

    async def extend_node_type(
        self, node_type: TypeDescriptor, all_nodes: Sequence[Node]
    ) -> Optional[FieldMap]:
        """Return extra fields for ``node_type`` (or None/empty for none).

        Args:
            node_type: Descriptor being built; ``name`` and ``nodes`` are set.
            all_nodes: Every node of the build pass.
        """
        ...


def merge_plugin_fields(field_maps: Iterable[Optional[FieldMap]]) -> FieldMap:
    """Shallow-merge plugin field maps; later plugins win on name collisions."""
    merged: FieldMap = {}
    for fields in field_maps:
        if fields:
            merged.update(fields)
    return merged


class PluginRunner:
    """Run the ``extend_node_type`` hook of every registered plugin."""

    def __init__(self, plugins: Iterable[object] = ()) -> None:
        self.plugins: List[object] = list(plugins)

    def register(self, plugin: object) -> None:
        self.plugins.append(plugin)

    async def run(self, node_type: TypeDescriptor, all_nodes: Sequence[Node]) -> List[FieldMap]:
        """Collect the field maps returned by each plugin, in registration order.

        Raises:
            PluginExtensionError: If any plugin raises; the original error is chained.
        """
        results: List[FieldMap] = []
        for plugin in self.plugins:
            hook = getattr(plugin, "extend_node_type", None)
            if hook is None:
                continue
            try:
                fields = hook(node_type, all_nodes)
                if inspect.isawaitable(fields):
                    fields = await fields
            except Exception as e:
                raise PluginExtensionError(node_type.name, f"{type(plugin).__name__}: {e}") from e
            if fields:
                logger.debug(
                    "%s added %d fields to %s", type(plugin).__name__, len(fields), node_type.name
                )
                results.append(dict(fields))
        return results
