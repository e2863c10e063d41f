"""Plugin extension protocol for contributing fields to node types.

To contribute fields, implement an object with an async
``extend_node_type(node_type, all_nodes)`` method and register it with a
:class:`PluginRunner`::

    class ReadingTime:
        async def extend_node_type(self, node_type, all_nodes):
            if node_type.name != "MarkdownRemark":
                return {}
            return {"readingTime": FieldDescriptor(kind=FieldKind.INT)}

    runner = PluginRunner([ReadingTime()])
"""

from .runner import NodeTypeExtender, PluginRunner, merge_plugin_fields

__all__ = ["NodeTypeExtender", "PluginRunner", "merge_plugin_fields"]
