"""Tests for node type construction and registry assembly."""

import asyncio
import logging

import pytest

from nodeschema.core.enums import FieldKind
from nodeschema.core.errors import PluginExtensionError
from nodeschema.core.nodes import Node, NodeCollection
from nodeschema.core.site import SiteConfig
from nodeschema.schema.builder import build_node_type, build_node_types, build_node_types_sync
from nodeschema.schema.models import NODE_INTERFACE, FieldDescriptor, TypeRegistry


class StaticPlugin:
    """Plugin returning fixed fields for one type."""

    def __init__(self, type_name, fields):
        self.type_name = type_name
        self.fields = fields
        self.calls = []

    async def extend_node_type(self, node_type, all_nodes):
        self.calls.append(node_type.name)
        if node_type.name != self.type_name:
            return {}
        return self.fields


class FailingPlugin:
    def __init__(self, type_name):
        self.type_name = type_name

    async def extend_node_type(self, node_type, all_nodes):
        if node_type.name == self.type_name:
            raise RuntimeError("boom")
        return {}


def test_registry_keys_are_camel_cased_type_names(nodes):
    registry = build_node_types_sync(nodes)

    assert isinstance(registry, TypeRegistry)
    assert set(registry) == {"file", "markdownRemark", "person"}
    assert registry.tags == frozenset({"File", "MarkdownRemark", "Person"})
    assert registry.by_tag("MarkdownRemark") is registry["markdownRemark"]
    assert all(key == descriptor.camel_name for key, descriptor in registry.items())


def test_reserved_root_groups_never_registered(nodes):
    registry = build_node_types_sync(nodes)

    assert registry.by_tag("root") is None
    assert registry.by_tag("rootDirectory") is None
    assert "root" not in registry
    assert "rootDirectory" not in registry


def test_empty_input_yields_empty_registry():
    registry = build_node_types_sync([])

    assert len(registry) == 0
    assert registry.summary() == []


def test_descriptor_holds_its_group(nodes):
    registry = build_node_types_sync(nodes)

    markdown = registry["markdownRemark"]
    assert markdown.name == "MarkdownRemark"
    assert [n.id for n in markdown.nodes] == ["post-1", "post-2"]


def test_object_type_definition(nodes):
    registry = build_node_types_sync(nodes)
    object_type = registry["person"].object_type

    assert object_type.name == "Person"
    assert object_type.description == "Node of type Person"
    assert object_type.interfaces == (NODE_INTERFACE,)
    assert object_type.is_type_of(nodes.get("p1"))
    assert object_type.is_type_of({"type": "Person"})
    assert not object_type.is_type_of(nodes.get("post-1"))


def test_every_type_has_the_four_default_fields(nodes):
    registry = build_node_types_sync(nodes)

    for descriptor in registry.values():
        fields = descriptor.fields
        for name in ("id", "type", "parent", "children"):
            assert name in fields
        assert fields["id"].kind == FieldKind.ID
        assert fields["id"].non_null is True


def test_field_computation_is_idempotent(nodes):
    registry = build_node_types_sync(nodes)
    markdown = registry["markdownRemark"]

    first = markdown.fields
    second = markdown.fields

    assert first == second
    assert first is not second


def test_plugin_fields_take_precedence(nodes):
    plugin_title = FieldDescriptor(kind=FieldKind.INT, description="From plugin")
    plugin_id = FieldDescriptor(kind=FieldKind.STRING, description="Plugin id")
    plugin = StaticPlugin("MarkdownRemark", {"title": plugin_title, "id": plugin_id})

    registry = build_node_types_sync(nodes, plugins=[plugin])
    fields = registry["markdownRemark"].fields

    assert fields["title"] == plugin_title
    assert fields["id"] == plugin_id
    # other types keep their inferred fields
    assert registry["person"].fields["name"].kind == FieldKind.STRING
    assert sorted(plugin.calls) == ["File", "MarkdownRemark", "Person"]


def test_later_plugins_win_on_collision(nodes):
    first = StaticPlugin("Person", {"score": FieldDescriptor(kind=FieldKind.INT)})
    second = StaticPlugin("Person", {"score": FieldDescriptor(kind=FieldKind.FLOAT)})

    registry = build_node_types_sync(nodes, plugins=[first, second])

    assert registry["person"].fields_from_plugins["score"].kind == FieldKind.FLOAT
    assert registry["person"].fields["score"].kind == FieldKind.FLOAT


def test_plugin_failure_fails_the_whole_pass(nodes):
    with pytest.raises(PluginExtensionError, match="Person") as excinfo:
        build_node_types_sync(nodes, plugins=[FailingPlugin("Person")])

    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert excinfo.value.type_name == "Person"


def test_custom_extender_failure_propagates(nodes):
    async def extend(node_type, all_nodes):
        raise ConnectionError("plugin host unavailable")

    with pytest.raises(ConnectionError):
        build_node_types_sync(nodes, extend=extend)


def test_types_are_built_concurrently(nodes):
    """Every type's extension starts before any of them finishes."""
    started = []
    release = asyncio.Event()

    async def extend(node_type, all_nodes):
        started.append(node_type.name)
        if len(started) == 3:
            release.set()
        await asyncio.wait_for(release.wait(), timeout=5)
        return []

    registry = build_node_types_sync(nodes, extend=extend)

    assert sorted(started) == ["File", "MarkdownRemark", "Person"]
    assert len(registry) == 3


def test_singular_field_returns_first_match_or_none(nodes):
    registry = build_node_types_sync(nodes)
    lookup = registry["markdownRemark"].node

    assert lookup.name == "MarkdownRemark"
    assert lookup.type is registry["markdownRemark"].object_type
    assert "id" in lookup.args
    assert lookup.resolve({"id": {"eq": "post-2"}}).id == "post-2"
    assert lookup.resolve({"draft": {"eq": False}}).id == "post-1"
    assert lookup.resolve({}).id == "post-1"
    assert lookup.resolve({"id": {"eq": "nope"}}) is None


def test_singular_field_delegates_to_filter_engine(nodes):
    calls = []

    def sift(args, group):
        calls.append((args, [n.id for n in group]))
        return []

    registry = build_node_types_sync(nodes, sift=sift)

    assert registry["person"].node.resolve({"name": {"eq": "Ada"}}) is None
    assert calls == [({"name": {"eq": "Ada"}}, ["p1"])]


def test_type_field_resolves_references(nodes):
    registry = build_node_types_sync(nodes)
    type_field = registry["person"].field

    assert type_field.name == "personField"
    assert registry["markdownRemark"].field.name == "markdownRemarkField"
    linked = type_field.resolve(nodes.get("post-1"), "author___Person", registry.context)
    assert linked is nodes.get("p1")


def test_inferred_link_field_uses_target_type_resolver(nodes):
    registry = build_node_types_sync(nodes)
    author = registry["markdownRemark"].fields["author___Person"]

    assert author.kind == FieldKind.NODE
    assert author.target_type == "Person"
    assert author.resolver == registry["person"].field.resolve
    assert author.resolver(nodes.get("post-1"), "author___Person", registry.context).id == "p1"


def test_inferred_file_link_field(nodes):
    registry = build_node_types_sync(nodes)
    cover = registry["markdownRemark"].fields["cover"]

    assert cover.kind == FieldKind.NODE
    assert cover.target_type == "File"
    linked = cover.resolver(nodes.get("post-1"), "cover", registry.context)
    assert linked.id == "/site/posts/images/logo.png"


def test_unresolved_reference_through_registry_logs(nodes, caplog):
    registry = build_node_types_sync(nodes)
    author = registry["markdownRemark"].fields["author___Person"]

    assert author.resolver(nodes.get("post-2"), "author___Person", registry.context) is None
    assert any(r.levelno == logging.ERROR for r in caplog.records)


def test_registry_carries_context(nodes):
    config = SiteConfig(mapping={"MarkdownRemark.editor": "Person"})
    registry = build_node_types_sync(nodes, config=config)

    assert registry.context.config is config
    assert len(registry.context.nodes) == len(nodes)


def test_colliding_type_names_are_rejected():
    nodes = [Node(id="a", type="blog_post"), Node(id="b", type="blogPost")]

    with pytest.raises(ValueError, match="blogPost"):
        build_node_types_sync(nodes)


def test_registry_is_read_only(nodes):
    registry = build_node_types_sync(nodes)

    with pytest.raises(TypeError):
        registry["other"] = registry["person"]  # type: ignore[index]


def test_summary_lists_every_type(nodes):
    registry = build_node_types_sync(nodes)

    summary = registry.summary()
    assert len(summary) == 3
    assert summary[1].startswith("markdownRemark (MarkdownRemark): 2 nodes")


def test_build_node_type_with_injected_collaborators():
    group = [Node(id="a", type="Tag", fields={"label": "x"})]
    collection = NodeCollection(group)
    processed = {}

    async def extend(node_type, all_nodes):
        return [{"extra": FieldDescriptor(kind=FieldKind.BOOLEAN)}]

    def infer_structure(nodes, types, all_nodes):
        return {"label": FieldDescriptor(kind=FieldKind.STRING)}

    def infer_input(nodes, prefix, type_name):
        return {}

    descriptor = asyncio.run(
        build_node_type(
            "Tag",
            group,
            all_nodes=collection,
            processed_types=processed,
            extend=extend,
            infer_structure=infer_structure,
            infer_input=infer_input,
        )
    )

    assert descriptor.node.args == {}
    assert set(descriptor.fields) == {"id", "type", "parent", "children", "label", "extra"}
    assert processed == {}


def test_async_entry_point(nodes):
    registry = asyncio.run(build_node_types(nodes))

    assert "person" in registry


def test_non_ascii_type_tags_get_distinct_keys():
    nodes = [Node(id="a", type="日本"), Node(id="b", type="中国"), Node(id="c", type="Ström")]

    registry = build_node_types_sync(nodes)

    assert set(registry) == {"日本", "中国", "ström"}
    assert registry["ström"].name == "Ström"
    assert registry["日本"].field.name == "日本Field"
