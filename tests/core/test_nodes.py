"""Tests for the node model, collection indexing and node loading."""

import json

import pytest
import yaml

from nodeschema.core.errors import NodeLoadError
from nodeschema.core.nodes import Node, NodeCollection, load_nodes


def test_from_dict_splits_reserved_attributes(records):
    node = Node.from_dict(records[6])

    assert node.id == "post-1"
    assert node.type == "MarkdownRemark"
    assert node.parent == "/site/posts/hello.md"
    assert node.path == "root.children[0]"
    assert node.source_node_id == "/site/posts/hello.md"
    assert "___path" not in node.fields
    assert "_sourceNodeId" not in node.fields
    assert node.fields["title"] == "Hello"


def test_get_reads_raw_names(records):
    node = Node.from_dict(records[6])

    assert node.get("id") == "post-1"
    assert node.get("___path") == "root.children[0]"
    assert node.get("_sourceNodeId") == "/site/posts/hello.md"
    assert node.get("children") == []
    assert node["title"] == "Hello"
    assert node.get("missing") is None
    assert node.get("missing", "x") == "x"


def test_inline_children_and_parent_keep_ids():
    node = Node.from_dict(
        {"id": "a", "type": "Dir", "parent": {"id": "p"}, "children": [{"id": "c1"}, "c2"]}
    )

    assert node.parent == "p"
    assert node.children == ("c1", "c2")


def test_to_dict_restores_raw_record(records):
    assert Node.from_dict(records[6]).to_dict() == records[6]


@pytest.mark.parametrize(
    "record",
    [{"type": "Post"}, {"id": "a"}, {"id": "", "type": "Post"}, {"id": "a", "type": ""}],
    ids=["no_id", "no_type", "empty_id", "empty_type"],
)
def test_malformed_records_are_rejected(record):
    with pytest.raises(NodeLoadError):
        Node.from_dict(record)


def test_non_mapping_record_is_rejected():
    with pytest.raises(NodeLoadError, match="mapping"):
        Node.from_dict(["id", "type"])


def test_collection_indexes(nodes):
    assert len(nodes) == 9
    assert nodes[0].id == "__root"
    assert nodes.get("p1").type == "Person"
    assert nodes.get(None) is None
    assert nodes.find("Person", "p1") is nodes.get("p1")
    assert nodes.find("File", "p1") is None
    assert nodes.find("Person", 1) is None
    assert [n.id for n in nodes.of_type("MarkdownRemark")] == ["post-1", "post-2"]
    assert nodes.types() == ["root", "rootDirectory", "File", "MarkdownRemark", "Person"]


def test_find_returns_first_match_in_collection_order():
    first = Node(id="dup", type="Tag", fields={"n": 1})
    second = Node(id="dup", type="Tag", fields={"n": 2})

    assert NodeCollection([first, second]).find("Tag", "dup") is first


def test_load_nodes_json(tmp_path, records):
    path = tmp_path / "nodes.json"
    path.write_text(json.dumps(records), encoding="utf-8")

    loaded = load_nodes(path)

    assert len(loaded) == len(records)
    assert loaded.get("p1").fields["name"] == "Ada"


def test_load_nodes_yaml_with_nodes_key(tmp_path, records):
    path = tmp_path / "nodes.yaml"
    path.write_text(yaml.safe_dump({"nodes": records}), encoding="utf-8")

    loaded = load_nodes(path)

    assert loaded.get("post-2").fields["tags"] == ["news"]


def test_load_nodes_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError, match="Nodes file not found"):
        load_nodes(tmp_path / "missing.json")


def test_load_nodes_invalid_json(tmp_path):
    path = tmp_path / "nodes.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ValueError, match="Failed to read nodes file"):
        load_nodes(path)


def test_load_nodes_wrong_shape(tmp_path):
    path = tmp_path / "nodes.json"
    path.write_text(json.dumps({"items": []}), encoding="utf-8")

    with pytest.raises(ValueError, match="must contain a list"):
        load_nodes(path)
