"""Shared pytest configuration and fixtures for node schema testing."""

from typing import Any, Dict, List

import pytest

from nodeschema.core.nodes import NodeCollection
from nodeschema.core.site import SiteConfig
from nodeschema.schema.resolver import ResolveContext


def site_records() -> List[Dict[str, Any]]:
    """Raw nodes of a small site: files, two posts, one author."""
    return [
        {"id": "__root", "type": "root", "children": ["/site"]},
        {"id": "/site", "type": "rootDirectory"},
        {
            "id": "/site/posts/hello.md",
            "type": "File",
            "dir": "/site/posts",
            "name": "hello",
            "extension": "md",
        },
        {
            "id": "/site/posts/images/logo.png",
            "type": "File",
            "dir": "/site/posts/images",
            "name": "logo",
            "extension": "png",
        },
        {
            "id": "/site/posts/notes/README",
            "type": "File",
            "dir": "/site/posts/notes",
            "name": "README",
            "extension": "",
        },
        {
            "id": "/site/authors.yaml",
            "type": "File",
            "dir": "/site",
            "name": "authors",
            "extension": "yaml",
        },
        {
            "id": "post-1",
            "type": "MarkdownRemark",
            "parent": "/site/posts/hello.md",
            "___path": "root.children[0]",
            "_sourceNodeId": "/site/posts/hello.md",
            "title": "Hello",
            "wordCount": 120,
            "draft": False,
            "date": "2020-01-01",
            "tags": ["intro", "news"],
            "cover": "images/logo.png",
            "author___Person": "p1",
            "notes___File": "notes/README",
            "frontmatter": {"layout": "post", "rating": 4},
        },
        {
            "id": "post-2",
            "type": "MarkdownRemark",
            "parent": "/site/posts/hello.md",
            "___path": "root.children[1]",
            "_sourceNodeId": "/site/posts/hello.md",
            "title": "Second",
            "wordCount": 80,
            "draft": True,
            "date": "2020-02-01",
            "tags": ["news"],
            "cover": None,
            "author___Person": "p2",
            "frontmatter": {"layout": "note"},
        },
        {
            "id": "p1",
            "type": "Person",
            "parent": "/site/authors.yaml",
            "_sourceNodeId": "/site/authors.yaml",
            "name": "Ada",
            "avatar": "posts/images/logo.png",
        },
    ]


@pytest.fixture
def records() -> List[Dict[str, Any]]:
    """Fresh copy of the site's raw node records."""
    return site_records()


@pytest.fixture
def nodes(records) -> NodeCollection:  # pylint: disable=redefined-outer-name
    """Node collection built from the site's records."""
    return NodeCollection.from_records(records)


@pytest.fixture
def context(nodes) -> ResolveContext:  # pylint: disable=redefined-outer-name
    """Resolve context over the site's nodes with an empty site config."""
    return ResolveContext(nodes=nodes, config=SiteConfig())
