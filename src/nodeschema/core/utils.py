"""Core utility functions for node schema construction.

This module provides naming and path helpers shared by the builder and the
reference resolver.
"""

from __future__ import annotations

import mimetypes
import os
import re
from pathlib import Path
from typing import Any, List, Optional

from .config import GENERIC_MIME_TYPE, TYPE_SEPARATOR

_SEPARATOR_RE = re.compile(r"[\W_]+")
_EXTENSION_RE = re.compile(r".*[./\\]", re.DOTALL)

# built-in table only; /etc/mime.types and similar host files are not read
_MIME_TYPES = mimetypes.MimeTypes(filenames=())


def _is_boundary(prev: str, cur: str, nxt: str) -> bool:
    if prev.isdigit() != cur.isdigit():
        return True
    if prev.islower() and cur.isupper():
        return True
    # last capital of an acronym starts the next word ("HTMLNode")
    return prev.isupper() and cur.isupper() and nxt.islower()


def split_words(value: str) -> List[str]:
    """Split a name into words on separators, case transitions and digit runs.

    Letters of any script count; scripts without case form a single word.

    Examples:
        >>> split_words("HTMLNode field")
        ['HTML', 'Node', 'field']
        >>> split_words("Ström")
        ['Ström']
    """
    words: List[str] = []
    for chunk in _SEPARATOR_RE.split(value):
        if not chunk:
            continue
        start = 0
        for i in range(1, len(chunk)):
            nxt = chunk[i + 1] if i + 1 < len(chunk) else ""
            if _is_boundary(chunk[i - 1], chunk[i], nxt):
                words.append(chunk[start:i])
                start = i
        words.append(chunk[start:])
    return words


def camel_case(value: str) -> str:
    """Convert a type or field name to camelCase.

    Examples:
        >>> camel_case("MarkdownRemark")
        'markdownRemark'
        >>> camel_case("File field")
        'fileField'
        >>> camel_case("HTMLNode")
        'htmlNode'
        >>> camel_case("Café")
        'café'
    """
    words = split_words(value)
    if not words:
        return ""
    head, *tail = words
    return head.lower() + "".join(w[:1].upper() + w[1:].lower() for w in tail)


def capitalize(value: Optional[str]) -> str:
    """Upper-case the first character and lower-case the rest; None becomes ''."""
    if not value:
        return ""
    return value[:1].upper() + value[1:].lower()


def split_type_suffix(field_name: str) -> Optional[str]:
    """Return the raw target type encoded in a ``base___Target`` field name.

    Examples:
        >>> split_type_suffix("author___Person")
        'Person'
        >>> split_type_suffix("author") is None
        True
    """
    parts = field_name.split(TYPE_SEPARATOR)
    if len(parts) < 2 or not parts[1]:
        return None
    return parts[1]


def lookup_mime_type(value: str) -> str:
    """Return the MIME type implied by a value's extension.

    Only the part after the last ``.``, ``/`` or ``\\`` is considered, so a
    bare extension such as ``"json"`` is recognized too. Unknown extensions
    map to ``application/octet-stream``.
    """
    extension = _EXTENSION_RE.sub("", value).lower()
    if not extension:
        return GENERIC_MIME_TYPE
    mime_type, _ = _MIME_TYPES.guess_type(f"file.{extension}", strict=False)
    return mime_type or GENERIC_MIME_TYPE


def is_file_link(value: Any) -> bool:
    """Return True if a field value looks like a link to a concrete file type."""
    return isinstance(value, str) and lookup_mime_type(value) != GENERIC_MIME_TYPE


def resolve_link_path(source_dir: str, value: str) -> str:
    """Resolve ``value`` against ``source_dir`` into an absolute, forward-slash path.

    Examples:
        >>> resolve_link_path("/site/posts", "../images/logo.png")
        '/site/images/logo.png'
    """
    return Path(os.path.abspath(os.path.join(source_dir, value))).as_posix()
