"""CSS-selector helpers over BeautifulSoup trees.

Thin wrappers that give the extractors a browser-like vocabulary:
``query_one`` (descendant selection), ``matches``
(selector test against the node itself), ``inner_text`` and attribute /
``data-*`` reads.
"""

from __future__ import annotations

import copy
import re

from bs4 import BeautifulSoup, Tag

_CAMEL_RE = re.compile(r"[A-Z]")


def parse_html(html: str | bytes) -> BeautifulSoup:
    """Parse an HTML document into a BeautifulSoup tree (``lxml`` parser)."""
    return BeautifulSoup(html, "lxml")


def query_one(root: Tag, selector: str) -> Tag | None:
    return root.select_one(selector)


def matches(node: Tag, selector: str) -> bool:
    """Whether *node* itself matches *selector*."""
    return bool(node.css.match(selector))


def inner_text(node: Tag) -> str:
    """Text content of *node*; ``<br>`` and newlines both become spaces."""
    if node.find("br") is not None:
        # Work on a copy so the parsed document stays untouched
        node = copy.copy(node)
        for br in node.find_all("br"):
            br.replace_with("\n")
    return node.get_text().replace("\n", " ")


def read_attr(node: Tag, name: str) -> str | None:
    value = node.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def read_dataset(node: Tag, key: str) -> str | None:
    """Read ``data-*`` attribute by its dataset key (``cfEmail`` → ``data-cf-email``)."""
    attr = "data-" + _CAMEL_RE.sub(lambda m: "-" + m.group(0).lower(), key)
    return read_attr(node, attr)
