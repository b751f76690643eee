# =============================================================================
# WDS Live Client -- Document Capabilities
# =============================================================================
#
# The patch engine never touches a concrete DOM.  It talks to a LiveDocument
# (query, import, replace, append, reactivate) and a Page (location,
# navigation, fetch).  SoupDocument is the BeautifulSoup-backed model used by
# the headless page and the tests.
#
# Script execution contract: inserting a parsed, cloned or imported <script>
# does not execute it.  Only reactivate_script() -- build a brand-new element,
# copy the attributes (and the inline body when there is no src), swap it in
# -- executes a script.
# =============================================================================

from __future__ import annotations

import copy
from typing import Any, Protocol, runtime_checkable

from bs4 import BeautifulSoup, Tag

from .constants import HTML_PARSER

Node = Any


@runtime_checkable
class LiveDocument(Protocol):
    """Operations the merge engine and diff applier need from a document."""

    @property
    def head(self) -> Node | None: ...

    @property
    def body(self) -> Node | None: ...

    @property
    def title(self) -> str: ...

    @title.setter
    def title(self, value: str) -> None: ...

    def select(self, selector: str, root: Node | None = None) -> list[Node]: ...

    def children(self, node: Node) -> list[Node]: ...

    def child_nodes(self, node: Node) -> list[Node]: ...

    def element_id(self, node: Node) -> str | None: ...

    def get_attribute(self, node: Node, name: str) -> str | None: ...

    def set_attribute(self, node: Node, name: str, value: str) -> None: ...

    def text_content(self, node: Node) -> str: ...

    def import_node(self, node: Node) -> Node: ...

    def replace_node(self, old: Node, new: Node) -> None: ...

    def append_child(self, parent: Node, node: Node) -> None: ...

    def insert_before(self, reference: Node, node: Node) -> None: ...

    def remove_node(self, node: Node) -> None: ...

    def reactivate_script(self, script: Node) -> Node: ...


@runtime_checkable
class Page(Protocol):
    """The browsing context: location, navigation and network access."""

    @property
    def url(self) -> str: ...

    @property
    def origin(self) -> str: ...

    @property
    def pathname(self) -> str: ...

    @property
    def document(self) -> LiveDocument: ...

    async def replace(self, url: str) -> None:
        """Navigate to *url*, replacing the current history entry."""
        ...

    async def fetch_text(self, url: str) -> str:
        """Fetch *url* bypassing caches and return the response body."""
        ...


class SoupDocument:
    """LiveDocument over a BeautifulSoup tree (lxml parser).

    Attributes are kept as plain strings (``multi_valued_attributes=None``)
    so they can be copied verbatim.  Every script started through
    :meth:`reactivate_script` is appended to :attr:`executed_scripts`.
    """

    def __init__(self, soup: BeautifulSoup, url: str = "") -> None:
        self._soup = soup
        self.url = url
        self.executed_scripts: list[Tag] = []

    @classmethod
    def parse(cls, markup: str | bytes, url: str = "") -> SoupDocument:
        soup = BeautifulSoup(markup, HTML_PARSER, multi_valued_attributes=None)
        return cls(soup, url)

    @property
    def head(self) -> Tag | None:
        return self._soup.head

    @property
    def body(self) -> Tag | None:
        return self._soup.body

    @property
    def title(self) -> str:
        node = self._soup.title
        if node is None:
            return ""
        return " ".join(node.get_text().split())

    @title.setter
    def title(self, value: str) -> None:
        node = self._soup.title
        if node is None:
            if self.head is None:
                return
            node = self._soup.new_tag("title")
            self.head.append(node)
        node.string = value

    # -- Queries ---------------------------------------------------------------

    def select(self, selector: str, root: Tag | None = None) -> list[Tag]:
        return list((root if root is not None else self._soup).select(selector))

    def children(self, node: Tag) -> list[Tag]:
        return [child for child in node.children if isinstance(child, Tag)]

    def child_nodes(self, node: Tag) -> list[Any]:
        return list(node.contents)

    def element_id(self, node: Any) -> str | None:
        if not isinstance(node, Tag):
            return None
        return node.get("id") or None

    def get_attribute(self, node: Tag, name: str) -> str | None:
        return node.get(name)

    def set_attribute(self, node: Tag, name: str, value: str) -> None:
        node[name] = value

    def text_content(self, node: Tag) -> str:
        return node.get_text()

    # -- Mutation --------------------------------------------------------------

    def import_node(self, node: Any) -> Any:
        # copy.copy on a bs4 node is a deep, detached copy
        return copy.copy(node)

    def replace_node(self, old: Any, new: Any) -> None:
        old.replace_with(new)

    def append_child(self, parent: Tag, node: Any) -> None:
        parent.append(node)

    def insert_before(self, reference: Any, node: Any) -> None:
        reference.insert_before(node)

    def remove_node(self, node: Any) -> None:
        node.extract()

    def reactivate_script(self, script: Tag) -> Tag:
        fresh = self._soup.new_tag("script")
        for name, value in script.attrs.items():
            fresh[name] = value
        if not script.get("src"):
            fresh.string = script.get_text()
        script.replace_with(fresh)
        self.executed_scripts.append(fresh)
        return fresh

    def serialize(self) -> str:
        return str(self._soup)
