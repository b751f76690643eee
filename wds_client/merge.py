# =============================================================================
# WDS Live Client -- DOM Merge Engine
# =============================================================================
#
# Reconciles a freshly fetched document into the live one:
#
#   title  -- copied when non-empty
#   head   -- additive merge keyed by element id (never prunes)
#   body   -- children replaced with imported copies, preserved ones kept
#   script -- every non-preserved <script> rebuilt so it executes
#
# Elements whose id is in PRESERVED_IDS belong to the live client and are
# never removed, replaced or re-created.
# =============================================================================

from __future__ import annotations

from typing import TYPE_CHECKING

from .constants import PRESERVED_IDS
from .errors import WDSPatchError

if TYPE_CHECKING:
    from .document import LiveDocument, Node


def update_title(live: LiveDocument, fetched: LiveDocument) -> None:
    if fetched.title:
        live.title = fetched.title


def merge_head(live: LiveDocument, fetched: LiveDocument) -> None:
    """Merge the fetched ``<head>`` into the live one, element by element.

    Live children are indexed by id; unindexed (id-less) children are never
    touched.  Each fetched child either replaces the live element with the
    same id or is appended.  Live children missing from the fetched head
    are left in place.
    """
    new_head = fetched.head
    current_head = live.head
    if new_head is None or current_head is None:
        return

    existing_by_id: dict[str, Node] = {}
    for node in live.children(current_head):
        node_id = live.element_id(node)
        if node_id:
            existing_by_id[node_id] = node

    for node in fetched.children(new_head):
        node_id = fetched.element_id(node)
        if node_id and node_id in PRESERVED_IDS:
            continue

        imported = live.import_node(node)
        if node_id and node_id in existing_by_id:
            live.replace_node(existing_by_id.pop(node_id), imported)
        else:
            live.append_child(current_head, imported)


def replace_body(live: LiveDocument, fetched: LiveDocument) -> None:
    """Swap the live ``<body>`` content for copies of the fetched one.

    Preserved elements stay where they are; the new content goes in front
    of the first of them (the server appends its carriers at the end of
    pages without a head).
    """
    new_body = fetched.body
    current_body = live.body
    if new_body is None:
        raise WDSPatchError("Fetched document has no <body>")
    if current_body is None:
        raise WDSPatchError("Live document has no <body>")

    anchor = None
    for node in live.child_nodes(current_body):
        if live.element_id(node) in PRESERVED_IDS:
            if anchor is None:
                anchor = node
        else:
            live.remove_node(node)

    for node in fetched.child_nodes(new_body):
        if fetched.element_id(node) in PRESERVED_IDS:
            continue
        imported = live.import_node(node)
        if anchor is None:
            live.append_child(current_body, imported)
        else:
            live.insert_before(anchor, imported)


def reactivate_scripts(live: LiveDocument, root: Node | None) -> int:
    """Rebuild every non-preserved ``<script>`` under *root*.

    Returns the number of scripts reactivated.
    """
    if root is None:
        return 0
    count = 0
    for script in live.select("script", root):
        if live.element_id(script) in PRESERVED_IDS:
            continue
        live.reactivate_script(script)
        count += 1
    return count


def merge_document(live: LiveDocument, fetched: LiveDocument) -> None:
    """Apply a fetched document to the live one in place."""
    update_title(live, fetched)
    merge_head(live, fetched)
    replace_body(live, fetched)
    reactivate_scripts(live, live.body)
    reactivate_scripts(live, live.head)
