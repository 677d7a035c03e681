"""Bookmark accumulation and outline tree construction."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Sequence

from ..core.model import Dictionary, Name, ObjectId, Reference, String
from .graph import DocumentGraph

LOGGER = logging.getLogger("pdfcollate.merge")

DEFAULT_COLOR = (0.0, 0.0, 1.0)


@dataclass(frozen=True, slots=True)
class Bookmark:
    """A navigation entry pointing at a page."""

    title: str
    color: tuple[float, float, float] = DEFAULT_COLOR
    level: int = 0
    target: ObjectId | None = None


def _first_leaf(graph: DocumentGraph, node_id: ObjectId) -> ObjectId | None:
    visited: set[ObjectId] = set()
    current: ObjectId | None = node_id
    while current is not None and current not in visited:
        visited.add(current)
        node = graph.get_dictionary(current)
        if node is None:
            return None
        if node.type_name == "Page":
            return current
        kids = node.get("Kids")
        if not isinstance(kids, list) or not kids:
            return None
        first = kids[0]
        current = first.target if isinstance(first, Reference) else None
    return None


def adjust_bookmark_targets(
    graph: DocumentGraph,
    bookmarks: Sequence[Bookmark],
    mapping: dict[ObjectId, ObjectId] | None = None,
) -> list[Bookmark]:
    """Remap bookmark targets after renumbering and repair unresolved ones.

    A target that is not a page any more is moved to the first page below it
    when it names a page tree node, otherwise to the page following the
    previous bookmark's target, falling back to the first page.
    """

    pages = graph.page_ids()
    positions = {page_id: index for index, page_id in enumerate(pages)}
    adjusted: list[Bookmark] = []
    previous: int | None = None
    for bookmark in bookmarks:
        target = bookmark.target
        if target is not None and mapping is not None:
            target = mapping.get(target)
        if target not in positions:
            leaf = _first_leaf(graph, target) if target is not None else None
            if leaf in positions:
                target = leaf
            elif pages:
                index = 0 if previous is None else min(previous + 1, len(pages) - 1)
                target = pages[index]
            else:
                target = None
            LOGGER.debug("Bookmark %r retargeted to %s", bookmark.title, target)
        if target is not None:
            previous = positions[target]
        adjusted.append(replace(bookmark, target=target))
    return adjusted


def build_outline(graph: DocumentGraph, bookmarks: Sequence[Bookmark]) -> ObjectId | None:
    """Add a fresh outline tree for *bookmarks* to *graph*.

    Returns the id of the ``Outlines`` root, or ``None`` when there is nothing
    to build. Bookmarks without a resolvable target are skipped.
    """

    entries = [bookmark for bookmark in bookmarks if bookmark.target is not None]
    if not entries:
        return None

    root = Dictionary({"Type": Name("Outlines")})
    root_id = graph.add_object(root)
    children: dict[ObjectId, list[ObjectId]] = {root_id: []}
    # Most recent item per nesting level; a bookmark hangs below the
    # latest item one level up.
    chain: list[ObjectId] = [root_id]

    for bookmark in entries:
        level = max(0, min(bookmark.level, len(chain) - 1))
        parent_id = chain[level]
        item = Dictionary(
            {
                "Title": String.from_text(bookmark.title),
                "Parent": Reference(parent_id),
                "Dest": [Reference(bookmark.target), Name("Fit")],
                "C": [float(c) for c in bookmark.color],
                "F": 0,
            }
        )
        item_id = graph.add_object(item)
        children.setdefault(parent_id, []).append(item_id)
        children[item_id] = []
        del chain[level + 1 :]
        chain.append(item_id)

    # Items are open, so Count covers every descendant. Children are always
    # created after their parent, so reverse creation order visits them first.
    descendants: dict[ObjectId, int] = {}
    for parent_id in reversed(list(children)):
        kids = children[parent_id]
        descendants[parent_id] = sum(1 + descendants[kid] for kid in kids)
        if not kids:
            continue
        parent = graph.objects[parent_id]
        parent["First"] = Reference(kids[0])
        parent["Last"] = Reference(kids[-1])
        parent["Count"] = descendants[parent_id]
        for previous_id, next_id in zip(kids, kids[1:]):
            graph.objects[previous_id]["Next"] = Reference(next_id)
            graph.objects[next_id]["Prev"] = Reference(previous_id)

    LOGGER.debug("Built outline with %d item(s)", len(entries))
    return root_id


__all__ = ["Bookmark", "adjust_bookmark_targets", "build_outline"]
