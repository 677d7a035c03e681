"""Structural classification of renumbered source objects."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from ..core.config import MergeSettings
from ..core.model import Dictionary, Name, ObjectId
from .exceptions import MissingCatalogError, MissingPagesError
from .graph import INHERITABLE_ATTRIBUTES, DocumentGraph, SourceDocument
from .outline import Bookmark

LOGGER = logging.getLogger("pdfcollate.merge")

OUTLINE_TYPES = frozenset({"Outlines", "Outline"})


@dataclass(slots=True)
class PageRecord:
    """A page collected from a source document, ordered by ``(rank, order)``."""

    object_id: ObjectId
    dictionary: Dictionary
    rank: int
    order: int


@dataclass
class Classification:
    """Outcome of partitioning every source object by structural role."""

    catalog: tuple[ObjectId, Dictionary] | None = None
    pages: tuple[ObjectId, Dictionary] | None = None
    page_records: list[PageRecord] = field(default_factory=list)
    bookmarks: list[Bookmark] = field(default_factory=list)
    pool: dict[ObjectId, Any] = field(default_factory=dict)
    info_id: ObjectId | None = None
    dropped: int = 0

    @property
    def catalog_id(self) -> ObjectId:
        if self.catalog is None:
            raise MissingCatalogError()
        return self.catalog[0]

    @property
    def pages_id(self) -> ObjectId:
        if self.pages is None:
            raise MissingPagesError()
        return self.pages[0]


def _outline_items(graph: DocumentGraph, roots: Sequence[ObjectId]) -> set[ObjectId]:
    """Return every outline node reachable from *roots* via First/Next links."""

    found: set[ObjectId] = set()
    pending = list(roots)
    while pending:
        node_id = pending.pop()
        if node_id in found:
            continue
        found.add(node_id)
        node = graph.get_dictionary(node_id)
        if node is None:
            continue
        for key in ("First", "Next"):
            target = node.get_reference(key)
            if target is not None:
                pending.append(target)
    return found


def _collect_pages(
    document: SourceDocument, rank: int
) -> tuple[list[PageRecord], set[ObjectId]]:
    graph = document.graph
    records: list[PageRecord] = []
    seen: set[ObjectId] = set()
    for order, (page_id, inherited) in enumerate(graph.walk_page_tree()):
        page = graph.get_dictionary(page_id)
        if page is None:
            continue
        page = page.copy()
        for key, value in inherited.items():
            page.setdefault(key, value)
        page.setdefault("Type", Name("Page"))
        records.append(PageRecord(page_id, page, rank, order))
        seen.add(page_id)
    return records, seen


def classify(
    documents: Sequence[SourceDocument],
    settings: MergeSettings | None = None,
) -> Classification:
    """Partition the objects of every document by their ``/Type``.

    Documents must already be renumbered into disjoint id ranges and sorted.
    The first Catalog and the first Pages encountered survive; later Pages
    dictionaries contribute the non-inheritable keys the survivor lacks.
    Pages are collected in reading order, each carrying the inheritable
    attributes it resolves through its own tree, and a bookmark is emitted
    for the first page of each document contributing pages.
    """

    settings = settings or MergeSettings()
    result = Classification()
    counter = 1

    for rank, document in enumerate(documents):
        graph = document.graph
        records, page_ids = _collect_pages(document, rank)
        outline_roots = [
            oid for oid in graph.objects if graph.type_name(oid) == "Outlines"
        ]
        outline_ids = _outline_items(graph, outline_roots)

        if rank == 0 and settings.copy_metadata:
            result.info_id = graph.info_id

        for object_id in sorted(graph.objects):
            value = graph.objects[object_id]
            if object_id in page_ids:
                continue
            if object_id in outline_ids:
                result.dropped += 1
                continue
            type_name = graph.type_name(object_id)
            if not isinstance(value, Dictionary):
                result.pool[object_id] = value
            elif type_name == "Catalog":
                if result.catalog is None:
                    result.catalog = (object_id, value.copy())
                else:
                    result.dropped += 1
            elif type_name == "Pages":
                if result.pages is None:
                    result.pages = (object_id, value.copy())
                else:
                    survivor = result.pages[1]
                    for key, item in value.items():
                        if key not in INHERITABLE_ATTRIBUTES:
                            survivor.setdefault(key, item)
                    result.dropped += 1
            elif type_name == "Page" or type_name in OUTLINE_TYPES:
                LOGGER.debug("Dropping %s object %s from %s", type_name, object_id, document.name)
                result.dropped += 1
            else:
                result.pool[object_id] = value

        if records:
            first = records[0]
            result.bookmarks.append(
                Bookmark(
                    f"{settings.bookmark_prefix}{counter}",
                    settings.bookmark_color,
                    0,
                    first.object_id,
                )
            )
            counter += 1
        result.page_records.extend(records)
        LOGGER.debug("Classified %s: %d page(s)", document.name, len(records))

    if result.catalog is None:
        raise MissingCatalogError()
    if result.pages is None:
        raise MissingPagesError()
    return result


__all__ = ["PageRecord", "Classification", "classify", "OUTLINE_TYPES"]
