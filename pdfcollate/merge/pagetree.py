"""Page tree reassembly and catalog finalization."""

from __future__ import annotations

import logging

from ..core.config import MergeSettings
from ..core.model import Dictionary, Reference
from .classifier import Classification
from .graph import INHERITABLE_ATTRIBUTES, DocumentGraph

LOGGER = logging.getLogger("pdfcollate.merge")


def reassemble_page_tree(classification: Classification, graph: DocumentGraph) -> int:
    """Insert every collected page below the surviving Pages node.

    Pages are placed in merge order (document rank, then reading order);
    that order becomes the ``Kids`` array. Inheritable attributes are
    already resolved onto every page, so the merged root carries none.
    Returns the page count.
    """

    pages_id, pages = classification.pages_id, classification.pages[1]
    records = sorted(
        classification.page_records, key=lambda record: (record.rank, record.order)
    )
    kids: list[Reference] = []
    for record in records:
        page = record.dictionary.copy()
        page["Parent"] = Reference(pages_id)
        graph.objects[record.object_id] = page
        kids.append(Reference(record.object_id))

    tree = Dictionary(pages)
    for key in ("Parent", *INHERITABLE_ATTRIBUTES):
        tree.pop(key, None)
    tree["Kids"] = kids
    tree["Count"] = len(kids)
    graph.objects[pages_id] = tree
    LOGGER.debug("Page tree %s holds %d page(s)", pages_id, len(kids))
    return len(kids)


def finalize_catalog(
    classification: Classification,
    graph: DocumentGraph,
    settings: MergeSettings | None = None,
) -> None:
    """Point the surviving catalog at the merged page tree and root the trailer."""

    settings = settings or MergeSettings()
    catalog_id, catalog = classification.catalog_id, classification.catalog[1]
    catalog = Dictionary(catalog)
    catalog["Pages"] = Reference(classification.pages_id)
    catalog.pop("Outlines", None)
    graph.objects[catalog_id] = catalog

    graph.trailer = Dictionary({"Root": Reference(catalog_id)})
    info_id = classification.info_id
    if settings.copy_metadata and info_id is not None and info_id in graph.objects:
        graph.trailer["Info"] = Reference(info_id)


__all__ = ["reassemble_page_tree", "finalize_catalog"]
