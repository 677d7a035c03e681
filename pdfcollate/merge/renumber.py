"""Object renumbering passes."""

from __future__ import annotations

import logging

from ..core.model import ObjectId, map_references
from .graph import DocumentGraph

LOGGER = logging.getLogger("pdfcollate.merge")


def _apply_mapping(graph: DocumentGraph, mapping: dict[ObjectId, ObjectId]) -> None:
    dangling: set[ObjectId] = set()

    def remap(object_id: ObjectId) -> ObjectId | None:
        target = mapping.get(object_id)
        if target is None:
            dangling.add(object_id)
        return target

    graph.objects = {
        mapping[old_id]: map_references(value, remap)
        for old_id, value in graph.objects.items()
    }
    graph.trailer = map_references(graph.trailer, remap)
    graph.max_id = max((oid.number for oid in graph.objects), default=0)
    if dangling:
        LOGGER.debug(
            "Replaced %d reference(s) to missing objects with null", len(dangling)
        )


def shift_graph(graph: DocumentGraph, offset: int) -> int:
    """Move every id of *graph* to ``offset`` and above; return the next offset.

    Ids are assigned in ascending order of the old ids, all with generation 0.
    References to objects the graph does not contain become null so they can
    never alias an object of another graph.
    """

    if not graph.objects:
        return offset
    mapping = {
        old_id: ObjectId(offset + index, 0)
        for index, old_id in enumerate(sorted(graph.objects))
    }
    _apply_mapping(graph, mapping)
    return graph.max_id + 1


def compact_ids(graph: DocumentGraph) -> dict[ObjectId, ObjectId]:
    """Renumber *graph* densely from 1 and return the old-to-new mapping."""

    mapping = {
        old_id: ObjectId(index, 0)
        for index, old_id in enumerate(sorted(graph.objects), start=1)
    }
    _apply_mapping(graph, mapping)
    LOGGER.debug("Renumbered %d object(s) densely", len(mapping))
    return mapping


__all__ = ["shift_graph", "compact_ids"]
