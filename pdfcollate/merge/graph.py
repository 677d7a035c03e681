"""Object arena representing one PDF document."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator

from ..core.model import Dictionary, ObjectId, Reference, type_name_of

INHERITABLE_ATTRIBUTES = ("Resources", "MediaBox", "CropBox", "Rotate")


@dataclass
class DocumentGraph:
    """Mapping of object ids to objects plus the trailer that roots them.

    Every relationship between objects (``Parent``, ``Kids``, ``Root`` ...) is
    expressed as a :class:`~pdfcollate.core.model.Reference` into
    :attr:`objects`; renumbering is therefore a re-indexing of this mapping.
    """

    objects: dict[ObjectId, Any] = field(default_factory=dict)
    trailer: Dictionary = field(default_factory=Dictionary)
    version: str = "1.5"
    max_id: int = 0

    def __post_init__(self) -> None:
        self.update_max_id()

    def __len__(self) -> int:
        return len(self.objects)

    def __contains__(self, object_id: object) -> bool:
        return object_id in self.objects

    def update_max_id(self) -> int:
        highest = max((oid.number for oid in self.objects), default=0)
        self.max_id = max(self.max_id, highest)
        return self.max_id

    def add_object(self, value: Any) -> ObjectId:
        self.max_id += 1
        object_id = ObjectId(self.max_id, 0)
        self.objects[object_id] = value
        return object_id

    def get(self, object_id: ObjectId | None, default: Any = None) -> Any:
        if object_id is None:
            return default
        return self.objects.get(object_id, default)

    def get_dictionary(self, object_id: ObjectId | None) -> Dictionary | None:
        value = self.get(object_id)
        return value if isinstance(value, Dictionary) else None

    def type_name(self, object_id: ObjectId) -> str | None:
        return type_name_of(self.objects.get(object_id))

    @property
    def root_id(self) -> ObjectId | None:
        return self.trailer.get_reference("Root")

    @property
    def info_id(self) -> ObjectId | None:
        return self.trailer.get_reference("Info")

    def catalog(self) -> Dictionary | None:
        return self.get_dictionary(self.root_id)

    @property
    def pages_root_id(self) -> ObjectId | None:
        catalog = self.catalog()
        if catalog is None:
            return None
        return catalog.get_reference("Pages")

    def walk_page_tree(self) -> Iterator[tuple[ObjectId, dict[str, Any]]]:
        """Yield ``(page id, inherited attributes)`` in reading order.

        Intermediate nodes are recognised by ``/Type /Pages`` or, when the
        type is missing, by a ``Kids`` array. Nodes reached twice are skipped
        so malformed, cyclic trees terminate.
        """

        root = self.pages_root_id
        if root is None:
            return
        visited: set[ObjectId] = set()
        stack: list[tuple[ObjectId, dict[str, Any]]] = [(root, {})]
        while stack:
            node_id, inherited = stack.pop()
            if node_id in visited:
                continue
            visited.add(node_id)
            node = self.get_dictionary(node_id)
            if node is None:
                continue
            kids = node.get("Kids")
            if node.type_name == "Pages" or (
                node.type_name is None and isinstance(kids, list)
            ):
                scope = dict(inherited)
                scope.update(
                    (key, node[key]) for key in INHERITABLE_ATTRIBUTES if key in node
                )
                children = [
                    kid.target for kid in (kids or []) if isinstance(kid, Reference)
                ]
                stack.extend((child, scope) for child in reversed(children))
            else:
                yield node_id, inherited

    def page_ids(self) -> list[ObjectId]:
        return [page_id for page_id, _ in self.walk_page_tree()]


@dataclass
class SourceDocument:
    """A loaded input document and the name it is ordered by."""

    graph: DocumentGraph
    name: str
    path: Path | None = None

    @property
    def page_count(self) -> int:
        return len(self.graph.page_ids())


__all__ = ["DocumentGraph", "SourceDocument", "INHERITABLE_ATTRIBUTES"]
