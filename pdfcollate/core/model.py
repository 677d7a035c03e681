"""In-memory PDF object model shared by the codec and the merge engine.

PDF objects are mapped onto plain Python values wherever the mapping is
unambiguous (``None``, ``bool``, ``int``, ``float``, ``list``) and onto the
small wrapper types below where it is not.  Indirect references never point
at Python objects; they carry an :class:`ObjectId` that is looked up in a
graph's object arena.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Optional

__all__ = [
    "ObjectId",
    "Name",
    "String",
    "Reference",
    "Dictionary",
    "Stream",
    "type_name_of",
    "iter_references",
    "map_references",
]


@dataclass(frozen=True, slots=True, order=True)
class ObjectId:
    """Identity of an indirect object within a graph."""

    number: int
    generation: int = 0

    def __str__(self) -> str:
        return f"{self.number} {self.generation} R"


class Name(str):
    """A PDF name, stored without its leading solidus."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"Name({str.__repr__(self)})"


@dataclass(frozen=True, slots=True)
class String:
    """A PDF string holding its raw (encoded) bytes."""

    value: bytes

    @classmethod
    def from_text(cls, text: str) -> "String":
        try:
            return cls(text.encode("latin-1"))
        except UnicodeEncodeError:
            return cls(b"\xfe\xff" + text.encode("utf-16-be"))

    def text(self) -> str:
        if self.value.startswith(b"\xfe\xff"):
            return self.value[2:].decode("utf-16-be", "replace")
        return self.value.decode("latin-1")


@dataclass(frozen=True, slots=True)
class Reference:
    """An indirect reference to another object of the same graph."""

    target: ObjectId


class Dictionary(dict):
    """A PDF dictionary keyed by name text (without the leading ``/``)."""

    @property
    def type_name(self) -> str | None:
        value = self.get("Type")
        if isinstance(value, Name):
            return str(value)
        return None

    def get_reference(self, key: str) -> ObjectId | None:
        value = self.get(key)
        if isinstance(value, Reference):
            return value.target
        return None

    def copy(self) -> "Dictionary":
        return Dictionary(self)


@dataclass(slots=True)
class Stream:
    """A stream object: its dictionary plus the raw, possibly filtered data."""

    dictionary: Dictionary = field(default_factory=Dictionary)
    data: bytes = b""

    @property
    def type_name(self) -> str | None:
        return self.dictionary.type_name


def type_name_of(value: Any) -> Optional[str]:
    """Return the ``/Type`` discriminator of *value*, if it carries one."""

    if isinstance(value, (Dictionary, Stream)):
        return value.type_name
    return None


def iter_references(value: Any) -> Iterator[ObjectId]:
    """Yield every object id referenced anywhere inside *value*."""

    pending = [value]
    while pending:
        current = pending.pop()
        if isinstance(current, Reference):
            yield current.target
        elif isinstance(current, Dictionary):
            pending.extend(reversed(list(current.values())))
        elif isinstance(current, list):
            pending.extend(reversed(current))
        elif isinstance(current, Stream):
            pending.append(current.dictionary)


def map_references(
    value: Any, remap: Callable[[ObjectId], ObjectId | None]
) -> Any:
    """Return a copy of *value* with every reference rewritten by *remap*.

    A ``None`` result from *remap* replaces the reference with null, which is
    how PDF readers interpret a reference to a missing object.
    """

    if isinstance(value, Reference):
        target = remap(value.target)
        return Reference(target) if target is not None else None
    if isinstance(value, Dictionary):
        return Dictionary(
            (key, map_references(item, remap)) for key, item in value.items()
        )
    if isinstance(value, list):
        return [map_references(item, remap) for item in value]
    if isinstance(value, Stream):
        return Stream(map_references(value.dictionary, remap), value.data)
    return value
