"""pypdf backed codec translating PDF files to and from object graphs.

Reading walks every object reachable from the trailer's ``Root`` and
``Info`` entries with :class:`pypdf.PdfReader` and converts the
:mod:`pypdf.generic` values into :mod:`pdfcollate.core.model` values.
Writing serializes each object with pypdf's ``write_to_stream`` and emits a
classic cross-reference table, keeping the object numbers of the graph.
"""

from __future__ import annotations

from collections import deque
from io import BytesIO
import logging
import os
from pathlib import Path
import tempfile
from typing import IO, Any, Union

from pypdf import PasswordType, PdfReader
from pypdf.filters import FlateDecode
from pypdf.generic import (
    ArrayObject,
    BooleanObject,
    ByteStringObject,
    DecodedStreamObject,
    DictionaryObject,
    FloatObject,
    IndirectObject,
    NameObject,
    NullObject,
    NumberObject,
    StreamObject,
    TextStringObject,
    create_string_object,
)

from ..core.model import Dictionary, Name, ObjectId, Reference, Stream, String
from .exceptions import PdfLoadError, PdfWriteError
from .graph import DocumentGraph

LOGGER = logging.getLogger("pdfcollate.codec")

Source = Union[str, Path, bytes, IO[bytes]]

# Cross-reference and object streams are regenerated on write.
_REGENERATED_TYPES = frozenset({"XRef", "ObjStm"})
_BINARY_MARKER = b"%\xe2\xe3\xcf\xd3\n"


# -- Reading -----------------------------------------------------------------


def _open_reader(source: Source) -> PdfReader:
    if isinstance(source, (bytes, bytearray)):
        reader = PdfReader(BytesIO(bytes(source)))
    elif isinstance(source, (str, Path)):
        reader = PdfReader(str(source))
    else:
        reader = PdfReader(source)
    if reader.is_encrypted:
        LOGGER.debug("Attempting to decrypt encrypted PDF %s", source)
        if reader.decrypt("") == PasswordType.NOT_DECRYPTED:
            raise PdfLoadError(f"Unable to decrypt encrypted PDF: {source}")
    return reader


def _header_version(reader: PdfReader) -> str:
    header = reader.pdf_header or ""
    if header.startswith("%PDF-"):
        return header[5:].strip() or "1.4"
    return "1.4"


def _from_pypdf(obj: Any, found: list[ObjectId]) -> Any:
    """Convert a :mod:`pypdf.generic` value, recording references in *found*."""

    if isinstance(obj, IndirectObject):
        object_id = ObjectId(obj.idnum, obj.generation)
        found.append(object_id)
        return Reference(object_id)
    if obj is None or isinstance(obj, NullObject):
        return None
    if isinstance(obj, BooleanObject):
        return bool(obj.value)
    if isinstance(obj, NameObject):
        return Name(str(obj)[1:])
    if isinstance(obj, NumberObject):
        return int(obj)
    if isinstance(obj, FloatObject):
        return float(obj)
    if isinstance(obj, (TextStringObject, ByteStringObject)):
        return String(bytes(obj.original_bytes))
    if isinstance(obj, StreamObject):
        dictionary = Dictionary(
            (str(key)[1:], _from_pypdf(value, found))
            for key, value in obj.items()
            if key != "/Length"
        )
        return Stream(dictionary, bytes(obj._data))  # type: ignore[attr-defined]
    if isinstance(obj, DictionaryObject):
        return Dictionary(
            (str(key)[1:], _from_pypdf(value, found)) for key, value in obj.items()
        )
    if isinstance(obj, ArrayObject):
        return [_from_pypdf(value, found) for value in obj]
    raise TypeError(f"Unsupported PDF object type: {type(obj).__name__}")


def read_graph(source: Source) -> DocumentGraph:
    """Parse *source* into a :class:`DocumentGraph`.

    Raises:
        PdfLoadError: If the document cannot be parsed or decrypted.
    """

    try:
        reader = _open_reader(source)
        graph = DocumentGraph(version=_header_version(reader))
        pending: deque[ObjectId] = deque()
        for key in ("Root", "Info"):
            name = NameObject(f"/{key}")
            if name not in reader.trailer:
                continue
            found: list[ObjectId] = []
            graph.trailer[key] = _from_pypdf(reader.trailer.raw_get(name), found)
            pending.extend(found)

        while pending:
            object_id = pending.popleft()
            if object_id in graph.objects:
                continue
            resolved = reader.get_object(
                IndirectObject(object_id.number, object_id.generation, reader)
            )
            if resolved is None or isinstance(resolved, NullObject):
                LOGGER.debug("Object %s is missing from %s", object_id, source)
                continue
            found = []
            value = _from_pypdf(resolved, found)
            if isinstance(value, Stream) and value.type_name in _REGENERATED_TYPES:
                continue
            graph.objects[object_id] = value
            pending.extend(found)
    except PdfLoadError:
        raise
    except Exception as exc:
        LOGGER.error("Failed to read PDF %s: %s", source, exc)
        raise PdfLoadError(f"Unable to read PDF: {source}") from exc

    graph.update_max_id()
    LOGGER.debug("Loaded %d object(s) from %s", len(graph), source)
    return graph


# -- Writing -----------------------------------------------------------------


def _to_pypdf(value: Any) -> Any:
    if value is None:
        return NullObject()
    if isinstance(value, bool):
        return BooleanObject(value)
    if isinstance(value, Name):
        return NameObject(f"/{value}")
    if isinstance(value, int):
        return NumberObject(value)
    if isinstance(value, float):
        return FloatObject(value)
    if isinstance(value, String):
        return create_string_object(value.value)
    if isinstance(value, Reference):
        return IndirectObject(value.target.number, value.target.generation, None)
    if isinstance(value, Dictionary):
        result = DictionaryObject()
        for key, item in value.items():
            result[NameObject(f"/{key}")] = _to_pypdf(item)
        return result
    if isinstance(value, Stream):
        stream = DecodedStreamObject()
        for key, item in value.dictionary.items():
            if key != "Length":
                stream[NameObject(f"/{key}")] = _to_pypdf(item)
        stream.set_data(value.data)
        return stream
    if isinstance(value, list):
        return ArrayObject(_to_pypdf(item) for item in value)
    raise TypeError(f"Cannot serialize value of type {type(value).__name__}")


def dumps(graph: DocumentGraph) -> bytes:
    """Serialize *graph* to PDF bytes, keeping its object numbers.

    :class:`pypdf.PdfWriter` assigns its own object numbers on write, so the
    header, cross-reference table and trailer are emitted here and pypdf
    only serializes the individual objects.
    """

    buffer = BytesIO()
    buffer.write(f"%PDF-{graph.version}\n".encode("ascii"))
    buffer.write(_BINARY_MARKER)

    entries: dict[int, tuple[int, int]] = {}
    for object_id in sorted(graph.objects):
        entries[object_id.number] = (buffer.tell(), object_id.generation)
        buffer.write(f"{object_id.number} {object_id.generation} obj\n".encode("ascii"))
        _to_pypdf(graph.objects[object_id]).write_to_stream(buffer)
        buffer.write(b"\nendobj\n")

    size = max(entries, default=0) + 1
    xref_offset = buffer.tell()
    buffer.write(f"xref\n0 {size}\n".encode("ascii"))
    buffer.write(b"0000000000 65535 f \n")
    for number in range(1, size):
        entry = entries.get(number)
        if entry is None:
            buffer.write(b"0000000000 00000 f \n")
        else:
            buffer.write(f"{entry[0]:010d} {entry[1]:05d} n \n".encode("ascii"))

    trailer = Dictionary(
        (key, graph.trailer[key]) for key in ("Root", "Info") if key in graph.trailer
    )
    trailer["Size"] = size
    buffer.write(b"trailer\n")
    _to_pypdf(trailer).write_to_stream(buffer)
    buffer.write(f"\nstartxref\n{xref_offset}\n%%EOF\n".encode("ascii"))
    return buffer.getvalue()


def write_graph(graph: DocumentGraph, target: str | Path) -> Path:
    """Write *graph* to *target* atomically and return the path.

    The document is serialized in memory and written to a temporary sibling
    file that replaces *target* only once it is complete.

    Raises:
        PdfWriteError: If serialization or any filesystem operation fails.
    """

    path = Path(target)
    try:
        data = dumps(graph)
    except Exception as exc:
        LOGGER.error("Failed to serialize merged PDF: %s", exc)
        raise PdfWriteError(f"Failed to serialize PDF for {path}") from exc

    temporary: Path | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "wb", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        ) as handle:
            temporary = Path(handle.name)
            handle.write(data)
        os.replace(temporary, path)
    except OSError as exc:
        if temporary is not None:
            temporary.unlink(missing_ok=True)
        LOGGER.error("Failed to write merged PDF to %s: %s", path, exc)
        raise PdfWriteError(f"Failed to write merged PDF to {path}") from exc

    LOGGER.debug("Wrote %d byte(s) to %s", len(data), path)
    return path


# -- Compaction --------------------------------------------------------------


def compress_streams(graph: DocumentGraph, *, level: int = -1) -> int:
    """Flate encode every unfiltered stream that shrinks; return the count."""

    compressed = 0
    for value in graph.objects.values():
        if not isinstance(value, Stream) or not value.data:
            continue
        if "Filter" in value.dictionary:
            continue
        encoded = FlateDecode.encode(value.data, level)
        if len(encoded) >= len(value.data):
            continue
        value.data = encoded
        value.dictionary["Filter"] = Name("FlateDecode")
        value.dictionary.pop("DecodeParms", None)
        compressed += 1
    LOGGER.debug("Compressed %d stream(s)", compressed)
    return compressed


__all__ = ["read_graph", "write_graph", "dumps", "compress_streams"]
