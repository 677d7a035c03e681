"""Recursive source discovery for merge runs."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Collection, Iterator, Sequence

from ..core.config import MergeSettings
from .codec import read_graph
from .exceptions import DiscoveryError, PdfLoadError
from .graph import SourceDocument
from .utils import PathLike, ensure_path

LOGGER = logging.getLogger("pdfcollate.discovery")


def _entries(directory: Path) -> list[Path]:
    try:
        return list(directory.iterdir())
    except OSError as exc:
        raise DiscoveryError(f"Unable to read directory {directory}") from exc


def _is_candidate(
    path: Path,
    extension: str,
    exclude_names: Collection[str],
    exclude_paths: Collection[Path],
) -> bool:
    if not path.name.lower().endswith(extension.lower()):
        return False
    if path.name in exclude_names:
        return False
    return ensure_path(path) not in exclude_paths


def find_pdf_files(
    root: PathLike,
    *,
    extension: str = ".pdf",
    exclude_names: Collection[str] = (),
    exclude_paths: Collection[PathLike] = (),
) -> Iterator[Path]:
    """Yield candidate document paths below *root*.

    Symbolic links are not followed. Entries that cannot be inspected are
    logged and skipped so a single unreadable directory does not abort the
    scan.
    """

    excluded = {ensure_path(path) for path in exclude_paths}
    pending = [Path(root)]
    while pending:
        directory = pending.pop()
        try:
            entries = sorted(_entries(directory))
        except DiscoveryError as exc:
            LOGGER.warning("%s: %s", exc, exc.__cause__)
            continue
        subdirectories: list[Path] = []
        for entry in entries:
            try:
                if entry.is_symlink():
                    continue
                if entry.is_dir():
                    subdirectories.append(entry)
                elif entry.is_file() and _is_candidate(
                    entry, extension, exclude_names, excluded
                ):
                    yield entry
            except OSError as exc:
                LOGGER.warning("Skipping unreadable entry %s: %s", entry, exc)
        pending.extend(reversed(subdirectories))


def load_documents(paths: Sequence[PathLike]) -> list[SourceDocument]:
    """Load every path with the codec, skipping documents that fail to parse."""

    documents: list[SourceDocument] = []
    for item in paths:
        path = Path(item)
        try:
            graph = read_graph(path)
        except PdfLoadError as exc:
            LOGGER.warning("Skipping %s: %s", path, exc)
            continue
        except OSError as exc:
            LOGGER.warning("Skipping unreadable file %s: %s", path, exc)
            continue
        documents.append(SourceDocument(graph=graph, name=path.name, path=path))
    return documents


def document_sort_key(document: SourceDocument) -> tuple[bytes, bytes]:
    """Byte-wise name ordering; the full path only breaks ties."""

    path = str(document.path) if document.path is not None else ""
    return (
        document.name.encode("utf-8", "surrogateescape"),
        path.encode("utf-8", "surrogateescape"),
    )


def sort_documents(documents: Sequence[SourceDocument]) -> list[SourceDocument]:
    return sorted(documents, key=document_sort_key)


def discover_documents(
    root: PathLike,
    *,
    settings: MergeSettings | None = None,
    output: PathLike | None = None,
) -> list[SourceDocument]:
    """Find, load and order every document below *root*.

    The reserved output name and, when given, the *output* path itself are
    never picked up as inputs.
    """

    settings = settings or MergeSettings()
    exclude_names = {settings.output_name}
    exclude_paths = [output] if output is not None else []
    paths = list(
        find_pdf_files(
            root,
            extension=settings.extension,
            exclude_names=exclude_names,
            exclude_paths=exclude_paths,
        )
    )
    LOGGER.debug("Found %d candidate file(s) under %s", len(paths), root)
    return sort_documents(load_documents(paths))


__all__ = [
    "find_pdf_files",
    "load_documents",
    "sort_documents",
    "document_sort_key",
    "discover_documents",
]
