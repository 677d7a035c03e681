"""Merge functionality for the :mod:`pdfcollate.merge` package."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Iterable, Sequence

from ..core.config import MergeSettings
from ..core.model import Reference
from ..core.utils import version_tuple
from .classifier import classify
from .codec import compress_streams, write_graph
from .discovery import discover_documents, load_documents, sort_documents
from .exceptions import PdfMergeError
from .graph import DocumentGraph, SourceDocument
from .outline import Bookmark, adjust_bookmark_targets, build_outline
from .pagetree import finalize_catalog, reassemble_page_tree
from .renumber import compact_ids, shift_graph
from .utils import PathLike, ensure_iterable, ensure_path

LOGGER = logging.getLogger("pdfcollate.merge")


@dataclass
class MergeState:
    """Aggregate state handed from one merge pass to the next."""

    offset: int = 1
    page_count: int = 0
    bookmarks: list[Bookmark] = field(default_factory=list)
    graph: DocumentGraph = field(default_factory=DocumentGraph)


@dataclass
class MergeReport:
    """Summary of a merge run shared by the API, the tools and the CLI."""

    output: Path | None
    documents: list[tuple[str, int]] = field(default_factory=list)
    page_count: int = 0
    bookmarks: list[Bookmark] = field(default_factory=list)

    @property
    def merged(self) -> bool:
        return self.output is not None


def _output_version(documents: Sequence[SourceDocument], settings: MergeSettings) -> str:
    versions = [settings.min_version, *(doc.graph.version for doc in documents)]
    return max(versions, key=version_tuple)


def renumber_documents(documents: Sequence[SourceDocument], offset: int = 1) -> int:
    """Give every document a disjoint id range, in order; return the next offset."""

    for document in documents:
        offset = shift_graph(document.graph, offset)
        LOGGER.debug("Renumbered %s; next offset %d", document.name, offset)
    return offset


def run_merge_passes(
    documents: Sequence[SourceDocument],
    settings: MergeSettings | None = None,
) -> MergeState:
    """Run every merge pass over *documents* and return the final state.

    *documents* must already be in merge order. Their graphs are consumed:
    objects are renumbered in place and moved into the merged graph.

    Raises:
        MissingCatalogError: If no document holds a catalog.
        MissingPagesError: If no document holds a page tree.
    """

    settings = settings or MergeSettings()
    state = MergeState()
    state.offset = renumber_documents(documents, state.offset)

    classification = classify(documents, settings)
    state.graph = DocumentGraph(
        objects=dict(classification.pool),
        version=_output_version(documents, settings),
    )
    state.page_count = reassemble_page_tree(classification, state.graph)
    finalize_catalog(classification, state.graph, settings)

    mapping = compact_ids(state.graph)
    catalog_id = mapping[classification.catalog_id]
    state.bookmarks = adjust_bookmark_targets(
        state.graph, classification.bookmarks, mapping
    )
    outline_id = build_outline(state.graph, state.bookmarks)
    if outline_id is not None:
        state.graph.objects[catalog_id]["Outlines"] = Reference(outline_id)

    if settings.compress:
        compress_streams(state.graph)

    LOGGER.info(
        "Merged %d document(s): %d page(s), %d object(s)",
        len(documents),
        state.page_count,
        len(state.graph),
    )
    return state


def merge_graphs(
    documents: Sequence[SourceDocument],
    *,
    settings: MergeSettings | None = None,
) -> DocumentGraph:
    """Merge already ordered *documents* into one graph."""

    return run_merge_passes(documents, settings).graph


def merge_sources(
    documents: Sequence[SourceDocument],
    output: PathLike,
    *,
    settings: MergeSettings | None = None,
) -> MergeReport:
    """Merge loaded *documents* (sorted by name) and write the result.

    With no documents nothing is merged or written and the report carries no
    output path.
    """

    documents = sort_documents(documents)
    summary = [(document.name, document.page_count) for document in documents]
    if not documents:
        LOGGER.info("No documents to merge")
        return MergeReport(output=None)

    output_path = ensure_path(output)
    state = run_merge_passes(documents, settings)
    write_graph(state.graph, output_path)
    LOGGER.info("Merged %d PDFs into %s", len(documents), output_path)
    return MergeReport(
        output=output_path,
        documents=summary,
        page_count=state.page_count,
        bookmarks=state.bookmarks,
    )


def merge_pdfs(
    inputs: Iterable[PathLike],
    output: PathLike,
    *,
    metadata: bool = True,
    compress: bool = True,
) -> Path:
    """Merge *inputs* into *output* and return the resulting path.

    Args:
        inputs: Paths of the PDF files to merge. They are ordered by file
            name; files that cannot be parsed are skipped.
        output: The output file path that will contain the merged PDF.
        metadata: When ``True`` the document information dictionary of the
            first input is kept as the merged document's metadata.
        compress: When ``True`` unfiltered streams are Flate compressed.

    Raises:
        PdfMergeError: If there is nothing to merge, or merging or writing
            fails.
    """

    pdf_paths = ensure_iterable(inputs)
    if not pdf_paths:
        raise PdfMergeError("No input PDFs provided")

    documents = load_documents(pdf_paths)
    if not documents:
        raise PdfMergeError("None of the input PDFs could be loaded")

    settings = MergeSettings(copy_metadata=metadata, compress=compress)
    report = merge_sources(documents, output, settings=settings)
    if report.output is None:
        raise PdfMergeError("Nothing was merged")
    return report.output


def merge_directory(
    root: PathLike,
    output: PathLike | None = None,
    *,
    settings: MergeSettings | None = None,
) -> MergeReport:
    """Merge every document found below *root* into *output*.

    *output* defaults to the reserved output name in the working directory.
    """

    settings = settings or MergeSettings()
    output_path = ensure_path(output if output is not None else settings.output_name)
    documents = discover_documents(root, settings=settings, output=output_path)
    return merge_sources(documents, output_path, settings=settings)


__all__ = [
    "MergeState",
    "MergeReport",
    "renumber_documents",
    "run_merge_passes",
    "merge_graphs",
    "merge_sources",
    "merge_pdfs",
    "merge_directory",
]
