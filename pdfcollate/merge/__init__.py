"""Merge engine for the :mod:`pdfcollate` toolkit."""

from __future__ import annotations

from .classifier import Classification, PageRecord, classify
from .codec import compress_streams, dumps, read_graph, write_graph
from .discovery import discover_documents, find_pdf_files, load_documents, sort_documents
from .exceptions import (
    DiscoveryError,
    MissingCatalogError,
    MissingPagesError,
    PdfLoadError,
    PdfMergeError,
    PdfWriteError,
    StructuralError,
)
from .graph import DocumentGraph, SourceDocument
from .merger import (
    MergeReport,
    MergeState,
    merge_directory,
    merge_graphs,
    merge_pdfs,
    merge_sources,
    run_merge_passes,
)
from .outline import Bookmark, adjust_bookmark_targets, build_outline
from .pagetree import finalize_catalog, reassemble_page_tree
from .renumber import compact_ids, shift_graph

__all__ = [
    "merge_pdfs",
    "merge_directory",
    "merge_sources",
    "merge_graphs",
    "run_merge_passes",
    "discover_documents",
    "find_pdf_files",
    "load_documents",
    "sort_documents",
    "read_graph",
    "write_graph",
    "dumps",
    "compress_streams",
    "shift_graph",
    "compact_ids",
    "classify",
    "reassemble_page_tree",
    "finalize_catalog",
    "adjust_bookmark_targets",
    "build_outline",
    "DocumentGraph",
    "SourceDocument",
    "Classification",
    "PageRecord",
    "Bookmark",
    "MergeState",
    "MergeReport",
    "PdfMergeError",
    "DiscoveryError",
    "PdfLoadError",
    "StructuralError",
    "MissingCatalogError",
    "MissingPagesError",
    "PdfWriteError",
]
