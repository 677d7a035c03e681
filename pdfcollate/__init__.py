"""Merge every PDF below a directory into one navigable document."""

from __future__ import annotations

from pathlib import Path
from typing import Any

__version__ = "1.0.0"

from . import merge
from .core.config import DEFAULT_OUTPUT_NAME, MergeSettings
from .merge import (
    Bookmark,
    DiscoveryError,
    DocumentGraph,
    MergeReport,
    MissingCatalogError,
    MissingPagesError,
    PdfLoadError,
    PdfMergeError,
    PdfWriteError,
    SourceDocument,
    StructuralError,
    discover_documents,
    merge_directory,
    merge_graphs,
    merge_pdfs,
    read_graph,
    write_graph,
)
from .tools import load_builtin_plugins
from .tools.common.interfaces import ToolContext
from .tools.common.pipeline import ToolRegistry, register_tool, registry

load_builtin_plugins()

__all__ = [
    "__version__",
    "merge",
    "merge_pdfs",
    "merge_directory",
    "merge_graphs",
    "merge_documents",
    "discover",
    "discover_documents",
    "read_graph",
    "write_graph",
    "MergeSettings",
    "DEFAULT_OUTPUT_NAME",
    "DocumentGraph",
    "SourceDocument",
    "Bookmark",
    "MergeReport",
    "ToolContext",
    "ToolRegistry",
    "registry",
    "register_tool",
    "PdfMergeError",
    "DiscoveryError",
    "PdfLoadError",
    "StructuralError",
    "MissingCatalogError",
    "MissingPagesError",
    "PdfWriteError",
]


def discover(input: str | Path = ".", **config: Any) -> list[SourceDocument]:
    """Convenience wrapper around the discover plugin."""

    context = ToolContext(input_path=input, config=config)
    return registry.run("discover", context)


def merge_documents(
    input: str | Path = ".",
    output: str | Path = DEFAULT_OUTPUT_NAME,
    **config: Any,
) -> MergeReport:
    """Convenience wrapper around the merge plugin."""

    context = ToolContext(input_path=input, output_path=output, config=config)
    return registry.run("merge", context)
