"""Plugins exposing discovery and merge through the registry."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from ...core.utils import get_logger
from ...merge.discovery import discover_documents
from ...merge.exceptions import PdfMergeError
from ...merge.graph import SourceDocument
from ...merge.merger import MergeReport, merge_sources
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool

LOGGER = get_logger("pdfcollate.tools.merge")


@register_tool("discover")
class DiscoverTool(BaseTool):
    def run(self) -> list[SourceDocument]:
        context = self.context
        root = context.input_path or Path(".").resolve()
        documents = discover_documents(
            root, settings=context.settings(), output=context.output_path
        )
        LOGGER.debug("Discovered %d document(s) under %s", len(documents), root)
        context.resources["documents"] = documents
        return documents


@register_tool("merge")
class MergeTool(BaseTool):
    def run(self) -> MergeReport:
        context = self.context
        settings = context.settings()
        output = context.output_path
        if output is None:
            output = Path(settings.output_name).resolve()

        documents: Sequence[SourceDocument] | None = context.resources.get("documents")
        if documents is None:
            if context.input_path is None:
                raise PdfMergeError("Merge tool requires documents or an input path")
            documents = discover_documents(
                context.input_path, settings=settings, output=output
            )

        if settings.annotate:
            LOGGER.debug("File name annotation requested; it does not alter the output")

        LOGGER.debug("Merging %d document(s) into %s", len(documents), output)
        report = merge_sources(documents, output, settings=settings)
        context.resources["result"] = report
        return report
