"""Custom exceptions for the :mod:`pdfcollate.merge` package."""

from __future__ import annotations


class PdfMergeError(Exception):
    """Raised when the merge operation fails."""


class DiscoveryError(PdfMergeError):
    """Raised when a directory entry cannot be inspected during a scan."""


class PdfLoadError(PdfMergeError):
    """Raised when a source document cannot be parsed."""


class StructuralError(PdfMergeError):
    """Raised when the inputs lack a structural root every pass depends on."""


class MissingCatalogError(StructuralError):
    """No input graph contains a document catalog."""

    def __init__(self, message: str = "Catalog root not found") -> None:
        super().__init__(message)


class MissingPagesError(StructuralError):
    """No input graph contains a page tree root."""

    def __init__(self, message: str = "Pages root not found") -> None:
        super().__init__(message)


class PdfWriteError(PdfMergeError):
    """Raised when the merged document cannot be written."""

