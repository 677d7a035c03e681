"""Command line entry points for pdfcollate."""

from .main import cli, main

__all__ = ["cli", "main"]
