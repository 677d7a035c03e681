"""Namespace for pluggable pdfcollate tools."""

from __future__ import annotations

from .common.pipeline import registry


def load_builtin_plugins() -> None:
    from .merger import merge  # noqa: F401  # register discover and merge tools


__all__ = ["registry", "load_builtin_plugins"]
