"""Path helpers for :mod:`pdfcollate.merge`."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Union

PathLike = Union[str, Path]


def ensure_path(path: PathLike) -> Path:
    """Return an absolute :class:`~pathlib.Path` for *path*."""

    return Path(path).expanduser().resolve(strict=False)


def ensure_iterable(paths: Iterable[PathLike]) -> list[Path]:
    """Convert an iterable of paths to resolved :class:`Path` objects."""

    return [ensure_path(path) for path in paths]


__all__ = ["PathLike", "ensure_path", "ensure_iterable"]
