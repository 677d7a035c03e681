"""Configuration for merge runs."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

DEFAULT_OUTPUT_NAME = "merged.pdf"
PDF_EXTENSION = ".pdf"


@dataclass(frozen=True, slots=True)
class MergeSettings:
    """Options controlling discovery, merging and output.

    ``annotate`` mirrors the ``--anno`` command line flag. It is accepted and
    carried through the tool context but does not change the merged output.
    """

    output_name: str = DEFAULT_OUTPUT_NAME
    extension: str = PDF_EXTENSION
    bookmark_prefix: str = "Page_"
    bookmark_color: tuple[float, float, float] = (0.0, 0.0, 1.0)
    min_version: str = "1.5"
    copy_metadata: bool = True
    compress: bool = True
    annotate: bool = False

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any] | None) -> "MergeSettings":
        if not config:
            return cls()
        known = {item.name for item in fields(cls)}
        values = {
            key: value
            for key, value in config.items()
            if key in known and value is not None
        }
        if "bookmark_color" in values:
            values["bookmark_color"] = tuple(float(c) for c in values["bookmark_color"])
        return cls(**values)


__all__ = ["MergeSettings", "DEFAULT_OUTPUT_NAME", "PDF_EXTENSION"]
