"""Context and base class shared by pdfcollate tools."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ...core.config import MergeSettings
from ...core.utils import resolve_path


@dataclass
class ToolContext:
    """Paths, settings and intermediate results shared between tool runs.

    ``resources`` carries results from one tool to the next: ``discover``
    stores the loaded documents under ``"documents"`` and ``merge`` stores
    its report under ``"result"``.
    """

    input_path: Path | None = None
    output_path: Path | None = None
    resources: dict[str, Any] = field(default_factory=dict)
    config: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if isinstance(self.input_path, (str, Path)):
            self.input_path = resolve_path(self.input_path)
        if isinstance(self.output_path, (str, Path)):
            self.output_path = resolve_path(self.output_path)

    def settings(self) -> MergeSettings:
        return MergeSettings.from_mapping(self.config)


class BaseTool:
    """A named operation run against a :class:`ToolContext`."""

    name: str

    def __init__(self, context: ToolContext) -> None:
        self.context = context

    def run(self) -> Any:  # pragma: no cover - to be implemented by subclasses
        raise NotImplementedError
