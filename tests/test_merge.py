from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
from pypdf import PdfReader

from pdfcollate import MergeSettings, merge_directory, merge_documents, merge_pdfs
from pdfcollate.core.model import Reference, iter_references
from pdfcollate.merge import merger
from pdfcollate.merge.codec import read_graph
from pdfcollate.merge.exceptions import (
    MissingCatalogError,
    MissingPagesError,
    PdfMergeError,
    PdfWriteError,
)
from pdfcollate.merge.graph import SourceDocument
from pdfcollate.merge import utils as merge_utils


def _page_widths(path: Path) -> list[float]:
    reader = PdfReader(str(path))
    return [float(page.mediabox.width) for page in reader.pages]


def _outline(path: Path) -> list[tuple[str, int]]:
    reader = PdfReader(str(path))
    return [
        (item.title, reader.get_destination_page_number(item))
        for item in reader.outline
    ]


def test_merge_pdfs_creates_output(tmp_path: Path, sample_pdfs: list[Path]) -> None:
    output = tmp_path / "merged.pdf"

    result = merge_pdfs(sample_pdfs, output)

    assert result == output.resolve()
    reader = PdfReader(str(output))
    assert len(reader.pages) == 3
    assert reader.metadata.title == "Document One"
    assert reader.pdf_header == "%PDF-1.5"


def test_merge_pdfs_orders_by_file_name(tmp_path: Path, pdf_factory: Callable[..., Path]) -> None:
    second = pdf_factory("b.pdf", 1, width=200)
    first = pdf_factory("a.pdf", 2, width=100)
    output = tmp_path / "out" / "merged.pdf"

    merge_pdfs([second, first], output)

    assert _page_widths(output) == [100, 101, 200]
    assert _outline(output) == [("Page_1", 0), ("Page_2", 2)]


def test_merge_pdfs_replaces_existing_outlines(
    tmp_path: Path, pdf_factory: Callable[..., Path]
) -> None:
    pdfs = [pdf_factory("a.pdf", 2, outline=True), pdf_factory("b.pdf", 1, outline=True)]
    output = tmp_path / "merged.pdf"

    merge_pdfs(pdfs, output)

    assert [title for title, _ in _outline(output)] == ["Page_1", "Page_2"]


@pytest.mark.parametrize(
    ("rotated_name", "expected"),
    [("b.pdf", [0, 90]), ("a.pdf", [90, 0])],
)
def test_merge_pdfs_keeps_page_tree_rotation_per_document(
    tmp_path: Path,
    pdf_factory: Callable[..., Path],
    rotated_name: str,
    expected: list[int],
) -> None:
    pdfs = [
        pdf_factory(name, 1, tree_rotation=90 if name == rotated_name else None)
        for name in ("a.pdf", "b.pdf")
    ]
    output = tmp_path / "merged.pdf"

    merge_pdfs(pdfs, output)

    assert [page.rotation for page in PdfReader(str(output)).pages] == expected


def test_merge_pdfs_without_metadata(tmp_path: Path, sample_pdfs: list[Path]) -> None:
    output = tmp_path / "merged.pdf"

    merge_pdfs(sample_pdfs, output, metadata=False, compress=False)

    graph = read_graph(output)
    assert graph.info_id is None
    assert len(graph.page_ids()) == 3


def test_merge_pdfs_no_inputs(tmp_path: Path) -> None:
    with pytest.raises(PdfMergeError):
        merge_pdfs([], tmp_path / "out.pdf")


def test_merge_pdfs_all_inputs_broken(tmp_path: Path) -> None:
    broken = tmp_path / "broken.pdf"
    broken.write_bytes(b"")
    output = tmp_path / "out.pdf"

    with pytest.raises(PdfMergeError, match="could be loaded"):
        merge_pdfs([broken], output)
    assert not output.exists()


def test_merged_graph_is_closed_and_unique(
    tmp_path: Path, pdf_factory: Callable[..., Path]
) -> None:
    output = tmp_path / "merged.pdf"
    merge_pdfs(
        [pdf_factory("a.pdf", 2, title="A"), pdf_factory("b.pdf", 3, outline=True)], output
    )

    graph = read_graph(output)

    types = [graph.type_name(object_id) for object_id in graph.objects]
    assert types.count("Catalog") == 1
    assert types.count("Pages") == 1
    assert types.count("Outlines") == 1
    assert graph.root_id in graph.objects
    for value in graph.objects.values():
        assert all(target in graph.objects for target in iter_references(value))
    pages_id = graph.pages_root_id
    for page_id in graph.page_ids():
        assert graph.objects[page_id]["Parent"] == Reference(pages_id)
    assert graph.objects[pages_id]["Count"] == 5


def test_merge_is_stable_when_merging_output(
    tmp_path: Path, pdf_factory: Callable[..., Path]
) -> None:
    first = tmp_path / "first.pdf"
    merge_pdfs([pdf_factory("a.pdf", 2), pdf_factory("b.pdf", 1, width=300)], first)

    second = tmp_path / "second.pdf"
    merge_pdfs([first], second)

    assert _page_widths(second) == _page_widths(first) == [72, 73, 300]
    assert _outline(second) == [("Page_1", 0)]


def test_merge_graphs_requires_catalog(graph_factory: Callable[..., SourceDocument]) -> None:
    with pytest.raises(MissingCatalogError):
        merger.merge_graphs([graph_factory("a.pdf", 1, catalog=False)])


def test_merge_sources_structural_failure_writes_nothing(
    tmp_path: Path, graph_factory: Callable[..., SourceDocument]
) -> None:
    output = tmp_path / "merged.pdf"

    with pytest.raises(MissingPagesError):
        merger.merge_sources([graph_factory("a.pdf", 1, page_tree=False)], output)
    assert not output.exists()


def test_merge_sources_without_documents(tmp_path: Path) -> None:
    output = tmp_path / "merged.pdf"

    report = merger.merge_sources([], output)

    assert not report.merged
    assert report.page_count == 0
    assert not output.exists()


def test_merge_sources_reports_summary(
    tmp_path: Path, graph_factory: Callable[..., SourceDocument]
) -> None:
    documents = [graph_factory("b.pdf", 1), graph_factory("a.pdf", 2)]

    report = merger.merge_sources(documents, tmp_path / "merged.pdf")

    assert report.merged
    assert report.documents == [("a.pdf", 2), ("b.pdf", 1)]
    assert report.page_count == 3
    assert [bookmark.title for bookmark in report.bookmarks] == ["Page_1", "Page_2"]


def test_run_merge_passes_without_compression(graph_factory: Callable[..., SourceDocument]) -> None:
    state = merger.run_merge_passes(
        [graph_factory("a.pdf", 1)], MergeSettings(compress=False)
    )

    streams = [value for value in state.graph.objects.values() if hasattr(value, "data")]
    assert [stream.data for stream in streams] == [b"page 1"]
    assert state.graph.version == "1.5"
    assert state.page_count == 1


def test_merge_keeps_highest_input_version(graph_factory: Callable[..., SourceDocument]) -> None:
    newer = graph_factory("b.pdf", 1)
    newer.graph.version = "1.7"

    graph = merger.merge_graphs([graph_factory("a.pdf", 1), newer])

    assert graph.version == "1.7"


def test_merge_directory_writes_default_output(
    tmp_path: Path, pdf_factory: Callable[..., Path], monkeypatch: pytest.MonkeyPatch
) -> None:
    pdf_factory("docs/one.pdf", 1)
    pdf_factory("docs/two.pdf", 2)
    monkeypatch.chdir(tmp_path)

    report = merge_directory(tmp_path / "docs")

    assert report.output == (tmp_path / "merged.pdf").resolve()
    assert report.page_count == 3
    assert len(PdfReader(str(report.output)).pages) == 3


def test_merge_directory_ignores_previous_output(
    tmp_path: Path, pdf_factory: Callable[..., Path]
) -> None:
    pdf_factory("one.pdf", 1)
    output = tmp_path / "merged.pdf"
    merge_directory(tmp_path, output)

    report = merge_directory(tmp_path, output)

    assert report.documents == [("one.pdf", 1)]
    assert len(PdfReader(str(output)).pages) == 1


def test_merge_documents_helper(tmp_path: Path, sample_pdfs: list[Path]) -> None:
    output = tmp_path / "combined.pdf"

    report = merge_documents(tmp_path, output)

    assert report.output == output.resolve()
    assert report.page_count == 3


def test_merge_reports_write_failures(
    tmp_path: Path, sample_pdfs: list[Path], monkeypatch: pytest.MonkeyPatch
) -> None:
    def failing_replace(*_: object) -> None:
        raise OSError("disk full")

    monkeypatch.setattr("pdfcollate.merge.codec.os.replace", failing_replace)
    output = tmp_path / "merged.pdf"

    with pytest.raises(PdfWriteError):
        merge_pdfs(sample_pdfs, output)
    assert not output.exists()
    assert not list(tmp_path.glob(".merged.pdf.*"))


def test_merge_utils_helpers(tmp_path: Path) -> None:
    resolved = merge_utils.ensure_path("~/../")
    assert isinstance(resolved, Path)
    assert resolved.is_absolute()

    paths = merge_utils.ensure_iterable([tmp_path, str(tmp_path / "other.pdf")])
    assert all(isinstance(p, Path) for p in paths)
