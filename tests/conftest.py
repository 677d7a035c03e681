from __future__ import annotations

from pathlib import Path
from typing import Callable
import sys

import pytest
from pypdf import PdfWriter
from pypdf.generic import DecodedStreamObject, NameObject, NumberObject

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pdfcollate.core.model import Dictionary, Name, ObjectId, Reference, Stream, String  # noqa: E402
from pdfcollate.merge.graph import DocumentGraph, SourceDocument  # noqa: E402


def write_pdf(
    path: Path,
    pages: int = 1,
    *,
    title: str | None = None,
    outline: bool = False,
    width: float = 72,
    tree_rotation: int | None = None,
) -> Path:
    writer = PdfWriter()
    for index in range(pages):
        page = writer.add_blank_page(width=width + index, height=72)
        content = DecodedStreamObject()
        content.set_data(f"BT ({path.stem} {index + 1}) Tj ET".encode("ascii"))
        page[NameObject("/Contents")] = writer._add_object(content)
    if title is not None:
        writer.add_metadata({"/Title": title})
    if tree_rotation is not None:
        tree = writer.root_object["/Pages"].get_object()
        tree[NameObject("/Rotate")] = NumberObject(tree_rotation)
    if outline and pages:
        writer.add_outline_item("Old bookmark", 0)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as handle:
        writer.write(handle)
    return path


@pytest.fixture()
def pdf_factory(tmp_path: Path) -> Callable[..., Path]:
    def _create(filename: str, pages: int = 1, **kwargs) -> Path:
        return write_pdf(tmp_path / filename, pages, **kwargs)

    return _create


@pytest.fixture()
def sample_pdfs(pdf_factory: Callable[..., Path]) -> list[Path]:
    pdf1 = pdf_factory("one.pdf", 2, title="Document One")
    pdf2 = pdf_factory("two.pdf", 1)
    return [pdf1, pdf2]


def build_graph(
    pages: int = 1,
    *,
    catalog: bool = True,
    page_tree: bool = True,
    outlines: bool = False,
    title: str | None = None,
) -> DocumentGraph:
    """Build a small document graph: catalog 1, pages 2, then page/content pairs."""

    graph = DocumentGraph(version="1.4")
    catalog_id, pages_id = ObjectId(1), ObjectId(2)
    kids = []
    for index in range(pages):
        page_id = ObjectId(3 + 2 * index)
        content_id = ObjectId(4 + 2 * index)
        graph.objects[content_id] = Stream(Dictionary(), f"page {index + 1}".encode())
        page = Dictionary({"Type": Name("Page"), "Contents": Reference(content_id)})
        if page_tree:
            page["Parent"] = Reference(pages_id)
        graph.objects[page_id] = page
        kids.append(Reference(page_id))

    if page_tree:
        graph.objects[pages_id] = Dictionary(
            {
                "Type": Name("Pages"),
                "Kids": kids,
                "Count": len(kids),
                "MediaBox": [0, 0, 612, 792],
            }
        )
    if catalog:
        root = Dictionary({"Type": Name("Catalog")})
        if page_tree:
            root["Pages"] = Reference(pages_id)
        graph.objects[catalog_id] = root
        graph.trailer["Root"] = Reference(catalog_id)

    if outlines and kids:
        base = 3 + 2 * pages
        outline_id, item_id = ObjectId(base), ObjectId(base + 1)
        graph.objects[outline_id] = Dictionary(
            {
                "Type": Name("Outlines"),
                "First": Reference(item_id),
                "Last": Reference(item_id),
                "Count": 1,
            }
        )
        graph.objects[item_id] = Dictionary(
            {
                "Title": String(b"Old"),
                "Parent": Reference(outline_id),
                "Dest": [kids[0], Name("Fit")],
            }
        )
        graph.objects[catalog_id]["Outlines"] = Reference(outline_id)

    if title is not None:
        info_id = ObjectId(100)
        graph.objects[info_id] = Dictionary({"Title": String.from_text(title)})
        graph.trailer["Info"] = Reference(info_id)

    graph.update_max_id()
    return graph


@pytest.fixture()
def graph_factory() -> Callable[..., SourceDocument]:
    def _create(name: str, pages: int = 1, **kwargs) -> SourceDocument:
        return SourceDocument(graph=build_graph(pages, **kwargs), name=name)

    return _create
