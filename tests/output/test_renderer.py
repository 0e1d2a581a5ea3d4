"""
Tests for PDF rendering.

PDFs are opened with PyMuPDF to check page count, size and text.
"""

import fitz
import pytest

from journal_toolkit.controller import layout_paper
from journal_toolkit.core.models.paper import PaperTable, StructuredPaperData
from journal_toolkit.core.models.template import Orientation, PageSize
from journal_toolkit.layout.config import mm_to_pt
from journal_toolkit.output.renderer import render_to_pdf


def _long_paper(sections: int = 8) -> StructuredPaperData:
    paragraph = "<p>" + "The results were consistent across every cohort we studied. " * 30 + "</p>"
    return StructuredPaperData.from_dict({
        "title": "A Long Paper",
        "authors": [{"name": "A. Author", "affiliation": "Univ A", "isCorresponding": True}],
        "abstract": "<p>Abstract text.</p>",
        "body": [{"heading": f"Section {n}", "content": paragraph * 2} for n in range(sections)],
    })


def test_render_to_pdf_when_rendered_then_one_pdf_page_per_description(tmp_path, sample_paper, default_config):
    # Arrange
    layout = layout_paper(sample_paper, default_config)
    pdf_path = tmp_path / "paper.pdf"

    # Act
    warnings = render_to_pdf(layout, default_config, pdf_path)

    # Assert
    assert pdf_path.exists()
    assert warnings == []
    with fitz.open(pdf_path) as doc:
        assert doc.page_count == layout.page_count


def test_render_to_pdf_when_long_paper_then_multiple_pages(tmp_path, default_config):
    layout = layout_paper(_long_paper(), default_config)
    pdf_path = tmp_path / "long.pdf"

    render_to_pdf(layout, default_config, pdf_path)

    assert layout.page_count > 1
    with fitz.open(pdf_path) as doc:
        assert doc.page_count == layout.page_count


def test_render_to_pdf_when_a5_landscape_then_page_size_matches(tmp_path, sample_paper, default_config):
    # Arrange
    config = default_config.patch("page", size=PageSize.A5, orientation=Orientation.LANDSCAPE)
    layout = layout_paper(sample_paper, config)
    pdf_path = tmp_path / "a5.pdf"

    # Act
    render_to_pdf(layout, config, pdf_path)

    # Assert
    with fitz.open(pdf_path) as doc:
        rect = doc[0].rect
        assert rect.width == pytest.approx(mm_to_pt(210), abs=0.5)
        assert rect.height == pytest.approx(mm_to_pt(148), abs=0.5)


def test_render_to_pdf_when_rendered_then_title_header_and_page_label_drawn(tmp_path, sample_paper, default_config):
    layout = layout_paper(sample_paper, default_config)
    pdf_path = tmp_path / "paper.pdf"

    render_to_pdf(layout, default_config, pdf_path)

    with fitz.open(pdf_path) as doc:
        text = doc[0].get_text()
    assert "Learning in Context" in text
    assert f"1 / {layout.page_count}" in text
    assert "Introduction" in text.title()


def test_render_to_pdf_when_each_page_then_only_its_blocks_drawn(tmp_path, default_config):
    # Arrange
    config = default_config.patch("layout", column_count=1)
    paper = _long_paper()
    layout = layout_paper(paper, config)
    pdf_path = tmp_path / "long.pdf"

    # Act
    render_to_pdf(layout, config, pdf_path)

    # Assert
    with fitz.open(pdf_path) as doc:
        last_text = doc[layout.page_count - 1].get_text().upper()
    assert "SECTION 7" in last_text
    assert "SECTION 0" not in last_text


def test_render_to_pdf_when_table_taller_than_page_and_unbreakable_then_clipped_warning(tmp_path, default_config):
    # Arrange
    rows = tuple((str(n), "value") for n in range(300))
    paper = StructuredPaperData(tables=(PaperTable(caption="Huge", headers=("n", "v"), rows=rows),))
    layout = layout_paper(paper, default_config)
    pdf_path = tmp_path / "huge.pdf"

    # Act
    warnings = render_to_pdf(layout, default_config, pdf_path)

    # Assert
    assert any("clipped" in w for w in warnings)
    assert pdf_path.exists()


def test_render_to_pdf_when_print_background_then_pdf_written(tmp_path, sample_paper, default_config):
    config = default_config.patch("page", print_background=True, background_color="#fdf6e3")
    layout = layout_paper(sample_paper, config)
    pdf_path = tmp_path / "bg.pdf"

    render_to_pdf(layout, config, pdf_path)

    with fitz.open(pdf_path) as doc:
        pix = doc[0].get_pixmap(clip=fitz.Rect(0, 0, 4, 4))
        assert pix.pixel(1, 1) != (255, 255, 255)
