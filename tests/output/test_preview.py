"""
Tests for PNG preview generation.
"""

import pytest
from PIL import Image
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from journal_toolkit.output.preview import clamp_zoom, render_preview, save_preview_pngs


@pytest.fixture
def two_page_pdf(tmp_path):
    """A plain two-page A4 PDF."""
    path = tmp_path / "two.pdf"
    c = canvas.Canvas(str(path), pagesize=A4)
    for number in (1, 2):
        c.drawString(72, 720, f"Page {number}")
        c.showPage()
    c.save()
    return path


def test_render_preview_when_two_pages_then_two_images(two_page_pdf):
    images = render_preview(two_page_pdf, zoom=0.5)

    assert len(images) == 2
    assert all(isinstance(image, Image.Image) for image in images)


def test_render_preview_when_zoom_doubles_then_raster_doubles(two_page_pdf):
    # Act
    small = render_preview(two_page_pdf, zoom=0.5)[0]
    large = render_preview(two_page_pdf, zoom=1.0)[0]

    # Assert
    assert large.width == pytest.approx(small.width * 2, abs=2)
    assert large.height == pytest.approx(small.height * 2, abs=2)


def test_render_preview_when_zoom_out_of_range_then_clamped(two_page_pdf):
    huge = render_preview(two_page_pdf, zoom=10)[0]
    limit = render_preview(two_page_pdf, zoom=1.5)[0]

    assert huge.size == limit.size


@pytest.mark.parametrize("zoom,expected", [(0.05, 0.2), (0.55, 0.55), (3, 1.5)])
def test_clamp_zoom_when_value_given_then_within_range(zoom, expected):
    assert clamp_zoom(zoom) == expected


def test_save_preview_pngs_when_saved_then_numbered_files(two_page_pdf, tmp_path):
    out_dir = tmp_path / "previews"

    paths = save_preview_pngs(two_page_pdf, out_dir, zoom=0.3, stem="paper")

    assert [p.name for p in paths] == ["paper_1.png", "paper_2.png"]
    assert all(p.exists() for p in paths)
