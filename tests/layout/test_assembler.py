"""
Unit tests for page assembly.
"""

import pytest

from journal_toolkit.core.models.paper import PaperAuthor, StructuredPaperData
from journal_toolkit.core.models.styles import TextAlign
from journal_toolkit.core.models.template import Orientation, PageSize
from journal_toolkit.layout.assembler import (
    UNTITLED_PAPER,
    assemble_pages,
    build_title_block,
    print_geometry,
)
from journal_toolkit.layout.blocks import build_blocks


class TestAssemblePages:
    """Tests for assemble_pages()."""

    def test_assemble_pages_when_two_pages_then_title_only_on_first(self, sample_paper, default_config, fixed_today):
        # Act
        pages = assemble_pages([[0, 1], [2]], sample_paper, default_config, today=fixed_today)

        # Assert
        assert [p.number for p in pages] == [1, 2]
        assert pages[0].has_title
        assert not pages[1].has_title
        assert all(p.total_pages == 2 for p in pages)

    def test_assemble_pages_when_default_footer_then_page_label(self, sample_paper, default_config, fixed_today):
        pages = assemble_pages([[0], [1], [2]], sample_paper, default_config, today=fixed_today)

        assert [p.footer.page_label for p in pages] == ["1 / 3", "2 / 3", "3 / 3"]
        assert pages[0].footer.page_label_position is TextAlign.CENTER

    def test_assemble_pages_when_page_numbers_hidden_then_no_label(self, sample_paper, default_config):
        config = default_config.patch("footer", show_page_number=False)

        pages = assemble_pages([[0]], sample_paper, config)

        assert pages[0].footer.page_label is None

    def test_assemble_pages_when_header_tokens_then_resolved(self, sample_paper, default_config, fixed_today):
        pages = assemble_pages([[0]], sample_paper, default_config, today=fixed_today)

        texts = [line.text for line in pages[0].header_lines]
        assert texts == [default_config.tokens.journal_name, "Vol. 4, Issue 2, 2024"]
        assert pages[0].header_lines[1].alignment is TextAlign.RIGHT

    def test_assemble_pages_when_empty_partition_then_one_page(self, default_config):
        pages = assemble_pages([], StructuredPaperData(), default_config)

        assert len(pages) == 1
        assert pages[0].block_indices == ()

    def test_assemble_pages_when_partition_misses_block_then_raises(self, sample_paper, default_config):
        blocks = build_blocks(sample_paper, default_config)

        with pytest.raises(ValueError, match="Partition"):
            assemble_pages([[0, 1]], sample_paper, default_config, blocks)

    def test_assemble_pages_when_called_then_inputs_not_mutated(self, sample_paper, default_config):
        partition = [[0, 1], [2]]

        assemble_pages(partition, sample_paper, default_config)

        assert partition == [[0, 1], [2]]


class TestTitleBlock:
    """Tests for build_title_block()."""

    def test_build_title_block_when_shared_affiliations_then_deduplicated(self, sample_paper, default_config):
        title = build_title_block(sample_paper, default_config)

        assert title.affiliation_line == "Univ A; Univ B"
        assert title.byline == "A. Author*, B. Author, C. Author"

    def test_build_title_block_when_no_title_then_untitled(self, default_config):
        paper = StructuredPaperData(authors=(PaperAuthor(name="X", affiliation=""),))

        title = build_title_block(paper, default_config)

        assert title.title == UNTITLED_PAPER
        assert title.affiliation_line == ""


class TestPrintGeometry:
    """Tests for print_geometry()."""

    def test_print_geometry_when_letter_landscape_then_swapped(self, default_config):
        config = default_config.patch("page", size=PageSize.LETTER, orientation=Orientation.LANDSCAPE)

        geometry = print_geometry(config)

        assert (geometry.width_mm, geometry.height_mm) == (279.4, 215.9)
        assert geometry.css_size == "279.4mm 215.9mm"

    def test_print_geometry_when_a4_then_points(self, default_config):
        geometry = print_geometry(default_config)

        assert geometry.width_pt == pytest.approx(595.28, abs=0.01)
        assert geometry.height_pt == pytest.approx(841.89, abs=0.01)
