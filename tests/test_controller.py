"""
Unit tests for the layout/render pipeline controller.

Layout tests use StaticOracle so page breaks are predictable; render
tests write real PDFs into tmp_path.
"""

import json
from pathlib import Path

import fitz
import pytest

from journal_toolkit.config import RenderConfig
from journal_toolkit.controller import (
    RenderError,
    _build_metadata,
    _generate_timestamped_subfolder,
    layout_paper,
    render_paper,
)
from journal_toolkit.core.models.paper import StructuredPaperData
from journal_toolkit.core.models.template import TemplateConfig
from journal_toolkit.measurement.oracle import StaticOracle


class TestLayoutPaper:
    """Tests for layout_paper()."""

    def test_layout_paper_when_static_heights_then_blocks_partitioned_in_order(self, sample_paper, single_column_config):
        # Arrange
        oracle = StaticOracle(300, header=20, footer=20, title=100)

        # Act
        layout = layout_paper(sample_paper, single_column_config, oracle)

        # Assert
        flattened = [index for page in layout.partition for index in page]
        assert flattened == list(range(len(layout.blocks)))
        assert layout.page_count == len(layout.partition) == len(layout.pages)
        assert layout.page_count > 1
        assert layout.heights == (300,) * len(layout.blocks)

    def test_layout_paper_when_template_asks_for_seven_columns_then_three(self, sample_paper):
        config = TemplateConfig.from_dict({"layout": {"columnCount": 7}})

        layout = layout_paper(sample_paper, config, StaticOracle(10))

        assert layout.column_count == 3

    def test_layout_paper_when_block_taller_than_page_then_overflow_warning(self, single_column_config):
        # Arrange
        paper = StructuredPaperData.from_dict({"body": [{"heading": "Big", "content": "<p>x</p>"}]})

        # Act
        layout = layout_paper(paper, single_column_config, StaticOracle(5000))

        # Assert
        assert layout.page_count == 1
        assert layout.overflowing_pages == (1,)
        assert any("Page 1 overflows" in w for w in layout.warnings)

    def test_layout_paper_when_empty_paper_then_single_placeholder_page(self, default_config):
        layout = layout_paper(StructuredPaperData(), default_config, StaticOracle(40))

        assert layout.page_count == 1
        assert len(layout.blocks) == 1


class TestRenderPaper:
    """Tests for render_paper()."""

    def test_render_paper_when_flat_output_then_pdf_and_metadata_written(self, tmp_path, sample_paper, default_config):
        # Arrange
        options = RenderConfig(output_dir=tmp_path, timestamped_subfolder=False)

        # Act
        result = render_paper(sample_paper, default_config, options)

        # Assert
        assert result.pdf_path == tmp_path / "paper.pdf"
        assert result.pdf_path.exists()
        with fitz.open(result.pdf_path) as doc:
            assert doc.page_count == result.page_count

        metadata = json.loads((tmp_path / "render_metadata.json").read_text(encoding="utf-8"))
        assert metadata["page_count"] == result.page_count
        assert metadata["title"] == "Learning in Context"
        assert metadata["column_count"] == 2

    def test_render_paper_when_timestamped_then_written_in_subfolder(self, tmp_path, sample_paper, default_config):
        options = RenderConfig(output_dir=tmp_path, file_stem="draft")

        result = render_paper(sample_paper, default_config, options)

        assert result.pdf_path.parent.parent == tmp_path
        assert result.pdf_path.parent.name.endswith("__draft")
        assert result.pdf_path.name == "draft.pdf"

    def test_render_paper_when_previews_requested_then_one_png_per_page(self, tmp_path, sample_paper, default_config):
        # Arrange
        options = RenderConfig(
            output_dir=tmp_path, timestamped_subfolder=False, export_previews=True, preview_zoom=0.3,
        )

        # Act
        result = render_paper(sample_paper, default_config, options)

        # Assert
        assert len(result.preview_paths) == result.page_count
        assert all(p.parent == tmp_path / "previews" for p in result.preview_paths)
        assert all(p.exists() for p in result.preview_paths)

    def test_render_paper_when_metadata_disabled_then_no_json(self, tmp_path, sample_paper, default_config):
        options = RenderConfig(output_dir=tmp_path, timestamped_subfolder=False, write_metadata=False)

        result = render_paper(sample_paper, default_config, options)

        assert result.pdf_path.exists()
        assert not (tmp_path / "render_metadata.json").exists()
        assert result.metadata["page_count"] == result.page_count

    def test_render_paper_when_measurement_fails_then_render_error(self, tmp_path, sample_paper, default_config):
        options = RenderConfig(output_dir=tmp_path, timestamped_subfolder=False)

        with pytest.raises(RenderError, match="Failed to measure"):
            render_paper(sample_paper, default_config, options, oracle=StaticOracle([10]))

        assert not (tmp_path / "paper.pdf").exists()


class TestHelpers:
    """Tests for controller helpers."""

    def test_generate_timestamped_subfolder_when_exists_then_suffixed(self, tmp_path):
        # Arrange
        first = _generate_timestamped_subfolder(tmp_path, "paper")
        first.mkdir()

        # Act
        second = _generate_timestamped_subfolder(tmp_path, "paper")

        # Assert
        if second.name.startswith(first.name):
            assert second.name == f"{first.name}(1)"
        assert second != first

    def test_build_metadata_when_built_then_contains_required_fields(self, sample_paper, default_config):
        # Arrange
        layout = layout_paper(sample_paper, default_config, StaticOracle(50))

        # Act
        metadata = _build_metadata(sample_paper, default_config, layout, RenderConfig(), ["w"])

        # Assert
        for key in ("generated_at", "toolkit_version", "page_size", "orientation",
                    "page_count", "partition", "geometry", "warnings"):
            assert key in metadata
        assert metadata["page_size"] == "A4"
        assert metadata["warnings"] == ["w"]
        json.dumps(metadata)


class TestRenderConfig:
    """Tests for RenderConfig validation."""

    @pytest.mark.parametrize("stem", ["", "../escape", "a b"])
    def test_render_config_when_bad_stem_then_value_error(self, stem):
        with pytest.raises(ValueError, match="file_stem"):
            RenderConfig(file_stem=stem)

    @pytest.mark.parametrize("zoom", [0.1, 2.0])
    def test_render_config_when_zoom_out_of_range_then_value_error(self, zoom):
        with pytest.raises(ValueError, match="preview_zoom"):
            RenderConfig(preview_zoom=zoom)

    def test_render_config_when_no_output_dir_then_default_base(self):
        assert RenderConfig().base_dir == Path("output")


class TestPublicNames:
    """Tests for the controller's exported names."""

    def test_controller_all_when_listed_then_pipeline_entry_points_only(self):
        import journal_toolkit.controller as controller

        assert "PaginationSession" not in controller.__all__
        assert not hasattr(controller, "PaginationSession")
        assert set(controller.__all__) == {"RenderError", "RenderResult", "layout_paper", "render_paper"}
