"""
Unit tests for TemplateConfig and its sub-configurations.
"""

import pytest

from journal_toolkit.controller import layout_paper
from journal_toolkit.core.models.styles import BoxSpacing, SectionKind, SectionStyle, TextAlign
from journal_toolkit.core.models.template import (
    ColumnLayout,
    Orientation,
    PageConfig,
    PageSize,
    TemplateConfig,
    default_template_config,
)
from journal_toolkit.layout.styles import resolve_section_style
from journal_toolkit.measurement.oracle import StaticOracle


class TestPageConfig:
    """Tests for page size and orientation."""

    @pytest.mark.parametrize("size,expected", [
        (PageSize.A4, (210.0, 297.0)),
        (PageSize.LETTER, (215.9, 279.4)),
        (PageSize.A5, (148.0, 210.0)),
        (PageSize.B5, (176.0, 250.0)),
    ])
    def test_dimensions_when_portrait_then_matches_table(self, size, expected):
        assert PageConfig(size=size).dimensions_mm() == expected

    def test_dimensions_when_landscape_then_width_and_height_swap(self):
        page = PageConfig(size=PageSize.A4, orientation=Orientation.LANDSCAPE)

        assert page.dimensions_mm() == (297.0, 210.0)

    def test_from_dict_when_size_unknown_then_falls_back_to_a4(self):
        page = PageConfig.from_dict({"size": "Tabloid"})

        assert page.size is PageSize.A4

    def test_content_width_when_default_margins_then_excludes_margins(self):
        page = PageConfig()

        assert page.content_width_mm == pytest.approx(170.0)
        assert page.inner_height_mm == pytest.approx(247.0)


class TestColumnLayout:
    """Tests for column layout validation."""

    def test_init_when_column_count_four_then_raises(self):
        with pytest.raises(ValueError, match="column_count"):
            ColumnLayout(column_count=4)

    def test_from_dict_when_column_count_out_of_range_then_clamps(self):
        assert ColumnLayout.from_dict({"columnCount": 7}).column_count == 3
        assert ColumnLayout.from_dict({"columnCount": 0}).column_count == 1

    def test_column_width_when_two_columns_then_gap_subtracted(self):
        layout = ColumnLayout(column_count=2, column_gap=10)

        assert layout.column_width(170) == pytest.approx(80)


class TestTemplateConfigFromDict:
    """Tests for parsing stored templates."""

    def test_from_dict_when_empty_then_uses_defaults(self):
        # Act
        config = TemplateConfig.from_dict({})

        # Assert
        assert config.page.size is PageSize.A4
        assert config.layout.column_count == 2
        assert config.global_style.font_size == 10
        assert len(config.header.blocks) == 2
        assert config.section_override(SectionKind.TITLE)["font_size"] == 18

    def test_from_dict_when_partial_layout_then_missing_keys_from_defaults(self):
        config = TemplateConfig.from_dict({"layout": {"columnCount": 1}})

        assert config.layout.column_count == 1
        assert config.layout.column_gap == 6

    def test_from_dict_when_unknown_section_key_then_ignored(self):
        config = TemplateConfig.from_dict({"sections": {"sidebar": {"fontSize": 30}}})

        assert all(kind in SectionKind for kind in config.sections)

    def test_from_dict_when_legacy_typography_then_migrated(self):
        # Arrange
        legacy = {
            "typography": {
                "baseFontSize": 11,
                "titleFontSize": 20,
                "headerFooterFontSize": 7,
            },
        }

        # Act
        config = TemplateConfig.from_dict(legacy)

        # Assert
        assert config.global_style.font_size == 11
        assert config.section_override(SectionKind.TITLE)["font_size"] == 20
        assert config.section_override(SectionKind.HEADER)["font_size"] == 7
        assert config.section_override(SectionKind.FOOTER)["font_size"] == 7

    def test_to_dict_when_round_tripped_then_equal(self):
        config = default_template_config()

        assert TemplateConfig.from_dict(config.to_dict()) == config


class TestTemplateConfigEdits:
    """Tests for immutable edits."""

    def test_patch_when_layout_changed_then_original_untouched(self):
        # Arrange
        config = default_template_config()

        # Act
        patched = config.patch("layout", column_count=1)

        # Assert
        assert patched.layout.column_count == 1
        assert config.layout.column_count == 2

    def test_patch_when_unknown_section_then_raises(self):
        with pytest.raises(ValueError, match="Unknown template section"):
            default_template_config().patch("sidebar", width=3)

    def test_with_section_override_when_none_given_then_property_removed(self):
        config = default_template_config().with_section_override(SectionKind.TITLE, font_size=None)

        assert "font_size" not in config.section_override(SectionKind.TITLE)
        assert config.section_override(SectionKind.TITLE)["bold"] is True

    def test_with_section_override_when_unknown_property_then_raises(self):
        with pytest.raises(TypeError):
            default_template_config().with_section_override(SectionKind.TITLE, kerning=2)

    def test_sections_when_assigned_then_read_only(self):
        config = default_template_config()

        with pytest.raises(TypeError):
            config.sections[SectionKind.TITLE] = {}


class TestStyleModels:
    """Tests for SectionStyle and BoxSpacing."""

    def test_section_style_when_font_size_zero_then_raises(self):
        with pytest.raises(ValueError):
            SectionStyle(font_size=0)

    def test_box_spacing_when_from_dict_negative_then_zero(self):
        box = BoxSpacing.from_dict({"top": -4, "left": 3})

        assert box == BoxSpacing(top=0, right=0, bottom=0, left=3)

    @pytest.mark.parametrize("data", ["bad", 4, [1, 2]])
    def test_box_spacing_when_from_dict_not_mapping_then_zero(self, data):
        assert BoxSpacing.from_dict(data) == BoxSpacing()

    def test_text_align_when_unknown_then_default(self):
        assert TextAlign.parse("diagonal") is TextAlign.LEFT
        assert TextAlign.parse("diagonal", TextAlign.CENTER) is TextAlign.CENTER

    def test_section_kind_when_unknown_then_none(self):
        assert SectionKind.parse("sidebar") is None
        assert SectionKind.parse("bodyText") is SectionKind.BODY_TEXT


class TestMalformedTemplates:
    """Malformed stored values fall back to defaults instead of raising."""

    @pytest.mark.parametrize("value", ["12", 0, -3, "big"])
    def test_from_dict_when_global_font_size_invalid_then_default_size(self, value):
        config = TemplateConfig.from_dict({"global": {"fontSize": value}})

        assert config.global_style.font_size == 10

    def test_from_dict_when_margin_side_not_numeric_then_zero(self):
        config = TemplateConfig.from_dict({"page": {"margins": {"top": "abc", "left": 12}}})

        assert config.page.margins.top == 0
        assert config.page.margins.left == 12

    def test_from_dict_when_section_margin_not_mapping_then_global_margin(self):
        # Act
        config = TemplateConfig.from_dict({"sections": {"title": {"margin": "bad", "bold": True}}})

        # Assert
        override = config.section_override(SectionKind.TITLE)
        assert "margin" not in override
        assert override["bold"] is True
        assert resolve_section_style(config, SectionKind.TITLE).margin == config.global_style.margin

    def test_from_dict_when_numeric_setting_not_numeric_then_default(self):
        config = TemplateConfig.from_dict({"layout": {"columnGap": "wide"}, "spacing": {"afterHeading": [1]}})

        assert config.layout.column_gap == 6
        assert config.spacing.after_heading == 4

    @pytest.mark.parametrize("doc", [
        {"global": {"fontSize": "12"}},
        {"global": {"fontSize": 0}},
        {"page": {"margins": {"top": "abc"}}},
        {"sections": {"title": {"margin": "bad"}}},
    ])
    def test_layout_paper_when_template_malformed_then_pages_built(self, doc, sample_paper):
        config = TemplateConfig.from_dict(doc)

        layout = layout_paper(sample_paper, config, StaticOracle(50))

        assert layout.page_count >= 1
        assert [i for page in layout.partition for i in page] == list(range(len(layout.blocks)))
