"""
Unit tests for default merging and legacy migration.
"""

from journal_toolkit.core.defaults import (
    DEFAULT_TEMPLATE_CONFIG,
    merge_with_defaults,
    migrate_legacy_typography,
)


def test_merge_with_defaults_when_nested_key_missing_then_filled():
    merged = merge_with_defaults({"header": {"borderBottom": False}})

    assert merged["header"]["borderBottom"] is False
    assert merged["header"]["borderColor"] == "#cccccc"


def test_merge_with_defaults_when_box_given_then_replaced_whole():
    merged = merge_with_defaults({"page": {"margins": {"top": 10}}})

    assert merged["page"]["margins"] == {"top": 10}


def test_merge_with_defaults_when_value_none_then_default_kept():
    merged = merge_with_defaults({"layout": {"columnGap": None}})

    assert merged["layout"]["columnGap"] == 6


def test_merge_with_defaults_when_malformed_section_then_default_kept():
    merged = merge_with_defaults({"layout": "two columns"})

    assert merged["layout"] == DEFAULT_TEMPLATE_CONFIG["layout"]


def test_merge_with_defaults_when_called_then_inputs_untouched():
    data = {"layout": {"columnCount": 1}}

    merge_with_defaults(data)

    assert data == {"layout": {"columnCount": 1}}
    assert DEFAULT_TEMPLATE_CONFIG["layout"]["columnCount"] == 2


def test_migrate_legacy_typography_when_global_present_then_unchanged():
    data = {"global": {"fontSize": 12}, "typography": {"baseFontSize": 9}}

    migrated = migrate_legacy_typography(data)

    assert migrated["global"] == {"fontSize": 12}
    assert "typography" not in migrated


def test_migrate_legacy_typography_when_abstract_indent_then_padding():
    # Arrange
    legacy = {
        "typography": {"baseFontSize": 11},
        "abstract": {"indentLeft": 5, "indentRight": 6, "labelText": "Summary"},
    }

    # Act
    migrated = migrate_legacy_typography(legacy)

    # Assert
    assert migrated["sections"]["abstract"]["padding"] == {"top": 0, "right": 6, "bottom": 0, "left": 5}
    assert migrated["abstractLabel"] == {"labelText": "Summary"}
    assert "abstract" not in migrated
