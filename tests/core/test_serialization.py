"""
Unit Tests for Serialization Utilities

Tests for serialization and deserialization functions.
"""

import json
import pytest
from pathlib import Path

from journal_toolkit.core.models.paper import StructuredPaperData
from journal_toolkit.core.models.template import TemplateConfig, default_template_config
from journal_toolkit.core.schemas.validator import ValidationError
from journal_toolkit.core.utils.serialization import (
    deserialize_paper,
    deserialize_template,
    load_paper_json,
    load_template_json,
    save_paper_json,
    save_template_json,
    serialize_template,
)


class TestTemplateSerialization:
    """Tests for template serialization/deserialization."""

    def test_serialize_template_when_deserialized_then_equal(self):
        config = default_template_config().patch("layout", column_count=3)

        restored = deserialize_template(serialize_template(config))

        assert restored == config

    def test_deserialize_template_when_invalid_and_lenient_then_defaults_apply(self):
        config = deserialize_template({"layout": {"columnCount": 9}})

        assert config.layout.column_count == 3

    def test_deserialize_template_when_invalid_and_strict_then_raises(self):
        with pytest.raises(ValidationError):
            deserialize_template({"layout": {"columnCount": 9}}, strict=True)

    def test_save_and_load_template_json_when_round_tripped_then_equal(self, tmp_path: Path):
        # Arrange
        config = default_template_config().patch("page", print_background=True)
        path = tmp_path / "templates" / "journal.json"

        # Act
        save_template_json(path, config)
        loaded = load_template_json(path)

        # Assert
        assert loaded == config
        assert json.loads(path.read_text(encoding="utf-8"))["page"]["printBackground"] is True

    def test_load_template_json_when_missing_then_raises(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_template_json(tmp_path / "missing.json")


class TestPaperSerialization:
    """Tests for paper serialization/deserialization."""

    def test_deserialize_paper_when_valid_then_parsed(self, sample_paper_dict):
        paper = deserialize_paper(sample_paper_dict)

        assert paper.title == "Learning in Context"
        assert len(paper.authors) == 3

    def test_save_and_load_paper_json_when_round_tripped_then_equal(self, tmp_path: Path, sample_paper):
        path = tmp_path / "paper.json"

        save_paper_json(path, sample_paper)

        assert load_paper_json(path) == sample_paper

    def test_load_paper_json_when_not_json_then_raises(self, tmp_path: Path):
        path = tmp_path / "paper.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(json.JSONDecodeError):
            load_paper_json(path)

    def test_deserialize_paper_when_not_mapping_then_empty_paper(self):
        assert deserialize_paper([]) == StructuredPaperData()


def test_template_from_dict_when_round_tripped_through_json_then_equal():
    config = default_template_config()

    text = json.dumps(serialize_template(config))

    assert TemplateConfig.from_dict(json.loads(text)) == config
