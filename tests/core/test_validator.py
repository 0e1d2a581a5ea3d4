"""
Unit Tests for Schema Validation

Tests for the validator module.
"""

import pytest

from journal_toolkit.core.models.template import default_template_config
from journal_toolkit.core.schemas.validator import (
    ValidationError,
    validate_paper,
    validate_template,
)


class TestValidateTemplate:
    """Tests for validate_template function."""

    def test_validate_template_when_default_document_then_no_issues(self):
        data = default_template_config().to_dict()

        assert validate_template(data, strict=True) == []

    def test_validate_template_when_empty_then_no_issues(self):
        assert validate_template({}) == []

    def test_validate_template_when_column_count_invalid_then_reports(self):
        issues = validate_template({"layout": {"columnCount": 5}})

        assert any("columnCount" in issue for issue in issues)

    def test_validate_template_when_unknown_page_size_then_reports(self):
        issues = validate_template({"page": {"size": "Tabloid"}})

        assert any("page.size" in issue for issue in issues)

    def test_validate_template_when_strict_and_invalid_then_raises(self):
        # Arrange
        data = {"global": {"fontSize": -2}}

        # Act / Assert
        with pytest.raises(ValidationError) as exc_info:
            validate_template(data, strict=True)

        assert exc_info.value.errors
        assert exc_info.value.path.startswith("global")

    def test_validate_template_when_not_a_mapping_then_reports(self):
        assert validate_template(["not", "a", "template"])


class TestValidatePaper:
    """Tests for validate_paper function."""

    def test_validate_paper_when_valid_then_no_issues(self, sample_paper_dict):
        assert validate_paper(sample_paper_dict, strict=True) == []

    def test_validate_paper_when_legacy_string_body_then_accepted(self):
        assert validate_paper({"title": "T", "body": "<p>x</p>"}, strict=True) == []

    def test_validate_paper_when_reference_numbers_mixed_then_reports(self):
        data = {"references": [{"text": "a", "number": 1}, {"text": "b"}]}

        issues = validate_paper(data)

        assert any("references" in issue for issue in issues)

    def test_validate_paper_when_strict_and_authors_not_list_then_raises(self):
        with pytest.raises(ValidationError, match="Invalid paper"):
            validate_paper({"authors": "A. Author"}, strict=True)
