"""
Unit tests for manuscript models.
"""

from journal_toolkit.core.models.paper import (
    EndMatter,
    PaperSection,
    StructuredPaperData,
    normalize_body,
)


def test_from_dict_when_body_is_string_then_one_untitled_section():
    # Act
    paper = StructuredPaperData.from_dict({"title": "T", "body": "<p>legacy</p>"})

    # Assert
    assert len(paper.body) == 1
    assert paper.body[0].heading == ""
    assert paper.body[0].content == "<p>legacy</p>"


def test_normalize_body_when_empty_string_then_no_sections():
    assert normalize_body("") == ()
    assert normalize_body(None) == ()


def test_from_dict_when_arrays_missing_then_empty():
    paper = StructuredPaperData.from_dict({})

    assert paper.authors == ()
    assert paper.keywords == ()
    assert paper.tables == ()
    assert paper.references == ()
    assert paper.end_matter is None


def test_from_dict_when_section_columns_false_then_flag_kept():
    paper = StructuredPaperData.from_dict({
        "body": [{"heading": "Wide", "content": "<p>x</p>", "columns": False}],
    })

    assert paper.body[0].columns is False


def test_from_dict_when_subsections_then_nested():
    paper = StructuredPaperData.from_dict({
        "body": [{
            "heading": "Results",
            "content": "",
            "subsections": [{"heading": "Cohort A", "content": "<p>a</p>"}],
        }],
    })

    assert paper.body[0].subsections[0].heading == "Cohort A"


def test_to_dict_when_round_tripped_then_equal(sample_paper):
    assert StructuredPaperData.from_dict(sample_paper.to_dict()) == sample_paper


def test_section_is_empty_when_whitespace_only_then_true():
    assert PaperSection(heading="H", content="   ").is_empty


def test_end_matter_dates_when_some_missing_then_only_filled_listed():
    end_matter = EndMatter(date_of_submission="Jan 5, 2025")

    assert end_matter.dates == (("Date of Submission", "Jan 5, 2025"),)
