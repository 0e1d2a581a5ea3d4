"""
Tests for the journal-render command line.
"""

import json

import pytest

from journal_toolkit.cli import build_parser, main


@pytest.fixture
def paper_file(tmp_path, sample_paper_dict):
    path = tmp_path / "paper.json"
    path.write_text(json.dumps(sample_paper_dict), encoding="utf-8")
    return path


def test_main_when_paper_rendered_then_exit_zero_and_pdf_written(tmp_path, paper_file):
    # Arrange
    out_dir = tmp_path / "out"

    # Act
    code = main([str(paper_file), "-o", str(out_dir), "--no-subfolder", "--stem", "issue"])

    # Assert
    assert code == 0
    assert (out_dir / "issue.pdf").exists()
    assert (out_dir / "render_metadata.json").exists()


def test_main_when_template_given_then_template_applied(tmp_path, paper_file):
    # Arrange
    template = tmp_path / "template.json"
    template.write_text(json.dumps({"layout": {"columnCount": 1}}), encoding="utf-8")
    out_dir = tmp_path / "out"

    # Act
    code = main([str(paper_file), "-t", str(template), "-o", str(out_dir), "--no-subfolder"])

    # Assert
    assert code == 0
    metadata = json.loads((out_dir / "render_metadata.json").read_text(encoding="utf-8"))
    assert metadata["column_count"] == 1


def test_main_when_paper_missing_then_exit_one(tmp_path):
    code = main([str(tmp_path / "missing.json"), "-o", str(tmp_path)])

    assert code == 1


def test_main_when_paper_not_json_then_exit_one(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")

    assert main([str(bad), "-o", str(tmp_path)]) == 1


def test_main_when_submission_flag_then_paper_prefilled(tmp_path):
    # Arrange
    submission = tmp_path / "submission.json"
    submission.write_text(json.dumps({
        "title": "Submitted Work",
        "abstract": "<p>Short abstract.</p>",
        "correspondingAuthor": {"name": "D. Author", "email": "d@example.org"},
        "createdAt": 1718000000000,
    }), encoding="utf-8")
    out_dir = tmp_path / "out"

    # Act
    code = main([str(submission), "--submission", "-o", str(out_dir), "--no-subfolder", "--no-metadata"])

    # Assert
    assert code == 0
    assert (out_dir / "paper.pdf").exists()
    assert not (out_dir / "render_metadata.json").exists()


def test_main_when_preview_requested_then_pngs_written(tmp_path, paper_file):
    out_dir = tmp_path / "out"

    code = main([str(paper_file), "-o", str(out_dir), "--no-subfolder", "--preview", "--zoom", "0.3"])

    assert code == 0
    assert sorted(p.name for p in (out_dir / "previews").glob("*.png"))[0] == "paper_1.png"


def test_main_when_zoom_out_of_range_then_usage_error(tmp_path, paper_file):
    with pytest.raises(SystemExit) as exc_info:
        main([str(paper_file), "--zoom", "5"])

    assert exc_info.value.code == 2


def test_build_parser_when_defaults_then_timestamped_output():
    args = build_parser().parse_args(["paper.json"])

    assert args.no_subfolder is False
    assert args.stem == "paper"
    assert str(args.output) == "output"
