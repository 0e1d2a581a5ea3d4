import pytest
import sys
from datetime import date
from pathlib import Path

# Add src to sys.path so we can import journal_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from journal_toolkit.core.models.paper import StructuredPaperData
from journal_toolkit.core.models.template import TemplateConfig


# Common test fixtures
@pytest.fixture
def fixed_today():
    """Clock pinned to 2024-06-01 for {{year}}."""
    return lambda: date(2024, 6, 1)


@pytest.fixture
def sample_paper_dict() -> dict:
    """A small but complete manuscript document."""
    return {
        "meta": {"doi": "10.1000/xyz", "volume": "4", "issue": "2"},
        "title": "Learning in Context",
        "authors": [
            {"name": "A. Author", "affiliation": "Univ A", "isCorresponding": True},
            {"name": "B. Author", "affiliation": "Univ B"},
            {"name": "C. Author", "affiliation": "Univ A"},
        ],
        "abstract": "<p>This study examines learning.</p>",
        "keywords": ["learning", "context"],
        "body": [
            {"heading": "Introduction", "content": "<p>Intro text.</p>"},
            {"heading": "Methods", "content": "<p>Method text.</p>"},
        ],
        "tables": [
            {
                "caption": "Results for {{journalName}}",
                "headers": ["Group", "Score"],
                "rows": [["A", "1"], ["B", "2"]],
            },
        ],
        "references": [
            {"text": "First reference."},
            {"text": "Second reference."},
        ],
    }


@pytest.fixture
def sample_paper(sample_paper_dict) -> StructuredPaperData:
    return StructuredPaperData.from_dict(sample_paper_dict)


@pytest.fixture
def default_config() -> TemplateConfig:
    return TemplateConfig.from_dict({})


@pytest.fixture
def single_column_config() -> TemplateConfig:
    return TemplateConfig.from_dict({"layout": {"columnCount": 1}})
