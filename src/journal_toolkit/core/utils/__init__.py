"""
Utils Package

Serialization and submission mapping.
"""

from .serialization import (
    serialize_template,
    deserialize_template,
    serialize_paper,
    deserialize_paper,
    load_template_json,
    save_template_json,
    load_paper_json,
    save_paper_json,
)
from .submission import map_submission_to_paper

__all__ = [
    "serialize_template",
    "deserialize_template",
    "serialize_paper",
    "deserialize_paper",
    "load_template_json",
    "save_template_json",
    "load_paper_json",
    "save_paper_json",
    "map_submission_to_paper",
]
