"""
Serialization Utilities

Provides to/from JSON utilities for templates and papers.

- `serialize_*` / `deserialize_*` work on dictionaries
- `load_*_json` / `save_*_json` work on files
- Validation runs before deserialization and is non-strict by default:
  issues are logged as warnings and parsing falls back to defaults
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..models.paper import StructuredPaperData
from ..models.template import TemplateConfig
from ..schemas.validator import validate_paper, validate_template

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Template Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_template(config: TemplateConfig) -> dict[str, Any]:
    """
    Serialize a TemplateConfig to a camelCase dictionary.

    The output is a complete document: loading it back needs no defaults.
    """
    return config.to_dict()


def deserialize_template(
    data: dict[str, Any],
    *,
    validate: bool = True,
    strict: bool = False,
) -> TemplateConfig:
    """
    Deserialize a TemplateConfig from a dictionary.

    Args:
        data: Dictionary from JSON (possibly partial or legacy format)
        validate: Whether to validate first
        strict: Raise on validation issues instead of logging them

    Raises:
        ValidationError: If strict and data is invalid
    """
    if validate:
        for issue in validate_template(data, strict=strict):
            logger.warning(f"Template: {issue}")
    return TemplateConfig.from_dict(data if isinstance(data, dict) else {})


# ─────────────────────────────────────────────────────────────────────────────
# Paper Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_paper(paper: StructuredPaperData) -> dict[str, Any]:
    return paper.to_dict()


def deserialize_paper(
    data: dict[str, Any],
    *,
    validate: bool = True,
    strict: bool = False,
) -> StructuredPaperData:
    """
    Deserialize StructuredPaperData from a dictionary.

    Raises:
        ValidationError: If strict and data is invalid
    """
    if validate:
        for issue in validate_paper(data, strict=strict):
            logger.warning(f"Paper: {issue}")
    return StructuredPaperData.from_dict(data if isinstance(data, dict) else {})


# ─────────────────────────────────────────────────────────────────────────────
# File I/O
# ─────────────────────────────────────────────────────────────────────────────

def _read_json(path: Path, what: str) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"{what} file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _write_json(path: Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def load_template_json(path: Path, *, strict: bool = False) -> TemplateConfig:
    """
    Load a template from a JSON file.

    Args:
        path: Path to template JSON
        strict: Raise on validation issues

    Returns:
        TemplateConfig with defaults merged in

    Raises:
        FileNotFoundError: If path does not exist
        json.JSONDecodeError: If the file is not JSON
        ValidationError: If strict and the document is invalid
    """
    data = _read_json(path, "Template")
    config = deserialize_template(data, strict=strict)
    logger.info(f"Loaded template from {path}")
    return config


def save_template_json(path: Path, config: TemplateConfig) -> None:
    _write_json(path, serialize_template(config))


def load_paper_json(path: Path, *, strict: bool = False) -> StructuredPaperData:
    """
    Load a paper from a JSON file.

    Raises:
        FileNotFoundError: If path does not exist
        json.JSONDecodeError: If the file is not JSON
        ValidationError: If strict and the document is invalid
    """
    data = _read_json(path, "Paper")
    paper = deserialize_paper(data, strict=strict)
    logger.info(f"Loaded paper {paper.title or 'Untitled'!r} from {path}")
    return paper


def save_paper_json(path: Path, paper: StructuredPaperData) -> None:
    _write_json(path, serialize_paper(paper))
