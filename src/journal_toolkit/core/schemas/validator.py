"""
Schema Validation Utilities

Validates stored template and paper JSON before it is parsed.

Parsing itself never fails on malformed input (missing keys take
defaults, unknown values degrade). Validation is how a caller finds out
what was degraded:

- non-strict: basic structural checks, issues returned for logging
- strict: basic checks plus the JSON Schema, any issue raises
  ValidationError
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

import jsonschema

logger = logging.getLogger(__name__)


# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}

_PAGE_SIZES = ("A4", "Letter", "A5", "B5")


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def _schema_issues(data: Mapping[str, Any], schema_name: str) -> list[str]:
    validator = jsonschema.Draft7Validator(_load_schema(schema_name))
    issues = []
    for error in sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path)):
        path = ".".join(str(p) for p in error.absolute_path) or "<root>"
        issues.append(f"{path}: {error.message}")
    return issues


def _finish(kind: str, issues: list[str], strict: bool) -> list[str]:
    if issues and strict:
        first = issues[0]
        raise ValidationError(
            f"Invalid {kind}: {len(issues)} issue(s), first: {first}",
            path=first.split(":", 1)[0],
            errors=issues,
        )
    for issue in issues:
        logger.debug(f"{kind} issue: {issue}")
    return issues


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_template(data: Any, *, strict: bool = False) -> list[str]:
    """
    Validate a stored template document.

    Args:
        data: Template dictionary (camelCase, possibly partial)
        strict: If True, also check the JSON Schema and raise on any issue

    Returns:
        List of issue strings (empty when valid)

    Raises:
        ValidationError: If strict and data is invalid
    """
    if not isinstance(data, Mapping):
        return _finish("template", [f"<root>: expected an object, got {type(data).__name__}"], strict)

    issues: list[str] = []
    for key in ("page", "global", "sections", "layout", "header", "footer"):
        if key in data and data[key] is not None and not isinstance(data[key], Mapping):
            issues.append(f"{key}: expected an object")

    page = data.get("page")
    if isinstance(page, Mapping) and "size" in page and page["size"] not in _PAGE_SIZES:
        issues.append(f"page.size: unknown page size {page['size']!r} (A4 is used)")

    layout = data.get("layout")
    if isinstance(layout, Mapping) and "columnCount" in layout:
        count = layout["columnCount"]
        if not isinstance(count, int) or not 1 <= count <= 3:
            issues.append(f"layout.columnCount: {count!r} is not 1, 2 or 3")

    style = data.get("global")
    if isinstance(style, Mapping):
        for key in ("fontSize", "lineHeight"):
            if key in style and not (_is_number(style[key]) and style[key] > 0):
                issues.append(f"global.{key}: must be a positive number")

    header = data.get("header")
    if isinstance(header, Mapping) and "blocks" in header and not isinstance(header["blocks"], list):
        issues.append("header.blocks: expected a list")

    if strict:
        issues.extend(i for i in _schema_issues(data, "template") if i not in issues)
    return _finish("template", issues, strict)


def validate_paper(data: Any, *, strict: bool = False) -> list[str]:
    """
    Validate a stored paper document.

    A legacy string body is accepted. Reference numbers must be either
    all present or all absent.

    Args:
        data: Paper dictionary (camelCase)
        strict: If True, also check the JSON Schema and raise on any issue

    Returns:
        List of issue strings (empty when valid)

    Raises:
        ValidationError: If strict and data is invalid
    """
    if not isinstance(data, Mapping):
        return _finish("paper", [f"<root>: expected an object, got {type(data).__name__}"], strict)

    issues: list[str] = []
    for key in ("authors", "keywords", "tables", "references"):
        if key in data and data[key] is not None and not isinstance(data[key], list):
            issues.append(f"{key}: expected a list")

    body = data.get("body")
    if body is not None and not isinstance(body, (str, list)):
        issues.append("body: expected a list of sections or a string")

    references = data.get("references")
    if isinstance(references, list):
        numbered = [
            isinstance(r, Mapping) and r.get("number") is not None for r in references
        ]
        if any(numbered) and not all(numbered):
            issues.append("references: numbers must be given for all references or none")

    if strict:
        issues.extend(i for i in _schema_issues(data, "paper") if i not in issues)
    return _finish("paper", issues, strict)
