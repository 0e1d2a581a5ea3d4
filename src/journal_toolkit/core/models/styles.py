"""
Module: styles

Purpose:
    Provides the style primitives shared by every template section:
    BoxSpacing (four-sided mm box), SectionKind (the fixed set of
    styleable entity kinds) and SectionStyle (a fully specified style
    record). Partial per-section overrides are plain mappings keyed by
    SectionStyle attribute names; resolving them is the job of
    layout.styles.

Key Functions:
    - BoxSpacing.from_dict(data) / to_dict(): Serialization
    - SectionKind.parse(value): Lenient lookup by JSON key
    - SectionStyle.from_dict(data, fallback) / to_dict(): Serialization
    - override_from_dict(data): Convert a camelCase partial override

Dependencies:
    - dataclasses (std)
    - enum (std)
    - logging (std): Warnings for dropped malformed values

Used By:
    - core.models.template.TemplateConfig
    - layout.styles: Style cascading
    - output.flowables: ParagraphStyle construction
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)


def as_number(value: Any) -> Optional[float]:
    """Finite int/float as float; strings, bools and junk give None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value) if math.isfinite(value) else None


@dataclass(frozen=True, slots=True)
class BoxSpacing:
    """
    Four-sided spacing box in millimetres.

    Used for page margins and for the margin/padding of a section style.
    Boxes are always replaced as a whole, never merged side by side.

    Example:
        >>> BoxSpacing(top=25, right=20, bottom=25, left=20).vertical
        50
    """

    top: float = 0
    right: float = 0
    bottom: float = 0
    left: float = 0

    def __post_init__(self) -> None:
        for side in ("top", "right", "bottom", "left"):
            if getattr(self, side) < 0:
                raise ValueError(f"{side} must be >= 0: {getattr(self, side)}")

    @property
    def vertical(self) -> float:
        """Sum of top and bottom."""
        return self.top + self.bottom

    @property
    def horizontal(self) -> float:
        """Sum of left and right."""
        return self.left + self.right

    def to_dict(self) -> dict[str, float]:
        return {"top": self.top, "right": self.right, "bottom": self.bottom, "left": self.left}

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> BoxSpacing:
        """Build a box from a mapping; missing, negative or non-numeric sides become 0."""
        if not isinstance(data, Mapping):
            if data:
                logger.warning(f"Ignoring non-mapping spacing box: {data!r}")
            return ZERO_BOX
        sides = {}
        for side in ("top", "right", "bottom", "left"):
            value = data.get(side)
            number = as_number(value)
            if number is None and value is not None:
                logger.warning(f"Ignoring non-numeric {side} spacing: {value!r}")
            sides[side] = max(0.0, number or 0.0)
        return cls(**sides)


ZERO_BOX = BoxSpacing()


class SectionKind(str, Enum):
    """Entity kinds that can carry a style override."""
    TITLE = "title"
    AUTHORS = "authors"
    AFFILIATIONS = "affiliations"
    ABSTRACT = "abstract"
    KEYWORDS = "keywords"
    SECTION_HEADINGS = "sectionHeadings"
    BODY_TEXT = "bodyText"
    REFERENCES = "references"
    TABLES = "tables"
    HEADER = "header"
    FOOTER = "footer"

    def __str__(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        """Human readable label, as shown in the template editor."""
        return SECTION_LABELS[self]

    @classmethod
    def parse(cls, value: Any) -> Optional[SectionKind]:
        """Return the kind for a JSON key or member, or None if unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


SECTION_LABELS: Dict[SectionKind, str] = {
    SectionKind.TITLE: "Title",
    SectionKind.AUTHORS: "Authors",
    SectionKind.AFFILIATIONS: "Affiliations",
    SectionKind.ABSTRACT: "Abstract",
    SectionKind.KEYWORDS: "Keywords",
    SectionKind.SECTION_HEADINGS: "Section Headings",
    SectionKind.BODY_TEXT: "Body Text",
    SectionKind.REFERENCES: "References",
    SectionKind.TABLES: "Tables",
    SectionKind.HEADER: "Header",
    SectionKind.FOOTER: "Footer",
}


class TextAlign(str, Enum):
    """Horizontal text alignment."""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    JUSTIFY = "justify"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Any, default: Optional[TextAlign] = None) -> TextAlign:
        try:
            return cls(value)
        except ValueError:
            return default or cls.LEFT


# SectionStyle attribute name -> persisted JSON key
STYLE_FIELDS: Dict[str, str] = {
    "font_family": "fontFamily",
    "font_size": "fontSize",
    "font_color": "fontColor",
    "bold": "bold",
    "italic": "italic",
    "underline": "underline",
    "uppercase": "uppercase",
    "text_align": "textAlign",
    "background_color": "backgroundColor",
    "line_height": "lineHeight",
    "margin": "margin",
    "padding": "padding",
}

_BOX_FIELDS = {"margin", "padding"}


@dataclass(frozen=True, slots=True)
class SectionStyle:
    """
    Fully specified style record (immutable).

    The template's global style is a SectionStyle; every resolved
    per-section style is one too. Sizes are in points, boxes in mm.

    Attributes:
        font_family: CSS-like family list, e.g. "'Times New Roman', serif"
        font_size: Font size in points
        font_color: Hex color string
        bold: Bold weight
        italic: Italic style
        underline: Underlined text
        uppercase: Render text in upper case
        text_align: Horizontal alignment
        background_color: Hex color or "transparent"
        line_height: Unitless multiplier of font_size
        margin: Outer spacing box (mm)
        padding: Inner spacing box (mm)
    """

    font_family: str = "'Times New Roman', Times, serif"
    font_size: float = 10
    font_color: str = "#000000"
    bold: bool = False
    italic: bool = False
    underline: bool = False
    uppercase: bool = False
    text_align: TextAlign = TextAlign.JUSTIFY
    background_color: str = "transparent"
    line_height: float = 1.4
    margin: BoxSpacing = ZERO_BOX
    padding: BoxSpacing = ZERO_BOX

    def __post_init__(self) -> None:
        if self.font_size <= 0:
            raise ValueError(f"font_size must be positive: {self.font_size}")
        if self.line_height <= 0:
            raise ValueError(f"line_height must be positive: {self.line_height}")

    @property
    def leading(self) -> float:
        """Baseline-to-baseline distance in points."""
        return self.font_size * self.line_height

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for attr, key in STYLE_FIELDS.items():
            value = getattr(self, attr)
            if attr in _BOX_FIELDS:
                value = value.to_dict()
            elif isinstance(value, TextAlign):
                value = value.value
            result[key] = value
        return result

    @classmethod
    def from_dict(
        cls,
        data: Optional[Mapping[str, Any]],
        fallback: Optional[SectionStyle] = None,
    ) -> SectionStyle:
        """
        Build a style from camelCase JSON.

        Keys missing from data take the value from fallback (or the
        dataclass defaults when no fallback is given). A non-numeric or
        non-positive fontSize/lineHeight is dropped with a warning so the
        fallback value applies.
        """
        base = fallback or cls()
        values = override_from_dict(data if isinstance(data, Mapping) else {})
        for attr in ("font_size", "line_height"):
            if attr in values:
                number = as_number(values[attr])
                if number is None or number <= 0:
                    logger.warning(f"Ignoring invalid {attr}: {values[attr]!r}, using {getattr(base, attr)}")
                    del values[attr]
        merged = {attr: values.get(attr, getattr(base, attr)) for attr in STYLE_FIELDS}
        return cls(**merged)


def override_from_dict(data: Mapping[str, Any]) -> dict[str, Any]:
    """
    Convert a camelCase partial style into attribute-keyed overrides.

    Unknown keys and None values are dropped. Box values become
    BoxSpacing objects; alignment strings become TextAlign members.

    Example:
        >>> override_from_dict({"fontSize": 18, "bold": True, "colour": "x"})
        {'font_size': 18, 'bold': True}
    """
    result: dict[str, Any] = {}
    for attr, key in STYLE_FIELDS.items():
        if key not in data or data[key] is None:
            continue
        value = data[key]
        if attr in _BOX_FIELDS:
            if not isinstance(value, (BoxSpacing, Mapping)):
                logger.warning(f"Ignoring non-mapping {key} override: {value!r}")
                continue
            value = value if isinstance(value, BoxSpacing) else BoxSpacing.from_dict(value)
        elif attr == "text_align":
            value = TextAlign.parse(value)
        result[attr] = value
    return result


def override_to_dict(override: Mapping[str, Any]) -> dict[str, Any]:
    """Inverse of override_from_dict, used when saving templates."""
    result: dict[str, Any] = {}
    for attr, value in override.items():
        key = STYLE_FIELDS.get(attr)
        if key is None:
            continue
        if isinstance(value, BoxSpacing):
            value = value.to_dict()
        elif isinstance(value, TextAlign):
            value = value.value
        result[key] = value
    return result
