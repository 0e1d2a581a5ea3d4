"""
Module: template

Purpose:
    Provides TemplateConfig - the immutable journal template consumed by
    every layout pass - and its sub-configurations (page, columns, header,
    footer, tables, references, numbering, spacing, print rules, tokens).

Key Functions:
    - TemplateConfig.from_dict(data): Parse stored JSON, defaults merged in
    - TemplateConfig.to_dict(): Serialize back to camelCase JSON
    - TemplateConfig.patch(section, **changes): Copy with one sub-config changed
    - TemplateConfig.with_section_override(kind, **props): Copy with a style override
    - PageConfig.dimensions_mm(): Physical page size after orientation

Dependencies:
    - dataclasses (std)
    - enum (std)
    - .styles: BoxSpacing, SectionKind, SectionStyle

Used By:
    - layout: All layout components
    - measurement, output: Geometry and styling
    - core.utils.serialization

Design Note:
    The template editor used to patch one shared mutable config object.
    Here every edit goes through patch()/with_section_override(), which
    return a new TemplateConfig; layout passes only ever see a snapshot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from ..defaults import merge_with_defaults, migrate_legacy_typography
from .styles import (
    BoxSpacing,
    SectionKind,
    SectionStyle,
    TextAlign,
    as_number,
    override_from_dict,
    override_to_dict,
)

logger = logging.getLogger(__name__)


def _non_negative(data: Mapping[str, Any], key: str, default: float) -> float:
    """Non-negative number at key; null is 0, non-numeric values fall back to default."""
    value = data.get(key, default)
    if value is None:
        return 0.0
    number = as_number(value)
    if number is None:
        logger.warning(f"Ignoring non-numeric {key} {value!r}, using {default}")
        return float(default)
    return max(0.0, number)


class PageSize(str, Enum):
    """Supported physical page sizes."""
    A4 = "A4"
    LETTER = "Letter"
    A5 = "A5"
    B5 = "B5"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Any) -> PageSize:
        """Return the size for value; anything unknown degrades to A4."""
        try:
            return cls(value)
        except ValueError:
            logger.warning(f"Unknown page size {value!r}, using A4")
            return cls.A4


# Portrait (width, height) in millimetres
PAGE_SIZES_MM: Dict[PageSize, Tuple[float, float]] = {
    PageSize.A4: (210.0, 297.0),
    PageSize.LETTER: (215.9, 279.4),
    PageSize.A5: (148.0, 210.0),
    PageSize.B5: (176.0, 250.0),
}


class Orientation(str, Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Any) -> Orientation:
        try:
            return cls(value)
        except ValueError:
            return cls.PORTRAIT


def _align(value: Any, default: TextAlign = TextAlign.LEFT) -> TextAlign:
    """Alignment for header/footer positions; justify is not meaningful there."""
    align = TextAlign.parse(value, default)
    return default if align is TextAlign.JUSTIFY else align


# ─────────────────────────────────────────────────────────────────────────────
# Sub-configurations
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PageConfig:
    """
    Page geometry.

    Attributes:
        size: Physical page size
        orientation: Landscape swaps width and height
        margins: Page margins in mm
        background_color: Page background (hex)
        print_background: Whether the background is drawn in exports
    """

    size: PageSize = PageSize.A4
    orientation: Orientation = Orientation.PORTRAIT
    margins: BoxSpacing = BoxSpacing(top=25, right=20, bottom=25, left=20)
    background_color: str = "#ffffff"
    print_background: bool = False

    def dimensions_mm(self) -> Tuple[float, float]:
        """
        Physical (width, height) in millimetres after orientation.

        Example:
            >>> PageConfig(orientation=Orientation.LANDSCAPE).dimensions_mm()
            (297.0, 210.0)
        """
        width, height = PAGE_SIZES_MM.get(self.size, PAGE_SIZES_MM[PageSize.A4])
        if self.orientation is Orientation.LANDSCAPE:
            return height, width
        return width, height

    @property
    def content_width_mm(self) -> float:
        """Width between the left and right margins."""
        return self.dimensions_mm()[0] - self.margins.horizontal

    @property
    def inner_height_mm(self) -> float:
        """Height between the top and bottom margins."""
        return self.dimensions_mm()[1] - self.margins.vertical

    def to_dict(self) -> dict[str, Any]:
        return {
            "size": self.size.value,
            "orientation": self.orientation.value,
            "margins": self.margins.to_dict(),
            "backgroundColor": self.background_color,
            "printBackground": self.print_background,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PageConfig:
        return cls(
            size=PageSize.parse(data.get("size")),
            orientation=Orientation.parse(data.get("orientation")),
            margins=BoxSpacing.from_dict(data.get("margins")),
            background_color=str(data.get("backgroundColor") or "#ffffff"),
            print_background=bool(data.get("printBackground", False)),
        )


@dataclass(frozen=True)
class ColumnLayout:
    """
    Multi-column body layout.

    Attributes:
        column_count: 1, 2 or 3 body columns
        column_gap: Gap between columns (mm)
        abstract_full_width: Abstract spans all columns
        title_full_width: Title block spans all columns
        title_separator: Draw a rule under the title block
    """

    column_count: int = 2
    column_gap: float = 6
    abstract_full_width: bool = False
    title_full_width: bool = True
    title_separator: bool = False

    def __post_init__(self) -> None:
        if self.column_count not in (1, 2, 3):
            raise ValueError(f"column_count must be 1, 2 or 3: {self.column_count}")
        if self.column_gap < 0:
            raise ValueError(f"column_gap must be >= 0: {self.column_gap}")

    def column_width(self, content_width: float) -> float:
        """Width of one column for a given content width (same unit as input)."""
        gaps = (self.column_count - 1) * self.column_gap
        return max(0.0, (content_width - gaps) / self.column_count)

    def to_dict(self) -> dict[str, Any]:
        return {
            "columnCount": self.column_count,
            "columnGap": self.column_gap,
            "abstractFullWidth": self.abstract_full_width,
            "titleFullWidth": self.title_full_width,
            "titleSeparator": self.title_separator,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ColumnLayout:
        try:
            count = int(data.get("columnCount", 2))
        except (TypeError, ValueError):
            count = 2
        clamped = min(3, max(1, count))
        if clamped != count:
            logger.warning(f"columnCount {count} out of range, using {clamped}")
        return cls(
            column_count=clamped,
            column_gap=_non_negative(data, "columnGap", 6),
            abstract_full_width=bool(data.get("abstractFullWidth", False)),
            title_full_width=bool(data.get("titleFullWidth", True)),
            title_separator=bool(data.get("titleSeparator", False)),
        )


@dataclass(frozen=True)
class HeaderTokenBlock:
    """A run of literal-or-placeholder strings rendered as one header cell."""

    tokens: Tuple[str, ...] = ()
    alignment: TextAlign = TextAlign.LEFT

    @property
    def template(self) -> str:
        """Tokens joined into one template string."""
        return "".join(self.tokens)

    def to_dict(self) -> dict[str, Any]:
        return {"tokens": list(self.tokens), "alignment": self.alignment.value}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> HeaderTokenBlock:
        return cls(
            tokens=tuple(str(t) for t in data.get("tokens") or ()),
            alignment=_align(data.get("alignment")),
        )


@dataclass(frozen=True)
class HeaderConfig:
    blocks: Tuple[HeaderTokenBlock, ...] = ()
    border_bottom: bool = True
    border_color: str = "#cccccc"
    padding_bottom: float = 3
    margin_bottom: float = 5

    def to_dict(self) -> dict[str, Any]:
        return {
            "blocks": [b.to_dict() for b in self.blocks],
            "borderBottom": self.border_bottom,
            "borderColor": self.border_color,
            "paddingBottom": self.padding_bottom,
            "marginBottom": self.margin_bottom,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> HeaderConfig:
        return cls(
            blocks=tuple(
                HeaderTokenBlock.from_dict(b) for b in data.get("blocks") or ()
                if isinstance(b, Mapping)
            ),
            border_bottom=bool(data.get("borderBottom", True)),
            border_color=str(data.get("borderColor") or "#cccccc"),
            padding_bottom=_non_negative(data, "paddingBottom", 3),
            margin_bottom=_non_negative(data, "marginBottom", 5),
        )


@dataclass(frozen=True)
class FooterConfig:
    left_content: str = ""
    right_content: str = ""
    show_page_number: bool = True
    page_number_position: TextAlign = TextAlign.CENTER
    border_top: bool = True
    border_color: str = "#cccccc"

    def to_dict(self) -> dict[str, Any]:
        return {
            "leftContent": self.left_content,
            "rightContent": self.right_content,
            "showPageNumber": self.show_page_number,
            "pageNumberPosition": self.page_number_position.value,
            "borderTop": self.border_top,
            "borderColor": self.border_color,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FooterConfig:
        return cls(
            left_content=str(data.get("leftContent") or ""),
            right_content=str(data.get("rightContent") or ""),
            show_page_number=bool(data.get("showPageNumber", True)),
            page_number_position=_align(data.get("pageNumberPosition"), TextAlign.CENTER),
            border_top=bool(data.get("borderTop", True)),
            border_color=str(data.get("borderColor") or "#cccccc"),
        )


@dataclass(frozen=True)
class AbstractLabelConfig:
    label_text: str = "Abstract"
    label_bold: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {"labelText": self.label_text, "labelBold": self.label_bold}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AbstractLabelConfig:
        return cls(
            label_text=str(data.get("labelText") or ""),
            label_bold=bool(data.get("labelBold", True)),
        )


@dataclass(frozen=True)
class TableConfig:
    """Table styling; border_width is in CSS pixels."""

    border_width: float = 1
    border_color: str = "#000000"
    header_background_color: str = "#f5f5f5"
    header_text_color: str = "#000000"
    caption_prefix: str = "Table"
    caption_italic: bool = False
    prevent_break: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "borderWidth": self.border_width,
            "borderColor": self.border_color,
            "headerBackgroundColor": self.header_background_color,
            "headerTextColor": self.header_text_color,
            "captionPrefix": self.caption_prefix,
            "captionItalic": self.caption_italic,
            "preventBreak": self.prevent_break,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TableConfig:
        return cls(
            border_width=_non_negative(data, "borderWidth", 1),
            border_color=str(data.get("borderColor") or "#000000"),
            header_background_color=str(data.get("headerBackgroundColor") or "#f5f5f5"),
            header_text_color=str(data.get("headerTextColor") or "#000000"),
            caption_prefix=str(data.get("captionPrefix") or ""),
            caption_italic=bool(data.get("captionItalic", False)),
            prevent_break=bool(data.get("preventBreak", True)),
        )


@dataclass(frozen=True)
class ReferenceConfig:
    numbering_style: str = "numbered"
    hanging_indent: float = 8
    auto_numbering: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "numberingStyle": self.numbering_style,
            "hangingIndent": self.hanging_indent,
            "autoNumbering": self.auto_numbering,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ReferenceConfig:
        style = str(data.get("numberingStyle") or "numbered")
        if style != "numbered":
            logger.info(f"Reference style {style!r} is rendered as numbered")
        return cls(
            numbering_style=style,
            hanging_indent=_non_negative(data, "hangingIndent", 8),
            auto_numbering=bool(data.get("autoNumbering", True)),
        )


@dataclass(frozen=True)
class NumberingConfig:
    table_prefix: str = "Table"
    figure_prefix: str = "Figure"
    reference_start_number: int = 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "tablePrefix": self.table_prefix,
            "figurePrefix": self.figure_prefix,
            "referenceStartNumber": self.reference_start_number,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NumberingConfig:
        try:
            start = int(data.get("referenceStartNumber", 1))
        except (TypeError, ValueError):
            start = 1
        return cls(
            table_prefix=str(data.get("tablePrefix") or ""),
            figure_prefix=str(data.get("figurePrefix") or ""),
            reference_start_number=start,
        )


@dataclass(frozen=True)
class SpacingConfig:
    """Vertical rhythm in mm."""

    between_sections: float = 8
    between_paragraphs: float = 3
    after_heading: float = 4

    def to_dict(self) -> dict[str, Any]:
        return {
            "betweenSections": self.between_sections,
            "betweenParagraphs": self.between_paragraphs,
            "afterHeading": self.after_heading,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SpacingConfig:
        return cls(
            between_sections=_non_negative(data, "betweenSections", 8),
            between_paragraphs=_non_negative(data, "betweenParagraphs", 3),
            after_heading=_non_negative(data, "afterHeading", 4),
        )


@dataclass(frozen=True)
class PrintRulesConfig:
    page_break_before_sections: bool = False
    avoid_break_inside_paragraphs: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "pageBreakBeforeSections": self.page_break_before_sections,
            "avoidBreakInsideParagraphs": self.avoid_break_inside_paragraphs,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PrintRulesConfig:
        return cls(
            page_break_before_sections=bool(data.get("pageBreakBeforeSections", False)),
            avoid_break_inside_paragraphs=bool(data.get("avoidBreakInsideParagraphs", True)),
        )


@dataclass(frozen=True)
class TokenConfig:
    journal_name: str = ""
    journal_abbreviation: str = ""
    issn: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "journalName": self.journal_name,
            "journalAbbreviation": self.journal_abbreviation,
            "issn": self.issn,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TokenConfig:
        return cls(
            journal_name=str(data.get("journalName") or ""),
            journal_abbreviation=str(data.get("journalAbbreviation") or ""),
            issn=str(data.get("issn") or ""),
        )


# ─────────────────────────────────────────────────────────────────────────────
# Root config
# ─────────────────────────────────────────────────────────────────────────────

# TemplateConfig attribute -> persisted JSON key
_SECTION_KEYS: Dict[str, str] = {
    "page": "page",
    "layout": "layout",
    "header": "header",
    "footer": "footer",
    "abstract_label": "abstractLabel",
    "table": "table",
    "reference": "reference",
    "numbering": "numbering",
    "spacing": "spacing",
    "print_rules": "printRules",
    "tokens": "tokens",
}


def _freeze_overrides(
    overrides: Mapping[SectionKind, Mapping[str, Any]],
) -> Mapping[SectionKind, Mapping[str, Any]]:
    return MappingProxyType({
        kind: MappingProxyType(dict(props)) for kind, props in overrides.items()
    })


@dataclass(frozen=True)
class TemplateConfig:
    """
    Journal template configuration (immutable).

    One value is one rendering pass's view of the template. Unknown or
    missing keys in stored JSON are filled from DEFAULT_TEMPLATE_CONFIG
    by from_dict().

    Attributes:
        page: Page geometry
        global_style: Base style every section inherits
        sections: Partial style overrides per SectionKind (attribute names)
        layout: Column layout
        header: Header token blocks and border
        footer: Footer content and page-number display
        abstract_label: Abstract heading label
        table: Table styling
        reference: Reference list behaviour
        numbering: Table/figure prefixes and reference start number
        spacing: Vertical spacing (mm)
        print_rules: Page-break behaviour
        tokens: Journal-level token values

    Example:
        >>> config = TemplateConfig.from_dict({"layout": {"columnCount": 1}})
        >>> config.layout.column_count
        1
        >>> config.patch("layout", column_count=3).layout.column_count
        3
    """

    page: PageConfig = field(default_factory=PageConfig)
    global_style: SectionStyle = field(default_factory=SectionStyle)
    sections: Mapping[SectionKind, Mapping[str, Any]] = field(default_factory=dict)
    layout: ColumnLayout = field(default_factory=ColumnLayout)
    header: HeaderConfig = field(default_factory=HeaderConfig)
    footer: FooterConfig = field(default_factory=FooterConfig)
    abstract_label: AbstractLabelConfig = field(default_factory=AbstractLabelConfig)
    table: TableConfig = field(default_factory=TableConfig)
    reference: ReferenceConfig = field(default_factory=ReferenceConfig)
    numbering: NumberingConfig = field(default_factory=NumberingConfig)
    spacing: SpacingConfig = field(default_factory=SpacingConfig)
    print_rules: PrintRulesConfig = field(default_factory=PrintRulesConfig)
    tokens: TokenConfig = field(default_factory=TokenConfig)

    def __post_init__(self) -> None:
        object.__setattr__(self, "sections", _freeze_overrides(self.sections))

    def section_override(self, kind: SectionKind) -> Mapping[str, Any]:
        """Partial override for a kind (empty mapping when not configured)."""
        return self.sections.get(kind, MappingProxyType({}))

    # ─────────────────────────────────────────────────────────────────────────
    # Edits (return new values)
    # ─────────────────────────────────────────────────────────────────────────

    def patch(self, section: str, **changes: Any) -> TemplateConfig:
        """
        Return a copy with one sub-configuration updated.

        Args:
            section: Attribute name, e.g. "layout", "footer", "global_style"
            **changes: Field values for that sub-configuration

        Raises:
            ValueError: If section is not a sub-configuration
            TypeError: If a change names an unknown field
        """
        if section not in _SECTION_KEYS and section != "global_style":
            raise ValueError(f"Unknown template section: {section!r}")
        current = getattr(self, section)
        return replace(self, **{section: replace(current, **changes)})

    def with_section_override(self, kind: SectionKind, **props: Any) -> TemplateConfig:
        """
        Return a copy whose override for kind has props merged in.

        A value of None removes that property from the override so it
        falls back to the global style again.
        """
        valid = {f.name for f in fields(SectionStyle)}
        unknown = set(props) - valid
        if unknown:
            raise TypeError(f"Unknown style properties: {sorted(unknown)}")
        merged = dict(self.section_override(kind))
        for name, value in props.items():
            if value is None:
                merged.pop(name, None)
            else:
                merged[name] = value
        sections = {k: dict(v) for k, v in self.sections.items()}
        sections[kind] = merged
        return replace(self, sections=sections)

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            key: getattr(self, attr).to_dict() for attr, key in _SECTION_KEYS.items()
        }
        result["global"] = self.global_style.to_dict()
        result["sections"] = {
            kind.value: override_to_dict(self.section_override(kind)) for kind in SectionKind
        }
        return result

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]] = None) -> TemplateConfig:
        """
        Parse a stored template document.

        Legacy typography documents are migrated, then every missing key
        is taken from DEFAULT_TEMPLATE_CONFIG. Never raises for missing
        or unknown keys.
        """
        merged = merge_with_defaults(migrate_legacy_typography(data or {}))
        sections: Dict[SectionKind, Dict[str, Any]] = {}
        for key, override in merged["sections"].items():
            kind = SectionKind.parse(key)
            if kind is None:
                logger.warning(f"Ignoring style override for unknown section {key!r}")
                continue
            if isinstance(override, Mapping):
                sections[kind] = override_from_dict(override)
        return cls(
            page=PageConfig.from_dict(merged["page"]),
            global_style=SectionStyle.from_dict(merged["global"]),
            sections=sections,
            layout=ColumnLayout.from_dict(merged["layout"]),
            header=HeaderConfig.from_dict(merged["header"]),
            footer=FooterConfig.from_dict(merged["footer"]),
            abstract_label=AbstractLabelConfig.from_dict(merged["abstractLabel"]),
            table=TableConfig.from_dict(merged["table"]),
            reference=ReferenceConfig.from_dict(merged["reference"]),
            numbering=NumberingConfig.from_dict(merged["numbering"]),
            spacing=SpacingConfig.from_dict(merged["spacing"]),
            print_rules=PrintRulesConfig.from_dict(merged["printRules"]),
            tokens=TokenConfig.from_dict(merged["tokens"]),
        )


def default_template_config() -> TemplateConfig:
    """TemplateConfig built purely from DEFAULT_TEMPLATE_CONFIG."""
    return TemplateConfig.from_dict({})
