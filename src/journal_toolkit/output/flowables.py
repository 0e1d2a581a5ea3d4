"""
Module: output.flowables

Purpose:
    Build the reportlab flowables for every piece of a page: content
    blocks, the title block, header cells and footer row. The PDF
    renderer draws these flowables and the ReportLab oracle measures the
    very same flowables, so measured and drawn heights agree.

Key Classes:
    - FlowableFactory: Styles + flowables for one TemplateConfig

Key Functions:
    - markup_to_inline(): HTML fragment -> reportlab paragraph markup
    - measure_flowables(): Stacked height of flowables in a frame

Markup support:
    Blocks: p, div, h1-h6, ul/ol/li, blockquote, pre, table, hr
    Inline: b/strong, i/em, u, s/strike/del, sup, sub, code, a, br
    Anything else contributes its text only.

Dependencies:
    - reportlab: Paragraph, Table, Spacer, HRFlowable
    - bs4: HTML parsing

Used By:
    - measurement.reportlab_oracle
    - output.renderer
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, List, Optional, Sequence
from xml.sax.saxutils import escape

from bs4 import BeautifulSoup, NavigableString, Tag
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY, TA_LEFT, TA_RIGHT
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import Flowable, Paragraph, Preformatted, Spacer, Table, TableStyle
from reportlab.platypus.flowables import HRFlowable

from ..core.models.paper import EndMatter
from ..core.models.styles import SectionKind, SectionStyle, TextAlign
from ..core.models.template import TemplateConfig
from ..layout.models import (
    AbstractPayload,
    BlockKind,
    ContentBlock,
    EndMatterPayload,
    FooterContent,
    HeaderLine,
    KeywordsPayload,
    PlaceholderPayload,
    ReferencesPayload,
    SectionPayload,
    TablePayload,
    TitleBlock,
)
from ..layout.styles import resolve_all_styles

logger = logging.getLogger(__name__)

ALIGNMENTS = {
    TextAlign.LEFT: TA_LEFT,
    TextAlign.CENTER: TA_CENTER,
    TextAlign.RIGHT: TA_RIGHT,
    TextAlign.JUSTIFY: TA_JUSTIFY,
}

# family -> (regular, bold, italic, bold italic) among the standard PDF fonts
_FONT_FACES = {
    "Times": ("Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic"),
    "Helvetica": ("Helvetica", "Helvetica-Bold", "Helvetica-Oblique", "Helvetica-BoldOblique"),
    "Courier": ("Courier", "Courier-Bold", "Courier-Oblique", "Courier-BoldOblique"),
}
_SANS_HINTS = ("helvetica", "arial", "sans", "verdana", "calibri", "inter", "roboto")
_MONO_HINTS = ("courier", "mono", "consolas")

PLACEHOLDER_COLOR = "#999999"
FOOTER_GAP_MM = 5
FOOTER_PADDING_MM = 3
CSS_PX_TO_PT = 0.75
HEADING_STEP_PT = 1.5

_BLOCK_TAGS = {"p", "div", "h1", "h2", "h3", "h4", "h5", "h6", "ul", "ol",
               "blockquote", "pre", "table", "hr"}


def font_for(style: SectionStyle) -> str:
    """
    Standard PDF font for a CSS-like family list and weight/style flags.

    Example:
        >>> font_for(SectionStyle(font_family="Arial, sans-serif", bold=True))
        'Helvetica-Bold'
    """
    family = style.font_family.lower()
    if any(hint in family for hint in _MONO_HINTS):
        faces = _FONT_FACES["Courier"]
    elif any(hint in family for hint in _SANS_HINTS) and "serif" not in family.replace("sans-serif", ""):
        faces = _FONT_FACES["Helvetica"]
    else:
        faces = _FONT_FACES["Times"]
    return faces[(1 if style.bold else 0) + (2 if style.italic else 0)]


def to_color(value: str, default: Optional[colors.Color] = colors.black) -> Optional[colors.Color]:
    """Parse a hex/named color; "transparent" and junk give default."""
    if not value or value == "transparent":
        return default
    try:
        return colors.toColor(value)
    except ValueError:
        logger.debug(f"Unparseable color {value!r}")
        return default


# ─────────────────────────────────────────────────────────────────────────────
# Markup conversion
# ─────────────────────────────────────────────────────────────────────────────

def markup_to_inline(fragment, *, uppercase: bool = False) -> str:
    """
    Convert an HTML fragment into reportlab paragraph markup.

    Text is escaped; supported inline tags map to their reportlab
    equivalents and everything else is flattened to its text.

    Example:
        >>> markup_to_inline(BeautifulSoup("<b>A</b> &amp; <em>b</em>", "html.parser"))
        '<b>A</b> &amp; <i>b</i>'
    """
    if isinstance(fragment, NavigableString):
        text = str(fragment)
        return escape(text.upper() if uppercase else text)
    if not isinstance(fragment, Tag):
        return ""

    inner = "".join(markup_to_inline(child, uppercase=uppercase) for child in fragment.children)
    name = fragment.name
    if name in {"strong", "b"}:
        return f"<b>{inner}</b>"
    if name in {"em", "i"}:
        return f"<i>{inner}</i>"
    if name == "u":
        return f"<u>{inner}</u>"
    if name in {"s", "strike", "del"}:
        return f"<strike>{inner}</strike>"
    if name == "sup":
        return f"<super>{inner}</super>"
    if name == "sub":
        return f"<sub>{inner}</sub>"
    if name == "code":
        return f'<font face="Courier">{inner}</font>'
    if name == "br":
        return "<br/>"
    if name == "a":
        href = escape(str(fragment.get("href", "")), {'"': "&quot;"})
        return f'<a href="{href}" color="blue">{inner}</a>' if href else inner
    return inner


def measure_flowables(flowables: Sequence[Flowable], width: float) -> float:
    """
    Height of flowables stacked in a frame of the given width.

    Matches Frame.add: spaceAfter always counts, spaceBefore is dropped
    for the first flowable.
    """
    total = 0.0
    for position, flowable in enumerate(flowables):
        _, height = flowable.wrap(width, 10_000)
        if position:
            total += flowable.getSpaceBefore()
        total += height + flowable.getSpaceAfter()
    return total


class FlowableFactory:
    """
    Flowables and paragraph styles for one template.

    A factory is cheap to build and holds no per-document state; every
    call returns fresh flowables (reportlab flowables cache wrap results
    and must not be shared between measuring and drawing).

    Usage:
        factory = FlowableFactory(config)
        story = factory.block_flowables(block)
    """

    def __init__(self, config: TemplateConfig):
        self.config = config
        self.styles: Dict[SectionKind, SectionStyle] = resolve_all_styles(config)
        self._cache: Dict[tuple, ParagraphStyle] = {}

    # ─────────────────────────────────────────────────────────────────────────
    # Styles
    # ─────────────────────────────────────────────────────────────────────────

    def paragraph_style(self, kind: SectionKind, **changes) -> ParagraphStyle:
        """
        ParagraphStyle for a section kind, with optional field changes.

        Margins and padding become indents and paragraph spacing (mm).

        Args:
            kind: Section kind whose resolved style is the base
            **changes: bold, italic, font_size, color, align,
                space_after_mm (replaces the bottom margin), indent_mm
        """
        key = (kind, tuple(sorted(changes.items())))
        if key in self._cache:
            return self._cache[key]

        style = self.styles[kind]
        flags = {k: changes[k] for k in ("bold", "italic") if changes.get(k) is not None}
        if flags:
            style = replace(style, **flags)
        font_size = changes.get("font_size") or style.font_size
        avoid_breaks = self.config.print_rules.avoid_break_inside_paragraphs
        paragraph = ParagraphStyle(
            f"{kind.value}-{len(self._cache)}",
            fontName=font_for(style),
            fontSize=font_size,
            leading=font_size * style.line_height,
            textColor=to_color(changes.get("color") or style.font_color),
            backColor=to_color(style.background_color, None),
            alignment=ALIGNMENTS[changes.get("align") or style.text_align],
            spaceBefore=(style.margin.top + style.padding.top) * mm,
            spaceAfter=(changes.get("space_after_mm", style.margin.bottom) + style.padding.bottom) * mm,
            leftIndent=(style.margin.left + style.padding.left + changes.get("indent_mm", 0)) * mm,
            rightIndent=(style.margin.right + style.padding.right) * mm,
            allowWidows=0 if avoid_breaks else 1,
            allowOrphans=0,
        )
        self._cache[key] = paragraph
        return paragraph

    def _text(self, kind: SectionKind, text: str) -> str:
        style = self.styles[kind]
        text = escape(text.upper() if style.uppercase else text)
        return f"<u>{text}</u>" if style.underline else text

    def _markup(self, kind: SectionKind, fragment) -> str:
        style = self.styles[kind]
        text = markup_to_inline(fragment, uppercase=style.uppercase)
        return f"<u>{text}</u>" if style.underline else text

    # ─────────────────────────────────────────────────────────────────────────
    # Markup
    # ─────────────────────────────────────────────────────────────────────────

    def markup_flowables(self, markup: str, kind: SectionKind) -> List[Flowable]:
        """Convert block-level markup into flowables styled as kind."""
        soup = BeautifulSoup(markup, "html.parser")
        between = self.config.spacing.between_paragraphs
        body = self.paragraph_style(kind, space_after_mm=between)
        flowables: List[Flowable] = []
        run: List = []

        def _flush() -> None:
            text = "".join(self._markup(kind, node) for node in run).strip()
            if text:
                flowables.append(Paragraph(text, body))
            run.clear()

        for node in soup.children:
            if isinstance(node, Tag) and node.name in _BLOCK_TAGS:
                _flush()
                flowables.extend(self._block_tag(node, kind, body))
            else:
                run.append(node)
        _flush()
        return flowables

    def _block_tag(self, node: Tag, kind: SectionKind, body: ParagraphStyle) -> List[Flowable]:
        name = node.name
        if name in {"p", "div"}:
            if any(isinstance(c, Tag) and c.name in _BLOCK_TAGS for c in node.children):
                return self.markup_flowables(node.decode_contents(), kind)
            text = self._markup(kind, node).strip()
            return [Paragraph(text, body)] if text else []
        if name.startswith("h") and name[1:].isdigit():
            level = int(name[1:])
            return [self._heading(node.get_text(" ", strip=True), level)]
        if name in {"ul", "ol"}:
            items = []
            style = self.paragraph_style(kind, space_after_mm=1, indent_mm=5)
            for number, item in enumerate(node.find_all("li", recursive=False), start=1):
                bullet = f"{number}." if name == "ol" else "•"
                items.append(Paragraph(self._markup(kind, item).strip(), style, bulletText=bullet))
            return items
        if name == "blockquote":
            style = self.paragraph_style(kind, italic=True, indent_mm=6, space_after_mm=2)
            return [Paragraph(self._markup(kind, node).strip(), style)]
        if name == "pre":
            style = ParagraphStyle("pre", parent=body, fontName="Courier", alignment=TA_LEFT)
            return [Preformatted(node.get_text(), style)]
        if name == "table":
            rows = [
                [cell.get_text(" ", strip=True) for cell in tr.find_all(["th", "td"])]
                for tr in node.find_all("tr")
            ]
            has_header = bool(node.find("th"))
            table = self._table(rows[:1] if has_header else [], rows[1:] if has_header else rows)
            return [table] if table is not None else []
        if name == "hr":
            return [HRFlowable(width="100%", thickness=0.5, color=colors.grey, spaceBefore=2, spaceAfter=2)]
        return []

    def _heading(self, text: str, level: int = 1) -> Paragraph:
        """Section heading; deeper levels step the font size down."""
        base = self.styles[SectionKind.SECTION_HEADINGS]
        size = max(base.font_size - HEADING_STEP_PT * max(0, level - 1), 6)
        style = self.paragraph_style(
            SectionKind.SECTION_HEADINGS,
            font_size=size,
            space_after_mm=self.config.spacing.after_heading,
        )
        return Paragraph(self._text(SectionKind.SECTION_HEADINGS, text), style)

    def _table(self, headers: Sequence[Sequence[str]], rows: Sequence[Sequence[str]]) -> Optional[Table]:
        """Grid table with wrapped cells; None when there is nothing to show."""
        width = max([len(r) for r in list(headers) + list(rows)] or [0])
        if width == 0:
            return None

        table_config = self.config.table
        cell_style = self.paragraph_style(SectionKind.TABLES, space_after_mm=0)
        head_style = self.paragraph_style(
            SectionKind.TABLES, bold=True, space_after_mm=0, color=table_config.header_text_color,
        )

        def _row(cells: Sequence[str], style: ParagraphStyle) -> list:
            padded = list(cells) + [""] * (width - len(cells))
            return [Paragraph(self._text(SectionKind.TABLES, c), style) for c in padded]

        data = [_row(r, head_style) for r in headers] + [_row(r, cell_style) for r in rows]
        border = table_config.border_width * CSS_PX_TO_PT
        commands = [("VALIGN", (0, 0), (-1, -1), "TOP")]
        if border > 0:
            commands.append(("GRID", (0, 0), (-1, -1), border, to_color(table_config.border_color)))
        if headers:
            commands.append((
                "BACKGROUND", (0, 0), (-1, len(headers) - 1),
                to_color(table_config.header_background_color, colors.white),
            ))
        table = Table(data, repeatRows=len(headers), hAlign="LEFT", colWidths=[f"{100 / width}%"] * width)
        table.setStyle(TableStyle(commands))
        return table

    # ─────────────────────────────────────────────────────────────────────────
    # Content blocks
    # ─────────────────────────────────────────────────────────────────────────

    def block_flowables(self, block: ContentBlock) -> List[Flowable]:
        """Fresh flowables for one content block."""
        payload = block.payload
        if block.kind is BlockKind.ABSTRACT:
            return self._abstract(payload)
        if block.kind is BlockKind.KEYWORDS:
            return self._keywords(payload)
        if block.kind is BlockKind.SECTION:
            flowables = self._section(payload, block.style_kind)
            flowables.append(Spacer(0, self.config.spacing.between_sections * mm))
            return flowables
        if block.kind is BlockKind.TABLE:
            return self._table_block(payload)
        if block.kind is BlockKind.REFERENCES:
            return self._references(payload)
        if block.kind is BlockKind.END_MATTER:
            return self._end_matter(payload)
        if block.kind is BlockKind.PLACEHOLDER:
            return [self._placeholder(payload.text, block.style_kind)]
        raise ValueError(f"Unsupported block kind: {block.kind}")

    def _placeholder(self, text: str, kind: SectionKind) -> Paragraph:
        style = self.paragraph_style(kind, italic=True, color=PLACEHOLDER_COLOR)
        return Paragraph(escape(text), style)

    def _abstract(self, payload: AbstractPayload) -> List[Flowable]:
        flowables: List[Flowable] = []
        if payload.label_text:
            style = self.paragraph_style(SectionKind.ABSTRACT, bold=payload.label_bold, space_after_mm=1)
            flowables.append(Paragraph(self._text(SectionKind.ABSTRACT, payload.label_text), style))
        flowables.extend(self.markup_flowables(payload.markup, SectionKind.ABSTRACT))
        return flowables

    def _keywords(self, payload: KeywordsPayload) -> List[Flowable]:
        label = self._text(SectionKind.KEYWORDS, f"{payload.label_text}: ")
        text = self._text(SectionKind.KEYWORDS, payload.text)
        style = self.paragraph_style(SectionKind.KEYWORDS, space_after_mm=self.config.spacing.between_sections)
        return [Paragraph(f"<b>{label}</b>{text}", style)]

    def _section(self, payload: SectionPayload, kind: SectionKind) -> List[Flowable]:
        flowables: List[Flowable] = []
        if payload.heading:
            flowables.append(self._heading(payload.heading, payload.level + 1))
        if payload.is_placeholder:
            flowables.append(self._placeholder(payload.markup, kind))
        elif payload.markup:
            flowables.extend(self.markup_flowables(payload.markup, kind))
        for subsection in payload.subsections:
            flowables.extend(self._section(subsection, kind))
        return flowables

    def _table_block(self, payload: TablePayload) -> List[Flowable]:
        caption_style = self.paragraph_style(
            SectionKind.TABLES,
            italic=self.config.table.caption_italic or None,
            space_after_mm=1.5,
        )
        flowables: List[Flowable] = [
            Paragraph(self._text(SectionKind.TABLES, payload.caption_text), caption_style)
        ]
        table = self._table([payload.headers] if payload.headers else [], payload.rows)
        if table is not None:
            flowables.append(table)
        if payload.notes:
            notes_style = self.paragraph_style(SectionKind.TABLES, italic=True, font_size=8, space_after_mm=0)
            flowables.append(Spacer(0, 1 * mm))
            flowables.append(Paragraph(escape(payload.notes), notes_style))
        flowables.append(Spacer(0, self.config.spacing.between_sections * mm))
        return flowables

    def _references(self, payload: ReferencesPayload) -> List[Flowable]:
        indent = self.config.reference.hanging_indent
        style = self.paragraph_style(SectionKind.REFERENCES, indent_mm=indent, space_after_mm=1)
        flowables: List[Flowable] = [self._heading(payload.heading)]
        for entry in payload.entries:
            flowables.append(Paragraph(
                self._text(SectionKind.REFERENCES, entry.text), style, bulletText=entry.label,
            ))
        flowables.append(Spacer(0, self.config.spacing.between_sections * mm))
        return flowables

    def _end_matter(self, payload: EndMatterPayload) -> List[Flowable]:
        end: EndMatter = payload.end_matter
        heading = self.paragraph_style(SectionKind.BODY_TEXT, bold=True, font_size=8.5, space_after_mm=0.5)
        item = self.paragraph_style(SectionKind.BODY_TEXT, font_size=8.5, space_after_mm=0.5)
        def text(value: str) -> str:
            return self._text(SectionKind.BODY_TEXT, value)

        flowables: List[Flowable] = [HRFlowable(width="100%", thickness=0.5, color=colors.grey, spaceAfter=2 * mm)]
        if end.contributor_particulars:
            flowables.append(Paragraph(text("Particulars of Contributors:"), heading))
            flowables.extend(
                Paragraph(text(f"{c.number}. {c.designation}"), item) for c in end.contributor_particulars
            )
        author = end.corresponding_author
        if author.name:
            flowables.append(Paragraph(text("Name, Address, E-mail ID of the Corresponding Author:"), heading))
            flowables.append(Paragraph(text(author.name), item))
            if author.address:
                flowables.append(Paragraph(text(author.address), item))
            if author.email:
                flowables.append(Paragraph(text(f"Email: {author.email}"), item))

        declaration = end.author_declaration
        flowables.append(Paragraph(text("Author Declaration:"), heading))
        flowables.append(Paragraph(
            text(f"• Financial or Other Competing Interests: {declaration.competing_interests or 'None'}"),
            item,
        ))
        if declaration.ethics_approval:
            flowables.append(Paragraph(
                text(f"• Was Ethics Committee Approval obtained? {declaration.ethics_approval}"), item,
            ))
        if declaration.informed_consent:
            flowables.append(Paragraph(
                text(f"• Was informed consent obtained? {declaration.informed_consent}"), item,
            ))

        entries = end.plagiarism_checking.checker_entries
        if entries:
            flowables.append(Paragraph(text("Plagiarism Checking Methods:"), heading))
            flowables.extend(Paragraph(text(f"• {e.method}: {e.date}"), item) for e in entries)
        if end.pharmacology:
            flowables.append(Paragraph(text("Pharmacology:"), heading))
            flowables.append(Paragraph(text(end.pharmacology), item))
        if end.emendations:
            flowables.append(Paragraph(text(f"Emendations: {end.emendations}"), heading))
        for label, value in end.dates:
            flowables.append(Paragraph(text(f"{label}: {value}"), item))
        return flowables

    # ─────────────────────────────────────────────────────────────────────────
    # Page chrome
    # ─────────────────────────────────────────────────────────────────────────

    def title_flowables(self, title: TitleBlock) -> List[Flowable]:
        """Title, byline, affiliations and the optional separator rule."""
        flowables: List[Flowable] = [
            Paragraph(self._text(SectionKind.TITLE, title.title), self.paragraph_style(SectionKind.TITLE))
        ]
        if title.authors:
            names = ", ".join(
                self._text(SectionKind.AUTHORS, a.name) + ("<super>*</super>" if a.is_corresponding else "")
                for a in title.authors
            )
            flowables.append(Paragraph(names, self.paragraph_style(SectionKind.AUTHORS)))
        if title.affiliation_line:
            flowables.append(Paragraph(
                self._text(SectionKind.AFFILIATIONS, title.affiliation_line),
                self.paragraph_style(SectionKind.AFFILIATIONS),
            ))
        if title.separator:
            flowables.append(HRFlowable(width="100%", thickness=0.75, color=colors.black, spaceBefore=2, spaceAfter=2))
        flowables.append(Spacer(0, self.config.spacing.between_sections * mm))
        return flowables

    def header_cells(self, lines: Sequence[HeaderLine]) -> List[Paragraph]:
        """One paragraph per header token block, aligned as configured."""
        return [
            Paragraph(
                self._text(SectionKind.HEADER, line.text),
                self.paragraph_style(SectionKind.HEADER, align=line.alignment, space_after_mm=0),
            )
            for line in lines
        ]

    def footer_cells(self, footer: FooterContent) -> List[Optional[Paragraph]]:
        """[left, page label, right]; label is None when hidden."""
        left = Paragraph(
            self._text(SectionKind.FOOTER, footer.left),
            self.paragraph_style(SectionKind.FOOTER, align=TextAlign.LEFT, space_after_mm=0),
        )
        right = Paragraph(
            self._text(SectionKind.FOOTER, footer.right),
            self.paragraph_style(SectionKind.FOOTER, align=TextAlign.RIGHT, space_after_mm=0),
        )
        label = None
        if footer.page_label is not None:
            label = Paragraph(
                escape(footer.page_label),
                self.paragraph_style(SectionKind.FOOTER, align=footer.page_label_position, space_after_mm=0),
            )
        return [left, label, right]

    def header_height(self, lines: Sequence[HeaderLine], width: float) -> float:
        """Header row height plus border padding and gap to the body (points)."""
        if not lines:
            return 0.0
        cell_width = width / len(lines)
        row = max(cell.wrap(cell_width, 10_000)[1] for cell in self.header_cells(lines))
        header = self.config.header
        return row + (header.padding_bottom + header.margin_bottom) * mm

    def footer_height(self, footer: FooterContent, width: float) -> float:
        """Footer row height plus the gap and padding above it (points)."""
        cell_width = width / 3
        row = max(cell.wrap(cell_width, 10_000)[1] for cell in self.footer_cells(footer) if cell is not None)
        return row + (FOOTER_GAP_MM + FOOTER_PADDING_MM) * mm
