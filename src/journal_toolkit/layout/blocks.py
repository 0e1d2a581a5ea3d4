"""
Module: layout.blocks

Purpose:
    Flatten a manuscript into the ordered list of content blocks that the
    paginator places. Tables are numbered here and reference numbers are
    fixed here, so every later stage sees final numbering.

Key Functions:
    - build_blocks(): Main entry point
    - split_page_breaks(): Split section markup at manual page breaks
    - number_references(): Apply the reference numbering rule

Block order:
    1. Abstract (if non-empty)
    2. Keywords (if any)
    3. Body sections in document order, subsections inlined
    4. Tables in document order, numbered 1..N
    5. References (one block, if any)
    6. End matter (one block, if present)

    An empty result becomes a single placeholder block, so there is
    always something to place.

Dependencies:
    - re (std)
    - layout.models: ContentBlock and payloads
    - layout.tokens: Caption token resolution

Used By:
    - controller.layout_paper
    - layout.session.PaginationSession
"""

from __future__ import annotations

import logging
import re
from typing import List, Sequence, Tuple

from ..core.models.paper import PaperReference, PaperSection, StructuredPaperData
from ..core.models.styles import SectionKind
from ..core.models.template import TemplateConfig
from .models import (
    AbstractPayload,
    BlockKind,
    ContentBlock,
    EndMatterPayload,
    KeywordsPayload,
    PlaceholderPayload,
    ReferenceEntry,
    ReferencesPayload,
    SectionPayload,
    TablePayload,
)
from .tokens import TokenContext, resolve_tokens

logger = logging.getLogger(__name__)

SECTION_PLACEHOLDER_TEXT = "[Content not yet provided]"
EMPTY_DOCUMENT_TEXT = "[No content yet.]"

PAGE_BREAK_PATTERN = re.compile(r"<div[^>]*data-page-break[^>]*>[^<]*</div>", re.IGNORECASE)


def split_page_breaks(markup: str) -> List[Tuple[str, bool]]:
    """
    Split markup at manual page-break markers.

    Returns:
        (chunk, break_before) pairs for the non-empty chunks. A chunk has
        break_before=True when a marker precedes it.

    Example:
        >>> split_page_breaks('<p>a</p><div data-page-break="true"></div><p>b</p>')
        [('<p>a</p>', False), ('<p>b</p>', True)]
    """
    chunks: List[Tuple[str, bool]] = []
    pending_break = False
    raw = PAGE_BREAK_PATTERN.split(markup)
    for position, chunk in enumerate(raw):
        trimmed = chunk.strip()
        if trimmed:
            chunks.append((trimmed, pending_break))
            pending_break = False
        if position < len(raw) - 1:
            pending_break = True
    return chunks


def number_references(
    references: Sequence[PaperReference],
    start: int,
    auto_numbering: bool,
) -> Tuple[ReferenceEntry, ...]:
    """
    Fix the number of every reference.

    References are auto-numbered start, start+1, ... unless auto
    numbering is off and every reference carries its own number. Numbers
    are never mixed.

    Example:
        >>> [e.number for e in number_references(refs, start=5, auto_numbering=True)]
        [5, 6, 7]
    """
    supplied = all(ref.number is not None for ref in references)
    if auto_numbering or not supplied:
        if not auto_numbering:
            logger.info("Some references lack numbers, auto-numbering all of them")
        return tuple(
            ReferenceEntry(number=start + offset, text=ref.text)
            for offset, ref in enumerate(references)
        )
    return tuple(ReferenceEntry(number=ref.number, text=ref.text) for ref in references)


def _section_payload(section: PaperSection, level: int, markup: str) -> SectionPayload:
    subsections = tuple(_subsection_payload(s, level + 1) for s in section.subsections)
    placeholder = not markup.strip()
    return SectionPayload(
        heading=section.heading,
        markup=SECTION_PLACEHOLDER_TEXT if placeholder else markup,
        level=level,
        subsections=subsections,
        is_placeholder=placeholder,
    )


def _subsection_payload(section: PaperSection, level: int) -> SectionPayload:
    # Page-break markers inside subsections are dropped; subsections stay inline
    markup = " ".join(chunk for chunk, _ in split_page_breaks(section.content))
    return _section_payload(section, level, markup)


def _section_payloads(section: PaperSection) -> List[Tuple[SectionPayload, bool]]:
    """One payload per page-break chunk: heading on the first, subsections on the last."""
    chunks = split_page_breaks(section.content)
    if not chunks:
        return [(_section_payload(section, 0, ""), False)]

    payloads: List[Tuple[SectionPayload, bool]] = []
    last = len(chunks) - 1
    for position, (chunk, break_before) in enumerate(chunks):
        payload = SectionPayload(
            heading=section.heading if position == 0 else "",
            markup=chunk,
            subsections=(
                tuple(_subsection_payload(s, 1) for s in section.subsections)
                if position == last else ()
            ),
        )
        payloads.append((payload, break_before))
    return payloads


def build_blocks(data: StructuredPaperData, config: TemplateConfig) -> List[ContentBlock]:
    """
    Build the ordered content blocks for a manuscript.

    Args:
        data: Manuscript
        config: Template (labels, numbering, layout hints, print rules)

    Returns:
        Non-empty list of ContentBlocks with index == list position
    """
    blocks: List[ContentBlock] = []
    full_width_front = config.layout.abstract_full_width

    def _add(kind, style_kind, payload, *, spans_columns=False, break_before=False) -> None:
        blocks.append(ContentBlock(
            index=len(blocks),
            kind=kind,
            style_kind=style_kind,
            payload=payload,
            spans_columns=spans_columns,
            break_before=break_before,
        ))

    if data.abstract.strip():
        _add(
            BlockKind.ABSTRACT,
            SectionKind.ABSTRACT,
            AbstractPayload(
                markup=data.abstract,
                label_text=config.abstract_label.label_text,
                label_bold=config.abstract_label.label_bold,
            ),
            spans_columns=full_width_front,
        )

    if data.keywords:
        _add(
            BlockKind.KEYWORDS,
            SectionKind.KEYWORDS,
            KeywordsPayload(keywords=tuple(data.keywords)),
            spans_columns=full_width_front,
        )

    break_sections = config.print_rules.page_break_before_sections
    for section in data.body:
        for position, (payload, manual_break) in enumerate(_section_payloads(section)):
            section_break = break_sections and position == 0 and bool(blocks)
            _add(
                BlockKind.SECTION,
                SectionKind.BODY_TEXT,
                payload,
                spans_columns=not section.columns,
                break_before=manual_break or section_break,
            )

    caption_prefix = config.numbering.table_prefix or config.table.caption_prefix
    context = TokenContext.from_sources(config, data)
    for number, table in enumerate(data.tables, start=1):
        _add(
            BlockKind.TABLE,
            SectionKind.TABLES,
            TablePayload(
                number=number,
                caption=resolve_tokens(table.caption, context),
                caption_prefix=caption_prefix,
                headers=table.headers,
                rows=table.rows,
                notes=table.notes,
            ),
        )

    if data.references:
        entries = number_references(
            data.references,
            start=config.numbering.reference_start_number,
            auto_numbering=config.reference.auto_numbering,
        )
        _add(BlockKind.REFERENCES, SectionKind.REFERENCES, ReferencesPayload(entries=entries))

    if data.end_matter is not None:
        _add(BlockKind.END_MATTER, SectionKind.BODY_TEXT, EndMatterPayload(end_matter=data.end_matter))

    if not blocks:
        logger.debug("Paper has no content, emitting placeholder block")
        _add(BlockKind.PLACEHOLDER, SectionKind.BODY_TEXT, PlaceholderPayload(text=EMPTY_DOCUMENT_TEXT))

    logger.debug(f"Built {len(blocks)} content blocks")
    return blocks
