"""
Module: layout.assembler

Purpose:
    Turn a page partition into full page descriptions: resolved header
    cells, resolved footer row with the "n / total" label, and the title
    block on page 1. Also computes the physical print geometry.

Key Functions:
    - assemble_pages(): Partition -> PageDescriptions
    - build_title_block(): Page-1 title, byline and affiliations
    - print_geometry(): Physical page size for export

Dependencies:
    - layout.tokens: Placeholder resolution
    - layout.models: PageDescription, HeaderLine, FooterContent, TitleBlock

Used By:
    - controller.layout_paper
    - layout.session.PaginationSession
    - measurement.oracle.compute_geometry (representative chrome)
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, List, Optional, Sequence, Tuple

from ..core.models.paper import StructuredPaperData
from ..core.models.template import PAGE_SIZES_MM, Orientation, PageSize, TemplateConfig
from .config import PrintGeometry
from .models import (
    AuthorCredit,
    ContentBlock,
    FooterContent,
    HeaderLine,
    PageDescription,
    TitleBlock,
)
from .tokens import TokenContext, resolve_tokens

logger = logging.getLogger(__name__)

UNTITLED_PAPER = "Untitled Paper"


def build_header_lines(
    config: TemplateConfig,
    data: StructuredPaperData,
    page_number: int,
    *,
    today: Callable[[], date] = date.today,
) -> Tuple[HeaderLine, ...]:
    """Resolve every header token block for one page."""
    context = TokenContext.from_sources(config, data, page_number)
    return tuple(
        HeaderLine(text=resolve_tokens(block.template, context, today=today), alignment=block.alignment)
        for block in config.header.blocks
    )


def build_footer(
    config: TemplateConfig,
    data: StructuredPaperData,
    page_number: int,
    total_pages: int,
    *,
    today: Callable[[], date] = date.today,
) -> FooterContent:
    """Resolve the footer row for one page."""
    context = TokenContext.from_sources(config, data, page_number)
    footer = config.footer
    return FooterContent(
        left=resolve_tokens(footer.left_content, context, today=today),
        right=resolve_tokens(footer.right_content, context, today=today),
        page_label=f"{page_number} / {total_pages}" if footer.show_page_number else None,
        page_label_position=footer.page_number_position,
    )


def build_title_block(data: StructuredPaperData, config: TemplateConfig) -> TitleBlock:
    """
    Page-1 title block.

    Affiliations are de-duplicated in first-seen order and empty ones
    are skipped.

    Example:
        >>> build_title_block(paper, config).affiliation_line
        'Univ A; Univ B'
    """
    affiliations: List[str] = []
    for author in data.authors:
        affiliation = author.affiliation.strip()
        if affiliation and affiliation not in affiliations:
            affiliations.append(affiliation)
    return TitleBlock(
        title=data.title.strip() or UNTITLED_PAPER,
        authors=tuple(AuthorCredit(a.name, a.is_corresponding) for a in data.authors),
        affiliation_line="; ".join(affiliations),
        separator=config.layout.title_separator,
    )


def assemble_pages(
    partition: Sequence[Sequence[int]],
    data: StructuredPaperData,
    config: TemplateConfig,
    blocks: Optional[Sequence[ContentBlock]] = None,
    *,
    today: Callable[[], date] = date.today,
) -> List[PageDescription]:
    """
    Build a description of every page.

    Args:
        partition: Block indices per page (output of paginate())
        data: Manuscript (title block, token values)
        config: Template (header, footer, layout)
        blocks: Optional blocks, used only to check the partition
        today: Clock for {{year}}

    Returns:
        One PageDescription per page, numbered from 1

    Raises:
        ValueError: If blocks is given and the partition does not cover
            every block index exactly once
    """
    if blocks is not None:
        placed = [i for page in partition for i in page]
        if sorted(placed) != list(range(len(blocks))):
            raise ValueError(
                f"Partition covers {len(placed)} indices but there are {len(blocks)} blocks"
            )

    pages = list(partition) or [[]]
    total = len(pages)
    title = build_title_block(data, config)

    descriptions = []
    for offset, indices in enumerate(pages):
        number = offset + 1
        descriptions.append(PageDescription(
            number=number,
            total_pages=total,
            block_indices=tuple(indices),
            header_lines=build_header_lines(config, data, number, today=today),
            footer=build_footer(config, data, number, total, today=today),
            title=title if number == 1 else None,
        ))
    logger.debug(f"Assembled {total} page descriptions")
    return descriptions


def print_geometry(config: TemplateConfig) -> PrintGeometry:
    """
    Physical page size for export, orientation applied.

    Example:
        >>> geometry = print_geometry(TemplateConfig())
        >>> geometry.width_mm, geometry.height_mm
        (210.0, 297.0)
    """
    size = config.page.size
    if size not in PAGE_SIZES_MM:
        logger.warning(f"Unknown page size {size!r}, using A4")
        size = PageSize.A4
    width, height = PAGE_SIZES_MM[size]
    if config.page.orientation is Orientation.LANDSCAPE:
        width, height = height, width
    return PrintGeometry(
        size=size,
        orientation=config.page.orientation,
        width_mm=width,
        height_mm=height,
    )
