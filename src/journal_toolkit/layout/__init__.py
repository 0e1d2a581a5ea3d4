"""
Module: layout

Purpose:
    Pagination engine: turns a manuscript and a template into an ordered
    set of page descriptions. Pure and synchronous apart from the
    background PaginationSession.

Key Functions:
    - build_blocks(): Manuscript -> ordered content blocks
    - paginate(): Block heights -> page partition
    - assemble_pages(): Partition -> page descriptions
    - resolve_style(), resolve_section_style(): Style cascade
    - resolve_tokens(): Header/footer placeholder substitution

Key Classes:
    - PageGeometry: Vertical page space
    - ContentBlock, PagePlan, PageDescription, LayoutResult: Layout models

Dependencies:
    - journal_toolkit.core.models: TemplateConfig, StructuredPaperData

Note:
    PaginationSession lives in layout.session and is not re-exported here;
    it depends on journal_toolkit.measurement, which depends on this package.

Used By:
    - journal_toolkit.controller: Layout and render pipeline
    - journal_toolkit.output: Rendering
"""

from .config import PageGeometry, PrintGeometry, column_width_pt, content_width_pt, mm_to_pt, pt_to_mm
from .models import (
    BlockKind,
    ContentBlock,
    FooterContent,
    HeaderLine,
    LayoutResult,
    PageDescription,
    PagePlan,
    TitleBlock,
)
from .styles import resolve_all_styles, resolve_section_style, resolve_style
from .tokens import TokenContext, resolve_tokens
from .blocks import build_blocks
from .paginator import build_page_plans, paginate
from .assembler import assemble_pages, print_geometry

__all__ = [
    # Config
    "PageGeometry",
    "PrintGeometry",
    "mm_to_pt",
    "pt_to_mm",
    "content_width_pt",
    "column_width_pt",
    # Models
    "BlockKind",
    "ContentBlock",
    "FooterContent",
    "HeaderLine",
    "LayoutResult",
    "PageDescription",
    "PagePlan",
    "TitleBlock",
    # Functions
    "resolve_style",
    "resolve_section_style",
    "resolve_all_styles",
    "TokenContext",
    "resolve_tokens",
    "build_blocks",
    "paginate",
    "build_page_plans",
    "assemble_pages",
    "print_geometry",
]
