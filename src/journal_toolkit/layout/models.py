"""
Module: layout.models

Purpose:
    Data models for page layout.
    Immutable dataclasses representing content blocks, page plans and
    the fully described pages handed to the renderer.

Key Classes:
    - ContentBlock: Orderable unit of body content with a typed payload
    - PagePlan: Block indices assigned to one page plus its capacity
    - TitleBlock: Page-1 title, byline and affiliations
    - PageDescription: Everything needed to draw one page
    - LayoutResult: Final layout output with diagnostics

Dependencies:
    - dataclasses (std)
    - core.models: SectionKind, EndMatter, TextAlign

Used By:
    - layout.blocks: Creates ContentBlocks
    - layout.paginator: Creates PagePlans
    - layout.assembler: Creates PageDescriptions
    - output: Consumes PageDescriptions
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

from ..core.models.paper import EndMatter
from ..core.models.styles import SectionKind, TextAlign
from .config import PageGeometry


class BlockKind(str, Enum):
    """What a content block holds."""
    ABSTRACT = "abstract"
    KEYWORDS = "keywords"
    SECTION = "section"
    TABLE = "table"
    REFERENCES = "references"
    END_MATTER = "end_matter"
    PLACEHOLDER = "placeholder"

    def __str__(self) -> str:
        return self.value


# ─────────────────────────────────────────────────────────────────────────────
# Block payloads
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class AbstractPayload:
    markup: str
    label_text: str = "Abstract"
    label_bold: bool = True


@dataclass(frozen=True)
class KeywordsPayload:
    keywords: Tuple[str, ...]
    label_text: str = "Keywords"

    @property
    def text(self) -> str:
        return ", ".join(self.keywords)


@dataclass(frozen=True)
class SectionPayload:
    """
    A body section (or one page-break chunk of it).

    Attributes:
        heading: Heading text; empty for untitled sections and for
            continuation chunks after a manual page break
        markup: Markup content of this chunk
        level: Nesting depth, 0 for top-level sections
        subsections: Subsections laid out inline after the markup
        is_placeholder: True when the section had no content yet
    """

    heading: str
    markup: str
    level: int = 0
    subsections: Tuple[SectionPayload, ...] = ()
    is_placeholder: bool = False


@dataclass(frozen=True)
class TablePayload:
    number: int
    caption: str
    caption_prefix: str
    headers: Tuple[str, ...] = ()
    rows: Tuple[Tuple[str, ...], ...] = ()
    notes: Optional[str] = None

    @property
    def caption_text(self) -> str:
        """Caption line, e.g. 'Table 2. Baseline characteristics'."""
        prefix = f"{self.caption_prefix} {self.number}".strip()
        return f"{prefix}. {self.caption}" if self.caption else f"{prefix}."


@dataclass(frozen=True)
class ReferenceEntry:
    number: int
    text: str

    @property
    def label(self) -> str:
        return f"[{self.number}]"


@dataclass(frozen=True)
class ReferencesPayload:
    entries: Tuple[ReferenceEntry, ...]
    heading: str = "References"


@dataclass(frozen=True)
class EndMatterPayload:
    end_matter: EndMatter


@dataclass(frozen=True)
class PlaceholderPayload:
    text: str


BlockPayload = Union[
    AbstractPayload,
    KeywordsPayload,
    SectionPayload,
    TablePayload,
    ReferencesPayload,
    EndMatterPayload,
    PlaceholderPayload,
]


@dataclass(frozen=True)
class ContentBlock:
    """
    Orderable unit of body content (immutable).

    The paginator only ever sees a block's measured height; everything
    else here is for measurement and rendering.

    Attributes:
        index: Position in document order (0-based)
        kind: Payload kind
        style_kind: SectionKind whose style the block's text uses
        payload: Self-contained content
        spans_columns: Render across all columns rather than in one
        break_before: Start a new page before this block
    """

    index: int
    kind: BlockKind
    style_kind: SectionKind
    payload: BlockPayload
    spans_columns: bool = False
    break_before: bool = False


# ─────────────────────────────────────────────────────────────────────────────
# Pages
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PagePlan:
    """
    Block assignment for a single page.

    Attributes:
        number: Page number (1-based)
        block_indices: Indices of the blocks on this page, increasing
        height_used: Sum of the blocks' natural heights
        capacity: Linear capacity of the page (body height x columns)
        has_title: True on page 1, which carries the title block

    Example:
        >>> page = PagePlan(number=1, block_indices=(0,), height_used=250,
        ...                 capacity=200, has_title=True)
        >>> page.overflows
        True
    """

    number: int
    block_indices: Tuple[int, ...]
    height_used: float
    capacity: float
    has_title: bool = False

    @property
    def block_count(self) -> int:
        return len(self.block_indices)

    @property
    def is_empty(self) -> bool:
        return not self.block_indices

    @property
    def overflows(self) -> bool:
        """True if the content on this page exceeds its capacity."""
        return self.height_used > self.capacity


@dataclass(frozen=True)
class HeaderLine:
    """One resolved header cell."""

    text: str
    alignment: TextAlign = TextAlign.LEFT


@dataclass(frozen=True)
class FooterContent:
    """
    Resolved footer row.

    Attributes:
        left: Resolved left content
        right: Resolved right content
        page_label: "n / total", or None when page numbers are hidden
        page_label_position: Where the page label sits
    """

    left: str = ""
    right: str = ""
    page_label: Optional[str] = None
    page_label_position: TextAlign = TextAlign.CENTER


@dataclass(frozen=True)
class AuthorCredit:
    name: str
    is_corresponding: bool = False


@dataclass(frozen=True)
class TitleBlock:
    """
    Page-1 title block.

    Attributes:
        title: Paper title ("Untitled Paper" when empty)
        authors: Byline in order
        affiliation_line: Distinct non-empty affiliations joined by "; "
        separator: Draw a rule under the block
    """

    title: str
    authors: Tuple[AuthorCredit, ...] = ()
    affiliation_line: str = ""
    separator: bool = False

    @property
    def byline(self) -> str:
        """Plain-text byline with '*' after corresponding authors."""
        return ", ".join(
            f"{a.name}*" if a.is_corresponding else a.name for a in self.authors
        )


@dataclass(frozen=True)
class PageDescription:
    """
    Everything needed to draw one page (immutable).

    Attributes:
        number: Page number (1-based)
        total_pages: Number of pages in the document
        block_indices: Blocks placed on this page, in order
        header_lines: Resolved header cells
        footer: Resolved footer row
        title: Title block (page 1 only)
    """

    number: int
    total_pages: int
    block_indices: Tuple[int, ...]
    header_lines: Tuple[HeaderLine, ...] = ()
    footer: FooterContent = field(default_factory=FooterContent)
    title: Optional[TitleBlock] = None

    @property
    def has_title(self) -> bool:
        return self.title is not None


@dataclass(frozen=True)
class LayoutResult:
    """
    Final layout output with diagnostics.

    Attributes:
        blocks: Content blocks in document order
        heights: Natural height of each block (same order)
        geometry: Page geometry used for pagination
        column_count: Effective column count
        partition: Block indices per page
        plans: PagePlan per page
        pages: PageDescription per page
        warnings: Human-readable warnings (overflows, clipping)

    Example:
        >>> result.page_count
        2
    """

    blocks: Tuple[ContentBlock, ...]
    heights: Tuple[float, ...]
    geometry: PageGeometry
    column_count: int
    partition: Tuple[Tuple[int, ...], ...]
    plans: Tuple[PagePlan, ...]
    pages: Tuple[PageDescription, ...]
    warnings: list[str] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        """Number of pages in layout."""
        return len(self.pages)

    @property
    def overflowing_pages(self) -> Tuple[int, ...]:
        """Numbers of the pages whose content exceeds their capacity."""
        return tuple(p.number for p in self.plans if p.overflows)
