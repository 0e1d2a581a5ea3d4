"""
Module: layout.config

Purpose:
    Geometry for the pagination engine. PageGeometry holds the vertical
    space of a page (inner height and the chrome that eats into it);
    PrintGeometry holds the physical sheet size for export.

Key Classes:
    - PageGeometry: Vertical space, page-1 and later-page capacities
    - PrintGeometry: Physical page size in mm and points

Key Functions:
    - mm_to_pt(), pt_to_mm(): Unit conversion
    - content_width_pt(), column_width_pt(): Frame widths in points

Dependencies:
    - dataclasses (std)

Used By:
    - layout.paginator: Capacities
    - layout.assembler: print_geometry()
    - measurement.oracle: compute_geometry()
    - output.renderer: Frame placement
"""

from __future__ import annotations

from dataclasses import dataclass

from ..core.models.template import Orientation, PageSize, TemplateConfig

MM_PER_INCH = 25.4
POINTS_PER_INCH = 72.0
PT_PER_MM = POINTS_PER_INCH / MM_PER_INCH

MIN_COLUMNS = 1
MAX_COLUMNS = 3


def mm_to_pt(value: float) -> float:
    """Convert millimetres to PDF points."""
    return value * PT_PER_MM


def pt_to_mm(value: float) -> float:
    """Convert PDF points to millimetres."""
    return value / PT_PER_MM


def clamp_columns(column_count: int) -> int:
    """Clamp a column count into the supported 1..3 range."""
    return min(MAX_COLUMNS, max(MIN_COLUMNS, int(column_count)))


def content_width_pt(config: TemplateConfig) -> float:
    """Width between the page's left and right margins, in points."""
    return max(0.0, mm_to_pt(config.page.content_width_mm))


def column_width_pt(config: TemplateConfig) -> float:
    """Width of one body column, in points."""
    columns = clamp_columns(config.layout.column_count)
    gaps = mm_to_pt(config.layout.column_gap) * (columns - 1)
    return max(0.0, (content_width_pt(config) - gaps) / columns)


@dataclass(frozen=True)
class PageGeometry:
    """
    Vertical space of a page (immutable).

    All values share one unit (points when produced by compute_geometry;
    tests often use abstract units). Heights are unscaled: preview zoom
    never reaches this object.

    Attributes:
        inner_height: Page height minus top and bottom margins
        header_height: Height of the header row (every page)
        footer_height: Height of the footer row (every page)
        title_height: Height of the title block (page 1 only)

    Example:
        >>> geometry = PageGeometry(inner_height=300, header_height=0,
        ...                         footer_height=0, title_height=100)
        >>> geometry.page1_capacity(1), geometry.later_capacity(2)
        (200, 600)
    """

    inner_height: float
    header_height: float = 0
    footer_height: float = 0
    title_height: float = 0

    def __post_init__(self) -> None:
        """Validate geometry on construction."""
        for name in ("inner_height", "header_height", "footer_height", "title_height"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0: {getattr(self, name)}")

    @property
    def page1_body_height(self) -> float:
        """Single-column body height on page 1 (clamped at 0)."""
        return max(0, self.inner_height - self.header_height - self.title_height - self.footer_height)

    @property
    def later_body_height(self) -> float:
        """Single-column body height on pages after the first (clamped at 0)."""
        return max(0, self.inner_height - self.header_height - self.footer_height)

    def page1_capacity(self, column_count: int) -> float:
        """Linear content capacity of page 1 for the given column count."""
        return self.page1_body_height * clamp_columns(column_count)

    def later_capacity(self, column_count: int) -> float:
        """Linear content capacity of every later page."""
        return self.later_body_height * clamp_columns(column_count)

    def to_dict(self) -> dict[str, float]:
        return {
            "inner_height": self.inner_height,
            "header_height": self.header_height,
            "footer_height": self.footer_height,
            "title_height": self.title_height,
        }


@dataclass(frozen=True)
class PrintGeometry:
    """
    Physical page size for export (immutable).

    Attributes:
        size: Page size after unknown sizes fell back to A4
        orientation: Orientation applied to width/height
        width_mm: Sheet width in millimetres
        height_mm: Sheet height in millimetres
    """

    size: PageSize
    orientation: Orientation
    width_mm: float
    height_mm: float

    @property
    def width_pt(self) -> float:
        return mm_to_pt(self.width_mm)

    @property
    def height_pt(self) -> float:
        return mm_to_pt(self.height_mm)

    @property
    def pagesize(self) -> tuple[float, float]:
        """(width, height) in points, as reportlab expects."""
        return self.width_pt, self.height_pt

    @property
    def css_size(self) -> str:
        """Print stylesheet page size, e.g. '210mm 297mm'."""
        return f"{self.width_mm:g}mm {self.height_mm:g}mm"
