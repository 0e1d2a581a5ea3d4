"""
Module: measurement.oracle

Purpose:
    The measurement boundary of the layout engine. Pagination needs the
    natural height of every block; how heights are obtained (a PDF
    typesetter, a browser, fixed numbers in a test) is an injected
    MeasurementOracle.

Key Classes:
    - MeasurementOracle: Abstract height provider
    - StaticOracle: Synthetic heights (tests, geometry previews)
    - MeasurementError: Raised when heights cannot be obtained

Key Functions:
    - measure_blocks(): Measure every block, all or nothing
    - compute_geometry(): PageGeometry from page size and measured chrome

Dependencies:
    - abc (std)
    - layout.assembler: Representative header/footer/title for measurement

Used By:
    - controller.layout_paper
    - measurement.reportlab_oracle
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from typing import Callable, List, Mapping, Optional, Sequence, Union

from ..core.models.paper import StructuredPaperData
from ..core.models.template import TemplateConfig
from ..layout.assembler import build_footer, build_header_lines, build_title_block
from ..layout.config import PageGeometry, column_width_pt, content_width_pt, mm_to_pt
from ..layout.models import ContentBlock, FooterContent, HeaderLine, TitleBlock

logger = logging.getLogger(__name__)


class MeasurementError(Exception):
    """Raised when block heights cannot be measured."""

    def __init__(self, message: str, block_index: Optional[int] = None):
        super().__init__(message)
        self.block_index = block_index


class MeasurementOracle(ABC):
    """
    Provides natural heights for layout.

    All heights are unscaled and in the same unit as the widths passed
    in (points for the built-in oracles).
    """

    @abstractmethod
    def measure(self, block: ContentBlock, column_width: float) -> float:
        """Natural height of a block laid out at column_width."""

    @abstractmethod
    def measure_header(self, lines: Sequence[HeaderLine], width: float) -> float:
        """Height of the header row, including border and spacing."""

    @abstractmethod
    def measure_footer(self, footer: FooterContent, width: float) -> float:
        """Height of the footer row, including border and spacing."""

    @abstractmethod
    def measure_title(self, title: TitleBlock, width: float) -> float:
        """Height of the page-1 title block."""


HeightSource = Union[float, Sequence[float], Mapping[int, float], Callable[[ContentBlock], float]]


class StaticOracle(MeasurementOracle):
    """
    Oracle returning predetermined heights.

    Heights may be one number for every block, a sequence or mapping
    indexed by block index, or a callable taking the block. Asking for a
    block the source has no height for raises MeasurementError.

    Example:
        >>> oracle = StaticOracle([100, 150, 80])
        >>> measure_blocks(oracle, blocks, column_width=200)
        [100, 150, 80]
    """

    def __init__(
        self,
        heights: HeightSource = 0,
        *,
        header: float = 0,
        footer: float = 0,
        title: float = 0,
    ):
        self._heights = heights
        self._header = header
        self._footer = footer
        self._title = title

    def measure(self, block: ContentBlock, column_width: float) -> float:
        source = self._heights
        if callable(source):
            return source(block)
        if isinstance(source, (int, float)):
            return source
        try:
            return source[block.index]
        except (IndexError, KeyError):
            raise MeasurementError(
                f"No height for block {block.index}", block_index=block.index
            ) from None

    def measure_header(self, lines: Sequence[HeaderLine], width: float) -> float:
        return self._header

    def measure_footer(self, footer: FooterContent, width: float) -> float:
        return self._footer

    def measure_title(self, title: TitleBlock, width: float) -> float:
        return self._title


def _checked(value: float, what: str, block_index: Optional[int] = None) -> float:
    try:
        height = float(value)
    except (TypeError, ValueError):
        raise MeasurementError(f"{what}: height {value!r} is not a number", block_index) from None
    if math.isnan(height) or math.isinf(height) or height < 0:
        raise MeasurementError(f"{what}: invalid height {height}", block_index)
    return height


def measure_blocks(
    oracle: MeasurementOracle,
    blocks: Sequence[ContentBlock],
    column_width: float,
    *,
    full_width: Optional[float] = None,
    column_count: int = 1,
) -> List[float]:
    """
    Measure every block. All or nothing.

    Blocks spanning all columns are measured at full_width (when given)
    and charged column_count times, since they occupy that height in
    every column.

    Args:
        oracle: Height provider
        blocks: Blocks to measure
        column_width: Width of one column
        full_width: Width across all columns, for spanning blocks
        column_count: Columns a spanning block occupies

    Returns:
        Height per block, in block order

    Raises:
        MeasurementError: If any block cannot be measured; no partial
            result is ever returned
    """
    heights: List[float] = []
    for block in blocks:
        spans = block.spans_columns and full_width is not None
        width = full_width if spans else column_width
        try:
            raw = oracle.measure(block, width)
        except MeasurementError:
            raise
        except Exception as e:
            raise MeasurementError(
                f"Failed to measure block {block.index} ({block.kind}): {e}",
                block_index=block.index,
            ) from e
        height = _checked(raw, f"Block {block.index}", block.index)
        heights.append(height * column_count if spans else height)
    logger.debug(f"Measured {len(heights)} blocks at column width {column_width:.1f}")
    return heights


# ─────────────────────────────────────────────────────────────────────────────
# Geometry
# ─────────────────────────────────────────────────────────────────────────────

def compute_geometry(
    config: TemplateConfig,
    oracle: MeasurementOracle,
    data: Optional[StructuredPaperData] = None,
) -> PageGeometry:
    """
    Derive the page's vertical space in points.

    The header and footer are measured as they appear on page 1; the
    title block is measured at full width, or at column width when it
    does not span the columns (it then only eats into one column, so its
    height is charged once across the columns).

    Args:
        config: Template
        oracle: Height provider
        data: Manuscript for the title block and tokens (empty if None)

    Returns:
        PageGeometry in points

    Raises:
        MeasurementError: If the oracle fails
    """
    data = data or StructuredPaperData()
    _, height_mm = config.page.dimensions_mm()
    inner = max(0.0, mm_to_pt(height_mm - config.page.margins.vertical))
    width = content_width_pt(config)

    try:
        header = 0.0
        if config.header.blocks:
            header = _checked(
                oracle.measure_header(build_header_lines(config, data, 1), width), "Header"
            )
        footer = _checked(oracle.measure_footer(build_footer(config, data, 1, 1), width), "Footer")

        title_block = build_title_block(data, config)
        if config.layout.title_full_width or config.layout.column_count == 1:
            title = _checked(oracle.measure_title(title_block, width), "Title")
        else:
            title = _checked(
                oracle.measure_title(title_block, column_width_pt(config)), "Title"
            ) / config.layout.column_count
    except MeasurementError:
        raise
    except Exception as e:
        raise MeasurementError(f"Failed to measure page chrome: {e}") from e

    geometry = PageGeometry(
        inner_height=inner,
        header_height=header,
        footer_height=footer,
        title_height=title,
    )
    logger.debug(f"Page geometry: {geometry}")
    return geometry
