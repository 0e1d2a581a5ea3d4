"""
Module: output.renderer

Purpose:
    Render page descriptions to PDF using ReportLab.
    Each PageDescription becomes one PDF page of the template's physical
    size, with header row, page-1 title block, body columns and footer.

Key Functions:
    - render_to_pdf(): Main rendering function

Body placement:
    1. Runs of column-spanning blocks use one full-width frame
    2. Other runs fill the column frames top-to-bottom, left-to-right
    3. A run followed by a spanning run is balanced across the columns
    4. Content that does not fit is clipped and reported as a warning

Dependencies:
    - reportlab: PDF generation
    - output.flowables: FlowableFactory
    - layout.models: LayoutResult, PageDescription

Used By:
    - controller.render_paper: Pipeline orchestration
"""

from __future__ import annotations

import io
import logging
from itertools import groupby
from pathlib import Path
from typing import List, Sequence

from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus import Flowable, Frame, Table

from ..core.models.template import TemplateConfig
from ..layout.assembler import print_geometry
from ..layout.config import column_width_pt, content_width_pt
from ..layout.models import LayoutResult, PageDescription
from .flowables import FOOTER_PADDING_MM, FlowableFactory, measure_flowables, to_color

logger = logging.getLogger(__name__)

BORDER_WIDTH_PT = 0.5
BALANCE_STEP_PT = 12


def _frame(x: float, y: float, width: float, height: float) -> Frame:
    return Frame(
        x, y, width, max(height, 0.0),
        leftPadding=0, rightPadding=0, topPadding=0, bottomPadding=0,
        showBoundary=0,
    )


class _PageRenderer:
    """Draws pages of one layout onto a canvas."""

    def __init__(self, layout: LayoutResult, config: TemplateConfig):
        self.layout = layout
        self.config = config
        self.factory = FlowableFactory(config)
        geometry = print_geometry(config)
        margins = config.page.margins
        self.page_width, self.page_height = geometry.pagesize
        self.left = margins.left * mm
        self.top = self.page_height - margins.top * mm
        self.bottom = margins.bottom * mm
        self.content_width = content_width_pt(config)
        self.column_width = column_width_pt(config)
        self.columns = layout.column_count
        self.gap = config.layout.column_gap * mm
        self.warnings: List[str] = []

    # ─────────────────────────────────────────────────────────────────────────
    # Flow helpers
    # ─────────────────────────────────────────────────────────────────────────

    def _story(self, indices: Sequence[int]) -> List[Flowable]:
        story: List[Flowable] = []
        for index in indices:
            story.extend(self.factory.block_flowables(self.layout.blocks[index]))
        return story

    def _can_split(self, flowable: Flowable) -> bool:
        return not (isinstance(flowable, Table) and self.config.table.prevent_break)

    def _flow(self, c: canvas.Canvas, story: List[Flowable], frames: Sequence[Frame]) -> List[Flowable]:
        """Draw story into frames in order, splitting where allowed. Returns leftovers."""
        for frame in frames:
            while story:
                head = story[0]
                if frame.add(head, c, trySplit=0):
                    del story[0]
                    continue
                if not self._can_split(head):
                    break
                parts = frame.split(head, c)
                if len(parts) < 2 or not frame.add(parts[0], c, trySplit=0):
                    break
                story[0:1] = parts[1:]
            if not story:
                break
        return story

    def _column_frames(self, top: float, height: float, first_offset: float = 0.0) -> List[Frame]:
        frames = []
        for column in range(self.columns):
            offset = first_offset if column == 0 else 0.0
            x = self.left + column * (self.column_width + self.gap)
            frames.append(_frame(x, top - height, self.column_width, height - offset))
        return frames

    def _balanced_height(self, indices: Sequence[int], available: float, first_offset: float) -> float:
        """Smallest column height (in steps) that holds the run, capped at available."""
        total = measure_flowables(self._story(indices), self.column_width) + first_offset
        height = min(available, total / self.columns)
        scratch = canvas.Canvas(io.BytesIO())
        while height < available:
            frames = self._column_frames(self.top, height, first_offset)
            if not self._flow(scratch, self._story(indices), frames):
                return height
            height = min(available, height + BALANCE_STEP_PT)
        return available

    # ─────────────────────────────────────────────────────────────────────────
    # Page parts
    # ─────────────────────────────────────────────────────────────────────────

    def _draw_background(self, c: canvas.Canvas) -> None:
        page = self.config.page
        fill = to_color(page.background_color, None)
        if not page.print_background or fill is None:
            return
        c.saveState()
        c.setFillColor(fill)
        c.rect(0, 0, self.page_width, self.page_height, fill=1, stroke=0)
        c.restoreState()

    def _rule(self, c: canvas.Canvas, y: float, color: str) -> None:
        c.saveState()
        c.setStrokeColor(to_color(color))
        c.setLineWidth(BORDER_WIDTH_PT)
        c.line(self.left, y, self.left + self.content_width, y)
        c.restoreState()

    def _draw_header(self, c: canvas.Canvas, page: PageDescription) -> float:
        """Draw the header row; returns the y where the body starts."""
        if not page.header_lines:
            return self.top
        cells = self.factory.header_cells(page.header_lines)
        cell_width = self.content_width / len(cells)
        row = 0.0
        for position, cell in enumerate(cells):
            _, height = cell.wrap(cell_width, self.page_height)
            cell.drawOn(c, self.left + position * cell_width, self.top - height)
            row = max(row, height)
        header = self.config.header
        if header.border_bottom:
            self._rule(c, self.top - row - header.padding_bottom * mm, header.border_color)
        return self.top - self.factory.header_height(page.header_lines, self.content_width)

    def _draw_footer(self, c: canvas.Canvas, page: PageDescription) -> float:
        """Draw the footer row; returns the y where the body ends."""
        cells = self.factory.footer_cells(page.footer)
        cell_width = self.content_width / 3
        row = 0.0
        for position, cell in enumerate(cells):
            if cell is None:
                continue
            _, height = cell.wrap(cell_width, self.page_height)
            cell.drawOn(c, self.left + position * cell_width, self.bottom)
            row = max(row, height)
        if self.config.footer.border_top:
            self._rule(c, self.bottom + row + FOOTER_PADDING_MM * mm, self.config.footer.border_color)
        return self.bottom + self.factory.footer_height(page.footer, self.content_width)

    def _draw_title(self, c: canvas.Canvas, page: PageDescription, top: float, bottom: float) -> tuple[float, float]:
        """
        Draw the page-1 title block.

        Returns:
            (new body top, first-column offset). A title that does not
            span the columns only pushes down the first column.
        """
        full_width = self.config.layout.title_full_width or self.columns == 1
        width = self.content_width if full_width else self.column_width
        story = self.factory.title_flowables(page.title)
        height = min(measure_flowables(self.factory.title_flowables(page.title), width), top - bottom)
        leftover = self._flow(c, story, [_frame(self.left, top - height - 1, width, height + 1)])
        if leftover:
            self._warn(f"Page {page.number}: title block clipped")
        if full_width:
            return top - height, 0.0
        return top, height

    def _draw_body(
        self,
        c: canvas.Canvas,
        page: PageDescription,
        top: float,
        bottom: float,
        first_offset: float,
    ) -> None:
        runs = [
            (spans, list(group))
            for spans, group in groupby(
                page.block_indices, key=lambda i: self.layout.blocks[i].spans_columns or self.columns == 1
            )
        ]
        clipped = 0
        for position, (spans, indices) in enumerate(runs):
            available = top - bottom
            if available <= 0:
                clipped += len(self._story(indices))
                continue
            last = position == len(runs) - 1
            if spans:
                story = self._story(indices)
                height = available if last else min(
                    available, measure_flowables(self._story(indices), self.content_width) + 1
                )
                clipped += len(self._flow(c, story, [_frame(self.left, top - height, self.content_width, height)]))
            else:
                height = available if last else self._balanced_height(indices, available, first_offset)
                clipped += len(self._flow(c, self._story(indices), self._column_frames(top, height, first_offset)))
                first_offset = 0.0
            top -= height
        if clipped:
            self._warn(f"Page {page.number}: {clipped} element(s) did not fit and were clipped")

    def _warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)

    def draw(self, c: canvas.Canvas, page: PageDescription) -> None:
        self._draw_background(c)
        top = self._draw_header(c, page)
        bottom = self._draw_footer(c, page)
        first_offset = 0.0
        if page.title is not None:
            top, first_offset = self._draw_title(c, page, top, bottom)
        self._draw_body(c, page, top, bottom, first_offset)


def render_to_pdf(
    layout: LayoutResult,
    config: TemplateConfig,
    output_path: Path,
) -> List[str]:
    """
    Render a layout to a PDF file.

    One PDF page per PageDescription, at the template's physical page
    size with orientation applied.

    Args:
        layout: Layout result from controller.layout_paper
        config: Template the layout was built with
        output_path: Path to write PDF

    Returns:
        Warnings raised while drawing (clipped content)

    Raises:
        OSError: If PDF cannot be written

    Example:
        >>> render_to_pdf(layout, config, Path("output/paper.pdf"))
        []
    """
    if layout.page_count == 0:
        logger.warning("Empty layout, creating empty PDF")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    renderer = _PageRenderer(layout, config)

    c = canvas.Canvas(str(output_path), pagesize=(renderer.page_width, renderer.page_height))
    if layout.pages and layout.pages[0].title is not None:
        c.setTitle(layout.pages[0].title.title)
    c.setCreator("journal_toolkit")

    for page in layout.pages:
        renderer.draw(c, page)
        c.showPage()

    c.save()

    logger.info(f"Rendered {layout.page_count} pages to {output_path}")
    return renderer.warnings
