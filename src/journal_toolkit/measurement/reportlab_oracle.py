"""
Module: measurement.reportlab_oracle

Purpose:
    Measure blocks by building the reportlab flowables the PDF renderer
    draws and wrapping them at the requested width.

Key Classes:
    - ReportLabOracle: MeasurementOracle backed by reportlab wrap()

Dependencies:
    - reportlab (via output.flowables)

Used By:
    - controller: Default oracle for layout_paper/render_paper
"""

from __future__ import annotations

import logging
from typing import Sequence

from ..core.models.template import TemplateConfig
from ..layout.models import ContentBlock, FooterContent, HeaderLine, TitleBlock
from ..output.flowables import FlowableFactory, measure_flowables
from .oracle import MeasurementOracle

logger = logging.getLogger(__name__)


class ReportLabOracle(MeasurementOracle):
    """
    Heights in points, exactly as the PDF renderer will lay them out.

    Example:
        >>> oracle = ReportLabOracle(config)
        >>> oracle.measure(block, column_width=250) > 0
        True
    """

    def __init__(self, config: TemplateConfig):
        self.config = config
        self.factory = FlowableFactory(config)

    def measure(self, block: ContentBlock, column_width: float) -> float:
        height = measure_flowables(self.factory.block_flowables(block), column_width)
        logger.debug(f"Block {block.index} ({block.kind}): {height:.1f}pt at {column_width:.1f}pt")
        return height

    def measure_header(self, lines: Sequence[HeaderLine], width: float) -> float:
        return self.factory.header_height(lines, width)

    def measure_footer(self, footer: FooterContent, width: float) -> float:
        return self.factory.footer_height(footer, width)

    def measure_title(self, title: TitleBlock, width: float) -> float:
        return measure_flowables(self.factory.title_flowables(title), width)
