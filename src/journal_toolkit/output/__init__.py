"""
Module: output

Purpose:
    PDF rendering and preview generation.
    Converts LayoutResult to PDF files using ReportLab and rasterizes
    them with PyMuPDF.

Key Functions:
    - render_to_pdf(): Render layout to PDF
    - render_preview(): Rasterize PDF pages
    - save_preview_pngs(): Write PNG previews

Key Classes:
    - FlowableFactory: Blocks -> reportlab flowables

Dependencies:
    - reportlab: PDF generation
    - fitz (PyMuPDF), PIL: Previews
    - layout.models: LayoutResult

Used By:
    - controller: Pipeline orchestration
    - measurement.reportlab_oracle: Height measurement
"""

from .flowables import FlowableFactory, measure_flowables
from .renderer import render_to_pdf
from .preview import render_preview, save_preview_pngs

__all__ = [
    "FlowableFactory",
    "measure_flowables",
    "render_to_pdf",
    "render_preview",
    "save_preview_pngs",
]
