"""
Module: journal_toolkit.controller

Purpose:
    Orchestrate the complete layout and render pipeline.
    Build blocks → Measure → Paginate → Assemble → Render

Key Functions:
    - layout_paper(): Manuscript + template -> LayoutResult
    - render_paper(): LayoutResult -> PDF (+ previews, metadata)

Key Classes:
    - RenderResult: Complete render result
    - RenderError: Exception for render failures

Dependencies:
    - journal_toolkit.layout: Blocks, pagination, assembly
    - journal_toolkit.measurement: Height oracles
    - journal_toolkit.output: PDF rendering and previews

Used By:
    - journal_toolkit.cli: Command-line rendering
    - journal_toolkit.layout.session: Default layout function
"""

from __future__ import annotations

import json
import logging
import re
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple

from .config import RenderConfig
from .core.models.paper import StructuredPaperData
from .core.models.template import TemplateConfig
from .layout.assembler import assemble_pages
from .layout.blocks import build_blocks
from .layout.config import clamp_columns, column_width_pt, content_width_pt
from .layout.models import LayoutResult
from .layout.paginator import build_page_plans, paginate
from .measurement.oracle import MeasurementError, MeasurementOracle, compute_geometry, measure_blocks
from .measurement.reportlab_oracle import ReportLabOracle
from .output.preview import save_preview_pngs
from .output.renderer import render_to_pdf

logger = logging.getLogger(__name__)

__all__ = [
    "RenderError",
    "RenderResult",
    "layout_paper",
    "render_paper",
]


class RenderError(Exception):
    """Error during render pipeline."""
    pass


@dataclass(frozen=True)
class RenderResult:
    """
    Complete render result (immutable).

    Attributes:
        pdf_path: Path to generated PDF
        preview_paths: PNG previews, one per page (empty unless requested)
        page_count: Number of pages generated
        layout: Layout the PDF was drawn from
        metadata: Render metadata dictionary
        warnings: Any warnings during layout and rendering

    Example:
        >>> result = render_paper(paper, template, RenderConfig())
        >>> print(f"Generated {result.page_count} pages at {result.pdf_path}")
    """
    pdf_path: Path
    preview_paths: Tuple[Path, ...]
    page_count: int
    layout: LayoutResult
    metadata: dict
    warnings: Tuple[str, ...]


def layout_paper(
    data: StructuredPaperData,
    config: TemplateConfig,
    oracle: Optional[MeasurementOracle] = None,
) -> LayoutResult:
    """
    Lay out a manuscript.

    Pipeline:
    1. Build content blocks in document order
    2. Measure every block (all or nothing)
    3. Measure page chrome into a PageGeometry
    4. Paginate, honouring manual breaks
    5. Assemble page descriptions

    Args:
        data: Manuscript
        config: Template
        oracle: Height provider (defaults to ReportLabOracle)

    Returns:
        LayoutResult

    Raises:
        MeasurementError: If any height cannot be measured
    """
    oracle = oracle or ReportLabOracle(config)
    columns = clamp_columns(config.layout.column_count)

    blocks = build_blocks(data, config)
    heights = measure_blocks(
        oracle,
        blocks,
        column_width_pt(config),
        full_width=content_width_pt(config),
        column_count=columns,
    )
    geometry = compute_geometry(config, oracle, data)

    forced_breaks = {block.index for block in blocks if block.break_before}
    partition = paginate(heights, geometry, columns, forced_breaks=forced_breaks)
    plans = build_page_plans(partition, heights, geometry, columns)
    pages = assemble_pages(partition, data, config, blocks)

    warnings = [
        f"Page {plan.number} overflows: {plan.height_used:.1f} of {plan.capacity:.1f}"
        for plan in plans if plan.overflows
    ]

    logger.info(f"Laid out {len(blocks)} blocks onto {len(pages)} pages ({columns} columns)")
    return LayoutResult(
        blocks=tuple(blocks),
        heights=tuple(heights),
        geometry=geometry,
        column_count=columns,
        partition=tuple(tuple(page) for page in partition),
        plans=tuple(plans),
        pages=tuple(pages),
        warnings=warnings,
    )


def render_paper(
    data: StructuredPaperData,
    config: TemplateConfig,
    options: Optional[RenderConfig] = None,
    oracle: Optional[MeasurementOracle] = None,
) -> RenderResult:
    """
    Lay out and render a manuscript to PDF.

    Args:
        data: Manuscript
        config: Template
        options: Output options (defaults to RenderConfig())
        oracle: Height provider (defaults to ReportLabOracle)

    Returns:
        RenderResult with paths and metadata

    Raises:
        RenderError: If measurement or writing fails

    Example:
        >>> result = render_paper(paper, template, RenderConfig(output_dir=Path("out")))
        >>> result.pdf_path.name
        'paper.pdf'
    """
    options = options or RenderConfig()
    start_time = time.perf_counter()

    try:
        layout = layout_paper(data, config, oracle)
    except MeasurementError as e:
        raise RenderError(f"Failed to measure paper: {e}") from e

    warnings: List[str] = list(layout.warnings)

    if options.timestamped_subfolder:
        output_dir = _generate_timestamped_subfolder(options.base_dir, options.file_stem)
    else:
        output_dir = options.base_dir
    logger.info(f"Output directory: {output_dir}")

    pdf_path = output_dir / f"{options.file_stem}.pdf"
    preview_paths: List[Path] = []
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        warnings.extend(render_to_pdf(layout, config, pdf_path))
        if options.export_previews:
            preview_paths = save_preview_pngs(
                pdf_path, output_dir / "previews", options.preview_zoom, options.file_stem
            )
    except OSError as e:
        raise RenderError(f"Failed to write output: {e}") from e

    elapsed = time.perf_counter() - start_time
    logger.info(f"Render completed in {elapsed:.2f}s")

    metadata = _build_metadata(data, config, layout, options, warnings)
    if options.write_metadata:
        _write_metadata(output_dir, metadata)

    return RenderResult(
        pdf_path=pdf_path,
        preview_paths=tuple(preview_paths),
        page_count=layout.page_count,
        layout=layout,
        metadata=metadata,
        warnings=tuple(warnings),
    )


def _generate_timestamped_subfolder(base_dir: Path, stem: str) -> Path:
    """
    Create timestamped subfolder path inside base directory.

    Returns:
        Path like base/20250116-103045__paper, with a (n) suffix on collision
    """
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    folder_name = f"{timestamp}__{stem}"
    folder_name = re.sub(r"[^A-Za-z0-9_\-+.]", "-", folder_name).strip("-")

    candidate = base_dir / folder_name
    counter = 1
    while candidate.exists():
        candidate = base_dir / f"{folder_name}({counter})"
        counter += 1
    return candidate


def _build_metadata(
    data: StructuredPaperData,
    config: TemplateConfig,
    layout: LayoutResult,
    options: RenderConfig,
    warnings: List[str],
) -> dict:
    from . import __version__

    return {
        "generated_at": datetime.now().isoformat(),
        "toolkit_version": __version__,
        "title": data.title or None,
        "journal": config.tokens.journal_name or None,
        "page_size": str(config.page.size),
        "orientation": str(config.page.orientation),
        "column_count": layout.column_count,
        "page_count": layout.page_count,
        "block_count": len(layout.blocks),
        "partition": [list(page) for page in layout.partition],
        "geometry": layout.geometry.to_dict(),
        "overflowing_pages": list(layout.overflowing_pages),
        "previews": options.export_previews,
        "warnings": list(warnings),
    }


def _write_metadata(output_dir: Path, metadata: dict) -> None:
    """
    Write metadata JSON file to output directory.

    Raises:
        RenderError: If writing fails
    """
    metadata_path = output_dir / "render_metadata.json"
    try:
        with open(metadata_path, "w", encoding="utf-8") as f:
            json.dump(metadata, f, indent=2)
        logger.debug(f"Wrote metadata to {metadata_path}")
    except OSError as e:
        raise RenderError(f"Failed to write metadata: {e}") from e
