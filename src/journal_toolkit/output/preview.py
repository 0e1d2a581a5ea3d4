"""
Module: output.preview

Purpose:
    Rasterize rendered PDFs into preview images. Zoom scales the raster
    only; layout is never recomputed for a different zoom.

Key Functions:
    - render_preview(): PDF pages -> PIL images
    - save_preview_pngs(): PDF pages -> PNG files

Dependencies:
    - fitz (PyMuPDF): PDF rasterization
    - PIL: Image conversion

Used By:
    - controller.render_paper: Optional preview export
    - cli: --preview
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import fitz
from PIL import Image

logger = logging.getLogger(__name__)

DEFAULT_ZOOM = 0.55
MIN_ZOOM = 0.2
MAX_ZOOM = 1.5


def clamp_zoom(zoom: float) -> float:
    """Clamp a preview zoom factor into the supported range."""
    return min(MAX_ZOOM, max(MIN_ZOOM, float(zoom)))


def render_preview(pdf_path: Path, zoom: float = DEFAULT_ZOOM) -> List[Image.Image]:
    """
    Rasterize every page of a PDF.

    Args:
        pdf_path: Rendered PDF
        zoom: Scale factor (1.0 = 72 DPI), clamped to 0.2..1.5

    Returns:
        One RGB image per page, in page order
    """
    scale = clamp_zoom(zoom)
    if scale != zoom:
        logger.debug(f"Preview zoom {zoom} clamped to {scale}")
    matrix = fitz.Matrix(scale, scale)

    images: List[Image.Image] = []
    with fitz.open(pdf_path) as doc:
        for page in doc:
            pix = page.get_pixmap(matrix=matrix, alpha=False)
            images.append(Image.frombytes("RGB", (pix.width, pix.height), pix.samples))

    logger.debug(f"Rendered {len(images)} preview pages from {pdf_path} at zoom {scale}")
    return images


def save_preview_pngs(
    pdf_path: Path,
    out_dir: Path,
    zoom: float = DEFAULT_ZOOM,
    stem: str = "page",
) -> List[Path]:
    """
    Write one PNG per PDF page as ``<stem>_<n>.png`` (n from 1).

    Returns:
        Paths written, in page order
    """
    out_dir.mkdir(parents=True, exist_ok=True)
    paths: List[Path] = []
    for number, image in enumerate(render_preview(pdf_path, zoom), start=1):
        path = out_dir / f"{stem}_{number}.png"
        image.save(path, "PNG")
        paths.append(path)
    logger.info(f"Wrote {len(paths)} preview images to {out_dir}")
    return paths
