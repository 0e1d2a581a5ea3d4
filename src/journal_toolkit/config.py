"""
Module: journal_toolkit.config

Purpose:
    Configuration dataclass for the render pipeline. Immutable
    configuration with validation on construction.

Key Classes:
    - RenderConfig: Where and how to write rendered papers

Dependencies:
    - dataclasses (std)
    - pathlib (std)

Used By:
    - journal_toolkit.controller: render_paper()
    - journal_toolkit.cli: Command-line options
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .output.preview import DEFAULT_ZOOM, MAX_ZOOM, MIN_ZOOM

_STEM_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.\-]*$")


@dataclass(frozen=True)
class RenderConfig:
    """
    Configuration for rendering a paper (immutable).

    Attributes:
        output_dir: Base directory for rendered files (default: ./output)
        file_stem: Name of the PDF without extension
        timestamped_subfolder: Write into a fresh <timestamp>__<stem> folder
        export_previews: Also write PNG previews of every page
        preview_zoom: Raster scale for previews (0.2..1.5)
        write_metadata: Write render_metadata.json next to the PDF

    Example:
        >>> options = RenderConfig(output_dir=Path("out"), export_previews=True)
    """

    output_dir: Optional[Path] = None
    file_stem: str = "paper"
    timestamped_subfolder: bool = True
    export_previews: bool = False
    preview_zoom: float = DEFAULT_ZOOM
    write_metadata: bool = True

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not _STEM_PATTERN.match(self.file_stem or ""):
            raise ValueError(f"file_stem must be a plain file name: {self.file_stem!r}")
        if not MIN_ZOOM <= self.preview_zoom <= MAX_ZOOM:
            raise ValueError(
                f"preview_zoom must be between {MIN_ZOOM} and {MAX_ZOOM}: {self.preview_zoom}"
            )

    @property
    def base_dir(self) -> Path:
        return Path(self.output_dir) if self.output_dir else Path("output")
