"""
Module: journal_toolkit.cli

Purpose:
    Command-line entry point: render a paper JSON file to PDF.

Usage:
    journal-render paper.json --template template.json -o output --preview
    journal-render submission.json --submission
    python -m journal_toolkit paper.json

Key Functions:
    - main(): Parse arguments, run render_paper, report the result

Dependencies:
    - argparse (std)
    - journal_toolkit.controller: render_paper

Used By:
    - journal-render console script
    - journal_toolkit.__main__
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Optional, Sequence

from .config import RenderConfig
from .controller import RenderError, render_paper
from .core.models.template import default_template_config
from .core.schemas.validator import ValidationError
from .core.utils.serialization import load_paper_json, load_template_json
from .core.utils.submission import map_submission_to_paper
from .output.preview import DEFAULT_ZOOM, MAX_ZOOM, MIN_ZOOM

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="journal-render",
        description="Lay out a journal paper onto template pages and render it to PDF.",
    )
    parser.add_argument("paper", type=Path, help="Paper JSON (or submission JSON with --submission)")
    parser.add_argument("--template", "-t", type=Path, help="Template JSON (default: built-in template)")
    parser.add_argument("--output", "-o", type=Path, default=Path("output"), help="Output directory")
    parser.add_argument("--stem", default="paper", help="PDF file name without extension")
    parser.add_argument("--no-subfolder", action="store_true", help="Write directly into the output directory")
    parser.add_argument("--preview", action="store_true", help="Also write PNG previews of every page")
    parser.add_argument(
        "--zoom", type=float, default=DEFAULT_ZOOM,
        help=f"Preview zoom ({MIN_ZOOM}-{MAX_ZOOM}, default {DEFAULT_ZOOM})",
    )
    parser.add_argument("--strict", action="store_true", help="Fail on schema validation issues")
    parser.add_argument("--submission", action="store_true", help="Treat PAPER as a submission record")
    parser.add_argument("--no-metadata", action="store_true", help="Skip render_metadata.json")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def _load_submission(path: Path):
    if not path.exists():
        raise FileNotFoundError(f"Submission file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        return map_submission_to_paper(json.load(f))


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
    )

    if not MIN_ZOOM <= args.zoom <= MAX_ZOOM:
        parser.error(f"--zoom must be between {MIN_ZOOM} and {MAX_ZOOM}")

    try:
        if args.submission:
            paper = _load_submission(args.paper)
        else:
            paper = load_paper_json(args.paper, strict=args.strict)
        if args.template:
            template = load_template_json(args.template, strict=args.strict)
        else:
            template = default_template_config()
        options = RenderConfig(
            output_dir=args.output,
            file_stem=args.stem,
            timestamped_subfolder=not args.no_subfolder,
            export_previews=args.preview,
            preview_zoom=args.zoom,
            write_metadata=not args.no_metadata,
        )
        result = render_paper(paper, template, options)
    except (FileNotFoundError, json.JSONDecodeError, ValidationError, ValueError, RenderError) as e:
        logger.error(str(e))
        return 1

    for warning in result.warnings:
        logger.warning(warning)
    logger.info(f"Wrote {result.page_count} pages to {result.pdf_path}")
    if result.preview_paths:
        logger.info(f"Wrote {len(result.preview_paths)} previews to {result.preview_paths[0].parent}")
    return 0
