"""
Module: cli

Purpose:
    Command-line entry point for rendering PDFs and stitching page
    images into a size-bounded long image.

Usage:
    page-stitcher render slides.pdf -o ./pages
    page-stitcher stitch ./pages/*.png --trailer footer.png --max-mb 10
    page-stitcher convert slides.pdf --trailer footer.png --format JPEG
"""

from __future__ import annotations

import argparse
import logging
import sys
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence

from page_stitcher import __version__
from page_stitcher.core.errors import StitchError
from page_stitcher.core.models import PageSource, StitchResult
from page_stitcher.rendering.pdf import (
    DEFAULT_MAX_PAGES,
    DEFAULT_SCALE,
    RenderConfig,
    render_document,
    trailer_source,
)
from page_stitcher.stitching.config import (
    DEFAULT_MAX_BYTES,
    DEFAULT_MIN_QUALITY,
    DEFAULT_RETENTION_SECONDS,
    DEFAULT_START_QUALITY,
    SUPPORTED_FORMATS,
    StitchConfig,
    StorageConfig,
)
from page_stitcher.stitching.pipeline import stitch_pages

logger = logging.getLogger("page_stitcher")


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


def _add_stitch_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--trailer",
        type=Path,
        help="Image pinned to the bottom of the long image",
    )
    parser.add_argument(
        "--quality",
        type=int,
        default=DEFAULT_START_QUALITY,
        help=f"Starting encoder quality (default: {DEFAULT_START_QUALITY})",
    )
    parser.add_argument(
        "--min-quality",
        type=int,
        default=DEFAULT_MIN_QUALITY,
        help=f"Lowest quality the search may use (default: {DEFAULT_MIN_QUALITY})",
    )
    parser.add_argument(
        "--max-mb",
        type=float,
        default=DEFAULT_MAX_BYTES / 1024 / 1024,
        help="Size ceiling in MiB (default: 10)",
    )
    parser.add_argument(
        "--format",
        dest="image_format",
        choices=sorted(SUPPORTED_FORMATS),
        type=str.upper,
        default="PNG",
        help="Output encoding (default: PNG)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Directory for finished artifacts (default: $PAGE_STITCHER_OUTPUT_DIR or ./output)",
    )
    parser.add_argument(
        "--request-id",
        help="Identifier used in the artifact name (default: random)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=0,
        help="Threads for reading page metadata (0 = sequential)",
    )
    parser.add_argument(
        "--keep-hours",
        type=float,
        default=DEFAULT_RETENTION_SECONDS / 3600,
        help="Remove artifacts older than this many hours from the output dir "
             f"(default: {DEFAULT_RETENTION_SECONDS // 3600})",
    )
    parser.add_argument(
        "--no-sweep",
        action="store_true",
        help="Do not remove old artifacts from the output dir",
    )


def _add_render_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--scale",
        type=float,
        default=DEFAULT_SCALE,
        help=f"Render zoom relative to 72 DPI (default: {DEFAULT_SCALE})",
    )
    parser.add_argument(
        "--max-pages",
        type=int,
        default=DEFAULT_MAX_PAGES,
        help=f"Render at most this many pages (default: {DEFAULT_MAX_PAGES})",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="page-stitcher",
        description="Stitch document pages into one long image under a size limit.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render PDF pages to PNG files")
    render.add_argument("pdf", type=Path, help="Input PDF")
    render.add_argument("-o", "--output-dir", type=Path, required=True, help="Page image directory")
    _add_render_options(render)

    stitch = sub.add_parser("stitch", help="Stitch page images into a long image")
    stitch.add_argument("images", nargs="+", type=Path, help="Page images")
    _add_stitch_options(stitch)

    convert = sub.add_parser("convert", help="Render a PDF and stitch its pages")
    convert.add_argument("pdf", type=Path, help="Input PDF")
    _add_render_options(convert)
    _add_stitch_options(convert)

    return parser


def _stitch_config(args: argparse.Namespace) -> StitchConfig:
    retention: Optional[int] = None if args.no_sweep else int(args.keep_hours * 60 * 60)
    return StitchConfig(
        start_quality=args.quality,
        min_quality=args.min_quality,
        max_bytes=int(args.max_mb * 1024 * 1024),
        image_format=args.image_format,
        load_workers=args.workers,
        retention_seconds=retention,
    )


def _storage(args: argparse.Namespace) -> StorageConfig:
    storage = StorageConfig.from_env()
    if args.output_dir is not None:
        storage = StorageConfig(
            scratch_root=storage.scratch_root,
            output_root=args.output_dir.expanduser().resolve(),
        )
    return storage


def _with_trailer(sources: List[PageSource], trailer: Optional[Path]) -> List[PageSource]:
    if trailer is None:
        return sources
    return [*sources, trailer_source(trailer)]


def _report(result: StitchResult) -> None:
    print(result.summary())
    if not result.within_limit:
        logger.warning("Minimum quality still exceeds the size limit; artifact kept anyway")


def _render_config(args: argparse.Namespace) -> RenderConfig:
    return RenderConfig(scale=args.scale, max_pages=args.max_pages)


def _build_configs(args: argparse.Namespace) -> dict:
    """Validated configs for `args.command`. Raises ValueError on bad options."""
    configs = {}
    if args.command in ("render", "convert"):
        configs["render_config"] = _render_config(args)
    if args.command in ("stitch", "convert"):
        configs["config"] = _stitch_config(args)
    return configs


def _run_render(args: argparse.Namespace, render_config: RenderConfig) -> int:
    sources = render_document(args.pdf, args.output_dir, render_config)
    for source in sources:
        print(source.location)
    return 0


def _run_stitch(args: argparse.Namespace, config: StitchConfig) -> int:
    sources = _with_trailer([PageSource(path) for path in args.images], args.trailer)
    result = stitch_pages(sources, config, _storage(args), request_id=args.request_id)
    _report(result)
    return 0


def _run_convert(
    args: argparse.Namespace,
    config: StitchConfig,
    render_config: RenderConfig,
) -> int:
    storage = _storage(args)
    storage.ensure_dirs()

    with tempfile.TemporaryDirectory(prefix="pages-", dir=storage.scratch_root) as pages_dir:
        sources = render_document(args.pdf, Path(pages_dir), render_config)
        sources = _with_trailer(sources, args.trailer)
        result = stitch_pages(sources, config, storage, request_id=args.request_id)

    _report(result)
    return 0


COMMANDS = {
    "render": _run_render,
    "stitch": _run_stitch,
    "convert": _run_convert,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        configs = _build_configs(args)
    except ValueError as e:
        parser.error(str(e))

    try:
        return COMMANDS[args.command](args, **configs)
    except StitchError as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
