"""
Command-line interface for Deep Zoom pyramid generation.

Usage:
    python -m dzi_pyramid image.png [--path out/] [--format jpg]
    python -m dzi_pyramid --document page1.png page2.png --prefix report
    python -m dzi_pyramid --help
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from . import __version__
from .config.pyramid_config import PyramidConfig
from .processing.runner import PyramidRunner, collect_files, jobs_from_paths
from .raster.backend import SUPPORTED_FORMATS


def create_argument_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="deepzoom",
        description="Convert images into Deep Zoom tile pyramids",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s map.png                          Write map.xml and map_files/
  %(prog)s -p out/ -f jpg photos/           Convert every image in photos/
  %(prog)s --stretch 2 map.png              Magnify map.png twice
  %(prog)s -d --prefix report p1.png p2.png Lay out pages as one document
        """,
    )

    parser.add_argument(
        "inputs",
        nargs="+",
        help="Input image files or directories",
    )
    parser.add_argument(
        "-p", "--path",
        default=".",
        help="Output directory (default: current directory)",
    )
    parser.add_argument(
        "--prefix",
        help="Output name (default: input file stem, 'document' in document mode)",
    )
    parser.add_argument(
        "-f", "--format",
        choices=sorted(SUPPORTED_FORMATS),
        default="png",
        help="Tile format (default: png)",
    )
    parser.add_argument(
        "--overlap",
        type=int,
        default=4,
        help="Tile overlap in pixels (default: 4)",
    )
    parser.add_argument(
        "--tilesize",
        type=int,
        default=256,
        help="Tile size in pixels (default: 256)",
    )
    parser.add_argument(
        "-d", "--document",
        action="store_true",
        help="Treat all inputs as pages of one document",
    )
    parser.add_argument(
        "--columns",
        type=int,
        help="Pages per row in document mode (default: near-square grid)",
    )
    parser.add_argument(
        "--stretch",
        type=float,
        default=1,
        help="Magnify each image by this factor, not with --document (default: 1)",
    )
    parser.add_argument(
        "-r", "--recursive",
        action="store_true",
        help="Search input directories recursively",
    )
    parser.add_argument(
        "--descriptor-only",
        action="store_true",
        help="Only write the XML descriptor",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the batch result as JSON",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug output",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        args: Command line arguments (uses sys.argv if not provided)

    Returns:
        Exit code (0 for success)
    """
    parser = create_argument_parser()
    parsed = parser.parse_args(args)

    log_level = logging.DEBUG if parsed.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        config = PyramidConfig(
            tile_size=parsed.tilesize,
            overlap=parsed.overlap,
            tile_format=parsed.format,
        )
        files = collect_files(parsed.inputs, recursive=parsed.recursive)
        if not files:
            print("Error: No input images found", file=sys.stderr)
            return 1
        jobs = jobs_from_paths(
            files,
            output_dir=parsed.path,
            prefix=parsed.prefix,
            document=parsed.document,
            stretch=parsed.stretch,
            columns=parsed.columns,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    def progress(current: int, total: int, job):
        logging.getLogger(__name__).info(f"[{current}/{total}] Converting: {job.prefix}")

    runner = PyramidRunner(
        config=config,
        descriptor_only=parsed.descriptor_only,
        progress_callback=progress,
    )
    result = runner.run_batch(jobs)

    if parsed.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        for item in result.results:
            print(f"Written: {item['descriptor']}")
        for item in result.errors:
            print(f"Failed: {item['job']['prefix']}: {'; '.join(item['errors'])}", file=sys.stderr)

    return 0 if result.failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
