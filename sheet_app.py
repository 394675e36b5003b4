#!/usr/bin/env python3
"""Photo Sheet Maker - Tile copies of one photo onto a printable page.

Opens the window by default. With --batch the sheet is rendered straight
from the command line and the written path is printed.
"""

import argparse
import logging
import sys
from pathlib import Path

from models import (
    ImageConfig, PaperSize, LayoutError,
    DEFAULT_WIDTH_MM, DEFAULT_HEIGHT_MM, DEFAULT_DIFF_MM, DEFAULT_DPI,
    DEFAULT_ROWS, DEFAULT_COLS,
)
from sheet_files import SheetWriteError, save_sheet
from tiler import render_sheet

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Photo Sheet Maker")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--batch", action="store_true",
                        help="Render without opening the window (requires an image)")
    parser.add_argument("image", nargs="?", default=None, help="Source image")

    job = parser.add_argument_group("sheet options")
    job.add_argument("--width-mm", type=float, default=DEFAULT_WIDTH_MM)
    job.add_argument("--height-mm", type=float, default=DEFAULT_HEIGHT_MM)
    job.add_argument("--gap-mm", type=float, default=DEFAULT_DIFF_MM,
                     help="Gap between columns")
    job.add_argument("--dpi", type=float, default=DEFAULT_DPI)
    job.add_argument("--rows", type=int, default=DEFAULT_ROWS)
    job.add_argument("--cols", type=int, default=DEFAULT_COLS)
    job.add_argument("--paper", type=PaperSize.from_label, default=PaperSize.A4,
                     metavar="{" + ",".join(p.label for p in PaperSize.choices()) + "}")
    job.add_argument("--stretch", action="store_true",
                     help="Stretch to the cell instead of keeping the aspect ratio")
    job.add_argument("--rotate", action="store_true", help="Landscape page")
    job.add_argument("--output-dir", default=None,
                     help="Where to write the sheet (default: next to the image)")
    return parser


def config_from_args(args) -> ImageConfig:
    return ImageConfig(
        height_mm=args.height_mm,
        width_mm=args.width_mm,
        diff_mm=args.gap_mm,
        dpi=args.dpi,
        is_aspect_ratio=not args.stretch,
        is_rotate=args.rotate,
        rows=args.rows,
        cols=args.cols,
    )


def run_batch(args) -> int:
    """Render and save one sheet. Returns the process exit code."""
    config = config_from_args(args)
    out_dir = args.output_dir or Path(args.image).parent
    try:
        canvas = render_sheet(config, args.paper, args.image)
        path = save_sheet(canvas, out_dir, dpi=config.dpi)
    except (LayoutError, SheetWriteError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    print(path)
    return 0


def run_gui(args) -> int:
    from controller import MainWindow, SheetApp, APP_NAME

    app = SheetApp(sys.argv)
    app.setApplicationName(APP_NAME)
    window = MainWindow(config_from_args(args), args.paper)
    window.show()

    # Connect macOS file-open events (drop onto the Dock icon)
    app.file_open_requested.connect(window.set_input)

    if args.image:
        window.set_input(args.image)

    return app.exec()


# === Entry Point ===

def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        logging.basicConfig(level=logging.DEBUG)

    if args.batch:
        if not args.image:
            parser.error("--batch needs an image")
        sys.exit(run_batch(args))
    sys.exit(run_gui(args))


if __name__ == "__main__":
    main()
