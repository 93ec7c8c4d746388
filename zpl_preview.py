#!/usr/bin/env python3
"""Render the labels of a ZPL file to PNG images."""

import argparse
import os
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from drawers import MM_PER_INCH, DrawerOptions
from fonts import load_fonts_from_env
from label_generation import ROTATIONS, configure_logging, render_label, render_png_files
from zpl import parse
from zpl.errors import FontError, LabelError


def _read_input(path: str) -> bytes:
    source = Path(path)
    if not source.is_file():
        raise SystemExit(f"Input file '{path}' does not exist.")
    return source.read_bytes()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point for rendering ZPL labels."""

    parser = argparse.ArgumentParser(
        description="ZPL -> PNG label preview"
    )
    parser.add_argument("input", help="ZPL file to render")
    parser.add_argument(
        "-o", "--output",
        help="Output file prefix; files are named PREFIX_NN.png (default: label).",
    )
    parser.add_argument(
        "--dpmm",
        type=int,
        default=int(os.getenv("ZPL_PREVIEW_DPMM", "8")),
        help="Print density in dots per millimeter (default: 8).",
    )
    parser.add_argument(
        "--width",
        type=float,
        default=4.0,
        help="Label width in inches (default: 4).",
    )
    parser.add_argument(
        "--height",
        type=float,
        default=6.0,
        help="Label height in inches (default: 6).",
    )
    parser.add_argument(
        "-i", "--index",
        type=int,
        default=None,
        help="Render only the label at this zero-based index.",
    )
    parser.add_argument(
        "-r", "--rotation",
        type=int,
        default=0,
        choices=ROTATIONS,
        help="Rotate the output image clockwise (default: 0).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (defaults to ZPL_PREVIEW_LOG_LEVEL or INFO).",
    )

    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    try:
        load_fonts_from_env()
    except FontError as exc:
        raise SystemExit(str(exc)) from exc

    if args.dpmm <= 0 or args.width <= 0 or args.height <= 0:
        raise SystemExit("--dpmm, --width and --height must be positive.")

    options = DrawerOptions(
        dpmm=args.dpmm,
        label_width_mm=args.width * MM_PER_INCH,
        label_height_mm=args.height * MM_PER_INCH,
    )

    try:
        labels = parse(_read_input(args.input))
        if args.index is None:
            message = render_png_files(args.output, labels, options, args.rotation)
        else:
            result = render_label(labels, args.index, options, args.rotation)
            png_name = f"{args.output or 'label'}_{(args.index + 1):02d}.png"
            with open(png_name, "wb") as handle:
                handle.write(result.png)
            message = f"Wrote {png_name}"
    except (LabelError, IndexError) as exc:
        raise SystemExit(str(exc)) from exc

    print(message)
    return 0


if __name__ == "__main__":

    load_dotenv()

    main()
