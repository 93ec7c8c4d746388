"""Rendering helpers shared by the CLI and the web API."""

from __future__ import annotations

import logging
import os
from io import BytesIO
from typing import Sequence

from PIL import Image

from drawers import DrawerOptions, RenderResult, render_png
from label_types import Label
from zpl.errors import RenderError

logger = logging.getLogger(__name__)

ROTATIONS = (0, 90, 180, 270)

# PIL transposes turn counter-clockwise.
_TRANSPOSE = {
    90: Image.Transpose.ROTATE_270,
    180: Image.Transpose.ROTATE_180,
    270: Image.Transpose.ROTATE_90,
}


def render_label(
    labels: Sequence[Label],
    index: int,
    options: DrawerOptions,
    rotation: int = 0,
) -> RenderResult:
    """Render ``labels[index]`` and optionally rotate the whole image clockwise."""

    if not 0 <= index < len(labels):
        raise IndexError(f"Invalid index {index}. Found {len(labels)} labels")

    result = render_png(labels[index], options)
    for message in result.diagnostics:
        logger.info("Label %d: %s", index, message)
    if rotation:
        return RenderResult(png=rotate_png(result.png, rotation), diagnostics=result.diagnostics)
    return result


def rotate_png(png_bytes: bytes, rotation: int) -> bytes:
    """Rotate an encoded PNG clockwise by 90, 180 or 270 degrees."""

    if rotation not in ROTATIONS:
        raise ValueError(f"Invalid rotation {rotation}. Must be 0, 90, 180, or 270")
    if rotation == 0:
        return png_bytes

    try:
        with Image.open(BytesIO(png_bytes)) as image:
            rotated = image.transpose(_TRANSPOSE[rotation])
        buffer = BytesIO()
        rotated.save(buffer, format="PNG")
    except OSError as exc:
        raise RenderError(f"Failed to rotate image: {exc}") from exc
    return buffer.getvalue()


def render_png_files(
    output_path: str | None,
    labels: Sequence[Label],
    options: DrawerOptions,
    rotation: int = 0,
) -> str:
    """Render each label as a standalone PNG."""

    output_path = output_path or "label"

    if len(labels) == 0:
        return "No labels found in the input; no output generated."

    for i in range(len(labels)):
        result = render_label(labels, i, options, rotation)
        png_name = f"{output_path}_{(i + 1):02d}.png"
        with open(png_name, "wb") as handle:
            handle.write(result.png)

    return f"Wrote {len(labels)} PNG files with prefix '{output_path}_'."


def configure_logging(level: str | None = None) -> None:
    """Configure root logging from ``level`` or ``ZPL_PREVIEW_LOG_LEVEL``."""

    name = (level or os.getenv("ZPL_PREVIEW_LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
