"""Layout engine: draws parsed labels onto a canvas."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from label_types import (
    Barcode,
    Element,
    GraphicBox,
    GraphicCircle,
    GraphicLine,
    Label,
    NATIVE_DPMM,
    TextField,
)
from symbologies import get_encoder
from zpl.errors import ElementError

from .barcode import EncoderLookup, draw_barcode
from .base import Canvas
from .graphics import draw_box, draw_circle, draw_line
from .pdf_canvas import PdfCanvas
from .state import DrawerState
from .text_field import draw_text_field

logger = logging.getLogger(__name__)

MM_PER_INCH = 25.4


@dataclass(frozen=True)
class DrawerOptions:
    """Output resolution and physical label size for one render."""

    dpmm: int = NATIVE_DPMM
    label_width_mm: float = 4 * MM_PER_INCH
    label_height_mm: float = 6 * MM_PER_INCH

    @property
    def pixel_size(self) -> tuple[int, int]:
        return (
            int(round(self.label_width_mm * self.dpmm)),
            int(round(self.label_height_mm * self.dpmm)),
        )


@dataclass(frozen=True)
class RenderResult:
    png: bytes
    diagnostics: tuple[str, ...] = ()


def draw_label(
    label: Label,
    canvas: Canvas,
    options: DrawerOptions,
    encoder_lookup: EncoderLookup = get_encoder,
) -> list[str]:
    """Draw every element of ``label``; return diagnostics for skipped ones."""

    state = DrawerState(options.dpmm, label.dpmm)
    diagnostics: list[str] = []
    for index, element in enumerate(label.elements):
        try:
            _draw_element(canvas, element, state, encoder_lookup)
        except ElementError as exc:
            message = f"element {index} ({type(element).__name__}): {exc}"
            logger.warning("Skipping %s", message)
            diagnostics.append(message)
    return diagnostics


def _draw_element(
    canvas: Canvas,
    element: Element,
    state: DrawerState,
    encoder_lookup: EncoderLookup,
) -> None:
    match element:
        case TextField():
            draw_text_field(canvas, element, state)
        case Barcode():
            draw_barcode(canvas, element, state, encoder_lookup)
        case GraphicBox():
            draw_box(canvas, element, state)
        case GraphicLine():
            draw_line(canvas, element, state)
        case GraphicCircle():
            draw_circle(canvas, element, state)
        case _:
            raise TypeError(f"Unknown label element {element!r}")


def render_png(
    label: Label,
    options: DrawerOptions,
    encoder_lookup: EncoderLookup = get_encoder,
) -> RenderResult:
    """Render ``label`` to PNG bytes at the resolution in ``options``."""

    width, height = options.pixel_size
    canvas = PdfCanvas(width, height)
    diagnostics = draw_label(label, canvas, options, encoder_lookup)
    return RenderResult(png=canvas.to_png(), diagnostics=tuple(diagnostics))


__all__ = [
    "Canvas",
    "DrawerOptions",
    "DrawerState",
    "PdfCanvas",
    "RenderResult",
    "draw_label",
    "render_png",
]
