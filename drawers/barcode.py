"""Barcode drawer: lays out a symbol encoder's module matrix."""

from __future__ import annotations

from typing import Callable

from fonts import resolve_font
from label_types import Anchor, Barcode, FontInfo
from symbologies import ModuleOptions, SymbolEncoder, SymbolMatrix
from zpl.errors import GeometryError

from .base import Canvas
from .state import DrawerState

EncoderLookup = Callable[[str], SymbolEncoder]

INTERPRETATION_GAP = 2


def interpretation_font(module_width: int) -> FontInfo:
    """Font for the human-readable line, sized from the narrow module width."""

    module_width = max(module_width, 1)
    return FontInfo(name="A", height=9 * module_width, width=5 * module_width)


def module_options(barcode: Barcode) -> ModuleOptions:
    return ModuleOptions(
        module_width=barcode.module_width,
        ratio=barcode.ratio,
        height=barcode.height,
        magnification=barcode.magnification,
        error_correction=barcode.error_correction,
        check_digit=barcode.check_digit,
    )


def draw_barcode(
    canvas: Canvas,
    barcode: Barcode,
    state: DrawerState,
    encoder_lookup: EncoderLookup,
) -> None:
    matrix = encoder_lookup(barcode.symbology).encode(barcode.data, module_options(barcode))

    scale = state.scale
    width = matrix.width * scale
    height = matrix.height * scale
    if width <= 0 or height <= 0:
        raise GeometryError(f"{barcode.symbology} symbol has no area")

    x, y = state.resolve("barcode", barcode.position, barcode.home)
    top = 0.0
    if barcode.position is not None and barcode.position.anchor is Anchor.TYPESET:
        # ^FT places the bottom of the bars on the given line
        top = -height

    with canvas.transformed(x, y, barcode.rotation):
        _draw_modules(canvas, matrix, top, scale)
        if barcode.interpretation and matrix.text:
            _draw_interpretation(canvas, barcode, matrix.text, width, top, height, scale)

    state.record("barcode", x, y, height, barcode.rotation)


def _draw_modules(canvas: Canvas, matrix: SymbolMatrix, top: float, scale: float) -> None:
    cell_width = matrix.cell_width * scale
    cell_height = matrix.cell_height * scale
    for row_index, row in enumerate(matrix.rows):
        row_top = top + row_index * cell_height
        column = 0
        while column < len(row):
            if not row[column]:
                column += 1
                continue
            run_start = column
            while column < len(row) and row[column]:
                column += 1
            canvas.fill_rect(
                run_start * cell_width,
                row_top,
                (column - run_start) * cell_width,
                cell_height,
            )


def _draw_interpretation(
    canvas: Canvas,
    barcode: Barcode,
    text: str,
    symbol_width: float,
    top: float,
    height: float,
    scale: float,
) -> None:
    settings = resolve_font(interpretation_font(barcode.module_width), scale)
    gap = INTERPRETATION_GAP * scale
    if barcode.interpretation_above:
        baseline = top - gap - settings.descent
    else:
        baseline = top + height + gap + settings.ascent
    left = (symbol_width - settings.width(text) * settings.scale_x) / 2
    with canvas.transformed(left, baseline, 0, settings.scale_x):
        canvas.text(0.0, 0.0, text, settings.font_name, settings.size)
