"""Text field drawer: anchors, rotation and ``^FB`` block layout."""

from __future__ import annotations

from fonts import FontSettings, resolve_font
from label_types import Anchor, FieldAlignment, TextAlignment, TextBlock, TextField
from zpl.errors import GeometryError

from .base import Canvas
from .state import DrawerState
from .utils import justified_word_offsets, wrap_text_to_width

# Baseline offsets for ^FO text, as fractions of line height (h) and measured
# width (w), keyed by clockwise rotation. They reproduce the printer's glyph
# placement and must not be re-derived.
ORIGIN_OFFSETS = {
    0: lambda w, h: (0.0, 3 * h / 4),
    90: lambda w, h: (h / 4, 0.0),
    180: lambda w, h: (w, h / 4),
    270: lambda w, h: (3 * h / 4, w),
}


def origin_offset(rotation: int, width: float, line_height: float) -> tuple[float, float]:
    """Offset from a ``^FO`` top-left corner to the first baseline."""

    return ORIGIN_OFFSETS.get(rotation, ORIGIN_OFFSETS[0])(width, line_height)


def draw_text_field(canvas: Canvas, field: TextField, state: DrawerState) -> None:
    settings = resolve_font(field.font, state.scale)
    text = settings.prepare(field.text)
    block = field.block
    if block is not None and block.max_width <= 0:
        raise GeometryError("text block has zero width")

    line_height = settings.line_height
    if block is not None:
        width = block.max_width * state.scale
    else:
        width = settings.width(text) * settings.scale_x

    rotation = field.rotation
    # the first field without coordinates is anchored like ^FO at the home offset
    anchored = (
        field.position.anchor is Anchor.ORIGIN
        if field.position is not None
        else not state.has_cursor("text")
    )
    x, y = state.resolve("text", field.position, field.home)
    if anchored:
        dx, dy = origin_offset(rotation, width, line_height)
        x, y = x + dx, y + dy

    with canvas.transformed(x, y, rotation, settings.scale_x):
        if block is None:
            left = -settings.width(text) if field.alignment is FieldAlignment.RIGHT else 0.0
            canvas.text(left, 0.0, text, settings.font_name, settings.size)
            line_count = 1
            advance = line_height
        else:
            line_count, advance = _draw_block(canvas, text, field, block, settings, state.scale)

    state.record("text", x, y, advance * max(line_count, 1), rotation)


def _draw_block(
    canvas: Canvas,
    text: str,
    field: TextField,
    block: TextBlock,
    settings: FontSettings,
    scale: float,
) -> tuple[int, float]:
    """Draw a wrapped block in the local frame; return (lines drawn, line advance)."""

    line_height = settings.line_height
    max_width = block.max_width * scale / settings.scale_x
    advance = line_height + block.line_spacing * scale

    lines = wrap_text_to_width(text, settings.font_name, settings.size, max_width)
    lines = lines[:block.max_lines]
    if not lines:
        return 0, advance

    left = -max_width if field.alignment is FieldAlignment.RIGHT else 0.0
    indent = block.hanging_indent * scale / settings.scale_x

    # 90 degree blocks are laid out from the far end: lines run in reverse and
    # a short block starts where the last line of a full block would be.
    reverse = field.rotation == 90
    start = 0.0
    step = advance
    if reverse:
        step = -advance
        start = -(block.max_lines - len(lines)) * advance

    slots = range(len(lines) - 1, -1, -1) if reverse else range(len(lines))
    last = len(lines) - 1
    for slot, index in enumerate(slots):
        line = lines[index]
        baseline = start + slot * step
        line_left = left + (indent if index > 0 else 0.0)

        if block.alignment is TextAlignment.JUSTIFIED and index < last and " " in line.strip():
            words = line.split()
            offsets = justified_word_offsets(
                words, settings.font_name, settings.size, max_width, line_height
            )
            for word, offset in zip(words, offsets):
                canvas.text(left + offset, baseline, word, settings.font_name, settings.size)
            continue

        line_width = settings.width(line)
        if block.alignment is TextAlignment.CENTER:
            line_left = left + (max_width - line_width) / 2
        elif block.alignment is TextAlignment.RIGHT:
            line_left = left + max_width - line_width
        canvas.text(line_left, baseline, line, settings.font_name, settings.size)

    return len(lines), advance
