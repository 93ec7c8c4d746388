"""Drawers for ``^GB`` boxes, ``^GD`` diagonals and ``^GC`` circles."""

from __future__ import annotations

from label_types import Anchor, FieldPosition, GraphicBox, GraphicCircle, GraphicLine
from zpl.errors import GeometryError

from .base import Canvas
from .state import DrawerState


def _top_left(
    state: DrawerState,
    position: FieldPosition | None,
    home: tuple[int, int],
    height: float,
) -> tuple[float, float]:
    x, y = state.resolve("graphic", position, home)
    if position is not None and position.anchor is Anchor.TYPESET:
        y -= height
    return x, y


def draw_box(canvas: Canvas, box: GraphicBox, state: DrawerState) -> None:
    scale = state.scale
    width, height = box.width * scale, box.height * scale
    thickness = box.thickness * scale
    if width <= 0 or height <= 0 or thickness <= 0:
        raise GeometryError("graphic box has no area")

    x, y = _top_left(state, box.position, box.home, height)
    shorter = min(width, height)
    radius = box.rounding / 8 * shorter / 2
    if thickness * 2 >= shorter:
        canvas.fill_rect(x, y, width, height, box.color, radius)
    else:
        canvas.stroke_rect(x, y, width, height, thickness, box.color, radius)
    state.record("graphic", x, y, height, 0)


def draw_line(canvas: Canvas, line: GraphicLine, state: DrawerState) -> None:
    scale = state.scale
    width, height = line.width * scale, line.height * scale
    thickness = line.thickness * scale
    if width <= 0 or height <= 0 or thickness <= 0:
        raise GeometryError("diagonal line has no extent")

    x, y = _top_left(state, line.position, line.home, height)
    if line.direction == "L":
        canvas.line(x, y, x + width, y + height, thickness, line.color)
    else:
        canvas.line(x, y + height, x + width, y, thickness, line.color)
    state.record("graphic", x, y, height, 0)


def draw_circle(canvas: Canvas, circle: GraphicCircle, state: DrawerState) -> None:
    scale = state.scale
    diameter = circle.diameter * scale
    thickness = circle.thickness * scale
    if diameter <= 0 or thickness <= 0:
        raise GeometryError("circle has no diameter")

    x, y = _top_left(state, circle.position, circle.home, diameter)
    radius = diameter / 2
    if thickness * 2 >= diameter:
        canvas.circle(x + radius, y + radius, radius, thickness, circle.color, filled=True)
    else:
        canvas.circle(x + radius, y + radius, radius - thickness / 2, thickness, circle.color)
    state.record("graphic", x, y, diameter, 0)
