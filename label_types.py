"""Structured label documents produced by the ZPL parser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Union

NATIVE_DPMM = 8


class Anchor(StrEnum):
    """What a declared field position refers to."""

    ORIGIN = "origin"
    TYPESET = "typeset"


class TextAlignment(StrEnum):
    LEFT = "L"
    CENTER = "C"
    RIGHT = "R"
    JUSTIFIED = "J"


class FieldAlignment(StrEnum):
    LEFT = "left"
    RIGHT = "right"


class LineColor(StrEnum):
    BLACK = "B"
    WHITE = "W"


_ORIENTATIONS = {"N": 0, "R": 90, "I": 180, "B": 270}


def orientation_degrees(code: str, default: int = 0) -> int:
    """Map a ZPL orientation letter (N, R, I, B) to clockwise degrees."""

    return _ORIENTATIONS.get(code.strip().upper()[:1], default)


@dataclass(frozen=True)
class FieldPosition:
    x: int
    y: int
    anchor: Anchor = Anchor.ORIGIN


@dataclass(frozen=True)
class FontInfo:
    """Font selection for a text field."""

    name: str
    height: int
    width: int = 0
    orientation: int = 0


@dataclass(frozen=True)
class TextBlock:
    """Multi-line layout box declared with ``^FB``."""

    max_width: int
    max_lines: int = 1
    line_spacing: int = 0
    alignment: TextAlignment = TextAlignment.LEFT
    hanging_indent: int = 0


@dataclass(frozen=True)
class TextField:
    position: FieldPosition | None
    text: str
    font: FontInfo
    block: TextBlock | None = None
    alignment: FieldAlignment = FieldAlignment.LEFT
    home: tuple[int, int] = (0, 0)

    @property
    def rotation(self) -> int:
        return self.font.orientation


@dataclass(frozen=True)
class Barcode:
    position: FieldPosition | None
    data: str
    symbology: str
    module_width: int = 2
    ratio: float = 3.0
    height: int = 10
    interpretation: bool = True
    interpretation_above: bool = False
    magnification: int = 2
    error_correction: str = "Q"
    check_digit: bool = False
    rotation: int = 0
    home: tuple[int, int] = (0, 0)


@dataclass(frozen=True)
class GraphicBox:
    position: FieldPosition | None
    width: int
    height: int
    thickness: int = 1
    color: LineColor = LineColor.BLACK
    rounding: int = 0
    home: tuple[int, int] = (0, 0)

    @property
    def rotation(self) -> int:
        return 0


@dataclass(frozen=True)
class GraphicLine:
    """Diagonal line from ``^GD``; ``R`` rises to the right, ``L`` falls."""

    position: FieldPosition | None
    width: int
    height: int
    thickness: int = 1
    color: LineColor = LineColor.BLACK
    direction: str = "R"
    home: tuple[int, int] = (0, 0)

    @property
    def rotation(self) -> int:
        return 0


@dataclass(frozen=True)
class GraphicCircle:
    position: FieldPosition | None
    diameter: int
    thickness: int = 1
    color: LineColor = LineColor.BLACK
    home: tuple[int, int] = (0, 0)

    @property
    def rotation(self) -> int:
        return 0


Element = Union[TextField, Barcode, GraphicBox, GraphicLine, GraphicCircle]


@dataclass(frozen=True)
class Label:
    """One printable document delimited by ``^XA`` and ``^XZ``."""

    elements: tuple[Element, ...]
    home: tuple[int, int] = (0, 0)
    dpmm: int = NATIVE_DPMM
    print_width: int | None = None
    label_length: int | None = None


__all__ = [
    "Anchor",
    "Barcode",
    "Element",
    "FieldAlignment",
    "FieldPosition",
    "FontInfo",
    "GraphicBox",
    "GraphicCircle",
    "GraphicLine",
    "Label",
    "LineColor",
    "NATIVE_DPMM",
    "TextAlignment",
    "TextBlock",
    "TextField",
    "orientation_degrees",
]
