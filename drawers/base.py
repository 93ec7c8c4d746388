"""Drawing surface interface consumed by the layout engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator

from label_types import LineColor


class Canvas(ABC):
    """Pixel surface with a top-left origin and y growing downwards.

    Rotations are clockwise in degrees. Every primitive is expressed in the
    frame set up by the innermost :meth:`transformed` block.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height

    @contextmanager
    def transformed(
        self,
        x: float,
        y: float,
        rotation: int = 0,
        scale_x: float = 1.0,
    ) -> Iterator[None]:
        """Move the origin to ``(x, y)``, rotate and stretch; restore on exit."""

        self.push(x, y, rotation, scale_x)
        try:
            yield
        finally:
            self.pop()

    @abstractmethod
    def push(self, x: float, y: float, rotation: int, scale_x: float) -> None:
        """Save the current frame and apply a new local transform."""

    @abstractmethod
    def pop(self) -> None:
        """Restore the frame saved by the matching :meth:`push`."""

    @abstractmethod
    def text(
        self,
        x: float,
        y: float,
        run: str,
        font_name: str,
        size: float,
        color: LineColor = LineColor.BLACK,
    ) -> None:
        """Draw ``run`` with its baseline starting at ``(x, y)``."""

    @abstractmethod
    def fill_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        color: LineColor = LineColor.BLACK,
        radius: float = 0.0,
    ) -> None:
        """Fill a rectangle whose top-left corner is ``(x, y)``."""

    @abstractmethod
    def stroke_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        thickness: float,
        color: LineColor = LineColor.BLACK,
        radius: float = 0.0,
    ) -> None:
        """Outline a rectangle; the stroke stays inside the outer bounds."""

    @abstractmethod
    def line(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        thickness: float,
        color: LineColor = LineColor.BLACK,
    ) -> None:
        """Stroke a straight segment."""

    @abstractmethod
    def circle(
        self,
        cx: float,
        cy: float,
        radius: float,
        thickness: float,
        color: LineColor = LineColor.BLACK,
        filled: bool = False,
    ) -> None:
        """Stroke (or fill) a circle centered on ``(cx, cy)``."""

    @abstractmethod
    def to_png(self) -> bytes:
        """Return the accumulated drawing as PNG bytes."""
