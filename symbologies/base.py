"""Interface every barcode symbology encoder implements."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class ModuleOptions:
    """Geometry requested by the label for one barcode, in native dots."""

    module_width: int = 2
    ratio: float = 3.0
    height: int = 10
    magnification: int = 2
    error_correction: str = "Q"
    check_digit: bool = False


@dataclass(frozen=True)
class SymbolMatrix:
    """Boolean module grid; each cell covers ``cell_width`` x ``cell_height`` dots."""

    rows: tuple[tuple[bool, ...], ...]
    cell_width: float
    cell_height: float
    text: str = ""

    @property
    def columns(self) -> int:
        return max((len(row) for row in self.rows), default=0)

    @property
    def width(self) -> float:
        return self.columns * self.cell_width

    @property
    def height(self) -> float:
        return len(self.rows) * self.cell_height


class SymbolEncoder(ABC):
    """Turns barcode data into a module matrix without drawing anything."""

    tag: str = ""

    @abstractmethod
    def encode(self, data: str, options: ModuleOptions) -> SymbolMatrix:
        """Return the module matrix for ``data``."""


def bars_to_row(widths: Iterable[int]) -> tuple[bool, ...]:
    """Expand alternating bar/space widths (bar first) into one cell per dot."""

    row: list[bool] = []
    for index, width in enumerate(widths):
        row.extend([index % 2 == 0] * width)
    return tuple(row)


__all__ = ["ModuleOptions", "SymbolEncoder", "SymbolMatrix", "bars_to_row"]
