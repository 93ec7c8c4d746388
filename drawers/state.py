"""Per-render scratch state for fields placed without coordinates."""

from __future__ import annotations

from dataclasses import dataclass

from label_types import FieldPosition, NATIVE_DPMM

# Unit step "down one line" in page pixels, keyed by clockwise rotation.
LINE_DIRECTIONS = {
    0: (0.0, 1.0),
    90: (-1.0, 0.0),
    180: (0.0, -1.0),
    270: (1.0, 0.0),
}


@dataclass
class _Cursor:
    x: float
    y: float
    advance: float
    rotation: int


class DrawerState:
    """Tracks the last baseline per element kind while one label renders."""

    def __init__(self, dpmm: int, native_dpmm: int = NATIVE_DPMM) -> None:
        self.scale = dpmm / native_dpmm
        self._cursors: dict[str, _Cursor] = {}

    def resolve(
        self,
        kind: str,
        position: FieldPosition | None,
        home: tuple[int, int],
    ) -> tuple[float, float]:
        """Return the scaled page position of a field before anchor offsets."""

        if position is not None:
            return (position.x + home[0]) * self.scale, (position.y + home[1]) * self.scale

        cursor = self._cursors.get(kind)
        if cursor is None:
            return home[0] * self.scale, home[1] * self.scale
        dx, dy = LINE_DIRECTIONS.get(cursor.rotation, LINE_DIRECTIONS[0])
        return cursor.x + dx * cursor.advance, cursor.y + dy * cursor.advance

    def has_cursor(self, kind: str) -> bool:
        return kind in self._cursors

    def record(self, kind: str, x: float, y: float, advance: float, rotation: int) -> None:
        """Remember where the last ``kind`` field was drawn and how far one line is."""

        self._cursors[kind] = _Cursor(x=x, y=y, advance=advance, rotation=rotation)
