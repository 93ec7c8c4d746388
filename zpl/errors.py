"""Exception hierarchy shared by the parser and the renderer."""

from __future__ import annotations


class LabelError(Exception):
    """Base class for label parsing and rendering failures."""


class ParseError(LabelError):
    """A structurally required parameter could not be decoded."""

    def __init__(self, command: str, value: str, message: str = "") -> None:
        self.command = command
        self.value = value
        super().__init__(
            message or f"Invalid numeric parameter {value!r} for ^{command}"
        )


class RenderError(LabelError):
    """The canvas could not produce an image."""


class ElementError(LabelError):
    """A single element cannot be drawn; the rest of the label still renders."""


class FontError(ElementError):
    pass


class GeometryError(ElementError):
    pass


class SymbologyError(ElementError):
    pass


class UnsupportedSymbologyError(SymbologyError):
    def __init__(self, tag: str) -> None:
        self.tag = tag
        super().__init__(f"unsupported symbology '{tag}'")


class InvalidSymbolDataError(SymbologyError):
    def __init__(self, tag: str, detail: str) -> None:
        self.tag = tag
        super().__init__(f"invalid data for symbology '{tag}': {detail}")


__all__ = [
    "ElementError",
    "FontError",
    "GeometryError",
    "InvalidSymbolDataError",
    "LabelError",
    "ParseError",
    "RenderError",
    "SymbologyError",
    "UnsupportedSymbologyError",
]
