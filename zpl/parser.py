"""Interpret ZPL command tokens into structured label documents."""

from __future__ import annotations

import binascii
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from functools import partial
from string import hexdigits
from typing import Callable

from label_types import (
    Anchor,
    Barcode,
    Element,
    FieldAlignment,
    FieldPosition,
    FontInfo,
    GraphicBox,
    GraphicCircle,
    GraphicLine,
    Label,
    LineColor,
    TextAlignment,
    TextBlock,
    TextField,
    orientation_degrees,
)
from zpl.errors import ParseError
from zpl.tokenizer import Token, decode_bytes, tokenize

logger = logging.getLogger(__name__)

SYSTEM_FONT = FontInfo(name="A", height=9, width=5)
DEFAULT_MODULE_WIDTH = 2
DEFAULT_RATIO = 3.0
DEFAULT_BARCODE_HEIGHT = 10
DEFAULT_QR_MAGNIFICATION = 2
DEFAULT_HEX_INDICATOR = "_"

SYMBOLOGY_TAGS = {
    "BC": "code128",
    "B3": "code39",
    "BQ": "qrcode",
    "BX": "datamatrix",
    "B7": "pdf417",
    "BE": "ean13",
    "BU": "upca",
    "B2": "interleaved2of5",
    "BA": "code93",
    "B0": "aztec",
}

# Accepted for compatibility; they do not change the rendered image.
_NO_EFFECT_COMMANDS = frozenset(
    {"PQ", "PR", "MM", "MN", "MD", "CI", "LR", "LS", "PO", "JM", "FX", "CC", "CT", "CD"}
)


class _State(Enum):
    IDLE = "idle"
    IN_LABEL = "in_label"


@dataclass
class LabelDefaults:
    """Per-label defaults mutated by ``^LH``, ``^CF``, ``^FW`` and ``^BY``."""

    home: tuple[int, int] = (0, 0)
    font: FontInfo = SYSTEM_FONT
    orientation: int = 0
    module_width: int = DEFAULT_MODULE_WIDTH
    ratio: float = DEFAULT_RATIO
    barcode_height: int = DEFAULT_BARCODE_HEIGHT


@dataclass
class _PendingField:
    """Attributes collected between a field's first command and ``^FS``."""

    position: FieldPosition | None = None
    alignment: FieldAlignment = FieldAlignment.LEFT
    font_name: str | None = None
    font_height: int | None = None
    font_width: int | None = None
    font_orientation: int | None = None
    block: TextBlock | None = None
    hex_indicator: str | None = None
    data: str | None = None
    symbology: str | None = None
    barcode: dict[str, object] = field(default_factory=dict)
    graphic: Callable[..., Element] | None = None

    @property
    def has_content(self) -> bool:
        return self.data is not None or self.graphic is not None


class _Interpreter:
    """State machine for a single :func:`parse` call."""

    def __init__(self) -> None:
        self.labels: list[Label] = []
        self._state = _State.IDLE
        self._defaults = LabelDefaults()
        self._elements: list[Element] = []
        self._pending: _PendingField | None = None
        self._print_width: int | None = None
        self._label_length: int | None = None
        self._handlers: dict[str, Callable[[Token], None]] = {
            "LH": self._label_home,
            "CF": self._change_font,
            "FW": self._field_orientation,
            "BY": self._barcode_defaults,
            "PW": self._print_width_command,
            "LL": self._label_length_command,
            "FO": partial(self._field_position, anchor=Anchor.ORIGIN),
            "FT": partial(self._field_position, anchor=Anchor.TYPESET),
            "FB": self._field_block,
            "FH": self._field_hex,
            "FD": self._field_data,
            "FV": self._field_data,
            "FS": self._field_separator,
            "BC": self._code128,
            "B3": self._code39,
            "BQ": self._qrcode,
            "GB": self._graphic_box,
            "GD": self._graphic_diagonal,
            "GC": self._graphic_circle,
        }

    def feed(self, token: Token) -> None:
        if token.control_prefixed:
            return

        mnemonic = token.mnemonic
        if mnemonic == "XA":
            self._start_label()
            return
        if self._state is _State.IDLE:
            return
        if mnemonic == "XZ":
            self._end_label()
            return

        handler = self._handlers.get(mnemonic)
        if handler is not None:
            handler(token)
        elif len(mnemonic) == 2 and mnemonic[0] == "A":
            self._font(token)
        elif mnemonic in SYMBOLOGY_TAGS:
            self._generic_barcode(token)
        elif mnemonic not in _NO_EFFECT_COMMANDS:
            logger.debug("Skipping unsupported command ^%s", mnemonic)

    def finish(self) -> list[Label]:
        if self._state is _State.IN_LABEL:
            logger.debug("Input ended inside a label; discarding the unterminated label")
        return self.labels

    # label lifecycle

    def _start_label(self) -> None:
        if self._state is _State.IN_LABEL:
            self._end_label()
        self._state = _State.IN_LABEL
        self._defaults = LabelDefaults()
        self._elements = []
        self._pending = None
        self._print_width = None
        self._label_length = None

    def _end_label(self) -> None:
        if self._pending is not None:
            self._finalize()
        self.labels.append(
            Label(
                elements=tuple(self._elements),
                home=self._defaults.home,
                print_width=self._print_width,
                label_length=self._label_length,
            )
        )
        self._elements = []
        self._state = _State.IDLE

    # label defaults

    def _label_home(self, token: Token) -> None:
        x = _number(token, 0, 0, required=True)
        y = _number(token, 1, 0, required=True)
        self._defaults.home = (max(x, 0), max(y, 0))

    def _change_font(self, token: Token) -> None:
        fields = token.fields()
        current = self._defaults.font
        name = fields[0].strip()[:1] if fields else ""
        height = _number(token, 1, None)
        width = _number(token, 2, None)
        if height is not None and width is None:
            width = 0
        self._defaults.font = replace(
            current,
            name=name or current.name,
            height=height if height is not None else current.height,
            width=width if width is not None else current.width,
        )

    def _field_orientation(self, token: Token) -> None:
        fields = token.fields()
        if fields and fields[0].strip():
            self._defaults.orientation = orientation_degrees(
                fields[0], self._defaults.orientation
            )

    def _barcode_defaults(self, token: Token) -> None:
        defaults = self._defaults
        defaults.module_width = max(_number(token, 0, defaults.module_width), 1)
        defaults.ratio = _number(token, 1, defaults.ratio, cast=float)
        defaults.barcode_height = _number(token, 2, defaults.barcode_height)

    def _print_width_command(self, token: Token) -> None:
        self._print_width = _number(token, 0, self._print_width)

    def _label_length_command(self, token: Token) -> None:
        self._label_length = _number(token, 0, self._label_length)

    # field construction

    def _field(self) -> _PendingField:
        if self._pending is None:
            self._pending = _PendingField()
        return self._pending

    def _field_position(self, token: Token, anchor: Anchor) -> None:
        if self._pending is not None and self._pending.has_content:
            self._finalize()
        pending = self._field()

        fields = token.fields()
        if anchor is Anchor.TYPESET and not any(f.strip() for f in fields[:2]):
            pending.position = None
        else:
            x = _number(token, 0, 0, required=True)
            y = _number(token, 1, 0, required=True)
            pending.position = FieldPosition(max(x, 0), max(y, 0), anchor)

        if _number(token, 2, 0) == 1:
            pending.alignment = FieldAlignment.RIGHT

    def _font(self, token: Token) -> None:
        pending = self._field()
        fields = token.fields()
        pending.font_name = token.mnemonic[1]
        if fields and fields[0].strip():
            pending.font_orientation = orientation_degrees(fields[0])
        pending.font_height = _number(token, 1, None)
        pending.font_width = _number(token, 2, None)

    def _field_block(self, token: Token) -> None:
        fields = token.fields()
        justification = fields[3].strip().upper()[:1] if len(fields) > 3 else ""
        try:
            alignment = TextAlignment(justification or "L")
        except ValueError:
            logger.warning("Unknown ^FB justification %r; using left", justification)
            alignment = TextAlignment.LEFT
        self._field().block = TextBlock(
            max_width=max(_number(token, 0, 0), 0),
            max_lines=max(_number(token, 1, 1), 1),
            line_spacing=_number(token, 2, 0),
            alignment=alignment,
            hanging_indent=max(_number(token, 4, 0), 0),
        )

    def _field_hex(self, token: Token) -> None:
        self._field().hex_indicator = token.parameters[:1] or DEFAULT_HEX_INDICATOR

    def _field_data(self, token: Token) -> None:
        self._field().data = token.parameters

    def _field_separator(self, token: Token) -> None:
        self._finalize()

    # barcodes

    def _barcode(self, token: Token, **params: object) -> None:
        pending = self._field()
        pending.symbology = SYMBOLOGY_TAGS[token.mnemonic]
        fields = token.fields()
        if fields and fields[0].strip():
            params["rotation"] = orientation_degrees(fields[0])
        pending.barcode = {k: v for k, v in params.items() if v is not None}

    def _code128(self, token: Token) -> None:
        self._barcode(
            token,
            height=_number(token, 1, None),
            interpretation=_flag(token, 2, None),
            interpretation_above=_flag(token, 3, None),
        )

    def _code39(self, token: Token) -> None:
        self._barcode(
            token,
            check_digit=_flag(token, 1, None),
            height=_number(token, 2, None),
            interpretation=_flag(token, 3, None),
            interpretation_above=_flag(token, 4, None),
        )

    def _qrcode(self, token: Token) -> None:
        self._barcode(
            token,
            magnification=_number(token, 2, DEFAULT_QR_MAGNIFICATION),
            interpretation=False,
        )

    def _generic_barcode(self, token: Token) -> None:
        self._barcode(token, height=_number(token, 1, None))

    # graphics

    def _graphic_box(self, token: Token) -> None:
        thickness = max(_number(token, 2, 1, required=True), 1)
        self._field().graphic = partial(
            GraphicBox,
            width=max(_number(token, 0, thickness, required=True), thickness),
            height=max(_number(token, 1, thickness, required=True), thickness),
            thickness=thickness,
            color=_color(token, 3),
            rounding=min(max(_number(token, 4, 0), 0), 8),
        )

    def _graphic_diagonal(self, token: Token) -> None:
        thickness = max(_number(token, 2, 1, required=True), 1)
        fields = token.fields()
        direction = fields[4].strip().upper()[:1] if len(fields) > 4 else ""
        self._field().graphic = partial(
            GraphicLine,
            width=max(_number(token, 0, thickness, required=True), thickness),
            height=max(_number(token, 1, thickness, required=True), thickness),
            thickness=thickness,
            color=_color(token, 3),
            direction=direction if direction in ("R", "L") else "R",
        )

    def _graphic_circle(self, token: Token) -> None:
        self._field().graphic = partial(
            GraphicCircle,
            diameter=max(_number(token, 0, 3, required=True), 3),
            thickness=max(_number(token, 1, 1, required=True), 1),
            color=_color(token, 2),
        )

    # finalization

    def _finalize(self) -> None:
        pending, self._pending = self._pending, None
        if pending is None:
            return

        defaults = self._defaults
        element: Element
        if pending.graphic is not None:
            element = pending.graphic(position=pending.position, home=defaults.home)
        elif pending.data is None:
            return
        elif pending.symbology is not None:
            element = self._finalize_barcode(pending)
        else:
            element = TextField(
                position=pending.position,
                text=_decode_field_data(pending.data, pending.hex_indicator),
                font=self._resolve_font(pending),
                block=pending.block,
                alignment=pending.alignment,
                home=defaults.home,
            )
        self._elements.append(element)

    def _resolve_font(self, pending: _PendingField) -> FontInfo:
        """Fill the unset parts of a font override from the label defaults."""

        default = self._defaults.font
        if pending.font_width is not None:
            width = pending.font_width
        elif pending.font_height is not None:
            width = 0
        else:
            width = default.width
        orientation = pending.font_orientation
        return FontInfo(
            name=pending.font_name or default.name,
            height=pending.font_height if pending.font_height is not None else default.height,
            width=width,
            orientation=orientation if orientation is not None else self._defaults.orientation,
        )

    def _finalize_barcode(self, pending: _PendingField) -> Barcode:
        defaults = self._defaults
        params = dict(pending.barcode)
        params.setdefault("rotation", defaults.orientation)
        params.setdefault("height", defaults.barcode_height)
        data = _decode_field_data(pending.data or "", pending.hex_indicator)
        if pending.symbology == "qrcode":
            data, ecc = _unwrap_qr_data(data)
            params["error_correction"] = ecc
        return Barcode(
            position=pending.position,
            data=data,
            symbology=pending.symbology or "",
            module_width=defaults.module_width,
            ratio=defaults.ratio,
            home=defaults.home,
            **params,  # type: ignore[arg-type]
        )


def parse(data: bytes | str) -> list[Label]:
    """Parse a ZPL buffer into the labels it contains, in input order."""

    text = data if isinstance(data, str) else decode_bytes(data)
    interpreter = _Interpreter()
    for token in tokenize(text):
        interpreter.feed(token)
    return interpreter.finish()


def _number(
    token: Token,
    index: int,
    default,
    *,
    required: bool = False,
    cast: Callable[[float], object] = int,
):
    """Decode the numeric parameter at ``index``, or ``default`` when empty."""

    fields = token.fields()
    raw = fields[index].strip() if index < len(fields) else ""
    if not raw:
        return default
    try:
        return cast(float(raw))
    except (ValueError, OverflowError):
        if required:
            raise ParseError(token.mnemonic, raw) from None
        logger.warning(
            "Ignoring invalid parameter %r for ^%s; using %r",
            raw,
            token.mnemonic,
            default,
        )
        return default


def _flag(token: Token, index: int, default: bool | None) -> bool | None:
    fields = token.fields()
    raw = fields[index].strip().upper() if index < len(fields) else ""
    if raw == "Y":
        return True
    if raw == "N":
        return False
    return default


def _color(token: Token, index: int) -> LineColor:
    fields = token.fields()
    raw = fields[index].strip().upper()[:1] if index < len(fields) else ""
    return LineColor.WHITE if raw == "W" else LineColor.BLACK


def _decode_field_data(data: str, indicator: str | None) -> str:
    """Replace ``<indicator>XX`` hex escapes when ``^FH`` is active."""

    if not indicator or indicator not in data:
        return data

    chunks: list[str] = []
    pending_bytes = bytearray()
    index = 0
    while index < len(data):
        char = data[index]
        candidate = data[index + 1:index + 3]
        if char == indicator and len(candidate) == 2 and all(c in hexdigits for c in candidate):
            pending_bytes.extend(binascii.unhexlify(candidate))
            index += 3
            continue
        if pending_bytes:
            chunks.append(decode_bytes(bytes(pending_bytes)))
            pending_bytes.clear()
        chunks.append(char)
        index += 1
    if pending_bytes:
        chunks.append(decode_bytes(bytes(pending_bytes)))
    return "".join(chunks)


def _unwrap_qr_data(data: str) -> tuple[str, str]:
    """Split ``^BQ`` field data (``QA,payload``) into payload and ECC level."""

    head, sep, payload = data.partition(",")
    if not sep or len(head) > 2:
        return data, "Q"

    level = head[:1].upper()
    ecc = level if level and level in "HQML" else "Q"
    mode = head[1:2].upper()
    if mode == "M" and payload:
        # Manual mode carries a character-mode letter before the data.
        if payload[0].upper() == "B" and payload[1:5].isdigit():
            payload = payload[5:]
        elif payload[0].upper() in "ANK":
            payload = payload[1:]
    return payload, ecc


__all__ = ["LabelDefaults", "SYSTEM_FONT", "SYMBOLOGY_TAGS", "parse"]
