"""QR Code encoder (``^BQ``) backed by the ``qrcode`` package."""

from __future__ import annotations

import qrcode
from qrcode.exceptions import DataOverflowError

from zpl.errors import InvalidSymbolDataError

from .base import ModuleOptions, SymbolEncoder, SymbolMatrix

ERROR_CORRECTION = {
    "L": qrcode.constants.ERROR_CORRECT_L,
    "M": qrcode.constants.ERROR_CORRECT_M,
    "Q": qrcode.constants.ERROR_CORRECT_Q,
    "H": qrcode.constants.ERROR_CORRECT_H,
}


class Encoder(SymbolEncoder):
    tag = "qrcode"

    def encode(self, data: str, options: ModuleOptions) -> SymbolMatrix:
        if not data:
            raise InvalidSymbolDataError(self.tag, "no data")

        qr = qrcode.QRCode(
            border=0,
            error_correction=ERROR_CORRECTION.get(
                options.error_correction.upper(), qrcode.constants.ERROR_CORRECT_Q
            ),
        )
        qr.add_data(data)
        try:
            qr.make(fit=True)
        except (DataOverflowError, ValueError) as exc:
            raise InvalidSymbolDataError(self.tag, str(exc)) from exc

        cell = max(options.magnification, 1)
        return SymbolMatrix(
            rows=tuple(tuple(bool(module) for module in row) for row in qr.get_matrix()),
            cell_width=cell,
            cell_height=cell,
        )
