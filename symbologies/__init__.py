"""Registry of barcode symbology encoders."""

from __future__ import annotations

from functools import lru_cache
from importlib import import_module
from typing import Iterable

from zpl.errors import UnsupportedSymbologyError

from .base import ModuleOptions, SymbolEncoder, SymbolMatrix

_SYMBOLOGY_MODULES = {
    "code128": "code128",
    "code39": "code39",
    "qrcode": "qr",
}


@lru_cache(maxsize=None)
def get_encoder(tag: str) -> SymbolEncoder:
    """Instantiate the encoder registered for ``tag``."""

    module_name = _SYMBOLOGY_MODULES.get(tag.lower())
    if module_name is None:
        raise UnsupportedSymbologyError(tag)

    module = import_module(f"{__name__}.{module_name}")
    encoder_cls: type[SymbolEncoder] | None = getattr(module, "Encoder", None)
    if not encoder_cls or not issubclass(encoder_cls, SymbolEncoder):
        raise UnsupportedSymbologyError(tag)
    return encoder_cls()


def encode(data: str, tag: str, options: ModuleOptions) -> SymbolMatrix:
    """Encode ``data`` with the symbology registered for ``tag``."""

    return get_encoder(tag).encode(data, options)


def list_symbologies() -> Iterable[str]:
    """Return the registered symbology tags."""

    return sorted(_SYMBOLOGY_MODULES)


__all__ = [
    "ModuleOptions",
    "SymbolEncoder",
    "SymbolMatrix",
    "encode",
    "get_encoder",
    "list_symbologies",
]
