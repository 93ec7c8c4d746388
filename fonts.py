# pyright: reportUnknownVariableType=false, reportUnknownMemberType=false
# pyright: reportUnknownArgumentType=false, reportAttributeAccessIssue=false
# pyright: reportMissingTypeStubs=false

"""ZPL font code mapping and text metrics for the label renderer."""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
import os
from pathlib import Path
import re
from typing import Optional

from fontTools.ttLib import TTFont as VariableTTFont
from fontTools.varLib import instancer
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfbase.ttfonts import TTFont as ReportLabTTFont

from label_types import FontInfo
from zpl.errors import FontError


@dataclass(frozen=True)
class FontFace:
    """A registered ReportLab font standing in for one ZPL font code."""

    font_name: str
    proportional: bool = True
    uppercase: bool = False


# Scalable font 0 is a bold sans; the bitmap fonts map to a monospace face.
# Font B only has capital glyphs on the printer, so its text is upper-cased.
FONT_FACES: dict[str, FontFace] = {
    "0": FontFace(font_name="Helvetica-Bold"),
    "B": FontFace(font_name="Courier-Bold", proportional=False, uppercase=True),
}
FALLBACK_FACE = FontFace(font_name="Courier", proportional=False)


@dataclass(frozen=True)
class FontSettings:
    """Resolved face, size and horizontal stretch for one text field."""

    font_name: str
    size: float
    scale_x: float = 1.0
    uppercase: bool = False

    def prepare(self, text: str) -> str:
        """Apply face-specific text rewrites; must run before measuring."""

        return text.upper() if self.uppercase else text

    def width(self, text: str) -> float:
        """Unstretched advance width of ``text``."""

        return stringWidth(text, self.font_name, self.size)

    @property
    def ascent(self) -> float:
        return pdfmetrics.getAscent(self.font_name, self.size)

    @property
    def descent(self) -> float:
        """Distance from the baseline down to the lowest glyph, as a positive number."""

        return -pdfmetrics.getDescent(self.font_name, self.size)

    @property
    def line_height(self) -> float:
        return self.ascent + self.descent


def _instantiate_weight(font_path: Path, weight: float) -> BytesIO:
    """Pin the ``wght`` axis of a variable font and return the static font bytes."""

    font = VariableTTFont(BytesIO(font_path.read_bytes()))
    try:
        axis = next(ax for ax in font["fvar"].axes if ax.axisTag == "wght")
    except (KeyError, StopIteration) as exc:
        raise FontError(f"Font '{font_path}' does not expose a wght axis.") from exc
    if not axis.minValue <= weight <= axis.maxValue:
        raise FontError(
            f"Font weight {weight:g} outside supported range "
            f"{axis.minValue:.0f}-{axis.maxValue:.0f}"
        )

    instancer.instantiateVariableFont(font, {"wght": weight}, inplace=True)
    # ReportLab keys embedded subsets on the PostScript name.
    ps_name = re.sub(r"[^A-Za-z0-9-]", "", f"{font_path.stem}-W{int(round(weight))}")[:63]
    names = font["name"]
    for plat, enc, lang in ((3, 1, 0x409), (1, 0, 0)):
        names.setName(ps_name, 6, plat, enc, lang)

    buffer = BytesIO()
    font.save(buffer)
    buffer.seek(0)
    return buffer


class FontRegistry:
    """Fixed font-code table plus faces registered at process start."""

    def __init__(self) -> None:
        self._faces: dict[str, FontFace] = dict(FONT_FACES)

    def face_for(self, code: str) -> FontFace:
        return self._faces.get(code.upper(), FALLBACK_FACE)

    def register_ttf(
        self,
        code: str,
        font_path: Path,
        *,
        weight: Optional[float] = None,
        proportional: bool = True,
        uppercase: bool = False,
    ) -> FontFace:
        """Map a ZPL font code onto a TrueType file.

        ``weight`` selects an instance of a variable font; static fonts must
        leave it unset.
        """

        if not font_path.exists():
            raise FontError(f"Font file '{font_path}' for code '{code}' is missing.")

        font_name = f"ZPL-{code.upper()}-{font_path.stem}"
        source: Path | BytesIO = font_path
        if weight is not None:
            font_name = f"{font_name}-w{int(round(weight))}"
            source = _instantiate_weight(font_path, float(weight))
        pdfmetrics.registerFont(ReportLabTTFont(font_name, source))

        face = FontFace(font_name=font_name, proportional=proportional, uppercase=uppercase)
        self._faces[code.upper()] = face
        return face

    def load_env(self, value: Optional[str] = None) -> list[FontFace]:
        """Register the faces listed in ``ZPL_PREVIEW_FONTS``.

        The value is a comma separated list of ``CODE=PATH`` entries; a
        ``@WEIGHT`` suffix on the path picks a variable font instance.
        """

        value = os.getenv("ZPL_PREVIEW_FONTS", "") if value is None else value
        faces: list[FontFace] = []
        for entry in filter(None, (part.strip() for part in value.split(","))):
            code, sep, target = entry.partition("=")
            if not sep or len(code.strip()) != 1 or not target.strip():
                raise FontError(f"Invalid font mapping '{entry}'. Expected CODE=PATH[@WEIGHT]")
            path, _, weight = target.strip().partition("@")
            try:
                parsed_weight = float(weight) if weight else None
            except ValueError:
                raise FontError(f"Invalid font weight '{weight}' in '{entry}'") from None
            faces.append(self.register_ttf(code.strip(), Path(path), weight=parsed_weight))
        return faces

    def resolve(self, font: FontInfo, scale: float) -> FontSettings:
        """Return the settings used to draw ``font`` at ``scale`` pixels per dot."""

        face = self.face_for(font.name)
        try:
            pdfmetrics.getFont(face.font_name)
        except (KeyError, ValueError) as exc:
            raise FontError(
                f"Font '{face.font_name}' for code '{font.name}' is not registered"
            ) from exc

        size = font.height * scale
        if size <= 0:
            raise FontError(f"Font '{font.name}' has no height")

        scale_x = 1.0
        if font.width > 0:
            if face.proportional:
                scale_x = font.width / font.height
            else:
                # monospace faces: stretch the advance to the requested cell width
                scale_x = font.width * scale / stringWidth("0", face.font_name, size)

        return FontSettings(
            font_name=face.font_name,
            size=size,
            scale_x=scale_x,
            uppercase=face.uppercase,
        )


_REGISTRY = FontRegistry()


def resolve_font(font: FontInfo, scale: float) -> FontSettings:
    return _REGISTRY.resolve(font, scale)


def register_ttf(code: str, font_path: Path, **kwargs) -> FontFace:
    """Register a TrueType face for ``code``; call once at process start."""

    return _REGISTRY.register_ttf(code, font_path, **kwargs)


def load_fonts_from_env() -> list[FontFace]:
    return _REGISTRY.load_env()


__all__ = [
    "FALLBACK_FACE",
    "FONT_FACES",
    "FontFace",
    "FontRegistry",
    "FontSettings",
    "load_fonts_from_env",
    "register_ttf",
    "resolve_font",
]
