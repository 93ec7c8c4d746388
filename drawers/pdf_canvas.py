# pyright: reportUnknownVariableType=false, reportUnknownMemberType=false
# pyright: reportMissingImports=false

"""Canvas drawing with ReportLab and rasterizing with PyMuPDF."""

from __future__ import annotations

from io import BytesIO

import fitz
from reportlab.lib.colors import black, white
from reportlab.pdfgen import canvas

from label_types import LineColor
from zpl.errors import RenderError

from .base import Canvas

# One PDF point per output pixel.
RASTER_DPI = 72


def _color(color: LineColor):
    return white if color is LineColor.WHITE else black


class PdfCanvas(Canvas):
    """Draws onto a single PDF page sized in pixels, then rasterizes it."""

    def __init__(self, width: int, height: int) -> None:
        super().__init__(width, height)
        self._buffer = BytesIO()
        self._canvas = canvas.Canvas(self._buffer, pagesize=(width, height))
        # flip to a top-left origin with y growing downwards
        self._canvas.translate(0, height)
        self._canvas.scale(1, -1)

    def push(self, x: float, y: float, rotation: int, scale_x: float) -> None:
        self._canvas.saveState()
        self._canvas.translate(x, y)
        if rotation:
            # positive angles turn clockwise in the flipped frame
            self._canvas.rotate(rotation)
        if scale_x != 1.0:
            self._canvas.scale(scale_x, 1)

    def pop(self) -> None:
        self._canvas.restoreState()

    def text(
        self,
        x: float,
        y: float,
        run: str,
        font_name: str,
        size: float,
        color: LineColor = LineColor.BLACK,
    ) -> None:
        c = self._canvas
        c.saveState()
        c.translate(x, y)
        c.scale(1, -1)
        c.setFont(font_name, size)
        c.setFillColor(_color(color))
        c.drawString(0, 0, run)
        c.restoreState()

    def fill_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        color: LineColor = LineColor.BLACK,
        radius: float = 0.0,
    ) -> None:
        c = self._canvas
        c.saveState()
        c.setFillColor(_color(color))
        if radius > 0:
            c.roundRect(x, y, width, height, radius, stroke=0, fill=1)
        else:
            c.rect(x, y, width, height, stroke=0, fill=1)
        c.restoreState()

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
        c = self._canvas
        c.saveState()
        c.setStrokeColor(_color(color))
        c.setLineWidth(thickness)
        inset = thickness / 2.0
        if radius > 0:
            c.roundRect(
                x + inset,
                y + inset,
                width - thickness,
                height - thickness,
                max(radius - inset, 0),
                stroke=1,
                fill=0,
            )
        else:
            c.rect(x + inset, y + inset, width - thickness, height - thickness, stroke=1, fill=0)
        c.restoreState()

    def line(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        thickness: float,
        color: LineColor = LineColor.BLACK,
    ) -> None:
        c = self._canvas
        c.saveState()
        c.setStrokeColor(_color(color))
        c.setLineWidth(thickness)
        c.line(x1, y1, x2, y2)
        c.restoreState()

    def circle(
        self,
        cx: float,
        cy: float,
        radius: float,
        thickness: float,
        color: LineColor = LineColor.BLACK,
        filled: bool = False,
    ) -> None:
        c = self._canvas
        c.saveState()
        c.setStrokeColor(_color(color))
        c.setFillColor(_color(color))
        c.setLineWidth(thickness)
        c.circle(cx, cy, radius, stroke=0 if filled else 1, fill=1 if filled else 0)
        c.restoreState()

    def to_pdf(self) -> bytes:
        self._canvas.showPage()
        self._canvas.save()
        return self._buffer.getvalue()

    def to_png(self) -> bytes:
        try:
            pdf_bytes = self.to_pdf()
            with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
                page = doc.load_page(0)
                pix = page.get_pixmap(dpi=RASTER_DPI, colorspace=fitz.csGRAY)
                return pix.tobytes("png")
        except Exception as exc:
            raise RenderError(f"Failed to rasterize label: {exc}") from exc
