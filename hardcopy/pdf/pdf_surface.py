"""Page surfaces that serialize drawing to PDF or PostScript."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Protocol, Type

from reportlab.graphics.renderPS import PSCanvas
from reportlab.lib import colors
from reportlab.pdfgen import canvas

from ..errors import UnsupportedOutputFormat
from ..models import Color


class PageSurface(Protocol):
    """Drawing target in top-down page coordinates."""

    width: float
    height: float
    embeds_font_files: bool

    def fill_rect(
        self, *, x: float, y: float, width: float, height: float, color: Color
    ) -> None:
        """Fill a rectangle whose top-left corner is ``(x, y)``."""

    def show_text(
        self,
        *,
        x: float,
        baseline: float,
        text: str,
        font_name: str,
        font_size: float,
        color: Color,
    ) -> None:
        """Draw ``text`` with its baseline starting at ``(x, baseline)``."""

    def stroke_line(
        self, *, x1: float, y1: float, x2: float, y2: float, color: Color, width: float
    ) -> None:
        """Stroke a straight line segment."""

    def show_page(self) -> None:
        """Finalize the current page and start a fresh one."""

    def finish(self) -> None:
        """Write the document to its output path."""


class PdfSurface:
    """PDF output through the ReportLab canvas."""

    embeds_font_files = True

    def __init__(self, path: Path, *, width: float, height: float) -> None:
        self.path = path
        self.width = width
        self.height = height
        self.canvas = canvas.Canvas(str(path), pagesize=(width, height))
        self.canvas.setCreator("hardcopy")

    def fill_rect(
        self, *, x: float, y: float, width: float, height: float, color: Color
    ) -> None:
        self.canvas.setFillColorRGB(color.r, color.g, color.b)
        self.canvas.rect(x, self.height - y - height, width, height, stroke=0, fill=1)

    def show_text(
        self,
        *,
        x: float,
        baseline: float,
        text: str,
        font_name: str,
        font_size: float,
        color: Color,
    ) -> None:
        self.canvas.setFont(font_name, font_size)
        self.canvas.setFillColorRGB(color.r, color.g, color.b)
        self.canvas.drawString(x, self.height - baseline, text)

    def stroke_line(
        self, *, x1: float, y1: float, x2: float, y2: float, color: Color, width: float
    ) -> None:
        self.canvas.setStrokeColorRGB(color.r, color.g, color.b)
        self.canvas.setLineWidth(width)
        self.canvas.line(x1, self.height - y1, x2, self.height - y2)

    def show_page(self) -> None:
        self.canvas.showPage()

    def finish(self) -> None:
        self.canvas.save()


class PostScriptSurface:
    """PostScript output through the ReportLab PS canvas.

    Each page is closed with ``showpage``; only the standard fonts can be
    referenced since outline files are not embedded.
    """

    embeds_font_files = False

    def __init__(self, path: Path, *, width: float, height: float) -> None:
        self.path = path
        self.width = width
        self.height = height
        self.canvas = PSCanvas(size=(width, height))

    def fill_rect(
        self, *, x: float, y: float, width: float, height: float, color: Color
    ) -> None:
        self.canvas.setFillColor(_rl_color(color))
        self.canvas.rect(
            x, self.height - y - height, x + width, self.height - y, stroke=0, fill=1
        )

    def show_text(
        self,
        *,
        x: float,
        baseline: float,
        text: str,
        font_name: str,
        font_size: float,
        color: Color,
    ) -> None:
        self.canvas.setFont(font_name, font_size)
        self.canvas.setFillColor(_rl_color(color))
        self.canvas.drawString(x, self.height - baseline, text)

    def stroke_line(
        self, *, x1: float, y1: float, x2: float, y2: float, color: Color, width: float
    ) -> None:
        self.canvas.setStrokeColor(_rl_color(color))
        self.canvas.setLineWidth(width)
        self.canvas.line(x1, self.height - y1, x2, self.height - y2)

    def show_page(self) -> None:
        self.canvas.clear()
        # showpage resets the graphics state; make PSCanvas emit it again.
        self.canvas._color = None
        self.canvas._font = None
        self.canvas._lineWidth = None

    def finish(self) -> None:
        self.canvas.save(str(self.path))


def _rl_color(color: Color) -> colors.Color:
    return colors.Color(color.r, color.g, color.b)


_SURFACES: Dict[str, Type[PdfSurface] | Type[PostScriptSurface]] = {
    ".pdf": PdfSurface,
    ".ps": PostScriptSurface,
}


def open_surface(path: Path, *, width: float, height: float) -> PageSurface:
    """Return a surface for ``path``, chosen by its extension.

    Args:
        path: Output document path ending in ``.pdf`` or ``.ps``.
        width: Paper width in points.
        height: Paper height in points.
    Returns:
        A fresh surface; nothing is written until ``finish``.
    Raises:
        UnsupportedOutputFormat: The extension is not recognized.
    """

    surface_cls = _SURFACES.get(path.suffix.lower())
    if surface_cls is None:
        raise UnsupportedOutputFormat(f"file type is not supported: {path}")
    return surface_cls(path, width=width, height=height)
