"""Text measurement and drawing backends used by the pagination engine.

``GlyphBackend`` measures one character at a time and leaves every wrap
decision to a per-character check. ``LayoutBackend`` measures whole runs and
breaks them into wrapped sub-lines itself. Both hand the engine a stream of
:class:`Segment` objects, so the cursor and page logic exists only once.
"""

from __future__ import annotations

import unicodedata
from bisect import bisect_right
from pathlib import Path
from typing import Dict, Iterator, Protocol

from reportlab.pdfbase import pdfmetrics

from ..cleaning import flatten_markup
from ..errors import UnsupportedFontForm
from ..models import DEFAULT_STYLE, FontMetrics, HighlightStyle
from .pdf_constants import EPSILON, _debug
from .pdf_settings import is_font_file, load_font_file, resolve_family, variant_font
from .pdf_surface import PageSurface
from .pdf_types import Segment

LEADING_RATIO = 1.2


class TextBackend(Protocol):
    """Capability the pagination engine lays text out with."""

    name: str

    def select_font(self, *, name: str, size: float, surface: PageSurface) -> None:
        """Make ``name`` at ``size`` points the active font."""

    def metrics(self, *, linespace: float) -> FontMetrics:
        """Return line metrics for the active font."""

    def measure(self, text: str, style: HighlightStyle) -> float:
        """Return the advance width of ``text`` in ``style``."""

    def segments(
        self,
        text: str,
        style: HighlightStyle,
        *,
        available: float,
        full_width: float,
        at_line_start: bool,
    ) -> Iterator[Segment]:
        """Split a run into segments that fit the remaining line widths."""

    def draw(
        self,
        surface: PageSurface,
        text: str,
        style: HighlightStyle,
        *,
        x: float,
        baseline: float,
    ) -> None:
        """Draw ``text`` in ``style`` on ``surface``."""


class _FontBackend:
    """Font bookkeeping shared by both backends."""

    name = "base"

    def __init__(self) -> None:
        self.family = "Courier"
        self.size = 10.0
        self.file_font: str | None = None
        self.system_fonts = True

    def font_for(self, style: HighlightStyle) -> str:
        if self.file_font is not None:
            return self.file_font
        return variant_font(
            self.family,
            bold=style.bold,
            italic=style.italic,
            system_fonts=self.system_fonts,
        )

    def measure(self, text: str, style: HighlightStyle) -> float:
        return pdfmetrics.stringWidth(text, self.font_for(style), self.size)

    def draw(
        self,
        surface: PageSurface,
        text: str,
        style: HighlightStyle,
        *,
        x: float,
        baseline: float,
    ) -> None:
        surface.show_text(
            x=x,
            baseline=baseline,
            text=text,
            font_name=self.font_for(style),
            font_size=self.size,
            color=style.fg,
        )

    def _ascent_descent(self) -> tuple[float, float]:
        """Return ascent and descent as positive distances in points."""

        ascent, descent = pdfmetrics.getAscentDescent(
            self.font_for(DEFAULT_STYLE), self.size
        )
        return ascent, -descent


class GlyphBackend(_FontBackend):
    """Character-at-a-time measurement with no shaping or line breaking.

    Font names select a standard or installed family (bold and italic
    variants follow the style) or load a ``.ttf``/``.otf`` file directly.
    Loaded files are cached by resolved path for the lifetime of the backend.
    """

    name = "glyph"

    def __init__(self) -> None:
        super().__init__()
        self._font_files: Dict[Path, str] = {}

    def select_font(self, *, name: str, size: float, surface: PageSurface) -> None:
        if is_font_file(name):
            if not surface.embeds_font_files:
                raise UnsupportedFontForm(
                    f"font files cannot be used with this output format: {name}"
                )
            self.file_font = self._load_font_file(Path(name))
        else:
            self.system_fonts = surface.embeds_font_files
            self.family = resolve_family(name, system_fonts=self.system_fonts)
            self.file_font = None
        self.size = size

    def _load_font_file(self, path: Path) -> str:
        key = path.expanduser().resolve()
        cached = self._font_files.get(key)
        if cached is not None:
            _debug(msg=f"font file {key} already loaded")
            return cached
        font_name = load_font_file(key)
        self._font_files[key] = font_name
        return font_name

    def metrics(self, *, linespace: float) -> FontMetrics:
        ascent, descent = self._ascent_descent()
        return FontMetrics(
            height=ascent + descent + linespace,
            descent=descent + linespace / 2,
            char_width=self.measure("0", DEFAULT_STYLE),
        )

    def segments(
        self,
        text: str,
        style: HighlightStyle,
        *,
        available: float,
        full_width: float,
        at_line_start: bool,
    ) -> Iterator[Segment]:
        for char in text:
            advance = self.measure(char, style)
            wraps = not at_line_start and advance > available + EPSILON
            if wraps:
                available = full_width
            available -= advance
            at_line_start = False
            yield Segment(text=char, width=advance, wraps=wraps)


class LayoutBackend(_FontBackend):
    """Run-level layout with character-granularity line breaking.

    Runs are inline markup: tags are dropped and entities decoded before
    layout. Fonts are chosen by family name and size only.
    """

    name = "layout"

    def select_font(self, *, name: str, size: float, surface: PageSurface) -> None:
        if is_font_file(name):
            raise UnsupportedFontForm(
                f"font files are not supported by the layout backend: {name}"
            )
        self.system_fonts = surface.embeds_font_files
        self.family = resolve_family(name, system_fonts=self.system_fonts)
        self.file_font = None
        self.size = size

    def metrics(self, *, linespace: float) -> FontMetrics:
        ascent, descent = self._ascent_descent()
        height = self.size * LEADING_RATIO + linespace
        baseline = (height - (ascent + descent)) / 2 + ascent
        return FontMetrics(
            height=height,
            descent=height - baseline,
            char_width=self.measure("MW", DEFAULT_STYLE) / 2,
        )

    def segments(
        self,
        text: str,
        style: HighlightStyle,
        *,
        available: float,
        full_width: float,
        at_line_start: bool,
    ) -> Iterator[Segment]:
        text = flatten_markup(text)
        start = 0
        wraps = False
        while start < len(text):
            end = self._line_end(text, style, start=start, available=available)
            if end == start:
                if not at_line_start:
                    wraps, available, at_line_start = True, full_width, True
                    continue
                end = start + 1
            piece = text[start:end]
            yield Segment(text=piece, width=self.measure(piece, style), wraps=wraps)
            start = end
            wraps, available, at_line_start = True, full_width, True

    def _line_end(
        self, text: str, style: HighlightStyle, *, start: int, available: float
    ) -> int:
        """Return the end index of the longest prefix from ``start`` that fits."""

        ends = range(start + 1, len(text) + 1)
        end = start + bisect_right(
            ends,
            available + EPSILON,
            key=lambda stop: self.measure(text[start:stop], style),
        )
        # Keep combining marks with their base character.
        while start + 1 < end < len(text) and unicodedata.combining(text[end]):
            end -= 1
        return end


_BACKENDS = {
    GlyphBackend.name: GlyphBackend,
    LayoutBackend.name: LayoutBackend,
}
BACKEND_NAMES = tuple(_BACKENDS)


def make_backend(name: str) -> GlyphBackend | LayoutBackend:
    """Return a fresh backend instance by name.

    Example:
        >>> make_backend("glyph").name
        'glyph'
    """

    try:
        return _BACKENDS[name]()
    except KeyError:
        raise ValueError(
            f"unknown backend {name!r}; expected one of {', '.join(BACKEND_NAMES)}"
        ) from None
