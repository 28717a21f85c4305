"""Cursor and page model that lays runs out through a text backend."""

from __future__ import annotations

from typing import Iterator

from ..models import (
    DEFAULT_STYLE,
    HEADER_STYLE,
    LINE_NUMBER_STYLE,
    Cursor,
    FontMetrics,
    HighlightStyle,
    PageOptions,
)
from .pdf_backends import TextBackend
from .pdf_constants import (
    EPSILON,
    LINENR_MARGIN,
    UNDERCURL_STEP,
    UNDERLINE_WIDTH,
    _debug,
)
from .pdf_header import format_header
from .pdf_surface import PageSurface
from .pdf_types import Segment


class PaginationEngine:
    """Decide line wraps and page turns and place segments on the surface.

    The engine owns the cursor. Options are shared with the session, so
    option directives affect every layout decision made after them.

    Args:
        options: Page options, mutated in place by the session.
        backend: Measurement and drawing capability.
        surface: Page surface that receives drawing calls.
    """

    def __init__(
        self, *, options: PageOptions, backend: TextBackend, surface: PageSurface
    ) -> None:
        self.options = options
        self.backend = backend
        self.surface = surface
        self.cursor = Cursor()
        self.metrics = FontMetrics(height=0.0, descent=0.0, char_width=0.0)
        self.gutter_width = 0.0
        self.refresh_metrics()

    def refresh_metrics(self) -> None:
        """Select the configured font and derive metrics and gutter width."""

        self.backend.select_font(
            name=self.options.font_name,
            size=self.options.font_size,
            surface=self.surface,
        )
        self.metrics = self.backend.metrics(linespace=self.options.linespace)
        if self.options.numbering:
            self.gutter_width = (
                self.options.number_width * self.metrics.char_width + LINENR_MARGIN
            )
        else:
            self.gutter_width = 0.0
        _debug(
            msg=(
                f"[{self.backend.name}] font={self.options.font_name} "
                f"size={self.options.font_size} height={self.metrics.height:.2f} "
                f"descent={self.metrics.descent:.2f} gutter={self.gutter_width:.2f}"
            )
        )

    @property
    def text_left(self) -> float:
        """Return the x coordinate where line text starts, right of the gutter."""

        return self.options.margin_left + self.gutter_width

    @property
    def pages(self) -> int:
        return self.cursor.page

    def _fits(self, y: float) -> bool:
        return y + self.metrics.height <= self.options.bottom_limit + EPSILON

    def newline(
        self, text: str | None = None, style: HighlightStyle = DEFAULT_STYLE
    ) -> None:
        """Advance to the next document line, turning the page when needed.

        Args:
            text: Optional run drawn on the new line.
            style: Style for ``text``.
        """

        if self.cursor.line == 0:
            self.page_turn()
        else:
            self.cursor.y += self.metrics.height
            if not self._fits(self.cursor.y):
                self.page_turn()
        self.cursor.line += 1
        self._draw_line_number()
        self.cursor.x = self.text_left
        if text:
            self.print_text(text, style)

    def page_turn(self) -> None:
        """Finish the open page, if any, and start the next one."""

        if self.cursor.page != 0:
            self.surface.show_page()
        self.cursor.page += 1
        _debug(msg=f"page {self.cursor.page} opened at line {self.cursor.line + 1}")
        self._draw_header()
        self.cursor.x = self.text_left
        self.cursor.y = self.options.margin_top + self.metrics.height * (
            1 + self.options.header_extra_lines
        )

    def print_text(self, text: str, style: HighlightStyle) -> None:
        """Draw a run at the cursor, wrapping onto further lines as needed.

        Wrapping moves the pen down without counting a new document line;
        only ``newline`` does that.
        """

        if self.cursor.line == 0:
            self.newline()
        right_limit = self.options.right_limit
        segments = self.backend.segments(
            text,
            style,
            available=right_limit - self.cursor.x,
            full_width=right_limit - self.text_left,
            at_line_start=abs(self.cursor.x - self.text_left) < EPSILON,
        )
        for index, segment in enumerate(segments):
            if segment.wraps:
                self.cursor.y += self.metrics.height
                self.cursor.x = self.text_left
            if (segment.wraps or index == 0) and not self._fits(self.cursor.y):
                self.page_turn()
            self._place(segment, style)

    def finish(self) -> int:
        """Flush the last page and write the document.

        A document that never turned a page still gets one blank page.

        Returns:
            Number of pages written.
        """

        self.surface.show_page()
        self.surface.finish()
        return max(self.cursor.page, 1)

    def _place(self, segment: Segment, style: HighlightStyle) -> None:
        """Paint background, glyphs, and decorations, then advance the pen."""

        if not segment.text:
            return
        x, y = self.cursor.x, self.cursor.y
        height = self.metrics.height
        if style.paints_background:
            self.surface.fill_rect(
                x=x, y=y, width=segment.width, height=height, color=style.bg
            )
        baseline = y + height - self.metrics.descent
        self.backend.draw(self.surface, segment.text, style, x=x, baseline=baseline)
        if style.underline or style.undercurl:
            self._decorate(x=x, baseline=baseline, width=segment.width, style=style)
        self.cursor.x += segment.width

    def _decorate(
        self, *, x: float, baseline: float, width: float, style: HighlightStyle
    ) -> None:
        y = baseline + self.metrics.descent / 2
        if style.underline:
            self.surface.stroke_line(
                x1=x, y1=y, x2=x + width, y2=y, color=style.sp, width=UNDERLINE_WIDTH
            )
        if style.undercurl:
            amplitude = self.metrics.descent / 4
            points = list(_zigzag(x=x, y=y, width=width, amplitude=amplitude))
            for (x1, y1), (x2, y2) in zip(points, points[1:]):
                self.surface.stroke_line(
                    x1=x1, y1=y1, x2=x2, y2=y2, color=style.sp, width=UNDERLINE_WIDTH
                )

    def _draw_line_number(self) -> None:
        if not self.options.numbering:
            return
        label = f"{self.cursor.line:>{self.options.number_width}d}"
        width = self.backend.measure(label, LINE_NUMBER_STYLE)
        # Labels wider than the gutter grow leftwards but stay on the page.
        self.cursor.x = max(0.0, self.text_left - LINENR_MARGIN - width)
        self._place(Segment(text=label, width=width), LINE_NUMBER_STYLE)

    def _draw_header(self) -> None:
        if not self.options.header_format:
            return
        header = format_header(self.options.header_format, page_number=self.cursor.page)
        self.cursor.y = self.options.margin_top
        self.cursor.x = self.options.margin_left
        left_width = self.backend.measure(header.left, HEADER_STYLE)
        self._place(Segment(text=header.left, width=left_width), HEADER_STYLE)
        right_width = self.backend.measure(header.right, HEADER_STYLE)
        self.cursor.x = self.options.right_limit - right_width
        self._place(Segment(text=header.right, width=right_width), HEADER_STYLE)


def _zigzag(
    *, x: float, y: float, width: float, amplitude: float
) -> Iterator[tuple[float, float]]:
    """Yield the corner points of an undercurl spanning ``width``."""

    step = 0
    offset = 0.0
    while offset < width:
        yield x + offset, y + (amplitude if step % 2 else -amplitude)
        offset += UNDERCURL_STEP
        step += 1
    yield x + width, y + (amplitude if step % 2 else -amplitude)
