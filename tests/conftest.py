from __future__ import annotations

from typing import List

import pytest

from hardcopy.models import Color, PageOptions
from hardcopy.pdf.pdf_backends import make_backend
from hardcopy.pdf.pdf_constants import EPSILON
from hardcopy.pdf.pdf_pagination import PaginationEngine


class RecordingSurface:
    """Page surface that records drawing calls instead of serializing them."""

    def __init__(
        self, width: float = 200.0, height: float = 200.0, embeds_font_files: bool = True
    ) -> None:
        self.width = width
        self.height = height
        self.embeds_font_files = embeds_font_files
        self.calls: List[tuple] = []
        self.pages_shown = 0
        self.finished = False

    def fill_rect(
        self, *, x: float, y: float, width: float, height: float, color: Color
    ) -> None:
        self.calls.append(("rect", self.pages_shown + 1, x, y, width, height, color))

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
        self.calls.append(("text", self.pages_shown + 1, x, baseline, text, font_name))

    def stroke_line(
        self, *, x1: float, y1: float, x2: float, y2: float, color: Color, width: float
    ) -> None:
        self.calls.append(("line", self.pages_shown + 1, x1, y1, x2, y2, color))

    def show_page(self) -> None:
        self.pages_shown += 1
        self.calls.append(("page", self.pages_shown))

    def finish(self) -> None:
        self.finished = True

    def texts(self, page: int | None = None) -> List[tuple]:
        return [
            call
            for call in self.calls
            if call[0] == "text" and (page is None or call[1] == page)
        ]

    def rects(self) -> List[tuple]:
        return [call for call in self.calls if call[0] == "rect"]


@pytest.fixture
def options() -> PageOptions:
    return PageOptions(
        paper_width=200.0,
        paper_height=200.0,
        margin_left=10.0,
        margin_top=10.0,
        margin_right=10.0,
        margin_bottom=10.0,
        font_name="Mono",
        font_size=10.0,
    )


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def make_engine(options: PageOptions, surface: RecordingSurface):
    def factory(backend: str = "glyph") -> PaginationEngine:
        return PaginationEngine(
            options=options, backend=make_backend(backend), surface=surface
        )

    return factory


def lines_per_page(engine: PaginationEngine) -> int:
    """Count how many lines the vertical-fit rule allows on one page."""

    options = engine.options
    height = engine.metrics.height
    y = options.margin_top + height * (1 + options.header_extra_lines)
    count = 1
    while y + height + height <= options.bottom_limit + EPSILON:
        y += height
        count += 1
    return count
