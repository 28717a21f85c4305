"""
Typed containers for page options, highlight styles, and cursor state.
"""

from __future__ import annotations

from dataclasses import dataclass

from reportlab.lib.pagesizes import letter
from reportlab.lib.units import inch


@dataclass(frozen=True, slots=True)
class Color:
    """RGB color with channels normalized to [0, 1]."""

    r: float
    g: float
    b: float

    @classmethod
    def from_hex(cls, value: str) -> Color:
        """Return a Color parsed from ``#RRGGBB``.

        Example:
            >>> Color.from_hex("#ff0000")
            Color(r=1.0, g=0.0, b=0.0)
        """

        digits = value.lstrip("#")
        return cls(
            r=int(digits[0:2], 16) / 255.0,
            g=int(digits[2:4], 16) / 255.0,
            b=int(digits[4:6], 16) / 255.0,
        )

    @property
    def is_white(self) -> bool:
        """Return True for pure white, which is painted as no fill."""

        return self.r == 1 and self.g == 1 and self.b == 1


BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)


@dataclass(frozen=True, slots=True)
class HighlightStyle:
    """A named highlight group as emitted by the editor.

    Attributes:
        name: Highlight group name, e.g. ``Comment``.
        fg: Text color.
        bg: Background color; white means no background fill.
        sp: Special color used for underline and undercurl.
    """

    name: str
    fg: Color = BLACK
    bg: Color = WHITE
    sp: Color = BLACK
    bold: bool = False
    italic: bool = False
    underline: bool = False
    undercurl: bool = False

    @property
    def paints_background(self) -> bool:
        return not self.bg.is_white


DEFAULT_STYLE = HighlightStyle("Normal")
LINE_NUMBER_STYLE = HighlightStyle("LineNr")
HEADER_STYLE = HighlightStyle("PageHeader")


@dataclass(slots=True)
class PageOptions:
    """Page geometry and font choices set by option directives.

    Example:
        >>> options = PageOptions(paper_width=200, margin_left=10, margin_right=10)
        >>> options.right_limit
        190
    """

    paper_width: float = letter[0]
    paper_height: float = letter[1]
    margin_left: float = 0.5 * inch
    margin_top: float = 0.5 * inch
    margin_right: float = 0.5 * inch
    margin_bottom: float = 0.5 * inch
    header_format: str = ""
    header_extra_lines: int = 0
    number_width: int = 0
    linespace: float = 0.0
    font_name: str = "Courier"
    font_size: float = 10.0

    @property
    def numbering(self) -> bool:
        return self.number_width > 0

    @property
    def right_limit(self) -> float:
        """Return the x coordinate no glyph may cross."""

        return self.paper_width - self.margin_right

    @property
    def bottom_limit(self) -> float:
        """Return the y coordinate no line box may cross."""

        return self.paper_height - self.margin_bottom


@dataclass(slots=True)
class Cursor:
    """Pen position in top-down page coordinates.

    Attributes:
        page: 1-based page number, 0 before the first page turn.
        line: Document-wide line counter; never reset by a page turn.
    """

    page: int = 0
    line: int = 0
    x: float = 0.0
    y: float = 0.0

    def snapshot(self) -> tuple[int, int, float, float]:
        return (self.page, self.line, self.x, self.y)


@dataclass(frozen=True, slots=True)
class FontMetrics:
    """Line metrics derived once per font selection.

    Attributes:
        height: Line box height including extra line spacing.
        descent: Distance from the baseline to the bottom of the line box.
        char_width: Representative single-character advance for the gutter.
    """

    height: float
    descent: float
    char_width: float
