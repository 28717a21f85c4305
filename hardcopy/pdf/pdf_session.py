"""Print session owning options, the active style, and the open document."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ..errors import SessionStateError
from ..models import DEFAULT_STYLE, HighlightStyle, PageOptions
from .pdf_backends import make_backend
from .pdf_constants import _debug
from .pdf_pagination import PaginationEngine
from .pdf_surface import open_surface


class SessionState(Enum):
    UNOPENED = "unopened"
    OPEN = "open"
    CLOSED = "closed"


@dataclass(slots=True)
class PrintSummary:
    """Outcome of a finished session.

    Args:
        output_path: Document path.
        pages: Pages written; 0 when the stream never opened a document.
        lines: Document lines laid out.
    """

    output_path: Path
    pages: int
    lines: int


class PrintSession:
    """One directive stream rendered into one output document.

    Option setters work before ``start`` and while the document is open;
    drawing requires an open document. Nothing is accepted after ``end``.

    Example:
        >>> session = PrintSession(output_path=Path("out.pdf"))
        >>> session.set_paper(width=200, height=200)
        >>> session.state
        <SessionState.UNOPENED: 'unopened'>
    """

    def __init__(
        self,
        *,
        output_path: Path,
        backend: str = "glyph",
        options: PageOptions | None = None,
    ) -> None:
        self.output_path = Path(output_path)
        self.backend = make_backend(backend)
        self.options = options if options is not None else PageOptions()
        self.style = DEFAULT_STYLE
        self.state = SessionState.UNOPENED
        self.engine: PaginationEngine | None = None
        self.summary: PrintSummary | None = None

    def set_paper(self, *, width: float, height: float) -> None:
        self._require_not_closed("PAPER")
        self.options.paper_width = width
        self.options.paper_height = height

    def set_margin(
        self, *, left: float, top: float, right: float, bottom: float
    ) -> None:
        self._require_not_closed("MARGIN")
        self.options.margin_left = left
        self.options.margin_top = top
        self.options.margin_right = right
        self.options.margin_bottom = bottom

    def set_header(self, *, template: str, extra_lines: int) -> None:
        self._require_not_closed("HEADER")
        self.options.header_format = template
        self.options.header_extra_lines = extra_lines

    def set_number_width(self, width: int) -> None:
        self._require_not_closed("NUMBER")
        self.options.number_width = width
        self._refresh_metrics()

    def set_linespace(self, amount: float) -> None:
        self._require_not_closed("LINESPACE")
        self.options.linespace = amount
        self._refresh_metrics()

    def set_font(self, *, name: str, size: float) -> None:
        self._require_not_closed("FONT")
        self.options.font_name = name
        self.options.font_size = size
        self._refresh_metrics()

    def set_highlight(self, style: HighlightStyle) -> None:
        """Replace the active style; later runs are drawn with it."""

        self._require_not_closed("HIGHLIGHT")
        self.style = style

    def text(self, text: str) -> None:
        self._require_open("TEXT").print_text(text, self.style)

    def line(self, text: str | None = None) -> None:
        self._require_open("LINE").newline(text, self.style)

    def start(self) -> None:
        """Open the output document and derive font metrics."""

        if self.state is not SessionState.UNOPENED:
            raise SessionStateError(f"START is not allowed in a {self.state.value} session")
        surface = open_surface(
            self.output_path,
            width=self.options.paper_width,
            height=self.options.paper_height,
        )
        self.engine = PaginationEngine(
            options=self.options, backend=self.backend, surface=surface
        )
        self.state = SessionState.OPEN
        _debug(msg=f"started {self.output_path} with {self.backend.name} backend")

    def end(self) -> PrintSummary:
        """Flush the last page and write the document."""

        engine = self._require_open("END")
        pages = engine.finish()
        self.summary = PrintSummary(
            output_path=self.output_path, pages=pages, lines=engine.cursor.line
        )
        self.engine = None
        self.state = SessionState.CLOSED
        return self.summary

    def close(self) -> PrintSummary:
        """Finish the session at end of stream, whatever state it is in."""

        if self.state is SessionState.OPEN:
            _debug(msg="stream ended without END; finishing document")
            return self.end()
        if self.summary is None:
            _debug(msg="stream ended without START; nothing written")
            self.summary = PrintSummary(output_path=self.output_path, pages=0, lines=0)
            self.state = SessionState.CLOSED
        return self.summary

    def abort(self) -> None:
        """Drop the open document without writing it."""

        self.engine = None
        self.state = SessionState.CLOSED

    def _refresh_metrics(self) -> None:
        if self.engine is not None:
            self.engine.refresh_metrics()

    def _require_open(self, directive: str) -> PaginationEngine:
        if self.engine is None:
            raise SessionStateError(
                f"{directive} requires an open document (session is {self.state.value})"
            )
        return self.engine

    def _require_not_closed(self, directive: str) -> None:
        if self.state is SessionState.CLOSED:
            raise SessionStateError(f"{directive} after END")
