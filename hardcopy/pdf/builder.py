"""Directive dispatch and the stream-to-document driver."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict

from ..errors import PrintError, UnknownDirective
from ..models import HighlightStyle, PageOptions
from ..parser import DirectiveReader, read_stream
from .pdf_session import PrintSession, PrintSummary

Handler = Callable[[PrintSession, DirectiveReader], None]

__all__ = [
    "DIRECTIVES",
    "dispatch",
    "print_file",
    "print_stream",
]


def _paper(session: PrintSession, reader: DirectiveReader) -> None:
    session.set_paper(width=reader.read_float(), height=reader.read_float())


def _margin(session: PrintSession, reader: DirectiveReader) -> None:
    session.set_margin(
        left=reader.read_float(),
        top=reader.read_float(),
        right=reader.read_float(),
        bottom=reader.read_float(),
    )


def _header(session: PrintSession, reader: DirectiveReader) -> None:
    session.set_header(template=reader.read_string(), extra_lines=reader.read_integer())


def _number(session: PrintSession, reader: DirectiveReader) -> None:
    session.set_number_width(reader.read_integer())


def _linespace(session: PrintSession, reader: DirectiveReader) -> None:
    session.set_linespace(reader.read_float())


def _font(session: PrintSession, reader: DirectiveReader) -> None:
    session.set_font(name=reader.read_string(), size=reader.read_float())


def _highlight(session: PrintSession, reader: DirectiveReader) -> None:
    session.set_highlight(
        HighlightStyle(
            name=reader.read_string(),
            fg=reader.read_color(),
            bg=reader.read_color(),
            sp=reader.read_color(),
            bold=reader.read_flag(),
            italic=reader.read_flag(),
            underline=reader.read_flag(),
            undercurl=reader.read_flag(),
        )
    )


def _text(session: PrintSession, reader: DirectiveReader) -> None:
    session.text(reader.read_string())


def _line(session: PrintSession, reader: DirectiveReader) -> None:
    session.line(reader.read_optional_string())


def _start(session: PrintSession, reader: DirectiveReader) -> None:
    session.start()


def _end(session: PrintSession, reader: DirectiveReader) -> None:
    session.end()


DIRECTIVES: Dict[str, Handler] = {
    "PAPER": _paper,
    "MARGIN": _margin,
    "HEADER": _header,
    "NUMBER": _number,
    "LINESPACE": _linespace,
    "FONT": _font,
    "HIGHLIGHT": _highlight,
    "TEXT": _text,
    "LINE": _line,
    "START": _start,
    "END": _end,
}


def dispatch(session: PrintSession, reader: DirectiveReader) -> None:
    """Read one directive and apply it to the session.

    Raises:
        UnknownDirective: The keyword is not in :data:`DIRECTIVES`.
    """

    reader.skip_space()
    offset = reader.pos
    keyword = reader.read_keyword()
    handler = DIRECTIVES.get(keyword)
    if handler is None:
        raise UnknownDirective(f"unknown command: {keyword}", offset=offset)
    handler(session, reader)


def print_stream(
    text: str,
    *,
    output_path: Path,
    backend: str = "glyph",
    options: PageOptions | None = None,
) -> PrintSummary:
    """Render a whole directive stream into one document.

    Args:
        text: Directive stream.
        output_path: Target ``.pdf`` or ``.ps`` path.
        backend: ``glyph`` or ``layout``.
        options: Optional starting options; defaults apply otherwise.
    Returns:
        PrintSummary for the written document.
    Raises:
        PrintError: Any fatal stream, font, or output failure. The document
            is not written in that case.

    Example:
        >>> print_stream(
        ...     'FONT "Mono" 10 START LINE "hello" END',
        ...     output_path=Path("out.pdf"),
        ... )  # doctest: +SKIP
    """

    reader = DirectiveReader(text)
    session = PrintSession(output_path=output_path, backend=backend, options=options)
    try:
        while not reader.at_end():
            dispatch(session, reader)
        return session.close()
    except PrintError:
        session.abort()
        raise


def print_file(
    input_path: Path, *, output_path: Path, backend: str = "glyph"
) -> PrintSummary:
    """Render the directive stream stored in ``input_path``."""

    return print_stream(read_stream(input_path), output_path=output_path, backend=backend)
