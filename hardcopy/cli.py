"""
Command-line entry point: render a directive stream to PDF or PostScript.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from .errors import PrintError
from .parser import read_stream
from .pdf.builder import print_stream
from .pdf.pdf_backends import BACKEND_NAMES


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    """Return CLI arguments."""

    parser = argparse.ArgumentParser(
        prog="hardcopy",
        description="Lay out a styled-text directive stream on pages.",
    )
    parser.add_argument(
        "input",
        help="Directive stream file, or '-' to read standard input.",
    )
    parser.add_argument(
        "output",
        type=Path,
        help="Output document; the extension (.pdf or .ps) selects the format.",
    )
    parser.add_argument(
        "--backend",
        choices=BACKEND_NAMES,
        default="glyph",
        help=(
            "Text backend: 'glyph' measures one character at a time, "
            "'layout' breaks whole runs into lines."
        ),
    )
    return parser.parse_args(argv)


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return read_stream(Path(source))


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return the process exit status.

    Example:
        >>> main(["stream.txt", "out.pdf"])  # doctest: +SKIP
        0
    """

    args = _parse_args(argv)
    try:
        text = _read_input(args.input)
        print_stream(text, output_path=args.output, backend=args.backend)
    except PrintError as exc:
        print(f"hardcopy: error: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"hardcopy: error: {exc}", file=sys.stderr)
        return 1
    return 0
