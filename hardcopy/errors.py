"""
Error kinds raised while reading directives and laying out pages.
"""

from __future__ import annotations


class PrintError(Exception):
    """Base class for every fatal print failure.

    Attributes:
        kind: Name of the failure kind, stable across messages.
        offset: Character offset in the directive stream, when known.
    """

    kind = "PrintError"

    def __init__(self, message: str, *, offset: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.offset = offset

    def __str__(self) -> str:
        if self.offset is None:
            return self.message
        return f"{self.message} (at offset {self.offset})"


class MalformedDirectiveStream(PrintError):
    kind = "MalformedDirectiveStream"


class UnknownDirective(PrintError):
    kind = "UnknownDirective"


class UnsupportedOutputFormat(PrintError):
    kind = "UnsupportedOutputFormat"


class UnsupportedFontForm(PrintError):
    kind = "UnsupportedFontForm"


class UnknownHeaderItem(PrintError):
    kind = "UnknownHeaderItem"


class SessionStateError(PrintError):
    """A directive arrived in a session state that cannot accept it."""

    kind = "SessionStateError"
