"""Data structures passed between the pagination engine and backends."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Segment:
    """A piece of a run that is placed on a single line.

    Args:
        text: Characters drawn for this piece.
        width: Advance width in points.
        wraps: Whether the piece starts on a fresh line below the cursor.
    """

    text: str
    width: float
    wraps: bool = False
