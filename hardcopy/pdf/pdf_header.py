"""Page header template expansion."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..errors import UnknownHeaderItem


@dataclass(frozen=True, slots=True)
class HeaderText:
    """Expanded header split into its left- and right-aligned parts."""

    left: str
    right: str


def format_header(template: str, *, page_number: int) -> HeaderText:
    """Expand a header template for one page.

    ``%%`` is a literal percent sign, ``%N`` the page number, and ``%=``
    moves output to the right-aligned part.

    Args:
        template: Header format from the ``HEADER`` directive.
        page_number: 1-based number of the page being opened.
    Returns:
        HeaderText with both accumulators.
    Raises:
        UnknownHeaderItem: Any other ``%`` sequence.

    Example:
        >>> format_header("left %N %= right %N", page_number=3)
        HeaderText(left='left 3 ', right=' right 3')
    """

    left: List[str] = []
    right: List[str] = []
    out = left
    chars = iter(template)
    for char in chars:
        if char != "%":
            out.append(char)
            continue
        item = next(chars, "")
        if item == "%":
            out.append("%")
        elif item == "N":
            out.append(str(page_number))
        elif item == "=":
            out = right
        else:
            raise UnknownHeaderItem(f"unknown header item: %{item}")
    return HeaderText(left="".join(left), right="".join(right))
