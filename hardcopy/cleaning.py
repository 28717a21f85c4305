"""
Markup helpers for runs handed to the layout backend.
"""

from __future__ import annotations

from bs4 import BeautifulSoup


def flatten_markup(text: str) -> str:
    """Drop inline markup tags and decode entities, keeping the text.

    Example:
        >>> flatten_markup("<b>if</b> a &lt; b")
        'if a < b'
    """

    if "<" not in text and "&" not in text:
        return text
    return BeautifulSoup(text, "html.parser").get_text()
