from __future__ import annotations

import pytest

from hardcopy.errors import UnknownHeaderItem
from hardcopy.pdf.pdf_header import HeaderText, format_header


def test_left_and_right_parts():
    assert format_header("left %N %= right %N", page_number=3) == HeaderText(
        left="left 3 ", right=" right 3"
    )


def test_percent_literal_and_no_split():
    assert format_header("100%% page %N", page_number=12) == HeaderText(
        left="100% page 12", right=""
    )


def test_second_split_keeps_appending_right():
    header = format_header("a%=b%=c", page_number=1)
    assert header == HeaderText(left="a", right="bc")


@pytest.mark.parametrize("template", ["%x", "page %", "%n"])
def test_unknown_items_are_fatal(template):
    with pytest.raises(UnknownHeaderItem):
        format_header(template, page_number=1)
