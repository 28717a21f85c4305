"""Shared constants for page layout and debug output."""

from __future__ import annotations

import os
import sys

LINENR_MARGIN = 10.0
UNDERLINE_WIDTH = 0.5
UNDERCURL_STEP = 2.0
EPSILON = 1e-4
DEBUG_PAGINATION = os.getenv("HARDCOPY_DEBUG", "0") not in {
    "",
    "0",
    "false",
    "False",
}


def _debug(*, msg: str) -> None:
    """Print pagination debug output when enabled.

    Args:
        msg: Message to print.
    Returns:
        None.
    """

    if DEBUG_PAGINATION:
        print(msg, file=sys.stderr)
