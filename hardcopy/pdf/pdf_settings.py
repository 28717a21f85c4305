"""Font resolution and registration for page output."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Dict

from reportlab.lib.fonts import tt2ps
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont

from ..errors import UnsupportedFontForm
from .pdf_constants import _debug

FONT_FILE_SUFFIXES = (".ttf", ".otf")
DEFAULT_FAMILY = "Courier"
FC_MATCH_TIMEOUT = 5

# Generic fontconfig-style family names mapped onto the standard PDF fonts.
_GENERIC_FAMILIES = {
    "mono": "Courier",
    "monospace": "Courier",
    "sans": "Helvetica",
    "sans-serif": "Helvetica",
    "serif": "Times-Roman",
}

# (family, bold, italic) -> registered font name, or None when nothing loads.
_system_fonts: Dict[tuple[str, bool, bool], str | None] = {}


def is_font_file(name: str) -> bool:
    """Return True when ``name`` refers to an outline font file.

    Example:
        >>> is_font_file("/usr/share/fonts/DejaVuSansMono.ttf")
        True
    """

    return name.lower().endswith(FONT_FILE_SUFFIXES)


def resolve_family(name: str, *, system_fonts: bool = True) -> str:
    """Return the family name to lay text out with for a logical font name.

    Standard and registered families are used as they are. Other names are
    looked up among the installed fonts when ``system_fonts`` is set. A name
    nothing matches falls back to :data:`DEFAULT_FAMILY`.

    Args:
        name: Font name from a ``FONT`` directive.
        system_fonts: Whether installed outline fonts may be embedded.
    Returns:
        Family usable with :func:`variant_font`.

    Example:
        >>> resolve_family("Mono")
        'Courier'
    """

    family = _GENERIC_FAMILIES.get(name.strip().lower(), name.strip())
    if _standard_font(family, bold=False, italic=False) is not None:
        return family
    if system_fonts and system_font(family, bold=False, italic=False) is not None:
        return family
    _debug(msg=f"no font matches {family!r}; using {DEFAULT_FAMILY}")
    return DEFAULT_FAMILY


def variant_font(
    family: str, *, bold: bool, italic: bool, system_fonts: bool = True
) -> str:
    """Return the concrete font name for a family, weight, and slant.

    Args:
        family: Family returned by :func:`resolve_family`.
        bold: Whether the bold weight is wanted.
        italic: Whether the italic slant is wanted.
        system_fonts: Whether installed outline fonts may be embedded.
    Returns:
        Registered font name accepted by ``pdfmetrics.stringWidth``.
    """

    font_name = _standard_font(family, bold=bold, italic=italic)
    if font_name is not None:
        return font_name
    if system_fonts:
        font_name = system_font(family, bold=bold, italic=italic)
        if font_name is not None:
            return font_name
    return tt2ps(DEFAULT_FAMILY, int(bold), int(italic))


def _standard_font(family: str, *, bold: bool, italic: bool) -> str | None:
    try:
        return tt2ps(family, int(bold), int(italic))
    except ValueError:
        pass
    if family in pdfmetrics.getRegisteredFontNames():
        return family
    return None


def system_font(family: str, *, bold: bool, italic: bool) -> str | None:
    """Return the registered name of the installed face for a family.

    Matches are registered once and remembered per family, weight, and
    slant for the life of the process.
    """

    key = (family.lower(), bold, italic)
    if key not in _system_fonts:
        _system_fonts[key] = _register_system_font(family, bold=bold, italic=italic)
    return _system_fonts[key]


def _register_system_font(family: str, *, bold: bool, italic: bool) -> str | None:
    match = match_system_font(family, bold=bold, italic=italic)
    if match is None:
        return None
    path, index = match
    try:
        return load_font_file(path, index=index)
    except UnsupportedFontForm as exc:
        _debug(msg=f"skipping match for {family!r}: {exc}")
        return None


def match_system_font(
    family: str, *, bold: bool, italic: bool
) -> tuple[Path, int] | None:
    """Ask fontconfig for the installed face closest to a family and style.

    Args:
        family: Family name, e.g. ``"DejaVu Sans Mono"``.
        bold: Whether the bold weight is wanted.
        italic: Whether the italic slant is wanted.
    Returns:
        ``(font_file, face_index)``, or None when fontconfig is missing or
        reports no existing file.

    Example:
        >>> match_system_font("DejaVu Sans Mono", bold=True, italic=False)  # doctest: +SKIP
        (PosixPath('/usr/share/fonts/truetype/dejavu/DejaVuSansMono-Bold.ttf'), 0)
    """

    pattern = family
    if bold:
        pattern += ":weight=bold"
    if italic:
        pattern += ":slant=italic"
    try:
        result = subprocess.run(
            ["fc-match", "--format=%{file}\\n%{index}", pattern],
            capture_output=True,
            text=True,
            timeout=FC_MATCH_TIMEOUT,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        _debug(msg=f"fc-match unavailable: {exc}")
        return None
    if result.returncode != 0:
        return None
    lines = result.stdout.strip().split("\n")
    font_file = Path(lines[0]) if lines[0] else None
    if font_file is None or not font_file.exists():
        return None
    index = int(lines[1]) if len(lines) > 1 and lines[1].isdigit() else 0
    _debug(msg=f"fc-match {pattern!r} -> {font_file} #{index}")
    return font_file, index


def load_font_file(path: Path, *, index: int = 0) -> str:
    """Register an outline font file and return its font name.

    Args:
        path: Resolved path of a ``.ttf``/``.otf``/``.ttc`` file.
        index: Face index inside a font collection.
    Returns:
        Name under which the font is registered.
    Raises:
        UnsupportedFontForm: The file is missing or not a TrueType outline.
    """

    font_name = f"hardcopy-{path.stem}" if index == 0 else f"hardcopy-{path.stem}-{index}"
    try:
        pdfmetrics.registerFont(TTFont(font_name, str(path), subfontIndex=index))
    except (OSError, TTFError) as exc:
        raise UnsupportedFontForm(f"cannot load font file {path}: {exc}") from exc
    _debug(msg=f"loaded font file {path} as {font_name}")
    return font_name
