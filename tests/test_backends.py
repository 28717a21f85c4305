from __future__ import annotations

import subprocess
from pathlib import Path

import pytest
import reportlab

from hardcopy.errors import UnsupportedFontForm
from hardcopy.models import DEFAULT_STYLE, HighlightStyle
from hardcopy.pdf import pdf_backends, pdf_settings
from hardcopy.pdf.pdf_backends import GlyphBackend, LayoutBackend, make_backend

from conftest import RecordingSurface

VERA = Path(reportlab.__file__).parent / "fonts" / "Vera.ttf"


def _selected(backend, name="Mono", size=10.0, surface=None):
    backend.select_font(name=name, size=size, surface=surface or RecordingSurface())
    return backend


def _wraps(segments):
    return [segment.wraps for segment in segments]


def test_glyph_yields_one_segment_per_character():
    backend = _selected(GlyphBackend())
    segments = list(
        backend.segments(
            "aé€", DEFAULT_STYLE, available=100, full_width=100, at_line_start=True
        )
    )
    assert [segment.text for segment in segments] == ["a", "é", "€"]
    assert all(segment.width == pytest.approx(6.0) for segment in segments)
    assert _wraps(segments) == [False, False, False]


def test_glyph_wraps_the_first_character_that_overflows():
    backend = _selected(GlyphBackend())
    segments = list(
        backend.segments(
            "abcdef", DEFAULT_STYLE, available=10, full_width=30, at_line_start=False
        )
    )
    assert _wraps(segments) == [False, True, False, False, False, False]


def test_glyph_never_wraps_at_line_start():
    backend = _selected(GlyphBackend())
    segments = list(
        backend.segments("a", DEFAULT_STYLE, available=3, full_width=3, at_line_start=True)
    )
    assert _wraps(segments) == [False]


def test_layout_breaks_runs_at_character_granularity():
    backend = _selected(LayoutBackend())
    segments = list(
        backend.segments(
            "abcdefghij", DEFAULT_STYLE, available=30, full_width=24, at_line_start=True
        )
    )
    assert [segment.text for segment in segments] == ["abcde", "fghi", "j"]
    assert [segment.width for segment in segments] == pytest.approx([30.0, 24.0, 6.0])
    assert _wraps(segments) == [False, True, True]


def test_layout_moves_whole_run_down_when_nothing_fits():
    backend = _selected(LayoutBackend())
    segments = list(
        backend.segments("abc", DEFAULT_STYLE, available=3, full_width=24, at_line_start=False)
    )
    assert [(segment.text, segment.wraps) for segment in segments] == [("abc", True)]


def test_layout_places_at_least_one_character_per_line():
    backend = _selected(LayoutBackend())
    segments = list(
        backend.segments("ab", DEFAULT_STYLE, available=3, full_width=3, at_line_start=True)
    )
    assert [segment.text for segment in segments] == ["a", "b"]


def test_layout_flattens_markup():
    backend = _selected(LayoutBackend())
    segments = list(
        backend.segments(
            "<b>if</b> a &lt; b", DEFAULT_STYLE, available=200, full_width=200, at_line_start=True
        )
    )
    assert [segment.text for segment in segments] == ["if a < b"]


def test_glyph_metrics_follow_font_extents_and_linespace():
    backend = _selected(GlyphBackend())
    metrics = backend.metrics(linespace=0.0)
    assert metrics.height == pytest.approx(7.86)
    assert metrics.descent == pytest.approx(1.57)
    assert metrics.char_width == pytest.approx(6.0)
    spaced = backend.metrics(linespace=2.0)
    assert spaced.height == pytest.approx(9.86)
    assert spaced.descent == pytest.approx(2.57)


def test_layout_metrics_use_leading_and_probe_width():
    backend = _selected(LayoutBackend())
    metrics = backend.metrics(linespace=0.0)
    assert metrics.height == pytest.approx(12.0)
    assert 0 < metrics.descent < metrics.height
    assert metrics.char_width == pytest.approx(6.0)
    assert backend.metrics(linespace=3.0).height == pytest.approx(15.0)


@pytest.mark.parametrize("backend_name", ["glyph", "layout"])
def test_style_selects_bold_and_italic_variants(backend_name):
    backend = _selected(make_backend(backend_name))
    style = HighlightStyle("Keyword", bold=True, italic=True)
    assert backend.font_for(style) == "Courier-BoldOblique"
    assert backend.font_for(DEFAULT_STYLE) == "Courier"


@pytest.mark.parametrize("name, expected", [("sans", "Helvetica"), ("Times-Roman", "Times-Roman")])
def test_family_names_resolve_to_standard_fonts(name, expected):
    backend = _selected(GlyphBackend(), name=name)
    assert backend.font_for(DEFAULT_STYLE) == expected


@pytest.fixture
def installed_fonts(monkeypatch):
    """Stand in for fontconfig; maps family names to font files."""

    fonts = {}
    queries = []

    def fake_match(family, *, bold, italic):
        queries.append((family, bold, italic))
        path = fonts.get(family)
        return (path, 0) if path is not None else None

    monkeypatch.setattr(pdf_settings, "_system_fonts", {})
    monkeypatch.setattr(pdf_settings, "match_system_font", fake_match)
    return fonts, queries


@pytest.mark.parametrize("backend_name", ["glyph", "layout"])
def test_installed_family_resolves_through_fontconfig(installed_fonts, backend_name):
    fonts, queries = installed_fonts
    fonts["DejaVu Sans Mono"] = VERA
    backend = _selected(make_backend(backend_name), name="DejaVu Sans Mono")
    assert backend.family == "DejaVu Sans Mono"
    assert backend.font_for(DEFAULT_STYLE) == "hardcopy-Vera"
    assert backend.measure("W", DEFAULT_STYLE) > 0
    backend.font_for(HighlightStyle("Keyword", bold=True))
    backend.font_for(DEFAULT_STYLE)
    assert queries == [
        ("DejaVu Sans Mono", False, False),
        ("DejaVu Sans Mono", True, False),
    ]


@pytest.mark.parametrize("backend_name", ["glyph", "layout"])
def test_unmatched_family_falls_back_to_courier(installed_fonts, backend_name):
    backend = _selected(make_backend(backend_name), name="No Such Family")
    assert backend.family == "Courier"
    assert backend.font_for(HighlightStyle("Keyword", italic=True)) == "Courier-Oblique"


def test_installed_family_is_not_embedded_without_font_files(installed_fonts):
    fonts, queries = installed_fonts
    fonts["DejaVu Sans Mono"] = VERA
    surface = RecordingSurface(embeds_font_files=False)
    backend = _selected(GlyphBackend(), name="DejaVu Sans Mono", surface=surface)
    assert backend.font_for(DEFAULT_STYLE) == "Courier"
    assert queries == []


def test_unloadable_match_falls_back_to_courier(installed_fonts, tmp_path):
    fonts, _ = installed_fonts
    broken = tmp_path / "Broken.ttf"
    broken.write_bytes(b"not a font")
    fonts["Broken Sans"] = broken
    backend = _selected(GlyphBackend(), name="Broken Sans")
    assert backend.font_for(DEFAULT_STYLE) == "Courier"


def test_fontconfig_pattern_and_output(monkeypatch):
    calls = []

    def fake_run(args, **kwargs):
        calls.append(args)
        return subprocess.CompletedProcess(args, 0, stdout=f"{VERA}\n2", stderr="")

    monkeypatch.setattr(pdf_settings.subprocess, "run", fake_run)
    match = pdf_settings.match_system_font("Courier New", bold=True, italic=True)
    assert match == (VERA, 2)
    assert calls[0][-1] == "Courier New:weight=bold:slant=italic"


def test_fontconfig_missing_file_or_binary(monkeypatch, tmp_path):
    def missing_file(args, **kwargs):
        return subprocess.CompletedProcess(
            args, 0, stdout=f"{tmp_path / 'gone.ttf'}\n0", stderr=""
        )

    monkeypatch.setattr(pdf_settings.subprocess, "run", missing_file)
    assert pdf_settings.match_system_font("Gone", bold=False, italic=False) is None

    def no_binary(args, **kwargs):
        raise FileNotFoundError(args[0])

    monkeypatch.setattr(pdf_settings.subprocess, "run", no_binary)
    assert pdf_settings.match_system_font("Gone", bold=False, italic=False) is None


def test_layout_rejects_font_files():
    with pytest.raises(UnsupportedFontForm, match="layout backend"):
        _selected(LayoutBackend(), name=str(VERA))


def test_glyph_rejects_font_files_without_embedding():
    surface = RecordingSurface(embeds_font_files=False)
    with pytest.raises(UnsupportedFontForm):
        _selected(GlyphBackend(), name=str(VERA), surface=surface)


def test_glyph_loads_font_files():
    backend = _selected(GlyphBackend(), name=str(VERA))
    assert backend.font_for(DEFAULT_STYLE) == "hardcopy-Vera"
    assert backend.measure("W", DEFAULT_STYLE) > 0


def test_glyph_missing_font_file_is_unsupported(tmp_path):
    with pytest.raises(UnsupportedFontForm, match="cannot load"):
        _selected(GlyphBackend(), name=str(tmp_path / "missing.ttf"))


def test_glyph_caches_font_files_by_path(monkeypatch, tmp_path):
    loads = []

    def fake_load(path):
        loads.append(path)
        return "Helvetica"

    monkeypatch.setattr(pdf_backends, "load_font_file", fake_load)
    font = tmp_path / "Mono.ttf"
    other = tmp_path / "Other.ttf"
    backend = GlyphBackend()
    _selected(backend, name=str(font))
    _selected(backend, name=str(other))
    _selected(backend, name=str(tmp_path / "sub" / ".." / "Mono.ttf"), size=12.0)
    assert loads == [font.resolve(), other.resolve()]
    assert backend.size == 12.0


def test_unknown_backend_name():
    with pytest.raises(ValueError, match="unknown backend"):
        make_backend("cairo")
