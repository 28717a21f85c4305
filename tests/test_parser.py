from __future__ import annotations

import pytest

from hardcopy.errors import MalformedDirectiveStream
from hardcopy.models import Color
from hardcopy.parser import DirectiveReader, read_stream


def test_reads_arguments_in_order():
    reader = DirectiveReader('  PAPER 595.5 842\n\tMARGIN -1 .5 1e1 +2 ')
    assert reader.read_keyword() == "PAPER"
    assert reader.read_float() == 595.5
    assert reader.read_float() == 842.0
    assert reader.read_keyword() == "MARGIN"
    assert [reader.read_float() for _ in range(4)] == [-1.0, 0.5, 10.0, 2.0]
    assert reader.at_end()


def test_string_escapes_next_character():
    reader = DirectiveReader(r'"say \"hi\" \\ \n"')
    assert reader.read_string() == 'say "hi" \\ n'


def test_string_keeps_inner_whitespace_and_unicode():
    reader = DirectiveReader('"  héllo\twörld "')
    assert reader.read_string() == "  héllo\twörld "


def test_unterminated_string_is_malformed():
    reader = DirectiveReader('"never closed')
    with pytest.raises(MalformedDirectiveStream) as excinfo:
        reader.read_string()
    assert "unexpected EOF" in str(excinfo.value)
    assert excinfo.value.kind == "MalformedDirectiveStream"


def test_string_must_start_with_quote():
    reader = DirectiveReader("bare")
    with pytest.raises(MalformedDirectiveStream):
        reader.read_string()


def test_colors_are_normalized():
    reader = DirectiveReader("#FF8000 #ffffff")
    assert reader.read_color() == Color(1.0, 128 / 255.0, 0.0)
    assert reader.read_color().is_white


@pytest.mark.parametrize("text", ["#12345", "red", "123456"])
def test_bad_color_is_malformed(text):
    with pytest.raises(MalformedDirectiveStream):
        DirectiveReader(text).read_color()


def test_bad_number_reports_offset():
    reader = DirectiveReader("NUMBER x")
    reader.read_keyword()
    with pytest.raises(MalformedDirectiveStream) as excinfo:
        reader.read_integer()
    assert excinfo.value.offset == 7


def test_missing_argument_at_end_of_stream():
    reader = DirectiveReader("PAPER 100")
    reader.read_keyword()
    reader.read_float()
    with pytest.raises(MalformedDirectiveStream, match="unexpected EOF"):
        reader.read_float()


def test_optional_string_only_reads_quoted_text():
    reader = DirectiveReader('LINE LINE "abc" END')
    assert reader.read_keyword() == "LINE"
    assert reader.read_optional_string() is None
    assert reader.read_keyword() == "LINE"
    assert reader.read_optional_string() == "abc"
    assert reader.read_keyword() == "END"
    assert reader.read_optional_string() is None


def test_flags_are_nonzero_integers():
    reader = DirectiveReader("0 1 2")
    assert [reader.read_flag() for _ in range(3)] == [False, True, True]


def test_read_stream_rejects_invalid_utf8(tmp_path):
    path = tmp_path / "stream.txt"
    path.write_bytes(b'TEXT "\xff"')
    with pytest.raises(MalformedDirectiveStream, match="invalid utf8"):
        read_stream(path)
