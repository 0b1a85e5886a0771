import pytest

from nbuild.scanner import ParseError, Scanner, read_file_with_nul


def test_requires_nul_terminator():
    with pytest.raises(ValueError):
        Scanner(b"abc")


def test_read_advances_and_counts_lines():
    s = Scanner(b"a\nb\0")
    assert s.read() == "a"
    assert s.line == 1
    assert s.read() == "\n"
    assert s.line == 2
    assert s.peek() == "b"
    assert s.ofs == 2


def test_back_restores_line():
    s = Scanner(b"a\nb\0")
    s.next()
    s.next()
    assert s.line == 2
    s.back()
    assert s.line == 1
    assert s.peek() == "\n"


def test_back_at_start_raises():
    s = Scanner(b"\0")
    with pytest.raises(IndexError):
        s.back()


def test_next_past_end_raises():
    s = Scanner(b"\0")
    s.next()
    with pytest.raises(IndexError):
        s.next()


def test_skip_and_skip_spaces():
    s = Scanner(b"   x\0")
    assert not s.skip("x")
    s.skip_spaces()
    assert s.skip("x")
    assert s.peek() == "\0"


def test_peek_newline():
    assert Scanner(b"\n\0").peek_newline()
    assert Scanner(b"\r\n\0").peek_newline()
    assert not Scanner(b"\rx\0").peek_newline()
    assert not Scanner(b"\0").peek_newline()


def test_slice():
    s = Scanner("build ━x\0".encode())
    text = "build ━x".encode()
    assert s.slice(0, 5) == "build"
    assert s.slice(6, len(text)) == "━x"


def test_expect_success_and_failure():
    s = Scanner(b"ab\0")
    s.expect("a")
    assert s.ofs == 1
    with pytest.raises(ParseError) as info:
        s.expect("x")
    assert info.value.ofs == 1
    assert s.ofs == 1
    assert "'x'" in info.value.msg and "'b'" in info.value.msg


def test_parse_error_records_offset():
    s = Scanner(b"abc\0")
    s.next()
    s.next()
    err = s.parse_error("bad")
    assert err.ofs == 2
    assert str(err) == "bad"


def test_format_parse_error_short_line():
    s = Scanner(b"build foo: bar\nxyz\0")
    err = ParseError("oops", 15)
    text = s.format_parse_error("build.ninja", err)
    prefix = "build.ninja:2: "
    assert text == "parse error: oops\n" + prefix + "xyz\n" + " " * len(prefix) + "^\n"


def test_format_parse_error_caret_points_at_offset():
    line = "".join(chr(ord("a") + i % 26) for i in range(100))
    s = Scanner(line.encode() + b"\0")
    err = ParseError("bad", 50)
    lines = s.format_parse_error("f", err).split("\n")
    assert lines[0] == "parse error: bad"
    assert "..." in lines[1]
    assert lines[1].endswith("...")
    caret = lines[2].index("^")
    assert lines[1][caret] == line[50]


def test_format_parse_error_invalid_offset():
    s = Scanner(b"ab\0")
    with pytest.raises(ValueError):
        s.format_parse_error("f", ParseError("x", 100))


def test_read_file_with_nul(tmp_path):
    path = tmp_path / "build.ninja"
    path.write_bytes(b"rule cc\n")
    data = read_file_with_nul(path)
    assert data == b"rule cc\n\0"
    s = Scanner(data)
    assert s.slice(0, 4) == "rule"


def test_read_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_file_with_nul(tmp_path / "missing")