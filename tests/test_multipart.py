from __future__ import annotations

import io

import pytest

from mimetree.errors import BoundaryError, HeaderParseError, TruncatedMultipartError
from mimetree.mime.multipart import iter_parts


def _split(data: bytes, boundary: str = "b"):
    return iter_parts(io.BytesIO(data), boundary)


def test_splits_parts_and_stops_at_close_delimiter():
    data = (
        b"preamble\r\n"
        b"--b\r\n"
        b"Content-Type: text/plain\r\n"
        b"\r\n"
        b"first\r\nline two\r\n"
        b"--b\r\n"
        b"Content-Type: text/html\r\n"
        b"\r\n"
        b"<p>second</p>\r\n"
        b"--b--\r\n"
        b"epilogue\r\n"
        b"--b\r\n"
    )
    parts = list(_split(data))

    assert [p.header.get("Content-Type") for p in parts] == ["text/plain", "text/html"]
    assert parts[0].body == b"first\r\nline two"
    assert parts[1].body == b"<p>second</p>"
    assert parts[0].open().read() == b"first\r\nline two"


def test_delimiter_with_transport_padding():
    data = b"--b  \r\nA: 1\r\n\r\nx\r\n--b-- \t\r\n"
    parts = list(_split(data))
    assert len(parts) == 1
    assert parts[0].body == b"x"


def test_lookalike_lines_are_body_content():
    data = b"--b\r\nA: 1\r\n\r\n--bx\r\n -- b\r\n--b--"
    parts = list(_split(data))
    assert parts[0].body == b"--bx\r\n -- b"


def test_empty_body_directly_followed_by_delimiter():
    data = b"--b\r\nA: 1\r\n\r\n--b\r\nA: 2\r\n\r\n\r\n--b--\r\n"
    parts = list(_split(data))
    assert [p.body for p in parts] == [b"", b""]


def test_boundary_with_regex_characters():
    data = b"--a.b+c?\r\nA: 1\r\n\r\nx\r\n--a.b+c?--\r\n"
    parts = list(_split(data, "a.b+c?"))
    assert parts[0].body == b"x"


def test_close_delimiter_only_yields_nothing():
    assert list(_split(b"--b--\r\n")) == []


def test_blank_body_yields_nothing():
    assert list(_split(b"\r\n  \r\n")) == []


def test_body_without_delimiter():
    with pytest.raises(BoundaryError):
        list(_split(b"just some text\r\n"))


def test_missing_close_delimiter_raises_after_last_part():
    parts = _split(b"--b\r\nA: 1\r\n\r\nunterminated")
    first = next(parts)
    assert first.body == b"unterminated"
    with pytest.raises(TruncatedMultipartError):
        next(parts)


def test_dangling_delimiter_yields_empty_part():
    parts = _split(b"--b\r\nA: 1\r\n\r\nx\r\n--b")
    assert next(parts).body == b"x"
    trailing = next(parts)
    assert len(trailing.header) == 0
    assert trailing.body == b""
    with pytest.raises(TruncatedMultipartError):
        next(parts)


def test_malformed_part_header():
    with pytest.raises(HeaderParseError):
        list(_split(b"--b\r\nnot a header\r\n\r\nx\r\n--b--"))
