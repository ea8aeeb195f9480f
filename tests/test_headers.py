from __future__ import annotations

import io

import pytest

from mimetree.errors import HeaderParseError
from mimetree.mime.headers import parse_header, read_header_block, split_header_block
from mimetree.models import Header

# ---------------------------------------------------------------------------
# Header multi-map
# ---------------------------------------------------------------------------


def test_header_case_insensitive_lookup():
    h = Header([("Content-Type", "text/plain"), ("X-Tag", "a"), ("x-tag", "b")])

    assert h.get("content-type") == "text/plain"
    assert h.get_all("X-TAG") == ["a", "b"]
    assert "CONTENT-TYPE" in h
    assert "Missing" not in h
    assert h.get("Missing") == ""
    assert h.get("Missing", "default") == "default"
    assert h.get_all("Missing") == []
    assert len(h) == 3


def test_header_keeps_order_and_casing():
    h = Header([("Received", "1"), ("Subject", "s"), ("RECEIVED", "2")])

    assert h.items() == [("Received", "1"), ("Subject", "s"), ("RECEIVED", "2")]
    assert h.keys() == ["Received", "Subject"]
    assert list(h) == ["Received", "Subject"]
    assert h.to_dict() == {"Received": ["1", "2"], "Subject": ["s"]}


def test_header_extended_returns_new_header():
    h = Header([("A", "1")])
    bigger = h.extended([("B", "2"), ("a", "3")])

    assert h.items() == [("A", "1")]
    assert bigger.items() == [("A", "1"), ("B", "2"), ("a", "3")]
    assert bigger.get_all("A") == ["1", "3"]


def test_header_is_read_only():
    h = Header([("A", "1")])
    assert not hasattr(h, "add")
    assert not hasattr(h, "set")

    h.items().append(("B", "2"))
    assert len(h) == 1


def test_header_equality():
    assert Header([("A", "1")]) == Header([("A", "1")])
    assert Header([("A", "1")]) != Header([("a", "1")])
    assert hash(Header([("A", "1")])) == hash(Header([("A", "1")]))


# ---------------------------------------------------------------------------
# Header block reading
# ---------------------------------------------------------------------------


def test_read_header_block_stops_at_blank_line():
    reader = io.BytesIO(b"A: 1\r\nB: 2\r\n\r\nbody\r\n")
    assert read_header_block(reader) == b"A: 1\r\nB: 2\r\n"
    assert reader.read() == b"body\r\n"


def test_read_header_block_at_eof():
    reader = io.BytesIO(b"A: 1")
    assert read_header_block(reader) == b"A: 1"
    assert reader.read() == b""


def test_split_header_block():
    data = b"xxA: 1\nB: 2\n\nbody"
    raw, body_start = split_header_block(data, 2)
    assert raw == b"A: 1\nB: 2\n"
    assert data[body_start:] == b"body"


def test_split_header_block_empty_and_unterminated():
    assert split_header_block(b"\r\nbody", 0) == (b"", 2)
    assert split_header_block(b"A: 1", 0) == (b"A: 1", 4)
    assert split_header_block(b"", 0) == (b"", 0)


# ---------------------------------------------------------------------------
# Field parsing
# ---------------------------------------------------------------------------


def test_parse_header_unfolds_continuations():
    h = parse_header(b"Subject: a\r\n  long\r\n\tsubject\r\nX-Empty:\r\n")
    assert h.get("Subject") == "a long subject"
    assert h.get("X-Empty") == ""
    assert "X-Empty" in h


def test_parse_header_empty():
    assert len(parse_header(b"")) == 0
    assert len(parse_header(b"\r\n")) == 0


def test_parse_header_non_ascii_value():
    h = parse_header("Subject: Grüße\r\n".encode("utf-8"))
    assert h.get("Subject") == "Grüße"


def test_parse_header_raw_latin1_bytes():
    h = parse_header(b'Content-Disposition: attachment; filename="caf\xe9.txt"\r\n')
    assert h.get("Content-Disposition") == 'attachment; filename="café.txt"'


@pytest.mark.parametrize(
    "raw",
    [
        b"not a header line\r\n",
        b"A: 1\r\nbroken line\r\nB: 2\r\n",
        b" leading continuation\r\nA: 1\r\n",
    ],
)
def test_parse_header_rejects_malformed_blocks(raw):
    with pytest.raises(HeaderParseError):
        parse_header(raw)
