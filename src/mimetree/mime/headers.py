# mimetree/mime/headers.py
from __future__ import annotations

import re
from email.parser import HeaderParser
from email.policy import compat32
from typing import BinaryIO, Tuple

from mimetree.errors import HeaderParseError, UnderlyingIOError
from mimetree.models import Header

_FOLD_RE = re.compile(r"\r?\n[ \t]+")


def _is_blank_line(line: bytes) -> bool:
    return line in (b"\n", b"\r\n")


def read_header_block(reader: BinaryIO) -> bytes:
    """
    Read raw header lines from `reader` up to the first blank line.

    The blank line itself is consumed; the reader is left at the first
    byte of the body.
    """
    lines = []
    while True:
        try:
            line = reader.readline()
        except OSError as e:
            raise UnderlyingIOError(f"Failed to read header block: {e}") from e
        if not line or _is_blank_line(line):
            break
        lines.append(line)
    return b"".join(lines)


def split_header_block(data: bytes, pos: int = 0) -> Tuple[bytes, int]:
    """
    In-memory variant of read_header_block.

    Returns (raw_header_bytes, body_start).
    """
    end = pos
    n = len(data)
    while end < n:
        nl = data.find(b"\n", end)
        if nl == -1:
            return data[pos:], n
        if _is_blank_line(data[end:nl + 1]):
            return data[pos:end], nl + 1
        end = nl + 1
    return data[pos:], n


def parse_header(raw: bytes) -> Header:
    """
    Parse an RFC 822 header block into a Header.

    Non-UTF-8 bytes are read as Latin-1.
    Folded values are unfolded with a single space. Any line the
    stdlib parser cannot take as a header field is an error.
    """
    if not raw.strip():
        return Header()

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        # raw 8-bit header bytes; latin-1 keeps one char per byte
        text = raw.decode("latin-1")
    msg = HeaderParser(policy=compat32).parsestr(text, headersonly=True)

    if msg.defects:
        kinds = ", ".join(type(d).__name__ for d in msg.defects)
        raise HeaderParseError(f"Malformed header block: {kinds}")
    leftover = msg.get_payload()
    if isinstance(leftover, str) and leftover.strip():
        first = leftover.strip().splitlines()[0]
        raise HeaderParseError(f"Malformed header line: {first[:80]!r}")

    return Header((name, _FOLD_RE.sub(" ", str(value)).strip()) for name, value in msg.items())
