# mimetree/mime/multipart.py
from __future__ import annotations

import io
import re
from dataclasses import dataclass
from typing import BinaryIO, Iterator, Optional

from mimetree.errors import BoundaryError, TruncatedMultipartError
from mimetree.mime.decode import read_all
from mimetree.mime.headers import parse_header, split_header_block
from mimetree.models import Header


@dataclass(frozen=True)
class RawPart:
    """One undecoded body part: its header and the bytes between delimiters."""
    header: Header
    body: bytes

    def open(self) -> BinaryIO:
        return io.BytesIO(self.body)


class _Delimiter:
    """
    Finds `--boundary` / `--boundary--` lines.

    A delimiter must start a line and may be followed by transport
    padding (spaces/tabs). The line break in front of it belongs to the
    delimiter, not to the preceding body.
    """

    def __init__(self, boundary: str) -> None:
        b = re.escape(boundary.encode("utf-8"))
        tail = rb"(?P<close>--)?[ \t]*(?:\r?\n|\Z)"
        self._at_line_start = re.compile(rb"--" + b + tail)
        self._after_newline = re.compile(rb"\r?\n--" + b + tail)

    def find(self, data: bytes, pos: int) -> Optional[re.Match]:
        # `pos` is always the start of a line
        m = self._at_line_start.match(data, pos)
        if m:
            return m
        return self._after_newline.search(data, pos)


def iter_parts(reader: BinaryIO, boundary: str) -> Iterator[RawPart]:
    """
    Split a multipart body into its raw parts.

    Stops cleanly at the close delimiter. A part that runs to the end of
    input without a following delimiter is still yielded; the next pull
    then raises TruncatedMultipartError.
    """
    data = read_all(reader)
    delim = _Delimiter(boundary)

    m = delim.find(data, 0)
    if m is None:
        if data.strip():
            raise BoundaryError(boundary, "no boundary delimiter found")
        return

    while not m.group("close"):
        raw_header, body_start = split_header_block(data, m.end())
        header = parse_header(raw_header)

        nxt = delim.find(data, body_start)
        if nxt is None:
            yield RawPart(header=header, body=data[body_start:])
            raise TruncatedMultipartError(boundary)

        yield RawPart(header=header, body=data[body_start:nxt.start()])
        m = nxt
