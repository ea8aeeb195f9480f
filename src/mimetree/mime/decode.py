# mimetree/mime/decode.py
from __future__ import annotations

import base64
import binascii
import quopri
from typing import BinaryIO, Optional

from mimetree.errors import ContentDecodeError, UnderlyingIOError
from mimetree.mime.base64clean import Base64Cleaner
from mimetree.mime.charsets import CharsetRegistry


def read_all(reader: BinaryIO) -> bytes:
    try:
        return reader.read()
    except OSError as e:
        raise UnderlyingIOError(f"Failed to read MIME body: {e}") from e


def decode_transfer(reader: BinaryIO, cte: Optional[str]) -> bytes:
    """
    Undo the Content-Transfer-Encoding of a body.

    Unknown or missing encodings (7bit, 8bit, binary, ...) return the
    bytes unchanged.
    """
    cte = (cte or "").strip().lower()

    if cte == "quoted-printable":
        # quopri leaves 8-bit bytes alone, so non-compliant senders that
        # put raw latin-1/cp1252 bytes in QP bodies still decode
        return quopri.decodestring(read_all(reader))
    if cte == "base64":
        cleaned = read_all(Base64Cleaner(reader))
        try:
            return base64.b64decode(cleaned)
        except binascii.Error as e:
            raise ContentDecodeError(f"Invalid base64 content: {e}") from e
    return read_all(reader)


def decode_section(
    encoding: Optional[str],
    charset: Optional[str],
    reader: BinaryIO,
    *,
    charsets: CharsetRegistry,
) -> bytes:
    """
    Decode a leaf body: transfer encoding first, then charset to UTF-8.
    """
    data = decode_transfer(reader, encoding)
    if charset:
        data = charsets.to_utf8(charset, data)
    return data
