from __future__ import annotations

import io
from typing import BinaryIO

_ALPHABET = frozenset(b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/=")
_NOT_ALPHABET = bytes(b for b in range(256) if b not in _ALPHABET)


class Base64Cleaner(io.RawIOBase):
    """
    Read-only filter that drops every byte outside the base64 alphabet.

    Mail agents routinely emit base64 bodies with line breaks and stray
    punctuation; removing them up front lets a strict decoder accept the
    remainder.
    """

    def __init__(self, raw: BinaryIO) -> None:
        super().__init__()
        self._raw = raw

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        size = len(b)
        if size == 0:
            return 0
        while True:
            chunk = self._raw.read(size)
            if not chunk:
                return 0
            cleaned = chunk.translate(None, _NOT_ALPHABET)
            if cleaned:
                n = len(cleaned)
                b[:n] = cleaned
                return n
