# mimetree/mime/charsets.py
from __future__ import annotations

import codecs
from typing import Dict, Mapping, Optional

from mimetree.errors import UnsupportedCharsetError

# Labels seen in real mail that Python's codec registry does not know.
DEFAULT_ALIASES: Dict[str, str] = {
    "ks_c_5601-1987": "cp949",
    "x-sjis": "shift_jis",
    "x-euc-jp": "euc_jp",
    "x-gbk": "gbk",
    "x-mac-roman": "mac_roman",
    "ansi_x3.4-1968": "ascii",
}


class CharsetRegistry:
    """
    Read-only map from charset labels to Python text codecs.

    Lookups are case-insensitive. Binary codecs such as ``base64`` or
    ``zlib`` are not charsets and are reported as unknown.
    """

    def __init__(self, aliases: Optional[Mapping[str, str]] = None) -> None:
        merged = dict(DEFAULT_ALIASES)
        if aliases:
            merged.update(aliases)
        self._aliases = {k.strip().lower(): v for k, v in merged.items()}

    def lookup(self, name: str) -> Optional[str]:
        """Canonical codec name for `name`, or None if it is not a known charset."""
        label = (name or "").strip().strip('"').lower()
        if not label:
            return None
        label = self._aliases.get(label, label)
        try:
            # bytes.decode rejects non-text codecs with LookupError
            b"".decode(label)
        except LookupError:
            return None
        return codecs.lookup(label).name

    def to_utf8(self, name: str, data: bytes) -> bytes:
        """
        Convert `data` from charset `name` to UTF-8.

        Byte sequences invalid in the source charset become U+FFFD.
        """
        codec = self.lookup(name)
        if codec is None:
            raise UnsupportedCharsetError(name)
        return data.decode(codec, errors="replace").encode("utf-8")

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.lookup(name) is not None
