from __future__ import annotations

from email.errors import HeaderParseError as EmailHeaderParseError
from email.header import decode_header, make_header
from typing import Optional


def decode_header_words(value: Optional[str]) -> str:
    """
    Decode RFC 2047 encoded-words (``=?UTF-8?B?...?=``) in a header value.

    Values that cannot be decoded are returned unchanged.
    """
    if not value:
        return ""
    try:
        return str(make_header(decode_header(value)))
    except (EmailHeaderParseError, LookupError, UnicodeDecodeError):
        return value
