# mimetree/mime/mediatype.py
from __future__ import annotations

import re
from email.utils import decode_rfc2231
from typing import Dict, List, Optional, Tuple
from urllib.parse import unquote_to_bytes

from mimetree.errors import MediaTypeParseError

# RFC 2045 tspecials
_TSPECIALS = frozenset('()<>@,;:\\"/[]?=')

# name*, name*0, name*0*
_EXTENDED_RE = re.compile(r"^(?P<base>[^*]+)\*(?:(?P<section>\d+))?(?P<encoded>\*)?$")


def _is_token_char(c: str) -> bool:
    return 0x20 < ord(c) < 0x7F and c not in _TSPECIALS


def _consume_token(v: str) -> Tuple[str, str]:
    i = 0
    while i < len(v) and _is_token_char(v[i]):
        i += 1
    return v[:i], v[i:]


def _consume_value(v: str) -> Tuple[str, str]:
    """
    Returns (value, rest); value is "" and rest is v on failure.

    A value is a token or an RFC 822 quoted-string.
    """
    if not v:
        return "", v
    if v[0] != '"':
        return _consume_token(v)

    buf: List[str] = []
    i = 1
    while i < len(v):
        c = v[i]
        if c == '"':
            return "".join(buf), v[i + 1:]
        if c == "\\" and i + 1 < len(v):
            buf.append(v[i + 1])
            i += 2
            continue
        if c in ("\r", "\n"):
            return "", v
        buf.append(c)
        i += 1
    # unterminated quoted-string
    return "", v


def _consume_param(v: str) -> Tuple[str, str, str]:
    """
    Consume one `; name=value` pair.

    Returns (name, value, rest); name is "" and rest is v on failure.
    """
    rest = v.lstrip()
    if not rest.startswith(";"):
        return "", "", v
    rest = rest[1:].lstrip()

    name, rest = _consume_token(rest)
    if not name:
        return "", "", v
    rest = rest.lstrip()
    if not rest.startswith("="):
        return "", "", v
    rest = rest[1:].lstrip()

    value, rest2 = _consume_value(rest)
    if value == "" and rest2 == rest:
        return "", "", v
    return name.lower(), value, rest2


def _check_type(mediatype: str) -> None:
    tok, rest = _consume_token(mediatype)
    if not tok:
        raise MediaTypeParseError(f"No media type in {mediatype!r}")
    # a lone token such as "text" or "attachment" is accepted
    if not rest:
        return
    if not rest.startswith("/"):
        raise MediaTypeParseError(f"Expected slash after {tok!r}")
    sub, rest = _consume_token(rest[1:])
    if not sub:
        raise MediaTypeParseError(f"Expected token after slash in {mediatype!r}")
    if rest:
        raise MediaTypeParseError(f"Unexpected content after media subtype in {mediatype!r}")


def _decode_bytes(data: bytes, charset: Optional[str]) -> Optional[str]:
    try:
        return data.decode(charset or "us-ascii")
    except (LookupError, UnicodeDecodeError):
        return None


def _join_extended(base: str, pieces: Dict[str, str]) -> Optional[str]:
    """
    Assemble an RFC 2231 parameter from its `base*` or `base*N[*]` pieces.

    Returns None when the value cannot be decoded.
    """
    single = pieces.get(base + "*")
    if single is not None:
        charset, _lang, encoded = decode_rfc2231(single)
        return _decode_bytes(unquote_to_bytes(encoded), charset)

    buf = b""
    charset = None
    n = 0
    while True:
        raw = pieces.get(f"{base}*{n}")
        enc = pieces.get(f"{base}*{n}*")
        if raw is None and enc is None:
            break
        if enc is not None:
            if n == 0:
                charset, _lang, enc = decode_rfc2231(enc)
            buf += unquote_to_bytes(enc)
        else:
            buf += raw.encode("utf-8")
        n += 1

    if n == 0:
        return None
    return _decode_bytes(buf, charset)


def _parse(value: str) -> Tuple[str, Dict[str, str]]:
    if not value or not value.strip():
        raise MediaTypeParseError("No media type")

    base, _, _ = value.partition(";")
    mediatype = base.strip().lower()
    _check_type(mediatype)

    params: Dict[str, str] = {}
    extended: Dict[str, Dict[str, str]] = {}

    v = value[len(base):]
    while v:
        v = v.lstrip()
        if not v:
            break
        name, pvalue, rest = _consume_param(v)
        if not name:
            if v.strip() == ";":
                # trailing semicolon
                break
            raise MediaTypeParseError(f"Invalid media parameter in {value!r}")

        target = params
        m = _EXTENDED_RE.match(name)
        if m:
            target = extended.setdefault(m.group("base"), {})
        if name in target and target[name] != pvalue:
            raise MediaTypeParseError(f"Duplicate parameter {name!r} in {value!r}")
        target[name] = pvalue
        v = rest

    for base_name, pieces in extended.items():
        decoded = _join_extended(base_name, pieces)
        if decoded is not None:
            params[base_name] = decoded

    return mediatype, params


def parse_media_type(value: str) -> Tuple[str, Dict[str, str]]:
    """
    Parse a Content-Type value into (type/subtype, params).

    A bare type with no subtype is returned as is.

    Type and parameter names are lower-cased, parameter values kept as is.
    """
    return _parse(value)


def parse_disposition(value: str) -> Tuple[str, Dict[str, str]]:
    """Parse a Content-Disposition value into (disposition, params)."""
    return _parse(value)
