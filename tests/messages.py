# tests/messages.py
"""Builders for raw MIME test messages."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence, Tuple

CRLF = b"\r\n"


def leaf(
    body: bytes,
    *,
    content_type: str = "text/plain",
    headers: Sequence[Tuple[str, str]] = (),
) -> bytes:
    lines = [f"Content-Type: {content_type}".encode()]
    lines.extend(f"{k}: {v}".encode() for k, v in headers)
    return CRLF.join(lines) + CRLF + CRLF + body


def multipart(
    parts: Iterable[bytes],
    *,
    boundary: str = "outer",
    subtype: str = "mixed",
    headers: Sequence[Tuple[str, str]] = (),
    close: bool = True,
    preamble: Optional[bytes] = None,
) -> bytes:
    """
    A multipart entity (header + body). Each item of `parts` is a raw
    part (header + blank line + body).
    """
    lines = [f'Content-Type: multipart/{subtype}; boundary="{boundary}"'.encode()]
    lines.extend(f"{k}: {v}".encode() for k, v in headers)
    head = CRLF.join(lines) + CRLF + CRLF

    body = preamble + CRLF if preamble else b""
    for p in parts:
        body += b"--" + boundary.encode() + CRLF + p + CRLF
    if close:
        body += b"--" + boundary.encode() + b"--" + CRLF
    return head + body
