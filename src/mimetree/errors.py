from __future__ import annotations

from typing import Optional


class MIMEError(Exception):
    """Base class for every error raised while parsing a MIME document."""


class HeaderParseError(MIMEError):
    pass


class MediaTypeParseError(MIMEError):
    pass


class UnderlyingIOError(MIMEError):
    pass


class ContentDecodeError(MIMEError):
    pass


class MissingContentTypeError(MIMEError):
    def __init__(self, boundary: str) -> None:
        self.boundary = boundary
        super().__init__(f"Missing Content-Type at boundary {boundary!r}")


class EmptyHeaderError(MIMEError):
    def __init__(self, boundary: str) -> None:
        self.boundary = boundary
        super().__init__(f"Empty header at boundary {boundary!r}")


class BoundaryError(MIMEError):
    def __init__(self, boundary: str, reason: str) -> None:
        self.boundary = boundary
        self.reason = reason
        super().__init__(f"Error at boundary {boundary!r}: {reason}")


class TruncatedMultipartError(BoundaryError):
    """Input ended before the closing delimiter of a multipart body."""

    def __init__(self, boundary: str) -> None:
        super().__init__(boundary, "unexpected end of input")


class UnsupportedCharsetError(MIMEError):
    def __init__(self, charset: str) -> None:
        self.charset = charset
        super().__init__(f"Unknown charset: {charset!r}")


class NestingDepthError(MIMEError):
    def __init__(self, depth: int, max_depth: int, boundary: Optional[str] = None) -> None:
        self.depth = depth
        self.max_depth = max_depth
        self.boundary = boundary
        super().__init__(
            f"Multipart nesting depth {depth} exceeds limit {max_depth}"
            + (f" at boundary {boundary!r}" if boundary else "")
        )
