from mimetree.config import ParserConfig
from mimetree.errors import (
    BoundaryError,
    ContentDecodeError,
    EmptyHeaderError,
    HeaderParseError,
    MediaTypeParseError,
    MIMEError,
    MissingContentTypeError,
    NestingDepthError,
    TruncatedMultipartError,
    UnderlyingIOError,
    UnsupportedCharsetError,
)
from mimetree.mime import CharsetRegistry, parse_mime, parse_mime_bytes, parse_mime_file
from mimetree.models import Header, Part, PartTree

__all__ = [
    "parse_mime",
    "parse_mime_bytes",
    "parse_mime_file",
    "Part",
    "PartTree",
    "Header",
    "ParserConfig",
    "CharsetRegistry",
    "MIMEError",
    "HeaderParseError",
    "MediaTypeParseError",
    "MissingContentTypeError",
    "EmptyHeaderError",
    "BoundaryError",
    "TruncatedMultipartError",
    "UnsupportedCharsetError",
    "ContentDecodeError",
    "NestingDepthError",
    "UnderlyingIOError",
]
