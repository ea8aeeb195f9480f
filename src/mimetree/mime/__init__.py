from mimetree.mime.charsets import CharsetRegistry
from mimetree.mime.parser import parse_mime, parse_mime_bytes, parse_mime_file

__all__ = ["CharsetRegistry", "parse_mime", "parse_mime_bytes", "parse_mime_file"]
