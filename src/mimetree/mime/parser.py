# mimetree/mime/parser.py
from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Dict, List, Optional, Union

import structlog

from mimetree.config import ParserConfig
from mimetree.errors import (
    BoundaryError,
    EmptyHeaderError,
    MediaTypeParseError,
    MIMEError,
    MissingContentTypeError,
    NestingDepthError,
    TruncatedMultipartError,
    UnderlyingIOError,
)
from mimetree.mime.charsets import CharsetRegistry
from mimetree.mime.decode import decode_section
from mimetree.mime.headers import parse_header, read_header_block
from mimetree.mime.mediatype import parse_disposition, parse_media_type
from mimetree.mime.multipart import iter_parts
from mimetree.mime.words import decode_header_words
from mimetree.models import Header, Part, PartTree

logger = structlog.get_logger()


@dataclass
class _Draft:
    """Mutable node used while the tree is being built."""
    header: Header
    content_type: str
    parent: Optional[int] = None
    depth: int = 0
    disposition: str = ""
    file_name: str = ""
    content: bytes = b""
    first_child: Optional[int] = None
    next_sibling: Optional[int] = None


def _absorb_type_params(header: Header) -> Header:
    """
    Return `header` with `; key=value` segments of Content-Type added as fields.

    Some splitters hand back Content-Type parameters as separate header
    entries; this puts e.g. `charset` where such callers look for it.
    Existing fields are never overwritten.
    """
    taken = {name.lower() for name in header.keys()}
    extra = []
    segments = header.get("Content-Type").split("; ")
    for seg in segments[1:]:
        name, sep, value = seg.partition("=")
        name = name.strip()
        if not sep or not name or name.lower() in taken:
            continue
        taken.add(name.lower())
        extra.append((name, value.strip().strip('"')))
    return header.extended(extra) if extra else header


class _TreeBuilder:
    def __init__(self, config: ParserConfig, charsets: CharsetRegistry) -> None:
        self.config = config
        self.charsets = charsets
        self.nodes: List[_Draft] = []

    def new_node(self, header: Header, content_type: str, parent: Optional[int] = None) -> int:
        depth = 0 if parent is None else self.nodes[parent].depth + 1
        self.nodes.append(_Draft(header=header, content_type=content_type, parent=parent, depth=depth))
        return len(self.nodes) - 1

    def resolve_metadata(self, idx: int, type_params: Dict[str, str]) -> None:
        node = self.nodes[idx]
        raw_disp = node.header.get("Content-Disposition")
        if raw_disp:
            try:
                disposition, dparams = parse_disposition(raw_disp)
            except MediaTypeParseError as e:
                # disposition is optional metadata
                logger.debug(
                    "mime_disposition_unparsable",
                    value=raw_disp,
                    error=str(e),
                )
            else:
                node.disposition = disposition
                node.file_name = decode_header_words(dparams.get("filename"))

        if not node.file_name and type_params.get("name"):
            node.file_name = decode_header_words(type_params["name"])

    def decode_leaf(self, idx: int, reader: BinaryIO, type_params: Dict[str, str]) -> None:
        node = self.nodes[idx]
        node.content = decode_section(
            node.header.get("Content-Transfer-Encoding"),
            # a literal `charset` field is only used when the type has no charset parameter
            type_params.get("charset") or node.header.get("charset"),
            reader,
            charsets=self.charsets,
        )

    def parse_parts(self, parent: int, reader: BinaryIO, boundary: str, depth: int) -> None:
        if depth > self.config.max_depth:
            raise NestingDepthError(depth, self.config.max_depth, boundary)

        prev_sibling: Optional[int] = None
        parts = iter_parts(reader, boundary)
        for raw in parts:
            if len(raw.header) == 0:
                # An empty header usually means the last part was not closed
                # with the trailing "--"; let it slide only if nothing follows.
                try:
                    next(parts)
                except (StopIteration, TruncatedMultipartError):
                    logger.info("mime_trailing_boundary_tolerated", boundary=boundary, depth=depth)
                    break
                except MIMEError as e:
                    raise EmptyHeaderError(boundary) from e
                raise EmptyHeaderError(boundary)

            header = _absorb_type_params(raw.header)

            ctype = header.get("Content-Type")
            if not ctype:
                raise MissingContentTypeError(boundary)
            mediatype, mparams = parse_media_type(ctype)

            idx = self.new_node(header, mediatype, parent)
            if prev_sibling is not None:
                self.nodes[prev_sibling].next_sibling = idx
            else:
                self.nodes[parent].first_child = idx
            prev_sibling = idx

            self.resolve_metadata(idx, mparams)

            nested = mparams.get("boundary")
            if nested:
                self.parse_parts(idx, raw.open(), nested, depth + 1)
            else:
                self.decode_leaf(idx, raw.open(), mparams)

            logger.debug(
                "mime_part_parsed",
                content_type=mediatype,
                boundary=boundary,
                depth=depth,
                size=len(self.nodes[idx].content),
            )

    def freeze(self) -> PartTree:
        return PartTree(
            [
                Part(
                    index=i,
                    header=n.header,
                    content_type=n.content_type,
                    disposition=n.disposition,
                    file_name=n.file_name,
                    content=n.content,
                    parent_index=n.parent,
                    first_child_index=n.first_child,
                    next_sibling_index=n.next_sibling,
                    depth=n.depth,
                )
                for i, n in enumerate(self.nodes)
            ]
        )


def parse_mime(
    reader: BinaryIO,
    *,
    config: Optional[ParserConfig] = None,
    charsets: Optional[CharsetRegistry] = None,
) -> Part:
    """
    Parse a MIME document into a tree of parts and return its root.

    `reader` must be positioned at the start of the header block. Any
    error aborts the parse; no partial tree is returned.
    """
    config = config or ParserConfig()
    charsets = charsets or CharsetRegistry()

    header = parse_header(read_header_block(reader))
    mediatype, params = parse_media_type(header.get("Content-Type"))

    builder = _TreeBuilder(config, charsets)
    root = builder.new_node(header, mediatype)
    builder.resolve_metadata(root, params)

    if mediatype.startswith("multipart/"):
        boundary = params.get("boundary")
        if not boundary:
            raise BoundaryError("", f"{mediatype} document has no boundary parameter")
        builder.parse_parts(root, reader, boundary, depth=1)
    else:
        builder.decode_leaf(root, reader, params)

    tree = builder.freeze()
    logger.debug("mime_parse_complete", content_type=mediatype, parts=len(tree))
    return tree.root


def parse_mime_bytes(data: bytes, **kwargs) -> Part:
    return parse_mime(io.BytesIO(data), **kwargs)


def parse_mime_file(path: Union[str, Path], **kwargs) -> Part:
    try:
        fp = open(path, "rb")
    except OSError as e:
        raise UnderlyingIOError(f"Cannot open {str(path)!r}: {e}") from e
    with fp:
        return parse_mime(fp, **kwargs)
