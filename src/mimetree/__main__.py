"""Command-line entry point: print the part tree of a MIME message."""

from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional, TextIO

import structlog
from pydantic import ValidationError

from mimetree.config import ParserConfig
from mimetree.errors import MIMEError
from mimetree.logging import setup_logging
from mimetree.mime import parse_mime, parse_mime_file
from mimetree.models import Part

logger = structlog.get_logger()


def _outline_line(part: Part) -> str:
    pad = "  " * part.depth
    fields = [part.content_type]
    if part.disposition:
        fields.append(part.disposition)
    if part.file_name:
        fields.append(repr(part.file_name))
    if not part.is_multipart or part.content:
        fields.append(f"{len(part.content)} bytes")
    return pad + " ".join(fields)


def print_outline(root: Part, out: TextIO) -> None:
    for part in root.walk():
        print(_outline_line(part), file=out)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mimetree",
        description="Display the MIME part tree of a message in RFC 822 format.",
    )
    parser.add_argument(
        "file", nargs="?", default=None,
        help="message file to read; reads standard input when absent",
    )
    parser.add_argument("--json", action="store_true", help="print the tree as JSON")
    parser.add_argument(
        "--include-content", action="store_true",
        help="with --json, include base64 part content",
    )
    parser.add_argument(
        "--max-depth", type=int, default=None,
        help="maximum multipart nesting depth (default: $MIMETREE_MAX_DEPTH or 32)",
    )
    parser.add_argument(
        "--log-level", default="WARNING", type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="log level (default: WARNING)",
    )
    parser.add_argument("--log-json", action="store_true", help="emit logs as JSON lines")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logging(json=args.log_json, level=args.log_level)

    try:
        overrides = {} if args.max_depth is None else {"max_depth": args.max_depth}
        config = ParserConfig(**overrides)
    except ValidationError as e:
        print(f"mimetree: invalid configuration: {e}", file=sys.stderr)
        return 2

    try:
        if args.file:
            root = parse_mime_file(args.file, config=config)
        else:
            root = parse_mime(sys.stdin.buffer, config=config)
    except MIMEError as e:
        logger.error("mime_parse_failed", error=str(e), error_type=type(e).__name__)
        print(f"mimetree: {e}", file=sys.stderr)
        return 1

    if args.json:
        json.dump(root.to_dict(include_content=args.include_content), sys.stdout, indent=2)
        sys.stdout.write("\n")
    else:
        print_outline(root, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
