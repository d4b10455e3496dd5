#!/usr/bin/env python3
"""
Large Object Store Inspection Tool

Shows how a file's contents would be paged into a size-limited cache.

Usage:
    large-object-store inspect data.bin --key report
    large-object-store inspect data.bin --key report --compress
    large-object-store inspect data.bin --key report --max-object-size 4096
    large-object-store inspect data.bin --key report --roundtrip --debug

Environment Variables:
    LARGE_OBJECT_STORE_MAX_OBJECT_SIZE   - Backend entry size limit
    LARGE_OBJECT_STORE_ITEM_HEADER_SIZE  - Per-entry header overhead
    LARGE_OBJECT_STORE_MAX_PAGES         - Largest page count per value
    LARGE_OBJECT_STORE_LOG_LEVEL         - Logging level
"""

import argparse
import logging
import sys
from typing import List, Optional

from .cache.store import KVStore
from .config.settings import settings
from .paging.errors import KeyTooLongError, LargeObjectStoreError
from .paging.splitter import key_length, page_key, page_keys, slice_size
from .paging.wrapper import LargeObjectStore


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="large-object-store",
        description="Large Object Store: inspect how values are paged",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Report the page layout of a file's contents",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    inspect_parser.add_argument("path", help="File whose bytes are the value")
    inspect_parser.add_argument("--key", type=str, required=True, help="Cache key")
    inspect_parser.add_argument(
        "--compress",
        action="store_true",
        help="Compress the value before paging",
    )
    inspect_parser.add_argument(
        "--max-object-size",
        type=int,
        default=settings.MAX_OBJECT_SIZE,
        help="Largest entry the backend accepts",
    )
    inspect_parser.add_argument(
        "--item-header-size",
        type=int,
        default=settings.ITEM_HEADER_SIZE,
        help="Per-entry header overhead",
    )
    inspect_parser.add_argument(
        "--roundtrip",
        action="store_true",
        help="Write and read the value through an in-memory store",
    )
    inspect_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def setup_logging(debug: bool = False) -> None:
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )


def inspect_file(args: argparse.Namespace) -> int:
    """Print the page layout of args.path and optionally round-trip it."""
    logger = logging.getLogger(__name__)

    try:
        with open(args.path, "rb") as handle:
            value = handle.read()
    except OSError as e:
        print(f"error: cannot read {args.path}: {e}", file=sys.stderr)
        return 1

    cache = LargeObjectStore(
        KVStore(max_item_size=args.max_object_size),
        max_object_size=args.max_object_size,
        item_header_size=args.item_header_size,
    )

    try:
        size = slice_size(key_length(args.key), args.max_object_size, args.item_header_size)
        pages = cache.encode_pages(args.key, value, compress=args.compress)
    except KeyTooLongError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    payload_bytes = sum(len(page) for page in pages)
    mode = "raw" if len(pages) == 1 else "paged"
    keys = [page_key(args.key, 0)]
    if len(pages) > 1:
        keys += page_keys(args.key, len(pages))

    print(f"value bytes:   {len(value)}")
    print(f"payload bytes: {payload_bytes}")
    print(f"slice size:    {size}")
    print(f"page count:    {len(pages)}")
    print(f"mode:          {mode}")
    print(f"keys:          {' '.join(keys)}")

    if not args.roundtrip:
        return 0

    logger.debug(f"Round-tripping {args.key} through an in-memory store")
    try:
        stored = cache.write(args.key, value, compress=args.compress)
        matched = stored and cache.read(args.key) == value
    except LargeObjectStoreError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(f"roundtrip:     {'ok' if matched else 'FAILED'}")
    return 0 if matched else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the command line tool."""
    args = parse_args(argv)
    setup_logging(debug=args.debug or settings.DEBUG)

    if args.command == "inspect":
        return inspect_file(args)
    return 2


if __name__ == "__main__":
    sys.exit(main())
