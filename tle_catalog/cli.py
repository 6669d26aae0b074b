"""
TLE Catalog command line.

Usage:
    tle-catalog update
    tle-catalog show 25544 99999
    tle-catalog parse stations.txt
    tle-catalog --offline --cache ./output/cache.json update
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import requests
from pydantic import ValidationError

from config import FALLBACK_TLE_TEXT, config
from logging_config import configure_logging, get_logger
from tle_catalog.cache import TLECache, default_fetcher, load_tle_cache
from tle_catalog.exceptions import CatalogEntryNotFound
from tle_catalog.tle_parser import parse_tle_batch

logger = get_logger(__name__)


def _fetcher(args: argparse.Namespace):
    if args.offline:
        return lambda: FALLBACK_TLE_TEXT
    return default_fetcher(args.query)


def _print_failures(failures) -> None:
    for failure in failures:
        print(f"record {failure.index}: {failure.error}", file=sys.stderr)


def cmd_update(args: argparse.Namespace) -> int:
    cache_path = Path(args.cache)
    cache = TLECache.from_file(cache_path) if cache_path.exists() else TLECache()

    failures = cache.update(_fetcher(args), strict=args.strict).failures
    cache.to_file(cache_path)

    print(f"{len(cache)} TLEs cached in {cache_path} ({len(failures)} rejected)")
    _print_failures(failures)
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    cache = load_tle_cache(Path(args.cache), fetcher=_fetcher(args), strict=args.strict)
    if cache.last_result is not None:
        _print_failures(cache.last_result.failures)
    status = 0
    for catalog_number in args.catalog_numbers:
        try:
            print(cache.get_tle(catalog_number))
            print()
        except CatalogEntryNotFound as e:
            logger.warning("lookup_failed", catalog_number=catalog_number)
            print(f"Error occurred whilst getting TLE from cache: {e}", file=sys.stderr)
            status = 1
    return status


def cmd_parse(args: argparse.Namespace) -> int:
    result = parse_tle_batch(Path(args.file).read_text(), strict=args.strict)
    json.dump([record.to_json_dict() for record in result.records], sys.stdout, indent=4)
    print()
    _print_failures(result.failures)
    return 0 if result.ok else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tle-catalog", description="Fetch, decode and cache NORAD TLE data"
    )
    parser.add_argument("--cache", default=config.CACHE_PATH, help="Cache snapshot path")
    parser.add_argument("--query", default=config.DEFAULT_QUERY, help="CelesTrak GP query")
    parser.add_argument(
        "--offline", action="store_true", help="Use the bundled sample instead of CelesTrak"
    )
    parser.add_argument(
        "--strict",
        dest="strict",
        action="store_true",
        help="Reject records with a bad line checksum",
    )
    parser.add_argument(
        "--no-strict",
        dest="strict",
        action="store_false",
        help="Accept records with a bad line checksum (overrides TLE_STRICT_CHECKSUM)",
    )
    parser.set_defaults(strict=config.STRICT_CHECKSUM)
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("update", help="Refresh the cache").set_defaults(func=cmd_update)

    show = commands.add_parser("show", help="Print cached TLEs")
    show.add_argument("catalog_numbers", nargs="+", type=int, metavar="CATNR")
    show.set_defaults(func=cmd_show)

    parse = commands.add_parser("parse", help="Decode a local TLE file to JSON")
    parse.add_argument("file")
    parse.set_defaults(func=cmd_parse)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    configure_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        json_output=config.LOG_JSON,
        stream=sys.stderr,
    )

    try:
        return args.func(args)
    except (requests.RequestException, OSError, ValidationError) as e:
        logger.error("command_failed", command=args.command, error=str(e))
        return 2


if __name__ == "__main__":
    sys.exit(main())
