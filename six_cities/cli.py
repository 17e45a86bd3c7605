"""
Six Cities command line interface.

  six-cities generate <count> <filepath> <url>
  six-cities import <filepath>
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import random
import sys
from importlib.metadata import PackageNotFoundError, version
from typing import List, Optional

from .clients import fetch_mock_dataset
from .config import get_settings
from .generator import generate_offers
from .transcoder import transcode_file
from .writer import write_rows

logger = logging.getLogger(__name__)


def read_version() -> str:
    name = get_settings().distribution_name
    try:
        return version(name)
    except PackageNotFoundError:
        logger.debug(f"Distribution {name} is not installed")
        return "unknown"


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid count: {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"count must be non-negative, got {number}")
    return number


def _positive_int(value: str) -> int:
    number = _non_negative_int(value)
    if number == 0:
        raise argparse.ArgumentTypeError("value must be positive")
    return number


async def handle_generate(count: int, filepath: str, url: str, seed: Optional[int] = None) -> int:
    try:
        dataset = await fetch_mock_dataset(url)
        logger.info(f"Generating {count} offers...")
        rng = random.Random(seed)
        written = write_rows(generate_offers(dataset, count, rng=rng), filepath)
    except Exception as e:
        logger.error(f"Failed to generate data: {e}")
        raise

    print("\n🎉 Data generation completed!")
    print(f"Generated {written} offers to {filepath}")
    return written


def handle_import(filepath: str, typed: bool = False, chunk_size: Optional[int] = None) -> int:
    logger.info(f"Starting import from {filepath}")
    try:
        transcoder = transcode_file(
            filepath,
            chunk_size=chunk_size or get_settings().import_chunk_size,
            typed=typed,
        )
    except Exception as e:
        logger.error(f"Failed to import data: {e}")
        raise

    print("\n🎉 Data imported successfully!", file=sys.stderr)
    return transcoder.emitted


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=get_settings().app_name, description="CLI for managing Six Cities rental data")
    parser.add_argument("-v", "--version", action="version", version=read_version(),
                        help="output the current version")
    parser.add_argument("--log-level", type=str, default=None,
                        help="Logging level (overrides SIX_CITIES_LOG_LEVEL)")

    subparsers = parser.add_subparsers(dest="command", metavar="command")
    subparsers.required = True

    generate = subparsers.add_parser("generate", help="Generate test data and save to file")
    generate.add_argument("count", type=_non_negative_int, help="Number of offers to generate")
    generate.add_argument("filepath", type=str, help="Output TSV file")
    generate.add_argument("url", type=str, help="Mock data server base URL (or a local JSON file)")
    generate.add_argument("--seed", type=int, default=None, help="Random seed for reproducible output")

    import_ = subparsers.add_parser("import", help="Import data from TSV file")
    import_.add_argument("filepath", type=str, help="Input TSV file")
    import_.add_argument("--typed", action="store_true",
                         help="Emit typed nested offer objects instead of flat string records")
    import_.add_argument("--chunk-size", type=_positive_int, default=None,
                         help="Bytes per read (overrides SIX_CITIES_IMPORT_CHUNK_SIZE)")

    return parser


def configure_logging(level: Optional[str] = None) -> None:
    config = get_settings()
    logging.basicConfig(
        level=(level or config.log_level).upper(),
        format=config.log_format,
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        if args.command == "generate":
            asyncio.run(handle_generate(args.count, args.filepath, args.url, seed=args.seed))
        else:
            handle_import(args.filepath, typed=args.typed, chunk_size=args.chunk_size)
    except Exception as e:  # noqa: BLE001
        print(f"Fatal error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
