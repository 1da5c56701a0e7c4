#!/usr/bin/env python3
"""Export catalog feed script.

Writes the catalog feed to stdout or a file using the same pipeline as
the /feed endpoint. Status messages go to stderr.

Usage:
    python scripts/export_feed.py > feed.txt
    python scripts/export_feed.py --language de --currency EUR --output feed.txt
    python scripts/export_feed.py --limit 500 --offset 1000 --no-taxes
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from catalogfeed.api.deps import open_catalog
from catalogfeed.domain.exceptions import FeedValidationError, InvalidFeedConfigError
from catalogfeed.domain.value_objects import Charset
from catalogfeed.feed.config import FeedConfig
from catalogfeed.feed.exporter import FeedExporter
from catalogfeed.feed.links import LinkBuilder
from catalogfeed.feed.writer import StreamSink
from catalogfeed.infrastructure.config import settings
from catalogfeed.infrastructure.database import engine
from catalogfeed.infrastructure.logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    """Create the command line parser."""
    parser = argparse.ArgumentParser(
        description="Export the store catalog as a delimited text feed",
    )
    parser.add_argument("--language", help=f"Language code (default: {settings.feed_language})")
    parser.add_argument("--currency", help=f"Currency code (default: {settings.feed_currency})")
    parser.add_argument("--chunk-size", type=int, help="Rows per database query")
    parser.add_argument("--limit", type=int, default=0, help="Export only this many rows")
    parser.add_argument("--offset", type=int, default=0, help="First row of the window")
    parser.add_argument("--no-prices", action="store_true", help="Leave out price columns")
    parser.add_argument("--no-taxes", action="store_true", help="Prices without tax")
    parser.add_argument("--latin1", action="store_true", help="Write ISO-8859-1 instead of UTF-8")
    parser.add_argument(
        "--output",
        type=Path,
        help="Output file (default: stdout)",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> FeedConfig:
    """Build the feed configuration from parsed arguments.

    Raises:
        InvalidFeedConfigError: If a value is out of range.
    """
    windowed = args.limit > 0
    return FeedConfig.from_settings(
        settings,
        language=args.language,
        currency=args.currency,
        chunk_size=args.chunk_size,
        show_prices=not args.no_prices,
        show_final_prices=not args.no_taxes,
        charset=Charset.LATIN1 if args.latin1 else Charset.UTF8,
        limit=args.limit if windowed else None,
        offset=args.offset if windowed else None,
    )


async def export(config: FeedConfig, output: Path | None) -> int:
    """Run one export.

    Args:
        config: Feed configuration.
        output: File to write, or None for stdout.

    Returns:
        Number of records written.

    Raises:
        FeedValidationError: If currency or language is not available.
    """
    links = LinkBuilder(settings.store_url, settings.product_page, settings.images_dir)
    try:
        async with open_catalog() as source:
            run = await FeedExporter(source, config, links).prepare()
            if output is None:
                return await run.export(StreamSink(sys.stdout.buffer))
            with output.open("wb") as stream:
                return await run.export(StreamSink(stream))
    finally:
        await engine.dispose()


async def main() -> int:
    """Main entry point."""
    args = build_parser().parse_args()
    setup_logging()

    try:
        config = config_from_args(args)
    except InvalidFeedConfigError as e:
        print(f"✗ {e.message}", file=sys.stderr)
        return 2

    try:
        records = await export(config, args.output)
    except FeedValidationError as e:
        print(json.dumps(e.to_payload()))
        return 1

    print(f"✓ Exported {records} products", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
