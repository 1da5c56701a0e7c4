"""Feed generation.

Text cleaning, category paths, price conversion, chunked retrieval and
the line writer that together turn catalog rows into a feed.
"""

from catalogfeed.feed.categories import CategoryPathResolver
from catalogfeed.feed.config import FeedConfig
from catalogfeed.feed.currency import CurrencyConverter, parse_amount
from catalogfeed.feed.exporter import FeedExporter, FeedRun
from catalogfeed.feed.links import LinkBuilder
from catalogfeed.feed.paginator import Batch, FeedPaginator
from catalogfeed.feed.sanitizer import TextRole, TextSanitizer
from catalogfeed.feed.source import CatalogSource
from catalogfeed.feed.writer import ChunkSink, FeedRecord, FeedWriter, StreamSink

__all__ = [
    # Configuration
    "FeedConfig",
    # Building blocks
    "CategoryPathResolver",
    "CurrencyConverter",
    "LinkBuilder",
    "TextRole",
    "TextSanitizer",
    "parse_amount",
    # Retrieval
    "Batch",
    "CatalogSource",
    "FeedPaginator",
    # Output
    "ChunkSink",
    "FeedRecord",
    "FeedWriter",
    "StreamSink",
    # Pipeline
    "FeedExporter",
    "FeedRun",
]
