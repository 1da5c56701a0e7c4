"""Store catalog access.

ORM models for the store tables and the repository the feed reads from.
"""

from catalogfeed.catalog.repository import ProductRepository, to_snapshot

__all__ = [
    "ProductRepository",
    "to_snapshot",
]
