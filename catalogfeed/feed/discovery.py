"""Discovery document for the indexing service installer.

Lists the languages and currencies a feed can be requested in, read from
the same catalog source the feed itself uses.
"""

from typing import Any

from catalogfeed.feed.source import CatalogSource


async def build_discovery(
    source: CatalogSource,
    *,
    platform_name: str,
    platform_version: str,
    module_version: str,
    feed_url: str,
    show_prices: bool = True,
    show_final_prices: bool = True,
) -> dict[str, Any]:
    """Build the discovery document.

    Args:
        source: Catalog queries.
        platform_name: Store platform name.
        platform_version: Store platform version.
        module_version: Version of this exporter.
        feed_url: Absolute URL of the feed endpoint.
        show_prices: Whether feeds include prices by default.
        show_final_prices: Whether feed prices include taxes by default.

    Returns:
        JSON-serializable discovery document.
    """
    languages = [language.code.upper() for language in await source.list_languages()]
    currencies = [currency.code.upper() for currency in await source.list_currencies()]

    return {
        "platform": {
            "name": platform_name,
            "version": platform_version,
        },
        "module": {
            "version": module_version,
            "feed": feed_url,
            "options": {
                "language": languages,
                "currency": currencies,
            },
            "configuration": {
                code: {
                    "language": code,
                    "prices": show_prices,
                    "taxes": show_final_prices,
                }
                for code in languages
            },
        },
    }
