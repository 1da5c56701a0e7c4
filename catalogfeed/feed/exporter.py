"""Feed generation pipeline.

``FeedExporter.prepare`` validates the request and builds the per-run
state (category paths, currency conversion). The returned ``FeedRun``
then streams the feed, either as an async iterator of byte chunks or
into a sink.

Example usage:
    exporter = FeedExporter(repository, config, links)
    run = await exporter.prepare()      # may raise FeedValidationError
    async for chunk in run.stream():
        ...
"""

from collections.abc import AsyncIterator
from contextlib import aclosing
from dataclasses import replace

import structlog

from catalogfeed.domain.exceptions import InvalidCurrencyError, InvalidLanguageError
from catalogfeed.domain.value_objects import CurrencyInfo, LanguageInfo, ProductSnapshot
from catalogfeed.feed.categories import CategoryPathResolver
from catalogfeed.feed.config import FeedConfig
from catalogfeed.feed.currency import CurrencyConverter
from catalogfeed.feed.links import LinkBuilder
from catalogfeed.feed.paginator import FeedPaginator
from catalogfeed.feed.sanitizer import (
    TextRole,
    TextSanitizer,
    clean_references,
    split_references,
)
from catalogfeed.feed.source import CatalogSource
from catalogfeed.feed.writer import (
    IN_STOCK,
    OUT_OF_STOCK,
    ChunkSink,
    FeedRecord,
    FeedSink,
    FeedWriter,
)

logger = structlog.get_logger()


def sanitizer_for(config: FeedConfig) -> TextSanitizer:
    """Create the text sanitizer matching a feed configuration."""
    return TextSanitizer(
        charset=config.charset,
        field_separator=config.field_separator,
        repair_mojibake=config.repair_mojibake,
    )


class FeedRun:
    """Read-only state of one feed run plus the streaming loop.

    Attributes:
        records_written: Product lines emitted so far.
        rows_skipped: Inactive rows skipped so far.
    """

    def __init__(
        self,
        source: CatalogSource,
        config: FeedConfig,
        language: LanguageInfo,
        currency: CurrencyInfo,
        categories: CategoryPathResolver,
        links: LinkBuilder,
    ) -> None:
        """Initialize run.

        Args:
            source: Catalog queries.
            config: Validated feed configuration.
            language: Feed language.
            currency: Feed currency.
            categories: Resolved category paths for the language.
            links: Store link builder.
        """
        self.source = source
        self.config = config
        self.language = language
        self.currency = currency
        self.categories = categories
        self.links = links
        self.converter = CurrencyConverter(currency, include_taxes=config.show_final_prices)
        self.sanitizer = sanitizer_for(config)
        self.paginator = FeedPaginator(source, config, language.id)
        self.records_written = 0
        self.rows_skipped = 0

    def build_record(self, product: ProductSnapshot) -> FeedRecord:
        """Turn a product row into a cleaned feed record.

        Args:
            product: Product row.

        Returns:
            FeedRecord with every field cleaned.
        """
        clean = self.sanitizer.clean
        title = clean(product.title)
        category_paths = self.categories.paths_for(product.category_ids)

        if self.config.show_prices:
            price = self.converter.price(product.price, product.tax_rate)
            sale_price = self.converter.price(product.sale_price, product.tax_rate)
        else:
            price = sale_price = ""

        return FeedRecord(
            id=str(product.id),
            title=title,
            link=clean(self.links.product_url(product.id, self.currency.code), TextRole.LINK),
            description=clean(product.description),
            image_link=clean(self.links.image_url(product.image_path), TextRole.LINK),
            categories=self.config.category_separator.join(category_paths),
            availability=IN_STOCK if product.in_stock else OUT_OF_STOCK,
            brand=clean(product.brand),
            mpn=clean(product.mpn),
            price=price,
            sale_price=sale_price,
            extra_title_1=clean_references(title),
            extra_title_2=split_references(title),
        )

    async def _steps(self, writer: FeedWriter) -> AsyncIterator[None]:
        """Drive the writer, pausing after every line it writes."""
        logger.info(
            "Feed run started",
            language=self.language.code,
            currency=self.currency.code,
            limit=self.config.limit or None,
            offset=self.config.offset if self.config.windowed else None,
            chunk_size=self.config.effective_chunk_size,
        )

        if writer.open():
            yield

        async with aclosing(self.paginator.batches()) as batches:
            async for batch in batches:
                skipped = 0
                for product in batch.products:
                    if not product.is_active:
                        skipped += 1
                        continue
                    writer.write_record(self.build_record(product))
                    self.records_written += 1
                    yield
                self.rows_skipped += skipped
                logger.debug(
                    "Feed batch written",
                    offset=batch.offset,
                    rows=len(batch.products),
                    skipped=skipped,
                )

        writer.close()
        logger.info(
            "Feed run completed",
            records=self.records_written,
            skipped=self.rows_skipped,
            batches=len(self.paginator.queried_offsets),
        )

    async def stream(self) -> AsyncIterator[bytes]:
        """Stream the feed as encoded chunks, one per line.

        Closing the iterator stops further repository queries.

        Yields:
            Encoded header and record lines.
        """
        sink = ChunkSink()
        steps = self._steps(FeedWriter(self.config, sink))
        try:
            async for _ in steps:
                for chunk in sink.drain():
                    yield chunk
        finally:
            await steps.aclose()

    async def export(self, sink: FeedSink) -> int:
        """Write the feed into a sink.

        Stops quietly when the consumer goes away (broken pipe or closed
        connection).

        Args:
            sink: Output sink.

        Returns:
            Number of product records written.
        """
        steps = self._steps(FeedWriter(self.config, sink))
        try:
            async for _ in steps:
                pass
        except (BrokenPipeError, ConnectionError) as exc:
            logger.warning(
                "Feed consumer closed the output",
                records=self.records_written,
                error=str(exc),
            )
        finally:
            await steps.aclose()
        return self.records_written


class FeedExporter:
    """Validates a feed request and prepares the run.

    Validation happens before anything is written so that an error
    payload never mixes with feed output.
    """

    def __init__(self, source: CatalogSource, config: FeedConfig, links: LinkBuilder) -> None:
        """Initialize exporter.

        Args:
            source: Catalog queries.
            config: Feed configuration.
            links: Store link builder.
        """
        self.source = source
        self.config = config
        self.links = links

    async def validate(self) -> LanguageInfo:
        """Check currency and language against the store.

        Returns:
            The requested language.

        Raises:
            InvalidCurrencyError: If the currency is not available.
            InvalidLanguageError: If the language is not available.
        """
        codes = [currency.code for currency in await self.source.list_currencies()]
        if self.config.currency not in codes:
            logger.warning("Invalid feed currency", currency=self.config.currency, available=codes)
            raise InvalidCurrencyError(self.config.currency, codes)

        language = await self.source.get_language(self.config.language)
        if language is None:
            labels = [lang.label for lang in await self.source.list_languages()]
            logger.warning("Invalid feed language", language=self.config.language)
            raise InvalidLanguageError(self.config.language, labels)

        return language

    async def prepare(self) -> FeedRun:
        """Validate the request and build the run state.

        Returns:
            FeedRun ready to stream.

        Raises:
            FeedValidationError: If currency or language is not available.
            CyclicCategoryGraphError: If the category tree has a loop.
        """
        language = await self.validate()

        # Category names are cleaned one by one, never whole joined paths
        clean = sanitizer_for(self.config).clean
        categories = CategoryPathResolver.build(
            [
                replace(node, name=clean(node.name))
                for node in await self.source.get_categories(language.id)
            ],
            separator=self.config.category_tree_separator,
        )

        currency = await self.source.get_currency(self.config.currency)
        if currency is None:
            logger.warning("Currency row missing, using defaults", currency=self.config.currency)
            currency = CurrencyInfo.default(self.config.currency)

        return FeedRun(
            source=self.source,
            config=self.config,
            language=language,
            currency=currency,
            categories=categories,
            links=self.links,
        )
