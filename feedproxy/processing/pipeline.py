"""
Feed Pipeline
============

Runs the binding registered for a feed identifier and returns the text to
serve:

    identify feed -> fetch/parse or scrape source -> convert items
    -> (modify) fan out enrichment and join -> (filter) apply path predicate
    -> assemble -> serialize

Request-level failures propagate as FeedProxyError subclasses. Unknown
identifiers are rejected before any network I/O.
"""

from typing import Optional

from ..config.settings import HttpSettings
from ..core.models import CanonicalFeed, convert_feed_metadata, convert_item
from ..core.registry import (
    ExtractorBinding,
    ExtractorRegistry,
    FilterBinding,
    GeneratorBinding,
    ModifyBinding,
    RawFeedBinding,
)
from ..extractors.base import ExtractContext
from ..ingestion.feed_parser import fetch_feed
from ..ingestion.http_client import HttpClient
from ..utils.logging import PerformanceLogger, get_logger_for_component
from ..utils.exceptions import FeedProxyError, handle_exception
from .assembler import assemble
from .filter_engine import filter_items
from .transformer import ItemTransformer


class FeedPipeline:
    """Per-process feed renderer shared by all requests."""

    def __init__(
        self,
        registry: ExtractorRegistry,
        client: HttpClient,
        http_settings: Optional[HttpSettings] = None,
    ):
        """Initialize pipeline.

        Args:
            registry: Feed identifier lookup
            client: Upstream HTTP client
            http_settings: Timeout/concurrency bounds for item enrichment
        """
        http_settings = http_settings or HttpSettings()
        self.registry = registry
        self.client = client
        self.transformer = ItemTransformer(
            item_timeout=http_settings.item_timeout,
            max_concurrent=http_settings.max_concurrent_items,
        )

    async def render(self, feed_id: str, base: str) -> str:
        """Produce the serialized feed for ``feed_id``.

        Args:
            feed_id: Registry identifier
            base: ``<scheme>://<host>/<base>`` of the incoming request

        Raises:
            UnknownFeedError: If ``feed_id`` is not registered
            FeedProxyError: On any other request-level failure
        """
        binding = self.registry.get(feed_id)
        logger = get_logger_for_component("pipeline", feed_id=feed_id)
        ctx = ExtractContext(client=self.client, base=base, feed_id=feed_id)

        with PerformanceLogger(logger, f"render {feed_id}", kind=binding.kind):
            try:
                return await self._run(binding, ctx, logger)
            except FeedProxyError:
                raise
            except Exception as e:
                raise handle_exception(e, logger, f"render {feed_id}") from e

    async def _run(self, binding: ExtractorBinding, ctx: ExtractContext, logger) -> str:
        if isinstance(binding, RawFeedBinding):
            return await binding.generator.render(ctx)

        if isinstance(binding, GeneratorBinding):
            feed = await binding.generator.generate(ctx)
        elif isinstance(binding, ModifyBinding):
            feed = await self._run_modify(binding, ctx)
        elif isinstance(binding, FilterBinding):
            feed = await self._run_filter(binding, ctx, logger)
        else:
            raise TypeError(f"Unsupported binding: {binding!r}")

        logger.debug(f"Assembling {len(feed)} items", extra={"items": len(feed)})
        return assemble(feed)

    async def _run_modify(self, binding: ModifyBinding, ctx: ExtractContext) -> CanonicalFeed:
        source = await fetch_feed(self.client, binding.feed_url)
        feed = convert_feed_metadata(source)
        # Slots are allocated before fan-out; order never depends on completion.
        feed.items = [convert_item(item) for item in source.items]
        await self.transformer.transform(feed.items, binding.extractor, ctx)
        return feed

    async def _run_filter(
        self, binding: FilterBinding, ctx: ExtractContext, logger
    ) -> CanonicalFeed:
        source = await fetch_feed(self.client, binding.feed_url)
        feed = convert_feed_metadata(source)
        converted = [convert_item(item) for item in source.items]
        feed.items = filter_items(converted, binding.whitelist, binding.include, logger)
        logger.info(
            f"Kept {len(feed.items)}/{len(converted)} items",
            extra={"items": len(converted), "kept": len(feed.items)},
        )
        return feed
