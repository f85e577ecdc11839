"""
Item Transformer
===============

Concurrent per-item enrichment for modify-style feeds.

One task is launched per item and the caller waits for all of them. Results
are collected positionally, so output order equals input order no matter
which task finishes first. Every task failure (network error, parse error,
missing element, timeout) leaves its item as converted.
"""

import asyncio
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..core.models import CanonicalItem
from ..extractors.base import EnrichOutcome, ExtractContext, ModifyExtractor
from ..utils.logging import get_logger_for_component


@dataclass
class TransformReport:
    """Per-item outcomes of one fan-out, in item order."""

    outcomes: List[EnrichOutcome] = field(default_factory=list)
    errors: List[Optional[str]] = field(default_factory=list)

    @property
    def modified_count(self) -> int:
        return sum(1 for o in self.outcomes if o is EnrichOutcome.MODIFIED)

    @property
    def failed_count(self) -> int:
        return sum(1 for e in self.errors if e is not None)


class ItemTransformer:
    """Fan-out/join driver for a ModifyExtractor."""

    def __init__(self, item_timeout: Optional[float] = None, max_concurrent: int = 10):
        """Initialize transformer.

        Args:
            item_timeout: Upper bound in seconds for one enrichment (None = unbounded)
            max_concurrent: Maximum enrichments in flight at once
        """
        self.item_timeout = item_timeout
        self.max_concurrent = max_concurrent

    async def transform(
        self,
        items: Sequence[CanonicalItem],
        extractor: ModifyExtractor,
        ctx: ExtractContext,
    ) -> TransformReport:
        """Enrich every item in place and wait for all of them.

        Never raises for item-level failures.
        """
        logger = get_logger_for_component("transformer", feed_id=ctx.feed_id)
        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def enrich(item: CanonicalItem):
            async with semaphore:
                try:
                    outcome = await asyncio.wait_for(
                        extractor.modify(item, ctx), timeout=self.item_timeout
                    )
                    return outcome, None
                except asyncio.TimeoutError:
                    error = f"enrichment timed out after {self.item_timeout}s"
                except Exception as e:
                    error = f"{type(e).__name__}: {e}"

            logger.warning(
                f"Leaving item unchanged ({error})",
                extra={"item_link": item.link},
            )
            return EnrichOutcome.UNCHANGED, error

        results = await asyncio.gather(*(enrich(item) for item in items))

        report = TransformReport(
            outcomes=[outcome for outcome, _ in results],
            errors=[error for _, error in results],
        )
        logger.info(
            f"Enriched {report.modified_count}/{len(items)} items "
            f"({report.failed_count} failed) with {extractor!r}",
            extra={
                "items": len(items),
                "modified": report.modified_count,
                "failed": report.failed_count,
            },
        )
        return report
