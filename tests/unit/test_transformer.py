"""
Unit tests for concurrent item enrichment.

Covers:
- Output order independent of completion order
- Per-item failures and timeouts leave items unchanged
- Concurrency bound
"""

import asyncio
import logging

import pytest

from feedproxy.core.models import CanonicalItem
from feedproxy.extractors.base import EnrichOutcome, ModifyExtractor
from feedproxy.processing.transformer import ItemTransformer


def make_items(count):
    return [
        CanonicalItem(title=f"t{i}", content=f"c{i}", link=f"https://x/item/{i}", id=str(i))
        for i in range(count)
    ]


class SleepyExtractor(ModifyExtractor):
    """Finishes later for earlier items, tagging content with its index."""

    def __init__(self, count):
        self.count = count
        self.finished = []

    async def modify(self, item, ctx):
        index = int(item.id)
        await asyncio.sleep((self.count - index) * 0.01)
        item.content = f"enriched-{index}"
        self.finished.append(index)
        return EnrichOutcome.MODIFIED


class FailingExtractor(ModifyExtractor):

    async def modify(self, item, ctx):
        raise RuntimeError("page layout changed")


class HangingExtractor(ModifyExtractor):

    async def modify(self, item, ctx):
        await asyncio.sleep(10)
        item.content = "too late"
        return EnrichOutcome.MODIFIED


class CountingExtractor(ModifyExtractor):

    def __init__(self):
        self.active = 0
        self.peak = 0

    async def modify(self, item, ctx):
        self.active += 1
        self.peak = max(self.peak, self.active)
        await asyncio.sleep(0.01)
        self.active -= 1
        return EnrichOutcome.UNCHANGED


class TestItemTransformer:

    @pytest.mark.asyncio
    async def test_order_preserved_under_reverse_completion(self, make_client, make_context):
        items = make_items(5)
        extractor = SleepyExtractor(5)

        report = await ItemTransformer().transform(items, extractor, make_context(make_client()))

        assert extractor.finished == [4, 3, 2, 1, 0]
        assert [item.content for item in items] == [f"enriched-{i}" for i in range(5)]
        assert report.outcomes == [EnrichOutcome.MODIFIED] * 5
        assert report.modified_count == 5

    @pytest.mark.asyncio
    async def test_all_failures_leave_items_unchanged(self, make_client, make_context):
        items = make_items(4)
        before = [item.copy() for item in items]

        report = await ItemTransformer().transform(
            items, FailingExtractor(), make_context(make_client())
        )

        assert items == before
        assert report.outcomes == [EnrichOutcome.UNCHANGED] * 4
        assert report.failed_count == 4
        assert all("page layout changed" in error for error in report.errors)

    @pytest.mark.asyncio
    async def test_timeout_leaves_item_unchanged(self, make_client, make_context):
        items = make_items(2)

        report = await ItemTransformer(item_timeout=0.05).transform(
            items, HangingExtractor(), make_context(make_client())
        )

        assert [item.content for item in items] == ["c0", "c1"]
        assert report.failed_count == 2
        assert "timed out" in report.errors[0]

    @pytest.mark.asyncio
    async def test_concurrency_bound(self, make_client, make_context):
        extractor = CountingExtractor()

        await ItemTransformer(max_concurrent=2).transform(
            make_items(6), extractor, make_context(make_client())
        )

        assert extractor.peak == 2

    @pytest.mark.asyncio
    async def test_empty_input(self, make_client, make_context):
        report = await ItemTransformer().transform([], FailingExtractor(), make_context(make_client()))

        assert report.outcomes == []
        assert report.failed_count == 0

    @pytest.mark.asyncio
    async def test_summary_record_carries_counts(self, caplog, make_client, make_context):
        items = make_items(3)

        with caplog.at_level(logging.INFO, logger="feedproxy.transformer"):
            await ItemTransformer().transform(items, FailingExtractor(), make_context(make_client()))

        summary = [r for r in caplog.records if r.getMessage().startswith("Enriched")][-1]
        assert (summary.items, summary.modified, summary.failed) == (3, 0, 3)
        assert summary.component == "transformer"
