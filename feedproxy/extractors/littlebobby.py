"""
Little Bobby Generator
=====================

Each archive tile is an anchor holding the thumbnail, the week caption and
the publication date ("January 2, 2006").
"""

from datetime import datetime, timezone
from typing import List, Optional

from bs4 import Tag

from ..core.models import CanonicalFeed, CanonicalItem
from ..utils.logging import get_logger_for_component
from .base import (
    ExtractContext,
    GeneratorExtractor,
    attribute_required,
    image_tag,
    select_one_required,
)

ARCHIVE_URL = "https://www.littlebobbycomic.com/archive/"
TILE_SELECTOR = "div.project-img-wrap a"
THUMBNAIL_SUFFIX = "-480x270"
DATE_FORMAT = "%B %d, %Y"

logger = get_logger_for_component("littlebobby")


class LittleBobbyGenerator(GeneratorExtractor):
    """Archive-scrape-with-date generator."""

    name = "littlebobby"
    source_url = ARCHIVE_URL

    async def generate(self, ctx: ExtractContext) -> CanonicalFeed:
        page = await ctx.client.get_html(self.source_url)

        feed = CanonicalFeed(
            title="Little Bobby",
            link="https://www.littlebobbycomic.com",
            id="tag:littlebobbycomic.de,2005:/feed",
        )
        feed.items = [self._build_item(anchor) for anchor in page.select(TILE_SELECTOR)]
        return feed

    def _build_item(self, anchor: Tag) -> CanonicalItem:
        link = anchor.get("href", "")
        image = attribute_required(select_one_required(anchor, "img"), "src")
        image = image.replace(THUMBNAIL_SUFFIX, "", 1)

        captions = _caption_elements(anchor)
        week = captions[0].get_text(strip=True) if captions else ""
        published = _parse_date(captions[-1].get_text(strip=True)) if captions else None
        label = published.strftime("%d.%m.%Y") if published else "unknown date"

        return CanonicalItem(
            title=f"LittleBobbyComic for {week} ({label})",
            content=image_tag(image, alt="Comic", height="300"),
            link=link,
            id=week,
            updated=published,
        )


def _caption_elements(anchor: Tag) -> List[Tag]:
    """Direct child elements other than the thumbnail, in document order."""
    return [
        child
        for child in anchor.find_all(recursive=False)
        if child.name != "img"
    ]


def _parse_date(raw: str) -> Optional[datetime]:
    try:
        return datetime.strptime(raw, DATE_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError as e:
        logger.warning(f"Unparsable archive date {raw!r}: {e}")
        return None
