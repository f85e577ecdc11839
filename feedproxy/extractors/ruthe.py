"""
Ruthe Generator
==============

ruthe.de has no usable feed. The archive page lists every strip with a
thumbnail and an "eingestellt: DD.MM.'YY" caption; each list entry becomes
one feed item pointing at the full-size strip.
"""

from datetime import datetime, timezone
from typing import Optional

from bs4 import Tag

from ..core.models import CanonicalFeed, CanonicalItem
from ..utils.logging import get_logger_for_component
from ..utils.exceptions import ExtractError, ErrorCode
from .base import (
    ExtractContext,
    GeneratorExtractor,
    attribute_required,
    image_tag,
    select_one_required,
)

ARCHIVE_URL = "https://ruthe.de/archiv/0/datum/asc/"
ENTRY_SELECTOR = "#archiv_inner li"
THUMBNAIL_PREFIX = "/cartoons/tn_strip_"
THUMBNAIL_SUFFIX = ".jpg"
DATE_MARKER = "eingestellt: "
DATE_FORMAT = "%d.%m.'%y"

logger = get_logger_for_component("ruthe")


class RutheGenerator(GeneratorExtractor):
    """Archive-scrape generator."""

    name = "ruthe"
    source_url = ARCHIVE_URL

    async def generate(self, ctx: ExtractContext) -> CanonicalFeed:
        page = await ctx.client.get_html(self.source_url)

        feed = CanonicalFeed(
            title="Ruthe Comics",
            link="http://ruthe.de",
            id="tag:ruthe.de,2005:/feed",
        )
        feed.items = [self._build_item(entry) for entry in page.select(ENTRY_SELECTOR)]
        return feed

    def _build_item(self, entry: Tag) -> CanonicalItem:
        thumbnail = attribute_required(select_one_required(entry, "img"), "src")
        comic_id = thumbnail.replace(THUMBNAIL_PREFIX, "", 1).replace(THUMBNAIL_SUFFIX, "", 1)
        published = _parse_caption_date(entry)

        label = published.strftime("%d.%m.%Y") if published else "unbekanntem Datum"
        return CanonicalItem(
            title=f"Comic vom {label}",
            content=image_tag(
                f"https://ruthe.de/cartoons/strip_{comic_id}.jpg",
                alt="Comic",
                height="300",
                **{"class": "img-responsive img-comic"},
            ),
            link=f"https://ruthe.de/cartoon/{comic_id}/",
            id=comic_id,
            updated=published,
        )


def _parse_caption_date(entry: Tag) -> Optional[datetime]:
    caption = entry.get_text()
    if DATE_MARKER not in caption:
        raise ExtractError(
            f"Archive entry has no '{DATE_MARKER.strip()}' caption",
            selector=DATE_MARKER,
            error_code=ErrorCode.EXTRACT_MARKER_MISSING,
        )

    raw = caption.split(DATE_MARKER, 1)[1].strip()
    try:
        return datetime.strptime(raw, DATE_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError as e:
        logger.warning(f"Unparsable archive date {raw!r}: {e}")
        return None
