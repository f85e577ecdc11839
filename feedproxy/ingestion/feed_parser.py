"""
Feed Parser
==========

Turns upstream RSS/Atom text into frozen SourceFeed/SourceItem values using
feedparser.
"""

import calendar
from datetime import datetime, timezone
from typing import Any, Optional

import feedparser

from ..core.models import Author, SourceFeed, SourceItem
from ..utils.logging import get_logger_for_component
from ..utils.exceptions import ParseError, ErrorCode
from .http_client import HttpClient

logger = get_logger_for_component("feed_parser")


def parse_feed(text: str, feed_url: str = "") -> SourceFeed:
    """Parse feed text.

    Feeds with parse warnings are accepted as long as they still yield
    entries or a channel title.

    Raises:
        ParseError: If the document is not a usable feed
    """
    feed_data = feedparser.parse(text)

    if getattr(feed_data, "bozo", False):
        error_msg = f"Feed parse error: {getattr(feed_data, 'bozo_exception', 'invalid XML')}"
        if not feed_data.entries and not feed_data.feed.get("title"):
            raise ParseError(error_msg, url=feed_url, error_code=ErrorCode.FEED_PARSE_ERROR)
        logger.info(f"Feed has parse warnings but is usable: {feed_url}")

    channel = feed_data.feed
    items = tuple(_parse_entry(entry) for entry in feed_data.entries)

    return SourceFeed(
        title=channel.get("title", ""),
        link=channel.get("link", ""),
        description=channel.get("subtitle", channel.get("description", "")),
        copyright=channel.get("rights", ""),
        author=_parse_author(channel),
        items=items,
    )


async def fetch_feed(client: HttpClient, feed_url: str) -> SourceFeed:
    """Fetch and parse an upstream feed."""
    text = await client.get_text(feed_url)
    source = parse_feed(text, feed_url)
    logger.debug(f"Parsed {len(source.items)} items from {feed_url}")
    return source


def _parse_entry(entry: Any) -> SourceItem:
    return SourceItem(
        title=entry.get("title", ""),
        content=_extract_content(entry),
        link=entry.get("link", ""),
        guid=entry.get("id", ""),
        author=_parse_author(entry),
        published=_parse_date(entry.get("published_parsed")),
    )


def _extract_content(entry: Any) -> str:
    """Prefer full content over the summary, as readers do."""
    content = entry.get("content")
    if content:
        value = content[0].get("value", "")
        if value:
            return value
    return entry.get("summary", entry.get("description", ""))


def _parse_author(node: Any) -> Optional[Author]:
    detail = node.get("author_detail")
    if detail:
        author = Author(name=detail.get("name", ""), email=detail.get("email", ""))
    elif node.get("author"):
        author = Author(name=node.get("author"))
    else:
        return None
    return None if author.is_empty() else author


def _parse_date(date_tuple: Any) -> Optional[datetime]:
    """feedparser normalizes dates to UTC struct_time."""
    if not date_tuple:
        return None
    try:
        return datetime.fromtimestamp(calendar.timegm(date_tuple), tz=timezone.utc)
    except (ValueError, OverflowError, TypeError):
        return None
