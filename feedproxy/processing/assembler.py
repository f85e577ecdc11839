"""
Output Assembler
===============

Recomputes feed-level metadata and serializes a CanonicalFeed to RSS 2.0
with feedgen.
"""

from datetime import datetime, timezone
from typing import Optional

from feedgen.feed import FeedGenerator

from ..core.models import Author, CanonicalFeed, CanonicalItem
from ..utils.exceptions import SerializeError


def stamp_updated(feed: CanonicalFeed, now: Optional[datetime] = None) -> datetime:
    """Set ``feed.updated`` from the first item.

    Feeds without items, or whose first item carries no timestamp, are
    stamped with the current time.
    """
    updated = feed.items[0].effective_updated if feed.items else None
    feed.updated = updated or now or datetime.now(timezone.utc)
    return feed.updated


def serialize_rss(feed: CanonicalFeed) -> str:
    """Render the feed as an RSS 2.0 document.

    Raises:
        SerializeError: If feedgen rejects the feed
    """
    try:
        generator = _build_generator(feed)
        return generator.rss_str(pretty=True).decode("utf-8")
    except ValueError as e:
        raise SerializeError(f"Cannot serialize feed: {e}", feed_title=feed.title) from e


def assemble(feed: CanonicalFeed) -> str:
    """Stamp and serialize the output feed."""
    stamp_updated(feed)
    return serialize_rss(feed)


def _build_generator(feed: CanonicalFeed) -> FeedGenerator:
    fg = FeedGenerator()
    fg.title(feed.title)
    fg.link(href=feed.link, rel="alternate")
    # RSS requires a description; generated feeds have none.
    fg.description(feed.description or feed.title)
    if feed.id:
        fg.id(feed.id)
    if feed.copyright:
        fg.copyright(feed.copyright)
    author = _author_dict(feed.author)
    if author:
        fg.author(author)
    if feed.updated:
        fg.lastBuildDate(feed.updated)

    for item in feed.items:
        _add_entry(fg, item)

    return fg


def _add_entry(fg: FeedGenerator, item: CanonicalItem) -> None:
    entry = fg.add_entry(order="append")
    # feedgen refuses entries with neither title nor body.
    if item.title or item.content:
        entry.title(item.title)
    else:
        entry.title(item.link or item.id or "-")
    if item.link:
        entry.link(href=item.link)
    if item.id:
        entry.guid(item.id, permalink=False)
    if item.content:
        # content:encoded is only written when a description is set too.
        entry.description(item.content)
        entry.content(item.content, type="CDATA")
    author = _author_dict(item.author)
    if author:
        entry.author(author)
    if item.effective_updated:
        entry.pubDate(item.effective_updated)


def _author_dict(author: Optional[Author]) -> Optional[dict]:
    if author is None or author.is_empty():
        return None
    data = {"name": author.name or author.email}
    if author.email:
        data["email"] = author.email
    return data
