"""
FeedProxy Data Models
====================

Item and feed representations shared by the parser, the extractors and the
output assembler.

Source models are frozen snapshots of what the upstream feed contained.
Canonical models are the mutable output units that extractors rewrite.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class Author:
    """Feed or item author."""

    name: str = ""
    email: str = ""

    def is_empty(self) -> bool:
        return not self.name and not self.email


@dataclass(frozen=True)
class SourceItem:
    """Entry as parsed from an upstream feed."""

    title: str
    content: str
    link: str
    guid: str
    author: Optional[Author] = None
    published: Optional[datetime] = None


@dataclass(frozen=True)
class SourceFeed:
    """Upstream feed as parsed, with its items in document order."""

    title: str
    link: str
    description: str = ""
    copyright: str = ""
    author: Optional[Author] = None
    items: Tuple[SourceItem, ...] = ()


@dataclass
class CanonicalItem:
    """Output feed item.

    ``created`` and ``updated`` are timezone-aware datetimes or ``None`` when
    the source carried no usable timestamp.
    """

    title: str
    content: str
    link: str
    id: str
    author: Optional[Author] = None
    created: Optional[datetime] = None
    updated: Optional[datetime] = None

    @property
    def effective_updated(self) -> Optional[datetime]:
        """Timestamp an RSS reader sees for this item."""
        return self.updated or self.created

    def copy(self) -> "CanonicalItem":
        return replace(self)


@dataclass
class CanonicalFeed:
    """Output feed built once per request and discarded after serialization."""

    title: str
    link: str
    description: str = ""
    copyright: str = ""
    author: Optional[Author] = None
    id: Optional[str] = None
    items: List[CanonicalItem] = field(default_factory=list)
    updated: Optional[datetime] = None

    def __len__(self) -> int:
        return len(self.items)


def convert_item(source: SourceItem) -> CanonicalItem:
    """Convert a parsed upstream entry into a canonical item.

    Never fails. The author's email is taken from the source email field.
    """
    author = None
    if source.author is not None:
        author = Author(name=source.author.name, email=source.author.email)

    return CanonicalItem(
        title=source.title,
        content=source.content,
        link=source.link,
        id=source.guid,
        author=author,
        created=source.published,
    )


def convert_feed_metadata(source: SourceFeed) -> CanonicalFeed:
    """Build an item-less output feed carrying the upstream feed's metadata."""
    return CanonicalFeed(
        title=source.title,
        link=source.link,
        description=source.description,
        copyright=source.copyright,
        author=source.author,
    )
