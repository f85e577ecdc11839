"""
Core Package
===========

Item/feed models and the feed identifier registry.
"""

from .models import (
    Author,
    SourceItem,
    SourceFeed,
    CanonicalItem,
    CanonicalFeed,
    convert_item,
    convert_feed_metadata,
)

__all__ = [
    "Author",
    "SourceItem",
    "SourceFeed",
    "CanonicalItem",
    "CanonicalFeed",
    "convert_item",
    "convert_feed_metadata",
]
