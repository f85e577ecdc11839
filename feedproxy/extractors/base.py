"""
Base Extractor Interface
=======================

Abstract base classes for the three families of site-specific strategies:

- ModifyExtractor: rewrites one already-converted item in place
- GeneratorExtractor: synthesizes a whole CanonicalFeed from a non-feed page
- RawFeedExtractor: returns upstream text that bypasses the item model
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from html import escape
from typing import Any, Optional

from bs4 import Tag

from ..core.models import CanonicalFeed, CanonicalItem
from ..ingestion.http_client import HttpClient
from ..utils.exceptions import ExtractError, ErrorCode


class EnrichOutcome(str, Enum):
    """Result of one modify-style enrichment."""
    MODIFIED = "modified"
    UNCHANGED = "unchanged"


@dataclass
class ExtractContext:
    """Per-request collaborators handed to every extractor.

    ``base`` is ``<scheme>://<host>/<base>`` of the incoming request and is
    used to build asset-proxy URLs.
    """

    client: HttpClient
    base: str
    feed_id: str = ""


class ModifyExtractor(ABC):
    """Rewrites a single item.

    Implementations must only assign to the item once every fallible step has
    succeeded, so that a raised exception leaves the item as it was.
    """

    name: str = "modify"

    @abstractmethod
    async def modify(self, item: CanonicalItem, ctx: ExtractContext) -> EnrichOutcome:
        """Enrich ``item`` in place."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class GeneratorExtractor(ABC):
    """Builds an entire output feed from a non-feed source."""

    name: str = "generator"
    source_url: str = ""

    @abstractmethod
    async def generate(self, ctx: ExtractContext) -> CanonicalFeed:
        """Fetch the source and return the synthesized feed."""
        pass


class RawFeedExtractor(ABC):
    """Produces serialized feed text without going through the item model."""

    name: str = "raw"
    source_url: str = ""

    @abstractmethod
    async def render(self, ctx: ExtractContext) -> str:
        """Fetch the source and return the text to serve."""
        pass


# Selector helpers shared by the scraping extractors


def select_one_required(node: Any, selector: str) -> Tag:
    """Return the first match or raise ExtractError."""
    found = node.select_one(selector)
    if found is None:
        raise ExtractError(f"No element matches '{selector}'", selector=selector)
    return found


def attribute_required(tag: Tag, name: str) -> str:
    value = tag.get(name)
    if not value:
        raise ExtractError(
            f"<{tag.name}> has no '{name}' attribute",
            selector=f"{tag.name}[{name}]",
            error_code=ErrorCode.EXTRACT_ATTRIBUTE_MISSING,
        )
    return value


def first_text(tag: Optional[Tag]) -> Optional[str]:
    """Text of the first child node, mirroring how titles sit in comic pages."""
    if tag is None or not tag.contents:
        return None
    child = tag.contents[0]
    text = child.get_text() if isinstance(child, Tag) else str(child)
    return text


def image_tag(src: str, alt: Optional[str] = None, **attrs: str) -> str:
    """Render an <img> tag with escaped attributes in a stable order."""
    parts = []
    if alt is not None:
        parts.append(f'alt="{escape(alt)}"')
    for key in sorted(attrs):
        parts.append(f'{key}="{escape(attrs[key])}"')
    parts.append(f'src="{escape(src)}"')
    return f"<img {' '.join(parts)}>"


__all__ = [
    "EnrichOutcome",
    "ExtractContext",
    "ModifyExtractor",
    "GeneratorExtractor",
    "RawFeedExtractor",
    "select_one_required",
    "attribute_required",
    "first_text",
    "image_tag",
]
