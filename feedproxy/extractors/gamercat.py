"""
The GamerCat extractor: links the full-size strip instead of the thumbnail.
"""

from ..core.models import CanonicalItem
from .base import EnrichOutcome, ExtractContext, ModifyExtractor

THUMBNAIL_SUFFIX = "-200x150"


class DirectTextExtractor(ModifyExtractor):
    """Removes the first occurrence of a token from the item content."""

    name = "direct_text"

    def __init__(self, token: str = THUMBNAIL_SUFFIX):
        self.token = token

    async def modify(self, item: CanonicalItem, ctx: ExtractContext) -> EnrichOutcome:
        rewritten = item.content.replace(self.token, "", 1)
        if rewritten == item.content:
            return EnrichOutcome.UNCHANGED
        item.content = rewritten
        return EnrichOutcome.MODIFIED

    def __repr__(self) -> str:
        return f"DirectTextExtractor(token={self.token!r})"
