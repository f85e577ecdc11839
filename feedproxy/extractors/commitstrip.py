"""
CommitStrip passthrough: the upstream RSS is served as-is, cut after the
first closing root tag to drop the trailing junk the site appends.
"""

from ..utils.exceptions import ExtractError, ErrorCode
from .base import ExtractContext, RawFeedExtractor

FEED_URL = "https://www.commitstrip.com/en/feed/"
ROOT_CLOSE_TAG = "</rss>"


def truncate_feed(text: str, close_tag: str = ROOT_CLOSE_TAG) -> str:
    if close_tag not in text:
        raise ExtractError(
            f"Upstream document has no {close_tag} tag",
            selector=close_tag,
            error_code=ErrorCode.EXTRACT_MARKER_MISSING,
        )
    return text.split(close_tag, 1)[0] + close_tag


class CommitstripFeed(RawFeedExtractor):
    """Feed-truncation generator."""

    name = "commitstrip"
    source_url = FEED_URL

    async def render(self, ctx: ExtractContext) -> str:
        text = await ctx.client.get_text(self.source_url)
        return truncate_feed(text)
