"""
Dilbert Extractor
================

The upstream feed only links to the strip page. This extractor fetches the
page, picks the strip title and image, and replaces the item content with
the image itself.
"""

from ..core.models import CanonicalItem
from .base import (
    EnrichOutcome,
    ExtractContext,
    ModifyExtractor,
    attribute_required,
    first_text,
    image_tag,
    select_one_required,
)

TITLE_SELECTOR = "span.comic-title-name"
IMAGE_SELECTOR = "img.img-comic"


class ComicDetailExtractor(ModifyExtractor):
    """Scrape-and-replace extractor for comic detail pages."""

    name = "comic_detail"

    def __init__(
        self,
        title_selector: str = TITLE_SELECTOR,
        image_selector: str = IMAGE_SELECTOR,
        credit: str = "Dilbert by Scott Adams",
    ):
        self.title_selector = title_selector
        self.image_selector = image_selector
        self.credit = credit

    async def modify(self, item: CanonicalItem, ctx: ExtractContext) -> EnrichOutcome:
        page = await ctx.client.get_html(item.link)

        comic_name = first_text(select_one_required(page, self.title_selector)) or ""
        image_src = attribute_required(
            select_one_required(page, self.image_selector), "src"
        )

        if comic_name:
            item.title = f"{item.title} - {comic_name}"
        item.content = image_tag(image_src, alt=f"{comic_name} - {self.credit}")
        return EnrichOutcome.MODIFIED
