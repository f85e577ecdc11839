"""
NichtLustig Generator
====================

The cartoon page embeds its whole archive as a JavaScript array literal
(``var cartoonList = [...]; </script>``). The literal is almost JSON: it uses
single quotes and leaves trailing commas before closing brackets. After
repairing those two quirks the array is decoded and the newest 20 cartoons
become feed items.
"""

import json
import re
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError

from ..core.models import CanonicalFeed, CanonicalItem
from ..utils.logging import get_logger_for_component
from ..utils.exceptions import DataRepairError, ErrorCode
from .base import ExtractContext, GeneratorExtractor, image_tag

PAGE_URL = "https://joscha.com/nichtlustig/"
MEDIA_URL = "https://joscha.com/data/media/cartoons"
BLOB_MARKER = "var cartoonList = "
BLOB_TERMINATOR = "; </script>"
ITEM_COUNT = 20
SLUG_DATE_FORMAT = "%y%m%d"

_TRAILING_COMMA = re.compile(r",\s*([\]}])")

logger = get_logger_for_component("nichtlustig")


class CartoonRecord(BaseModel):
    """One entry of the embedded cartoon list."""
    slug: str
    image: str
    bonus: bool = Field(default=False, description="Bonus cartoon exists (members only)")
    bonus_image: str = ""
    public_bonus: bool = Field(default=False, description="Bonus cartoon is public")
    tags: str = ""
    title: str = ""
    color: str = ""


def extract_blob(page: str) -> str:
    """Cut the array literal out of the page."""
    if BLOB_MARKER not in page:
        raise DataRepairError(
            "Cartoon list marker not found in page",
            error_code=ErrorCode.DATA_MARKER_MISSING,
            context={"marker": BLOB_MARKER},
        )
    return page.split(BLOB_MARKER, 1)[1].split(BLOB_TERMINATOR, 1)[0]


def repair_blob(blob: str) -> str:
    """Turn the JavaScript literal into strict JSON."""
    return _TRAILING_COMMA.sub(r"\1", blob.replace("'", '"'))


def decode_records(page: str, minimum: int = ITEM_COUNT) -> List[CartoonRecord]:
    """Extract, repair and decode the embedded cartoon list.

    Raises:
        DataRepairError: Marker missing, invalid JSON, malformed records, or
            fewer than ``minimum`` records
    """
    repaired = repair_blob(extract_blob(page))

    try:
        raw_records = json.loads(repaired)
    except json.JSONDecodeError as e:
        raise DataRepairError(
            f"Cartoon list is not valid JSON after repair: {e}",
            error_code=ErrorCode.DATA_INVALID_JSON,
        ) from e

    if not isinstance(raw_records, list):
        raise DataRepairError(
            "Cartoon list is not an array", error_code=ErrorCode.DATA_INVALID_JSON
        )

    try:
        records = [CartoonRecord.model_validate(raw) for raw in raw_records]
    except ValidationError as e:
        raise DataRepairError(
            f"Malformed cartoon record: {e}", error_code=ErrorCode.DATA_INVALID_JSON
        ) from e

    if len(records) < minimum:
        raise DataRepairError(
            f"Expected at least {minimum} cartoons, found {len(records)}",
            error_code=ErrorCode.DATA_TOO_FEW_RECORDS,
            context={"record_count": len(records)},
        )

    return records


class NichtlustigGenerator(GeneratorExtractor):
    """Embedded-data-blob generator."""

    name = "nichtlustig"
    source_url = PAGE_URL

    async def generate(self, ctx: ExtractContext) -> CanonicalFeed:
        page = await ctx.client.get_text(self.source_url)
        records = decode_records(page)

        feed = CanonicalFeed(
            title="Nicht Lustig Cartoons",
            link="https://joscha.com/nichtlustig",
            id="tag:joscha.com/nichtlustig,2005:/feed",
        )
        feed.items = [build_item(record) for record in records[:ITEM_COUNT]]
        return feed


def build_item(record: CartoonRecord) -> CanonicalItem:
    published = _parse_slug_date(record.slug)
    label = published.strftime("%d.%m.%Y") if published else record.slug

    content = image_tag(f"{MEDIA_URL}/{record.image}", alt=record.title)
    if record.public_bonus:
        content += image_tag(
            f"{MEDIA_URL}/bonus/{record.bonus_image}",
            alt=f"BonusCartoon for {record.title}",
        )

    return CanonicalItem(
        title=f"NichtLustig Cartoon vom {label} - {record.title}",
        content=content,
        link=f"https://joscha.com/nichtlustig/{record.slug}/",
        id=record.slug,
        updated=published,
    )


def _parse_slug_date(slug: str) -> Optional[datetime]:
    try:
        return datetime.strptime(slug, SLUG_DATE_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        logger.warning(f"Cartoon slug is not a date: {slug!r}")
        return None
