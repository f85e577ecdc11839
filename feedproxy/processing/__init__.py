"""
Processing Package
=================

Fan-out enrichment, path filtering, output assembly and the request pipeline.
"""

from .filter_engine import matches, path_segment, filter_items
from .transformer import ItemTransformer, TransformReport
from .assembler import assemble, serialize_rss, stamp_updated
from .pipeline import FeedPipeline

__all__ = [
    "matches",
    "path_segment",
    "filter_items",
    "ItemTransformer",
    "TransformReport",
    "assemble",
    "serialize_rss",
    "stamp_updated",
    "FeedPipeline",
]
