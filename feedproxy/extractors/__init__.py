"""
Site Extractors Package
======================

Site-specific strategies that rewrite, synthesize or pass through feeds.
"""

from .base import (
    EnrichOutcome,
    ExtractContext,
    ModifyExtractor,
    GeneratorExtractor,
    RawFeedExtractor,
)
from .gamercat import DirectTextExtractor
from .dilbert import ComicDetailExtractor
from .webtoons import WebtoonsExtractor
from .ruthe import RutheGenerator
from .nichtlustig import NichtlustigGenerator
from .littlebobby import LittleBobbyGenerator
from .commitstrip import CommitstripFeed

__all__ = [
    "EnrichOutcome",
    "ExtractContext",
    "ModifyExtractor",
    "GeneratorExtractor",
    "RawFeedExtractor",
    "DirectTextExtractor",
    "ComicDetailExtractor",
    "WebtoonsExtractor",
    "RutheGenerator",
    "NichtlustigGenerator",
    "LittleBobbyGenerator",
    "CommitstripFeed",
]
