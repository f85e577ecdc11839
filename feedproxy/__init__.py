"""
FeedProxy - Feed Rewriting Proxy
================================

Republishes third-party comic and news feeds as uniform RSS, rewriting each
item through a site-specific extractor.

Main Components:
- Ingestion: upstream HTTP client and feedparser-based feed parsing
- Extractors: per-site modify, generator and passthrough strategies
- Processing: fan-out enrichment, path filtering, RSS assembly
- Server: aiohttp routes for feeds and the image asset proxy
"""

__version__ = "1.0.0"
__author__ = "FeedProxy Development Team"
__description__ = "Feed rewriting proxy for comic and news feeds"

from .config.settings import get_settings
from .core.registry import build_registry
from .processing.pipeline import FeedPipeline
from .utils.logging import configure_application_logging, get_logger_for_component
from .utils.exceptions import FeedProxyError

__all__ = [
    "get_settings",
    "build_registry",
    "FeedPipeline",
    "configure_application_logging",
    "get_logger_for_component",
    "FeedProxyError",
]
