"""
Ingestion Package
================

Upstream fetching and feed parsing.
"""

from .http_client import HttpClient, open_session, parse_html
from .feed_parser import fetch_feed, parse_feed

__all__ = ["HttpClient", "open_session", "parse_html", "fetch_feed", "parse_feed"]
