"""
PyTest Configuration and Fixtures
=================================

Shared fixtures and configuration for FeedProxy tests.

Upstream sites are replaced by FakeHttpClient, which serves canned pages
from a dict and records every request it sees.
"""

import asyncio
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Union

import pytest

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment variables before any imports
os.environ["FEEDPROXY_LOGGING__FILE_PATH"] = ""
os.environ["FEEDPROXY_DEBUG"] = "true"

from feedproxy.config.settings import FeedProxySettings, LoggingSettings
from feedproxy.core.models import Author, CanonicalItem, SourceItem
from feedproxy.extractors.base import ExtractContext
from feedproxy.ingestion.http_client import parse_html
from feedproxy.utils.exceptions import UpstreamFetchError, ErrorCode


# ============================================================================
# Fake upstream
# ============================================================================


class FakeHttpClient:
    """Stand-in for HttpClient serving canned bodies.

    ``pages`` maps URL to either a body or an exception to raise.
    ``delays`` maps URL to seconds to sleep before answering.
    """

    def __init__(
        self,
        pages: Optional[Dict[str, Union[str, Exception]]] = None,
        delays: Optional[Dict[str, float]] = None,
    ):
        self.pages = dict(pages or {})
        self.delays = dict(delays or {})
        self.requests: List[str] = []
        self.cookies: List[Optional[Dict[str, str]]] = []

    async def get_text(self, url, cookies=None, headers=None) -> str:
        self.requests.append(url)
        self.cookies.append(cookies)

        delay = self.delays.get(url)
        if delay:
            await asyncio.sleep(delay)

        if url not in self.pages:
            raise UpstreamFetchError(
                f"HTTP 404 fetching {url}",
                url=url,
                error_code=ErrorCode.UPSTREAM_BAD_STATUS,
            )

        body = self.pages[url]
        if isinstance(body, Exception):
            raise body
        return body

    async def get_html(self, url, cookies=None, headers=None):
        text = await self.get_text(url, cookies=cookies, headers=headers)
        return parse_html(text, url)


@pytest.fixture
def fake_client():
    """Empty fake upstream; tests fill in ``pages``."""
    return FakeHttpClient()


@pytest.fixture
def make_context():
    """Factory for ExtractContext bound to a fake client."""

    def _make(client, base="http://proxy.test/feeds", feed_id="test"):
        return ExtractContext(client=client, base=base, feed_id=feed_id)

    return _make


# ============================================================================
# Settings
# ============================================================================


@pytest.fixture
def test_settings():
    """Settings without a log file so tests never write to disk."""
    return FeedProxySettings(logging=LoggingSettings(file_path=None))


# ============================================================================
# Sample data
# ============================================================================


@pytest.fixture
def sample_source_item():
    return SourceItem(
        title="T",
        content="<p>body</p>",
        link="https://x/y",
        guid="g1",
        author=Author(name="A", email="a@x"),
        published=datetime(2020, 1, 2, tzinfo=timezone.utc),
    )


@pytest.fixture
def sample_items():
    """Canonical items with links spread over several site sections."""
    links = [
        "https://www.heise.de/security/meldung/one.html",
        "https://www.heise.de/newsticker/meldung/two.html",
        "https://www.heise.de/developer/artikel/three.html",
        "https://www.heise.de/select/ix/2020/4/four",
        "https://www.heise.de/autos/five.html",
    ]
    return [
        CanonicalItem(
            title=f"Item {i}",
            content=f"<p>{i}</p>",
            link=link,
            id=f"id-{i}",
            created=datetime(2020, 1, 10 - i, tzinfo=timezone.utc),
        )
        for i, link in enumerate(links)
    ]


def make_rss(items, title="Upstream", link="https://upstream.test/"):
    """Build a small RSS 2.0 document from (title, link, description) tuples."""
    entries = "".join(
        f"<item><title>{t}</title><link>{l}</link><guid>{l}</guid>"
        f"<description><![CDATA[{d}]]></description>"
        f"<pubDate>Thu, 02 Jan 2020 10:00:00 GMT</pubDate></item>"
        for t, l, d in items
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0"><channel>'
        f"<title>{title}</title><link>{link}</link>"
        "<description>Upstream feed</description>"
        f"{entries}</channel></rss>"
    )


@pytest.fixture
def rss_factory():
    return make_rss


@pytest.fixture
def make_client():
    """FakeHttpClient factory: ``make_client(pages={...}, delays={...})``."""
    return FakeHttpClient
