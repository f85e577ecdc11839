"""
Upstream HTTP Client
===================

Shared aiohttp session for every outbound request a feed request makes:
the source feed fetch, per-item page scrapes and archive page scrapes.

Each fetch is attempted exactly once; transport failures and non-2xx
statuses surface as UpstreamFetchError.
"""

import asyncio
import ssl
from contextlib import asynccontextmanager
from typing import Dict, Optional

import aiohttp
import certifi
from bs4 import BeautifulSoup

from ..config.settings import HttpSettings
from ..utils.logging import get_logger_for_component
from ..utils.exceptions import UpstreamFetchError, ParseError, ErrorCode


class HttpClient:
    """Thin wrapper over a shared aiohttp.ClientSession."""

    def __init__(self, session: aiohttp.ClientSession):
        """Initialize client.

        Args:
            session: Open aiohttp session from open_session(); its timeout
                bounds every request
        """
        self.session = session
        self.logger = get_logger_for_component("http_client")

    async def get_text(
        self,
        url: str,
        cookies: Optional[Dict[str, str]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> str:
        """GET a URL and return the decoded body.

        Raises:
            UpstreamFetchError: On transport failure, timeout or non-2xx status
        """
        self.logger.debug(f"Fetching {url}")

        try:
            async with self.session.get(
                url, cookies=cookies, headers=headers
            ) as response:
                if response.status >= 400:
                    raise UpstreamFetchError(
                        f"HTTP {response.status} fetching {url}",
                        url=url,
                        error_code=ErrorCode.UPSTREAM_BAD_STATUS,
                        context={"status": response.status},
                    )
                return await response.text(errors="replace")

        except asyncio.TimeoutError as e:
            raise UpstreamFetchError(
                f"Timeout fetching {url}",
                url=url,
                error_code=ErrorCode.UPSTREAM_TIMEOUT,
            ) from e

        except aiohttp.ClientError as e:
            raise UpstreamFetchError(f"Fetch error for {url}: {e}", url=url) from e

    async def get_html(
        self,
        url: str,
        cookies: Optional[Dict[str, str]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> BeautifulSoup:
        """GET a page and parse it into a BeautifulSoup document.

        Raises:
            UpstreamFetchError: On fetch failure
            ParseError: If the body cannot be parsed as HTML
        """
        text = await self.get_text(url, cookies=cookies, headers=headers)
        return parse_html(text, url)


def parse_html(text: str, url: Optional[str] = None) -> BeautifulSoup:
    """Parse an HTML document with the stdlib-backed bs4 parser."""
    try:
        return BeautifulSoup(text, "html.parser")
    except Exception as e:
        raise ParseError(
            f"HTML parse error: {e}", url=url, error_code=ErrorCode.HTML_PARSE_ERROR
        ) from e


def build_ssl_context() -> ssl.SSLContext:
    return ssl.create_default_context(cafile=certifi.where())


@asynccontextmanager
async def open_session(settings: HttpSettings):
    """Open the process-wide aiohttp session."""
    connector = aiohttp.TCPConnector(
        ssl=build_ssl_context(),
        limit=settings.max_concurrent_items * 4,
        enable_cleanup_closed=True,
    )

    timeout = aiohttp.ClientTimeout(total=settings.request_timeout)

    headers = {
        "User-Agent": settings.user_agent,
        "Accept-Encoding": "gzip, deflate",
    }

    async with aiohttp.ClientSession(
        connector=connector, timeout=timeout, headers=headers
    ) as session:
        yield session
