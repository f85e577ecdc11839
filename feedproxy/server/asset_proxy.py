"""
Asset Proxy
==========

Relays images from an origin that rejects hotlinks, sending the referrer the
origin expects. Status, content type and body bytes are passed through
without inspection.
"""

import asyncio

import aiohttp
from aiohttp import web

from ..config.settings import AssetProxySettings
from ..utils.logging import get_logger_for_component


class AssetProxy:
    """Streaming pass-through for hotlink-protected assets."""

    def __init__(self, session: aiohttp.ClientSession, settings: AssetProxySettings):
        self.session = session
        self.origin = settings.origin
        self.referer = settings.referer
        self.chunk_size = settings.chunk_size
        self.logger = get_logger_for_component("asset_proxy")

    def upstream_url(self, path: str) -> str:
        return f"{self.origin}/{path}"

    async def forward(self, path: str, request: web.Request) -> web.StreamResponse:
        """Fetch ``<origin>/<path>`` and stream it to the caller.

        A transport failure yields an empty 502 response.
        """
        url = self.upstream_url(path)
        headers = {"Referer": self.referer}
        response = None

        try:
            async with self.session.get(url, headers=headers) as upstream:
                response = web.StreamResponse(status=upstream.status)
                content_type = upstream.headers.get(aiohttp.hdrs.CONTENT_TYPE)
                if content_type:
                    response.headers[aiohttp.hdrs.CONTENT_TYPE] = content_type
                await response.prepare(request)

                async for chunk in upstream.content.iter_chunked(self.chunk_size):
                    await response.write(chunk)

                await response.write_eof()
                self.logger.debug(f"Relayed {url}", extra={"status": upstream.status})
                return response

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self.logger.warning(f"Asset fetch failed for {url}: {e}")
            if response is not None and response.prepared:
                # Headers already sent; the truncated body is all we can do.
                return response
            return web.Response(status=502)
