"""
HTTP Surface
===========

aiohttp application exposing two routes:

    GET /{base}/webtoons/{path}   asset proxy pass-through
    GET /{base}/{feed}            serialized feed for a registry identifier

The asset route is registered first so that ``webtoons`` is never looked up
as a feed identifier.
"""

from typing import Optional

from aiohttp import web

from ..config.settings import FeedProxySettings, get_settings
from ..core.registry import ExtractorRegistry, build_registry
from ..ingestion.http_client import HttpClient, open_session
from ..processing.pipeline import FeedPipeline
from ..utils.logging import get_logger_for_component
from ..utils.exceptions import FeedProxyError, UnknownFeedError
from .asset_proxy import AssetProxy

RSS_CONTENT_TYPE = "application/rss+xml; charset=utf-8"

SETTINGS_KEY = web.AppKey("settings", FeedProxySettings)
REGISTRY_KEY = web.AppKey("registry", ExtractorRegistry)
PIPELINE_KEY = web.AppKey("pipeline", FeedPipeline)
ASSET_PROXY_KEY = web.AppKey("asset_proxy", AssetProxy)

logger = get_logger_for_component("server")


def request_base(request: web.Request, settings: FeedProxySettings) -> str:
    """``<scheme>://<host>/<base>`` as seen by the caller."""
    scheme = settings.server.public_scheme or request.scheme
    return f"{scheme}://{request.host}/{request.match_info['base']}"


async def handle_feed(request: web.Request) -> web.Response:
    feed_id = request.match_info["feed"]
    pipeline = request.app[PIPELINE_KEY]
    base = request_base(request, request.app[SETTINGS_KEY])

    try:
        body = await pipeline.render(feed_id, base)
    except UnknownFeedError:
        raise web.HTTPNotFound()
    except FeedProxyError as e:
        logger.warning(f"Feed {feed_id} failed: {e}", extra=e.to_dict())
        return web.Response(status=412, text=str(e), content_type="text/plain")

    return web.Response(
        body=body.encode("utf-8"),
        headers={"Content-Type": RSS_CONTENT_TYPE},
    )


async def handle_asset(request: web.Request) -> web.StreamResponse:
    proxy = request.app[ASSET_PROXY_KEY]
    return await proxy.forward(request.match_info["path"], request)


def create_app(
    settings: Optional[FeedProxySettings] = None,
    registry: Optional[ExtractorRegistry] = None,
) -> web.Application:
    """Build the application.

    The upstream session lives for the lifetime of the app and is shared by
    the pipeline and the asset proxy.
    """
    settings = settings or get_settings()
    registry = registry or build_registry()

    app = web.Application()
    app[SETTINGS_KEY] = settings
    app[REGISTRY_KEY] = registry

    async def upstream_session(app: web.Application):
        async with open_session(settings.http) as session:
            client = HttpClient(session)
            app[PIPELINE_KEY] = FeedPipeline(registry, client, settings.http)
            app[ASSET_PROXY_KEY] = AssetProxy(session, settings.asset_proxy)
            logger.info(f"Serving {len(registry)} feeds")
            yield

    app.cleanup_ctx.append(upstream_session)
    app.router.add_get("/{base}/webtoons/{path:.*}", handle_asset)
    app.router.add_get("/{base}/{feed}", handle_feed)
    return app


def run(settings: Optional[FeedProxySettings] = None) -> None:
    """Serve until interrupted."""
    settings = settings or get_settings()
    logger.info(f"Starting server on {settings.server.host}:{settings.server.port}")
    web.run_app(
        create_app(settings),
        host=settings.server.host,
        port=settings.server.port,
        print=None,
    )
