"""
Server Package
=============

aiohttp application and the image asset proxy.
"""

from .app import create_app, run
from .asset_proxy import AssetProxy

__all__ = ["create_app", "run", "AssetProxy"]
