"""Asynchronous fetch-or-``None`` asset loading.

Overlay art is optional: a faction may simply not ship a given arc graphic.
The loader therefore never raises for a missing or broken asset; it logs the
reason at debug level and resolves to ``None`` so the render carries on
without that layer.
"""

import asyncio
import io
import logging
from typing import Dict, Mapping, Optional
from urllib.parse import urlparse
from urllib.request import url2pathname

import aiohttp
from PIL import Image

from xwing_base.types import AssetId, ExecutionContext

logger = logging.getLogger(__name__)

ASSET_EXTENSION = ".png"
DEFAULT_TIMEOUT = 10.0

# Anonymous cross-origin request: the fetched pixels stay exportable.
CROSS_ORIGIN_HEADERS: Mapping[str, str] = {"Sec-Fetch-Mode": "cors"}


def detect_context(asset_root: str) -> ExecutionContext:
    """Network when the asset root is an http(s) URL, local file otherwise."""
    if asset_root.lower().startswith(("http://", "https://")):
        return ExecutionContext.NETWORK
    return ExecutionContext.LOCAL_FILE


def local_root(asset_root: str) -> str:
    """Filesystem path for a local asset root, accepting ``file://`` URLs."""
    if asset_root.lower().startswith("file://"):
        return url2pathname(urlparse(asset_root).path)
    return asset_root


def asset_location(asset_root: str, asset_id: AssetId) -> str:
    return f"{asset_root.rstrip('/')}/{asset_id}{ASSET_EXTENSION}"


def decode_image(data: bytes) -> Image.Image:
    """Decode raster bytes into a fully loaded RGBA image."""
    with Image.open(io.BytesIO(data)) as img:
        return img.convert("RGBA")


def read_image(path: str) -> Image.Image:
    with Image.open(path) as img:
        return img.convert("RGBA")


class AssetLoader:
    """Loads raster assets by identifier for one execution context.

    Args:
        asset_root: Directory or base URL holding the asset namespace.
        context: Execution context; detected from ``asset_root`` if omitted.
        timeout: Total seconds allowed per network request.
    """

    asset_root: str
    context: ExecutionContext
    timeout: float

    def __init__(
        self,
        asset_root: str,
        context: Optional[ExecutionContext] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.context = context or detect_context(asset_root)
        if self.context is ExecutionContext.LOCAL_FILE:
            asset_root = local_root(asset_root)
        self.asset_root = asset_root
        self.timeout = timeout
        self._cache: Dict[AssetId, Image.Image] = {}

    @property
    def request_headers(self) -> Mapping[str, str]:
        """Headers sent with each fetch; local file loads must not be marked."""
        if self.context is ExecutionContext.NETWORK:
            return dict(CROSS_ORIGIN_HEADERS)
        return {}

    async def load(self, asset_id: Optional[AssetId]) -> Optional[Image.Image]:
        if asset_id is None:
            return None
        if asset_id in self._cache:
            return self._cache[asset_id]

        location = asset_location(self.asset_root, asset_id)
        try:
            if self.context is ExecutionContext.NETWORK:
                image = await self._fetch(location)
            else:
                image = await asyncio.to_thread(read_image, location)
        except Exception as e:
            logger.debug("Asset unavailable: %s (%s)", location, e)
            return None

        self._cache[asset_id] = image
        return image

    async def _fetch(self, url: str) -> Image.Image:
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        # DummyCookieJar keeps the request credential-free.
        async with aiohttp.ClientSession(
            timeout=timeout, cookie_jar=aiohttp.DummyCookieJar()
        ) as session:
            async with session.get(url, headers=self.request_headers) as resp:
                resp.raise_for_status()
                data = await resp.read()
        return await asyncio.to_thread(decode_image, data)
