import asyncio
import io
from pathlib import Path
from typing import Dict, List

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer as AiohttpServer
from PIL import Image

from xwing_base.loader import (
    CROSS_ORIGIN_HEADERS,
    AssetLoader,
    asset_location,
    detect_context,
    local_root,
)
from xwing_base.types import ExecutionContext
from tests.test_utils import solid, write_png


@pytest.mark.parametrize(
    "root, expected",
    [
        ("assets/img", ExecutionContext.LOCAL_FILE),
        ("/srv/assets", ExecutionContext.LOCAL_FILE),
        ("http://localhost:8000/img", ExecutionContext.NETWORK),
        ("HTTPS://cdn.example.org/img", ExecutionContext.NETWORK),
    ],
)
def test_detect_context(root: str, expected: ExecutionContext) -> None:
    assert detect_context(root) is expected
    assert AssetLoader(root).context is expected


def test_asset_location_appends_extension() -> None:
    assert asset_location("img/", "small/ship-tile-small") == "img/small/ship-tile-small.png"


def test_cross_origin_marking_only_in_network_context() -> None:
    assert AssetLoader("assets").request_headers == {}
    assert AssetLoader("http://host/img").request_headers == dict(CROSS_ORIGIN_HEADERS)
    explicit = AssetLoader("http://host/img", context=ExecutionContext.LOCAL_FILE)
    assert explicit.request_headers == {}


def test_none_id_resolves_to_none_without_io(tmp_path: Path) -> None:
    loader = AssetLoader(str(tmp_path / "does-not-exist"))
    assert asyncio.run(loader.load(None)) is None


def test_local_load(tmp_path: Path) -> None:
    write_png(tmp_path, "small/ship-tile-small", solid((30, 20), (1, 2, 3, 255)).convert("RGB"))
    loader = AssetLoader(str(tmp_path))
    img = asyncio.run(loader.load("small/ship-tile-small"))
    assert img is not None
    assert img.size == (30, 20)
    assert img.mode == "RGBA"


def test_file_url_root_is_read_from_disk(tmp_path: Path) -> None:
    write_png(tmp_path, "small/ship-tile-small", solid((12, 12), (5, 6, 7, 255)))
    loader = AssetLoader(tmp_path.as_uri())
    assert loader.context is ExecutionContext.LOCAL_FILE
    assert loader.asset_root == str(tmp_path)
    img = asyncio.run(loader.load("small/ship-tile-small"))
    assert img is not None
    assert img.size == (12, 12)


@pytest.mark.parametrize(
    "root, expected",
    [
        ("assets/img", "assets/img"),
        ("file:///srv/assets/img", "/srv/assets/img"),
        ("FILE:///srv/my%20assets", "/srv/my assets"),
    ],
)
def test_local_root(root: str, expected: str) -> None:
    assert local_root(root) == expected


def test_missing_asset_resolves_to_none(tmp_path: Path) -> None:
    loader = AssetLoader(str(tmp_path))
    assert asyncio.run(loader.load("small/rebel-alliance/rebel-alliance-small-frontarc")) is None


def test_corrupt_asset_resolves_to_none(tmp_path: Path) -> None:
    path = tmp_path / "small" / "ship-tile-small.png"
    path.parent.mkdir(parents=True)
    path.write_bytes(b"definitely not a png")
    loader = AssetLoader(str(tmp_path))
    assert asyncio.run(loader.load("small/ship-tile-small")) is None


def test_successful_loads_are_cached(tmp_path: Path) -> None:
    path = write_png(tmp_path, "small/ship-tile-small", solid((8, 8), (9, 9, 9, 255)))
    loader = AssetLoader(str(tmp_path))

    async def scenario() -> None:
        first = await loader.load("small/ship-tile-small")
        path.unlink()
        second = await loader.load("small/ship-tile-small")
        assert first is second

    asyncio.run(scenario())


def test_missing_assets_are_not_cached(tmp_path: Path) -> None:
    loader = AssetLoader(str(tmp_path))

    async def scenario() -> None:
        assert await loader.load("small/ship-tile-small") is None
        write_png(tmp_path, "small/ship-tile-small", solid((8, 8), (9, 9, 9, 255)))
        assert await loader.load("small/ship-tile-small") is not None

    asyncio.run(scenario())


def _png_bytes() -> bytes:
    buf = io.BytesIO()
    solid((16, 12), (10, 20, 30, 255)).save(buf, format="PNG")
    return buf.getvalue()


def test_network_load_marks_requests_and_tolerates_404() -> None:
    seen: List[Dict[str, str]] = []
    payload = _png_bytes()

    async def tile(request: web.Request) -> web.Response:
        seen.append(dict(request.headers))
        return web.Response(body=payload, content_type="image/png")

    async def scenario() -> None:
        app = web.Application()
        app.router.add_get("/img/small/ship-tile-small.png", tile)
        async with AiohttpServer(app) as server:
            loader = AssetLoader(f"http://{server.host}:{server.port}/img")
            assert loader.context is ExecutionContext.NETWORK
            img = await loader.load("small/ship-tile-small")
            assert img is not None
            assert img.size == (16, 12)
            missing = await loader.load("small/rebel-alliance/rebel-alliance-small-reararc")
            assert missing is None

    asyncio.run(scenario())
    assert len(seen) == 1
    assert seen[0].get("Sec-Fetch-Mode") == "cors"
    assert "Cookie" not in seen[0]


def test_network_decode_failure_resolves_to_none() -> None:
    async def garbage(request: web.Request) -> web.Response:
        return web.Response(body=b"<html>oops</html>", content_type="text/html")

    async def scenario() -> None:
        app = web.Application()
        app.router.add_get("/small/ship-tile-small.png", garbage)
        async with AiohttpServer(app) as server:
            loader = AssetLoader(f"http://{server.host}:{server.port}")
            assert await loader.load("small/ship-tile-small") is None

    asyncio.run(scenario())


def test_decoded_image_is_detached_from_file(tmp_path: Path) -> None:
    path = write_png(tmp_path, "medium/ship-tile-medium", solid((4, 4), (0, 0, 0, 255)))
    img = asyncio.run(AssetLoader(str(tmp_path)).load("medium/ship-tile-medium"))
    path.unlink()
    assert isinstance(img, Image.Image)
    assert img.getpixel((0, 0)) == (0, 0, 0, 255)
