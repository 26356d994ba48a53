import io
import sys
from pathlib import Path

import pytest
from dotenv import load_dotenv
from PIL import Image


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

load_dotenv(ROOT / ".env")


@pytest.fixture
def anyio_backend():
    return "asyncio"


def image_bytes(fmt: str, color=(200, 30, 30)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (4, 4), color).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture(scope="session")
def png_bytes() -> bytes:
    return image_bytes("PNG")


@pytest.fixture(scope="session")
def jpeg_bytes() -> bytes:
    return image_bytes("JPEG")


@pytest.fixture(scope="session")
def gif_bytes() -> bytes:
    return image_bytes("GIF")


class StubClient:
    """Fetch client double: serves canned bytes, fails for everything else."""

    def __init__(self, responses=None, delay: float = 0.0):
        self.responses = dict(responses or {})
        self.delay = delay
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def get(self, url, headers=None):
        import anyio

        from common.embed.errors import FetchError

        self.calls.append((url, dict(headers or {})))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await anyio.sleep(self.delay)
            body = self.responses.get(url)
            if isinstance(body, Exception):
                raise body
            if body is None:
                raise FetchError(url, "connection refused")
            return body
        finally:
            self.in_flight -= 1


@pytest.fixture
def stub_client():
    return StubClient


@pytest.fixture
def cache(tmp_path):
    from common.storage.media_cache import MediaCache

    return MediaCache(tmp_path / "media")
