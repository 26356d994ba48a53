from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional

import httpx

from cli.app.config import settings
from common.embed.errors import FetchError

LOG = logging.getLogger(__name__)


class FetchClient:
    def __init__(
        self,
        proxy: Optional[str] = settings.http_proxy,
        timeout: float = settings.fetch_timeout_seconds,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.proxy = proxy
        self.timeout = timeout
        if proxy:
            LOG.info("using proxy %s", proxy)
        self._client = httpx.AsyncClient(
            proxy=proxy,
            follow_redirects=True,
            trust_env=False,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def __aenter__(self) -> "FetchClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> bytes:
        try:
            resp = await asyncio.wait_for(self._client.get(url, headers=headers), self.timeout)
            resp.raise_for_status()
        except asyncio.TimeoutError as exc:
            raise FetchError(url, f"timed out after {self.timeout:g}s") from exc
        except httpx.InvalidURL as exc:
            raise FetchError(url, f"invalid url: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            raise FetchError(url, f"status {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise FetchError(url, str(exc) or type(exc).__name__) from exc
        return resp.content
