from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Dict, Iterable, Optional, Protocol

from cli.app.config import settings
from common.storage.media_cache import MediaCache

from .errors import FetchError
from .identity import identify
from .types import FetchedResource

LOG = logging.getLogger(__name__)


class Client(Protocol):
    async def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> bytes: ...


class BoundedFetcher:
    def __init__(
        self,
        client: Client,
        cache: MediaCache,
        concurrency: int = settings.fetch_concurrency,
        reuse_cache: bool = settings.reuse_cache,
        user_agent: str = settings.user_agent,
    ) -> None:
        self.client = client
        self.cache = cache
        self.concurrency = concurrency
        self.reuse_cache = reuse_cache
        self.headers = {"user-agent": user_agent}

    async def fetch_all(self, urls: Iterable[str]) -> Dict[str, Path]:
        """Download every distinct URL, at most ``concurrency`` at a time.

        Returns URL -> cached file for the downloads that succeeded. Failed URLs
        are logged and left out; completion order is not meaningful.
        """
        permits = asyncio.Semaphore(self.concurrency)
        distinct = list(dict.fromkeys(urls))
        results = await asyncio.gather(*(self._fetch_one(url, permits) for url in distinct))
        return {res.url: res.path for res in results if res is not None}

    async def _fetch_one(self, url: str, permits: asyncio.Semaphore) -> Optional[FetchedResource]:
        try:
            name = identify(url)
        except ValueError as exc:
            LOG.warning("download %s failed: %s", url, exc)
            return None

        if self.reuse_cache and self.cache.exists(name):
            path = self.cache.path_for(name).resolve()
            LOG.debug("download %s skipped, cached at %s", url, path)
            return FetchedResource(url=url, path=path, size_bytes=path.stat().st_size)

        async with permits:
            task = asyncio.current_task()
            task_name = task.get_name() if task else "-"
            LOG.debug("download %s with %s start", url, task_name)
            try:
                data = await self.client.get(url, headers=self.headers)
                path = self.cache.put(name, data)
            except (FetchError, OSError) as exc:
                LOG.warning("download %s failed: %s", url, exc)
                return None

        res = FetchedResource(url=url, path=path, size_bytes=len(data))
        LOG.debug("download %s with %s done, %s bytes", url, task_name, res.size_bytes)
        return res
