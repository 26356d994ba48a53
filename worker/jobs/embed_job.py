from __future__ import annotations

import asyncio
import logging
from email.errors import MessageError
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from cli.app.config import settings
from common.clients.fetch_client import FetchClient
from common.embed.errors import EmbedEmailError, NoInputFiles, NotHtmlEmail
from common.embed.fetcher import BoundedFetcher, Client
from common.embed.registry import register
from common.embed.rewriter import ImageDocument
from common.ingest.email_codec import decode_email, encode_email
from common.storage.media_cache import MediaCache

LOG = logging.getLogger(__name__)


async def embed_email(raw: bytes, *, client: Client, cache: MediaCache) -> bytes:
    try:
        email = decode_email(raw)
    except (MessageError, ValueError) as exc:
        raise EmbedEmailError(f"cannot decode email: {exc}") from exc
    if email.html is None:
        raise NotHtmlEmail("email has no HTML body")

    doc = ImageDocument(email.html)
    urls = doc.image_urls()

    fetched = await BoundedFetcher(client, cache).fetch_all(urls)
    attachments, url_to_id = register(fetched, email.attachments)
    doc.rewrite(url_to_id)
    LOG.info("embedded %s of %s images", len(url_to_id), len(urls))

    rebuilt = email.model_copy(update={"html": doc.html(), "attachments": attachments})
    return encode_email(rebuilt)


def embed(
    raw: bytes,
    *,
    client: Optional[Client] = None,
    cache: Optional[MediaCache] = None,
) -> bytes:
    async def _run() -> bytes:
        if client is not None:
            return await embed_email(raw, client=client, cache=cache or MediaCache())
        async with FetchClient() as own:
            return await embed_email(raw, client=own, cache=cache or MediaCache())

    return asyncio.run(_run())


def output_path(
    path: str | Path,
    input_suffix: str = settings.input_suffix,
    output_suffix: str = settings.output_suffix,
) -> Path:
    path = Path(path)
    name = path.name
    if name.endswith(input_suffix):
        name = name[: -len(input_suffix)]
    return path.with_name(name + output_suffix)


def discover(
    root: str | Path = ".",
    input_suffix: str = settings.input_suffix,
    output_suffix: str = settings.output_suffix,
    media_dir: str | Path = settings.media_dir,
) -> List[Path]:
    root = Path(root)
    media = (root / media_dir).resolve()
    found = []
    for path in root.rglob(f"*{input_suffix}"):
        if not path.is_file() or path.name.endswith(output_suffix):
            continue
        if media in path.resolve().parents:
            continue
        found.append(path)
    return sorted(found)


def resolve_inputs(args: Sequence[str], root: str | Path = ".") -> List[Path]:
    if not args or f"*{settings.input_suffix}" in args:
        paths = discover(root)
    else:
        paths = [Path(a) for a in args]
    if not paths:
        raise NoInputFiles(f"no {settings.input_suffix} given")
    return paths


async def process_file(path: Path, *, client: Client, cache: MediaCache) -> Path:
    LOG.info("process %s", path)
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise EmbedEmailError(f"cannot read {path}: {exc}") from exc

    try:
        embedded = await embed_email(raw, client=client, cache=cache)
    except EmbedEmailError as exc:
        raise type(exc)(f"{path}: {exc}") from exc

    out = output_path(path)
    try:
        out.write_bytes(embedded)
    except OSError as exc:
        raise EmbedEmailError(f"cannot write {out}: {exc}") from exc
    LOG.info("wrote %s", out)
    return out


async def _run_batch_async(paths: Iterable[Path], client: Optional[Client], cache: MediaCache) -> List[Path]:
    if client is None:
        async with FetchClient() as own:
            return await _run_batch_async(paths, own, cache)
    return [await process_file(path, client=client, cache=cache) for path in paths]


def run_batch(
    paths: Iterable[Path],
    *,
    client: Optional[Client] = None,
    cache: Optional[MediaCache] = None,
) -> List[Path]:
    return asyncio.run(_run_batch_async(list(paths), client, cache or MediaCache()))
