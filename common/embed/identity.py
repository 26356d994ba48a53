from __future__ import annotations

import hashlib
import posixpath
import re
from typing import Tuple
from urllib.parse import urlsplit

import filetype

from .errors import UnknownContentType
from .types import ContentIdentity

_SVG_RE = re.compile(rb"^\s*(<\?xml[^>]*>\s*)?(<!--.*?-->\s*)*(<!DOCTYPE svg[^>]*>\s*)?<svg[\s>]", re.S | re.I)
_SNIFF_WINDOW = 1024


def hash_url(url: str) -> str:
    return hashlib.md5(url.encode("utf-8")).hexdigest()


def url_extension(url: str) -> str:
    path = urlsplit(url).path
    ext = posixpath.splitext(posixpath.basename(path))[1]
    return ext[1:].lower()


def identify(url: str) -> str:
    """On-disk basename for ``url``: the URL hash plus the URL's path extension, if any."""
    ext = url_extension(url)
    return f"{hash_url(url)}.{ext}" if ext else hash_url(url)


def sniff(data: bytes) -> Tuple[str, str]:
    """Return ``(mime, extension)`` detected from the leading bytes of ``data``.

    Binary formats are matched against ``filetype``'s signature table. SVG has no
    magic number, so its root element is matched textually.
    """
    kind = filetype.guess(data) if data else None
    if kind is not None:
        return kind.mime, kind.extension
    if _SVG_RE.match(data[:_SNIFF_WINDOW]):
        return "image/svg+xml", "svg"
    raise UnknownContentType(f"no known signature in {len(data)} bytes")


def content_identity(url: str, data: bytes) -> ContentIdentity:
    mime, extension = sniff(data)
    return ContentIdentity(basename=hash_url(url), mime=mime, extension=extension)
