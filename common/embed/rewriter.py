from __future__ import annotations

from typing import Mapping, Set

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from .errors import HtmlParseError

_REMOTE_PREFIXES = ("http://", "https://")


def is_remote(src: str | None) -> bool:
    return bool(src) and src.startswith(_REMOTE_PREFIXES)


class ImageDocument:
    def __init__(self, html: str) -> None:
        try:
            self.soup = BeautifulSoup(html, "html.parser")
        except ParserRejectedMarkup as exc:
            raise HtmlParseError(f"cannot parse as HTML: {exc}") from exc

    def image_urls(self) -> Set[str]:
        urls = (img.get("src") for img in self.soup.select("img"))
        return {src for src in urls if is_remote(src)}

    def rewrite(self, url_to_id: Mapping[str, str]) -> int:
        rewritten = 0
        for img in self.soup.select("img"):
            cid = url_to_id.get(img.get("src"))
            if cid is None:
                continue
            img["src"] = f"cid:{cid}"
            rewritten += 1
        return rewritten

    def html(self) -> str:
        return str(self.soup)


def extract_image_urls(html: str) -> Set[str]:
    return ImageDocument(html).image_urls()


def rewrite(html: str, url_to_id: Mapping[str, str]) -> str:
    doc = ImageDocument(html)
    doc.rewrite(url_to_id)
    return doc.html()
