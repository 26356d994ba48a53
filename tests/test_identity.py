import hashlib

import pytest

from common.embed.errors import UnknownContentType
from common.embed.identity import content_identity, hash_url, identify, sniff, url_extension


def test_hash_url_is_md5_hex_of_url():
    url = "https://cdn.example.com/banner.png"
    assert hash_url(url) == hashlib.md5(url.encode("utf-8")).hexdigest()
    assert hash_url(url) == hash_url(url)
    assert hash_url(url) != hash_url(url + "?v=2")


def test_url_extension_ignores_query_and_fragment():
    assert url_extension("https://a.example/x/banner.PNG?w=100#top") == "png"
    assert url_extension("https://a.example/photos/coat") == ""
    assert url_extension("https://a.example/") == ""
    assert url_extension("https://a.example/dir.v2/coat") == ""


def test_identify_is_deterministic_and_keeps_path_suffix():
    url = "https://cdn.example.com/banner.png?x=1"
    assert identify(url) == f"{hash_url(url)}.png"
    assert identify(url) == identify(url)
    assert identify("https://cdn.example.com/coat") == hash_url("https://cdn.example.com/coat")


def test_sniff_known_signatures(png_bytes, jpeg_bytes, gif_bytes):
    assert sniff(png_bytes) == ("image/png", "png")
    assert sniff(jpeg_bytes) == ("image/jpeg", "jpg")
    assert sniff(gif_bytes) == ("image/gif", "gif")


def test_sniff_svg():
    svg = b'<?xml version="1.0"?>\n<svg xmlns="http://www.w3.org/2000/svg" width="1" height="1"/>'
    assert sniff(svg) == ("image/svg+xml", "svg")


@pytest.mark.parametrize("data", [b"", b"<html>not an image</html>", b"\x00\x01\x02 random"])
def test_sniff_unknown_raises(data):
    with pytest.raises(UnknownContentType):
        sniff(data)


def test_content_identity_uses_sniffed_extension_not_url(png_bytes):
    url = "https://cdn.example.com/lies.jpg"
    ident = content_identity(url, png_bytes)

    assert ident.basename == hash_url(url)
    assert ident.mime == "image/png"
    assert ident.name == f"{hash_url(url)}.png"
