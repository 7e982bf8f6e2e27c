import asyncio

import httpx
import pytest

from curricula.exceptions import UpstreamError, ValidationError
from curricula.services.page_fetch import PageFetcher, find_preview_image

PAGE_URL = "https://example.com/courses/focus"


def make_fetcher(page_html="<html></html>", reader_status=200, page_status=200, requests=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        if request.url.host == "r.jina.ai":
            return httpx.Response(reader_status, text="# Focus\nA course about focus.")
        if request.url.host == "example.com":
            return httpx.Response(page_status, text=page_html)
        raise httpx.ConnectError("unexpected host", request=request)

    return PageFetcher(
        reader_base_url="https://r.jina.ai/",
        timeout=5,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.parametrize("html,expected", [
    ('<meta property="og:image" content="https://cdn.example.com/cover.png">', "https://cdn.example.com/cover.png"),
    ("<meta content='https://cdn.example.com/cover.png' property='og:image' />", "https://cdn.example.com/cover.png"),
    ('<meta name="twitter:image" content="https://cdn.example.com/card.png">', "https://cdn.example.com/card.png"),
    ('<meta property="og:image" content="/img/cover.png">', "https://example.com/img/cover.png"),
    ("<title>No image here</title>", None),
])
def test_find_preview_image(html, expected):
    assert find_preview_image(html, PAGE_URL) == expected


def test_og_image_wins_over_twitter_image():
    html = (
        '<meta name="twitter:image" content="https://cdn.example.com/card.png">'
        '<meta property="og:image" content="https://cdn.example.com/og.png">'
    )
    assert find_preview_image(html, PAGE_URL) == "https://cdn.example.com/og.png"


def test_fetch_returns_markdown_and_image():
    requests = []
    fetcher = make_fetcher(
        page_html='<head><meta property="og:image" content="/og.png"></head>',
        requests=requests,
    )

    page = asyncio.run(fetcher.fetch(PAGE_URL))

    assert page.markdown.startswith("# Focus")
    assert page.image_url == "https://example.com/og.png"
    assert requests[0].url.host == "r.jina.ai"
    assert str(requests[0].url).endswith("/courses/focus")


def test_fetch_succeeds_without_image_when_page_fails():
    fetcher = make_fetcher(page_status=403)

    page = asyncio.run(fetcher.fetch(PAGE_URL))

    assert page.markdown.startswith("# Focus")
    assert page.image_url is None


def test_reader_failure_raises_upstream_error():
    fetcher = make_fetcher(reader_status=502)

    with pytest.raises(UpstreamError, match="Failed to fetch page: 502"):
        asyncio.run(fetcher.fetch(PAGE_URL))


@pytest.mark.parametrize("url", ["not a url", "ftp://example.com/file", "https://", ""])
def test_invalid_url_is_rejected_before_any_request(url):
    requests = []
    fetcher = make_fetcher(requests=requests)

    with pytest.raises(ValidationError, match="Invalid URL"):
        asyncio.run(fetcher.fetch(url))
    assert requests == []
