import os, sys
import asyncio

import httpx
import pytest

# Ensure project root on path for `import app...`
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from app.core.errors import InvalidInput, NetworkError, ReadError
from app.services.metadata import LinkPreviewer, extract


def test_extract_title_and_og_description():
    html = '<html><head><title>T</title><meta property="og:description" content="D"></head></html>'
    preview = extract(html)
    assert preview.model_dump() == {"title": "T", "description": "D", "image": ""}


def test_extract_title_falls_back_to_meta_title():
    html = '<html><head><meta name="title" content="X"></head><body></body></html>'
    assert extract(html).title == "X"


def test_extract_meta_precedence_name_og_twitter():
    html = """
    <html><head>
      <meta property="twitter:description" content="from twitter">
      <meta property="og:description" content="from og">
      <meta name="description" content="from name">
      <meta property="twitter:image" content="https://img.example/t.png">
      <meta property="og:image" content="">
    </head></html>
    """
    preview = extract(html)
    assert preview.description == "from name"
    # empty og:image falls through to twitter
    assert preview.image == "https://img.example/t.png"


def test_extract_empty_title_uses_og_title():
    html = '<title>   </title><meta property="og:title" content="OG Title">'
    assert extract(html).title == "OG Title"


@pytest.mark.parametrize(
    "html",
    ["", "not html at all", "<html><head><title>Unclosed", "<meta content=>>><<div", None],
)
def test_extract_malformed_markup_never_raises(html):
    preview = extract(html)
    assert preview.description == ""
    assert preview.image == ""


def _previewer(handler, **client_kwargs) -> LinkPreviewer:
    return LinkPreviewer(httpx.AsyncClient(transport=httpx.MockTransport(handler), **client_kwargs))


def test_preview_fetches_and_extracts_success():
    seen = []

    def handler(request):
        seen.append(str(request.url))
        return httpx.Response(
            200,
            html='<title>Example</title><meta property="og:image" content="https://example.com/i.png">',
        )

    preview = asyncio.run(_previewer(handler).preview("https://example.com/page"))
    assert seen == ["https://example.com/page"]
    assert preview.title == "Example"
    assert preview.image == "https://example.com/i.png"
    assert preview.description == ""


def test_preview_extracts_from_error_pages():
    def handler(request):
        return httpx.Response(404, html="<title>Not Found</title>")

    preview = asyncio.run(_previewer(handler).preview("https://example.com/missing"))
    assert preview.title == "Not Found"


@pytest.mark.parametrize("url", ["", "   "])
def test_preview_requires_url_failure(url):
    def handler(request):
        raise AssertionError("no request expected")

    with pytest.raises(InvalidInput):
        asyncio.run(_previewer(handler).preview(url))


def test_preview_network_error_failure():
    def handler(request):
        raise httpx.ConnectError("name resolution failed", request=request)

    with pytest.raises(NetworkError) as info:
        asyncio.run(_previewer(handler).preview("https://nowhere.invalid/"))
    assert info.value.status_code == 500
    assert "name resolution failed" in info.value.details


def test_preview_timeout_is_network_error():
    def handler(request):
        raise httpx.ReadTimeout("", request=request)

    with pytest.raises(NetworkError) as info:
        asyncio.run(_previewer(handler).preview("https://slow.example/"))
    assert info.value.details == "ReadTimeout"


class _BrokenStream(httpx.AsyncByteStream):
    async def __aiter__(self):
        yield b"<html><head><title>partial"
        raise httpx.ReadError("connection reset")


def test_preview_body_read_error_failure():
    def handler(request):
        return httpx.Response(200, stream=_BrokenStream())

    with pytest.raises(ReadError) as info:
        asyncio.run(_previewer(handler).preview("https://flaky.example/"))
    assert "connection reset" in info.value.details


def test_preview_redirect_loop_is_network_error():
    def handler(request):
        return httpx.Response(302, headers={"Location": "https://loop.example/"})

    previewer = _previewer(handler, follow_redirects=True)
    with pytest.raises(NetworkError) as info:
        asyncio.run(previewer.preview("https://loop.example/"))
    assert "redirect" in info.value.details.lower()


def test_preview_corrupt_content_encoding_is_read_error():
    def handler(request):
        return httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"not gzip at all")

    with pytest.raises(ReadError) as info:
        asyncio.run(_previewer(handler).preview("https://broken-gzip.example/"))
    assert info.value.status_code == 500
    assert info.value.details
