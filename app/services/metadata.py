import logging

import httpx
from bs4 import BeautifulSoup

from ..core.errors import InvalidInput, NetworkError, ReadError
from ..core.models import LinkPreview

"""Link previews: fetch a page and pull title/description/image from its head.
"""

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; ImageCDNService/1.0; +link-preview)"


def _content(soup: BeautifulSoup, selector: str) -> str:
    tag = soup.select_one(selector)
    if tag is None:
        return ""
    return (tag.get("content") or "").strip()


def _meta(soup: BeautifulSoup, key: str) -> str:
    """First non-empty of meta name=key, og:key, twitter:key."""
    for selector in (
        f"meta[name='{key}']",
        f"meta[property='og:{key}']",
        f"meta[property='twitter:{key}']",
    ):
        value = _content(soup, selector)
        if value:
            return value
    return ""


def extract(html: str) -> LinkPreview:
    """Extract a LinkPreview from an HTML document.

    Malformed markup is parsed as far as possible; missing tags give empty
    strings.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    title = soup.title.get_text().strip() if soup.title else ""
    return LinkPreview(
        title=title or _meta(soup, "title"),
        description=_meta(soup, "description"),
        image=_meta(soup, "image"),
    )


class LinkPreviewer:
    """Fetches a URL once and extracts its preview metadata."""

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def preview(self, url: str) -> LinkPreview:
        if not url or not url.strip():
            raise InvalidInput("No URL provided")

        try:
            async with self.client.stream("GET", url) as response:
                if response.is_error:
                    # Error pages often still carry usable head metadata
                    logger.warning("Link preview got HTTP %s from %s", response.status_code, url)
                try:
                    await response.aread()
                    html = response.text
                except (httpx.TransportError, httpx.DecodingError, UnicodeDecodeError, LookupError) as e:
                    logger.warning("Link preview body read failed for %s: %s", url, e)
                    raise ReadError("Failed to read link preview", details=_describe(e)) from e
        except httpx.RequestError as e:
            # transport failures, redirect loops
            logger.warning("Link preview fetch failed for %s: %s", url, e)
            raise NetworkError("Failed to fetch link preview", details=_describe(e)) from e
        except httpx.InvalidURL as e:
            raise InvalidInput("Invalid URL", details=str(e)) from e

        return extract(html)


def _describe(exc: Exception) -> str:
    return str(exc) or type(exc).__name__
