"""HTTP fetcher returning raw bytes; decoding is left to the loader."""

from __future__ import annotations

import random
from urllib.parse import urlsplit

import httpx

from paperscraper.config import settings
from paperscraper.scraper.models import RawDocument

# ---------------------------------------------------------------------------
# Browser-like request headers
# ---------------------------------------------------------------------------
_USER_AGENTS = [
    # Chrome on Windows
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/118.0.0.0 Safari/537.36",
    # Chrome on Mac
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36",
    # Firefox
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:120.0) Gecko/20100101 Firefox/120.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:121.0) Gecko/20100101 Firefox/121.0",
    # Safari on Mac
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.1 Safari/605.1.15",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Safari/605.1.15",
    # Edge on Windows
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36 Edg/120.0.0.0",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36 Edg/119.0.0.0",
    # Chrome on Linux
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36",
]

_ACCEPT_LANGUAGES = [
    "zh-CN,zh;q=0.9,en;q=0.8",
    "zh-CN,zh;q=0.9",
    "zh-CN,zh-TW;q=0.9,zh;q=0.8,en;q=0.7",
    "en-US,en;q=0.9,zh-CN;q=0.8,zh;q=0.7",
    "zh-CN,en-US;q=0.9,en;q=0.8",
]

# Brotli is left out: httpx only decodes "br" when the brotli package is installed.
_DEFAULT_HEADERS = {
    "User-Agent": _USER_AGENTS[0],
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,"
        "image/webp,image/apng,*/*;q=0.8,application/signed-exchange;v=b3;q=0.7"
    ),
    "Accept-Language": _ACCEPT_LANGUAGES[0],
    "Accept-Encoding": "gzip, deflate",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Sec-Fetch-User": "?1",
    "Cache-Control": "max-age=0",
}

# Chance of sending "DNT: 1" and of sending a Referer, respectively
_DNT_PROBABILITY = 0.5
_REFERER_PROBABILITY = 0.7


class TransportError(Exception):
    """Raised when the bytes of *url* could not be obtained."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


def browser_headers(
    referer_url: str | None = None, *, rng: random.Random | None = None
) -> dict[str, str]:
    """Return navigation-style request headers with randomized details.

    The User-Agent and Accept-Language are drawn from the pools above,
    ``DNT: 1`` is sent half of the time, and when *referer_url* is given its
    site root is usually sent as ``Referer`` to look like navigation from the
    newspaper's home page.  *rng* defaults to the :mod:`random` module.
    """
    rng = rng or random
    headers = dict(_DEFAULT_HEADERS)
    headers["User-Agent"] = rng.choice(_USER_AGENTS)
    headers["Accept-Language"] = rng.choice(_ACCEPT_LANGUAGES)
    if rng.random() < _DNT_PROBABILITY:
        headers["DNT"] = "1"
    if referer_url and rng.random() < _REFERER_PROBABILITY:
        parts = urlsplit(referer_url)
        if parts.scheme and parts.netloc:
            headers["Referer"] = f"{parts.scheme}://{parts.netloc}/"
    return headers


def fetch_document(
    url: str,
    *,
    client: httpx.Client | None = None,
    randomize_headers: bool | None = None,
) -> RawDocument:
    """Fetch *url* and return its undecoded body as a :class:`RawDocument`.

    Args:
        url: Page to fetch.
        client: Optional shared client; a short-lived one is created otherwise.
        randomize_headers: Override ``settings.randomize_headers``.

    Raises:
        TransportError: On connection failures, timeouts and 4xx/5xx statuses.
    """
    if randomize_headers is None:
        randomize_headers = settings.randomize_headers
    headers = browser_headers(url) if randomize_headers else dict(_DEFAULT_HEADERS)

    try:
        if client is not None:
            response = client.get(url, headers=headers)
            response.raise_for_status()
        else:
            with httpx.Client(
                timeout=settings.request_timeout,
                follow_redirects=True,
            ) as own_client:
                response = own_client.get(url, headers=headers)
                response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise TransportError(url, f"HTTP {exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
        raise TransportError(url, str(exc) or type(exc).__name__) from exc

    return RawDocument(url=url, content=response.content, status_code=response.status_code)
