"""Article link extraction from one edition page.

Founder layouts list each article twice or more: once as a text link in the
table of contents and again as an ``<area>`` inside the page's image map.
Links are therefore de-duplicated by resolved URL while keeping the most
useful display text as a title hint for the article resolver.
"""

from __future__ import annotations

from typing import Callable

from bs4 import BeautifulSoup, Tag

from paperscraper.scraper.dom import collapse_whitespace, node_text, select_all
from paperscraper.scraper.models import ArticleLinkEntry
from paperscraper.scraper.urls import is_followable, resolve_href

HintRanking = Callable[[str, str], bool]

# Longer link text is assumed to be a whole content block wrapped in <a>.
MAX_HINT_LENGTH = 100


def prefer_longer_hint(stored: str, candidate: str) -> bool:
    """Return ``True`` when *candidate* should replace the *stored* hint.

    Any non-empty candidate replaces an empty hint; otherwise the candidate
    must be strictly longer and still under :data:`MAX_HINT_LENGTH`.
    """
    if not candidate:
        return False
    if not stored:
        return True
    return len(stored) < len(candidate) < MAX_HINT_LENGTH


def link_hint(node: Tag) -> str:
    """Return the display text of a link node.

    ``<area>`` nodes render no text, so their ``alt`` then ``title``
    attributes are used instead.
    """
    text = node_text(node)
    if not text and node.name == "area":
        text = collapse_whitespace(node.get("alt")) or collapse_whitespace(node.get("title"))
    return text


def extract_article_links(
    page_doc: BeautifulSoup,
    page_url: str,
    article_link_query: str,
    *,
    prefer_hint: HintRanking = prefer_longer_hint,
) -> list[ArticleLinkEntry]:
    """Return one :class:`ArticleLinkEntry` per distinct article URL on the page.

    Args:
        page_doc: Parsed edition page.
        page_url: URL the page was fetched from; relative links resolve
            against its directory.
        article_link_query: CSS selector matching ``<a>`` and/or ``<area>``
            article links.
        prefer_hint: Ranking function deciding whether a new candidate hint
            replaces the one already stored for a URL.

    Returns:
        Entries in discovery order, possibly empty.
    """
    hints: dict[str, str] = {}

    for node in select_all(page_doc, article_link_query):
        href = node.get("href")
        if not is_followable(href):
            continue
        url = resolve_href(href, page_url)
        candidate = link_hint(node)

        stored = hints.setdefault(url, "")
        if prefer_hint(stored, candidate):
            hints[url] = candidate

    return [ArticleLinkEntry(url=url, title_hint=hint) for url, hint in hints.items()]
