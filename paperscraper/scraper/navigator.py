"""Edition navigation: find every page URL of an edition from its first page."""

from __future__ import annotations

import re
from typing import Callable

from bs4 import BeautifulSoup

from paperscraper.scraper.dom import select_all
from paperscraper.scraper.urls import is_followable, resolve_href

PageSortKey = Callable[[str], object]

DEFAULT_PAGE_MARKER = "node_"

_DIGIT_RUN = re.compile(r"(\d+)")


def lexical_page_key(url: str) -> str:
    """Sort page URLs as plain strings (``node_10`` sorts before ``node_2``)."""
    return url


def numeric_page_key(url: str) -> tuple:
    """Sort page URLs with embedded digit runs compared as numbers."""
    return tuple(
        (0, int(part), "") if part.isdigit() else (1, 0, part)
        for part in _DIGIT_RUN.split(url)
        if part
    )


PAGE_SORT_KEYS: dict[str, PageSortKey] = {
    "lexical": lexical_page_key,
    "numeric": numeric_page_key,
}


def page_sort_key(name: str) -> PageSortKey:
    """Return the comparator registered as *name*, defaulting to lexical."""
    return PAGE_SORT_KEYS.get(name.strip().lower(), lexical_page_key)


def discover_pages(
    entry_doc: BeautifulSoup,
    entry_url: str,
    page_link_query: str,
    *,
    page_marker: str = DEFAULT_PAGE_MARKER,
    sort_key: PageSortKey = lexical_page_key,
) -> list[str]:
    """Return the ordered, de-duplicated page URLs of the edition at *entry_url*.

    Links matched by *page_link_query* are kept only when their ``href``
    contains *page_marker*.  *entry_url* itself is always part of the result,
    so a page without navigation yields ``[entry_url]``.
    """
    pages: set[str] = {entry_url}

    for link in select_all(entry_doc, page_link_query):
        href = link.get("href")
        if not is_followable(href) or page_marker not in href:
            continue
        pages.add(resolve_href(href, entry_url))

    return sorted(pages, key=sort_key)
