"""URL and date helpers shared by the navigator, link extractor and pipeline."""

from __future__ import annotations

from datetime import date, timedelta
from urllib.parse import urljoin


def base_directory(url: str) -> str:
    """Return *url* up to and including its last ``/``."""
    return url[: url.rfind("/") + 1]


def is_followable(href: str | None) -> bool:
    """Return ``False`` for empty, fragment-only and ``javascript:`` references."""
    if not href:
        return False
    href = href.strip()
    if not href or href.startswith("#"):
        return False
    return not href.lower().startswith("javascript:")


def resolve_href(href: str, page_url: str) -> str:
    """Resolve *href* against the directory of *page_url*."""
    return urljoin(base_directory(page_url), href.strip())


def generate_date_range(start: str, end: str) -> list[str]:
    """Return every ISO date from *start* to *end* inclusive.

    Unparsable dates or an end before the start yield an empty list.
    """
    try:
        current = date.fromisoformat(start)
        stop = date.fromisoformat(end)
    except (TypeError, ValueError):
        return []

    dates: list[str] = []
    while current <= stop:
        dates.append(current.isoformat())
        current += timedelta(days=1)
    return dates


def format_url(pattern: str, date_str: str, page: int = 1) -> str:
    """Fill the ``{YYYY}``/``{MM}``/``{DD}``/``{PAGE}`` placeholders of *pattern*."""
    year, month, day = date_str.split("-")
    return (
        pattern.replace("{YYYY}", year)
        .replace("{MM}", month)
        .replace("{DD}", day)
        .replace("{PAGE}", str(page))
    )
