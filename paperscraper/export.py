"""Markdown rendering and bundling of collected articles.

Articles are grouped into one folder per edition date, each file named
``NNN_<title>.md`` in collection order.
"""

from __future__ import annotations

import re
import zipfile
from collections import defaultdict
from pathlib import Path
from typing import Iterable

from paperscraper.scraper.models import Article

_ILLEGAL_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1F]')
_WHITESPACE = re.compile(r"\s+")
_UNDERSCORES = re.compile(r"_{2,}")

MAX_FILENAME_LENGTH = 100


def render_markdown(
    title: str, date: str, page: str, content: str, url: str | None = None
) -> str:
    """Return the Markdown document for one article.

    The ``**Source:**`` link and rule are only added when *url* is given,
    which is the layout used for LLM-cleaned bodies.
    """
    header = f"# {title}\n\n**Date:** {date} | **Page:** {page}"
    if url:
        return f"{header}\n**Source:** [Link]({url})\n\n---\n\n{content}"
    return f"{header}\n\n{content}"


def sanitize_filename(text: str) -> str:
    """Return *text* made safe for use as a file name on any platform."""
    safe = _ILLEGAL_FILENAME_CHARS.sub("_", text)
    safe = _WHITESPACE.sub("_", safe)
    safe = _UNDERSCORES.sub("_", safe)
    return safe[:MAX_FILENAME_LENGTH]


def default_archive_name(start: str, end: str) -> str:
    return f"paper_export_{start}_to_{end}.zip"


def group_by_date(articles: Iterable[Article]) -> dict[str, list[Article]]:
    """Return articles grouped by edition date, dates in ascending order."""
    grouped: dict[str, list[Article]] = defaultdict(list)
    for article in articles:
        grouped[article.date].append(article)
    return {date: grouped[date] for date in sorted(grouped)}


def _article_paths(articles: Iterable[Article]) -> Iterable[tuple[str, Article]]:
    for date, items in group_by_date(articles).items():
        for index, article in enumerate(items, start=1):
            filename = f"{index:03d}_{sanitize_filename(article.title)}.md"
            yield f"{date}/{filename}", article


def export_zip(articles: Iterable[Article], path: Path) -> int:
    """Write *articles* into a ZIP archive at *path*; return the file count."""
    path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, article in _article_paths(articles):
            archive.writestr(name, article.markdown)
            count += 1
    return count


def export_directory(articles: Iterable[Article], root: Path) -> int:
    """Write *articles* as Markdown files under *root*; return the file count."""
    count = 0
    for name, article in _article_paths(articles):
        target = root / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(article.markdown, encoding="utf-8")
        count += 1
    return count
