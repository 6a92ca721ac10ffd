"""Article content resolution: a title and a body from any Founder page dialect.

Title tiers
-----------
Each tier is ``(name, needs, strategy)``.  A tier only runs while
``needs(current_title)`` holds, and only a non-empty result replaces the
current title:

``structured``
    Founder table layout: intro (引标题), main (主标题) and sub (副标题)
    headline cells joined with spaces.  Requires a main headline.
``selector``
    The configured title selector.
``image-alt``
    Older editions render the headline as an image; its ``alt`` text.
``link-hint``
    The link text captured on the edition page.  Also replaces titles
    shorter than two characters.
``page-title``
    The document ``<title>``, cut before the site-name suffix.

Anything left empty becomes :data:`UNTITLED_ARTICLE`.

Body
----
Pages with ``<p>`` markup give their paragraphs joined by blank lines.
Pages laid out with ``<br>``, table rows or bare inline tags are flattened
from a copy of the content root.
"""

from __future__ import annotations

import copy
import re
from typing import Callable, NamedTuple

from bs4 import BeautifulSoup, NavigableString, Tag

from paperscraper.scraper.dom import (
    collapse_whitespace,
    document_title,
    node_text,
    select_first,
)
from paperscraper.scraper.models import UNTITLED_ARTICLE, ResolvedArticle

INTRO_TITLE_QUERY = ".yinbiaoti, td.font00, .intro_title"
MAIN_TITLE_QUERY = ".zhubiaoti, td.font01, .main_title, #title, h1"
SUB_TITLE_QUERY = ".fubiaoti, td.font02, .sub_title"
TITLE_IMAGE_QUERY = "td.font01 img, .main_title img"

PAGE_TITLE_SEPARATORS = ("-", "_", "|")
MAX_TITLE_LENGTH = 200
ELLIPSIS = "..."

_BLOCK_TAGS = ["div", "p", "tr"]
_BLANK_LINES = re.compile(r"\n\s*\n")


class TitleContext(NamedTuple):
    doc: BeautifulSoup
    title_query: str
    fallback_hint: str


TitleStrategy = Callable[[TitleContext], str]


class TitleTier(NamedTuple):
    name: str
    needs: Callable[[str], bool]
    strategy: TitleStrategy


# ---------------------------------------------------------------------------
# Title strategies
# ---------------------------------------------------------------------------

def structured_title(ctx: TitleContext) -> str:
    """Join intro, main and sub headlines; empty unless a main headline exists."""
    main = node_text(select_first(ctx.doc, MAIN_TITLE_QUERY))
    if not main:
        return ""
    intro = node_text(select_first(ctx.doc, INTRO_TITLE_QUERY))
    sub = node_text(select_first(ctx.doc, SUB_TITLE_QUERY))
    return " ".join(piece for piece in (intro, main, sub) if piece)


def selector_title(ctx: TitleContext) -> str:
    return node_text(select_first(ctx.doc, ctx.title_query))


def image_alt_title(ctx: TitleContext) -> str:
    image = select_first(ctx.doc, TITLE_IMAGE_QUERY)
    if image is None:
        return ""
    return collapse_whitespace(image.get("alt"))


def link_hint_title(ctx: TitleContext) -> str:
    return ctx.fallback_hint or ""


def page_title(ctx: TitleContext) -> str:
    """Return the ``<title>`` text before the first site-name separator.

    Separators are tried in priority order, so ``"A_B - Daily"`` gives
    ``"A_B"``.
    """
    title = document_title(ctx.doc)
    for separator in PAGE_TITLE_SEPARATORS:
        if separator in title:
            title = title.split(separator, 1)[0]
            break
    return title.strip()


def _is_missing(title: str) -> bool:
    return not title


def _is_too_short(title: str) -> bool:
    return len(title) < 2


def _is_missing_or_placeholder(title: str) -> bool:
    return not title or title == UNTITLED_ARTICLE


TITLE_CASCADE: tuple[TitleTier, ...] = (
    TitleTier("structured", _is_missing, structured_title),
    TitleTier("selector", _is_missing, selector_title),
    TitleTier("image-alt", _is_missing, image_alt_title),
    TitleTier("link-hint", _is_too_short, link_hint_title),
    TitleTier("page-title", _is_missing_or_placeholder, page_title),
)


def resolve_title(
    doc: BeautifulSoup,
    title_query: str,
    fallback_title_hint: str = "",
    cascade: tuple[TitleTier, ...] = TITLE_CASCADE,
) -> str:
    """Run the title *cascade* and return a non-empty, length-capped title."""
    ctx = TitleContext(doc, title_query, fallback_title_hint or "")
    title = ""
    for tier in cascade:
        if not tier.needs(title):
            continue
        candidate = tier.strategy(ctx)
        if candidate:
            title = candidate

    if not title:
        title = UNTITLED_ARTICLE
    if len(title) > MAX_TITLE_LENGTH:
        title = title[:MAX_TITLE_LENGTH] + ELLIPSIS
    return title


# ---------------------------------------------------------------------------
# Content strategies
# ---------------------------------------------------------------------------

def paragraph_content(root: Tag) -> str:
    """Join the stripped text of every ``<p>`` under *root* with blank lines."""
    paragraphs = root.find_all("p")
    return "\n\n".join(p.get_text().strip() for p in paragraphs)


def flattened_content(root: Tag) -> str:
    """Read *root* as text with ``<br>`` and block boundaries kept as newlines.

    Works on a copy so the caller's tree is never modified.
    """
    clone = copy.copy(root)
    for br in clone.find_all("br"):
        br.replace_with(NavigableString("\n"))
    for block in clone.find_all(_BLOCK_TAGS):
        block.insert_after(NavigableString("\n"))

    text = clone.get_text()
    return _BLANK_LINES.sub("\n\n", text).strip()


def resolve_content(doc: BeautifulSoup, content_query: str) -> str:
    """Return the article body found under the first *content_query* match."""
    root = select_first(doc, content_query)
    if root is None:
        return ""
    if root.find("p") is not None:
        return paragraph_content(root)
    return flattened_content(root)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def resolve_article(
    doc: BeautifulSoup,
    title_query: str,
    content_query: str,
    fallback_title_hint: str = "",
) -> ResolvedArticle:
    """Resolve the title and body of an article page.

    Args:
        doc: Parsed article page.  It is not modified.
        title_query: Site-specific title selector (second title tier).
        content_query: Selector for the element wrapping the body.
        fallback_title_hint: Link text captured on the edition page.

    Returns:
        A :class:`ResolvedArticle`; the title falls back to
        ``"Untitled Article"`` and the content may be empty.
    """
    return ResolvedArticle(
        title=resolve_title(doc, title_query, fallback_title_hint),
        content=resolve_content(doc, content_query),
    )
