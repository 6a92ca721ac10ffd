"""Small helpers over BeautifulSoup shared by the extraction components."""

from __future__ import annotations

import logging
import re

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

logger = logging.getLogger(__name__)

_WHITESPACE_RUN = re.compile(r"\s+")


def collapse_whitespace(text: str | None) -> str:
    """Collapse runs of whitespace to a single space and trim the ends."""
    if not text:
        return ""
    return _WHITESPACE_RUN.sub(" ", text).strip()


def node_text(node: Tag | None) -> str:
    """Return the collapsed rendered text of *node* (empty for ``None``)."""
    if node is None:
        return ""
    return collapse_whitespace(node.get_text())


def select_all(root: BeautifulSoup | Tag, query: str) -> list[Tag]:
    """Run a CSS *query*; a blank or invalid selector matches nothing."""
    if not query or not query.strip():
        return []
    try:
        return list(root.select(query))
    except SelectorSyntaxError as exc:
        logger.debug("Ignoring invalid selector %r: %s", query, exc)
        return []


def select_first(root: BeautifulSoup | Tag, query: str) -> Tag | None:
    """Return the first node in document order matching *query*, if any."""
    if not query or not query.strip():
        return None
    try:
        return root.select_one(query)
    except SelectorSyntaxError as exc:
        logger.debug("Ignoring invalid selector %r: %s", query, exc)
        return None


def document_title(doc: BeautifulSoup) -> str:
    """Return the collapsed text of the document's ``<title>`` element."""
    return node_text(doc.title)
