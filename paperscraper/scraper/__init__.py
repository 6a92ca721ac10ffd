"""Scraper package: fetch, decode and extract Founder e-paper editions."""

from paperscraper.scraper.fetcher import TransportError, fetch_document
from paperscraper.scraper.links import extract_article_links
from paperscraper.scraper.loader import decode_html, load_document
from paperscraper.scraper.models import (
    Article,
    ArticleLinkEntry,
    RawDocument,
    ResolvedArticle,
)
from paperscraper.scraper.navigator import discover_pages
from paperscraper.scraper.resolver import resolve_article

__all__ = [
    "fetch_document",
    "TransportError",
    "decode_html",
    "load_document",
    "discover_pages",
    "extract_article_links",
    "resolve_article",
    "RawDocument",
    "ArticleLinkEntry",
    "ResolvedArticle",
    "Article",
]
