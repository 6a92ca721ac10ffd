"""Data models for the e-paper scraping pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass

UNTITLED_ARTICLE = "Untitled Article"


@dataclass(frozen=True)
class RawDocument:
    """The raw bytes of a single HTML fetch, before any decoding."""

    url: str
    content: bytes
    status_code: int = 200


@dataclass(frozen=True)
class ArticleLinkEntry:
    """An article URL found on an edition page plus the best title hint seen."""

    url: str
    title_hint: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ResolvedArticle:
    """Title and body text resolved from one article page.

    ``title`` is never empty; ``content`` is empty when no body was found.
    """

    title: str
    content: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Article:
    """An article collected by the pipeline, ready for export."""

    id: str
    date: str
    page: str
    title: str
    content: str
    markdown: str
    url: str
    status: str = "success"
