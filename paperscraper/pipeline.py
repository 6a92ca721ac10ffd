"""Date-range scraping pipeline.

``scrape_editions`` drives the extraction core over every edition in a date
range:

    entry page → discover pages → per page: article links
               → per link: fetch → resolve → (optional cleanup) → Article

All network access, politeness delays, retries and quotas live here; the loader,
navigator, link extractor and resolver stay pure.
"""

from __future__ import annotations

import logging
import random
import time
import uuid
from typing import Callable

from bs4 import BeautifulSoup

from paperscraper.config import Settings, settings as default_settings
from paperscraper.export import render_markdown
from paperscraper.ratelimit import LOW_QUOTA_WARNING, RateLimiter
from paperscraper.scraper.fetcher import TransportError, fetch_document
from paperscraper.scraper.links import extract_article_links
from paperscraper.scraper.loader import load_document
from paperscraper.scraper.models import Article, RawDocument
from paperscraper.scraper.navigator import discover_pages, page_sort_key
from paperscraper.scraper.resolver import resolve_article
from paperscraper.scraper.urls import format_url, generate_date_range

logger = logging.getLogger(__name__)

Fetch = Callable[[str], RawDocument]
Cleanup = Callable[[str, str], str]


class DailyLimitReached(Exception):
    """Raised mid-page when the daily article quota is used up."""


def fetch_with_retry(
    url: str,
    *,
    fetch: Fetch = fetch_document,
    max_retries: int = 3,
    retry_delay: float = 10.0,
    sleep: Callable[[float], None] = time.sleep,
) -> BeautifulSoup:
    """Fetch and parse *url*, retrying up to *max_retries* times.

    Raises:
        TransportError: When every attempt failed.
    """
    attempt = 0
    while True:
        try:
            return load_document(fetch(url))
        except TransportError as exc:
            if attempt >= max_retries:
                logger.error("Fetch failed after %d attempts: %s", attempt + 1, url)
                raise
            attempt += 1
            logger.warning(
                "Fetch failed (attempt %d/%d): %s; retrying in %.1fs",
                attempt, max_retries + 1, exc, retry_delay,
            )
            sleep(retry_delay)


class EditionScraper:
    """Collects articles for a date range using one :class:`Settings`."""

    def __init__(
        self,
        config: Settings | None = None,
        *,
        fetch: Fetch = fetch_document,
        sleep: Callable[[float], None] = time.sleep,
        cleanup: Cleanup | None = None,
        on_article: Callable[[Article], None] | None = None,
        limiter: RateLimiter | None = None,
    ) -> None:
        self.config = config or default_settings
        self.selectors = self.config.edition_selectors()
        self.limiter = limiter or RateLimiter(
            self.config.batch_size,
            self.config.cooldown_minutes,
            self.config.daily_article_limit,
        )
        self._fetch = fetch
        self._sleep = sleep
        self._cleanup = cleanup
        self._on_article = on_article
        self.articles: list[Article] = []
        self._seen_urls: set[str] = set()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _load(self, url: str) -> BeautifulSoup:
        return fetch_with_retry(
            url,
            fetch=self._fetch,
            max_retries=self.config.max_retries,
            retry_delay=self.config.retry_delay,
            sleep=self._sleep,
        )

    def _random_delay(self) -> None:
        low = min(self.config.min_delay, self.config.max_delay)
        high = max(self.config.min_delay, self.config.max_delay)
        if high <= 0:
            return
        wait = random.uniform(low, high)
        logger.debug("Waiting %.1fs", wait)
        self._sleep(wait)

    # ------------------------------------------------------------------
    # Pipeline stages
    # ------------------------------------------------------------------

    def edition_pages(self, date: str) -> list[str]:
        """Return the page URLs of the edition for *date*, capped at ``max_pages``.

        Raises:
            TransportError: If the entry page cannot be fetched.
        """
        entry_url = format_url(self.config.base_url_pattern, date, 1)
        logger.info("Fetching entry page: %s", entry_url)
        entry_doc = self._load(entry_url)

        pages = discover_pages(
            entry_doc,
            entry_url,
            self.selectors.page_link,
            page_marker=self.config.page_marker,
            sort_key=page_sort_key(self.config.page_sort),
        )
        if pages == [entry_url]:
            logger.warning("No page navigation links found, using the entry page only")
        else:
            logger.info("Found %d pages in edition", len(pages))
        return pages[: self.config.max_pages]

    def scrape_article(self, url: str, hint: str, date: str, page: str) -> Article | None:
        """Fetch and resolve one article; ``None`` when its body is too short."""
        doc = self._load(url)
        resolved = resolve_article(
            doc, self.selectors.title, self.selectors.content, hint
        )
        if len(resolved.content) < self.config.min_content_length:
            logger.warning("Skipping empty/short content: %s", url.rsplit("/", 1)[-1])
            return None

        markdown = render_markdown(resolved.title, date, page, resolved.content)
        if self._cleanup is not None:
            cleaned = self._cleanup(resolved.content, resolved.title)
            markdown = render_markdown(resolved.title, date, page, cleaned, url=url)

        return Article(
            id=str(uuid.uuid4()),
            date=date,
            page=page,
            title=resolved.title,
            content=resolved.content,
            markdown=markdown,
            url=url,
        )

    def scrape_page(self, page_url: str, date: str, page: str) -> None:
        doc = self._load(page_url)
        links = extract_article_links(doc, page_url, self.selectors.article_link)
        if not links:
            logger.warning("No articles found on %s", page_url)
            self._random_delay()
            return
        logger.info("Found %d articles on this page", len(links))

        for link in links:
            if link.url in self._seen_urls:
                continue
            remaining = self.limiter.remaining()
            if remaining == 0:
                raise DailyLimitReached(
                    f"Daily article limit reached ({self.limiter.daily_article_limit})"
                )
            if remaining is not None and remaining <= LOW_QUOTA_WARNING:
                logger.warning("Approaching daily limit: %d articles remaining", remaining)
            self._random_delay()
            try:
                article = self.scrape_article(link.url, link.title_hint, date, page)
            except TransportError as exc:
                logger.error("Failed to fetch article %s: %s", link.url, exc)
                continue
            if article is None:
                continue
            self._seen_urls.add(article.url)
            self.articles.append(article)
            self.limiter.mark_article()
            if self._on_article is not None:
                self._on_article(article)

    def scrape_date(self, date: str) -> None:
        cooldown = self.limiter.cooldown_seconds()
        if cooldown:
            logger.warning(
                "Batch limit reached after %d dates, cooling down for %.1f minutes",
                self.limiter.processed_dates, cooldown / 60,
            )
            self._sleep(cooldown)
            logger.info("Cooldown complete")

        logger.info("=== Processing date: %s ===", date)
        try:
            pages = self.edition_pages(date)
        except TransportError as exc:
            logger.error("Failed to fetch entry page for %s: %s", date, exc)
            return
        self._random_delay()

        for index, page_url in enumerate(pages):
            page = f"{index + 1:02d}"
            logger.info(
                "Scanning page %d/%d: %s", index + 1, len(pages), page_url.rsplit("/", 1)[-1]
            )
            try:
                self.scrape_page(page_url, date, page)
            except TransportError as exc:
                logger.error("Failed to scan page %s: %s", page_url, exc)
            if index < len(pages) - 1:
                self._sleep(self.config.page_delay)

    def run(self, start: str, end: str) -> list[Article]:
        """Scrape every edition from *start* to *end* (ISO dates, inclusive)."""
        dates = generate_date_range(start, end)
        if not dates:
            logger.error("Invalid date range: %s to %s", start, end)
            return self.articles

        logger.info("Queue: %d days (%s to %s)", len(dates), start, end)
        for date in dates:
            try:
                self.scrape_date(date)
            except DailyLimitReached as exc:
                logger.warning("%s, stopping", exc)
                break
            self.limiter.mark_date()
        logger.info("Job completed: %d articles", len(self.articles))
        return self.articles


def scrape_editions(
    start: str,
    end: str,
    *,
    config: Settings | None = None,
    fetch: Fetch = fetch_document,
    sleep: Callable[[float], None] = time.sleep,
    cleanup: Cleanup | None = None,
    on_article: Callable[[Article], None] | None = None,
) -> list[Article]:
    """Collect every article published between *start* and *end*."""
    scraper = EditionScraper(
        config, fetch=fetch, sleep=sleep, cleanup=cleanup, on_article=on_article
    )
    return scraper.run(start, end)
