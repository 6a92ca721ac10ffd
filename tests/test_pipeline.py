"""Tests for the date-range pipeline and its URL/date helpers.

The network is replaced by an in-memory site: ``_FakeSite`` maps URLs to
HTML and raises ``TransportError`` for anything else.  ``sleep`` is a
recorder so no test waits.
"""

from __future__ import annotations

import pytest

from paperscraper.config import Settings
from paperscraper.pipeline import EditionScraper, fetch_with_retry, scrape_editions
from paperscraper.scraper.fetcher import TransportError
from paperscraper.scraper.models import RawDocument
from paperscraper.scraper.urls import (
    base_directory,
    format_url,
    generate_date_range,
    is_followable,
    resolve_href,
)

_PATTERN = "http://paper.test/html/{YYYY}-{MM}/{DD}/node_{PAGE}.htm"
_DIR = "http://paper.test/html/2023-10/01/"

_SITE = {
    _DIR + "node_1.htm": """\
<html><body>
  <a href="node_1.htm">01</a><a href="node_2.htm">02</a>
  <a href="content_1.htm">Exam Reform</a>
  <map><area href="content_2.htm" alt="Ministry Announcement"></map>
</body></html>""",
    _DIR + "node_2.htm": """\
<html><body>
  <a href="node_1.htm">01</a><a href="node_2.htm">02</a>
  <a href="content_1.htm">Exam Reform</a>
  <a href="content_3.htm">Brief</a>
</body></html>""",
    _DIR + "content_1.htm": """\
<html><head><title>Exam Reform - Daily</title></head><body>
  <table><tr><td class="font01">Exam Reform</td></tr></table>
  <div id="article_content"><p>First paragraph.</p><p>Second paragraph.</p></div>
</body></html>""",
    _DIR + "content_2.htm": """\
<html><body>
  <div id="ozoom">The ministry announced<br>new rules today.</div>
</body></html>""",
    _DIR + "content_3.htm": """\
<html><body><div id="article_content"><p>Hi</p></div></body></html>""",
}


class _FakeSite:
    def __init__(self, pages: dict[str, str], failures: dict[str, int] | None = None):
        self.pages = pages
        self.failures = dict(failures or {})
        self.requests: list[str] = []

    def __call__(self, url: str) -> RawDocument:
        self.requests.append(url)
        if self.failures.get(url, 0) > 0:
            self.failures[url] -= 1
            raise TransportError(url, "HTTP 503")
        if url not in self.pages:
            raise TransportError(url, "HTTP 404")
        return RawDocument(url=url, content=self.pages[url].encode("utf-8"))


def _config(**overrides) -> Settings:
    values = dict(
        base_url_pattern=_PATTERN,
        max_pages=20,
        min_delay=0.0,
        max_delay=0.0,
        page_delay=0.0,
        retry_delay=0.0,
        max_retries=1,
        min_content_length=5,
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def sleeps() -> list[float]:
    return []


class TestUrlHelpers:
    def test_generate_date_range_inclusive(self) -> None:
        assert generate_date_range("2023-12-30", "2024-01-02") == [
            "2023-12-30",
            "2023-12-31",
            "2024-01-01",
            "2024-01-02",
        ]

    def test_generate_date_range_invalid(self) -> None:
        assert generate_date_range("2024-01-02", "2024-01-01") == []
        assert generate_date_range("not-a-date", "2024-01-01") == []

    def test_format_url(self) -> None:
        assert format_url(_PATTERN, "2023-10-01", 3) == _DIR + "node_3.htm"

    def test_base_directory(self) -> None:
        assert base_directory(_DIR + "node_1.htm") == _DIR

    def test_resolve_href(self) -> None:
        assert resolve_href("content_1.htm", _DIR + "node_2.htm") == _DIR + "content_1.htm"
        assert resolve_href("../02/node_1.htm", _DIR + "node_2.htm") == (
            "http://paper.test/html/2023-10/02/node_1.htm"
        )

    def test_is_followable(self) -> None:
        assert is_followable("content_1.htm")
        assert not is_followable(None)
        assert not is_followable("  ")
        assert not is_followable("#top")
        assert not is_followable(" javascript:void(0)")


class TestFetchWithRetry:
    def test_retries_then_succeeds(self, sleeps) -> None:
        url = _DIR + "node_1.htm"
        site = _FakeSite(_SITE, failures={url: 2})
        doc = fetch_with_retry(url, fetch=site, max_retries=3, retry_delay=7.0, sleep=sleeps.append)
        assert doc.find("a") is not None
        assert site.requests == [url, url, url]
        assert sleeps == [7.0, 7.0]

    def test_gives_up_after_max_retries(self, sleeps) -> None:
        site = _FakeSite({})
        with pytest.raises(TransportError):
            fetch_with_retry(_DIR + "missing.htm", fetch=site, max_retries=2, sleep=sleeps.append)
        assert len(site.requests) == 3


class TestScrapeEditions:
    def test_collects_articles_across_pages(self, sleeps) -> None:
        site = _FakeSite(_SITE)
        articles = scrape_editions(
            "2023-10-01", "2023-10-01", config=_config(), fetch=site, sleep=sleeps.append
        )

        assert [a.title for a in articles] == ["Exam Reform", "Ministry Announcement"]
        assert [a.page for a in articles] == ["01", "01"]
        assert articles[0].content == "First paragraph.\n\nSecond paragraph."
        assert articles[1].content == "The ministry announced\nnew rules today."
        assert articles[0].markdown.startswith(
            "# Exam Reform\n\n**Date:** 2023-10-01 | **Page:** 01\n\nFirst paragraph."
        )

    def test_duplicate_article_fetched_once(self, sleeps) -> None:
        site = _FakeSite(_SITE)
        scrape_editions("2023-10-01", "2023-10-01", config=_config(), fetch=site, sleep=sleeps.append)
        assert site.requests.count(_DIR + "content_1.htm") == 1

    def test_short_content_skipped(self, sleeps) -> None:
        site = _FakeSite(_SITE)
        articles = scrape_editions(
            "2023-10-01", "2023-10-01", config=_config(), fetch=site, sleep=sleeps.append
        )
        assert _DIR + "content_3.htm" not in [a.url for a in articles]

    def test_max_pages_cap(self, sleeps) -> None:
        site = _FakeSite(_SITE)
        scrape_editions(
            "2023-10-01", "2023-10-01", config=_config(max_pages=1), fetch=site, sleep=sleeps.append
        )
        assert _DIR + "node_2.htm" not in site.requests

    def test_missing_entry_page_skips_date(self, sleeps) -> None:
        site = _FakeSite(_SITE)
        articles = scrape_editions(
            "2023-10-02", "2023-10-02", config=_config(), fetch=site, sleep=sleeps.append
        )
        assert articles == []

    def test_failed_article_does_not_stop_page(self, sleeps) -> None:
        pages = dict(_SITE)
        del pages[_DIR + "content_1.htm"]
        site = _FakeSite(pages)
        articles = scrape_editions(
            "2023-10-01", "2023-10-01", config=_config(), fetch=site, sleep=sleeps.append
        )
        assert [a.title for a in articles] == ["Ministry Announcement"]

    def test_invalid_range_returns_empty(self, sleeps) -> None:
        site = _FakeSite(_SITE)
        assert scrape_editions("2023-10-02", "2023-10-01", config=_config(), fetch=site) == []
        assert site.requests == []

    def test_cleanup_and_callback(self, sleeps) -> None:
        seen = []
        articles = scrape_editions(
            "2023-10-01",
            "2023-10-01",
            config=_config(),
            fetch=_FakeSite(_SITE),
            sleep=sleeps.append,
            cleanup=lambda text, title: f"CLEANED {title}",
            on_article=seen.append,
        )
        assert seen == articles
        first = articles[0]
        assert "**Source:** [Link](" + first.url + ")" in first.markdown
        assert first.markdown.endswith("CLEANED Exam Reform")
        assert first.content == "First paragraph.\n\nSecond paragraph."

    def test_politeness_delays(self, sleeps) -> None:
        config = _config(min_delay=1.0, max_delay=1.0, page_delay=5.0)
        EditionScraper(config, fetch=_FakeSite(_SITE), sleep=sleeps.append).run(
            "2023-10-01", "2023-10-01"
        )
        # one page delay between the two pages, random delays elsewhere
        assert sleeps.count(5.0) == 1
        assert sleeps.count(1.0) >= 3


class TestRateLimits:
    def test_cooldown_after_each_batch_of_dates(self, sleeps) -> None:
        site = _FakeSite(_SITE)
        events: list[str] = []

        def fetch(url: str) -> RawDocument:
            events.append(url)
            return site(url)

        def sleep(seconds: float) -> None:
            sleeps.append(seconds)
            events.append(f"sleep {seconds}")

        config = _config(batch_size=2, cooldown_minutes=1.5, max_retries=0)
        EditionScraper(config, fetch=fetch, sleep=sleep).run("2023-10-01", "2023-10-04")

        assert sleeps.count(90.0) == 1
        cooldown_at = events.index("sleep 90.0")
        third_entry = events.index(format_url(_PATTERN, "2023-10-03", 1))
        fourth_entry = events.index(format_url(_PATTERN, "2023-10-04", 1))
        assert cooldown_at == third_entry - 1
        assert "sleep 90.0" not in events[third_entry:fourth_entry]

    def test_zero_batch_size_disables_cooldown(self, sleeps) -> None:
        config = _config(batch_size=0, cooldown_minutes=1.0)
        scrape_editions(
            "2023-10-01", "2023-10-05", config=config, fetch=_FakeSite(_SITE), sleep=sleeps.append
        )
        assert 60.0 not in sleeps

    def test_daily_limit_stops_the_run(self, sleeps) -> None:
        site = _FakeSite(_SITE)
        articles = scrape_editions(
            "2023-10-01",
            "2023-10-02",
            config=_config(daily_article_limit=1),
            fetch=site,
            sleep=sleeps.append,
        )
        assert [a.title for a in articles] == ["Exam Reform"]
        assert _DIR + "content_2.htm" not in site.requests
        assert _DIR + "node_2.htm" not in site.requests
        assert format_url(_PATTERN, "2023-10-02", 1) not in site.requests

    def test_unlimited_by_default_quota_of_zero(self, sleeps) -> None:
        articles = scrape_editions(
            "2023-10-01",
            "2023-10-01",
            config=_config(daily_article_limit=0),
            fetch=_FakeSite(_SITE),
            sleep=sleeps.append,
        )
        assert len(articles) == 2
