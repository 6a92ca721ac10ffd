"""paperscraper CLI: entry-point for scraping Founder e-paper editions.

Usage:
    python cli/main.py --help

Commands:
    scrape    → scrape a date range and export Markdown (ZIP or folder)
    pages     → list the page URLs of one edition
    links     → list the article links of one edition page
    article   → resolve a single article page
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that
# `from paperscraper.xxx import ...` works when the CLI is invoked as
# `python cli/main.py` from any working directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json
import logging
from dataclasses import replace
from datetime import date as _date
from typing import Optional

import typer

from paperscraper.config import settings
from paperscraper.scraper import (
    TransportError,
    discover_pages,
    extract_article_links,
    fetch_document,
    load_document,
    resolve_article,
)
from paperscraper.scraper.navigator import page_sort_key

app = typer.Typer(
    name="paperscraper",
    help="Scrape articles from Founder-style digital newspapers.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _load(url: str):
    try:
        return load_document(fetch_document(url))
    except TransportError as exc:
        typer.echo(f"❌ Fetch failed: {exc}")
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# Date-range scrape
# ---------------------------------------------------------------------------
@app.command("scrape")
def scrape(
    start: str = typer.Option(_date.today().isoformat(), help="First edition date (YYYY-MM-DD)."),
    end: Optional[str] = typer.Option(None, help="Last edition date (defaults to --start)."),
    pattern: Optional[str] = typer.Option(
        None, help="URL template with {YYYY}/{MM}/{DD}/{PAGE} placeholders."
    ),
    max_pages: Optional[int] = typer.Option(None, "--max-pages", help="Page cap per edition."),
    output: Optional[Path] = typer.Option(None, help="Output directory."),
    as_zip: bool = typer.Option(True, "--zip/--dir", help="Export a ZIP archive or a folder."),
    clean: bool = typer.Option(False, "--clean", help="Rewrite bodies with the cleanup LLM."),
) -> None:
    """Scrape every edition in a date range and export the articles as Markdown."""
    from paperscraper.cleanup import clean_content
    from paperscraper.export import default_archive_name, export_directory, export_zip
    from paperscraper.pipeline import scrape_editions

    end = end or start
    overrides = {}
    if pattern:
        overrides["base_url_pattern"] = pattern
    if max_pages is not None:
        overrides["max_pages"] = max_pages
    if output is not None:
        overrides["output_dir"] = output
    config = replace(settings, **overrides)

    typer.echo(f"[scrape] {start} → {end}  pattern={config.base_url_pattern!r}")
    articles = scrape_editions(
        start,
        end,
        config=config,
        cleanup=clean_content if clean else None,
        on_article=lambda a: typer.echo(f"  ✅ [{a.date} p{a.page}] {a.title}"),
    )

    if not articles:
        typer.echo("[scrape] No articles collected.")
        raise typer.Exit(code=1)

    config.ensure_output_dir()
    if as_zip:
        target = config.output_dir / default_archive_name(start, end)
        count = export_zip(articles, target)
    else:
        target = config.output_dir
        count = export_directory(articles, target)
    typer.echo(f"[scrape] Exported {count} articles to {target}")


# ---------------------------------------------------------------------------
# Single-document inspection
# ---------------------------------------------------------------------------
@app.command("pages")
def pages(
    url: str = typer.Argument(..., help="Entry page (page 1) of an edition."),
    selector: Optional[str] = typer.Option(None, help="Page-link selector."),
) -> None:
    """List the page URLs discovered from an edition's entry page."""
    doc = _load(url)
    found = discover_pages(
        doc,
        url,
        selector or settings.page_link_selector,
        page_marker=settings.page_marker,
        sort_key=page_sort_key(settings.page_sort),
    )
    for page_url in found:
        typer.echo(page_url)


@app.command("links")
def links(
    url: str = typer.Argument(..., help="Edition page URL."),
    selector: Optional[str] = typer.Option(None, help="Article-link selector."),
    as_json: bool = typer.Option(False, "--json", help="Print the links as JSON."),
) -> None:
    """List the article links on one edition page with their title hints."""
    doc = _load(url)
    entries = extract_article_links(doc, url, selector or settings.article_link_selector)
    if as_json:
        typer.echo(json.dumps([e.to_dict() for e in entries], ensure_ascii=False, indent=2))
        return
    if not entries:
        typer.echo("[links] No article links found.")
        return
    for entry in entries:
        typer.echo(f"{entry.url}  {entry.title_hint or '(no hint)'}")


@app.command("article")
def article(
    url: str = typer.Argument(..., help="Article page URL."),
    hint: str = typer.Option("", help="Fallback title hint."),
    clean: bool = typer.Option(False, "--clean", help="Rewrite the body with the cleanup LLM."),
    as_json: bool = typer.Option(False, "--json", help="Print title and body as JSON."),
) -> None:
    """Resolve and print the title and body of a single article page."""
    doc = _load(url)
    resolved = resolve_article(doc, settings.title_selector, settings.content_selector, hint)
    if clean:
        from paperscraper.cleanup import clean_content

        resolved = replace(resolved, content=clean_content(resolved.content, resolved.title))

    if as_json:
        typer.echo(json.dumps(resolved.to_dict(), ensure_ascii=False, indent=2))
        return
    typer.echo(f"[article] Title  : {resolved.title}")
    typer.echo(f"[article] Chars  : {len(resolved.content)}")
    typer.echo("")
    typer.echo(resolved.content)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
