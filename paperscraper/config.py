"""Centralised settings for paperscraper.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class EditionSelectors:
    """The four CSS selectors that describe one newspaper site's markup."""

    page_link: str
    article_link: str
    title: str
    content: str


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Edition URL template
    # ------------------------------------------------------------------
    # Supports {YYYY}, {MM}, {DD} and {PAGE}.  Only page 1 is predictable;
    # the remaining pages are discovered from its navigation links.
    base_url_pattern: str = field(
        default_factory=lambda: os.environ.get(
            "PAPER_URL_PATTERN",
            "http://paper.jyb.cn/zgjyb/html/{YYYY}-{MM}/{DD}/node_{PAGE}.htm",
        )
    )
    max_pages: int = field(
        default_factory=lambda: int(os.environ.get("PAPER_MAX_PAGES", "20"))
    )

    # ------------------------------------------------------------------
    # Selectors (Founder e-paper defaults)
    # ------------------------------------------------------------------
    page_link_selector: str = field(
        default_factory=lambda: os.environ.get(
            "PAPER_PAGE_LINK_SELECTOR", 'a[href^="node_"]'
        )
    )
    # <area> covers the clickable image maps used by Founder layouts
    article_link_selector: str = field(
        default_factory=lambda: os.environ.get(
            "PAPER_ARTICLE_LINK_SELECTOR",
            'a[href^="content_"], area[href^="content_"]',
        )
    )
    content_selector: str = field(
        default_factory=lambda: os.environ.get(
            "PAPER_CONTENT_SELECTOR",
            "#article_content, founder-content, .text, .article-content, "
            ".blkContainerSblkCon, #ozoom, td.font02",
        )
    )
    title_selector: str = field(
        default_factory=lambda: os.environ.get(
            "PAPER_TITLE_SELECTOR",
            "td.font01, .yinbiaoti, .zhubiaoti, .fubiaoti, #artibodyTitle, #title, .title",
        )
    )
    page_marker: str = field(
        default_factory=lambda: os.environ.get("PAPER_PAGE_MARKER", "node_")
    )
    # "lexical" or "numeric"
    page_sort: str = field(
        default_factory=lambda: os.environ.get("PAPER_PAGE_SORT", "lexical")
    )

    # ------------------------------------------------------------------
    # Politeness / retries
    # ------------------------------------------------------------------
    min_delay: float = field(
        default_factory=lambda: float(os.environ.get("MIN_DELAY", "2.0"))
    )
    max_delay: float = field(
        default_factory=lambda: float(os.environ.get("MAX_DELAY", "6.0"))
    )
    page_delay: float = field(
        default_factory=lambda: float(os.environ.get("PAGE_DELAY", "5.0"))
    )
    retry_delay: float = field(
        default_factory=lambda: float(os.environ.get("RETRY_DELAY", "10.0"))
    )
    max_retries: int = field(
        default_factory=lambda: int(os.environ.get("MAX_RETRIES", "3"))
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )
    randomize_headers: bool = field(
        default_factory=lambda: _env_bool("RANDOMIZE_HEADERS", "true")
    )
    min_content_length: int = field(
        default_factory=lambda: int(os.environ.get("MIN_CONTENT_LENGTH", "20"))
    )

    # ------------------------------------------------------------------
    # Rate limiting (0 disables each limit)
    # ------------------------------------------------------------------
    # Dates scraped before a cooldown pause
    batch_size: int = field(
        default_factory=lambda: int(os.environ.get("BATCH_SIZE", "3"))
    )
    cooldown_minutes: float = field(
        default_factory=lambda: float(os.environ.get("COOLDOWN_MINUTES", "15"))
    )
    daily_article_limit: int = field(
        default_factory=lambda: int(os.environ.get("DAILY_ARTICLE_LIMIT", "0"))
    )

    # ------------------------------------------------------------------
    # Cleanup model
    # ------------------------------------------------------------------
    llm_provider: str = field(
        default_factory=lambda: os.environ.get("LLM_PROVIDER", "ollama")
    )
    ollama_chat_model: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_CHAT_MODEL", "qwen2.5:7b")
    )
    openai_chat_model: str = field(
        default_factory=lambda: os.environ.get("OPENAI_CHAT_MODEL", "gpt-4o-mini")
    )

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    output_dir: Path = field(
        default_factory=lambda: Path(os.environ.get("PAPER_OUTPUT_DIR", "paper_export"))
    )

    def edition_selectors(self) -> EditionSelectors:
        """Bundle the configured selectors for the pipeline."""
        return EditionSelectors(
            page_link=self.page_link_selector,
            article_link=self.article_link_selector,
            title=self.title_selector,
            content=self.content_selector,
        )

    def ensure_output_dir(self) -> None:
        """Create the export directory if it does not exist."""
        self.output_dir.mkdir(parents=True, exist_ok=True)


# Module-level singleton, import this everywhere:
#   from paperscraper.config import settings
settings = Settings()
