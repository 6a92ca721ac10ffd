"""Optional LLM pass that turns raw extracted text into clean Markdown.

``clean_content`` is best-effort: whatever goes wrong (provider not
installed, model offline, empty reply) the raw text is returned unchanged so
an article is never lost to the cleanup step.
"""

from __future__ import annotations

import logging
from typing import Any

from paperscraper.config import settings

logger = logging.getLogger(__name__)

# Editions occasionally concatenate a whole page into one article.
MAX_PROMPT_CHARS = 30_000


# ---------------------------------------------------------------------------
# LLM helper
# ---------------------------------------------------------------------------

def _get_llm() -> Any:
    """Return a configured LangChain chat model based on ``settings``."""
    if settings.llm_provider == "openai":
        from langchain_openai import ChatOpenAI

        return ChatOpenAI(model=settings.openai_chat_model, temperature=0)

    from langchain_ollama import ChatOllama

    return ChatOllama(model=settings.ollama_chat_model, temperature=0)


def build_prompt(raw_text: str, title: str) -> str:
    """Return the editor prompt for one article."""
    return (
        "You are an expert editor. Convert the following raw newspaper text into "
        "clean, well-formatted Markdown.\n\n"
        "Rules:\n"
        "1. Fix broken line breaks and paragraph spacing.\n"
        '2. Remove any "Click here" or "Page X" metadata if it appears in the body.\n'
        "3. Ensure the title is a H1 header.\n"
        "4. Do not summarize; keep the full content.\n"
        "5. Return ONLY the Markdown content.\n\n"
        f"Title: {title}\n"
        f"Raw Text:\n{raw_text[:MAX_PROMPT_CHARS]}\n"
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def clean_content(raw_text: str, title: str, *, llm: Any = None) -> str:
    """Return an LLM-cleaned Markdown version of *raw_text*, or *raw_text* itself.

    Args:
        raw_text: Article body as extracted from the page.
        title: Resolved article title, given to the model as context.
        llm: Optional LangChain chat model; built from ``settings`` if omitted.
    """
    if not raw_text.strip():
        return raw_text

    try:
        model = llm if llm is not None else _get_llm()
        response = model.invoke(build_prompt(raw_text, title))
    except Exception as exc:  # noqa: BLE001
        logger.warning("Cleanup failed for %r, keeping raw text: %s", title, exc)
        return raw_text

    cleaned = response.content if hasattr(response, "content") else str(response)
    if not isinstance(cleaned, str) or not cleaned.strip():
        return raw_text
    return cleaned.strip()
