"""Encoding-aware HTML loading: bytes in, BeautifulSoup tree out.

Founder-era sites often serve GBK/GB2312 pages with a wrong or missing
charset header, so the bytes are decoded as UTF-8 first and then sniffed:

* a ``charset=`` declaration naming a legacy Chinese encoding, or
* a U+FFFD replacement character left behind by a failed UTF-8 decode

triggers a second decode of the *original* bytes with ``gb18030`` (a superset
of GBK and GB2312).  The text is parsed with lxml, whose HTML parser closes
the unterminated ``<p>``, ``<td>`` and ``<tr>`` tags common on these pages.
Nothing here raises on malformed input.
"""

from __future__ import annotations

import codecs
import logging
import re

from bs4 import BeautifulSoup

from paperscraper.scraper.models import RawDocument

logger = logging.getLogger(__name__)

LEGACY_CODEC = "gb18030"

_LEGACY_CHARSET = re.compile(
    r"""charset\s*=\s*["']?\s*(gb2312|gbk|gb18030)\b""", re.IGNORECASE
)
_REPLACEMENT_CHAR = "\ufffd"


def _legacy_signals(text: str) -> tuple[bool, bool]:
    """Return ``(declared_legacy_charset, has_replacement_chars)`` for *text*."""
    return bool(_LEGACY_CHARSET.search(text)), _REPLACEMENT_CHAR in text


def decode_html(data: bytes) -> str:
    """Decode *data* as UTF-8, switching to the legacy codec when sniffing says so."""
    text = data.decode("utf-8-sig", errors="replace")

    declared, replaced = _legacy_signals(text)
    if not (declared or replaced):
        return text

    try:
        decoder = codecs.getdecoder(LEGACY_CODEC)
    except LookupError as exc:
        logger.warning("Legacy decoder %s unavailable, keeping UTF-8: %s", LEGACY_CODEC, exc)
        return text

    logger.debug(
        "Switching to %s (meta: %s, replacement chars: %s)", LEGACY_CODEC, declared, replaced
    )
    legacy_text, _ = decoder(data, "replace")
    if legacy_text:
        return legacy_text
    return text


def load_document(source: RawDocument | bytes) -> BeautifulSoup:
    """Decode and parse *source* into a :class:`~bs4.BeautifulSoup` tree."""
    data = source.content if isinstance(source, RawDocument) else source
    return BeautifulSoup(decode_html(data or b""), "lxml")
