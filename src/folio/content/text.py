"""String helpers shared by the parser and renderer."""

from __future__ import annotations

import re
import unicodedata
from xml.sax.saxutils import escape

EXCERPT_LENGTH = 120
SEO_TITLE_LENGTH = 60
SEO_DESCRIPTION_LENGTH = 160
ELLIPSIS = "..."
XML_QUOTE_ENTITIES = {"'": "&apos;", '"': "&quot;"}


def slugify(text: str) -> str:
    """Convert text to a URL-friendly slug.

    Accents are folded to ASCII, everything is lowercased, runs of spaces,
    underscores and punctuation become a single hyphen. The result only
    contains ``a-z``, ``0-9`` and ``-``, and ``slugify(slugify(x)) == slugify(x)``.
    """
    normalized = unicodedata.normalize("NFKD", str(text))
    slug = normalized.encode("ascii", "ignore").decode("ascii").lower()
    slug = re.sub(r"[^a-z0-9\s_-]", "", slug)
    slug = re.sub(r"[\s_]+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def truncate(text: str, max_length: int) -> str:
    """Cap text at max_length characters, ellipsis included."""
    if len(text) <= max_length:
        return text
    return text[: max_length - len(ELLIPSIS)] + ELLIPSIS


def make_excerpt(text: str, max_length: int = EXCERPT_LENGTH) -> str:
    """Short plain-text summary that never cuts a word in half.

    Markdown emphasis characters are dropped. Truncated excerpts end with
    an ellipsis and stay within max_length.
    """
    if not text:
        return ""
    cleaned = re.sub(r"[#*`]", "", str(text))
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    if len(cleaned) <= max_length:
        return cleaned

    cut = cleaned[: max_length - len(ELLIPSIS)]
    if cleaned[len(cut)] != " " and " " in cut:
        cut = cut[: cut.rfind(" ")]
    return cut.rstrip(" ,;:.-") + ELLIPSIS


def escape_xml(value: str) -> str:
    """Escape the five XML special characters."""
    return escape(str(value), XML_QUOTE_ENTITIES)
