"""
Markdown rendering and content analysis.

Converts a project body to HTML with Python-Markdown and pulls out the
outline, links, images and code blocks, plus word count, reading time and
a rough complexity score.
"""

from __future__ import annotations

import math
import re
from dataclasses import asdict, dataclass, field
from typing import Any
from urllib.parse import urlsplit

import markdown

from folio.content.text import slugify

WORDS_PER_MINUTE = 200
UNDER_ONE_MINUTE = "under 1 minute"
MAX_COMPLEXITY = 10

MARKDOWN_EXTENSIONS = ["attr_list", "fenced_code", "tables", "sane_lists", "toc"]

_CODE_BLOCK_RE = re.compile(
    r"^(```|~~~)[ \t]*([\w+#.-]+)?[^\n]*\n(.*?)^\1[ \t]*$",
    re.MULTILINE | re.DOTALL,
)
_HEADING_RE = re.compile(r"^(#{1,6})[ \t]+(.+?)(?:[ \t]+#+)?[ \t]*$", re.MULTILINE)
_ATTR_SUFFIX_RE = re.compile(r"\s*\{[^}]*\}\s*$")
_IMAGE_RE = re.compile(r"!\[([^\]]*)\]\(\s*([^)\s]+)(?:\s+\"[^\"]*\")?\s*\)")
_LINK_RE = re.compile(r"(?<!!)\[([^\]]+)\]\(\s*([^)\s]+)(?:\s+\"[^\"]*\")?\s*\)")


@dataclass
class Heading:
    level: int
    text: str
    slug: str


@dataclass
class Link:
    text: str
    url: str
    is_external: bool


@dataclass
class Image:
    alt: str
    src: str


@dataclass
class CodeBlock:
    language: str
    code: str


@dataclass
class ContentStats:
    """Size and effort figures for a project body."""

    word_count: int
    character_count: int
    reading_time: int
    reading_time_label: str
    complexity: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class RenderedContent:
    """Everything derived from a Markdown body."""

    html: str
    headings: list[Heading] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)
    images: list[Image] = field(default_factory=list)
    code_blocks: list[CodeBlock] = field(default_factory=list)
    stats: ContentStats | None = None

    @property
    def external_links(self) -> list[Link]:
        return [link for link in self.links if link.is_external]


def _heading_anchor(value: str, separator: str) -> str:
    # Python-Markdown's toc passes already-stripped heading text
    return slugify(value) or "section"


def render_markdown(body: str) -> str:
    """Convert Markdown to HTML.

    Supports ``{: .class #id}`` inline attributes and gives every heading an
    id wrapped in a self-link.
    """
    md = markdown.Markdown(
        extensions=MARKDOWN_EXTENSIONS,
        extension_configs={
            "toc": {"anchorlink": True, "slugify": _heading_anchor},
        },
        output_format="html",
    )
    return md.convert(body)


def _strip_code_blocks(body: str) -> str:
    return _CODE_BLOCK_RE.sub("", body)


def extract_code_blocks(body: str) -> list[CodeBlock]:
    """Fenced code blocks with their declared language (``text`` if none)."""
    return [
        CodeBlock(language=m.group(2) or "text", code=m.group(3).rstrip("\n"))
        for m in _CODE_BLOCK_RE.finditer(body)
    ]


def extract_headings(body: str) -> list[Heading]:
    """ATX headings outside code blocks."""
    headings = []
    for m in _HEADING_RE.finditer(_strip_code_blocks(body)):
        text = _ATTR_SUFFIX_RE.sub("", m.group(2)).strip()
        if text:
            headings.append(Heading(level=len(m.group(1)), text=text, slug=slugify(text)))
    return headings


def is_external_url(url: str) -> bool:
    """A URL is external iff it is absolute (has a scheme and a host)."""
    parts = urlsplit(url)
    return bool(parts.scheme and parts.netloc)


def extract_links(body: str) -> list[Link]:
    """Inline Markdown links (images excluded)."""
    return [
        Link(text=m.group(1), url=m.group(2), is_external=is_external_url(m.group(2)))
        for m in _LINK_RE.finditer(_strip_code_blocks(body))
    ]


def extract_images(body: str) -> list[Image]:
    return [
        Image(alt=m.group(1), src=m.group(2))
        for m in _IMAGE_RE.finditer(_strip_code_blocks(body))
    ]


def count_words(text: str) -> int:
    """Whitespace-delimited token count."""
    return len(text.split())


def estimate_reading_time(word_count: int) -> int:
    """Minutes at 200 words per minute, rounded up."""
    if word_count <= 0:
        return 0
    return math.ceil(word_count / WORDS_PER_MINUTE)


def format_reading_time(minutes: int) -> str:
    if not minutes or minutes < 1:
        return UNDER_ONE_MINUTE
    return f"{minutes} min"


def assess_complexity(
    category_count: int,
    tech_count: int,
    word_count: int,
    code_block_count: int,
    external_link_count: int,
) -> int:
    """Score from 1 to 10."""
    score = 1.0
    score += category_count * 0.2
    score += tech_count * 0.3
    if word_count > 2000:
        score += 2
    elif word_count > 1000:
        score += 1
    score += code_block_count * 0.5
    score += external_link_count * 0.1

    # Round away float noise before ceil (0.2 * 5 is 1.0000000000000002)
    return max(1, min(math.ceil(round(score, 6)), MAX_COMPLEXITY))


def render_content(body: str, category_count: int = 0, tech_count: int = 0) -> RenderedContent:
    """Render a body and compute all derived content data."""
    code_blocks = extract_code_blocks(body)
    links = extract_links(body)
    word_count = count_words(body)
    minutes = estimate_reading_time(word_count)

    stats = ContentStats(
        word_count=word_count,
        character_count=len(body),
        reading_time=minutes,
        reading_time_label=format_reading_time(minutes),
        complexity=assess_complexity(
            category_count,
            tech_count,
            word_count,
            len(code_blocks),
            sum(1 for link in links if link.is_external),
        ),
    )

    return RenderedContent(
        html=render_markdown(body),
        headings=extract_headings(body),
        links=links,
        images=extract_images(body),
        code_blocks=code_blocks,
        stats=stats,
    )


def render_project(record: Any, body: str) -> RenderedContent:
    """Render a body using a project record's category and tech counts."""
    return render_content(
        body,
        category_count=len(getattr(record, "categories", None) or []),
        tech_count=len(getattr(record, "tech_stack", None) or []),
    )
