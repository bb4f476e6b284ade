"""
Project records.

Turns validated front matter into a ProjectRecord: derived defaults
(slug, excerpt, SEO and social fields, schema type) are filled in, known
fields get real types and everything else lands in ``extra``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Union

from folio.content.frontmatter import (
    FallbackParser,
    FrontmatterError,
    FrontmatterParser,
    YamlFrontmatterParser,
    coerce_date,
    validate_frontmatter,
)
from folio.content.renderer import RenderedContent, render_project
from folio.content.text import (
    SEO_DESCRIPTION_LENGTH,
    SEO_TITLE_LENGTH,
    make_excerpt,
    slugify,
    truncate,
)
from folio.core.config import SiteConfig

FieldValue = Union[str, list[str], bool, int, float]

DEFAULT_CATEGORIES = ["General"]

# Lowercased category keyword -> schema.org type, checked in order
SCHEMA_TYPE_KEYWORDS: list[tuple[str, frozenset[str]]] = [
    ("SoftwareApplication", frozenset({"automation", "python", "n8n", "ai", "no-code"})),
    ("Dataset", frozenset({"power-bi", "sql", "analysis", "data"})),
    ("WebSite", frozenset({"vibe-coding", "portfolio"})),
]
DEFAULT_SCHEMA_TYPE = "CreativeWork"


class ProjectStatus(Enum):
    """Publication status of a project."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


@dataclass
class ProjectRecord:
    """One portfolio project, parsed from a single source file."""

    title: str
    description: str
    slug: str
    date: date
    status: ProjectStatus = ProjectStatus.PUBLISHED
    featured: bool = False
    categories: list[str] = field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    tags: list[str] = field(default_factory=list)
    tech_stack: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    excerpt: str = ""
    hero_image: str | None = None
    hero_alt: str | None = None
    github_url: str | None = None
    demo_url: str | None = None
    seo_title: str = ""
    seo_description: str = ""
    canonical_url: str = ""
    og_title: str = ""
    og_description: str = ""
    og_image: str | None = None
    og_type: str = "article"
    twitter_card: str = "summary_large_image"
    twitter_title: str = ""
    twitter_description: str = ""
    twitter_image: str | None = None
    schema_type: str = DEFAULT_SCHEMA_TYPE
    language: str = "en"
    last_updated: str = ""
    extra: dict[str, FieldValue] = field(default_factory=dict)

    @property
    def is_draft(self) -> bool:
        return self.status is ProjectStatus.DRAFT

    @property
    def is_published(self) -> bool:
        return self.status is ProjectStatus.PUBLISHED

    def to_dict(self) -> dict[str, Any]:
        """Flatten to JSON-safe values, extension fields included."""
        data: dict[str, Any] = dict(self.extra)
        for name in KNOWN_FIELDS:
            data[name] = getattr(self, name)
        data["date"] = self.date.isoformat()
        data["status"] = self.status.value
        return data


KNOWN_FIELDS = tuple(
    name for name in ProjectRecord.__dataclass_fields__ if name != "extra"
)


@dataclass
class ParsedProject:
    """A project record plus its body and rendered content."""

    record: ProjectRecord
    body: str
    rendered: RenderedContent
    source: Path | None = None
    degraded: bool = False


def infer_schema_type(categories: list[str]) -> str:
    """Classify a project for structured data from its categories."""
    lowered = {str(c).lower() for c in categories}
    for schema_type, keywords in SCHEMA_TYPE_KEYWORDS:
        if lowered & keywords:
            return schema_type
    return DEFAULT_SCHEMA_TYPE


def _as_list(value: Any) -> list[str]:
    if value is None or value == "":
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v is not None]
    return [str(value)]


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    return bool(value)


def _optional_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _field_value(value: Any) -> FieldValue:
    """Narrow an arbitrary YAML value to the extension field union."""
    if isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def enhance_frontmatter(
    front_matter: dict[str, Any],
    config: SiteConfig,
    today: date | None = None,
) -> dict[str, Any]:
    """Fill in derived defaults on a copy of validated front matter."""
    today = today or date.today()
    enhanced = dict(front_matter)

    title = str(enhanced["title"]).strip()
    description = str(enhanced["description"]).strip()
    enhanced["title"] = title
    enhanced["description"] = description

    enhanced["slug"] = slugify(enhanced.get("slug") or title)
    if not enhanced.get("excerpt"):
        enhanced["excerpt"] = make_excerpt(description)

    enhanced["date"] = coerce_date(enhanced["date"])
    enhanced["last_updated"] = today.isoformat()
    enhanced["status"] = enhanced.get("status") or ProjectStatus.PUBLISHED.value
    enhanced["featured"] = _as_bool(enhanced.get("featured", False))
    enhanced["language"] = enhanced.get("language") or config.language

    enhanced["categories"] = _as_list(enhanced.get("categories")) or list(DEFAULT_CATEGORIES)
    enhanced["tags"] = _as_list(enhanced.get("tags"))
    enhanced["tech_stack"] = _as_list(enhanced.get("tech_stack"))
    enhanced["keywords"] = _as_list(enhanced.get("keywords"))

    enhanced["seo_title"] = enhanced.get("seo_title") or truncate(title, SEO_TITLE_LENGTH)
    enhanced["seo_description"] = enhanced.get("seo_description") or truncate(
        description, SEO_DESCRIPTION_LENGTH
    )
    enhanced["canonical_url"] = enhanced.get("canonical_url") or config.project_url(enhanced["slug"])

    hero_image = _optional_str(enhanced.get("hero_image"))
    enhanced["og_title"] = enhanced.get("og_title") or title
    enhanced["og_description"] = enhanced.get("og_description") or description
    enhanced["og_type"] = enhanced.get("og_type") or "article"
    enhanced["og_image"] = enhanced.get("og_image") or hero_image
    enhanced["twitter_card"] = enhanced.get("twitter_card") or "summary_large_image"
    enhanced["twitter_title"] = enhanced.get("twitter_title") or title
    enhanced["twitter_description"] = enhanced.get("twitter_description") or description
    enhanced["twitter_image"] = enhanced.get("twitter_image") or hero_image

    enhanced["schema_type"] = enhanced.get("schema_type") or infer_schema_type(enhanced["categories"])

    if hero_image and not enhanced.get("hero_alt"):
        enhanced["hero_alt"] = f"Project preview: {title}"

    return enhanced


def record_from_frontmatter(enhanced: dict[str, Any]) -> ProjectRecord:
    """Promote known fields to typed attributes, keep the rest in extra."""
    known: dict[str, Any] = {}
    extra: dict[str, FieldValue] = {}
    for key, value in enhanced.items():
        if key in KNOWN_FIELDS:
            known[key] = value
        elif value is not None:
            extra[key] = _field_value(value)

    for name in ("title", "description", "slug", "excerpt", "seo_title", "seo_description",
                 "canonical_url", "og_title", "og_description", "og_type", "twitter_card",
                 "twitter_title", "twitter_description", "schema_type", "language",
                 "last_updated"):
        if name in known and known[name] is not None:
            known[name] = str(known[name])
    for name in ("hero_image", "hero_alt", "github_url", "demo_url", "og_image", "twitter_image"):
        if name in known:
            known[name] = _optional_str(known[name])

    known["status"] = ProjectStatus(known.get("status", ProjectStatus.PUBLISHED.value))
    return ProjectRecord(**known, extra=extra)


def parse_project(
    text: str,
    config: SiteConfig,
    path: Path | None = None,
    parser: FrontmatterParser | None = None,
    today: date | None = None,
) -> ParsedProject:
    """Parse, validate, enhance and render one project source.

    Raises:
        FrontmatterError: If the header is unreadable or fails validation
    """
    parser = parser or YamlFrontmatterParser()
    try:
        document = parser.parse(text)
    except FrontmatterError as e:
        raise FrontmatterError(e.errors, path) from e

    errors = validate_frontmatter(document.front_matter)
    if errors:
        raise FrontmatterError(errors, path)

    enhanced = enhance_frontmatter(document.front_matter, config, today)
    if not enhanced["slug"]:
        raise FrontmatterError(["Cannot derive a slug from the title; set slug explicitly"], path)

    record = record_from_frontmatter(enhanced)
    return ParsedProject(
        record=record,
        body=document.body,
        rendered=render_project(record, document.body),
        source=path,
        degraded=document.degraded,
    )


def parse_project_file(
    path: Path,
    config: SiteConfig,
    parser: FrontmatterParser | None = None,
    today: date | None = None,
) -> ParsedProject:
    """Read and parse a project source file.

    Raises:
        FrontmatterError: If validation fails
        OSError: If the file can't be read
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    return parse_project(text, config, path=path, parser=parser, today=today)


def lenient_parser() -> FrontmatterParser:
    """The degraded-mode parser chain used by the legacy pipeline."""
    return FallbackParser()
