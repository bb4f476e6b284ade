"""
Project index aggregation.

Parses every project source, drops what shouldn't ship, sorts newest
first and folds the survivors into the JSON index plus aggregate metadata.
Aggregates are computed from the entry list; nothing is accumulated in
module or instance state.
"""

from __future__ import annotations

import json
import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from folio import __version__
from folio.content.frontmatter import FrontmatterError
from folio.content.project import ParsedProject, parse_project_file
from folio.content.scanner import find_project_folders, source_for
from folio.core.backup import safe_write_json
from folio.core.config import SiteConfig, SitePaths

console = Console()
logger = logging.getLogger(__name__)

SIMPLE_INDEX_FIELDS = ("title", "description", "image", "categories", "url")


@dataclass
class SkippedSource:
    """A project source left out of the index, with the reason."""

    folder: Path
    reason: str
    duplicate_of: Path | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"folder": self.folder.name, "reason": self.reason}


@dataclass
class IndexResult:
    """The aggregated index for one build."""

    projects: list[dict[str, Any]] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    skipped: list[SkippedSource] = field(default_factory=list)
    drafts_dropped: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Full index document: ``{projects, metadata}``."""
        return {"projects": self.projects, "metadata": self.metadata}

    def simple_index(self) -> list[dict[str, Any]]:
        """Reduced index for consumers that only know the original five fields."""
        return [{key: project.get(key) for key in SIMPLE_INDEX_FIELDS} for project in self.projects]

    @property
    def published(self) -> list[dict[str, Any]]:
        return [p for p in self.projects if p.get("status") == "published"]

    @property
    def duplicates(self) -> dict[Path, str]:
        """Folders left out because an earlier folder already claimed their slug."""
        return {s.folder: s.reason for s in self.skipped if s.duplicate_of is not None}


def resolve_image_path(image_path: str | None, folder_name: str, url_prefix: str) -> str | None:
    """Normalize a hero image path relative to the site's project pages.

    Absolute URLs and ``../images/...`` paths are kept; ``images/x`` inside a
    project folder becomes ``../images/<url_prefix>/<folder>/x``.
    """
    if not image_path:
        return None
    if "://" in image_path or image_path.startswith(("../images/", "/")):
        return image_path
    if image_path.startswith("images/"):
        return f"../images/{url_prefix}/{folder_name}/{image_path[len('images/'):]}"
    return image_path


def resolve_image_url(image_path: str | None, folder_name: str, config: SiteConfig) -> str | None:
    """Absolute URL of a project image, for social cards and the sitemap."""
    if not image_path:
        return None
    if "://" in image_path:
        return image_path

    relative = resolve_image_path(image_path, folder_name, config.url_prefix) or ""
    if relative.startswith("../"):
        relative = relative[len("../"):]
    elif not relative.startswith(("/", "images/")):
        relative = f"images/{config.url_prefix}/{folder_name}/{relative}"
    return f"{config.base_url}/{relative.lstrip('/')}"


def build_index_entry(
    parsed: ParsedProject,
    folder_name: str,
    config: SiteConfig,
    generated_at: str,
) -> dict[str, Any]:
    """Build the index record for one project."""
    record = parsed.record
    stats = parsed.rendered.stats

    return {
        # Core fields, also exposed by the reduced index
        "title": record.title,
        "description": record.description,
        "image": resolve_image_path(record.hero_image, folder_name, config.url_prefix),
        "categories": list(record.categories),
        "url": folder_name,
        # Enhanced fields
        "slug": record.slug,
        "excerpt": record.excerpt,
        "date": record.date.isoformat(),
        "last_updated": record.last_updated,
        "status": record.status.value,
        "featured": record.featured,
        "tags": list(record.tags),
        "tech_stack": list(record.tech_stack),
        "hero_image": record.hero_image,
        # SEO and social
        "seo_title": record.seo_title,
        "seo_description": record.seo_description,
        "canonical_url": record.canonical_url,
        "og_title": record.og_title,
        "og_description": record.og_description,
        "og_image": record.og_image,
        "twitter_card": record.twitter_card,
        "twitter_title": record.twitter_title,
        "twitter_description": record.twitter_description,
        "twitter_image": record.twitter_image,
        "github_url": record.github_url,
        # Stats
        "reading_time": stats.reading_time if stats else 0,
        "word_count": stats.word_count if stats else 0,
        "complexity": stats.complexity if stats else 1,
        "schema_type": record.schema_type,
        "generated_at": generated_at,
    }


def discover_projects(projects_dir: Path, strict: bool = False) -> list[Path]:
    """Every project folder under projects_dir, sorted by folder name.

    Raises:
        FileNotFoundError: If strict and the directory is missing
    """
    folders = find_project_folders(projects_dir, strict=strict)
    logger.debug("Found %d project folders in %s", len(folders), projects_dir)
    return folders


def load_projects(
    folders: list[Path],
    config: SiteConfig,
    production: bool = False,
    today: date | None = None,
) -> tuple[list[tuple[Path, ParsedProject]], list[SkippedSource], int]:
    """Parse project folders, skipping invalid ones.

    Returns:
        (loaded (folder, project) pairs, skipped sources, drafts dropped)
    """
    loaded: list[tuple[Path, ParsedProject]] = []
    skipped: list[SkippedSource] = []
    drafts_dropped = 0
    seen_slugs: dict[str, Path] = {}

    for folder in folders:
        try:
            parsed = parse_project_file(source_for(folder), config, today=today)
        except (FrontmatterError, OSError, UnicodeDecodeError) as e:
            reason = "; ".join(e.errors) if isinstance(e, FrontmatterError) else str(e)
            console.print(f"[yellow]Skipping {folder.name}: {reason}[/yellow]")
            logger.warning("Skipping %s: %s", folder, reason)
            skipped.append(SkippedSource(folder, reason))
            continue

        if production and parsed.record.is_draft:
            logger.debug("Dropping draft %s from production index", folder.name)
            drafts_dropped += 1
            continue

        slug = parsed.record.slug
        if slug in seen_slugs:
            reason = f"Duplicate slug '{slug}' (already used by {seen_slugs[slug].name})"
            console.print(f"[yellow]Skipping {folder.name}: {reason}[/yellow]")
            skipped.append(SkippedSource(folder, reason, duplicate_of=seen_slugs[slug]))
            continue

        seen_slugs[slug] = folder
        loaded.append((folder, parsed))

    return loaded, skipped, drafts_dropped


def sort_by_date(entries: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Newest first; entries sharing a date keep their input order."""
    return sorted(entries, key=lambda e: e["date"], reverse=True)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_metadata(
    entries: list[dict[str, Any]],
    generated_at: str,
    build_version: str = __version__,
) -> dict[str, Any]:
    """Aggregate counts and distinct values over index entries."""
    statuses = Counter(e.get("status") for e in entries)
    categories = {c for e in entries for c in e.get("categories", [])}
    tags = {t for e in entries for t in e.get("tags", [])}
    tech_stack = {t for e in entries for t in e.get("tech_stack", [])}
    complexity = Counter(e.get("complexity") or 1 for e in entries)

    if entries:
        average_reading_time = _round_half_up(
            sum(e.get("reading_time") or 0 for e in entries) / len(entries)
        )
    else:
        average_reading_time = 0

    return {
        "generated_at": generated_at,
        "total_projects": len(entries),
        "published_projects": statuses.get("published", 0),
        "draft_projects": statuses.get("draft", 0),
        "archived_projects": statuses.get("archived", 0),
        "featured_projects": sum(1 for e in entries if e.get("featured")),
        "build_version": build_version,
        "available_categories": sorted(categories),
        "available_tags": sorted(tags),
        "available_tech_stack": sorted(tech_stack),
        "average_reading_time": average_reading_time,
        "complexity_distribution": {str(k): complexity[k] for k in sorted(complexity)},
    }


def build_index(
    folders: list[Path],
    config: SiteConfig,
    production: bool = False,
    now: datetime | None = None,
) -> IndexResult:
    """Parse, filter, sort and aggregate all projects.

    An empty folder list produces an empty index.
    """
    now = now or datetime.now(timezone.utc)
    generated_at = now.isoformat()

    loaded, skipped, drafts_dropped = load_projects(folders, config, production, today=now.date())
    entries = [
        build_index_entry(parsed, folder.name, config, generated_at)
        for folder, parsed in loaded
    ]
    entries = sort_by_date(entries)

    return IndexResult(
        projects=entries,
        metadata=compute_metadata(entries, generated_at),
        skipped=skipped,
        drafts_dropped=drafts_dropped,
    )


def write_index(result: IndexResult, paths: SitePaths) -> tuple[Path, Path]:
    """Write index.json and index-simple.json.

    Returns:
        (full index path, simple index path)
    """
    safe_write_json(paths.index_json, result.to_dict())
    safe_write_json(paths.simple_index_json, result.simple_index())
    console.print(f"[green]Written index to {paths.index_json}[/green]")
    console.print(f"[green]Written simple index to {paths.simple_index_json}[/green]")
    return paths.index_json, paths.simple_index_json


def validate_index_file(path: Path) -> int:
    """Check a written index.json.

    Returns:
        Number of projects in the index

    Raises:
        ValueError: If the file is missing, not JSON, or malformed
    """
    path = Path(path)
    if not path.is_file():
        raise ValueError(f"Index file was not created: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid project index JSON: {e}") from e

    projects = data.get("projects") if isinstance(data, dict) else None
    if not isinstance(projects, list):
        raise ValueError("Invalid index structure: 'projects' must be a list")

    for project in projects:
        if not isinstance(project, dict) or not all(
            project.get(key) for key in ("title", "description", "categories")
        ):
            raise ValueError(f"Invalid project data: {json.dumps(project)[:200]}")

    return len(projects)


def print_index_report(result: IndexResult) -> None:
    """Print a summary table of the aggregated index."""
    meta = result.metadata
    table = Table(title="Index Generation Report")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Projects", str(meta.get("total_projects", 0)))
    table.add_row("Published", str(meta.get("published_projects", 0)))
    table.add_row("Drafts", str(meta.get("draft_projects", 0)))
    table.add_row("Featured", str(meta.get("featured_projects", 0)))
    table.add_row("Skipped (invalid)", str(len(result.skipped)))
    table.add_row("Drafts dropped", str(result.drafts_dropped))
    table.add_row("Categories", ", ".join(meta.get("available_categories", [])) or "-")
    table.add_row("Average reading time", f"{meta.get('average_reading_time', 0)} min")

    tech = meta.get("available_tech_stack", [])
    if tech:
        suffix = "..." if len(tech) > 5 else ""
        table.add_row("Technologies", ", ".join(tech[:5]) + suffix)

    console.print(table)
