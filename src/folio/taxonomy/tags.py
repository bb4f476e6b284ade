"""Tag, category and tech stack metadata for the site's filter bar.

Collects usage counts from the index, picks display colours and writes
``tags-metadata.json``. The main site's HTML and CSS are never touched.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rich.console import Console

from folio import __version__
from folio.content.text import slugify
from folio.core.backup import safe_write_json

console = Console()

# Tech used by at least this many projects becomes a filter
MIN_TECH_FILTER_USAGE = 2

TAG_COLORS = {
    "automation": "#4a6cf7",
    "python": "#3776ab",
    "n8n": "#8a2be2",
    "power-bi": "#f2c811",
    "ai": "#ff6b6b",
    "no-code": "#51cf66",
    "sql": "#336791",
    "vibe-coding": "#ff8787",
    "javascript": "#f7df1e",
    "css": "#1572b6",
    "html": "#e34f26",
    "nodejs": "#339933",
    "react": "#61dafb",
    "docker": "#2496ed",
    "git": "#f05032",
}


@dataclass
class TagStats:
    """Usage counts per kind of label."""

    categories: Counter = field(default_factory=Counter)
    tags: Counter = field(default_factory=Counter)
    tech_stack: Counter = field(default_factory=Counter)

    def usage(self, name: str) -> int:
        """Combined category and tech usage, used to rank filters."""
        return self.categories[name] + self.tech_stack[name]


def collect_tag_stats(entries: list[dict[str, Any]]) -> TagStats:
    return TagStats(
        categories=Counter(c for e in entries for c in e.get("categories") or []),
        tags=Counter(t for e in entries for t in e.get("tags") or []),
        tech_stack=Counter(t for e in entries for t in e.get("tech_stack") or []),
    )


def build_filter_config(stats: TagStats) -> list[str]:
    """Every category plus popular tech, by usage then name."""
    names = set(stats.categories)
    names.update(t for t, count in stats.tech_stack.items() if count >= MIN_TECH_FILTER_USAGE)
    return sorted(names, key=lambda name: (-stats.usage(name), name))


def _string_hash(value: str) -> int:
    h = 0
    for ch in value:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    return h


def tag_color(name: str) -> str:
    """Palette colour for well-known labels, else a stable HSL colour."""
    fixed = TAG_COLORS.get(slugify(name))
    if fixed:
        return fixed

    h = _string_hash(name)
    hue = h % 360
    saturation = 60 + h % 30
    lightness = 45 + h % 20
    return f"hsl({hue}, {saturation}%, {lightness}%)"


def build_tag_metadata(
    entries: list[dict[str, Any]],
    now: datetime | None = None,
) -> dict[str, Any]:
    """Assemble the tags-metadata.json document."""
    now = now or datetime.now(timezone.utc)
    stats = collect_tag_stats(entries)
    filters = build_filter_config(stats)

    return {
        "generated_at": now.isoformat(),
        "version": __version__,
        "summary": {
            "total_categories": len(stats.categories),
            "total_tags": len(stats.tags),
            "total_tech_stack": len(stats.tech_stack),
            "total_filters": len(filters),
        },
        "categories": [
            {"name": name, "slug": slugify(name), "count": stats.categories[name], "color": tag_color(name)}
            for name in sorted(stats.categories)
        ],
        "tags": [
            {"name": name, "slug": slugify(name), "count": stats.tags[name]}
            for name in sorted(stats.tags)
        ],
        "tech_stack": [
            {"name": name, "slug": slugify(name), "count": stats.tech_stack[name], "color": tag_color(name)}
            for name in sorted(stats.tech_stack)
        ],
        "filters": [
            {
                "name": name,
                "slug": slugify(name),
                "type": "category" if name in stats.categories else "technology",
                "count": stats.usage(name),
            }
            for name in filters
        ],
    }


def write_tag_metadata(
    entries: list[dict[str, Any]],
    path: Path,
    now: datetime | None = None,
) -> dict[str, Any]:
    metadata = build_tag_metadata(entries, now)
    safe_write_json(path, metadata)

    summary = metadata["summary"]
    console.print(
        f"[green]Tag metadata: {summary['total_categories']} categories, "
        f"{summary['total_tags']} tags, {summary['total_tech_stack']} technologies, "
        f"{summary['total_filters']} filters[/green]"
    )
    return metadata
