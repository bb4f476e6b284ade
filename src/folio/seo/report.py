"""SEO report: content analysis and recommendations over published projects."""

from __future__ import annotations

from collections import Counter
from datetime import datetime
from enum import Enum
from typing import Any

from rich.console import Console
from rich.table import Table

console = Console()

FIXED_SITEMAP_SECTIONS = 4
TITLE_MAX_LENGTH = 60
META_DESCRIPTION_MIN_LENGTH = 120
SHORT_DESCRIPTION_LENGTH = 50


class Priority(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def _average(entries: list[dict[str, Any]], key: str) -> int:
    values = [e[key] for e in entries if isinstance(e.get(key), (int, float)) and e[key]]
    if not values:
        return 0
    return int(sum(values) / len(values) + 0.5)


def _distribution(entries: list[dict[str, Any]], key: str) -> dict[str, int]:
    counts = Counter(value for e in entries for value in e.get(key) or [])
    return dict(counts.most_common())


def build_recommendations(published: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Recommendations keyed by issue type, most urgent first."""
    checks = [
        (
            "meta_description",
            Priority.HIGH,
            [p for p in published if len(p.get("seo_description") or "") < META_DESCRIPTION_MIN_LENGTH],
            "{n} projects need better meta descriptions (120-160 characters)",
        ),
        (
            "images",
            Priority.MEDIUM,
            [p for p in published if not p.get("hero_image")],
            "{n} projects are missing hero images",
        ),
        (
            "title_length",
            Priority.MEDIUM,
            [p for p in published if len(p.get("title") or "") > TITLE_MAX_LENGTH],
            "{n} projects have titles longer than 60 characters",
        ),
        (
            "github_links",
            Priority.LOW,
            [p for p in published if not p.get("github_url")],
            "{n} projects could benefit from GitHub links",
        ),
    ]

    return [
        {
            "type": issue_type,
            "priority": priority.value,
            "count": len(matches),
            "message": message.format(n=len(matches)),
            "projects": [p.get("slug") for p in matches],
        }
        for issue_type, priority, matches, message in checks
        if matches
    ]


def build_seo_report(
    entries: list[dict[str, Any]],
    now: datetime,
    sitemap_url_count: int | None = None,
) -> dict[str, Any]:
    """Summarize SEO coverage of the index."""
    published = [e for e in entries if e.get("status") == "published"]
    if sitemap_url_count is None:
        sitemap_url_count = len(published) + FIXED_SITEMAP_SECTIONS

    return {
        "generated": now.isoformat(),
        "summary": {
            "total_projects": len(entries),
            "published_projects": len(published),
            "featured_projects": sum(1 for p in published if p.get("featured")),
            "average_reading_time": _average(published, "reading_time"),
            "average_complexity": _average(published, "complexity"),
        },
        "seo": {
            "sitemap": {
                "generated": True,
                "urls": sitemap_url_count,
                "last_updated": now.date().isoformat(),
            },
            "structured_data": {
                "implemented": True,
                "schemas": ["Person", "WebSite", "ItemList", "CreativeWork/SoftwareApplication"],
            },
            "social_media": {"open_graph": True, "twitter_cards": True},
        },
        "content_analysis": {
            "missing_descriptions": sum(
                1 for p in published if len(p.get("description") or "") < SHORT_DESCRIPTION_LENGTH
            ),
            "missing_images": sum(1 for p in published if not p.get("hero_image")),
            "long_titles": sum(1 for p in published if len(p.get("title") or "") > TITLE_MAX_LENGTH),
            "short_descriptions": sum(
                1
                for p in published
                if p.get("description") and len(p["description"]) < META_DESCRIPTION_MIN_LENGTH
            ),
            "categories_distribution": _distribution(published, "categories"),
            "tags_usage": _distribution(published, "tags"),
        },
        "recommendations": build_recommendations(published),
    }


def print_seo_summary(report: dict[str, Any]) -> None:
    summary = report["summary"]
    console.print(
        f"\n[cyan]SEO Summary:[/cyan] {summary['published_projects']} published, "
        f"{summary['featured_projects']} featured, "
        f"{report['seo']['sitemap']['urls']} sitemap URLs"
    )

    recommendations = report.get("recommendations") or []
    if not recommendations:
        console.print("[green]No SEO recommendations[/green]")
        return

    table = Table(title="SEO Recommendations")
    table.add_column("Priority")
    table.add_column("Type", style="cyan")
    table.add_column("Message")

    colors = {"high": "red", "medium": "yellow", "low": "dim"}
    for rec in recommendations:
        color = colors.get(rec["priority"], "white")
        table.add_row(f"[{color}]{rec['priority'].upper()}[/{color}]", rec["type"], rec["message"])
    console.print(table)
