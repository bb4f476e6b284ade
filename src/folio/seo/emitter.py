"""
SEO artifact generation.

Every builder here is a pure function of the published index entries, the
site configuration and a frozen ``now``; only ``write_seo_package`` touches
the filesystem.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rich.console import Console

from folio.content.text import escape_xml
from folio.core.backup import safe_write_json, write_text_atomic
from folio.core.config import SiteConfig, SitePaths
from folio.index.aggregator import resolve_image_url
from folio.seo.report import build_seo_report, print_seo_summary

console = Console()
logger = logging.getLogger(__name__)

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
IMAGE_NAMESPACE = "http://www.google.com/schemas/sitemap-image/1.1"

# (fragment, changefreq, priority) for the fixed sections of the home page
SITE_SECTIONS = (
    ("", "weekly", "1.0"),
    ("#projects", "weekly", "0.9"),
    ("#about", "monthly", "0.7"),
    ("#contact", "monthly", "0.6"),
)

ITEM_LIST_LIMIT = 10


@dataclass(frozen=True)
class SitemapUrl:
    loc: str
    lastmod: str
    changefreq: str
    priority: str
    image: str | None = None


def published_only(entries: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [e for e in entries if e.get("status") == "published"]


def _project_slug(entry: dict[str, Any]) -> str:
    return entry.get("slug") or entry.get("url") or ""


def _entry_image_url(entry: dict[str, Any], key: str, config: SiteConfig) -> str | None:
    return resolve_image_url(entry.get(key) or entry.get("hero_image"), entry.get("url", ""), config)


def build_sitemap_urls(
    entries: list[dict[str, Any]],
    config: SiteConfig,
    now: datetime,
) -> list[SitemapUrl]:
    """Fixed site sections followed by one URL per published project."""
    today = now.date().isoformat()
    urls = [
        SitemapUrl(
            loc=f"{config.base_url}/{fragment}" if fragment else config.base_url,
            lastmod=today,
            changefreq=changefreq,
            priority=priority,
        )
        for fragment, changefreq, priority in SITE_SECTIONS
    ]

    for entry in published_only(entries):
        featured = bool(entry.get("featured"))
        urls.append(
            SitemapUrl(
                loc=config.project_url(_project_slug(entry)),
                lastmod=entry.get("last_updated") or entry.get("date") or today,
                changefreq="monthly" if featured else "yearly",
                priority="0.8" if featured else "0.6",
                image=resolve_image_url(entry.get("hero_image"), entry.get("url", ""), config),
            )
        )
    return urls


def render_sitemap_xml(urls: list[SitemapUrl]) -> str:
    """Serialize sitemap URLs; the image namespace is declared only when used."""
    lines = ['<?xml version="1.0" encoding="UTF-8"?>']
    opening = f'<urlset xmlns="{SITEMAP_NAMESPACE}"'
    if any(url.image for url in urls):
        opening += f' xmlns:image="{IMAGE_NAMESPACE}"'
    lines.append(opening + ">")

    for url in urls:
        lines.append("  <url>")
        lines.append(f"    <loc>{escape_xml(url.loc)}</loc>")
        lines.append(f"    <lastmod>{escape_xml(url.lastmod)}</lastmod>")
        lines.append(f"    <changefreq>{url.changefreq}</changefreq>")
        lines.append(f"    <priority>{url.priority}</priority>")
        if url.image:
            lines.append("    <image:image>")
            lines.append(f"      <image:loc>{escape_xml(url.image)}</image:loc>")
            lines.append("    </image:image>")
        lines.append("  </url>")

    lines.append("</urlset>")
    return "\n".join(lines) + "\n"


def render_robots_txt(config: SiteConfig, now: datetime) -> str:
    return "\n".join(
        [
            "User-agent: *",
            "Allow: /",
            "",
            "# Sitemaps",
            f"Sitemap: {config.base_url}/sitemap.xml",
            "",
            "# Build and backup directories",
            "Disallow: /build-system/",
            "Disallow: /backup/",
            "",
            "# Static assets",
            "Allow: /css/",
            "Allow: /js/",
            "Allow: /images/",
            "",
            f"# Generated on {now.strftime('%Y-%m-%d %H:%M:%S')}",
        ]
    ) + "\n"


def build_structured_data(
    entries: list[dict[str, Any]],
    config: SiteConfig,
    now: datetime,
) -> dict[str, Any]:
    """Person, WebSite and ItemList schema.org objects for the home page."""
    author = config.author
    published = published_only(entries)
    author_ref = {"@type": "Person", "name": author.name}

    person = {
        "@context": "https://schema.org",
        "@type": "Person",
        "name": author.name,
        "url": config.base_url,
        "sameAs": list(author.same_as),
        "jobTitle": author.job_title,
        "worksFor": {"@type": "Organization", "name": author.organization},
        "knowsAbout": list(author.knows_about),
        "mainEntityOfPage": {"@type": "WebSite", "@id": config.base_url},
    }

    website = {
        "@context": "https://schema.org",
        "@type": "WebSite",
        "@id": config.base_url,
        "url": config.base_url,
        "name": config.site_name,
        "description": config.site_description,
        "author": author_ref,
        "inLanguage": config.language,
        "potentialAction": {
            "@type": "SearchAction",
            "target": {
                "@type": "EntryPoint",
                "urlTemplate": f"{config.base_url}/#projects?q={{search_term_string}}",
            },
            "query-input": "required name=search_term_string",
        },
    }

    portfolio = {
        "@context": "https://schema.org",
        "@type": "ItemList",
        "name": f"Portfolio Projects - {author.name}",
        "description": f"Collection of projects by {author.name}",
        "url": f"{config.base_url}/#projects",
        "author": author_ref,
        "numberOfItems": len(published),
        "itemListElement": [
            {
                "@type": "ListItem",
                "position": position,
                "url": config.project_url(_project_slug(entry)),
                "name": entry.get("title"),
                "description": entry.get("description"),
            }
            for position, entry in enumerate(published[:ITEM_LIST_LIMIT], start=1)
        ],
    }

    return {
        "person": person,
        "website": website,
        "portfolio": portfolio,
        "generated": now.isoformat(),
    }


def build_social_data(
    entries: list[dict[str, Any]],
    config: SiteConfig,
    now: datetime,
) -> dict[str, Any]:
    """Open Graph and Twitter card data for the site and each published project."""
    main_twitter: dict[str, Any] = {
        "card": "summary_large_image",
        "title": config.site_name,
        "description": config.site_description,
        "image": f"{config.base_url}/images/twitter-default.png",
    }
    if config.author.twitter_handle:
        main_twitter["site"] = config.author.twitter_handle

    projects = []
    for entry in published_only(entries):
        categories = list(entry.get("categories") or [])
        projects.append(
            {
                "slug": _project_slug(entry),
                "og": {
                    "title": entry.get("og_title") or entry.get("title"),
                    "description": entry.get("og_description") or entry.get("description"),
                    "type": "article",
                    "url": config.project_url(_project_slug(entry)),
                    "image": _entry_image_url(entry, "og_image", config),
                    "article": {
                        "published_time": entry.get("date"),
                        "modified_time": entry.get("last_updated"),
                        "author": config.author.name,
                        "section": categories[0] if categories else None,
                        "tags": categories + list(entry.get("tags") or []),
                    },
                },
                "twitter": {
                    "card": entry.get("twitter_card") or "summary_large_image",
                    "title": entry.get("twitter_title") or entry.get("title"),
                    "description": entry.get("twitter_description") or entry.get("description"),
                    "image": _entry_image_url(entry, "twitter_image", config),
                },
            }
        )

    return {
        "main_site": {
            "og": {
                "title": config.site_name,
                "description": config.site_description,
                "type": "website",
                "url": config.base_url,
                "image": f"{config.base_url}/images/og-default.png",
                "locale": config.locale,
            },
            "twitter": main_twitter,
        },
        "projects": projects,
        "generated": now.isoformat(),
    }


@dataclass
class SeoPackage:
    """Paths written by one SEO run."""

    sitemap: Path
    robots: Path
    structured_data: Path
    social_data: Path
    seo_report: Path
    sitemap_url_count: int = 0

    def files(self) -> list[Path]:
        return [self.sitemap, self.robots, self.structured_data, self.social_data, self.seo_report]


def write_seo_package(
    entries: list[dict[str, Any]],
    config: SiteConfig,
    paths: SitePaths,
    now: datetime | None = None,
) -> SeoPackage:
    """Write sitemap.xml, robots.txt, structured data, social data and the SEO report."""
    now = now or datetime.now(timezone.utc)
    console.print("Generating SEO package...")

    urls = build_sitemap_urls(entries, config, now)
    write_text_atomic(paths.sitemap, render_sitemap_xml(urls))
    console.print(f"[green]Sitemap generated with {len(urls)} URLs: {paths.sitemap}[/green]")

    write_text_atomic(paths.robots, render_robots_txt(config, now))
    safe_write_json(paths.structured_data, build_structured_data(entries, config, now))
    safe_write_json(paths.social_data, build_social_data(entries, config, now))

    report = build_seo_report(entries, now, sitemap_url_count=len(urls))
    safe_write_json(paths.seo_report, report)
    print_seo_summary(report)

    logger.debug("SEO package written to %s", paths.output)
    return SeoPackage(
        sitemap=paths.sitemap,
        robots=paths.robots,
        structured_data=paths.structured_data,
        social_data=paths.social_data,
        seo_report=paths.seo_report,
        sitemap_url_count=len(urls),
    )
