"""
Legacy single-file build.

Builds the older flat layout (``projects/<name>.md``) into a self-contained
``_site`` directory. Headers that are not valid YAML are read by the
lenient parser, and fields the page needs but the source lacks get
best-effort defaults instead of failing the project. When
``templates/project.html`` is missing the default template is written first.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

from rich.console import Console

from folio.content.frontmatter import (
    VALID_STATUSES,
    FrontmatterError,
    FrontmatterParser,
    is_valid_date,
)
from folio.content.project import (
    ParsedProject,
    enhance_frontmatter,
    lenient_parser,
    record_from_frontmatter,
)
from folio.content.renderer import render_project
from folio.content.scanner import find_flat_sources
from folio.core.backup import safe_write_json, write_text_atomic
from folio.core.config import SiteConfig, SitePaths
from folio.index.aggregator import SIMPLE_INDEX_FIELDS, resolve_image_path
from folio.pages.generator import PageGenerator
from folio.pages.templates import bootstrap_template

console = Console()
logger = logging.getLogger(__name__)

STATIC_ENTRIES = ("index.html", "css", "js", "images")


@dataclass
class LegacyResult:
    """What the legacy build wrote."""

    pages: list[Path] = field(default_factory=list)
    degraded: list[str] = field(default_factory=list)
    errors: list[tuple[str, str]] = field(default_factory=list)
    index_path: Path | None = None
    template_bootstrapped: bool = False

    @property
    def ok(self) -> bool:
        return not self.errors


def _title_from_name(name: str) -> str:
    return name.replace("-", " ").replace("_", " ").strip().title() or "Project"


def apply_legacy_defaults(front_matter: dict[str, Any], name: str, today: date) -> dict[str, Any]:
    """Fill what validation would reject with placeholder values."""
    data = dict(front_matter)
    if not data.get("title"):
        data["title"] = _title_from_name(name)
    if not data.get("description"):
        data["description"] = str(data["title"])
    if not is_valid_date(data.get("date")):
        data["date"] = today.isoformat()
    if data.get("status") and data["status"] not in VALID_STATUSES:
        data["status"] = "published"
    if not data.get("hero_image") and data.get("image"):
        data["hero_image"] = data["image"]
    categories = data.get("categories")
    if isinstance(categories, str) and categories:
        data["categories"] = [categories]
    elif not isinstance(categories, list) or not categories:
        data.pop("categories", None)
    return data


def parse_legacy_source(
    path: Path,
    config: SiteConfig,
    parser: FrontmatterParser | None = None,
    today: date | None = None,
) -> ParsedProject:
    """Parse a flat source without ever rejecting it on field validation."""
    parser = parser or lenient_parser()
    today = today or date.today()
    document = parser.parse(path.read_text(encoding="utf-8"))

    front_matter = apply_legacy_defaults(document.front_matter, path.stem, today)
    enhanced = enhance_frontmatter(front_matter, config, today)
    if not enhanced["slug"]:
        enhanced["slug"] = path.stem
    record = record_from_frontmatter(enhanced)

    return ParsedProject(
        record=record,
        body=document.body,
        rendered=render_project(record, document.body),
        source=path,
        degraded=document.degraded,
    )


class LegacyPipeline:
    """Build ``_site/`` from flat project files.

    Args:
        paths: Site paths
        config: Site configuration
        copy_static: Copy index.html, css/, js/ and images/ into the output
    """

    def __init__(self, paths: SitePaths, config: SiteConfig, copy_static: bool = True):
        self.paths = paths
        self.config = config
        self.copy_static = copy_static
        self.output_dir = paths.legacy_site
        self.projects_output = self.output_dir / config.url_prefix

    def run(self) -> LegacyResult:
        result = LegacyResult()
        self.projects_output.mkdir(parents=True, exist_ok=True)

        if self.copy_static:
            self.copy_static_files()

        result.template_bootstrapped = bootstrap_template(self.paths.project_template)
        if result.template_bootstrapped:
            console.print(f"[yellow]Created default template: {self.paths.project_template}[/yellow]")

        generator = PageGenerator(self.paths, self.config)
        generator.load_template()
        simple_index: list[dict[str, Any]] = []

        for source in find_flat_sources(self.paths.projects):
            name = source.stem
            try:
                parsed = parse_legacy_source(source, self.config)
                html = generator.render(parsed, name)
                output_path = self.projects_output / name / "index.html"
                write_text_atomic(output_path, html)
            except (OSError, FrontmatterError, ValueError) as e:
                console.print(f"[red]Error building {source.name}: {e}[/red]")
                result.errors.append((source.name, str(e)))
                continue

            if parsed.degraded:
                result.degraded.append(name)
            result.pages.append(output_path)
            simple_index.append(self.simple_entry(parsed, name))
            console.print(f"[green]Generated: {output_path.relative_to(self.output_dir)}[/green]")

        result.index_path = self.projects_output / "index.json"
        safe_write_json(result.index_path, simple_index)
        console.print(f"[green]Site generated: {len(result.pages)} pages in {self.output_dir}[/green]")
        return result

    def simple_entry(self, parsed: ParsedProject, name: str) -> dict[str, Any]:
        record = parsed.record
        entry = {
            "title": record.title,
            "description": record.description,
            "image": resolve_image_path(record.hero_image, name, self.config.url_prefix),
            "categories": list(record.categories),
            "url": name,
        }
        return {key: entry[key] for key in SIMPLE_INDEX_FIELDS}

    def copy_static_files(self) -> list[str]:
        copied = []
        for entry in STATIC_ENTRIES:
            source = self.paths.root / entry
            target = self.output_dir / entry
            if source.is_dir():
                shutil.copytree(source, target, dirs_exist_ok=True)
            elif source.is_file():
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(source, target)
            else:
                logger.debug("Static entry %s not found, skipping", source)
                continue
            copied.append(entry)
        return copied
