"""
One-time migration from flat project files to project folders.

Converts ``projects/<name>.md`` into ``projects/<slug>/index.md`` with
enhanced front matter. The projects directory is backed up first, an
existing ``index.json`` fills in missing fields, and per-project images
under ``images/<url_prefix>/<slug>`` are copied into the new folder.
"""

from __future__ import annotations

import json
import logging
import shutil
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from folio.content.frontmatter import FrontmatterError, dump_document, split_document
from folio.content.project import DEFAULT_CATEGORIES, infer_schema_type
from folio.content.scanner import SOURCE_FILENAME, find_flat_sources
from folio.content.text import make_excerpt, slugify
from folio.core.backup import create_backup, write_text_atomic
from folio.core.config import SiteConfig, SitePaths

console = Console()
logger = logging.getLogger(__name__)

# Fields rewritten by the migration; everything else is carried over as is
REPLACED_FIELDS = frozenset({"title", "description", "image", "date", "categories"})


@dataclass
class MigratedProject:
    original: Path
    migrated: Path
    slug: str
    title: str
    images_copied: bool = False


@dataclass
class MigrationResult:
    """Outcome of a migration run."""

    migrated: list[MigratedProject] = field(default_factory=list)
    skipped: list[tuple[Path, str]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    backup_path: Path | None = None

    @property
    def ok(self) -> bool:
        return not self.errors


def load_existing_index(path: Path) -> list[dict[str, Any]]:
    """Projects from an earlier index.json, in either list or ``{projects}`` form."""
    path = Path(path)
    if not path.is_file():
        return []
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[yellow]Ignoring unreadable index {path}: {e}[/yellow]")
        return []

    projects = data if isinstance(data, list) else data.get("projects", []) if isinstance(data, dict) else []
    return [p for p in projects if isinstance(p, dict)]


def find_index_match(
    existing: list[dict[str, Any]],
    name: str,
    slug: str,
    url_prefix: str,
) -> dict[str, Any] | None:
    """Entry of the old index describing the same project, if any."""
    urls = {name, slug, f"{url_prefix}/{name}", f"{url_prefix}/{slug}"}
    for entry in existing:
        if entry.get("url") in urls:
            return entry
    for entry in existing:
        if name.lower() in str(entry.get("title", "")).lower():
            return entry
    return None


def _iso(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()[:10]
    return value


def migrate_frontmatter(
    existing: dict[str, Any],
    index_entry: dict[str, Any] | None,
    slug: str,
    config: SiteConfig,
    today: date | None = None,
) -> dict[str, Any]:
    """Front matter for the migrated file, old index data filling the gaps."""
    index_entry = index_entry or {}
    today = today or date.today()

    description = existing.get("description") or index_entry.get("description") or ""
    categories = existing.get("categories") or index_entry.get("categories") or list(DEFAULT_CATEGORIES)

    enhanced: dict[str, Any] = {
        "title": existing.get("title") or index_entry.get("title") or "Untitled Project",
        "slug": slug,
        "description": description,
        "excerpt": existing.get("excerpt") or make_excerpt(description),
        "date": _iso(existing.get("date") or index_entry.get("date") or today.isoformat()),
        "status": existing.get("status") or "published",
        "featured": bool(existing.get("featured", False)),
        "categories": categories,
        "tags": existing.get("tags") or [],
        "tech_stack": existing.get("tech_stack") or [],
        "canonical_url": config.project_url(slug),
        "schema_type": existing.get("schema_type") or infer_schema_type(categories),
    }

    hero_image = existing.get("hero_image") or existing.get("image") or index_entry.get("image")
    if hero_image:
        enhanced["hero_image"] = hero_image

    for key, value in existing.items():
        if key not in REPLACED_FIELDS and key not in enhanced:
            enhanced[key] = _iso(value)
    return enhanced


class ProjectMigrator:
    """Move flat project files into per-project folders.

    Args:
        paths: Site paths
        config: Site configuration
        dry_run: Report the plan without writing anything
    """

    def __init__(self, paths: SitePaths, config: SiteConfig, dry_run: bool = False):
        self.paths = paths
        self.config = config
        self.dry_run = dry_run

    def migrate(self) -> MigrationResult:
        """Back up, migrate every flat file, then validate the result.

        Raises:
            FileNotFoundError: If the projects directory doesn't exist
        """
        result = MigrationResult()
        if not self.paths.projects.is_dir():
            raise FileNotFoundError(f"Projects directory not found: {self.paths.projects}")

        sources = find_flat_sources(self.paths.projects)
        console.print(f"Found {len(sources)} project files to migrate")
        if not sources:
            return result

        if not self.dry_run:
            result.backup_path = create_backup(self.paths.projects, self.paths.backups, label="migration")
            console.print(f"[blue]Backup created: {result.backup_path}[/blue]")

        existing = load_existing_index(self.paths.index_json)
        if existing:
            console.print(f"Loaded {len(existing)} projects from existing index")

        for source in sources:
            try:
                self.migrate_project(source, existing, result)
            except (OSError, FrontmatterError) as e:
                message = f"{source.name}: {e}"
                console.print(f"[red]✗ {message}[/red]")
                result.errors.append(message)

        if not self.dry_run:
            result.errors.extend(self.validate_migration(result))
        return result

    def migrate_project(
        self,
        source: Path,
        existing: list[dict[str, Any]],
        result: MigrationResult,
    ) -> None:
        name = source.stem
        slug = slugify(name)
        if not slug:
            result.skipped.append((source, "cannot derive a slug from the file name"))
            return

        folder = self.paths.projects / slug
        target = folder / SOURCE_FILENAME
        if target.exists():
            console.print(f"[yellow]Skipping {source.name}: {slug}/{SOURCE_FILENAME} already exists[/yellow]")
            result.skipped.append((source, "already migrated"))
            return

        front_matter, body = split_document(source.read_text(encoding="utf-8"))
        index_entry = find_index_match(existing, name, slug, self.config.url_prefix)
        enhanced = migrate_frontmatter(front_matter, index_entry, slug, self.config)

        if self.dry_run:
            console.print(f"[yellow]\\[dry-run] Would migrate: {source.name} → {slug}/{SOURCE_FILENAME}[/yellow]")
            result.migrated.append(MigratedProject(source, target, slug, str(enhanced["title"])))
            return

        write_text_atomic(target, dump_document(enhanced, body))
        images_copied = self.copy_project_images(slug, folder)
        result.migrated.append(
            MigratedProject(source, target, slug, str(enhanced["title"]), images_copied)
        )
        console.print(f"  [green]✓[/green] Migrated: {source.name} → {slug}/{SOURCE_FILENAME}")

    def copy_project_images(self, slug: str, folder: Path) -> bool:
        images_dir = self.paths.root / "images" / self.config.url_prefix / slug
        if not images_dir.is_dir():
            return False
        shutil.copytree(images_dir, folder / "images", dirs_exist_ok=True)
        logger.debug("Copied images for %s", slug)
        return True

    def validate_migration(self, result: MigrationResult) -> list[str]:
        """Every migrated file must exist and carry a title."""
        errors = []
        for project in result.migrated:
            if not project.migrated.is_file():
                errors.append(f"Missing migrated file: {project.migrated}")
                continue
            try:
                front_matter, _ = split_document(project.migrated.read_text(encoding="utf-8"))
            except FrontmatterError:
                errors.append(f"Invalid markdown in: {project.migrated}")
                continue
            if not front_matter.get("title"):
                errors.append(f"Missing title in: {project.migrated}")
        return errors


def print_migration_summary(result: MigrationResult) -> None:
    table = Table(title="Migration Summary")
    table.add_column("Project", style="cyan")
    table.add_column("Folder")
    table.add_column("Images")

    for project in result.migrated:
        table.add_row(project.title, f"{project.slug}/", "✓" if project.images_copied else "")
    console.print(table)

    if result.skipped:
        console.print(f"[yellow]Skipped {len(result.skipped)}:[/yellow]")
        for source, reason in result.skipped:
            console.print(f"  - {source.name}: {reason}")
    if result.backup_path:
        console.print(f"Backup location: {result.backup_path}")
    if result.errors:
        console.print(f"[red]{len(result.errors)} error(s); original files are preserved in the backup[/red]")
