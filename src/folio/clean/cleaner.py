"""
Removal of generated files.

Targets are grouped so a partial clean can drop, say, only the SEO files.
A full clean also removes the legacy ``_site`` output and the backups
directory.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from rich.console import Console
from rich.table import Table

from folio.content.scanner import find_project_folders
from folio.core.backup import remove_path
from folio.core.config import SitePaths

console = Console()
logger = logging.getLogger(__name__)

TARGET_GROUPS = ("html", "json", "seo", "reports")


@dataclass
class CleanTarget:
    """A set of generated paths with a human-readable description."""

    description: str
    resolve: Callable[[], list[Path]]
    optional: bool = False


@dataclass
class CleanStats:
    files_removed: int = 0
    directories_removed: int = 0
    skipped: int = 0
    errors: int = 0
    would_remove: list[Path] = field(default_factory=list)

    def to_dict(self) -> dict[str, int]:
        return {
            "files_removed": self.files_removed,
            "directories_removed": self.directories_removed,
            "skipped": self.skipped,
            "errors": self.errors,
            "would_remove": len(self.would_remove),
        }


def generated_pages(paths: SitePaths) -> list[Path]:
    """index.html files sitting next to an index.md source."""
    pages = []
    for folder in find_project_folders(paths.projects):
        page = folder / "index.html"
        if page.is_file():
            pages.append(page)
    return pages


def build_targets(paths: SitePaths) -> dict[str, list[CleanTarget]]:
    """Clean targets by group; ``full`` holds what only a full clean removes."""
    return {
        "html": [CleanTarget("Project HTML files", lambda: generated_pages(paths))],
        "json": [
            CleanTarget("Project index JSON", lambda: [paths.index_json]),
            CleanTarget("Simple project index JSON", lambda: [paths.simple_index_json]),
            CleanTarget("Tags metadata JSON", lambda: [paths.tags_metadata]),
        ],
        "seo": [
            CleanTarget("XML sitemap", lambda: [paths.sitemap]),
            CleanTarget("robots.txt", lambda: [paths.robots]),
            CleanTarget("Structured data JSON", lambda: [paths.structured_data]),
            CleanTarget("Social media data JSON", lambda: [paths.social_data]),
        ],
        "reports": [
            CleanTarget("Validation report", lambda: [paths.validation_report]),
            CleanTarget("SEO report", lambda: [paths.seo_report]),
        ],
        "full": [
            CleanTarget("Build output directory", lambda: [paths.legacy_site]),
            CleanTarget("Backup directory", lambda: [paths.backups], optional=True),
        ],
    }


class Cleaner:
    """Remove generated files.

    Args:
        paths: Site paths
        dry_run: Report what would be removed without removing anything
        verbose: Print every removed path
    """

    def __init__(self, paths: SitePaths, dry_run: bool = False, verbose: bool = False):
        self.paths = paths
        self.dry_run = dry_run
        self.verbose = verbose
        self.targets = build_targets(paths)
        self.stats = CleanStats()

    def clean(self, groups: list[str] | None = None) -> CleanStats:
        """Clean the given groups, or everything when none are given.

        Raises:
            ValueError: If an unknown group is requested
        """
        if groups:
            unknown = [g for g in groups if g not in TARGET_GROUPS]
            if unknown:
                raise ValueError(
                    f"Unknown clean target(s): {', '.join(unknown)}. "
                    f"Choose from: {', '.join(TARGET_GROUPS)}"
                )
            selected = list(dict.fromkeys(groups))
        else:
            selected = [*TARGET_GROUPS, "full"]

        for group in selected:
            for target in self.targets[group]:
                self.clean_target(target)
        return self.stats

    def clean_target(self, target: CleanTarget) -> None:
        try:
            found = [p for p in target.resolve() if p.exists() or p.is_symlink()]
        except OSError as e:
            self.stats.errors += 1
            console.print(f"[red]Error cleaning {target.description}: {e}[/red]")
            return

        if not found:
            if not target.optional:
                self.stats.skipped += 1
                console.print(f"[dim]{target.description} not found[/dim]")
            return

        for path in found:
            self._remove(path, target)

        if not self.dry_run:
            console.print(f"[green]Removed {target.description}[/green]")

    def _remove(self, path: Path, target: CleanTarget) -> None:
        if self.dry_run:
            self.stats.would_remove.append(path)
            console.print(f"[yellow]\\[dry-run] Would remove: {self._display(path)}[/yellow]")
            return

        is_dir = path.is_dir() and not path.is_symlink()
        try:
            remove_path(path)
        except OSError as e:
            self.stats.errors += 1
            console.print(f"[red]Error removing {self._display(path)}: {e}[/red]")
            return

        if is_dir:
            self.stats.directories_removed += 1
        else:
            self.stats.files_removed += 1
        if self.verbose:
            console.print(f"  [green]✓[/green] Removed: {self._display(path)}")
        logger.debug("Removed %s (%s)", path, target.description)

    def _display(self, path: Path) -> str:
        try:
            return str(path.relative_to(self.paths.root))
        except ValueError:
            return str(path)

    def print_summary(self) -> None:
        table = Table(title="Cleanup Summary")
        table.add_column("Metric", style="cyan")
        table.add_column("Count", justify="right")

        if self.dry_run:
            table.add_row("Would remove", str(len(self.stats.would_remove)))
        else:
            table.add_row("Files removed", str(self.stats.files_removed))
            table.add_row("Directories removed", str(self.stats.directories_removed))
        table.add_row("Skipped", str(self.stats.skipped))
        if self.stats.errors:
            table.add_row("Errors", f"[red]{self.stats.errors}[/red]")
        console.print(table)
