"""
Full site build.

Runs every stage in order: environment check, index, pages, tag metadata,
SEO package, then output validation. Infrastructure problems (missing
template, missing projects directory in strict mode) raise immediately;
per-project problems are collected and reported in the summary.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from rich.console import Console
from rich.table import Table

from folio.core.config import SiteConfig, SitePaths
from folio.index.aggregator import (
    IndexResult,
    build_index,
    discover_projects,
    print_index_report,
    validate_index_file,
    write_index,
)
from folio.pages.generator import PageGenerator, PageResults, validate_page_output
from folio.seo.emitter import SeoPackage, write_seo_package
from folio.taxonomy.tags import write_tag_metadata

console = Console()
logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Everything one build produced."""

    index: IndexResult | None = None
    pages: PageResults | None = None
    seo: SeoPackage | None = None
    tag_metadata: dict[str, Any] | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """False when output validation failed."""
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "projects": len(self.index.projects) if self.index else 0,
            "skipped_sources": [s.to_dict() for s in self.index.skipped] if self.index else [],
            "pages": self.pages.to_dict() if self.pages else None,
            "seo_files": [str(p) for p in self.seo.files()] if self.seo else [],
            "errors": self.errors,
        }


class BuildPipeline:
    """Build every artifact of the site from the project sources.

    Args:
        paths: Site paths
        config: Site configuration
        production: Drop drafts from the index and pages
        strict: Treat a missing projects directory as fatal
        now: Frozen build timestamp (defaults to the current UTC time)
    """

    def __init__(
        self,
        paths: SitePaths,
        config: SiteConfig,
        production: bool = False,
        strict: bool = False,
        now: datetime | None = None,
    ):
        self.paths = paths
        self.config = config
        self.production = production
        self.strict = strict or production
        self.now = now or datetime.now(timezone.utc)

    def check_environment(self) -> None:
        """Fail fast on missing infrastructure.

        Raises:
            FileNotFoundError: If the template is missing, or the projects
                directory is missing in strict mode
        """
        if not self.paths.projects.is_dir():
            if self.strict:
                raise FileNotFoundError(f"Projects directory not found: {self.paths.projects}")
            console.print(f"[yellow]Projects directory not found: {self.paths.projects}[/yellow]")

        if not self.paths.project_template.is_file():
            raise FileNotFoundError(
                f"Template not found: {self.paths.project_template}. "
                "Run 'folio init' to create the default template."
            )
        logger.debug("Build environment validated (production=%s)", self.production)

    def run(self) -> BuildResult:
        """Run all stages and print the summary.

        Raises:
            FileNotFoundError: On missing infrastructure
        """
        result = BuildResult()
        self.check_environment()

        folders = discover_projects(self.paths.projects, strict=self.strict)
        console.print(f"Discovered {len(folders)} project folders")

        result.index = build_index(folders, self.config, production=self.production, now=self.now)
        write_index(result.index, self.paths)
        print_index_report(result.index)

        generator = PageGenerator(
            self.paths, self.config, production=self.production, today=self.now.date()
        )
        result.pages = generator.generate_all_pages(folders, exclude=result.index.duplicates)

        result.tag_metadata = write_tag_metadata(
            result.index.projects, self.paths.tags_metadata, now=self.now
        )
        result.seo = write_seo_package(result.index.projects, self.config, self.paths, now=self.now)

        result.errors.extend(self.validate_outputs(result))
        self.print_summary(result)
        return result

    def validate_outputs(self, result: BuildResult) -> list[str]:
        """Post-build checks on what was written."""
        errors: list[str] = []
        try:
            count = validate_index_file(self.paths.index_json)
            logger.debug("Project index contains %d projects", count)
        except ValueError as e:
            errors.append(str(e))

        for page in result.pages.generated if result.pages else []:
            try:
                validate_page_output(page.output_path)
            except ValueError as e:
                errors.append(str(e))

        if not self.paths.sitemap.is_file():
            errors.append(f"Sitemap was not created: {self.paths.sitemap}")
        return errors

    def print_summary(self, result: BuildResult) -> None:
        table = Table(title="Build Summary")
        table.add_column("Stage", style="cyan")
        table.add_column("Result", justify="right")

        index = result.index
        pages = result.pages
        table.add_row("Environment", "production" if self.production else "development")
        table.add_row("Projects indexed", str(len(index.projects)) if index else "-")
        table.add_row("Sources skipped", str(len(index.skipped)) if index else "-")
        if pages:
            table.add_row("Pages generated", f"[green]{len(pages.generated)}[/green]")
            table.add_row("Pages skipped", f"[yellow]{len(pages.skipped)}[/yellow]")
            table.add_row("Page errors", f"[red]{len(pages.errors)}[/red]")
        table.add_row("SEO files", str(len(result.seo.files())) if result.seo else "-")
        table.add_row("Built at", self.now.strftime("%Y-%m-%d %H:%M"))
        console.print(table)

        if result.errors:
            console.print("[red]Output validation failed:[/red]")
            for error in result.errors:
                console.print(f"  [red]✗[/red] {error}")
        else:
            console.print("[green]✓ Build complete[/green]")
