"""
Project page generator.

Renders ``templates/project.html`` with Jinja2 for every project folder and
writes ``<folder>/index.html`` next to the source. Each project is isolated:
a failure is recorded and the batch moves on. A missing template aborts
the run before any page is written.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any

import jinja2
from markupsafe import Markup
from rich.console import Console
from rich.table import Table

from folio.content.project import ParsedProject, parse_project_file
from folio.content.renderer import format_reading_time
from folio.content.scanner import source_for
from folio.core.backup import write_text_atomic
from folio.core.config import DEVELOPMENT, PRODUCTION, SiteConfig, SitePaths
from folio.index.aggregator import resolve_image_url
from folio.pages.templates import PROJECT_TEMPLATE_NAME

console = Console()
logger = logging.getLogger(__name__)

DATE_DISPLAY_FORMAT = "%d %B %Y"


@dataclass
class GeneratedPage:
    folder: Path
    output_path: Path
    title: str
    status: str


@dataclass
class PageSkip:
    folder: Path
    reason: str


@dataclass
class PageError:
    folder: Path
    error: str


@dataclass
class PageResults:
    """Outcome of one page generation batch."""

    generated: list[GeneratedPage] = field(default_factory=list)
    skipped: list[PageSkip] = field(default_factory=list)
    errors: list[PageError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "generated": [
                {"folder": p.folder.name, "output": str(p.output_path), "title": p.title}
                for p in self.generated
            ],
            "skipped": [{"folder": s.folder.name, "reason": s.reason} for s in self.skipped],
            "errors": [{"folder": e.folder.name, "error": e.error} for e in self.errors],
        }

    def print_summary(self) -> None:
        """Print generated/skipped/errored counts and details."""
        table = Table(title="Page Generation Summary")
        table.add_column("Project", style="cyan")
        table.add_column("Result")
        table.add_column("Details")

        for page in self.generated:
            table.add_row(page.folder.name, "[green]generated[/green]", page.title)
        for skip in self.skipped:
            table.add_row(skip.folder.name, "[yellow]skipped[/yellow]", skip.reason)
        for error in self.errors:
            table.add_row(error.folder.name, "[red]error[/red]", error.error)

        console.print(table)
        console.print(
            f"Generated: [green]{len(self.generated)}[/green]  "
            f"Skipped: [yellow]{len(self.skipped)}[/yellow]  "
            f"Errors: [red]{len(self.errors)}[/red]"
        )


# --- Template filters ---


def format_date(value: Any, fmt: str = DATE_DISPLAY_FORMAT) -> str:
    """Render an ISO date for display; unparseable values pass through."""
    if not value:
        return ""
    if isinstance(value, datetime):
        return value.strftime(fmt)
    if isinstance(value, date):
        return value.strftime(fmt)
    try:
        return date.fromisoformat(str(value)).strftime(fmt)
    except ValueError:
        return str(value)


def reading_time_filter(minutes: Any) -> str:
    try:
        return format_reading_time(int(minutes or 0))
    except (TypeError, ValueError):
        return format_reading_time(0)


def truncate_text(text: Any, length: int = 100) -> str:
    """Cut text at ``length`` characters and append an ellipsis."""
    if not text:
        return ""
    text = str(text)
    return text[:length] + "..." if len(text) > length else text


def create_environment(templates_dir: Path) -> jinja2.Environment:
    """Jinja2 environment for page templates, HTML autoescaping on."""
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(templates_dir)),
        autoescape=jinja2.select_autoescape(["html", "htm", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["format_date"] = format_date
    env.filters["reading_time"] = reading_time_filter
    env.filters["truncate_text"] = truncate_text
    return env


def generate_keywords(parsed: ParsedProject, config: SiteConfig) -> list[str]:
    """Explicit keywords, then categories, tech and site keywords, deduplicated."""
    record = parsed.record
    candidates = [
        *record.keywords,
        *(c.lower() for c in record.categories),
        *(t.lower() for t in record.tech_stack),
        *config.keywords,
    ]
    return list(dict.fromkeys(k for k in candidates if k))


def build_page_schema(parsed: ParsedProject, config: SiteConfig, image_url: str | None) -> dict[str, Any]:
    """schema.org object embedded in the page head."""
    record = parsed.record
    schema: dict[str, Any] = {
        "@context": "https://schema.org",
        "@type": record.schema_type,
        "name": record.title,
        "description": record.seo_description or record.description,
        "url": record.canonical_url,
        "datePublished": record.date.isoformat(),
        "dateModified": record.last_updated or record.date.isoformat(),
        "inLanguage": record.language,
        "author": {"@type": "Person", "name": config.author.name},
        "keywords": ", ".join(record.tags or record.categories),
    }
    if image_url:
        schema["image"] = image_url
    if record.github_url:
        schema["codeRepository"] = record.github_url
    return schema


def prepare_template_data(
    parsed: ParsedProject,
    folder_name: str,
    config: SiteConfig,
    environment: str = DEVELOPMENT,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Assemble the template context for one project page."""
    record = parsed.record
    rendered = parsed.rendered
    stats = rendered.stats
    now = now or datetime.now()

    og_image = resolve_image_url(record.og_image or record.hero_image, folder_name, config)
    twitter_image = resolve_image_url(record.twitter_image or record.hero_image, folder_name, config)

    data: dict[str, Any] = record.to_dict()
    data.update(
        {
            "content": Markup(rendered.html),
            "headings": rendered.headings,
            "links": rendered.links,
            "images": rendered.images,
            "code_blocks": rendered.code_blocks,
            "external_links": rendered.external_links,
            "word_count": stats.word_count if stats else 0,
            "character_count": stats.character_count if stats else 0,
            "reading_time": stats.reading_time if stats else 0,
            "complexity": stats.complexity if stats else 1,
            "keywords": generate_keywords(parsed, config),
            "hero_alt": record.hero_alt or f"Project preview: {record.title}",
            "og_image": og_image,
            "twitter_image": twitter_image,
            "structured_data": build_page_schema(parsed, config, og_image),
            "base_url": config.base_url,
            "site_name": config.site_name,
            "locale": config.locale,
            "author_name": config.author.name,
            "twitter_handle": config.author.twitter_handle,
            "project_slug": folder_name,
            "environment": environment,
            "current_year": now.year,
        }
    )
    return data


class PageGenerator:
    """Render project pages from one template.

    Args:
        paths: Site paths (template location)
        config: Site configuration
        production: Skip drafts
        today: Date used for derived fields such as last_updated
    """

    def __init__(
        self,
        paths: SitePaths,
        config: SiteConfig,
        production: bool = False,
        today: date | None = None,
    ):
        self.paths = paths
        self.config = config
        self.production = production
        self.today = today
        self.env = create_environment(paths.templates)
        self._template: jinja2.Template | None = None

    @property
    def environment_name(self) -> str:
        return PRODUCTION if self.production else DEVELOPMENT

    def load_template(self) -> jinja2.Template:
        """Load the project template.

        Raises:
            FileNotFoundError: If templates/project.html doesn't exist
        """
        if self._template is None:
            if not self.paths.project_template.is_file():
                raise FileNotFoundError(f"Template not found: {self.paths.project_template}")
            try:
                self._template = self.env.get_template(PROJECT_TEMPLATE_NAME)
            except jinja2.TemplateNotFound as e:
                raise FileNotFoundError(f"Template not found: {self.paths.project_template}") from e
        return self._template

    def render(self, parsed: ParsedProject, folder_name: str) -> str:
        data = prepare_template_data(parsed, folder_name, self.config, self.environment_name)
        return self.load_template().render(**data)

    def generate_project_page(self, folder: Path) -> GeneratedPage | None:
        """Render and write ``<folder>/index.html``.

        Returns:
            The generated page, or None for a draft in production

        Raises:
            FileNotFoundError: If the folder has no index.md or the template is missing
            FrontmatterError: If the source fails validation
        """
        folder = Path(folder)
        source = source_for(folder)
        if not source.is_file():
            raise FileNotFoundError(f"No index.md found in {folder}")

        parsed = parse_project_file(source, self.config, today=self.today)
        if self.production and parsed.record.is_draft:
            console.print(f"[yellow]Skipping draft: {parsed.record.title}[/yellow]")
            return None

        html = self.render(parsed, folder.name)
        output_path = folder / "index.html"
        write_text_atomic(output_path, html)
        console.print(f"[green]Generated: {folder.name}/index.html[/green]")

        return GeneratedPage(
            folder=folder,
            output_path=output_path,
            title=parsed.record.title,
            status=parsed.record.status.value,
        )

    def generate_all_pages(
        self,
        folders: list[Path],
        show_summary: bool = True,
        exclude: dict[Path, str] | None = None,
    ) -> PageResults:
        """Generate every page, isolating per-project failures.

        Folders in ``exclude`` are recorded as skipped with the given reason.

        Raises:
            FileNotFoundError: If the template is missing (nothing is written)
        """
        self.load_template()
        results = PageResults()
        console.print(f"Generating HTML pages for {len(folders)} projects...")

        exclude = exclude or {}
        for folder in map(Path, folders):
            if folder in exclude:
                console.print(f"[yellow]Skipping {folder.name}: {exclude[folder]}[/yellow]")
                results.skipped.append(PageSkip(folder, exclude[folder]))
                continue

            try:
                page = self.generate_project_page(folder)
            except Exception as e:
                console.print(f"[red]Error generating {folder.name}: {e}[/red]")
                logger.debug("Page generation failed for %s", folder, exc_info=True)
                results.errors.append(PageError(folder, str(e)))
                continue

            if page is None:
                results.skipped.append(PageSkip(folder, "Draft project"))
            else:
                results.generated.append(page)

        if show_summary:
            results.print_summary()
        return results


def validate_page_output(path: Path) -> bool:
    """Basic sanity check on a generated page.

    Raises:
        ValueError: If the page is missing or lacks DOCTYPE, title or meta description
    """
    path = Path(path)
    if not path.is_file():
        raise ValueError(f"Output file not found: {path}")

    content = path.read_text(encoding="utf-8")
    if "<!DOCTYPE html>" not in content:
        raise ValueError(f"Missing DOCTYPE declaration: {path}")
    if "<title>" not in content or "</title>" not in content:
        raise ValueError(f"Missing title tag: {path}")
    if '<meta name="description"' not in content:
        raise ValueError(f"Missing meta description: {path}")
    return True
