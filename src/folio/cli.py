"""
Main CLI dispatcher for folio.

Usage:
    folio init                      # Create folio.yaml, projects/ and the default template
    folio build                     # Index, pages, tag metadata and SEO files
    folio validate [--json]         # Check every project, exit 1 on errors
    folio clean [html json seo reports]
    folio migrate                   # Flat projects/<name>.md -> projects/<slug>/index.md
    folio legacy-build              # Flat sources -> _site/
"""

import os

import click
import yaml
from rich.console import Console

from folio import __version__
from folio.core.config import PRODUCTION, is_production
from folio.core.log import configure_logging

console = Console()


class Context:
    """Shared context for all commands."""

    def __init__(self, verbose: bool = False, dry_run: bool = False, production: bool = False):
        self.verbose = verbose
        self.dry_run = dry_run
        self.production = production
        self.console = console


pass_context = click.make_pass_decorator(Context, ensure=True)


@click.group()
@click.version_option(version=__version__, prog_name="folio")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("-n", "--dry-run", is_flag=True, help="Preview without making changes")
@click.option("--production", is_flag=True, help="Build for production (drafts are excluded)")
@click.pass_context
def main(ctx: click.Context, verbose: bool, dry_run: bool, production: bool) -> None:
    """Portfolio site builder.

    Turns per-project Markdown sources into an index, project pages and
    the SEO files of a static portfolio site.
    """
    configure_logging(verbose)
    if production:
        os.environ["FOLIO_ENV"] = PRODUCTION

    ctx.ensure_object(dict)
    ctx.obj = Context(verbose=verbose, dry_run=dry_run, production=production or is_production())

    if dry_run:
        console.print("[yellow]DRY RUN MODE - No changes will be made[/yellow]")


def default_site_config(site_name: str) -> dict:
    return {
        "site_name": site_name,
        "site_description": "Personal project portfolio",
        "base_url": "https://example.com",
        "language": "en",
        "author": {"name": "Portfolio Author", "job_title": "Developer"},
        "projects_dir": "projects",
        "url_prefix": "projects",
        "templates_dir": "templates",
    }


@main.command()
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing folio.yaml and template")
@click.pass_obj
def init(ctx, force: bool) -> None:
    """Initialize a portfolio site.

    Creates folio.yaml, the projects directory and the default project
    page template.
    """
    from pathlib import Path

    from folio.core.config import CONFIG_FILENAME, get_paths, get_site_root
    from folio.pages.templates import bootstrap_template

    dry_run = ctx.dry_run if ctx else False

    try:
        site_root = get_site_root()
    except FileNotFoundError:
        # No folio.yaml yet, so the current directory becomes the site
        site_root = Path.cwd()

    config_path = site_root / CONFIG_FILENAME
    if config_path.exists() and not force:
        console.print(f"[yellow]{CONFIG_FILENAME} already exists at {config_path}[/yellow]")
        console.print("[dim]Use --force to reinitialize.[/dim]")
        return

    console.print(f"[cyan]Initializing portfolio site at {site_root}[/cyan]")

    if not dry_run:
        config_path.write_text(
            yaml.safe_dump(default_site_config(site_root.name or "Portfolio"), sort_keys=False),
            encoding="utf-8",
        )
    console.print(f"  [green]Created[/green] {CONFIG_FILENAME}")

    paths = get_paths(site_root)
    if not dry_run:
        paths.projects.mkdir(parents=True, exist_ok=True)
    console.print(f"  [green]Created[/green] {paths.projects.relative_to(site_root)}/")

    if dry_run or bootstrap_template(paths.project_template, overwrite=force):
        console.print(f"  [green]Created[/green] {paths.project_template.relative_to(site_root)}")

    console.print()
    if dry_run:
        console.print("[yellow]DRY RUN - no changes made[/yellow]")
    else:
        console.print("[green]Done![/green] Add projects as projects/<slug>/index.md and run 'folio build'.")


# Import and register commands (imports after main definition intentional)
from folio.build.commands import build  # noqa: E402
from folio.clean.commands import clean  # noqa: E402
from folio.legacy.commands import legacy_build  # noqa: E402
from folio.migrate.commands import migrate  # noqa: E402
from folio.validate.commands import validate  # noqa: E402

main.add_command(build)
main.add_command(validate)
main.add_command(clean)
main.add_command(migrate)
main.add_command(legacy_build)
