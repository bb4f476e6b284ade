"""CLI command for the flat-file to folder migration."""

from __future__ import annotations

import click


@click.command(name="migrate")
@click.pass_obj
def migrate(ctx) -> None:
    """Move projects/<name>.md files into projects/<slug>/index.md.

    The projects directory is backed up first. Already migrated projects
    are skipped.
    """
    from folio.core.config import load_site
    from folio.core.log import abort
    from folio.migrate.migrator import ProjectMigrator, print_migration_summary

    dry_run = ctx.dry_run if ctx else False
    verbose = ctx.verbose if ctx else False

    try:
        paths, config = load_site()
        result = ProjectMigrator(paths, config, dry_run=dry_run).migrate()
    except (FileNotFoundError, ValueError, OSError) as e:
        abort(e, verbose)

    if not result.migrated and not result.skipped and not result.errors:
        click.echo("No flat project files to migrate.")
        return

    print_migration_summary(result)
    if not result.ok:
        raise SystemExit(1)
