"""CLI command for removing generated files."""

from __future__ import annotations

import click

from folio.clean.cleaner import TARGET_GROUPS


@click.command(name="clean")
@click.argument("targets", nargs=-1, type=click.Choice(TARGET_GROUPS))
@click.pass_obj
def clean(ctx, targets: tuple[str, ...]) -> None:
    """Remove generated files.

    TARGETS limits the clean to some of: html, json, seo, reports. With no
    targets everything is removed, including _site/ and the backups.
    """
    from folio.clean.cleaner import Cleaner
    from folio.core.config import load_site
    from folio.core.log import abort

    dry_run = ctx.dry_run if ctx else False
    verbose = ctx.verbose if ctx else False

    try:
        paths, _ = load_site()
        cleaner = Cleaner(paths, dry_run=dry_run, verbose=verbose)
        stats = cleaner.clean(list(targets))
    except (FileNotFoundError, ValueError) as e:
        abort(e, verbose)

    cleaner.print_summary()
    if stats.errors:
        raise SystemExit(1)
