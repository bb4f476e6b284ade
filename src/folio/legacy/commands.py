"""CLI command for the legacy single-directory build."""

from __future__ import annotations

import click


@click.command(name="legacy-build")
@click.option("--no-static", is_flag=True, help="Do not copy index.html, css/, js/ and images/")
@click.pass_obj
def legacy_build(ctx, no_static: bool) -> None:
    """Build _site/ from flat projects/<name>.md files."""
    from folio.core.config import load_site
    from folio.core.log import abort
    from folio.legacy.pipeline import LegacyPipeline

    verbose = ctx.verbose if ctx else False

    try:
        paths, config = load_site()
        result = LegacyPipeline(paths, config, copy_static=not no_static).run()
    except (FileNotFoundError, ValueError, OSError) as e:
        abort(e, verbose)

    if result.degraded:
        click.echo(f"Recovered {len(result.degraded)} malformed header(s): {', '.join(result.degraded)}")
    if not result.ok:
        raise SystemExit(1)
