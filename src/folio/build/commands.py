"""CLI command for the full site build."""

from __future__ import annotations

import click


@click.command(name="build")
@click.option("--strict", is_flag=True, help="Fail when the projects directory is missing")
@click.pass_obj
def build(ctx, strict: bool) -> None:
    """Build the project index, project pages, tag metadata and SEO files."""
    from folio.build.pipeline import BuildPipeline
    from folio.core.config import is_production, is_strict, load_site
    from folio.core.log import abort

    verbose = ctx.verbose if ctx else False
    production = ctx.production if ctx else is_production()

    try:
        paths, config = load_site()
        pipeline = BuildPipeline(
            paths, config, production=production, strict=strict or is_strict()
        )
        result = pipeline.run()
    except (FileNotFoundError, ValueError, OSError) as e:
        abort(e, verbose)

    if not result.ok:
        raise SystemExit(1)
