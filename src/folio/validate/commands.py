"""CLI command for project validation."""

from __future__ import annotations

import json as json_module

import click


@click.command(name="validate")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
@click.option("--max-warnings", default=5, show_default=True, help="Warnings listed in the summary")
@click.pass_obj
def validate(ctx, as_json: bool, max_warnings: int) -> None:
    """Validate every project and write validation-report.json.

    Exits with status 1 when any project has an error.
    """
    from folio.core.backup import safe_write_json
    from folio.core.config import load_site
    from folio.core.log import abort
    from folio.validate.checks import (
        ProjectValidator,
        print_validation_summary,
        write_validation_report,
    )

    verbose = ctx.verbose if ctx else False

    try:
        paths, _ = load_site()
        report = ProjectValidator(paths.projects).validate()
        if as_json:
            data = report.to_dict()
            safe_write_json(paths.validation_report, data)
            click.echo(json_module.dumps(data, indent=2))
        else:
            print_validation_summary(report, max_warnings=max_warnings)
            write_validation_report(report, paths.validation_report)
    except (FileNotFoundError, ValueError, OSError) as e:
        abort(e, verbose)

    if not report.ok:
        raise SystemExit(1)
