from __future__ import annotations

import os

import typer

from relctl.cli.commands._helpers import bool_output, exit_with_error, write_github_outputs
from relctl.cli.context import build_context, options_from
from relctl.core.result import Err
from relctl.services.release.workflow import promote


def promote_cmd(
    ctx: typer.Context,
    candidate: str = typer.Argument(..., help="Release candidate tag, e.g. v1.2.3-rc.2"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Check only, do not create the tag"),
) -> None:
    """Promote a release candidate tag to its stable release tag."""
    cli = build_context(options_from(ctx))

    result = promote(candidate=candidate, vcs=cli.vcs, console=cli.console, dry_run=dry_run)
    if isinstance(result, Err):
        exit_with_error(result.error, cli)

    promotion = result.value
    write_github_outputs(
        {
            "release_tag": promotion.release,
            "already_promoted": bool_output(promotion.already_promoted),
        },
        os.environ,
    )
    typer.echo(promotion.release)
