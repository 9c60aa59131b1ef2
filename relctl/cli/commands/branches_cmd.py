from __future__ import annotations

import json

import typer

from relctl.cli.commands._helpers import exit_with_error
from relctl.cli.context import build_context, options_from
from relctl.core.result import Err
from relctl.services.release.branches import list_release_branches


def branches(ctx: typer.Context) -> None:
    """Print main and non-excluded release-X.Y branches as a JSON array."""
    cli = build_context(options_from(ctx))

    result = list_release_branches(settings=cli.settings, vcs=cli.vcs)
    if isinstance(result, Err):
        exit_with_error(result.error, cli)

    typer.echo(json.dumps(result.value, separators=(",", ":")))
