"""Tagging commands: stream, next-tag, auto-tag, seed."""

from __future__ import annotations

import os

import typer

from relctl.cli.commands._helpers import bool_output, exit_with_error, write_github_outputs
from relctl.cli.context import build_context, options_from
from relctl.core.result import Err
from relctl.services.release.resolver import resolve_stream
from relctl.services.release.version import parse_stream
from relctl.services.release.workflow import auto_tag, plan_next_tag, seed_stream

_BRANCH_HELP = "Branch to resolve the stream for (default: checked-out branch)"


def stream(
    ctx: typer.Context,
    branch: str | None = typer.Option(None, "--branch", help=_BRANCH_HELP),
) -> None:
    """Print the release stream (X.Y) for a branch."""
    cli = build_context(options_from(ctx))

    name = branch
    if name is None:
        current = cli.vcs.current_branch()
        if isinstance(current, Err):
            exit_with_error(current.error, cli)
        name = current.value or "HEAD"

    tags = cli.vcs.list_tags()
    if isinstance(tags, Err):
        exit_with_error(tags.error, cli)

    resolved = resolve_stream(name, tags.value, main_branches=cli.settings.main_branches)
    if isinstance(resolved, Err):
        exit_with_error(resolved.error, cli)

    typer.echo(str(resolved.value))


def next_tag(
    ctx: typer.Context,
    branch: str | None = typer.Option(None, "--branch", help=_BRANCH_HELP),
) -> None:
    """Print the next tag automatic tagging would create (no side effects)."""
    cli = build_context(options_from(ctx))

    planned = plan_next_tag(settings=cli.settings, vcs=cli.vcs, branch=branch)
    if isinstance(planned, Err):
        exit_with_error(planned.error, cli)

    nxt = planned.value
    cli.console.print(f"stream {nxt.stream}, latest {nxt.latest}")
    if nxt.already_exists:
        cli.console.info(f"{nxt.next_tag} already exists")
    typer.echo(nxt.next_tag.to_tag())


def auto_tag_cmd(
    ctx: typer.Context,
    branch: str | None = typer.Option(None, "--branch", help=_BRANCH_HELP),
    dry_run: bool = typer.Option(False, "--dry-run", help="Compute the tag but do not create it"),
) -> None:
    """Create and push the next release-candidate tag at HEAD."""
    cli = build_context(options_from(ctx))

    outcome = auto_tag(
        settings=cli.settings,
        vcs=cli.vcs,
        console=cli.console,
        branch=branch,
        dry_run=dry_run,
    )
    if isinstance(outcome, Err):
        exit_with_error(outcome.error, cli)

    write_github_outputs(
        {"tag": outcome.value.tag, "created": bool_output(outcome.value.created)},
        os.environ,
    )
    typer.echo(outcome.value.tag)


def seed(
    ctx: typer.Context,
    stream_name: str = typer.Argument(..., metavar="X.Y", help="Stream to start, e.g. 1.3"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Do not create the tag"),
) -> None:
    """Create the first tag of a stream (vX.Y.0-rc.0) at HEAD."""
    cli = build_context(options_from(ctx))

    parsed = parse_stream(stream_name)
    if isinstance(parsed, Err):
        exit_with_error(parsed.error, cli)

    outcome = seed_stream(stream=parsed.value, vcs=cli.vcs, console=cli.console, dry_run=dry_run)
    if isinstance(outcome, Err):
        exit_with_error(outcome.error, cli)

    typer.echo(outcome.value.tag)
