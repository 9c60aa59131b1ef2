from __future__ import annotations

from pathlib import Path

import typer

from relctl import __version__
from relctl.cli.commands.branches_cmd import branches
from relctl.cli.commands.promote_cmd import promote_cmd
from relctl.cli.commands.tag_cmd import auto_tag_cmd, next_tag, seed, stream
from relctl.cli.commands.verify_cmd import verify_cmd
from relctl.cli.context import GlobalOptions
from relctl.core.errors import ErrorCode


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command()(stream)
app.command("next-tag")(next_tag)
app.command("auto-tag")(auto_tag_cmd)
app.command()(seed)
app.command("promote")(promote_cmd)
app.command("verify")(verify_cmd)
app.command()(branches)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    repo_root: Path | None = typer.Option(
        None, "--repo-root", help="Repository checkout (default: current directory)"
    ),
    config: Path | None = typer.Option(
        None, "--config", help="Config file (default: <repo-root>/relctl.toml if present)"
    ),
    remote: str | None = typer.Option(None, "--remote", help="Git remote (default: origin)"),
    repository: str | None = typer.Option(
        None, "--repository", help="GitHub owner/name for release lookups"
    ),
    window_days: int | None = typer.Option(
        None, "--window-days", min=1, help="Verification window in days (default: 7)"
    ),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=int(ErrorCode.OK))

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=int(ErrorCode.OK))

    ctx.obj = GlobalOptions(
        repo_root=repo_root,
        config=config,
        remote=remote,
        repository=repository,
        window_days=window_days,
    )


def main() -> None:
    app()
