from __future__ import annotations

import os
from pathlib import Path

import typer

from relctl.cli.commands._helpers import bool_output, exit_with_error, write_github_outputs
from relctl.cli.context import build_context, options_from
from relctl.core.errors import ErrorCode
from relctl.core.result import Err
from relctl.services.release.workflow import verify_releases


def verify_cmd(
    ctx: typer.Context,
    branch: str | None = typer.Option(
        None, "--branch", help="main or release-X.Y (default: checked-out branch)"
    ),
    details_file: Path | None = typer.Option(
        None, "--details-file", help="Write the failure details to this file"
    ),
) -> None:
    """Check that recent stable tags and the latest RC have GitHub releases.

    Exit code 2 means the audit ran and found missing releases.
    """
    cli = build_context(options_from(ctx))

    host = cli.release_host()
    if isinstance(host, Err):
        exit_with_error(host.error, cli)

    result = verify_releases(
        settings=cli.settings,
        vcs=cli.vcs,
        host=host.value,
        console=cli.console,
        branch=branch,
    )
    if isinstance(result, Err):
        exit_with_error(result.error, cli)

    report = result.value
    write_github_outputs({"verification_failed": bool_output(report.failed)}, os.environ)

    if not report.checked_stable:
        cli.console.print(
            f"No stable tags for stream {report.stream} in the verification period."
        )

    if report.failed:
        reasons = report.failure_reasons()
        cli.console.error("verification failed")
        cli.console.print(reasons)
        if details_file is not None:
            try:
                details_file.write_text(reasons + "\n", encoding="utf-8")
            except OSError as e:
                cli.console.warning(f"could not write {details_file}: {e}")
        raise typer.Exit(code=int(ErrorCode.VERIFICATION_FAILED))

    cli.console.success(f"all verification checks passed for stream {report.stream}")
