"""Shared helpers for CLI commands."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, NoReturn

import typer

from relctl.core.config import ConfigError
from relctl.output.errors import print_release_error, release_error_exit_code
from relctl.services.release.errors import ReleaseError

if TYPE_CHECKING:
    from relctl.cli.context import CLIContext


def exit_with_error(error: ReleaseError | ConfigError, ctx: CLIContext) -> NoReturn:
    """Print the error (and hint) and exit with its mapped code."""
    print_release_error(error, ctx.console)
    raise typer.Exit(code=release_error_exit_code(error))


def write_github_outputs(values: Mapping[str, str], environ: Mapping[str, str]) -> None:
    """Append `name=value` lines to the file named by `GITHUB_OUTPUT`.

    Outside GitHub Actions (variable unset) this does nothing.
    """
    output_file = environ.get("GITHUB_OUTPUT")
    if not output_file:
        return
    with open(output_file, "a", encoding="utf-8") as handle:
        for key, value in values.items():
            handle.write(f"{key}={value}\n")


def bool_output(value: bool) -> str:
    return "true" if value else "false"
