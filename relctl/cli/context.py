from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import typer

from relctl.core.config import (
    CONFIG_FILE_NAME,
    ConfigError,
    Settings,
    build_settings,
    load_config,
    load_config_or_default,
)
from relctl.core.errors import ErrorCode
from relctl.core.result import Err, Result
from relctl.git.repository import TagRepository
from relctl.output.console import ConsoleProtocol, RichConsole
from relctl.services.release.errors import ExternalCollaboratorError
from relctl.services.release.gh import GitHubReleases, ensure_gh_available
from relctl.services.release.ports import ReleaseHost, VersionControl

ReleaseHostFactory = Callable[[], Result[ReleaseHost, ConfigError | ExternalCollaboratorError]]


@dataclass(frozen=True, slots=True)
class GlobalOptions:
    """Options accepted before the subcommand (`relctl --repo-root ... verify`)."""

    repo_root: Path | None = None
    config: Path | None = None
    remote: str | None = None
    repository: str | None = None
    window_days: int | None = None


@dataclass(frozen=True, slots=True)
class CLIContext:
    settings: Settings
    console: ConsoleProtocol
    vcs: VersionControl
    release_host: ReleaseHostFactory


def options_from(ctx: typer.Context) -> GlobalOptions:
    obj = ctx.obj
    if isinstance(obj, GlobalOptions):
        return obj
    return GlobalOptions()


def _github_release_host(settings: Settings) -> ReleaseHostFactory:
    def factory() -> Result[ReleaseHost, ConfigError | ExternalCollaboratorError]:
        available = ensure_gh_available()
        if isinstance(available, Err):
            return available
        host = GitHubReleases.from_settings(settings)
        if isinstance(host, Err):
            return host
        checked = host.value.check_repository()
        if isinstance(checked, Err):
            return checked
        return host

    return factory


def build_context(options: GlobalOptions) -> CLIContext:
    try:
        root = (options.repo_root or Path.cwd()).expanduser().resolve()
    except OSError as e:
        typer.echo(f"error: invalid --repo-root: {e}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    if options.config is not None:
        file_config = load_config(options.config)
    else:
        file_config = load_config_or_default(root / CONFIG_FILE_NAME)
    if isinstance(file_config, Err):
        typer.echo(f"error: {file_config.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    settings = build_settings(
        repo_root=root,
        file_config=file_config.value,
        environ=os.environ,
        remote=options.remote,
        repository=options.repository,
        window_days=options.window_days,
    )

    repo = TagRepository.from_settings(settings)
    if not repo.exists():
        typer.echo(f"error: not a git checkout: {root}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    return CLIContext(
        settings=settings,
        # stdout is reserved for machine-readable results (tags, JSON).
        console=RichConsole(stderr=True),
        vcs=repo,
        release_host=_github_release_host(settings),
    )
