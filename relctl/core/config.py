"""Typed configuration loading and access.

Configuration comes from three places, in priority order:
1. explicit CLI options,
2. an optional `relctl.toml` at the repository root,
3. the environment (`GH_TOKEN`, `GITHUB_REPOSITORY`) for values still unset.

The merged result is a frozen `Settings` value that is passed into every
workflow; nothing here mutates process-wide state.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_int, get_str, get_str_list, get_table

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_EXCLUDED_BRANCHES_FILE",
    "DEFAULT_MAIN_BRANCHES",
    "DEFAULT_REMOTE",
    "DEFAULT_WINDOW_DAYS",
    "ConfigError",
    "FileConfig",
    "Settings",
    "build_settings",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILE_NAME = "relctl.toml"

DEFAULT_REMOTE = "origin"
DEFAULT_MAIN_BRANCHES: tuple[str, ...] = ("main",)
DEFAULT_WINDOW_DAYS = 7
DEFAULT_EXCLUDED_BRANCHES_FILE = ".github/excluded-release-branches.yaml"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class FileConfig:
    """Values read from `relctl.toml`. None means "not set in the file"."""

    remote: str | None = None
    main_branches: tuple[str, ...] | None = None
    repository: str | None = None
    window_days: int | None = None
    excluded_branches_file: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> FileConfig:
        """Create FileConfig from parsed TOML.

        Raises:
            ValueError: If a value is present but invalid.
        """
        git: StrDict = get_table(data, "git") or {}
        github: StrDict = get_table(data, "github") or {}
        verify: StrDict = get_table(data, "verify") or {}
        branches: StrDict = get_table(data, "branches") or {}

        window_days = get_int(verify, "window_days")
        if "window_days" in verify and window_days is None:
            raise ValueError("verify.window_days must be an integer")
        if window_days is not None and window_days < 1:
            raise ValueError(f"verify.window_days must be >= 1 (got {window_days})")

        main_branches: tuple[str, ...] | None = None
        if "main_branches" in git:
            names = get_str_list(git, "main_branches")
            if not names:
                raise ValueError("git.main_branches must be a non-empty list of strings")
            main_branches = tuple(names)

        repository = get_str(github, "repository")
        if repository is not None and repository.count("/") != 1:
            raise ValueError(f"github.repository must be owner/name (got {repository})")

        return cls(
            remote=get_str(git, "remote"),
            main_branches=main_branches,
            repository=repository,
            window_days=window_days,
            excluded_branches_file=get_str(branches, "excluded_file"),
        )


@dataclass(frozen=True, slots=True)
class Settings:
    """Explicit per-invocation configuration.

    Attributes:
        repo_root: Local checkout the git commands run in.
        remote: Git remote that tags are fetched from and pushed to.
        repository: GitHub `owner/name` used for release lookups.
        token: GitHub token handed to `gh` and to git network commands
            through their child environments.
        window_days: Trailing verification window for stable tags.
        main_branches: Branch names that derive their stream from tags.
        excluded_branches_file: YAML file listing release branches to skip,
            relative to `repo_root`.
    """

    repo_root: Path
    remote: str = DEFAULT_REMOTE
    repository: str | None = None
    token: str | None = field(default=None, repr=False)
    window_days: int = DEFAULT_WINDOW_DAYS
    main_branches: tuple[str, ...] = DEFAULT_MAIN_BRANCHES
    excluded_branches_file: str = DEFAULT_EXCLUDED_BRANCHES_FILE

    @property
    def window(self) -> timedelta:
        return timedelta(days=self.window_days)

    @property
    def excluded_branches_path(self) -> Path:
        return self.repo_root / self.excluded_branches_file

    def child_env(self) -> dict[str, str] | None:
        """Environment for `gh` child processes (None inherits unchanged)."""
        if self.token is None:
            return None
        return {**os.environ, "GH_TOKEN": self.token}


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[FileConfig, ConfigError]:
    """Load and validate `relctl.toml`.

    Args:
        path: Path to the TOML file.

    Returns:
        Ok(FileConfig) on success, Err(ConfigError) on failure.
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(FileConfig.from_dict(result.value))
    except ValueError as e:
        return Err(ConfigError(f"Invalid config: {e}", path=path))


def load_config_or_default(path: Path) -> Result[FileConfig, ConfigError]:
    """Like `load_config`, but a missing file yields an empty FileConfig."""
    if not path.exists():
        return Ok(FileConfig())
    return load_config(path)


def build_settings(
    *,
    repo_root: Path,
    file_config: FileConfig,
    environ: Mapping[str, str],
    remote: str | None = None,
    repository: str | None = None,
    window_days: int | None = None,
) -> Settings:
    """Merge CLI overrides, file values and environment into Settings."""
    token = environ.get("GH_TOKEN") or environ.get("GITHUB_TOKEN") or None
    return Settings(
        repo_root=repo_root,
        remote=remote or file_config.remote or DEFAULT_REMOTE,
        repository=repository or file_config.repository or environ.get("GITHUB_REPOSITORY") or None,
        token=token,
        window_days=window_days or file_config.window_days or DEFAULT_WINDOW_DAYS,
        main_branches=file_config.main_branches or DEFAULT_MAIN_BRANCHES,
        excluded_branches_file=(
            file_config.excluded_branches_file or DEFAULT_EXCLUDED_BRANCHES_FILE
        ),
    )
