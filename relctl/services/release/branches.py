from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import yaml

from relctl.core.config import ConfigError, Settings
from relctl.core.result import Err, Ok, Result
from relctl.core.structured import as_str_dict, get_str_list
from relctl.services.release.errors import ReleaseError
from relctl.services.release.ports import VersionControl
from relctl.services.release.version import Stream, stream_from_branch


def load_excluded_branches(path: Path) -> Result[frozenset[str], ConfigError]:
    """Read the `excluded:` list from a YAML file.

    A missing file means nothing is excluded.
    """
    if not path.is_file():
        return Ok(frozenset())

    try:
        data: object = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        return Err(ConfigError(f"Invalid YAML: {e}", path=path))
    except OSError as e:
        return Err(ConfigError(f"Error reading exclusions: {e}", path=path))

    if data is None:
        return Ok(frozenset())

    table = as_str_dict(data)
    if table is None:
        return Err(ConfigError("Exclusions root must be a mapping", path=path))
    if table.get("excluded") is None:
        return Ok(frozenset())

    names = get_str_list(table, "excluded")
    if names is None:
        return Err(ConfigError("'excluded' must be a list of branch names", path=path))
    return Ok(frozenset(names))


def select_release_branches(
    remote_branches: Iterable[str],
    *,
    remote: str,
    excluded: frozenset[str],
    main_branch: str = "main",
) -> list[str]:
    """Main branch first, then non-excluded `release-X.Y` branches in version order."""
    prefix = f"{remote}/"
    found: dict[str, Stream] = {}
    for ref in remote_branches:
        if not ref.startswith(prefix):
            continue
        name = ref[len(prefix) :]
        stream = stream_from_branch(name)
        if stream is None or name in excluded:
            continue
        found[name] = stream

    ordered = sorted(found, key=lambda name: found[name])
    return [main_branch, *ordered]


def list_release_branches(
    *, settings: Settings, vcs: VersionControl
) -> Result[list[str], ReleaseError | ConfigError]:
    excluded = load_excluded_branches(settings.excluded_branches_path)
    if isinstance(excluded, Err):
        return excluded

    branches = vcs.remote_branches()
    if isinstance(branches, Err):
        return branches

    return Ok(
        select_release_branches(
            branches.value,
            remote=settings.remote,
            excluded=excluded.value,
            main_branch=settings.main_branches[0],
        )
    )
