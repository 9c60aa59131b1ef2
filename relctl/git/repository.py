"""Git tag operations for a single checkout.

`TagRepository` implements the `VersionControl` collaborator used by the
release workflows. Every method returns a Result; git failures become
`ExternalCollaboratorError` values carrying git's stderr.

Usage:
    repo = TagRepository(Path("."), remote="origin")
    match repo.list_tags():
        case Ok(tags):
            print(tags.highest())
        case Err(e):
            print(f"{e.message}: {e.hint}")
"""

from __future__ import annotations

import base64
import os
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path

from relctl.core.config import Settings
from relctl.core.result import Err, Ok, Result
from relctl.platform.process import ProcessError
from relctl.platform.process import run as run_process
from relctl.services.release.errors import ExternalCollaboratorError
from relctl.services.release.tags import TagEntry, TagSet
from relctl.services.release.timeouts import GIT_NETWORK_TIMEOUT_SECONDS, GIT_TIMEOUT_SECONDS

__all__ = ["TagRepository", "credential_env", "parse_tag_listing"]

_NETWORK_COMMANDS = frozenset({"fetch", "push", "ls-remote"})
_GITHUB_HEADER_KEY = "http.https://github.com/.extraheader"


def credential_env(token: str, base: Mapping[str, str]) -> dict[str, str]:
    """Child environment that authenticates git to github.com with `token`.

    The header travels as GIT_CONFIG_KEY_n/GIT_CONFIG_VALUE_n entries, so the
    token stays out of argv and out of the checkout's config. Entries already
    in `base` are kept. The first added entry clears any extraheader left by
    `actions/checkout`, which git would otherwise send alongside ours.
    """
    env = dict(base)
    count = env.get("GIT_CONFIG_COUNT", "0")
    index = int(count) if count.isdigit() else 0
    basic = base64.b64encode(f"x-access-token:{token}".encode()).decode("ascii")
    for value in ("", f"AUTHORIZATION: basic {basic}"):
        env[f"GIT_CONFIG_KEY_{index}"] = _GITHUB_HEADER_KEY
        env[f"GIT_CONFIG_VALUE_{index}"] = value
        index += 1
    env["GIT_CONFIG_COUNT"] = str(index)
    return env


def parse_tag_listing(output: str) -> TagSet:
    """Parse `git for-each-ref --format='%(refname:strip=2) %(creatordate:unix)'` output.

    Lines that do not end in a unix timestamp are skipped.
    """
    entries: list[TagEntry] = []
    for line in output.splitlines():
        line = line.strip()
        if not line:
            continue
        name, _, stamp = line.rpartition(" ")
        if not name or not stamp.isdigit():
            continue
        entries.append(
            TagEntry(name=name, created_at=datetime.fromtimestamp(int(stamp), tz=UTC))
        )
    return TagSet(entries=tuple(entries))


class TagRepository:
    """Git repository abstraction focused on tags.

    Attributes:
        path: Path to the repository root
        remote: Remote that tags are fetched from and pushed to

    `env`, when given, replaces the environment of fetch, push and ls-remote;
    local commands always inherit the parent environment.
    """

    def __init__(
        self, path: Path, *, remote: str = "origin", env: Mapping[str, str] | None = None
    ) -> None:
        self.path = path
        self._remote = remote
        self._env = env

    @classmethod
    def from_settings(cls, settings: Settings) -> TagRepository:
        env = None if settings.token is None else credential_env(settings.token, os.environ)
        return cls(settings.repo_root, remote=settings.remote, env=env)

    @property
    def remote(self) -> str:
        return self._remote

    def exists(self) -> bool:
        """Check if this is a git checkout (.git dir or worktree file)."""
        return (self.path / ".git").exists()

    def current_branch(self) -> Result[str | None, ExternalCollaboratorError]:
        result = self._git(["rev-parse", "--abbrev-ref", "HEAD"])
        if isinstance(result, Err):
            return result
        branch = result.value.strip()
        return Ok(None if branch == "HEAD" else branch)

    def list_tags(self, *, merged: str | None = "HEAD") -> Result[TagSet, ExternalCollaboratorError]:
        args = ["for-each-ref", "--format=%(refname:strip=2) %(creatordate:unix)"]
        if merged is not None:
            args.append(f"--merged={merged}")
        args.append("refs/tags")
        result = self._git(args)
        if isinstance(result, Err):
            return result
        return Ok(parse_tag_listing(result.value))

    def resolve_commit(self, ref: str) -> Result[str | None, ExternalCollaboratorError]:
        result = run_process(
            ["git", "-C", str(self.path), "rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"],
            cwd=self.path,
            timeout=GIT_TIMEOUT_SECONDS,
        )
        match result:
            case Ok(stdout):
                return Ok(stdout.strip() or None)
            case Err(e):
                # --quiet: a missing ref exits 1 with nothing on stderr.
                if e.returncode == 1 and not e.stderr.strip():
                    return Ok(None)
                return Err(self._error(f"rev-parse {ref}", e))

    def remote_tag_exists(self, name: str) -> Result[bool, ExternalCollaboratorError]:
        result = self._git(["ls-remote", "--tags", self._remote, f"refs/tags/{name}"])
        if isinstance(result, Err):
            return result
        return Ok(bool(result.value.strip()))

    def fetch_tag(self, name: str) -> Result[None, ExternalCollaboratorError]:
        result = self._git(["fetch", self._remote, "tag", name, "--no-recurse-submodules"])
        if isinstance(result, Err):
            return result
        return Ok(None)

    def create_tag(
        self, name: str, *, target: str, message: str
    ) -> Result[None, ExternalCollaboratorError]:
        result = self._git(["tag", "-a", name, target, "-m", message])
        if isinstance(result, Err):
            return result
        return Ok(None)

    def push_tag(self, name: str) -> Result[None, ExternalCollaboratorError]:
        result = self._git(["push", self._remote, f"refs/tags/{name}"])
        if isinstance(result, Err):
            return result
        return Ok(None)

    def delete_tag(self, name: str) -> Result[None, ExternalCollaboratorError]:
        result = self._git(["tag", "-d", name])
        if isinstance(result, Err):
            return result
        return Ok(None)

    def remote_branches(self) -> Result[list[str], ExternalCollaboratorError]:
        result = self._git(["branch", "-r", "--format=%(refname:short)"])
        if isinstance(result, Err):
            return result
        return Ok([ln.strip() for ln in result.value.splitlines() if ln.strip()])

    def _git(self, args: list[str]) -> Result[str, ExternalCollaboratorError]:
        """Run a git command in this repository."""
        if args[0] in _NETWORK_COMMANDS:
            env, timeout = self._env, GIT_NETWORK_TIMEOUT_SECONDS
        else:
            env, timeout = None, GIT_TIMEOUT_SECONDS
        result = run_process(
            ["git", "-C", str(self.path), *args], cwd=self.path, env=env, timeout=timeout
        )
        if isinstance(result, Err):
            return Err(self._error(" ".join(args[:2]), result.error))
        return result

    def _error(self, what: str, e: ProcessError) -> ExternalCollaboratorError:
        return ExternalCollaboratorError(operation=f"git {what}", details=e.details)
