from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path

from relctl.core.config import ConfigError, Settings
from relctl.core.result import Err, Ok, Result
from relctl.platform.process import ProcessError
from relctl.platform.process import run as run_process
from relctl.services.release.errors import ExternalCollaboratorError
from relctl.services.release.timeouts import GH_TIMEOUT_SECONDS

# `gh release view` wording for a missing release. A missing repository also
# answers 404, so callers confirm the repository with `check_repository` first.
_NOT_FOUND_MARKERS = ("release not found", "http 404")


def _is_missing_release(error: ProcessError) -> bool:
    if not error.completed:
        return False
    text = f"{error.stderr}\n{error.stdout}".lower()
    return any(marker in text for marker in _NOT_FOUND_MARKERS)


def ensure_gh_available() -> Result[None, ExternalCollaboratorError]:
    if shutil.which("gh") is None:
        return Err(
            ExternalCollaboratorError(
                operation="gh lookup",
                details="gh: missing. Install GitHub CLI: https://cli.github.com/",
            )
        )
    return Ok(None)


@dataclass(frozen=True, slots=True)
class GitHubReleases:
    """Release existence lookups through `gh release view`.

    A "not found" answer from GitHub is a normal `Ok(False)`; any other
    failure (auth, network, rate limit) is an ExternalCollaboratorError so the
    audit reports that it could not run instead of a false positive.
    """

    workspace_root: Path
    repository: str
    env: dict[str, str] | None = field(default=None, repr=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> Result[GitHubReleases, ConfigError]:
        if settings.repository is None:
            return Err(
                ConfigError("missing GitHub repository (pass --repository or set GITHUB_REPOSITORY)")
            )
        return Ok(
            cls(
                workspace_root=settings.repo_root,
                repository=settings.repository,
                env=settings.child_env(),
            )
        )

    def release_exists(self, tag: str) -> Result[bool, ExternalCollaboratorError]:
        cmd = ["gh", "release", "view", tag, "--repo", self.repository, "--json", "tagName"]
        result = run_process(cmd, cwd=self.workspace_root, env=self.env, timeout=GH_TIMEOUT_SECONDS)
        if isinstance(result, Ok):
            return Ok(True)

        if _is_missing_release(result.error):
            return Ok(False)
        return Err(
            ExternalCollaboratorError(
                operation=f"gh release view {tag}",
                details=result.error.details,
            )
        )

    def check_repository(self) -> Result[None, ExternalCollaboratorError]:
        """Confirm that `repository` is visible with the current credentials."""
        cmd = ["gh", "repo", "view", self.repository, "--json", "name"]
        result = run_process(cmd, cwd=self.workspace_root, env=self.env, timeout=GH_TIMEOUT_SECONDS)
        if isinstance(result, Err):
            return Err(
                ExternalCollaboratorError(
                    operation=f"gh repo view {self.repository}",
                    details=result.error.details,
                )
            )
        return Ok(None)
