"""Collaborator interfaces consumed by the release workflows.

`relctl.git.repository.TagRepository` and `relctl.services.release.gh.GitHubReleases`
are the production implementations; tests provide in-memory fakes.
"""

from __future__ import annotations

from typing import Protocol

from relctl.core.result import Result
from relctl.services.release.errors import ExternalCollaboratorError
from relctl.services.release.tags import TagSet


class VersionControl(Protocol):
    @property
    def remote(self) -> str: ...

    def current_branch(self) -> Result[str | None, ExternalCollaboratorError]:
        """Checked-out branch name, None on a detached HEAD."""
        ...

    def list_tags(self, *, merged: str | None = "HEAD") -> Result[TagSet, ExternalCollaboratorError]:
        """Tags with creation time; restricted to tags reachable from `merged` unless None."""
        ...

    def resolve_commit(self, ref: str) -> Result[str | None, ExternalCollaboratorError]:
        """Commit id `ref` points to, None if `ref` does not exist locally."""
        ...

    def remote_tag_exists(self, name: str) -> Result[bool, ExternalCollaboratorError]: ...

    def fetch_tag(self, name: str) -> Result[None, ExternalCollaboratorError]: ...

    def create_tag(
        self, name: str, *, target: str, message: str
    ) -> Result[None, ExternalCollaboratorError]: ...

    def push_tag(self, name: str) -> Result[None, ExternalCollaboratorError]: ...

    def delete_tag(self, name: str) -> Result[None, ExternalCollaboratorError]: ...

    def remote_branches(self) -> Result[list[str], ExternalCollaboratorError]:
        """Remote-tracking branch names, e.g. `origin/release-1.2`."""
        ...


class ReleaseHost(Protocol):
    def release_exists(self, tag: str) -> Result[bool, ExternalCollaboratorError]: ...
