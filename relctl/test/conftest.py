from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from relctl.core.result import Err, Ok, Result
from relctl.services.release.errors import ExternalCollaboratorError
from relctl.services.release.tags import TagEntry, TagSet

EPOCH = datetime(2026, 1, 1, tzinfo=UTC)


@dataclass
class LocalTag:
    sha: str
    created_at: datetime = EPOCH
    reachable: bool = True


def _local_tags() -> dict[str, LocalTag]:
    return {}


def _remote_tags() -> dict[str, str]:
    return {}


def _strs() -> list[str]:
    return []


@dataclass
class FakeVersionControl:
    """In-memory VersionControl: local tags, remote tags and a call log."""

    tags: dict[str, LocalTag] = field(default_factory=_local_tags)
    remote_tags: dict[str, str] = field(default_factory=_remote_tags)
    branch: str | None = "main"
    head: str = "head0000"
    branches: list[str] = field(default_factory=_strs)
    fail_push: bool = False
    fail_list: bool = False
    calls: list[str] = field(default_factory=_strs)
    remote: str = "origin"

    def add(
        self,
        *names: str,
        sha: str = "c0ffee00",
        created_at: datetime = EPOCH,
        reachable: bool = True,
    ) -> FakeVersionControl:
        for name in names:
            self.tags[name] = LocalTag(sha=sha, created_at=created_at, reachable=reachable)
        return self

    def current_branch(self) -> Result[str | None, ExternalCollaboratorError]:
        return Ok(self.branch)

    def list_tags(self, *, merged: str | None = "HEAD") -> Result[TagSet, ExternalCollaboratorError]:
        self.calls.append(f"list_tags merged={merged}")
        if self.fail_list:
            return Err(ExternalCollaboratorError(operation="git for-each-ref", details="boom"))
        entries = tuple(
            TagEntry(name=name, created_at=t.created_at)
            for name, t in self.tags.items()
            if merged is None or t.reachable
        )
        return Ok(TagSet(entries=entries))

    def resolve_commit(self, ref: str) -> Result[str | None, ExternalCollaboratorError]:
        if ref == "HEAD":
            return Ok(self.head)
        tag = self.tags.get(ref)
        return Ok(None if tag is None else tag.sha)

    def remote_tag_exists(self, name: str) -> Result[bool, ExternalCollaboratorError]:
        return Ok(name in self.remote_tags)

    def fetch_tag(self, name: str) -> Result[None, ExternalCollaboratorError]:
        self.calls.append(f"fetch {name}")
        sha = self.remote_tags.get(name)
        if sha is None:
            return Err(
                ExternalCollaboratorError(
                    operation="git fetch origin", details=f"couldn't find remote ref {name}"
                )
            )
        self.tags.setdefault(name, LocalTag(sha=sha))
        return Ok(None)

    def create_tag(
        self, name: str, *, target: str, message: str
    ) -> Result[None, ExternalCollaboratorError]:
        self.calls.append(f"tag {name} {target} {message}")
        if name in self.tags:
            return Err(ExternalCollaboratorError(operation="git tag -a", details="already exists"))
        self.tags[name] = LocalTag(sha=target)
        return Ok(None)

    def push_tag(self, name: str) -> Result[None, ExternalCollaboratorError]:
        self.calls.append(f"push {name}")
        if self.fail_push:
            return Err(ExternalCollaboratorError(operation="git push origin", details="rejected"))
        self.remote_tags[name] = self.tags[name].sha
        return Ok(None)

    def delete_tag(self, name: str) -> Result[None, ExternalCollaboratorError]:
        self.calls.append(f"delete {name}")
        self.tags.pop(name, None)
        return Ok(None)

    def remote_branches(self) -> Result[list[str], ExternalCollaboratorError]:
        return Ok(list(self.branches))


def _str_set() -> set[str]:
    return set()


@dataclass
class FakeReleaseHost:
    released: set[str] = field(default_factory=_str_set)
    broken: set[str] = field(default_factory=_str_set)
    calls: list[str] = field(default_factory=_strs)

    def release_exists(self, tag: str) -> Result[bool, ExternalCollaboratorError]:
        self.calls.append(tag)
        if tag in self.broken:
            return Err(ExternalCollaboratorError(operation=f"gh release view {tag}", details="HTTP 502"))
        return Ok(tag in self.released)


@pytest.fixture
def vcs() -> FakeVersionControl:
    return FakeVersionControl()


@pytest.fixture
def releases() -> FakeReleaseHost:
    return FakeReleaseHost()
