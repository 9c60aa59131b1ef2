"""Tag lifecycle decisions.

Pure functions over a `TagSet` snapshot: no git, no network. The workflows in
`relctl.services.release.workflow` feed them data and carry out the single
mutation they decide on.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Literal

from relctl.core.result import Err, Ok, Result
from relctl.services.release.errors import (
    ConflictingTag,
    ExternalCollaboratorError,
    NoStreamFound,
    NoTagFound,
)
from relctl.services.release.tags import TagSet
from relctl.services.release.version import Stream, VersionTag, stream_from_branch

ReleaseLookup = Callable[[str], Result[bool, ExternalCollaboratorError]]
PromotionAction = Literal["create", "already_promoted"]


def resolve_stream(
    branch: str,
    tags: TagSet,
    *,
    main_branches: Sequence[str] = ("main",),
) -> Result[Stream, NoStreamFound]:
    from_branch = stream_from_branch(branch)
    if from_branch is not None:
        return Ok(from_branch)

    if branch not in main_branches:
        expected = " or ".join([*main_branches, "release-X.Y"])
        return Err(NoStreamFound(branch=branch, reason=f"unexpected branch (expected {expected})"))

    highest = tags.highest()
    if highest is None:
        return Err(NoStreamFound(branch=branch, reason="no version tags reachable from HEAD"))
    return Ok(highest.stream)


def latest_tag(stream: Stream, tags: TagSet) -> Result[VersionTag, NoTagFound]:
    latest = tags.latest_in(stream)
    if latest is None:
        return Err(NoTagFound(stream=str(stream)))
    return Ok(latest)


@dataclass(frozen=True, slots=True)
class NextTag:
    stream: Stream
    latest: VersionTag
    next_tag: VersionTag
    already_exists: bool


def compute_next_tag(
    stream: Stream,
    tags: TagSet,
    *,
    existing: TagSet | None = None,
) -> Result[NextTag, NoTagFound]:
    """Next tag after the stream's latest one in `tags`.

    `already_exists` is checked against `tags` and, when given, `existing`
    (every tag in the repository, reachable or not).
    """
    latest = latest_tag(stream, tags)
    if isinstance(latest, Err):
        return latest

    nxt = latest.value.next_candidate()
    name = nxt.to_tag()
    return Ok(
        NextTag(
            stream=stream,
            latest=latest.value,
            next_tag=nxt,
            already_exists=name in tags or (existing is not None and name in existing),
        )
    )


def plan_promotion(
    *,
    candidate: VersionTag,
    candidate_sha: str,
    existing_release_sha: str | None,
) -> Result[PromotionAction, ConflictingTag]:
    """Decide what promoting `candidate` means given the remote release tag state.

    `existing_release_sha` is the commit the release tag already points to
    upstream, or None when the release tag does not exist yet.
    """
    if existing_release_sha is None:
        return Ok("create")
    if existing_release_sha == candidate_sha:
        return Ok("already_promoted")
    return Err(
        ConflictingTag(
            release_tag=candidate.release().to_tag(),
            release_sha=existing_release_sha,
            candidate_tag=candidate.to_tag(),
            candidate_sha=candidate_sha,
        )
    )


@dataclass(frozen=True, slots=True)
class VerificationReport:
    stream: Stream
    latest: VersionTag
    window: timedelta
    since: datetime
    checked_stable: tuple[VersionTag, ...]
    missing_stable: tuple[VersionTag, ...]
    latest_candidate_missing: bool

    @property
    def failed(self) -> bool:
        return bool(self.missing_stable) or self.latest_candidate_missing

    @property
    def missing_tags(self) -> list[str]:
        out = [v.to_tag() for v in self.missing_stable]
        if self.latest_candidate_missing:
            out.append(self.latest.to_tag())
        return out

    def failure_reasons(self) -> str:
        parts: list[str] = []
        if self.missing_stable:
            lines = "\n".join(f"  - {v.to_tag()}" for v in self.missing_stable)
            parts.append(
                f"Stable tag(s) for stream {self.stream} in the past {self.window.days} days "
                f"without a GitHub release:\n{lines}"
            )
        if self.latest_candidate_missing:
            parts.append(f"Latest RC tag {self.latest.to_tag()} has no GitHub release.")
        return "\n\n".join(parts)


def verify(
    stream: Stream,
    tags: TagSet,
    *,
    window: timedelta,
    release_exists: ReleaseLookup,
    now: datetime,
    audit_tags: TagSet | None = None,
) -> Result[VerificationReport, NoTagFound | ExternalCollaboratorError]:
    """Audit that recent stable tags and the latest candidate have releases.

    `tags` defines the stream's latest tag (normally the tags reachable from
    HEAD). `audit_tags` is the set scanned for recent stable tags and defaults
    to `tags`.
    """
    latest = latest_tag(stream, tags)
    if isinstance(latest, Err):
        return latest

    since = now - window
    pool = audit_tags if audit_tags is not None else tags
    recent = sorted(
        v for e, v in pool.versioned_entries(stream) if v.is_stable and e.created_at >= since
    )

    missing: list[VersionTag] = []
    for v in recent:
        exists = release_exists(v.to_tag())
        if isinstance(exists, Err):
            return exists
        if not exists.value:
            missing.append(v)

    candidate_missing = False
    if latest.value.is_candidate:
        exists = release_exists(latest.value.to_tag())
        if isinstance(exists, Err):
            return exists
        candidate_missing = not exists.value

    return Ok(
        VerificationReport(
            stream=stream,
            latest=latest.value,
            window=window,
            since=since,
            checked_stable=tuple(recent),
            missing_stable=tuple(missing),
            latest_candidate_missing=candidate_missing,
        )
    )
