"""Release tag workflows.

Each function is one CLI invocation: read a tag snapshot, ask the resolver what
to do, then perform at most one mutation (create and push a single tag).
Concurrent runs are made safe by the resolver's skip/conflict rules and by the
remote rejecting refs that already exist, not by locking.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from relctl.core.config import Settings
from relctl.core.result import Err, Ok, Result
from relctl.output.console import ConsoleProtocol, Style
from relctl.services.release.errors import (
    ExternalCollaboratorError,
    NoStreamFound,
    ReleaseError,
    TagNotFound,
)
from relctl.services.release.ports import ReleaseHost, VersionControl
from relctl.services.release.resolver import (
    NextTag,
    VerificationReport,
    compute_next_tag,
    plan_promotion,
    resolve_stream,
    verify,
)
from relctl.services.release.version import Stream, parse_candidate_tag

AUTO_TAG_MESSAGE = "Auto-tagged weekly release: {tag}"
PROMOTE_MESSAGE = "Promote {candidate} to {release}"
SEED_MESSAGE = "Dev version {tag} (rc.0)"


@dataclass(frozen=True, slots=True)
class TagOutcome:
    tag: str
    created: bool
    dry_run: bool = False


@dataclass(frozen=True, slots=True)
class Promotion:
    candidate: str
    release: str
    commit: str
    already_promoted: bool
    dry_run: bool = False


def _resolve_branch(branch: str | None, vcs: VersionControl) -> Result[str, ReleaseError]:
    if branch:
        return Ok(branch)
    current = vcs.current_branch()
    if isinstance(current, Err):
        return current
    if current.value is None:
        return Err(NoStreamFound(branch="HEAD", reason="detached HEAD (pass --branch)"))
    return Ok(current.value)


def _head_commit(vcs: VersionControl) -> Result[str, ReleaseError]:
    head = vcs.resolve_commit("HEAD")
    if isinstance(head, Err):
        return head
    if head.value is None:
        return Err(ExternalCollaboratorError(operation="git rev-parse HEAD", details="no commit"))
    return Ok(head.value)


def _create_and_push(
    vcs: VersionControl,
    console: ConsoleProtocol,
    *,
    name: str,
    target: str,
    message: str,
) -> Result[None, ExternalCollaboratorError]:
    """Create an annotated tag and push it; a failed push removes the local tag."""
    console.command(["git", "tag", "-a", name, target, "-m", message])
    created = vcs.create_tag(name, target=target, message=message)
    if isinstance(created, Err):
        return created

    console.command(["git", "push", vcs.remote, f"refs/tags/{name}"])
    pushed = vcs.push_tag(name)
    if isinstance(pushed, Err):
        console.warning(f"push failed, removing local tag {name}")
        cleanup = vcs.delete_tag(name)
        if isinstance(cleanup, Err):
            console.warning(f"could not remove local tag {name}: {cleanup.error.hint}")
        return pushed

    return Ok(None)


def plan_next_tag(
    *, settings: Settings, vcs: VersionControl, branch: str | None = None
) -> Result[NextTag, ReleaseError]:
    """Resolve the stream and the next tag without touching the repository."""
    name = _resolve_branch(branch, vcs)
    if isinstance(name, Err):
        return name

    reachable = vcs.list_tags()
    if isinstance(reachable, Err):
        return reachable

    stream = resolve_stream(name.value, reachable.value, main_branches=settings.main_branches)
    if isinstance(stream, Err):
        return stream

    everything = vcs.list_tags(merged=None)
    if isinstance(everything, Err):
        return everything

    return compute_next_tag(stream.value, reachable.value, existing=everything.value)


def auto_tag(
    *,
    settings: Settings,
    vcs: VersionControl,
    console: ConsoleProtocol,
    branch: str | None = None,
    dry_run: bool = False,
) -> Result[TagOutcome, ReleaseError]:
    planned = plan_next_tag(settings=settings, vcs=vcs, branch=branch)
    if isinstance(planned, Err):
        return planned
    nxt = planned.value
    tag = nxt.next_tag.to_tag()

    if nxt.latest.is_stable:
        console.print(f"Latest tag: {nxt.latest} (stable)")
        console.print(f"Creating next RC: {tag}")
    else:
        console.print(f"Latest tag: {nxt.latest} (rc)")
        console.print(f"Incrementing RC: {nxt.latest} -> {tag}")

    if nxt.already_exists:
        console.info(f"tag {tag} already exists, skipping")
        return Ok(TagOutcome(tag=tag, created=False))

    if dry_run:
        console.print(f"dry run: would create and push {tag}", Style.DIM)
        return Ok(TagOutcome(tag=tag, created=False, dry_run=True))

    head = _head_commit(vcs)
    if isinstance(head, Err):
        return head

    pushed = _create_and_push(
        vcs,
        console,
        name=tag,
        target=head.value,
        message=AUTO_TAG_MESSAGE.format(tag=tag),
    )
    if isinstance(pushed, Err):
        return pushed

    console.success(f"created and pushed tag {tag}")
    return Ok(TagOutcome(tag=tag, created=True))


def promote(
    *,
    candidate: str,
    vcs: VersionControl,
    console: ConsoleProtocol,
    dry_run: bool = False,
) -> Result[Promotion, ReleaseError]:
    parsed = parse_candidate_tag(candidate)
    if isinstance(parsed, Err):
        return parsed
    rc = parsed.value
    rc_tag = rc.to_tag()
    release_tag = rc.release().to_tag()

    console.print(f"Promoting {rc_tag} -> {release_tag}")

    # The candidate may only exist locally; resolution below is authoritative.
    fetched = vcs.fetch_tag(rc_tag)
    if isinstance(fetched, Err):
        console.print(f"fetch {rc_tag}: {fetched.error.hint}", Style.DIM)

    rc_sha = vcs.resolve_commit(rc_tag)
    if isinstance(rc_sha, Err):
        return rc_sha
    if rc_sha.value is None:
        return Err(TagNotFound(tag=rc_tag, remote=vcs.remote))

    exists = vcs.remote_tag_exists(release_tag)
    if isinstance(exists, Err):
        return exists

    existing_sha: str | None = None
    if exists.value:
        fetched_release = vcs.fetch_tag(release_tag)
        if isinstance(fetched_release, Err):
            return fetched_release
        resolved = vcs.resolve_commit(release_tag)
        if isinstance(resolved, Err):
            return resolved
        if resolved.value is None:
            return Err(
                ExternalCollaboratorError(
                    operation=f"git rev-parse {release_tag}",
                    details=f"{release_tag} exists on {vcs.remote} but could not be resolved",
                )
            )
        existing_sha = resolved.value

    decision = plan_promotion(
        candidate=rc,
        candidate_sha=rc_sha.value,
        existing_release_sha=existing_sha,
    )
    if isinstance(decision, Err):
        return decision

    if decision.value == "already_promoted":
        console.success(
            f"{release_tag} already points to the same commit as {rc_tag} (already promoted)"
        )
        return Ok(
            Promotion(
                candidate=rc_tag, release=release_tag, commit=rc_sha.value, already_promoted=True
            )
        )

    if dry_run:
        console.print(f"dry run: would tag {rc_sha.value} as {release_tag}", Style.DIM)
        return Ok(
            Promotion(
                candidate=rc_tag,
                release=release_tag,
                commit=rc_sha.value,
                already_promoted=False,
                dry_run=True,
            )
        )

    pushed = _create_and_push(
        vcs,
        console,
        name=release_tag,
        target=rc_sha.value,
        message=PROMOTE_MESSAGE.format(candidate=rc_tag, release=release_tag),
    )
    if isinstance(pushed, Err):
        return pushed

    console.success(f"promoted {rc_tag} to {release_tag} (both point to {rc_sha.value})")
    return Ok(
        Promotion(candidate=rc_tag, release=release_tag, commit=rc_sha.value, already_promoted=False)
    )


def verify_releases(
    *,
    settings: Settings,
    vcs: VersionControl,
    host: ReleaseHost,
    console: ConsoleProtocol,
    branch: str | None = None,
    now: datetime | None = None,
) -> Result[VerificationReport, ReleaseError]:
    name = _resolve_branch(branch, vcs)
    if isinstance(name, Err):
        return name

    reachable = vcs.list_tags()
    if isinstance(reachable, Err):
        return reachable

    stream = resolve_stream(name.value, reachable.value, main_branches=settings.main_branches)
    if isinstance(stream, Err):
        return stream
    console.print(f"Stream for {name.value}: {stream.value}")

    everything = vcs.list_tags(merged=None)
    if isinstance(everything, Err):
        return everything

    reference = now or datetime.now(UTC)
    since = reference - settings.window
    console.print(
        f"Verification window: past {settings.window_days} days "
        f"(since {since:%Y-%m-%dT%H:%M:%SZ})"
    )

    def lookup(tag: str) -> Result[bool, ExternalCollaboratorError]:
        result = host.release_exists(tag)
        if isinstance(result, Ok):
            mark = "release exists" if result.value else "no GitHub release found"
            console.print(f"  {tag}: {mark}", Style.DIM)
        return result

    return verify(
        stream.value,
        reachable.value,
        window=settings.window,
        release_exists=lookup,
        now=reference,
        audit_tags=everything.value,
    )


def seed_stream(
    *,
    stream: Stream,
    vcs: VersionControl,
    console: ConsoleProtocol,
    dry_run: bool = False,
) -> Result[TagOutcome, ReleaseError]:
    """Create `vX.Y.0-rc.0` at HEAD so automatic tagging has a starting point."""
    tag = stream.seed_tag().to_tag()

    existing = vcs.resolve_commit(tag)
    if isinstance(existing, Err):
        return existing
    if existing.value is not None:
        console.info(f"tag {tag} already exists, skipping")
        return Ok(TagOutcome(tag=tag, created=False))

    if dry_run:
        console.print(f"dry run: would create and push {tag}", Style.DIM)
        return Ok(TagOutcome(tag=tag, created=False, dry_run=True))

    head = _head_commit(vcs)
    if isinstance(head, Err):
        return head

    pushed = _create_and_push(
        vcs, console, name=tag, target=head.value, message=SEED_MESSAGE.format(tag=tag)
    )
    if isinstance(pushed, Err):
        return pushed

    console.success(f"created and pushed tag {tag}")
    return Ok(TagOutcome(tag=tag, created=True))
