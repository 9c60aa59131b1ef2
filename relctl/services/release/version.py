from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering

from relctl.core.result import Err, Ok, Result
from relctl.services.release.errors import InvalidTagFormat

_NUM = r"(0|[1-9][0-9]*)"
_VERSION_RE = re.compile(rf"^v{_NUM}\.{_NUM}\.{_NUM}(?:-rc\.{_NUM})?$")
_RELEASE_BRANCH_RE = re.compile(rf"^release-{_NUM}\.{_NUM}$")
_STREAM_RE = re.compile(rf"^{_NUM}\.{_NUM}$")

VERSION_FORMAT = "vX.Y.Z or vX.Y.Z-rc.W"
CANDIDATE_FORMAT = "vX.Y.Z-rc.W (e.g. v1.2.3-rc.2)"
STREAM_FORMAT = "X.Y (e.g. 1.2)"


@dataclass(frozen=True, slots=True, order=True)
class Stream:
    """A release line identified by (major, minor)."""

    major: int
    minor: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"

    @property
    def tag_prefix(self) -> str:
        return f"v{self.major}.{self.minor}."

    @property
    def branch(self) -> str:
        return f"release-{self.major}.{self.minor}"

    def seed_tag(self) -> VersionTag:
        return VersionTag(self.major, self.minor, 0, candidate=0)


@total_ordering
@dataclass(frozen=True, slots=True)
class VersionTag:
    """A parsed `vX.Y.Z` (stable) or `vX.Y.Z-rc.W` (candidate) tag.

    Ordering: (major, minor, patch), then a stable tag before any candidate of
    the same version, then candidates by number.
    """

    major: int
    minor: int
    patch: int
    candidate: int | None = None

    @property
    def is_stable(self) -> bool:
        return self.candidate is None

    @property
    def is_candidate(self) -> bool:
        return self.candidate is not None

    @property
    def stream(self) -> Stream:
        return Stream(self.major, self.minor)

    def _key(self) -> tuple[int, int, int, int, int]:
        if self.candidate is None:
            return (self.major, self.minor, self.patch, 0, 0)
        return (self.major, self.minor, self.patch, 1, self.candidate)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, VersionTag):
            return NotImplemented
        return self._key() < other._key()

    def to_tag(self) -> str:
        base = f"v{self.major}.{self.minor}.{self.patch}"
        if self.candidate is None:
            return base
        return f"{base}-rc.{self.candidate}"

    def __str__(self) -> str:
        return self.to_tag()

    def next_candidate(self) -> VersionTag:
        """The tag that follows this one in automatic tagging.

        vX.Y.Z -> vX.Y.(Z+1)-rc.0 and vX.Y.Z-rc.W -> vX.Y.Z-rc.(W+1).
        """
        if self.candidate is None:
            return VersionTag(self.major, self.minor, self.patch + 1, candidate=0)
        return VersionTag(self.major, self.minor, self.patch, candidate=self.candidate + 1)

    def release(self) -> VersionTag:
        """Same version without the -rc suffix."""
        return VersionTag(self.major, self.minor, self.patch)


def parse_version_tag(tag: str) -> Result[VersionTag, InvalidTagFormat]:
    m = _VERSION_RE.fullmatch(tag)
    if m is None:
        return Err(InvalidTagFormat(value=tag, expected=VERSION_FORMAT))
    rc = m.group(4)
    return Ok(
        VersionTag(
            int(m.group(1)),
            int(m.group(2)),
            int(m.group(3)),
            candidate=None if rc is None else int(rc),
        )
    )


def parse_candidate_tag(tag: str) -> Result[VersionTag, InvalidTagFormat]:
    parsed = parse_version_tag(tag)
    if isinstance(parsed, Err) or parsed.value.is_stable:
        return Err(InvalidTagFormat(value=tag, expected=CANDIDATE_FORMAT))
    return parsed


def parse_stream(text: str) -> Result[Stream, InvalidTagFormat]:
    m = _STREAM_RE.fullmatch(text.strip())
    if m is None:
        return Err(InvalidTagFormat(value=text, expected=STREAM_FORMAT))
    return Ok(Stream(int(m.group(1)), int(m.group(2))))


def stream_from_branch(branch: str) -> Stream | None:
    """Stream for a `release-X.Y` branch name, None for anything else."""
    m = _RELEASE_BRANCH_RE.fullmatch(branch)
    if m is None:
        return None
    return Stream(int(m.group(1)), int(m.group(2)))
