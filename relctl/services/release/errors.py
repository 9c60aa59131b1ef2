"""Error values for the release tag lifecycle.

Each error is a frozen dataclass returned inside `Err(...)`. Every variant
exposes `message` and `hint` so the CLI can render any of them uniformly.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class NoStreamFound:
    branch: str
    reason: str

    @property
    def message(self) -> str:
        return f"cannot determine release stream for branch {self.branch}: {self.reason}"

    @property
    def hint(self) -> str | None:
        return "Run on a main-line branch with version tags or on a release-X.Y branch."


@dataclass(frozen=True, slots=True)
class NoTagFound:
    stream: str

    @property
    def message(self) -> str:
        return f"no version tags (vX.Y.Z or vX.Y.Z-rc.W) for stream {self.stream} reachable from HEAD"

    @property
    def hint(self) -> str | None:
        return f"Create an initial tag manually (e.g. relctl seed {self.stream})."


@dataclass(frozen=True, slots=True)
class InvalidTagFormat:
    value: str
    expected: str

    @property
    def message(self) -> str:
        return f"invalid format: {self.value!r} (expected {self.expected})"

    @property
    def hint(self) -> str | None:
        return None


@dataclass(frozen=True, slots=True)
class TagNotFound:
    tag: str
    remote: str

    @property
    def message(self) -> str:
        return f"tag {self.tag} not found on {self.remote}"

    @property
    def hint(self) -> str | None:
        return "Ensure the tag exists and has been pushed."


@dataclass(frozen=True, slots=True)
class ConflictingTag:
    release_tag: str
    release_sha: str
    candidate_tag: str
    candidate_sha: str

    @property
    def message(self) -> str:
        return (
            f"release tag {self.release_tag} already exists and points to a different commit\n"
            f"  {self.release_tag} -> {self.release_sha}\n"
            f"  {self.candidate_tag} -> {self.candidate_sha}"
        )

    @property
    def hint(self) -> str | None:
        return (
            "Another release candidate may have been promoted already; "
            "existing tags are never moved."
        )


@dataclass(frozen=True, slots=True)
class ExternalCollaboratorError:
    operation: str
    details: str

    @property
    def message(self) -> str:
        return f"{self.operation} failed"

    @property
    def hint(self) -> str | None:
        return self.details or None


ReleaseError = (
    NoStreamFound
    | NoTagFound
    | InvalidTagFormat
    | TagNotFound
    | ConflictingTag
    | ExternalCollaboratorError
)
