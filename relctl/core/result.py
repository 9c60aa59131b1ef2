"""Ok/Err values for operations with expected failures.

A malformed tag, a missing ref or a failed `gh` call is not exceptional for a
release tool, so those paths return `Err(error)` and callers branch on it:

    parsed = parse_version_tag(name)
    if isinstance(parsed, Err):
        return parsed
    use(parsed.value)

`match` works too, since both variants are dataclasses:

    match vcs.resolve_commit(tag):
        case Ok(None):
            ...  # no such tag
        case Ok(sha):
            ...
        case Err(error):
            console.error(error.message)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

__all__ = ["Err", "Ok", "Result"]

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result: TypeAlias = Ok[T] | Err[E]
