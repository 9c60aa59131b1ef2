from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime

from relctl.core.result import Ok
from relctl.services.release.version import Stream, VersionTag, parse_version_tag


@dataclass(frozen=True, slots=True)
class TagEntry:
    name: str
    created_at: datetime

    @property
    def version(self) -> VersionTag | None:
        parsed = parse_version_tag(self.name)
        if isinstance(parsed, Ok):
            return parsed.value
        return None


@dataclass(frozen=True, slots=True)
class TagSet:
    """Read-only snapshot of tags with their creation time.

    Non-version tags are kept so that existence checks see every ref, but they
    never take part in version ordering.
    """

    entries: tuple[TagEntry, ...] = ()

    @classmethod
    def of(cls, names: Iterable[str], *, created_at: datetime | None = None) -> TagSet:
        """Snapshot with one shared creation time (convenient for fixtures)."""
        when = created_at or datetime.fromtimestamp(0, tz=UTC)
        return cls(entries=tuple(TagEntry(name=n, created_at=when) for n in names))

    def __contains__(self, name: object) -> bool:
        return any(e.name == name for e in self.entries)

    def versions(self) -> list[VersionTag]:
        out: list[VersionTag] = []
        for e in self.entries:
            v = e.version
            if v is not None:
                out.append(v)
        return out

    def versioned_entries(self, stream: Stream) -> list[tuple[TagEntry, VersionTag]]:
        out: list[tuple[TagEntry, VersionTag]] = []
        for e in self.entries:
            v = e.version
            if v is not None and v.stream == stream:
                out.append((e, v))
        return out

    def highest(self) -> VersionTag | None:
        versions = self.versions()
        return max(versions) if versions else None

    def latest_in(self, stream: Stream) -> VersionTag | None:
        versions = [v for _, v in self.versioned_entries(stream)]
        return max(versions) if versions else None
