from __future__ import annotations

from datetime import UTC, datetime

from relctl.services.release.tags import TagEntry, TagSet
from relctl.services.release.version import Stream, VersionTag


def test_non_version_tags_are_kept_but_not_parsed() -> None:
    tags = TagSet.of(["v1.2.0", "nightly", "v1.2-rc.1"])

    assert "nightly" in tags
    assert "v1.2-rc.1" in tags
    assert len(tags.entries) == 3
    assert tags.versions() == [VersionTag(1, 2, 0)]


def test_highest_across_streams() -> None:
    tags = TagSet.of(["v1.2.0", "v1.10.0-rc.0", "v1.9.5"])
    assert tags.highest() == VersionTag(1, 10, 0, candidate=0)


def test_highest_empty() -> None:
    assert TagSet().highest() is None


def test_latest_in_stream_filters_other_streams() -> None:
    tags = TagSet.of(["v1.2.0", "v1.2.1-rc.0", "v1.3.0"])
    assert tags.latest_in(Stream(1, 2)) == VersionTag(1, 2, 1, candidate=0)


def test_stream_filter_is_not_a_loose_prefix_match() -> None:
    tags = TagSet.of(["v1.20.0", "v11.2.0"])
    assert tags.latest_in(Stream(1, 2)) is None


def test_versioned_entries_keep_timestamps() -> None:
    when = datetime(2026, 3, 1, tzinfo=UTC)
    tags = TagSet(entries=(TagEntry("v1.2.0", when), TagEntry("v2.0.0", when)))

    entries = tags.versioned_entries(Stream(1, 2))

    assert len(entries) == 1
    entry, version = entries[0]
    assert entry.created_at == when
    assert version == VersionTag(1, 2, 0)
