from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import TYPE_CHECKING

from relctl.core.config import Settings
from relctl.core.result import Err, Ok
from relctl.output.console import MockConsole
from relctl.services.release.errors import (
    ConflictingTag,
    ExternalCollaboratorError,
    InvalidTagFormat,
    NoStreamFound,
    NoTagFound,
    TagNotFound,
)
from relctl.services.release.version import Stream
from relctl.services.release.workflow import (
    auto_tag,
    plan_next_tag,
    promote,
    seed_stream,
    verify_releases,
)

if TYPE_CHECKING:
    from conftest import FakeReleaseHost, FakeVersionControl

NOW = datetime(2026, 6, 15, 12, 0, tzinfo=UTC)


def _settings(tmp_path: Path, **overrides: object) -> Settings:
    return Settings(repo_root=tmp_path, repository="example/project", **overrides)  # type: ignore[arg-type]


class TestPlanNextTag:
    def test_main_branch_from_highest_tag(self, tmp_path: Path, vcs: FakeVersionControl) -> None:
        vcs.add("v1.2.0", "v1.3.0", "v1.3.1-rc.0")

        result = plan_next_tag(settings=_settings(tmp_path), vcs=vcs)

        assert isinstance(result, Ok)
        assert result.value.stream == Stream(1, 3)
        assert result.value.next_tag.to_tag() == "v1.3.1-rc.1"

    def test_release_branch_override(self, tmp_path: Path, vcs: FakeVersionControl) -> None:
        vcs.add("v1.2.3", "v1.4.0-rc.2")

        result = plan_next_tag(settings=_settings(tmp_path), vcs=vcs, branch="release-1.2")

        assert isinstance(result, Ok)
        assert result.value.next_tag.to_tag() == "v1.2.4-rc.0"

    def test_detached_head(self, tmp_path: Path, vcs: FakeVersionControl) -> None:
        vcs.branch = None
        vcs.add("v1.2.0")

        result = plan_next_tag(settings=_settings(tmp_path), vcs=vcs)

        assert isinstance(result, Err)
        assert isinstance(result.error, NoStreamFound)
        assert result.error.branch == "HEAD"

    def test_list_failure_propagates(self, tmp_path: Path, vcs: FakeVersionControl) -> None:
        vcs.fail_list = True

        result = plan_next_tag(settings=_settings(tmp_path), vcs=vcs)

        assert isinstance(result, Err)
        assert isinstance(result.error, ExternalCollaboratorError)


class TestAutoTag:
    def test_creates_and_pushes_next_candidate(
        self, tmp_path: Path, vcs: FakeVersionControl
    ) -> None:
        vcs.add("v1.2.3")
        console = MockConsole()

        result = auto_tag(settings=_settings(tmp_path), vcs=vcs, console=console)

        assert isinstance(result, Ok)
        assert result.value.tag == "v1.2.4-rc.0"
        assert result.value.created
        assert vcs.tags["v1.2.4-rc.0"].sha == vcs.head
        assert vcs.remote_tags["v1.2.4-rc.0"] == vcs.head
        assert (
            "tag v1.2.4-rc.0 head0000 Auto-tagged weekly release: v1.2.4-rc.0" in vcs.calls
        )
        assert console.find("Latest tag: v1.2.3 (stable)")
        assert console.commands == [
            "git tag -a v1.2.4-rc.0 head0000 -m 'Auto-tagged weekly release: v1.2.4-rc.0'",
            "git push origin refs/tags/v1.2.4-rc.0",
        ]
        assert console.has_success()

    def test_increments_candidate(self, tmp_path: Path, vcs: FakeVersionControl) -> None:
        vcs.add("v1.2.3", "v1.2.4-rc.1")
        console = MockConsole()

        result = auto_tag(settings=_settings(tmp_path), vcs=vcs, console=console)

        assert isinstance(result, Ok)
        assert result.value.tag == "v1.2.4-rc.2"
        assert console.find("Incrementing RC: v1.2.4-rc.1 -> v1.2.4-rc.2")

    def test_second_run_after_first_moves_on(self, tmp_path: Path, vcs: FakeVersionControl) -> None:
        vcs.add("v1.2.3")
        settings = _settings(tmp_path)

        first = auto_tag(settings=settings, vcs=vcs, console=MockConsole())
        second = auto_tag(settings=settings, vcs=vcs, console=MockConsole())

        assert isinstance(first, Ok) and isinstance(second, Ok)
        assert first.value.tag == "v1.2.4-rc.0"
        assert second.value.tag == "v1.2.4-rc.1"

    def test_skips_when_next_tag_exists_elsewhere(
        self, tmp_path: Path, vcs: FakeVersionControl
    ) -> None:
        vcs.add("v1.2.3")
        vcs.add("v1.2.4-rc.0", sha="elsewhere", reachable=False)
        console = MockConsole()

        result = auto_tag(settings=_settings(tmp_path), vcs=vcs, console=console)

        assert isinstance(result, Ok)
        assert not result.value.created
        assert result.value.tag == "v1.2.4-rc.0"
        assert console.find("already exists, skipping")
        assert not any(c.startswith("tag ") or c.startswith("push ") for c in vcs.calls)

    def test_dry_run_does_not_mutate(self, tmp_path: Path, vcs: FakeVersionControl) -> None:
        vcs.add("v1.2.3")

        result = auto_tag(settings=_settings(tmp_path), vcs=vcs, console=MockConsole(), dry_run=True)

        assert isinstance(result, Ok)
        assert result.value.dry_run
        assert not result.value.created
        assert "v1.2.4-rc.0" not in vcs.tags

    def test_push_failure_rolls_back_local_tag(
        self, tmp_path: Path, vcs: FakeVersionControl
    ) -> None:
        vcs.add("v1.2.3")
        vcs.fail_push = True
        console = MockConsole()

        result = auto_tag(settings=_settings(tmp_path), vcs=vcs, console=console)

        assert isinstance(result, Err)
        assert isinstance(result.error, ExternalCollaboratorError)
        assert "v1.2.4-rc.0" not in vcs.tags
        assert "v1.2.4-rc.0" not in vcs.remote_tags
        assert vcs.calls[-2:] == ["push v1.2.4-rc.0", "delete v1.2.4-rc.0"]
        assert console.find("push failed")

    def test_no_tags_in_stream(self, tmp_path: Path, vcs: FakeVersionControl) -> None:
        vcs.branch = "release-2.0"
        vcs.add("v1.2.3")

        result = auto_tag(settings=_settings(tmp_path), vcs=vcs, console=MockConsole())

        assert isinstance(result, Err)
        assert isinstance(result.error, NoTagFound)
        assert "relctl seed 2.0" in (result.error.hint or "")


class TestPromote:
    def test_promotes_on_empty_remote(self, vcs: FakeVersionControl) -> None:
        vcs.add("v1.2.3-rc.2", sha="abc123")
        vcs.remote_tags["v1.2.3-rc.2"] = "abc123"
        console = MockConsole()

        result = promote(candidate="v1.2.3-rc.2", vcs=vcs, console=console)

        assert isinstance(result, Ok)
        assert result.value.release == "v1.2.3"
        assert result.value.commit == "abc123"
        assert not result.value.already_promoted
        assert vcs.remote_tags["v1.2.3"] == "abc123"
        assert "tag v1.2.3 abc123 Promote v1.2.3-rc.2 to v1.2.3" in vcs.calls

    def test_fetches_candidate_from_remote(self, vcs: FakeVersionControl) -> None:
        vcs.remote_tags["v1.2.3-rc.0"] = "abc123"

        result = promote(candidate="v1.2.3-rc.0", vcs=vcs, console=MockConsole())

        assert isinstance(result, Ok)
        assert "fetch v1.2.3-rc.0" in vcs.calls
        assert vcs.tags["v1.2.3"].sha == "abc123"

    def test_repeat_is_a_no_op(self, vcs: FakeVersionControl) -> None:
        vcs.add("v1.2.3-rc.2", sha="abc123")
        vcs.remote_tags["v1.2.3-rc.2"] = "abc123"

        first = promote(candidate="v1.2.3-rc.2", vcs=vcs, console=MockConsole())
        calls_before = len([c for c in vcs.calls if c.startswith("tag ")])
        console = MockConsole()
        second = promote(candidate="v1.2.3-rc.2", vcs=vcs, console=console)

        assert isinstance(first, Ok) and isinstance(second, Ok)
        assert second.value.already_promoted
        assert len([c for c in vcs.calls if c.startswith("tag ")]) == calls_before
        assert console.find("already promoted")

    def test_conflicting_release_tag(self, vcs: FakeVersionControl) -> None:
        vcs.add("v1.2.3-rc.2", sha="abc123")
        vcs.remote_tags["v1.2.3"] = "def456"

        result = promote(candidate="v1.2.3-rc.2", vcs=vcs, console=MockConsole())

        assert isinstance(result, Err)
        assert isinstance(result.error, ConflictingTag)
        assert result.error.release_sha == "def456"
        assert result.error.candidate_sha == "abc123"
        assert vcs.remote_tags["v1.2.3"] == "def456"

    def test_rejects_malformed_candidate(self, vcs: FakeVersionControl) -> None:
        result = promote(candidate="v1.2-rc.1", vcs=vcs, console=MockConsole())

        assert isinstance(result, Err)
        assert isinstance(result.error, InvalidTagFormat)
        assert vcs.calls == []

    def test_rejects_stable_tag(self, vcs: FakeVersionControl) -> None:
        result = promote(candidate="v1.2.3", vcs=vcs, console=MockConsole())
        assert isinstance(result, Err)
        assert isinstance(result.error, InvalidTagFormat)

    def test_missing_candidate(self, vcs: FakeVersionControl) -> None:
        result = promote(candidate="v1.2.3-rc.9", vcs=vcs, console=MockConsole())

        assert isinstance(result, Err)
        assert isinstance(result.error, TagNotFound)
        assert result.error.remote == "origin"

    def test_dry_run(self, vcs: FakeVersionControl) -> None:
        vcs.add("v1.2.3-rc.2", sha="abc123")

        result = promote(candidate="v1.2.3-rc.2", vcs=vcs, console=MockConsole(), dry_run=True)

        assert isinstance(result, Ok)
        assert result.value.dry_run
        assert "v1.2.3" not in vcs.tags

    def test_push_failure_rolls_back(self, vcs: FakeVersionControl) -> None:
        vcs.add("v1.2.3-rc.2", sha="abc123")
        vcs.fail_push = True

        result = promote(candidate="v1.2.3-rc.2", vcs=vcs, console=MockConsole())

        assert isinstance(result, Err)
        assert "v1.2.3" not in vcs.tags
        assert "delete v1.2.3" in vcs.calls


class TestVerifyReleases:
    def test_reports_missing_recent_stable(
        self, tmp_path: Path, vcs: FakeVersionControl, releases: FakeReleaseHost
    ) -> None:
        vcs.branch = "release-1.2"
        vcs.add("v1.2.0", created_at=NOW - timedelta(days=10))
        vcs.add("v1.2.1", created_at=NOW - timedelta(days=2))
        console = MockConsole()

        result = verify_releases(
            settings=_settings(tmp_path), vcs=vcs, host=releases, console=console, now=NOW
        )

        assert isinstance(result, Ok)
        assert result.value.failed
        assert result.value.missing_tags == ["v1.2.1"]
        assert releases.calls == ["v1.2.1"]
        assert console.find("v1.2.1: no GitHub release found")
        assert console.find("Stream for release-1.2: 1.2")

    def test_window_comes_from_settings(
        self, tmp_path: Path, vcs: FakeVersionControl, releases: FakeReleaseHost
    ) -> None:
        vcs.add("v1.2.1", created_at=NOW - timedelta(days=10))

        result = verify_releases(
            settings=_settings(tmp_path, window_days=14),
            vcs=vcs,
            host=releases,
            console=MockConsole(),
            now=NOW,
        )

        assert isinstance(result, Ok)
        assert result.value.missing_tags == ["v1.2.1"]

    def test_unreachable_stable_tags_are_audited(
        self, tmp_path: Path, vcs: FakeVersionControl, releases: FakeReleaseHost
    ) -> None:
        vcs.add("v1.2.2-rc.0", created_at=NOW - timedelta(days=1))
        vcs.add("v1.2.1", created_at=NOW - timedelta(days=2), reachable=False)
        releases.released.add("v1.2.2-rc.0")

        result = verify_releases(
            settings=_settings(tmp_path), vcs=vcs, host=releases, console=MockConsole(), now=NOW
        )

        assert isinstance(result, Ok)
        assert result.value.missing_tags == ["v1.2.1"]

    def test_all_released(
        self, tmp_path: Path, vcs: FakeVersionControl, releases: FakeReleaseHost
    ) -> None:
        vcs.add("v1.2.1", created_at=NOW - timedelta(days=2))
        vcs.add("v1.2.2-rc.0", created_at=NOW - timedelta(days=1))
        releases.released.update({"v1.2.1", "v1.2.2-rc.0"})

        result = verify_releases(
            settings=_settings(tmp_path), vcs=vcs, host=releases, console=MockConsole(), now=NOW
        )

        assert isinstance(result, Ok)
        assert not result.value.failed

    def test_lookup_failure_is_an_error_not_a_finding(
        self, tmp_path: Path, vcs: FakeVersionControl, releases: FakeReleaseHost
    ) -> None:
        vcs.add("v1.2.1", created_at=NOW - timedelta(days=2))
        releases.broken.add("v1.2.1")

        result = verify_releases(
            settings=_settings(tmp_path), vcs=vcs, host=releases, console=MockConsole(), now=NOW
        )

        assert isinstance(result, Err)
        assert isinstance(result.error, ExternalCollaboratorError)
        assert result.error.details == "HTTP 502"


class TestSeedStream:
    def test_creates_seed_tag(self, vcs: FakeVersionControl) -> None:
        result = seed_stream(stream=Stream(1, 3), vcs=vcs, console=MockConsole())

        assert isinstance(result, Ok)
        assert result.value.tag == "v1.3.0-rc.0"
        assert result.value.created
        assert "tag v1.3.0-rc.0 head0000 Dev version v1.3.0-rc.0 (rc.0)" in vcs.calls
        assert vcs.remote_tags["v1.3.0-rc.0"] == "head0000"

    def test_existing_seed_is_skipped(self, vcs: FakeVersionControl) -> None:
        vcs.add("v1.3.0-rc.0")
        console = MockConsole()

        result = seed_stream(stream=Stream(1, 3), vcs=vcs, console=console)

        assert isinstance(result, Ok)
        assert not result.value.created
        assert console.find("already exists")
