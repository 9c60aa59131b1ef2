"""Tests for relctl.output.console module."""

from __future__ import annotations

import pytest

from relctl.output.console import MockConsole, RichConsole, Style


class TestMockConsole:
    def test_prefixes_match_terminal_output(self) -> None:
        console = MockConsole()

        console.success("pushed")
        console.error("failed")
        console.warning("careful")
        console.info("note")
        console.print("plain")

        assert console.messages == [
            "OK pushed",
            "error: failed",
            "warning: careful",
            "info: note",
            "plain",
        ]
        assert console.has_error()
        assert console.has_success()

    def test_commands_are_shell_quoted(self) -> None:
        console = MockConsole()

        console.command(["git", "tag", "-a", "v1.2.3", "abc", "-m", "Promote v1.2.3-rc.0 to v1.2.3"])

        assert console.commands == ["git tag -a v1.2.3 abc -m 'Promote v1.2.3-rc.0 to v1.2.3'"]
        assert console.outputs[0].style is Style.COMMAND

    def test_find(self) -> None:
        console = MockConsole()
        console.print("  v1.2.1: release exists", Style.DIM)
        console.print("  v1.2.2: no GitHub release found", Style.DIM)

        assert [o.message for o in console.find("no GitHub release")] == [
            "  v1.2.2: no GitHub release found"
        ]


@pytest.fixture(autouse=True)
def _plain_terminal(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("FORCE_COLOR", "TTY_COMPATIBLE", "TTY_INTERACTIVE"):
        monkeypatch.delenv(name, raising=False)


class TestRichConsole:
    def test_writes_to_stderr_without_markup(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole()

        console.error("bad tag [v1.2]")
        console.print("[bold]v1.2.3[/bold]")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "error: bad tag [v1.2]\n[bold]v1.2.3[/bold]\n"

    def test_stdout_when_requested(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole(stderr=False).success("done")
        assert capsys.readouterr().out == "OK done\n"
