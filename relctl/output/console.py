"""Progress reporting for release workflows.

Workflows never print or log directly: they take a `ConsoleProtocol` and
report through it. `RichConsole` writes to a terminal (stderr by default, so
stdout stays free for the tag or JSON a command returns); `MockConsole`
records everything for assertions.
"""

from __future__ import annotations

import shlex
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "OutputRecord",
    "RichConsole",
    "Style",
]


class Style(Enum):
    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    DIM = auto()  # hints, per-tag lookup results
    COMMAND = auto()  # mutating git commands, echoed before they run

    def __str__(self) -> str:
        return self.name.lower()


_PREFIXES: dict[Style, str] = {
    Style.SUCCESS: "OK",
    Style.ERROR: "error:",
    Style.WARNING: "warning:",
    Style.INFO: "info:",
    Style.COMMAND: "$",
}


class ConsoleProtocol(Protocol):
    def print(self, message: str, style: Style = Style.DEFAULT) -> None: ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def command(self, argv: Sequence[str]) -> None:
        """Echo a command line (shell-quoted) that is about to run."""
        ...


class RichConsole:
    """Console backed by `rich`.

    Tag names, commit ids and git output are printed as plain text; Rich
    markup is never interpreted in messages.
    """

    _STYLES: dict[Style, str] = {
        Style.DEFAULT: "",
        Style.SUCCESS: "green",
        Style.ERROR: "red bold",
        Style.WARNING: "yellow",
        Style.INFO: "cyan",
        Style.DIM: "dim",
        Style.COMMAND: "dim",
    }

    def __init__(self, *, stderr: bool = True) -> None:
        from rich.console import Console

        self._console = Console(stderr=stderr, highlight=False)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self._console.print(message, style=self._STYLES[style] or None, markup=False)

    def success(self, message: str) -> None:
        self._tagged(Style.SUCCESS, message)

    def error(self, message: str) -> None:
        self._tagged(Style.ERROR, message)

    def warning(self, message: str) -> None:
        self._tagged(Style.WARNING, message)

    def info(self, message: str) -> None:
        self._tagged(Style.INFO, message)

    def command(self, argv: Sequence[str]) -> None:
        self.print(f"{_PREFIXES[Style.COMMAND]} {shlex.join(argv)}", Style.COMMAND)

    def _tagged(self, style: Style, message: str) -> None:
        from rich.text import Text

        self._console.print(Text.assemble((_PREFIXES[style], self._STYLES[style]), " ", message))


@dataclass(frozen=True, slots=True)
class OutputRecord:
    message: str
    style: Style


def _records() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Captures output; messages carry the same prefixes a terminal would show."""

    outputs: list[OutputRecord] = field(default_factory=_records)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self._tagged(Style.SUCCESS, message)

    def error(self, message: str) -> None:
        self._tagged(Style.ERROR, message)

    def warning(self, message: str) -> None:
        self._tagged(Style.WARNING, message)

    def info(self, message: str) -> None:
        self._tagged(Style.INFO, message)

    def command(self, argv: Sequence[str]) -> None:
        self._tagged(Style.COMMAND, shlex.join(argv))

    def _tagged(self, style: Style, message: str) -> None:
        self.outputs.append(OutputRecord(f"{_PREFIXES[style]} {message}", style))

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    @property
    def commands(self) -> list[str]:
        """Echoed command lines without the `$ ` prefix."""
        return [o.message[2:] for o in self.outputs if o.style is Style.COMMAND]

    def has_error(self) -> bool:
        return any(o.style is Style.ERROR for o in self.outputs)

    def has_success(self) -> bool:
        return any(o.style is Style.SUCCESS for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        return [o for o in self.outputs if substring in o.message]
