"""Child process execution for the git and gh adapters.

Nothing here raises on a non-zero exit, a missing executable or a timeout;
each comes back as `Err(ProcessError)` so the adapters can decide whether the
failure means "not found" or "could not ask".
"""

from __future__ import annotations

import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from relctl.core.result import Err, Ok, Result

__all__ = ["NOT_STARTED", "ProcessError", "run"]

NOT_STARTED = -1
"""Return code recorded when the process never ran or was killed on timeout."""


@dataclass(frozen=True, slots=True)
class ProcessError:
    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        shown = " ".join(self.command[:3])
        if len(self.command) > 3:
            shown += " ..."
        return f"{shown} failed (exit {self.returncode})"

    @property
    def completed(self) -> bool:
        """True when the process ran to an exit code of its own."""
        return self.returncode != NOT_STARTED

    @property
    def details(self) -> str:
        return self.stderr.strip() or self.stdout.strip() or str(self)


def run(
    cmd: Sequence[str],
    cwd: Path,
    env: Mapping[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Run `cmd` in `cwd` and return its stdout.

    `env`, when given, replaces the inherited environment entirely.
    """
    argv = tuple(cmd)
    try:
        proc = subprocess.run(
            argv,
            cwd=cwd,
            env=None if env is None else dict(env),
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        # stdout is bytes here even with text=True on some platforms
        partial = e.stdout if isinstance(e.stdout, str) else ""
        return Err(ProcessError(argv, NOT_STARTED, partial, f"timed out after {timeout}s"))
    except OSError as e:
        return Err(ProcessError(argv, NOT_STARTED, "", str(e)))

    if proc.returncode:
        return Err(ProcessError(argv, proc.returncode, proc.stdout, proc.stderr))
    return Ok(proc.stdout)
