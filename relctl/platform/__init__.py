"""Platform helpers (subprocess execution)."""

from .process import NOT_STARTED, ProcessError, run

__all__ = ["NOT_STARTED", "ProcessError", "run"]
