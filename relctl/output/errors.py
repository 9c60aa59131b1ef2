"""Error presentation utilities.

Centralized error formatting and exit code mapping for release errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from relctl.core.config import ConfigError
from relctl.core.errors import ErrorCode
from relctl.output.console import Style
from relctl.services.release.errors import (
    ConflictingTag,
    ExternalCollaboratorError,
    InvalidTagFormat,
    NoStreamFound,
    NoTagFound,
    ReleaseError,
    TagNotFound,
)

if TYPE_CHECKING:
    from relctl.output.console import ConsoleProtocol

__all__ = ["print_release_error", "release_error_exit_code"]


def print_release_error(error: ReleaseError | ConfigError, console: ConsoleProtocol) -> None:
    """Print an error and its hint (if any)."""
    if isinstance(error, ConfigError):
        console.error(error.message)
        return

    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def release_error_exit_code(error: ReleaseError | ConfigError) -> int:
    match error:
        case InvalidTagFormat() | ConflictingTag() | TagNotFound():
            return int(ErrorCode.USER_ERROR)
        case NoStreamFound() | NoTagFound() | ConfigError():
            return int(ErrorCode.ENV_ERROR)
        case ExternalCollaboratorError():
            return int(ErrorCode.NETWORK_ERROR)
    return int(ErrorCode.USER_ERROR)
