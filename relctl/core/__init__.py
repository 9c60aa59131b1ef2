"""Core types: configuration, exit codes and the Result type."""

from .config import ConfigError, FileConfig, Settings, build_settings, load_config
from .errors import ErrorCode
from .result import Err, Ok, Result

__all__ = [
    # config
    "ConfigError",
    "FileConfig",
    "Settings",
    "build_settings",
    "load_config",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
]
