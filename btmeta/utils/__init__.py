"""Shared utilities and infrastructure."""

from __future__ import annotations

from btmeta.utils.exceptions import (
    BencodeDecodeError,
    BencodeEncodeError,
    BencodeError,
    BTMetaError,
    ConfigurationError,
    ErrorKind,
    InvariantViolationError,
    NestingDepthError,
    TorrentError,
    ValidationError,
)
from btmeta.utils.logging_config import get_logger, setup_logging

__all__ = [
    # Exceptions
    "BTMetaError",
    "BencodeDecodeError",
    "BencodeEncodeError",
    "BencodeError",
    "ConfigurationError",
    "ErrorKind",
    "InvariantViolationError",
    "NestingDepthError",
    "TorrentError",
    "ValidationError",
    # Logging
    "get_logger",
    "setup_logging",
]
