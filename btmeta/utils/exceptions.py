"""Exception hierarchy for btmeta.

Every codec failure carries an error kind and, where it applies, the byte
offset at which the input went wrong.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Categories of codec failure."""

    MALFORMED_INPUT = "malformed_input"
    RESOURCE_EXHAUSTION = "resource_exhaustion"
    INVARIANT_VIOLATION = "invariant_violation"


class BTMetaError(Exception):
    """Base exception for all btmeta errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize btmeta error."""
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class ValidationError(BTMetaError):
    """Data validation errors."""


class ConfigurationError(ValidationError):
    """Configuration validation errors."""


class TorrentError(ValidationError):
    """Metainfo document validation errors."""


class BencodeError(ValidationError):
    """Bencode encoding/decoding errors."""

    kind: ErrorKind = ErrorKind.MALFORMED_INPUT

    def __init__(
        self,
        message: str,
        offset: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        """Initialize bencode error at an optional byte offset."""
        super().__init__(message, details)
        self.offset = offset

    def __str__(self) -> str:
        """Return string representation including the offset."""
        text = super().__str__()
        if self.offset is not None:
            return f"{text} at offset {self.offset}"
        return text


class BencodeDecodeError(BencodeError):
    """Input violates the bencode grammar."""


class NestingDepthError(BencodeDecodeError):
    """Containers nested deeper than the configured limit."""

    kind = ErrorKind.RESOURCE_EXHAUSTION


class BencodeEncodeError(BencodeError):
    """Object cannot be represented in bencode."""


class InvariantViolationError(ValidationError):
    """A value breaks a structural invariant (e.g. piece blob length)."""

    kind = ErrorKind.INVARIANT_VIOLATION
