"""Pydantic models for btmeta.

Provides validated data models for configuration and extracted metainfo.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class FileInfo(BaseModel):
    """File entry of a metainfo document."""

    name: str = Field(..., description="File name")
    length: int = Field(..., ge=0, description="File length in bytes")
    path: list[str] | None = Field(None, description="File path components")
    full_path: str | None = Field(None, description="Full file path")


class TorrentInfo(BaseModel):
    """Fields extracted from a metainfo document."""

    announce: str = Field(..., description="Announce URL")
    announce_list: list[list[str]] | None = Field(None, description="Announce list")
    comment: str | None = Field(None, description="Torrent comment")
    created_by: str | None = Field(None, description="Created by")
    creation_date: int | None = Field(None, description="Creation date")
    name: str | None = Field(None, description="Suggested file or directory name")

    # File information
    files: list[FileInfo] = Field(default_factory=list, description="File list")
    length: int = Field(..., ge=0, description="Total content length in bytes")

    # Piece information
    piece_length: int = Field(..., gt=0, description="Piece length in bytes")
    pieces: list[bytes] = Field(default_factory=list, description="Piece hashes")
    num_pieces: int = Field(..., ge=0, description="Number of pieces")

    info_hash: bytes = Field(..., min_length=20, max_length=20, description="Info hash")

    @field_validator("pieces")
    @classmethod
    def validate_pieces(cls, v: list[bytes]) -> list[bytes]:
        """Validate every piece hash is 20 bytes."""
        for piece in v:
            if len(piece) != 20:
                msg = f"piece hash must be 20 bytes (SHA-1), got {len(piece)} bytes"
                raise ValueError(msg)
        return v

    @property
    def info_hash_hex(self) -> str:
        """Info hash as 40 lowercase hex characters."""
        return self.info_hash.hex()

    @property
    def piece_hashes_hex(self) -> list[str]:
        """Piece hashes as lowercase hex, in piece index order."""
        return [piece.hex() for piece in self.pieces]

    @property
    def is_multi_file(self) -> bool:
        """Whether the document describes more than one file."""
        return any(f.path is not None for f in self.files)


class CodecConfig(BaseModel):
    """Decoder limits and strictness."""

    max_depth: int = Field(
        default=256,
        ge=1,
        le=400,
        description="Deepest list/dictionary nesting accepted by the decoder",
    )
    strict: bool = Field(
        default=True,
        description="Reject non-canonical integers, padded lengths and duplicate keys",
    )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: LogLevel = Field(default=LogLevel.WARNING, description="Log level")
    log_file: str | None = Field(None, description="Log file path")

    # Advanced logging
    structured_logging: bool = Field(
        default=False,
        description="Use structured (JSON) logging",
    )
    log_correlation_id: bool = Field(
        default=True,
        description="Include correlation IDs",
    )


class Config(BaseModel):
    """Main configuration model."""

    codec: CodecConfig = Field(
        default_factory=CodecConfig,
        description="Codec configuration",
    )
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Observability configuration",
    )
