"""Splitting of the concatenated ``pieces`` field into per-piece hashes."""

from __future__ import annotations

from btmeta.utils.exceptions import InvariantViolationError

PIECE_HASH_LENGTH = 20


def split_pieces(blob: bytes | bytearray | memoryview) -> list[bytes]:
    """Split ``blob`` into 20-byte piece hashes, in piece index order.

    Raises:
        InvariantViolationError: If the length is not a multiple of 20

    """
    data = bytes(blob)
    if len(data) % PIECE_HASH_LENGTH != 0:
        msg = (
            f"Invalid pieces data length: {len(data)} bytes "
            f"(should be multiple of {PIECE_HASH_LENGTH})"
        )
        raise InvariantViolationError(msg, {"length": len(data)})

    return [
        data[start : start + PIECE_HASH_LENGTH]
        for start in range(0, len(data), PIECE_HASH_LENGTH)
    ]


def piece_hashes_hex(blob: bytes | bytearray | memoryview) -> list[str]:
    """Split ``blob`` and render each piece hash as lowercase hex."""
    return [piece.hex() for piece in split_pieces(blob)]
