"""Bencoding module for BitTorrent metainfo.

This module provides a convenient interface to the core bencode functionality.
"""

from __future__ import annotations

from btmeta.core.bencode import (
    BencodeDecoder,
    BencodeEncoder,
    decode,
    decode_at,
    encode,
    try_decode,
)
from btmeta.utils.exceptions import BencodeDecodeError, BencodeEncodeError

__all__ = [
    "BencodeDecodeError",
    "BencodeDecoder",
    "BencodeEncodeError",
    "BencodeEncoder",
    "decode",
    "decode_at",
    "encode",
    "try_decode",
]
