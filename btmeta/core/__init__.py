"""Core codec and metainfo handling.

This module contains:
- the bencode value model, decoder and encoder
- SHA-1 digests and the info hash
- piece hash splitting
- metainfo document parsing
"""

from __future__ import annotations

from btmeta.core.bencode import (
    BencodeDecoder,
    BencodeEncoder,
    DecodeResult,
    decode,
    decode_at,
    encode,
    try_decode,
)
from btmeta.core.digest import info_hash, info_hash_hex, sha1_digest, sha1_hexdigest
from btmeta.core.pieces import PIECE_HASH_LENGTH, piece_hashes_hex, split_pieces
from btmeta.core.torrent import TorrentParser
from btmeta.core.value import (
    ByteString,
    Dictionary,
    Integer,
    List,
    Value,
    from_native,
    to_native,
)

__all__ = [
    "PIECE_HASH_LENGTH",
    # Bencoding
    "BencodeDecoder",
    "BencodeEncoder",
    "ByteString",
    "DecodeResult",
    "Dictionary",
    "Integer",
    "List",
    # Torrent
    "TorrentParser",
    "Value",
    "decode",
    "decode_at",
    "encode",
    "from_native",
    # Digest
    "info_hash",
    "info_hash_hex",
    "piece_hashes_hex",
    "sha1_digest",
    "sha1_hexdigest",
    "split_pieces",
    "to_native",
    "try_decode",
]
