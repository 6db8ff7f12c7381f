"""btmeta - bencode codec and BitTorrent metainfo inspection."""

from __future__ import annotations

__version__ = "0.1.0"

from btmeta.core.bencode import (
    BencodeDecoder,
    BencodeEncoder,
    DecodeResult,
    decode,
    decode_at,
    encode,
    try_decode,
)
from btmeta.core.digest import info_hash, sha1_digest
from btmeta.core.pieces import split_pieces
from btmeta.core.torrent import TorrentParser
from btmeta.core.value import ByteString, Dictionary, Integer, List, Value

__all__ = [
    "BencodeDecoder",
    "BencodeEncoder",
    "ByteString",
    "DecodeResult",
    "Dictionary",
    "Integer",
    "List",
    "TorrentParser",
    "Value",
    "__version__",
    "decode",
    "decode_at",
    "encode",
    "info_hash",
    "sha1_digest",
    "split_pieces",
    "try_decode",
]
