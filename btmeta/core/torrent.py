"""Metainfo document parsing.

Decodes a torrent file, checks the fields a v1 metainfo document must carry,
and extracts them together with the info hash and piece hashes.
"""

from __future__ import annotations

import os
from pathlib import Path

from btmeta.core.bencode import decode
from btmeta.core.digest import info_hash
from btmeta.core.pieces import split_pieces
from btmeta.core.value import ByteString, Dictionary, Integer, List, Value
from btmeta.models import CodecConfig, FileInfo, TorrentInfo
from btmeta.utils.exceptions import BencodeError, InvariantViolationError, TorrentError
from btmeta.utils.logging_config import LoggingContext, get_logger

logger = get_logger(__name__)


def _field_name(key: bytes) -> str:
    return key.decode("utf-8", errors="replace")


def _require(container: Dictionary, key: bytes, kind: type, where: str) -> Value:
    """Return ``container[key]``, checking it exists and has the expected kind."""
    if key not in container:
        msg = f"Missing required key in {where}: {_field_name(key)}"
        raise TorrentError(msg)
    value = container[key]
    if not isinstance(value, kind):
        msg = f"Field '{_field_name(key)}' in {where} must be {kind.__name__}, got {type(value).__name__}"
        raise TorrentError(msg)
    return value


def _optional_text(container: Dictionary, key: bytes) -> str | None:
    value = container.get(key)
    if isinstance(value, ByteString):
        return value.text(errors="replace")
    return None


class TorrentParser:
    """Parser for BitTorrent metainfo files."""

    def __init__(self, codec: CodecConfig | None = None) -> None:
        """Initialize the torrent parser.

        Args:
            codec: Decoder limits; defaults to ``CodecConfig()``

        """
        self.codec = codec or CodecConfig()

    def parse(self, torrent_path: str | Path) -> TorrentInfo:
        """Parse a torrent file from a local path.

        Raises:
            TorrentError: If the file is missing or the document is invalid
            BencodeError: If the file is not well-formed bencode

        """
        path = Path(torrent_path)
        if not path.exists():
            msg = f"Torrent file not found: {path}"
            raise TorrentError(msg)

        with LoggingContext("parse torrent", logger, path=str(path)):
            try:
                data = path.read_bytes()
            except OSError as e:
                msg = f"Failed to read torrent: {e}"
                raise TorrentError(msg) from e
            return self.parse_bytes(data)

    def parse_bytes(self, data: bytes) -> TorrentInfo:
        """Parse an in-memory metainfo document."""
        try:
            root = decode(
                data,
                max_depth=self.codec.max_depth,
                strict=self.codec.strict,
            )
            info = self._validate_torrent(root)
            return self._extract_torrent_data(root, info)
        except (TorrentError, BencodeError, InvariantViolationError):
            # Re-raise validation and codec errors as-is
            raise
        except Exception as e:
            msg = f"Failed to parse torrent: {e}"
            raise TorrentError(msg) from e

    def _validate_torrent(self, root: Value) -> Dictionary:
        """Validate the document shape and return the info dictionary."""
        if not isinstance(root, Dictionary):
            msg = "Invalid torrent: root must be a dictionary"
            raise TorrentError(msg)

        _require(root, b"announce", ByteString, "torrent")
        info = _require(root, b"info", Dictionary, "torrent")

        # Must have either length (single file) or files (multi-file)
        if b"length" not in info and b"files" not in info:
            msg = "Torrent must specify either length (single file) or files (multi-file)"
            raise TorrentError(msg)

        _require(info, b"piece length", Integer, "info")
        _require(info, b"pieces", ByteString, "info")
        return info

    def _extract_torrent_data(self, root: Dictionary, info: Dictionary) -> TorrentInfo:
        """Extract and process torrent data."""
        announce = root[b"announce"].text()
        files = self._extract_file_info(info)
        pieces = split_pieces(info[b"pieces"].value)
        piece_length = info[b"piece length"].value

        announce_list = None
        tiers = root.get(b"announce-list")
        if isinstance(tiers, List):
            announce_list = [
                [url.text() for url in tier if isinstance(url, ByteString)]
                for tier in tiers
                if isinstance(tier, List)
            ]

        creation_date = root.get(b"creation date")

        torrent = TorrentInfo(
            announce=announce,
            announce_list=announce_list,
            comment=_optional_text(root, b"comment"),
            created_by=_optional_text(root, b"created by"),
            creation_date=creation_date.value if isinstance(creation_date, Integer) else None,
            name=_optional_text(info, b"name"),
            files=files,
            length=sum(f.length for f in files),
            piece_length=piece_length,
            pieces=pieces,
            num_pieces=len(pieces),
            info_hash=info_hash(info),
        )
        logger.debug(
            "Parsed torrent %s: %d files, %d pieces",
            torrent.info_hash_hex,
            len(torrent.files),
            torrent.num_pieces,
        )
        return torrent

    def _extract_file_info(self, info: Dictionary) -> list[FileInfo]:
        """Extract file information from info dictionary."""
        name = _optional_text(info, b"name") or ""

        if b"length" in info:
            # Single file torrent
            length = _require(info, b"length", Integer, "info").value
            return [FileInfo(name=name, length=length, path=None, full_path=name)]

        # Multi-file torrent
        entries = _require(info, b"files", List, "info")
        files = []
        for entry in entries:
            if not isinstance(entry, Dictionary):
                msg = "Invalid file entry in torrent: must be a dictionary"
                raise TorrentError(msg)
            length = _require(entry, b"length", Integer, "file entry").value
            path_value = _require(entry, b"path", List, "file entry")
            path_parts = [
                part.text() for part in path_value if isinstance(part, ByteString)
            ]
            if not path_parts:
                msg = "Invalid file entry in torrent: empty path"
                raise TorrentError(msg)
            files.append(
                FileInfo(
                    name=path_parts[-1],
                    length=length,
                    path=path_parts,
                    full_path=os.path.join(name, *path_parts),
                ),
            )
        return files

    def get_piece_hash(self, torrent_data: TorrentInfo, piece_index: int) -> bytes:
        """Get the SHA-1 hash for a specific piece."""
        if piece_index < 0 or piece_index >= torrent_data.num_pieces:
            msg = f"Invalid piece index: {piece_index}"
            raise TorrentError(msg)

        return torrent_data.pieces[piece_index]
