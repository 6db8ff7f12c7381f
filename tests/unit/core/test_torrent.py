"""Tests for torrent file parsing functionality.
"""

import hashlib
import os

import pytest

pytestmark = [pytest.mark.unit, pytest.mark.core]

from btmeta.core.bencode import encode
from btmeta.core.torrent import TorrentParser
from btmeta.models import CodecConfig
from btmeta.utils.exceptions import (
    BencodeDecodeError,
    InvariantViolationError,
    NestingDepthError,
    TorrentError,
)


class TestTorrentParser:
    """Test cases for TorrentParser."""

    def test_minimal_document(self, minimal_torrent_bytes):
        """The smallest valid document yields its tracker, length and piece."""
        result = TorrentParser().parse_bytes(minimal_torrent_bytes)

        assert result.announce == "http://x.com/"
        assert result.length == 100
        assert result.piece_length == 20
        assert result.num_pieces == 1
        assert result.piece_hashes_hex == ["41" * 20]
        assert result.name is None

        start = minimal_torrent_bytes.index(b"4:info") + len(b"4:info")
        expected = hashlib.sha1(minimal_torrent_bytes[start:-1]).hexdigest()  # nosec B324
        assert result.info_hash_hex == expected
        assert len(result.info_hash) == 20

    def test_parse_single_file_torrent(self, tmp_path):
        """Test parsing a single file torrent."""
        torrent_data = {
            b"announce": b"http://tracker.example.com:6969/announce",
            b"comment": b"Test torrent",
            b"created by": b"btmeta",
            b"creation date": 1700000000,
            b"info": {
                b"name": b"test_file.txt",
                b"length": 12345,
                b"piece length": 16384,
                b"pieces": b"x" * 40,  # 2 pieces * 20 bytes each
            },
        }
        path = tmp_path / "single.torrent"
        path.write_bytes(encode(torrent_data))

        result = TorrentParser().parse(path)

        assert result.announce == "http://tracker.example.com:6969/announce"
        assert result.comment == "Test torrent"
        assert result.created_by == "btmeta"
        assert result.creation_date == 1700000000
        assert not result.is_multi_file

        # Check file info
        assert len(result.files) == 1
        file_info = result.files[0]
        assert file_info.length == 12345
        assert file_info.name == "test_file.txt"
        assert file_info.path is None

        # Check pieces info
        assert result.piece_length == 16384
        assert result.num_pieces == 2
        assert result.pieces == [b"x" * 20, b"x" * 20]

    def test_parse_multi_file_torrent(self, tmp_path):
        """Test parsing a multi-file torrent."""
        torrent_data = {
            b"announce": b"http://tracker.example.com/announce",
            b"announce-list": [
                [b"http://tracker.example.com/announce"],
                [b"udp://backup.example.com:80"],
            ],
            b"info": {
                b"name": b"album",
                b"piece length": 32768,
                b"pieces": b"y" * 20,
                b"files": [
                    {b"length": 1000, b"path": [b"cd1", b"track01.flac"]},
                    {b"length": 2000, b"path": [b"cover.jpg"]},
                ],
            },
        }
        path = tmp_path / "multi.torrent"
        path.write_bytes(encode(torrent_data))

        result = TorrentParser().parse(str(path))

        assert result.is_multi_file
        assert result.length == 3000
        assert result.name == "album"
        assert result.announce_list == [
            ["http://tracker.example.com/announce"],
            ["udp://backup.example.com:80"],
        ]
        assert [f.name for f in result.files] == ["track01.flac", "cover.jpg"]
        assert result.files[0].path == ["cd1", "track01.flac"]
        assert result.files[0].full_path == os.path.join("album", "cd1", "track01.flac")

    def test_fixture_file(self, torrent_file):
        """The shared fixture parses to three pieces."""
        result = TorrentParser().parse(torrent_file)
        assert result.num_pieces == 3
        assert result.files[0].name == "test_torrent"

    def test_get_piece_hash(self, torrent_file):
        """Piece hashes are addressable by index."""
        parser = TorrentParser()
        result = parser.parse(torrent_file)

        assert parser.get_piece_hash(result, 1) == bytes([1]) * 20
        with pytest.raises(TorrentError):
            parser.get_piece_hash(result, 3)
        with pytest.raises(TorrentError):
            parser.get_piece_hash(result, -1)


class TestTorrentParserErrors:
    """Rejected documents."""

    def test_parse_nonexistent_file(self, tmp_path):
        """Test parsing a non-existent file."""
        with pytest.raises(TorrentError, match="not found"):
            TorrentParser().parse(tmp_path / "missing.torrent")

    def test_parse_unreadable_path(self, tmp_path):
        """Read failures surface as TorrentError."""
        with pytest.raises(TorrentError, match="Failed to read torrent"):
            TorrentParser().parse(tmp_path)

    def test_parse_invalid_bencode(self):
        """Malformed bencode surfaces as a decode error."""
        with pytest.raises(BencodeDecodeError):
            TorrentParser().parse_bytes(b"invalid bencode data")

    def test_root_not_dictionary(self):
        """The document root must be a dictionary."""
        with pytest.raises(TorrentError, match="root must be a dictionary"):
            TorrentParser().parse_bytes(b"l4:spame")

    def test_missing_required_fields(self):
        """Test parsing torrent with missing required fields."""
        # Missing announce
        with pytest.raises(TorrentError, match="announce"):
            TorrentParser().parse_bytes(encode({b"info": {}}))

        # Missing info
        with pytest.raises(TorrentError, match="info"):
            TorrentParser().parse_bytes(encode({b"announce": b"http://x/"}))

        # Missing length and files
        data = {
            b"announce": b"http://x/",
            b"info": {b"piece length": 20, b"pieces": b""},
        }
        with pytest.raises(TorrentError, match="either length"):
            TorrentParser().parse_bytes(encode(data))

        # Missing pieces
        data = {b"announce": b"http://x/", b"info": {b"length": 1, b"piece length": 20}}
        with pytest.raises(TorrentError, match="pieces"):
            TorrentParser().parse_bytes(encode(data))

    def test_wrong_field_kind(self):
        """Fields with the wrong node type are rejected."""
        data = {
            b"announce": 5,
            b"info": {b"length": 1, b"piece length": 20, b"pieces": b""},
        }
        with pytest.raises(TorrentError, match="must be ByteString"):
            TorrentParser().parse_bytes(encode(data))

    def test_bad_pieces_length(self):
        """A pieces blob that is not a multiple of 20 is never truncated."""
        data = {
            b"announce": b"http://x/",
            b"info": {b"length": 1, b"piece length": 20, b"pieces": b"A" * 21},
        }
        with pytest.raises(InvariantViolationError):
            TorrentParser().parse_bytes(encode(data))

    def test_non_positive_piece_length(self):
        """Piece length must be positive."""
        data = {
            b"announce": b"http://x/",
            b"info": {b"length": 1, b"piece length": 0, b"pieces": b""},
        }
        with pytest.raises(TorrentError, match="Failed to parse torrent"):
            TorrentParser().parse_bytes(encode(data))

    def test_empty_file_path(self):
        """Multi-file entries need at least one path component."""
        data = {
            b"announce": b"http://x/",
            b"info": {
                b"piece length": 20,
                b"pieces": b"",
                b"files": [{b"length": 1, b"path": []}],
            },
        }
        with pytest.raises(TorrentError, match="empty path"):
            TorrentParser().parse_bytes(encode(data))

    def test_codec_limits_apply(self):
        """The parser decodes with the configured depth limit."""
        data = {
            b"announce": b"http://x/",
            b"deep": [[[[b"x"]]]],
            b"info": {b"length": 1, b"piece length": 20, b"pieces": b""},
        }
        parser = TorrentParser(CodecConfig(max_depth=3))
        with pytest.raises(NestingDepthError):
            parser.parse_bytes(encode(data))

        assert TorrentParser(CodecConfig(max_depth=6)).parse_bytes(encode(data)).length == 1
