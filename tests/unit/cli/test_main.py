"""Tests for the btmeta command line."""

from __future__ import annotations

import json
import sys

import pytest
from click.testing import CliRunner

from btmeta.cli.main import cli, main
from btmeta.core.bencode import encode
from btmeta.core.digest import info_hash_hex
from btmeta.core.value import from_native

pytestmark = [pytest.mark.unit, pytest.mark.cli]


@pytest.fixture
def runner():
    return CliRunner()


class TestInfoCommand:
    """btmeta info."""

    def test_minimal_document(self, runner, tmp_path, minimal_torrent_bytes):
        """Prints tracker, length and the single piece hash."""
        path = tmp_path / "min.torrent"
        path.write_bytes(minimal_torrent_bytes)

        result = runner.invoke(cli, ["info", str(path)], obj={})

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0] == "Tracker URL: http://x.com/"
        assert lines[1] == "Length: 100"
        assert lines[2].startswith("Info Hash: ")
        assert len(lines[2].removeprefix("Info Hash: ")) == 40
        assert lines[3] == "Piece Length: 20"
        assert lines[4] == "Piece Hashes:"
        assert lines[5] == "41" * 20

    def test_fixture_torrent(self, runner, torrent_file):
        """Every piece hash is listed in order."""
        result = runner.invoke(cli, ["info", str(torrent_file)], obj={})

        assert result.exit_code == 0, result.output
        assert "Tracker URL: http://tracker.example.com/announce" in result.output
        assert "Length: 1024" in result.output
        expected = info_hash_hex(from_native({
            b"name": b"test_torrent",
            b"length": 1024,
            b"piece length": 16384,
            b"pieces": b"".join(bytes([i]) * 20 for i in range(3)),
        }))
        assert f"Info Hash: {expected}" in result.output
        tail = result.output.split("Piece Hashes:\n", 1)[1].splitlines()
        assert tail == ["00" * 20, "01" * 20, "02" * 20]

    def test_invalid_document(self, runner, tmp_path):
        """Undecodable files exit with status 1."""
        path = tmp_path / "bad.torrent"
        path.write_bytes(b"d8:announce")

        result = runner.invoke(cli, ["info", str(path)], obj={})

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_missing_field(self, runner, tmp_path):
        """Structurally valid bencode without required keys exits with 1."""
        path = tmp_path / "noinfo.torrent"
        path.write_bytes(encode({b"announce": b"http://x/"}))

        result = runner.invoke(cli, ["info", str(path)], obj={})

        assert result.exit_code == 1

    def test_missing_file(self, runner, tmp_path):
        """click rejects paths that do not exist."""
        result = runner.invoke(cli, ["info", str(tmp_path / "nope.torrent")], obj={})
        assert result.exit_code == 2


class TestPiecesCommand:
    """btmeta pieces."""

    def test_table(self, runner, torrent_file):
        """The table lists each piece index and hash."""
        result = runner.invoke(cli, ["pieces", str(torrent_file)], obj={})

        assert result.exit_code == 0, result.output
        assert "00" * 20 in result.output
        assert "02" * 20 in result.output


class TestDecodeCommand:
    """btmeta decode."""

    def test_decode_dictionary(self, runner):
        """Literals are printed as JSON."""
        result = runner.invoke(cli, ["decode", "d3:cow3:moo4:spaml1:ai1eee"], obj={})

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {"cow": "moo", "spam": ["a", 1]}

    def test_decode_error(self, runner):
        """Malformed literals exit with status 1."""
        result = runner.invoke(cli, ["decode", "i03e"], obj={})

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_lenient_from_environment(self, runner, monkeypatch):
        """BTMETA_STRICT=false relaxes the decoder."""
        monkeypatch.setenv("BTMETA_STRICT", "false")

        result = runner.invoke(cli, ["decode", "i03e"], obj={})

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == 3

    def test_depth_from_config_file(self, runner, tmp_path):
        """--config applies codec limits."""
        config_file = tmp_path / "custom.toml"
        config_file.write_text("[codec]\nmax_depth = 1\n", encoding="utf-8")

        result = runner.invoke(
            cli, ["--config", str(config_file), "decode", "llee"], obj={}
        )

        assert result.exit_code == 1


class TestGroupOptions:
    """Options on the command group."""

    def test_invalid_config_file(self, runner, tmp_path):
        """A broken config file exits with status 1."""
        config_file = tmp_path / "broken.toml"
        config_file.write_text("[codec\n", encoding="utf-8")

        result = runner.invoke(cli, ["--config", str(config_file), "decode", "i1e"], obj={})

        assert result.exit_code == 1

    def test_verbose(self, runner):
        """-vv still produces normal command output."""
        result = runner.invoke(cli, ["-vv", "decode", "i7e"], obj={})

        assert result.exit_code == 0, result.output
        assert "7" in result.output

    def test_help(self, runner):
        """All commands are listed."""
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for command in ("info", "pieces", "decode"):
            assert command in result.output


class TestMainEntry:
    """main() entry point."""

    def test_main(self, monkeypatch, capsys):
        """main runs the group against sys.argv."""
        monkeypatch.setattr(sys, "argv", ["btmeta", "decode", "4:spam"])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 0
        assert json.loads(capsys.readouterr().out) == "spam"
