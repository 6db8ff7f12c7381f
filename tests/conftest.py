"""Pytest configuration and shared fixtures for btmeta tests."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pytest

from btmeta.config import config as config_module
from btmeta.config.config import ENV_MAPPINGS
from btmeta.core.bencode import encode

MINIMAL_TORRENT = (
    b"d8:announce13:http://x.com/4:infod6:lengthi100e"
    b"12:piece lengthi20e6:pieces20:AAAAAAAAAAAAAAAAAAAAee"
)


def pytest_configure(config):
    """Register all project markers to avoid warnings when ini isn't loaded."""
    markers = [
        ("unit", "marks tests as unit tests"),
        ("core", "marks tests as core functionality tests"),
        ("cli", "marks tests as CLI tests"),
        ("config", "marks tests as configuration tests"),
        ("observability", "marks tests as logging tests"),
        ("property", "marks tests as property-based tests"),
    ]
    for name, desc in markers:
        config.addinivalue_line("markers", f"{name}: {desc}")


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch, tmp_path):
    """Keep user config files and BTMETA_* variables out of the tests."""
    for env_name in ENV_MAPPINGS:
        monkeypatch.delenv(env_name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path / "home"))


@pytest.fixture(autouse=True)
def cleanup_logging():
    """Clean up logging handlers after each test to prevent closed file errors."""
    yield
    for logger_name in list(logging.Logger.manager.loggerDict.keys()):
        logger = logging.getLogger(logger_name)
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)


@pytest.fixture(autouse=True)
def reset_global_config():
    """Forget the global config manager between tests."""
    yield
    config_module.reset_config()


def create_test_torrent_dict(
    name: str = "test_torrent",
    announce: str = "http://tracker.example.com/announce",
    file_length: int = 1024,
    piece_length: int = 16384,
    num_pieces: int = 1,
) -> dict[bytes, Any]:
    """Create a single-file metainfo dictionary for tests.

    Args:
        name: Torrent name
        announce: Tracker announce URL
        file_length: Size of the test file in bytes
        piece_length: Size of each piece in bytes
        num_pieces: Number of pieces

    Returns:
        Metainfo dictionary ready for ``encode``

    """
    pieces = b"".join(bytes([i % 256]) * 20 for i in range(num_pieces))
    return {
        b"announce": announce.encode("utf-8"),
        b"info": {
            b"name": name.encode("utf-8"),
            b"length": file_length,
            b"piece length": piece_length,
            b"pieces": pieces,
        },
    }


@pytest.fixture
def minimal_torrent_bytes() -> bytes:
    """Smallest valid metainfo document: one piece, 100 bytes."""
    return MINIMAL_TORRENT


@pytest.fixture
def torrent_file(tmp_path) -> Path:
    """Write a three-piece single-file torrent to disk."""
    path = tmp_path / "sample.torrent"
    path.write_bytes(encode(create_test_torrent_dict(num_pieces=3)))
    return path
