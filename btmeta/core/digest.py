"""SHA-1 digests and info hash calculation."""

from __future__ import annotations

import hashlib

from btmeta.core.bencode import encode
from btmeta.core.value import Dictionary
from btmeta.utils.exceptions import InvariantViolationError

DIGEST_LENGTH = 20


def sha1_digest(data: bytes | bytearray | memoryview) -> bytes:
    """Return the 20-byte SHA-1 digest of ``data``."""
    return hashlib.sha1(data).digest()  # nosec B324 - SHA-1 required by BitTorrent protocol (BEP 3)


def sha1_hexdigest(data: bytes | bytearray | memoryview) -> str:
    """Return the SHA-1 digest of ``data`` as 40 lowercase hex characters."""
    return hashlib.sha1(data).hexdigest()  # nosec B324 - SHA-1 required by BitTorrent protocol (BEP 3)


def info_hash(info: Dictionary) -> bytes:
    """Calculate the info hash: SHA-1 of the canonical encoding of ``info``."""
    if not isinstance(info, Dictionary):
        msg = f"Info hash requires a Dictionary, got {type(info).__name__}"
        raise InvariantViolationError(msg)
    return sha1_digest(encode(info))


def info_hash_hex(info: Dictionary) -> str:
    """Hex form of :func:`info_hash`."""
    return info_hash(info).hex()
