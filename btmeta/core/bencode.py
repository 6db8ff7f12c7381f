"""Bencode decoder and encoder.

The decoder is a recursive-descent parser over an in-memory buffer. The
encoder produces the canonical form: dictionary keys sorted byte-wise,
integers without padding. Decoding a canonical buffer and encoding the
result gives back the same bytes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, cast

from btmeta.core.value import (
    INT64_MAX,
    INT64_MIN,
    ByteString,
    Dictionary,
    Integer,
    List,
    Value,
    from_native,
)
from btmeta.utils.exceptions import (
    BencodeDecodeError,
    BencodeEncodeError,
    BencodeError,
    NestingDepthError,
)

DEFAULT_MAX_DEPTH = 256

_DIGITS = b"0123456789"
_INT64_DIGITS = len(str(INT64_MAX))


def _as_buffer(data: Any) -> bytes:
    if isinstance(data, bytes):
        return data
    if isinstance(data, (bytearray, memoryview)):
        return bytes(data)
    msg = f"Bencoded input must be bytes-like, got {type(data).__name__}"
    raise TypeError(msg)


class BencodeDecoder:
    """Decodes a bencoded buffer into a value tree.

    Each instance owns its cursor; create one per buffer.
    """

    def __init__(
        self,
        data: bytes | bytearray | memoryview,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        strict: bool = True,
    ):
        """Initialize the decoder.

        Args:
            data: Bencoded input
            max_depth: Deepest container nesting accepted
            strict: Reject non-canonical integers, padded lengths and
                duplicate dictionary keys

        """
        self.data = _as_buffer(data)
        self.max_depth = max_depth
        self.strict = strict
        self.pos = 0
        self._depth = 0

    def decode(self) -> Value:
        """Decode exactly one value spanning the whole buffer."""
        value = self._parse_from(0)
        if self.pos != len(self.data):
            msg = "Trailing data after bencoded value"
            raise BencodeDecodeError(msg, self.pos)
        return value

    def decode_at(self, cursor: int = 0) -> tuple[Value, int]:
        """Decode one value starting at ``cursor``.

        Returns:
            The value and the cursor just past it

        """
        if cursor < 0 or cursor > len(self.data):
            msg = f"Cursor {cursor} outside buffer"
            raise BencodeDecodeError(msg, cursor)
        value = self._parse_from(cursor)
        return value, self.pos

    def _parse_from(self, cursor: int) -> Value:
        self.pos = cursor
        self._depth = 0
        try:
            return self._parse_value()
        except RecursionError as e:
            # max_depth above what the interpreter stack can hold
            msg = "Value nested too deeply to decode"
            raise NestingDepthError(msg, self.pos) from e

    def _fail(self, message: str, offset: int | None = None) -> BencodeDecodeError:
        return BencodeDecodeError(message, self.pos if offset is None else offset)

    def _peek(self) -> int:
        if self.pos >= len(self.data):
            raise self._fail("Unexpected end of input")
        return self.data[self.pos]

    def _parse_value(self) -> Value:
        token = self._peek()

        if token in _DIGITS:
            return self._parse_string()
        if token == ord("i"):
            return self._parse_int()
        if token == ord("l"):
            return self._parse_list()
        if token == ord("d"):
            return self._parse_dict()

        msg = f"Invalid token {bytes([token])!r}"
        raise self._fail(msg)

    def _parse_int(self) -> Integer:
        start = self.pos
        self.pos += 1  # skip 'i'

        end = self.data.find(b"e", self.pos)
        if end == -1:
            raise self._fail("Unterminated integer", start)

        body = self.data[self.pos : end]
        digits = body[1:] if body.startswith(b"-") else body
        if not digits or any(c not in _DIGITS for c in digits):
            msg = f"Invalid integer {body!r}"
            raise self._fail(msg, start)
        if self.strict:
            if len(digits) > 1 and digits.startswith(b"0"):
                msg = f"Integer with leading zero {body!r}"
                raise self._fail(msg, start)
            if body == b"-0":
                raise self._fail("Negative zero integer", start)

        # int() refuses very long digit strings, so bound the width first
        if len(digits.lstrip(b"0")) > _INT64_DIGITS:
            number = None
        else:
            number = int(body)
        if number is None or not INT64_MIN <= number <= INT64_MAX:
            msg = "Integer outside signed 64-bit range"
            raise self._fail(msg, start)

        self.pos = end + 1  # skip 'e'
        return Integer(number)

    def _parse_string(self) -> ByteString:
        start = self.pos
        colon = self.data.find(b":", self.pos)
        if colon == -1:
            raise self._fail("Missing ':' in string length", start)

        length_bytes = self.data[self.pos : colon]
        if not length_bytes or any(c not in _DIGITS for c in length_bytes):
            msg = f"Invalid string length {length_bytes!r}"
            raise self._fail(msg, start)
        if self.strict and len(length_bytes) > 1 and length_bytes.startswith(b"0"):
            msg = f"String length with leading zero {length_bytes!r}"
            raise self._fail(msg, start)

        begin = colon + 1
        available = len(self.data) - begin
        significant = length_bytes.lstrip(b"0") or b"0"
        if len(significant) > len(str(available)) or int(significant) > available:
            msg = (
                f"String declares {significant.decode('ascii')} bytes, "
                f"only {available} available"
            )
            raise self._fail(msg, start)

        length = int(significant)

        self.pos = begin + length
        return ByteString(self.data[begin : self.pos])

    def _enter(self) -> None:
        self._depth += 1
        if self._depth > self.max_depth:
            msg = f"Nesting deeper than {self.max_depth} levels"
            raise NestingDepthError(msg, self.pos)

    def _parse_list(self) -> List:
        start = self.pos
        self._enter()
        self.pos += 1  # skip 'l'
        items = []

        while True:
            if self.pos >= len(self.data):
                raise self._fail("Unterminated list", start)
            if self.data[self.pos] == ord("e"):
                break
            items.append(self._parse_value())

        self.pos += 1  # skip 'e'
        self._depth -= 1
        return List(tuple(items))

    def _parse_dict(self) -> Dictionary:
        start = self.pos
        self._enter()
        self.pos += 1  # skip 'd'
        entries: dict[bytes, Value] = {}

        while True:
            if self.pos >= len(self.data):
                raise self._fail("Unterminated dictionary", start)
            token = self.data[self.pos]
            if token == ord("e"):
                break
            # keys MUST be strings
            if token not in _DIGITS:
                raise self._fail("Dictionary key must be a byte string")
            key_offset = self.pos
            key = self._parse_string().value
            if self.strict and key in entries:
                msg = f"Duplicate dictionary key {key!r}"
                raise self._fail(msg, key_offset)
            entries[key] = self._parse_value()

        self.pos += 1  # skip 'e'
        self._depth -= 1
        return Dictionary(entries)


class BencodeEncoder:
    """Encodes value trees (or plain Python objects) into canonical bencode."""

    def encode(self, obj: Any) -> bytes:
        """Encode ``obj`` and return the bencoded bytes."""
        out = bytearray()
        try:
            self._encode_value(from_native(obj), out)
        except RecursionError as e:
            msg = "Value nested too deeply to encode"
            raise NestingDepthError(msg) from e
        return bytes(out)

    def _encode_value(self, value: Value, out: bytearray) -> None:
        match value:
            case Integer(value=number):
                out += b"i%de" % number
            case ByteString(value=raw):
                out += b"%d:" % len(raw)
                out += raw
            case List(items=items):
                out += b"l"
                for item in items:
                    self._encode_value(item, out)
                out += b"e"
            case Dictionary(entries=entries):
                out += b"d"
                for key in sorted(entries):
                    out += b"%d:" % len(key)
                    out += key
                    self._encode_value(entries[key], out)
                out += b"e"
            case _:
                msg = f"Cannot bencode object of type {type(value).__name__}"
                raise BencodeEncodeError(msg)


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of :func:`try_decode`: either a value or the error that stopped it."""

    value: Value | None = None
    end: int = 0
    error: BencodeError | None = None

    @property
    def ok(self) -> bool:
        """Whether decoding succeeded."""
        return self.error is None

    def unwrap(self) -> Value:
        """Return the value, raising the stored error on failure."""
        if self.error is not None:
            raise self.error
        return cast(Value, self.value)


def decode(
    data: bytes | bytearray | memoryview,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    strict: bool = True,
) -> Value:
    """Decode a buffer holding exactly one bencoded value."""
    return BencodeDecoder(data, max_depth=max_depth, strict=strict).decode()


def decode_at(
    data: bytes | bytearray | memoryview,
    cursor: int = 0,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    strict: bool = True,
) -> tuple[Value, int]:
    """Decode one value at ``cursor``; return it with the advanced cursor."""
    return BencodeDecoder(data, max_depth=max_depth, strict=strict).decode_at(cursor)


def try_decode(
    data: bytes | bytearray | memoryview,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    strict: bool = True,
) -> DecodeResult:
    """Decode without raising on malformed input."""
    decoder = BencodeDecoder(data, max_depth=max_depth, strict=strict)
    try:
        value = decoder.decode()
    except BencodeError as e:
        return DecodeResult(error=e, end=e.offset or 0)
    return DecodeResult(value=value, end=decoder.pos)


def encode(obj: Any) -> bytes:
    """Encode a value tree or plain Python object to bencode."""
    return BencodeEncoder().encode(obj)
