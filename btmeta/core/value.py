"""Value model for bencoded data.

A decoded document is a tree of four immutable node types. ``Value`` is the
closed union of them; nothing else may appear in a tree.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Union

from btmeta.utils.exceptions import BencodeEncodeError, InvariantViolationError

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


@dataclass(frozen=True)
class Integer:
    """Signed 64-bit integer."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            msg = f"Integer requires an int, got {type(self.value).__name__}"
            raise InvariantViolationError(msg)
        if not INT64_MIN <= self.value <= INT64_MAX:
            msg = f"Integer {self.value} outside signed 64-bit range"
            raise InvariantViolationError(msg)


@dataclass(frozen=True)
class ByteString:
    """Raw byte string. Never implicitly decoded."""

    value: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.value, (bytes, bytearray, memoryview)):
            msg = f"ByteString requires bytes, got {type(self.value).__name__}"
            raise InvariantViolationError(msg)
        object.__setattr__(self, "value", bytes(self.value))

    def __len__(self) -> int:
        return len(self.value)

    def text(self, encoding: str = "utf-8", errors: str = "strict") -> str:
        """Decode the raw bytes as text."""
        return self.value.decode(encoding, errors)


@dataclass(frozen=True)
class List:
    """Ordered sequence of values."""

    items: tuple[Value, ...] = ()

    def __post_init__(self) -> None:
        items = tuple(self.items)
        for item in items:
            if not isinstance(item, VALUE_TYPES):
                msg = f"List element must be a Value, got {type(item).__name__}"
                raise InvariantViolationError(msg)
        object.__setattr__(self, "items", items)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.items)

    def __getitem__(self, index: int) -> Value:
        return self.items[index]


@dataclass(frozen=True, eq=False)
class Dictionary:
    """Mapping from byte-string keys to values.

    Iteration follows the order the entries were supplied in. The encoder
    sorts keys itself, so that order never affects the canonical form.
    """

    entries: Mapping[bytes, Value]

    def __post_init__(self) -> None:
        entries: dict[bytes, Value] = {}
        for key, item in dict(self.entries).items():
            if not isinstance(key, bytes):
                msg = f"Dictionary key must be bytes, got {type(key).__name__}"
                raise InvariantViolationError(msg)
            if not isinstance(item, VALUE_TYPES):
                msg = f"Dictionary value must be a Value, got {type(item).__name__}"
                raise InvariantViolationError(msg)
            entries[key] = item
        object.__setattr__(self, "entries", MappingProxyType(entries))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dictionary):
            return NotImplemented
        return dict(self.entries) == dict(other.entries)

    def __hash__(self) -> int:
        return hash(frozenset(self.entries.items()))

    def __repr__(self) -> str:
        return f"Dictionary({dict(self.entries)!r})"

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[bytes]:
        return iter(self.entries)

    def __contains__(self, key: object) -> bool:
        if isinstance(key, str):
            key = key.encode("utf-8")
        return key in self.entries

    def __getitem__(self, key: bytes | str) -> Value:
        if isinstance(key, str):
            key = key.encode("utf-8")
        return self.entries[key]

    def get(self, key: bytes | str, default: Value | None = None) -> Value | None:
        """Return the value for ``key`` or ``default``."""
        if isinstance(key, str):
            key = key.encode("utf-8")
        return self.entries.get(key, default)

    def items(self) -> Iterable[tuple[bytes, Value]]:
        """Return (key, value) pairs in stored order."""
        return self.entries.items()


Value = Union[Integer, ByteString, List, Dictionary]
VALUE_TYPES = (Integer, ByteString, List, Dictionary)


def from_native(obj: Any) -> Value:
    """Build a value tree from plain Python objects.

    Accepts ints, bytes-like objects, str (UTF-8 encoded), lists, tuples and
    dicts keyed by bytes or str. Values already in the tree form pass through.
    """
    if isinstance(obj, VALUE_TYPES):
        return obj
    if isinstance(obj, bool):
        msg = "Cannot bencode bool"
        raise BencodeEncodeError(msg)
    if isinstance(obj, int):
        try:
            return Integer(obj)
        except InvariantViolationError as e:
            raise BencodeEncodeError(e.message) from e
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return ByteString(bytes(obj))
    if isinstance(obj, str):
        return ByteString(obj.encode("utf-8"))
    if isinstance(obj, (list, tuple)):
        return List(tuple(from_native(item) for item in obj))
    if isinstance(obj, dict):
        entries: dict[bytes, Value] = {}
        for key, item in obj.items():
            if isinstance(key, str):
                key_bytes = key.encode("utf-8")
            elif isinstance(key, (bytes, bytearray)):
                key_bytes = bytes(key)
            else:
                msg = f"Dictionary keys must be bytes or str, got {type(key).__name__}"
                raise BencodeEncodeError(msg)
            if key_bytes in entries:
                msg = f"Duplicate dictionary key {key_bytes!r}"
                raise BencodeEncodeError(msg)
            entries[key_bytes] = from_native(item)
        return Dictionary(entries)

    msg = f"Cannot bencode object of type {type(obj).__name__}"
    raise BencodeEncodeError(msg)


def to_native(value: Value) -> Any:
    """Convert a value tree to ints, bytes, lists and dicts."""
    if isinstance(value, Integer):
        return value.value
    if isinstance(value, ByteString):
        return value.value
    if isinstance(value, List):
        return [to_native(item) for item in value.items]
    if isinstance(value, Dictionary):
        return {key: to_native(item) for key, item in value.entries.items()}

    msg = f"Not a bencode value: {type(value).__name__}"
    raise InvariantViolationError(msg)
