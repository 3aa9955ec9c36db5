"""
Block Filter Index Core Types

Hashes are stored and compared as raw bytes.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Union
import re

from blockfilter.constants import (
    HASH_SIZE,
    FILTER_TYPE_BASIC,
    FILTER_TYPE_EXTENDED,
    FILTER_TYPE_NAMES,
    FILTER_NAME_PATTERN,
)
from blockfilter.errors import UnknownFilterTypeError


@dataclass(frozen=True, slots=True)
class Hash:
    """
    Fixed-size hash (block identity, filter hash, filter header).

    SIZE: 32 bytes
    SERIALIZATION: raw bytes
    """
    data: bytes = field(default_factory=lambda: bytes(HASH_SIZE))

    def __post_init__(self):
        if not isinstance(self.data, (bytes, bytearray)):
            raise TypeError(f"Hash data must be bytes, got {type(self.data).__name__}")
        if len(self.data) != HASH_SIZE:
            raise ValueError(f"Hash must be {HASH_SIZE} bytes, got {len(self.data)}")
        if isinstance(self.data, bytearray):
            object.__setattr__(self, "data", bytes(self.data))

    def __bytes__(self) -> bytes:
        return self.data

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Hash):
            return self.data == other.data
        if isinstance(other, bytes):
            return self.data == other
        return False

    def __hash__(self) -> int:
        return hash(self.data)

    def __repr__(self) -> str:
        return f"Hash({self.data.hex()[:16]}...)"

    def hex(self) -> str:
        return self.data.hex()

    @classmethod
    def from_hex(cls, hex_string: str) -> Hash:
        return cls(bytes.fromhex(hex_string))

    @classmethod
    def zero(cls) -> Hash:
        return cls(bytes(HASH_SIZE))


class FilterType(IntEnum):
    """Known filter variants."""
    BASIC = FILTER_TYPE_BASIC
    EXTENDED = FILTER_TYPE_EXTENDED


_NAME_RE = re.compile(FILTER_NAME_PATTERN)

# Checked once at import; a bad entry here is a programming error.
for _value, _name in FILTER_TYPE_NAMES.items():
    if not _NAME_RE.match(_name):
        raise ValueError(f"Invalid filter type name in allow-list: {_name!r}")
    FilterType(_value)


def filter_type_name(filter_type: Union[FilterType, int]) -> str:
    """Name of a filter variant, or "" if the variant is unknown."""
    if isinstance(filter_type, bool) or not isinstance(filter_type, int):
        return ""
    return FILTER_TYPE_NAMES.get(int(filter_type), "")


def parse_filter_type(value: Union[FilterType, int, str]) -> FilterType:
    """
    Resolve a name, enum member or integer to a FilterType.

    Raises:
        UnknownFilterTypeError: value does not name a known variant
    """
    if isinstance(value, str):
        for code, name in FILTER_TYPE_NAMES.items():
            if name == value:
                return FilterType(code)
        raise UnknownFilterTypeError(value)

    if filter_type_name(value):
        return FilterType(int(value))
    raise UnknownFilterTypeError(value)
