"""
Block Filter Index Type Tests
"""

import pytest

from blockfilter.core.types import Hash, FilterType, filter_type_name, parse_filter_type
from blockfilter.core.record import FilterRecord
from blockfilter.crypto.hash import (
    double_sha256,
    compute_filter_hash,
    compute_filter_header,
)
from blockfilter.errors import UnknownFilterTypeError, ConfigurationError


class TestHash:
    """Tests for Hash type."""

    def test_hash_creation(self):
        """Test hash creation from bytes."""
        data = bytes(range(32))
        h = Hash(data)
        assert h.data == data
        assert bytes(h) == data

    def test_hash_wrong_size(self):
        """Test hashes must be 32 bytes."""
        with pytest.raises(ValueError):
            Hash(bytes(31))

    def test_hash_rejects_non_bytes(self):
        """Test hash data must be bytes."""
        with pytest.raises(TypeError):
            Hash("ab" * 16)

    def test_hash_from_bytearray(self):
        """Test bytearray input is frozen to bytes."""
        h = Hash(bytearray(32))
        assert isinstance(h.data, bytes)
        assert h == Hash.zero()

    def test_hash_hex_roundtrip(self):
        """Test hex conversion."""
        hex_str = "ab" * 32
        h = Hash.from_hex(hex_str)
        assert h.hex() == hex_str

    def test_hash_equality_with_bytes(self):
        """Test hash compares equal to its raw bytes."""
        data = bytes(range(32))
        assert Hash(data) == data
        assert Hash(data) != Hash.zero()

    def test_hash_usable_as_key(self):
        """Test equal hashes collapse in dicts."""
        data = bytes(range(32))
        assert len({Hash(data): 1, Hash(bytes(data)): 2}) == 1


class TestFilterType:
    """Tests for filter variant resolution."""

    def test_names(self):
        assert filter_type_name(FilterType.BASIC) == "basic"
        assert filter_type_name(FilterType.EXTENDED) == "extended"

    def test_unknown_name_is_empty(self):
        assert filter_type_name(42) == ""
        assert filter_type_name("basic") == ""
        assert filter_type_name(True) == ""

    def test_parse_by_name(self):
        assert parse_filter_type("basic") is FilterType.BASIC
        assert parse_filter_type("extended") is FilterType.EXTENDED

    def test_parse_by_value(self):
        assert parse_filter_type(0) is FilterType.BASIC
        assert parse_filter_type(FilterType.EXTENDED) is FilterType.EXTENDED

    def test_parse_unknown(self):
        with pytest.raises(UnknownFilterTypeError):
            parse_filter_type("basic; DROP TABLE basic")
        with pytest.raises(ConfigurationError):
            parse_filter_type(255)


class TestFilterHashing:
    """Tests for filter hash helpers."""

    def test_double_sha256_known_vector(self):
        """dSHA256 of the empty string."""
        assert double_sha256(b"").hex() == (
            "5df6e0e2761359d30a8275058e299fcc0381534545f55cf43e41983f5d4c9456"
        )

    def test_filter_header_chains_previous(self):
        filter_hash = compute_filter_hash(b"\x00")
        first = compute_filter_header(filter_hash, Hash.zero())
        second = compute_filter_header(filter_hash, first)
        assert first != second
        assert first == double_sha256(filter_hash.data + bytes(32))


class TestFilterRecord:
    """Tests for FilterRecord."""

    def test_active_record(self):
        record = FilterRecord(
            height=7,
            block_identity=Hash(bytes(range(32))),
            filter_header_hash=Hash.zero(),
            filter_bytes=b"\x01\x02",
        )
        assert not record.is_displaced
        assert record.filter_hash == compute_filter_hash(b"\x01\x02")

    def test_displaced_record(self):
        record = FilterRecord(None, Hash.zero(), Hash.zero(), b"")
        assert record.is_displaced

    def test_negative_height_rejected(self):
        with pytest.raises(ValueError):
            FilterRecord(-1, Hash.zero(), Hash.zero(), b"")

    def test_expected_header(self):
        prev = Hash(bytes([7] * 32))
        data = b"filter"
        header = compute_filter_header(compute_filter_hash(data), prev)
        record = FilterRecord(3, Hash.zero(), header, data)
        assert record.expected_header(prev) == record.filter_header_hash

    def test_from_row(self):
        row = {
            "height": None,
            "block_identity": bytes(range(32)),
            "filter_header_hash": bytes(32),
            "filter_bytes": memoryview(b"abc"),
        }
        record = FilterRecord.from_row(row)
        assert record.height is None
        assert record.block_identity == Hash(bytes(range(32)))
        assert record.filter_bytes == b"abc"
