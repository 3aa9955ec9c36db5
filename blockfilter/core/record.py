"""
Block Filter Index Records

One stored row of a filter table, decoded by column name.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Mapping, Any

from blockfilter.core.types import Hash
from blockfilter.crypto.hash import compute_filter_hash, compute_filter_header


@dataclass(frozen=True, slots=True)
class FilterRecord:
    """
    Filter data for one block.

    height is None for blocks displaced from the active chain; those
    records are found by block_identity alone.
    """
    height: Optional[int]
    block_identity: Hash
    filter_header_hash: Hash
    filter_bytes: bytes

    def __post_init__(self):
        if self.height is not None and self.height < 0:
            raise ValueError(f"height must be non-negative, got {self.height}")

    def __repr__(self) -> str:
        return (
            f"FilterRecord(height={self.height}, block={self.block_identity.hex()[:16]}..., "
            f"filter={len(self.filter_bytes)} bytes)"
        )

    @property
    def is_displaced(self) -> bool:
        return self.height is None

    @property
    def filter_hash(self) -> Hash:
        return compute_filter_hash(self.filter_bytes)

    def expected_header(self, prev_header: Hash) -> Hash:
        """Header this record should carry given its parent's header."""
        return compute_filter_header(self.filter_hash, prev_header)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> FilterRecord:
        """Decode a sqlite3.Row (or any mapping) with the filter table columns."""
        return cls(
            height=row["height"],
            block_identity=Hash(bytes(row["block_identity"])),
            filter_header_hash=Hash(bytes(row["filter_header_hash"])),
            filter_bytes=bytes(row["filter_bytes"]),
        )
