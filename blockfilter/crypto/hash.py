"""
Block Filter Hash Functions

Double SHA-256 and BIP157 filter header chaining.
"""

from __future__ import annotations
import hashlib
from typing import Union

from blockfilter.core.types import Hash


def double_sha256_raw(data: Union[bytes, bytearray, memoryview]) -> bytes:
    """
    SHA-256(SHA-256(data)) returning raw bytes.

    Args:
        data: Input data to hash

    Returns:
        bytes: 32-byte hash output
    """
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def double_sha256(data: Union[bytes, bytearray, memoryview]) -> Hash:
    """SHA-256(SHA-256(data)) wrapped in Hash type."""
    return Hash(double_sha256_raw(data))


def compute_filter_hash(filter_bytes: bytes) -> Hash:
    """Hash of an encoded filter."""
    return double_sha256(filter_bytes)


def compute_filter_header(filter_hash: Hash, prev_header: Hash) -> Hash:
    """
    Filter header for a block.

    Computes: dSHA256(filter_hash || prev_header)

    The genesis block chains from the zero hash.
    """
    return double_sha256(filter_hash.data + prev_header.data)
