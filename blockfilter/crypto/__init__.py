"""
Block Filter Hashing
"""

from blockfilter.crypto.hash import (
    double_sha256,
    double_sha256_raw,
    compute_filter_hash,
    compute_filter_header,
)

__all__ = [
    "double_sha256",
    "double_sha256_raw",
    "compute_filter_hash",
    "compute_filter_header",
]
