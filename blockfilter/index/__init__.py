"""
Block Filter Index Engine

Per-variant filter stores, lookups and the index registry.
"""

from blockfilter.index.result import (
    LookupResult,
)
from blockfilter.index.store import (
    FilterStore,
    get_storage_info,
)
from blockfilter.index.filter_index import (
    BlockFilterIndex,
    filter_db_path,
    get_index_info,
)
from blockfilter.index.registry import (
    FilterIndexRegistry,
)
from blockfilter.index.worker import (
    AsyncFilterIndex,
)

__all__ = [
    # Results
    "LookupResult",
    # Storage
    "FilterStore",
    "get_storage_info",
    # Index
    "BlockFilterIndex",
    "filter_db_path",
    "get_index_info",
    # Registry
    "FilterIndexRegistry",
    # Async
    "AsyncFilterIndex",
]
