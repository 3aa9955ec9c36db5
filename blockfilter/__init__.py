"""
Block Filter Index

Persistent per-block filter storage that survives chain reorganizations.
Filters of blocks on the active chain are found by height, filters of
displaced blocks by block identity.
"""

__version__ = "0.3.0"
__author__ = "Block Filter Index"

from blockfilter.core.types import Hash, FilterType
from blockfilter.core.record import FilterRecord
from blockfilter.core.chain import BlockNode, ChainNode
from blockfilter.index.filter_index import BlockFilterIndex
from blockfilter.index.registry import FilterIndexRegistry
from blockfilter.index.result import LookupResult

__all__ = [
    "Hash",
    "FilterType",
    "FilterRecord",
    "BlockNode",
    "ChainNode",
    "BlockFilterIndex",
    "FilterIndexRegistry",
    "LookupResult",
    "__version__",
]
