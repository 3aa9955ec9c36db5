"""
Block Filter Index Core Types
"""

from blockfilter.core.types import (
    Hash,
    FilterType,
    filter_type_name,
    parse_filter_type,
)
from blockfilter.core.record import (
    FilterRecord,
)
from blockfilter.core.chain import (
    ChainNode,
    BlockNode,
    build_chain,
    iter_ancestors,
    get_ancestor,
    is_ancestor,
)

__all__ = [
    # Types
    "Hash",
    "FilterType",
    "filter_type_name",
    "parse_filter_type",
    # Records
    "FilterRecord",
    # Chain
    "ChainNode",
    "BlockNode",
    "build_chain",
    "iter_ancestors",
    "get_ancestor",
    "is_ancestor",
]
