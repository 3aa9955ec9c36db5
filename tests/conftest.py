"""
Block Filter Index Test Fixtures
"""

import hashlib
from typing import Callable, Dict, List, Optional

import pytest

from blockfilter.core.types import Hash, FilterType
from blockfilter.core.chain import BlockNode, build_chain
from blockfilter.crypto.hash import compute_filter_hash, compute_filter_header
from blockfilter.index.filter_index import BlockFilterIndex
from blockfilter.index.registry import FilterIndexRegistry


def block_hash(label: str) -> Hash:
    """Deterministic block identity for a label."""
    return Hash(hashlib.sha256(label.encode()).digest())


def filter_bytes_for(node: BlockNode) -> bytes:
    return b"filter:" + node.identity.data


@pytest.fixture
def make_chain() -> Callable[..., List[BlockNode]]:
    """Build a chain of BlockNodes, optionally forking from a parent."""
    def factory(length: int, tag: str = "main", parent: Optional[BlockNode] = None) -> List[BlockNode]:
        start = parent.height + 1 if parent is not None else 0
        identities = [block_hash(f"{tag}-{start + i}") for i in range(length)]
        return build_chain(identities, parent=parent)
    return factory


@pytest.fixture
def chain(make_chain) -> List[BlockNode]:
    """Main chain, heights 0-105."""
    return make_chain(106)


@pytest.fixture
def write_chain() -> Callable[..., Dict[Hash, Hash]]:
    """
    Write filters for nodes with chained headers.

    Returns a mapping block identity -> filter header.
    """
    def writer(
        index: BlockFilterIndex,
        nodes: List[BlockNode],
        prev_header: Optional[Hash] = None,
    ) -> Dict[Hash, Hash]:
        headers = {}
        header = prev_header if prev_header is not None else Hash.zero()
        for node in nodes:
            data = filter_bytes_for(node)
            header = compute_filter_header(compute_filter_hash(data), header)
            index.write_filter(node, data, header)
            headers[node.identity] = header
        return headers
    return writer


@pytest.fixture
def memory_index():
    """In-memory basic filter index without automatic commits."""
    index = BlockFilterIndex(FilterType.BASIC, in_memory=True, commit_interval=0)
    yield index
    index.close()


@pytest.fixture
def data_dir(tmp_path):
    """Data directory for file-backed stores."""
    return tmp_path / "data"


@pytest.fixture
def registry(data_dir):
    """Registry writing into a temporary data directory."""
    registry = FilterIndexRegistry(data_dir=data_dir, commit_interval=0)
    yield registry
    registry.destroy_all()
