"""
Block Filter Index Chain View Tests
"""

from dataclasses import dataclass
from typing import Optional

import pytest

from blockfilter.core.types import Hash
from blockfilter.core.chain import (
    ChainNode,
    BlockNode,
    build_chain,
    iter_ancestors,
    get_ancestor,
    is_ancestor,
)
from blockfilter.errors import (
    RangeError,
    NegativeStartHeightError,
    StartAboveStopError,
    BrokenAncestryError,
)


@dataclass
class LooseNode:
    """Chain node without BlockNode's parent-height check."""
    height: int
    identity: Hash
    ancestor: Optional["LooseNode"] = None


class TestBlockNode:
    """Tests for BlockNode."""

    def test_satisfies_protocol(self, chain):
        assert isinstance(chain[0], ChainNode)
        assert isinstance(LooseNode(0, Hash.zero()), ChainNode)

    def test_genesis_has_no_ancestor(self, chain):
        assert chain[0].height == 0
        assert chain[0].ancestor is None

    def test_parent_link(self, chain):
        assert chain[10].ancestor is chain[9]

    def test_parent_height_checked(self, chain):
        with pytest.raises(ValueError):
            BlockNode(height=5, identity=Hash.zero(), prev=chain[2])

    def test_equality_by_height_and_identity(self, chain):
        clone = BlockNode(height=3, identity=chain[3].identity)
        assert clone == chain[3]
        assert hash(clone) == hash(chain[3])
        assert clone != chain[4]

    def test_build_chain_extends_parent(self, chain, make_chain):
        fork = make_chain(3, tag="fork", parent=chain[50])
        assert [n.height for n in fork] == [51, 52, 53]
        assert fork[0].ancestor is chain[50]


class TestIterAncestors:
    """Tests for the bounds-checked ancestor walk."""

    def test_walk_descends(self, chain):
        heights = [n.height for n in iter_ancestors(chain[105], 100)]
        assert heights == [105, 104, 103, 102, 101, 100]

    def test_walk_single(self, chain):
        assert list(iter_ancestors(chain[7], 7)) == [chain[7]]

    def test_walk_to_genesis(self, chain):
        nodes = list(iter_ancestors(chain[5], 0))
        assert nodes[-1] is chain[0]

    def test_negative_stop(self, chain):
        with pytest.raises(NegativeStartHeightError):
            list(iter_ancestors(chain[5], -1))

    def test_stop_above_node(self, chain):
        with pytest.raises(StartAboveStopError):
            list(iter_ancestors(chain[5], 6))

    def test_walk_past_root(self):
        orphan = LooseNode(3, Hash.zero())
        with pytest.raises(BrokenAncestryError):
            list(iter_ancestors(orphan, 1))

    def test_walk_skipping_height(self):
        root = LooseNode(0, Hash.zero())
        broken = LooseNode(2, Hash(bytes([1] * 32)), ancestor=root)
        with pytest.raises(RangeError):
            list(iter_ancestors(broken, 0))


class TestAncestry:
    """Tests for get_ancestor / is_ancestor."""

    def test_get_ancestor(self, chain):
        assert get_ancestor(chain[105], 42) is chain[42]
        assert get_ancestor(chain[42], 42) is chain[42]

    def test_is_ancestor(self, chain, make_chain):
        fork = make_chain(5, tag="fork", parent=chain[100])
        assert is_ancestor(chain[100], fork[-1])
        assert is_ancestor(chain[0], chain[105])
        assert not is_ancestor(chain[101], fork[-1])
        assert not is_ancestor(chain[105], chain[100])
