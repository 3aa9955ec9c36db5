"""
Block Filter Index Chain View

Read-only view of the block chain. The chain itself belongs to the
caller; the index only reads heights and identities and walks ancestors.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Protocol, runtime_checkable

from blockfilter.core.types import Hash
from blockfilter.errors import (
    NegativeStartHeightError,
    StartAboveStopError,
    BrokenAncestryError,
)


@runtime_checkable
class ChainNode(Protocol):
    """Anything with a height, an identity hash and a link to its parent."""

    @property
    def height(self) -> int: ...

    @property
    def identity(self) -> Hash: ...

    @property
    def ancestor(self) -> Optional["ChainNode"]: ...


@dataclass(frozen=True, eq=False)
class BlockNode:
    """
    Minimal immutable ChainNode.

    Equality is by (height, identity) so comparing long chains never
    recurses through their parents.
    """
    height: int
    identity: Hash
    prev: Optional["BlockNode"] = None

    def __post_init__(self):
        if self.height < 0:
            raise ValueError(f"height must be non-negative, got {self.height}")
        if self.prev is not None and self.prev.height != self.height - 1:
            raise ValueError(
                f"parent height {self.prev.height} does not precede {self.height}"
            )

    @property
    def ancestor(self) -> Optional["BlockNode"]:
        return self.prev

    def __eq__(self, other: object) -> bool:
        if isinstance(other, BlockNode):
            return self.height == other.height and self.identity == other.identity
        return False

    def __hash__(self) -> int:
        return hash((self.height, self.identity))

    def __repr__(self) -> str:
        return f"BlockNode(height={self.height}, identity={self.identity.hex()[:16]}...)"


def build_chain(
    identities: Iterable[Hash],
    parent: Optional[BlockNode] = None,
    start_height: int = 0,
) -> List[BlockNode]:
    """
    Link identities into consecutive BlockNodes.

    When parent is given the chain extends it and start_height is ignored.
    """
    nodes: List[BlockNode] = []
    prev = parent
    height = parent.height + 1 if parent is not None else start_height
    for identity in identities:
        node = BlockNode(height=height, identity=identity, prev=prev)
        nodes.append(node)
        prev = node
        height += 1
    return nodes


def iter_ancestors(node: ChainNode, stop_height: int) -> Iterator[ChainNode]:
    """
    Yield node, its parent, and so on down to stop_height inclusive.

    Each step is checked: the walk must not run past the root and every
    parent must sit exactly one height below its child.

    Raises:
        NegativeStartHeightError: stop_height < 0
        StartAboveStopError: stop_height > node.height
        BrokenAncestryError: the chain ends or skips a height early
    """
    if stop_height < 0:
        raise NegativeStartHeightError(stop_height)
    if stop_height > node.height:
        raise StartAboveStopError(stop_height, node.height)

    current = node
    while True:
        yield current
        if current.height == stop_height:
            return

        parent = current.ancestor
        if parent is None:
            raise BrokenAncestryError(
                current.height, "reached the root before the requested height"
            )
        if parent.height != current.height - 1:
            raise BrokenAncestryError(
                current.height,
                f"ancestor height {parent.height} is not {current.height - 1}",
            )
        current = parent


def get_ancestor(node: ChainNode, height: int) -> ChainNode:
    """Ancestor of node at the given height (node itself at its own height)."""
    result = node
    for result in iter_ancestors(node, height):
        pass
    return result


def is_ancestor(candidate: ChainNode, tip: ChainNode) -> bool:
    """True if candidate lies on tip's chain (a node is its own ancestor)."""
    if candidate.height > tip.height or candidate.height < 0:
        return False
    return get_ancestor(tip, candidate.height).identity == candidate.identity
