"""
Merkle Tree Node

A node is either a leaf (digest of one transaction, no children) or an
internal node (digest of its children's concatenated digests). Nodes are
immutable: the only way to obtain one is through Node.leaf or Node.join,
so a node's value is always derived from its source item or its children.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

from .digest import Digest, Hasher, DEFAULT_HASHER


@dataclass(frozen=True)
class Node:
    """
    Immutable binary Merkle tree node.

    Attributes:
        value: Hex digest held by this node
        left: Left child (None for leaves)
        right: Right child (None for leaves)
    """
    value: Digest
    left: Optional["Node"] = None
    right: Optional["Node"] = None

    @classmethod
    def leaf(cls, transaction: str, hasher: Hasher = DEFAULT_HASHER) -> "Node":
        """Create a leaf node holding hash_leaf(transaction)."""
        return cls(value=hasher.hash_leaf(transaction))

    @classmethod
    def join(cls, left: "Node", right: "Node", hasher: Hasher = DEFAULT_HASHER) -> "Node":
        """Create the parent of two nodes; left is always the first operand."""
        return cls(
            value=hasher.concat_and_hash(left.value, right.value),
            left=left,
            right=right,
        )

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def iter_postorder(self) -> Iterator["Node"]:
        """Yield every node of the subtree, children before parent, left before right."""
        if self.left is not None:
            yield from self.left.iter_postorder()
        if self.right is not None:
            yield from self.right.iter_postorder()
        yield self

    def iter_leaves(self) -> Iterator["Node"]:
        """Yield the leaves of the subtree from left to right."""
        for node in self.iter_postorder():
            if node.is_leaf:
                yield node

    def count(self) -> int:
        """Number of nodes in the subtree rooted here."""
        return sum(1 for _ in self.iter_postorder())

    def height(self) -> int:
        """Number of layers from this node down to its leaves (a leaf has height 1)."""
        # Complete tree: every path has the same length
        height = 1
        node = self
        while node.left is not None:
            node = node.left
            height += 1
        return height
