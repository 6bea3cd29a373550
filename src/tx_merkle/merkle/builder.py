"""
Merkle Tree Builder

This module builds the complete binary Merkle tree for an ordered list of
transactions. Construction is bottom-up and layer by layer: the leaves are
created first, then nodes 2i and 2i+1 of each layer are joined into node i
of the layer above until a single root remains.

The layers are kept as an index-addressed arena (layers[0] are the leaves,
layers[-1] holds the root) so positional lookups never need to walk the
linked node structure.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..errors import MerkleError
from .digest import Hasher, DEFAULT_HASHER
from .node import Node

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildResult:
    """
    Container for tree construction results.

    Attributes:
        root: Root node, None for an empty or rejected input
        layers: Node layers from leaves (index 0) up to the root
        error: Why no root was produced, None on success
    """
    root: Optional[Node]
    layers: List[List[Node]] = field(default_factory=list)
    error: Optional[MerkleError] = None


def is_power_of_two(n: int) -> bool:
    """
    Check whether n is a (positive) power of two.

    Examples:
        >>> is_power_of_two(8)
        True
        >>> is_power_of_two(0)
        False
    """
    return n > 0 and (n & (n - 1)) == 0


def tree_height(n_leaves: int) -> int:
    """
    Number of layers of a complete tree over n_leaves leaves.

    Args:
        n_leaves: Number of leaves

    Returns:
        floor(log2(n_leaves)) + 1, or 0 for an empty tree

    Examples:
        >>> tree_height(8)  # Returns 4
        >>> tree_height(1)  # Returns 1
    """
    if n_leaves <= 0:
        return 0
    return n_leaves.bit_length()


def build_layers(transactions: Sequence[str], hasher: Hasher = DEFAULT_HASHER) -> BuildResult:
    """
    Build every layer of the Merkle tree for the given transactions.

    Args:
        transactions: Ordered, unhashed transaction strings
        hasher: Digest primitive used for leaves and parents

    Returns:
        BuildResult with the root and all layers. When the transaction
        count is zero, or not a power of two, the result has no root and
        carries the matching MerkleError; no padding or truncation is done.
    """
    n_leaves = len(transactions)

    if n_leaves == 0:
        logger.debug("No transactions given, tree is empty")
        return BuildResult(root=None, error=MerkleError.EMPTY_ROOT)

    if not is_power_of_two(n_leaves):
        logger.warning(
            f"The number of transactions ({n_leaves}) has to be a power of 2, "
            f"refusing to build the tree"
        )
        return BuildResult(root=None, error=MerkleError.NON_POWER_OF_TWO_LEAF_COUNT)

    height = tree_height(n_leaves)

    # Bottom layer: one leaf per transaction, in input order
    layer = [Node.leaf(tx, hasher) for tx in transactions]
    layers = [layer]

    # Every layer above has half as many nodes as the one below
    while len(layer) > 1:
        layer = [
            Node.join(layer[i], layer[i + 1], hasher)
            for i in range(0, len(layer), 2)
        ]
        layers.append(layer)

    logger.debug(
        f"Built merkle tree: {n_leaves} leaves, height {height}, "
        f"{2 * n_leaves - 1} nodes, algorithm {hasher.algorithm}"
    )
    return BuildResult(root=layers[-1][0], layers=layers)


def build(transactions: Sequence[str], hasher: Hasher = DEFAULT_HASHER) -> Optional[Node]:
    """
    Build the Merkle tree and return its root.

    Args:
        transactions: Ordered, unhashed transaction strings
        hasher: Digest primitive

    Returns:
        Root node, or None for an empty list or a non power-of-two count
    """
    return build_layers(transactions, hasher).root
