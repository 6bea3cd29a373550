"""
Merkle Proof Generation and Verification

An inclusion proof is the list of sibling digests on the path from a leaf
up to (but not including) the root, in leaf-to-root order. Recomputing the
root only needs the leaf's position: at each layer an even running index
means the current digest is the left operand, an odd one means it is the
right operand, and the index is halved when moving up.
"""

from typing import List, Optional, Sequence

from .builder import tree_height
from .digest import Digest, Hasher, DEFAULT_HASHER
from .node import Node


def _descend(node: Optional[Node], hashed_query: Digest, proof: List[Digest]) -> bool:
    """
    Search the subtree for a leaf holding hashed_query, appending sibling
    digests to proof while the recursion unwinds.

    The left subtree is searched first and the right one only if the left
    search failed, so the first leaf in left-to-right order wins.
    """
    if node is None:
        return False

    if node.is_leaf:
        return node.value == hashed_query

    if _descend(node.left, hashed_query, proof):
        proof.append(node.right.value)
        return True

    if _descend(node.right, hashed_query, proof):
        proof.append(node.left.value)
        return True

    return False


def collect_proof(root: Optional[Node], hashed_query: Digest) -> Optional[List[Digest]]:
    """
    Collect the sibling digests on the path from a leaf to the root.

    Args:
        root: Root of the tree to search
        hashed_query: Leaf digest of the target transaction

    Returns:
        Sibling digests in leaf-to-root order, or None if no leaf matches

    Example:
        >>> root = build(["p1", "p2", "p3", "p4"])
        >>> proof = collect_proof(root, hash_leaf("p3"))
        >>> # proof == [hash_leaf("p4"), concat_and_hash(hash_leaf("p1"), hash_leaf("p2"))]
    """
    proof: List[Digest] = []
    if _descend(root, hashed_query, proof):
        return proof
    return None


def proof_from_layers(layers: Sequence[Sequence[Node]], index: int) -> List[Digest]:
    """
    Read the proof for the leaf at a given position from the layer arena.

    Args:
        layers: Node layers from leaves (index 0) to root
        index: 0-based leaf position

    Returns:
        Sibling digests in leaf-to-root order

    Raises:
        IndexError: If index is outside the leaf layer
    """
    if not layers or not 0 <= index < len(layers[0]):
        raise IndexError(f"Leaf index {index} out of range")

    proof = []
    current_index = index
    for layer in layers[:-1]:
        proof.append(layer[current_index ^ 1].value)
        current_index //= 2
    return proof


def compute_root_from_proof(
    leaf_digest: Digest,
    index: int,
    proof: Sequence[Digest],
    hasher: Hasher = DEFAULT_HASHER,
) -> Digest:
    """
    Rebuild the root digest from a leaf digest and its proof.

    Args:
        leaf_digest: hash_leaf of the target transaction
        index: 0-based position of the leaf in the transaction list
        proof: Sibling digests in leaf-to-root order
        hasher: Digest primitive the tree was built with

    Returns:
        The reconstructed root digest

    Examples:
        >>> root = compute_root_from_proof(hash_leaf("p3"), 2, proof)
    """
    current = leaf_digest
    for sibling in proof:
        if index % 2 == 0:
            current = hasher.concat_and_hash(current, sibling)  # current is left
        else:
            current = hasher.concat_and_hash(sibling, current)  # current is right
        index //= 2
    return current


def verify_against_root(
    transaction: str,
    index: int,
    proof: Sequence[Digest],
    root_digest: Digest,
    hasher: Hasher = DEFAULT_HASHER,
) -> bool:
    """
    Verify an inclusion proof against a claimed root without the tree.

    Args:
        transaction: The unhashed transaction
        index: Its claimed position in the committed list
        proof: Sibling digests in leaf-to-root order
        root_digest: The claimed root digest
        hasher: Digest primitive the tree was built with

    Returns:
        True if the recomputed root equals root_digest
    """
    if index < 0 or not root_digest:
        return False
    computed = compute_root_from_proof(hasher.hash_leaf(transaction), index, proof, hasher)
    return computed == root_digest


def expected_proof_length(n_leaves: int) -> int:
    """Proof length for a complete tree of n_leaves leaves (height - 1)."""
    return max(tree_height(n_leaves) - 1, 0)


def proof_path_indices(index: int, length: int) -> List[int]:
    """
    Calculate the sibling position in each layer along a proof path.

    Args:
        index: Position of the target leaf
        length: Number of proof steps

    Returns:
        Sibling index within its layer for every proof step

    Examples:
        >>> proof_path_indices(5, 3)  # Returns [4, 3, 0]
    """
    indices = []
    current_index = index
    for _ in range(length):
        indices.append(current_index ^ 1)
        current_index //= 2
    return indices
