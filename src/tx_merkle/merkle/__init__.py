"""
Merkle Tree Operations

This package provides the building blocks of the transaction Merkle tree:
- digest: the pluggable digest primitive (hash_leaf / concat_and_hash)
- node: immutable leaf and internal nodes
- builder: bottom-up tree construction with the power-of-two gate
- proof: inclusion proof generation and verification
"""

from .digest import (
    Digest,
    Hasher,
    DEFAULT_HASHER,
    hash_leaf,
    concat_and_hash,
)

from .node import Node

from .builder import (
    BuildResult,
    build,
    build_layers,
    is_power_of_two,
    tree_height,
)

from .proof import (
    collect_proof,
    proof_from_layers,
    compute_root_from_proof,
    verify_against_root,
    expected_proof_length,
    proof_path_indices,
)

__all__ = [
    # Digest primitive
    "Digest",
    "Hasher",
    "DEFAULT_HASHER",
    "hash_leaf",
    "concat_and_hash",
    # Nodes
    "Node",
    # Builder
    "BuildResult",
    "build",
    "build_layers",
    "is_power_of_two",
    "tree_height",
    # Proofs
    "collect_proof",
    "proof_from_layers",
    "compute_root_from_proof",
    "verify_against_root",
    "expected_proof_length",
    "proof_path_indices",
]
