"""
tx-merkle

Fixed binary Merkle trees over ordered transaction lists: a compact root
digest committing to the whole list, plus inclusion proofs that a single
transaction belongs to it.

Usage:
    from tx_merkle import MerkleTree

    tree = MerkleTree(["p1", "p2", "p3", "p4"])
    proof = tree.generate_proof("p3")
    assert tree.verify_proof("p3", proof)
"""

from .constants import EMPTY_DIGEST, HASH_ALGORITHM_DEFAULT
from .errors import MerkleError, MerkleTreeError, ProofOutcome, VerificationOutcome
from .merkle import (
    Hasher,
    Node,
    build,
    compute_root_from_proof,
    concat_and_hash,
    hash_leaf,
    verify_against_root,
)
from .tree import MerkleTree

__version__ = "0.1.0"

__all__ = [
    'MerkleTree',
    'Node',
    'Hasher',
    'hash_leaf',
    'concat_and_hash',
    'build',
    'compute_root_from_proof',
    'verify_against_root',
    'MerkleError',
    'MerkleTreeError',
    'ProofOutcome',
    'VerificationOutcome',
    'EMPTY_DIGEST',
    'HASH_ALGORITHM_DEFAULT',
]
