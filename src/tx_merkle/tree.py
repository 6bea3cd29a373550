"""
Transaction Merkle Tree

This module contains MerkleTree, the aggregate that commits to an ordered
list of transactions. It is built once from a finished list and never
changes afterwards, so it can be shared between threads without locking.

All operations are total: failures are reported through sentinel values
(empty proof, False, empty root digest) and, for callers that want the
reason, through ProofOutcome / VerificationOutcome carrying a MerkleError.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from .constants import EMPTY_DIGEST
from .errors import MerkleError, ProofOutcome, VerificationOutcome
from .merkle import (
    DEFAULT_HASHER,
    Digest,
    Hasher,
    Node,
    build_layers,
    collect_proof,
    compute_root_from_proof,
    proof_from_layers,
    tree_height,
)

logger = logging.getLogger(__name__)


class MerkleTree:
    """
    Fixed binary Merkle tree over an ordered list of transactions.

    The transaction count must be zero or a power of two. Any other count
    yields a tree without a root (build_error is set) while keeping the
    original transaction list attached.

    Example:
        >>> tree = MerkleTree(["p1", "p2", "p3", "p4"])
        >>> proof = tree.generate_proof("p3")
        >>> tree.verify_proof("p3", proof)
        True
    """

    def __init__(
        self,
        transactions: Iterable[str],
        hasher: Optional[Hasher] = None,
        accept_empty_proof: bool = False,
    ):
        """
        Build the tree.

        Args:
            transactions: Ordered, unhashed transaction strings
            hasher: Digest primitive, SHA-256 when None
            accept_empty_proof: Accept an empty proof for a single-leaf
                tree. Off by default: an empty proof is always rejected.
        """
        self._transactions: Tuple[str, ...] = tuple(transactions)
        self._hasher = hasher or DEFAULT_HASHER
        self._accept_empty_proof = accept_empty_proof

        result = build_layers(self._transactions, self._hasher)
        self._root: Optional[Node] = result.root
        self._layers = result.layers
        self._build_error = result.error

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def transactions(self) -> Tuple[str, ...]:
        return self._transactions

    @property
    def root(self) -> Optional[Node]:
        return self._root

    @property
    def hasher(self) -> Hasher:
        return self._hasher

    @property
    def algorithm(self) -> str:
        return self._hasher.algorithm

    @property
    def accept_empty_proof(self) -> bool:
        return self._accept_empty_proof

    @property
    def build_error(self) -> Optional[MerkleError]:
        """Why the tree has no root, None when the build succeeded."""
        return self._build_error

    @property
    def is_empty(self) -> bool:
        return self._root is None

    @property
    def leaf_count(self) -> int:
        """Number of leaves in the built tree (0 when there is no root)."""
        return len(self._layers[0]) if self._layers else 0

    @property
    def height(self) -> int:
        """Number of layers including leaves and root (0 when there is no root)."""
        return tree_height(self.leaf_count)

    @property
    def node_count(self) -> int:
        return sum(len(layer) for layer in self._layers)

    def root_digest(self) -> Digest:
        """Root digest, or EMPTY_DIGEST when the tree has no root."""
        if self._root is None:
            return EMPTY_DIGEST
        return self._root.value

    def levels(self) -> List[List[Digest]]:
        """Digests of every layer, from the leaves up to the root."""
        return [[node.value for node in layer] for layer in self._layers]

    def index_of(self, query: str) -> Optional[int]:
        """Position of the first occurrence of query, None if absent."""
        try:
            return self._transactions.index(query)
        except ValueError:
            return None

    # ------------------------------------------------------------------
    # Proof generation
    # ------------------------------------------------------------------

    def prove(self, query: str) -> ProofOutcome:
        """
        Generate the inclusion proof for a transaction, with the failure reason.

        Args:
            query: The unhashed transaction

        Returns:
            ProofOutcome with the sibling digests in leaf-to-root order,
            or an empty proof and the MerkleError explaining why
        """
        index = self.index_of(query)
        if index is None:
            logger.debug(f"Transaction {query!r} is not part of this merkle tree")
            return ProofOutcome(error=MerkleError.TRANSACTION_NOT_FOUND)

        if self._root is None:
            logger.debug("Cannot generate a proof: the tree root is empty")
            return ProofOutcome(error=MerkleError.EMPTY_ROOT, index=index)

        proof = collect_proof(self._root, self._hasher.hash_leaf(query))
        if proof is None:
            # Unreachable for a correctly built tree: query is one of its leaves
            return ProofOutcome(error=MerkleError.TRANSACTION_NOT_FOUND, index=index)

        return ProofOutcome(proof=proof, index=index)

    def generate_proof(self, query: str) -> List[Digest]:
        """Sibling digests proving query is in the tree; empty list on failure."""
        return self.prove(query).proof

    def prove_at(self, index: int) -> ProofOutcome:
        """
        Generate the inclusion proof for the leaf at a list position.

        Use this instead of prove() when the same transaction string
        occurs more than once and a specific occurrence is meant.
        """
        if not 0 <= index < len(self._transactions):
            return ProofOutcome(error=MerkleError.INDEX_OUT_OF_RANGE)

        if self._root is None:
            return ProofOutcome(error=MerkleError.EMPTY_ROOT, index=index)

        return ProofOutcome(proof=proof_from_layers(self._layers, index), index=index)

    def generate_proof_at(self, index: int) -> List[Digest]:
        """Proof for the leaf at a list position; empty list on failure."""
        return self.prove_at(index).proof

    # ------------------------------------------------------------------
    # Proof verification
    # ------------------------------------------------------------------

    def _verify(self, transaction: str, index: int, proof: Sequence[Digest]) -> VerificationOutcome:
        if self._root is None:
            logger.debug("Cannot verify a proof: the tree root is empty")
            return VerificationOutcome(False, MerkleError.EMPTY_ROOT)

        if len(proof) == 0:
            if self._accept_empty_proof and self.leaf_count == 1:
                valid = self._hasher.hash_leaf(transaction) == self.root_digest()
                return VerificationOutcome(valid)
            logger.debug("Cannot verify a proof: the proof array is empty")
            return VerificationOutcome(False, MerkleError.EMPTY_PROOF)

        computed = compute_root_from_proof(
            self._hasher.hash_leaf(transaction), index, proof, self._hasher
        )
        # If the final computed hash equals this tree's root, the proof is valid
        return VerificationOutcome(computed == self.root_digest())

    def check(self, query: str, proof: Sequence[Digest]) -> VerificationOutcome:
        """
        Verify a proof for a transaction, with the failure reason.

        The leaf position is the first occurrence of query in the
        transaction list.

        Args:
            query: The unhashed transaction
            proof: Sibling digests in leaf-to-root order

        Returns:
            VerificationOutcome; valid is True only if the recomputed
            root equals this tree's root digest
        """
        index = self.index_of(query)
        if index is None:
            logger.debug(f"Transaction {query!r} is not part of this merkle tree")
            return VerificationOutcome(False, MerkleError.TRANSACTION_NOT_FOUND)
        return self._verify(query, index, proof)

    def verify_proof(self, query: str, proof: Sequence[Digest]) -> bool:
        """True if proof shows that query is part of this tree."""
        return self.check(query, proof).valid

    def check_at(self, index: int, proof: Sequence[Digest]) -> VerificationOutcome:
        """Verify a proof for the leaf at a list position, with the failure reason."""
        if not 0 <= index < len(self._transactions):
            return VerificationOutcome(False, MerkleError.INDEX_OUT_OF_RANGE)
        return self._verify(self._transactions[index], index, proof)

    def verify_proof_at(self, index: int, proof: Sequence[Digest]) -> bool:
        """True if proof is valid for the leaf at a list position."""
        return self.check_at(index, proof).valid

    # ------------------------------------------------------------------
    # Dunder methods
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._transactions)

    def __contains__(self, query: object) -> bool:
        return query in self._transactions

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MerkleTree):
            return NotImplemented
        return (
            self._transactions == other._transactions
            and self.algorithm == other.algorithm
        )

    def __hash__(self) -> int:
        return hash((self._transactions, self.algorithm))

    def __repr__(self) -> str:
        return (
            f"MerkleTree(transactions={len(self._transactions)}, "
            f"algorithm={self.algorithm!r}, root={self.root_digest()!r})"
        )

    def __str__(self) -> str:
        # Children before parents, one digest per line
        if self._root is None:
            return ""
        return "\n".join(node.value for node in self._root.iter_postorder())
