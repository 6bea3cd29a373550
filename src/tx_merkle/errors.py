"""
Error Taxonomy

Core Merkle operations are total: they never raise for the conditions
listed in MerkleError. They return a sentinel (empty proof, False, empty
digest) and expose the reason as a MerkleError value through
ProofOutcome / VerificationOutcome or MerkleTree.build_error.

MerkleTreeError is only raised by the outer service and CLI layers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class MerkleError(Enum):
    """Reasons a Merkle operation returned its sentinel value."""

    NON_POWER_OF_TWO_LEAF_COUNT = (
        "NON_POWER_OF_TWO_LEAF_COUNT",
        "the number of transactions has to be a power of 2",
    )
    TRANSACTION_NOT_FOUND = (
        "TRANSACTION_NOT_FOUND",
        "the transaction is not part of this merkle tree",
    )
    EMPTY_ROOT = (
        "EMPTY_ROOT",
        "the merkle tree has no root",
    )
    EMPTY_PROOF = (
        "EMPTY_PROOF",
        "the proof contains no sibling digests",
    )
    INDEX_OUT_OF_RANGE = (
        "INDEX_OUT_OF_RANGE",
        "the leaf index is outside the transaction list",
    )

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


@dataclass(frozen=True)
class ProofOutcome:
    """
    Result of proof generation.

    Attributes:
        proof: Sibling digests in leaf-to-root order (empty on failure)
        error: Why generation failed, None on success
        index: Leaf position the proof was generated for, when known
    """
    proof: List[str] = field(default_factory=list)
    error: Optional[MerkleError] = None
    index: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class VerificationOutcome:
    """
    Result of proof verification.

    Attributes:
        valid: True if the recomputed root matches the tree root
        error: Set when verification was refused before hashing
            (e.g. unknown transaction, empty proof). A proof that was
            fully evaluated but did not match has valid=False and error=None.
    """
    valid: bool
    error: Optional[MerkleError] = None

    def __bool__(self) -> bool:
        return self.valid


class MerkleTreeError(Exception):
    """Exception carrying a MerkleError, raised by the layers above the core."""

    def __init__(self, error: MerkleError, detail: Optional[str] = None):
        self.error = error
        self.detail = detail
        message = error.message if detail is None else f"{error.message} ({detail})"
        super().__init__(message)

    @property
    def code(self) -> str:
        return self.error.code
