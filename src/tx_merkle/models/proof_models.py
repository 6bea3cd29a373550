"""
Proof Models

This module defines Pydantic models for proofs, tree snapshots and
verification reports exchanged with the outside world (files, CLI output).
Digests are carried as lowercase hex strings.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..errors import ProofOutcome
from ..tree import MerkleTree
from ..utils import normalize_digest


class ErrorResponse(BaseModel):
    """
    Model for reported errors.

    Attributes:
        error: Error message
        code: Error code (MerkleError code or other string identifier)
        details: Additional error details
    """
    error: str = Field(..., description="Error message")
    code: str = Field(..., description="Error code")
    details: Optional[dict] = Field(default=None, description="Additional error details")


class ProofDocument(BaseModel):
    """
    A self-contained inclusion proof for one transaction.

    Attributes:
        transaction: The unhashed transaction being proven
        index: Position of the transaction in the committed list
        proof: Sibling digests in leaf-to-root order
        root: Root digest the proof is against
        algorithm: Hash algorithm of the digest primitive
        leaf_count: Number of transactions in the committed list
    """
    transaction: str = Field(..., description="Unhashed transaction")
    index: int = Field(..., ge=0, description="Leaf position in the transaction list")
    proof: List[str] = Field(default_factory=list, description="Sibling digests, leaf to root")
    root: str = Field(..., description="Root digest as hex string")
    algorithm: str = Field(default="sha256", description="Digest algorithm")
    leaf_count: int = Field(..., ge=1, description="Number of committed transactions")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "transaction": "p3",
                "index": 2,
                "proof": [
                    "4fa5c1b4...",
                    "b4ac4b5c...",
                    "f8e7d6c5...",
                ],
                "root": "1c8d4b5a...",
                "algorithm": "sha256",
                "leaf_count": 8,
            }
        }
    )

    @field_validator("proof")
    @classmethod
    def validate_proof_format(cls, v):
        """Validate proof steps are hex digests."""
        return [normalize_digest(step) for step in v]

    @field_validator("root")
    @classmethod
    def validate_root_format(cls, v):
        """Validate the root is a hex digest."""
        return normalize_digest(v)


class TreeSnapshot(BaseModel):
    """
    Read-only snapshot of a built tree.

    Attributes:
        transactions: The committed transactions in order
        root: Root digest ("" when the tree has no root)
        algorithm: Hash algorithm of the digest primitive
        height: Number of layers including leaves and root
        leaf_count: Number of leaves
        levels: Digests of each layer from leaves to root
        build_error: MerkleError code when the tree has no root
    """
    transactions: List[str] = Field(default_factory=list)
    root: str = Field(default="")
    algorithm: str = Field(default="sha256")
    height: int = Field(default=0, ge=0)
    leaf_count: int = Field(default=0, ge=0)
    levels: List[List[str]] = Field(default_factory=list)
    build_error: Optional[str] = Field(default=None)


class VerificationReport(BaseModel):
    """
    Outcome of verifying a ProofDocument.

    Attributes:
        transaction: Transaction that was checked
        index: Leaf position used for verification, if known
        valid: Whether the proof recomputes the tree root
        error: MerkleError code (or other code) when verification was refused
        root: Root digest of the tree the proof was checked against
    """
    transaction: str
    index: Optional[int] = None
    valid: bool
    error: Optional[str] = None
    root: str = ""


def snapshot_from_tree(tree: MerkleTree) -> TreeSnapshot:
    """Build a TreeSnapshot from a MerkleTree."""
    return TreeSnapshot(
        transactions=list(tree.transactions),
        root=tree.root_digest(),
        algorithm=tree.algorithm,
        height=tree.height,
        leaf_count=tree.leaf_count,
        levels=tree.levels(),
        build_error=tree.build_error.code if tree.build_error else None,
    )


def document_from_outcome(tree: MerkleTree, transaction: str, outcome: ProofOutcome) -> ProofDocument:
    """
    Wrap a successful ProofOutcome into a ProofDocument.

    Raises:
        ValueError: If the outcome carries an error
    """
    if not outcome.ok or outcome.index is None:
        raise ValueError(f"Cannot build a proof document from a failed outcome: {outcome.error}")
    return ProofDocument(
        transaction=transaction,
        index=outcome.index,
        proof=outcome.proof,
        root=tree.root_digest(),
        algorithm=tree.algorithm,
        leaf_count=tree.leaf_count,
    )
