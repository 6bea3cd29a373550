"""
Models Package

Pydantic models for serializing proofs, tree snapshots and verification
results:

- ProofDocument: a self-contained inclusion proof
- TreeSnapshot: digests of every layer of a built tree
- VerificationReport / ErrorResponse: verification and error reporting

Usage:
    from tx_merkle.models import ProofDocument

    document = ProofDocument.model_validate_json(raw)
"""

from .proof_models import (
    ErrorResponse,
    ProofDocument,
    TreeSnapshot,
    VerificationReport,
    document_from_outcome,
    snapshot_from_tree,
)

__all__ = [
    'ErrorResponse',
    'ProofDocument',
    'TreeSnapshot',
    'VerificationReport',
    'document_from_outcome',
    'snapshot_from_tree',
]
