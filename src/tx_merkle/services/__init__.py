"""
Service Layer

ProofService wraps MerkleTree for file based workflows used by the CLI.
"""

from .proof_service import ProofService, ProofServiceError

__all__ = [
    'ProofService',
    'ProofServiceError',
]
