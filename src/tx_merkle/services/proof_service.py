"""
Proof Service Module

This module provides a service layer on top of MerkleTree for the CLI:
loading transaction lists from files, building trees, turning proofs into
ProofDocuments and checking saved documents. Unlike the core, this layer
raises on failure and logs why.
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union

from pydantic import ValidationError

from ..config import Settings
from ..errors import MerkleError, MerkleTreeError
from ..models import (
    ProofDocument,
    TreeSnapshot,
    VerificationReport,
    document_from_outcome,
    snapshot_from_tree,
)
from ..tree import MerkleTree

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ProofServiceError(Exception):
    """Exception for input/output problems in the proof service."""

    def __init__(self, message: str, code: str = "PROOF_SERVICE_ERROR"):
        super().__init__(message)
        self.code = code


class ProofService:
    """Service for building trees from files and producing / checking proofs."""

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize the proof service.

        Args:
            settings: Runtime settings. If None, defaults are used
                (SHA-256, empty proofs rejected).
        """
        self.settings = settings or Settings()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_transactions(self, path: PathLike) -> List[str]:
        """
        Load an ordered transaction list from a file.

        Accepted formats, chosen by file suffix:
        - .json: JSON array of strings (["p1", "p2"]) or a JSON object
          with a "transactions" array
        - anything else: plain text, one transaction per line (blank
          lines ignored); lines are taken verbatim, so JSON-encoded
          transactions can be listed one per line

        Args:
            path: Path of the file to read

        Returns:
            List of transactions in file order

        Raises:
            ProofServiceError: If the file cannot be read, is not UTF-8 or
                is malformed
        """
        path = Path(path)
        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read transactions from {path}: {e}")
            raise ProofServiceError(f"Failed to read {path}: {e}", code="READ_ERROR")

        if path.suffix.lower() == ".json":
            try:
                data = json.loads(raw)
            except json.JSONDecodeError as e:
                logger.error(f"Invalid JSON in {path}: {e}")
                raise ProofServiceError(f"Invalid JSON in {path}: {e}", code="INVALID_INPUT")
            return self._transactions_from_json(data, path)

        return [line.rstrip("\r") for line in raw.split("\n") if line.strip()]

    def _transactions_from_json(self, data: Any, path: Path) -> List[str]:
        if isinstance(data, dict):
            if "transactions" not in data:
                raise ProofServiceError(
                    f"{path}: JSON object must contain a 'transactions' array",
                    code="INVALID_INPUT",
                )
            data = data["transactions"]

        if not isinstance(data, list) or not all(isinstance(tx, str) for tx in data):
            raise ProofServiceError(
                f"{path}: transactions must be a JSON array of strings",
                code="INVALID_INPUT",
            )
        return data

    def load_proof(self, path: PathLike) -> ProofDocument:
        """
        Load a ProofDocument saved as JSON.

        Raises:
            ProofServiceError: If the file cannot be read or is not a valid proof
        """
        path = Path(path)
        try:
            return ProofDocument.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read proof from {path}: {e}")
            raise ProofServiceError(f"Failed to read {path}: {e}", code="READ_ERROR")
        except ValidationError as e:
            logger.error(f"Invalid proof document {path}: {e}")
            raise ProofServiceError(f"Invalid proof document {path}: {e}", code="INVALID_PROOF")

    # ------------------------------------------------------------------
    # Trees
    # ------------------------------------------------------------------

    def build_tree(self, transactions: Sequence[str], require_root: bool = True) -> MerkleTree:
        """
        Build a MerkleTree with the configured hasher.

        Args:
            transactions: Ordered transaction list
            require_root: Raise if the tree ends up without a root

        Returns:
            The built tree

        Raises:
            MerkleTreeError: If require_root is set and the build was rejected
                or the list was empty
        """
        tree = MerkleTree(
            transactions,
            hasher=self.settings.hasher,
            accept_empty_proof=self.settings.accept_empty_proof,
        )
        if require_root and tree.build_error is not None:
            logger.warning(f"Tree has no root: {tree.build_error} ({len(tree)} transactions)")
            raise MerkleTreeError(tree.build_error, f"{len(tree)} transactions")
        return tree

    def load_tree(self, path: PathLike, require_root: bool = True) -> MerkleTree:
        """Load transactions from a file and build the tree."""
        return self.build_tree(self.load_transactions(path), require_root=require_root)

    def snapshot(self, tree: MerkleTree) -> TreeSnapshot:
        return snapshot_from_tree(tree)

    # ------------------------------------------------------------------
    # Proofs
    # ------------------------------------------------------------------

    def create_proof(
        self,
        tree: MerkleTree,
        transaction: Optional[str] = None,
        index: Optional[int] = None,
    ) -> ProofDocument:
        """
        Generate a ProofDocument for a transaction.

        Args:
            tree: The tree to prove against
            transaction: Transaction to prove (first occurrence is used)
            index: Leaf position to prove instead; when both are given the
                transaction at that position must match

        Returns:
            ProofDocument ready to be serialized

        Raises:
            MerkleTreeError: If the transaction or index is not in the tree,
                or the tree has no root
            ValueError: If neither transaction nor index is given
        """
        if transaction is None and index is None:
            raise ValueError("Either a transaction or an index is required")

        if index is not None:
            outcome = tree.prove_at(index)
            if outcome.ok:
                leaf_transaction = tree.transactions[index]
                if transaction is not None and transaction != leaf_transaction:
                    logger.warning(f"Transaction {transaction!r} is not at index {index}")
                    raise MerkleTreeError(
                        MerkleError.TRANSACTION_NOT_FOUND, f"not at index {index}"
                    )
                transaction = leaf_transaction
        else:
            outcome = tree.prove(transaction)

        if not outcome.ok:
            logger.warning(f"Proof generation failed: {outcome.error}")
            raise MerkleTreeError(outcome.error)

        return document_from_outcome(tree, transaction, outcome)

    def verify_document(self, tree: MerkleTree, document: ProofDocument) -> VerificationReport:
        """
        Check a ProofDocument against a tree.

        The document's algorithm and root must match the tree, and the
        transaction must sit at the document's index.

        Returns:
            VerificationReport; never raises for an invalid proof
        """
        root = tree.root_digest()

        def report(valid: bool, error: Optional[str] = None) -> VerificationReport:
            if error is not None:
                logger.warning(f"Proof for {document.transaction!r} rejected: {error}")
            return VerificationReport(
                transaction=document.transaction,
                index=document.index,
                valid=valid,
                error=error,
                root=root,
            )

        if document.algorithm != tree.algorithm:
            return report(False, "ALGORITHM_MISMATCH")

        if document.transaction not in tree:
            return report(False, MerkleError.TRANSACTION_NOT_FOUND.code)

        if tree.is_empty:
            return report(False, MerkleError.EMPTY_ROOT.code)

        if document.index >= len(tree):
            return report(False, MerkleError.INDEX_OUT_OF_RANGE.code)

        if tree.transactions[document.index] != document.transaction:
            return report(False, "INDEX_MISMATCH")

        if document.root != root:
            return report(False, "ROOT_MISMATCH")

        outcome = tree.check_at(document.index, document.proof)
        if outcome.error is not None:
            return report(False, outcome.error.code)
        if not outcome.valid:
            logger.info(f"Proof for {document.transaction!r} does not match the root")
        return report(outcome.valid)
