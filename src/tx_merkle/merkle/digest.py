"""
Digest Primitive

This module provides the two hash functions the Merkle tree is built from:

- hash_leaf(value): digest of one transaction string
- concat_and_hash(a, b): digest of the ordered concatenation of two digests

Digests are lowercase hexadecimal strings. Any fixed-size hashlib
algorithm can be plugged in through Hasher; SHA-256 is the default.
"""

import hashlib
from dataclasses import dataclass

from ..constants import HASH_ALGORITHM_DEFAULT, SUPPORTED_HASH_ALGORITHMS

# Digests cross the library boundary as hex strings
Digest = str


@dataclass(frozen=True)
class Hasher:
    """
    Deterministic digest primitive bound to one hashlib algorithm.

    Attributes:
        algorithm: hashlib algorithm name (e.g. 'sha256', 'sha3_256')

    Examples:
        >>> hasher = Hasher("sha256")
        >>> hasher.hash_leaf("p1") == hasher.hash_leaf("p1")
        True
    """
    algorithm: str = HASH_ALGORITHM_DEFAULT

    def __post_init__(self) -> None:
        name = self.algorithm.lower().replace("-", "_")
        if name not in SUPPORTED_HASH_ALGORITHMS:
            raise ValueError(
                f"Unsupported hash algorithm '{self.algorithm}'. "
                f"Choose one of: {', '.join(SUPPORTED_HASH_ALGORITHMS)}"
            )
        object.__setattr__(self, "algorithm", name)

    def _digest(self, data: bytes) -> Digest:
        return hashlib.new(self.algorithm, data).hexdigest()

    def hash_leaf(self, value: str) -> Digest:
        """
        Hash a transaction into a leaf digest.

        Args:
            value: The unhashed transaction string

        Returns:
            Hex digest of the UTF-8 encoded transaction
        """
        return self._digest(value.encode("utf-8"))

    def concat_and_hash(self, a: Digest, b: Digest) -> Digest:
        """
        Hash the ordered concatenation of two digests.

        Order matters: concat_and_hash(a, b) != concat_and_hash(b, a)
        in general. Any string is accepted so that verifying a malformed
        proof simply fails to match instead of raising.

        Args:
            a: Left operand digest
            b: Right operand digest

        Returns:
            Hex digest of (a + b)
        """
        return self._digest((a + b).encode("utf-8"))

    @property
    def digest_size(self) -> int:
        """Size of one digest in bytes."""
        return hashlib.new(self.algorithm).digest_size

    @property
    def hex_length(self) -> int:
        """Length of one digest in hex characters."""
        return self.digest_size * 2


DEFAULT_HASHER = Hasher()


def hash_leaf(value: str) -> Digest:
    """SHA-256 leaf digest of a transaction string."""
    return DEFAULT_HASHER.hash_leaf(value)


def concat_and_hash(a: Digest, b: Digest) -> Digest:
    """SHA-256 digest over the ordered concatenation of two digests."""
    return DEFAULT_HASHER.concat_and_hash(a, b)
