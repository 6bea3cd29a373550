"""
Digest Primitive Tests

Tests for the pluggable hash_leaf / concat_and_hash pair.
"""

import hashlib
import unittest

from tx_merkle.merkle import Hasher, DEFAULT_HASHER, hash_leaf, concat_and_hash


class TestDigestPrimitive(unittest.TestCase):
    """Tests for the default SHA-256 digest primitive."""

    def test_hash_leaf_known_vector(self):
        """hash_leaf is the SHA-256 hex digest of the UTF-8 bytes"""
        self.assertEqual(
            hash_leaf("hello"),
            "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824",
        )
        self.assertEqual(
            hash_leaf("p1"),
            "f64551fcd6f07823cb87971cfb91446425da18286b3ab1ef935e0cbd7a69f68a",
        )

    def test_hash_leaf_deterministic(self):
        self.assertEqual(hash_leaf("tx"), hash_leaf("tx"))
        self.assertNotEqual(hash_leaf("tx"), hash_leaf("tx "))

    def test_concat_and_hash_is_ordered(self):
        """Swapping the operands changes the digest"""
        a, b = hash_leaf("a"), hash_leaf("b")
        self.assertNotEqual(concat_and_hash(a, b), concat_and_hash(b, a))

    def test_concat_and_hash_hashes_concatenation(self):
        a, b = hash_leaf("a"), hash_leaf("b")
        expected = hashlib.sha256((a + b).encode("utf-8")).hexdigest()
        self.assertEqual(concat_and_hash(a, b), expected)

    def test_concat_and_hash_accepts_any_string(self):
        """Malformed digests are hashed, not rejected"""
        self.assertEqual(len(concat_and_hash("not-hex", "")), 64)

    def test_digests_are_lowercase_hex(self):
        digest = hash_leaf("anything")
        self.assertEqual(digest, digest.lower())
        int(digest, 16)


class TestHasher(unittest.TestCase):
    """Tests for algorithm selection."""

    def test_default_is_sha256(self):
        self.assertEqual(DEFAULT_HASHER.algorithm, "sha256")
        self.assertEqual(DEFAULT_HASHER.digest_size, 32)
        self.assertEqual(DEFAULT_HASHER.hex_length, 64)

    def test_alternative_algorithm(self):
        hasher = Hasher("sha512")
        self.assertEqual(hasher.hex_length, 128)
        self.assertEqual(len(hasher.hash_leaf("p1")), 128)
        self.assertNotEqual(hasher.hash_leaf("p1"), hash_leaf("p1"))

    def test_algorithm_name_is_normalized(self):
        self.assertEqual(Hasher("SHA3-256").algorithm, "sha3_256")

    def test_unknown_algorithm_rejected(self):
        with self.assertRaises(ValueError):
            Hasher("md4-but-not-really")

    def test_hashers_compare_by_algorithm(self):
        self.assertEqual(Hasher("sha256"), DEFAULT_HASHER)
        self.assertNotEqual(Hasher("sha512"), DEFAULT_HASHER)


if __name__ == "__main__":
    unittest.main(verbosity=2)
