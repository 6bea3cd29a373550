"""
MerkleTree Tests

End-to-end properties of the MerkleTree aggregate: root determinism,
order sensitivity, proof round trips, tamper detection and the sentinel
behaviour of every failure path.
"""

import itertools
import threading
import unittest

from tx_merkle import (
    EMPTY_DIGEST,
    Hasher,
    MerkleError,
    MerkleTree,
    concat_and_hash,
    hash_leaf,
)

TRANSACTIONS = ["p1", "p2", "p3", "p4", "p5", "p6", "p7", "p8"]

# sha256 reference values for TRANSACTIONS
ROOT_P1_P8 = "ffdb937b457272ad4c350cb78570f2d4e7b4784e6cfc1b33a8759143218887ec"
LEAF_P4 = "ab71fc4c8a1c4d62b9202b36ee7c07dd398a0907a37037bd8c3959d6af573608"
NODE_P1_P2 = "9532f90b5411bcfbd30428317d19c8e8e29338d57c39f78915618e63af6d8ea6"
NODE_P5_P8 = "1031928f127ccfa0bf82193f3f8a33ffc06ff79912175c27869ab57d8bf079b1"


def H(a, b):
    return concat_and_hash(hash_leaf(a), hash_leaf(b))


def create_tree(**kwargs):
    return MerkleTree(TRANSACTIONS, **kwargs)


class TestTreeCreation(unittest.TestCase):

    def test_tree_creation(self):
        tree = create_tree()
        expected = concat_and_hash(
            concat_and_hash(H("p1", "p2"), H("p3", "p4")),
            concat_and_hash(H("p5", "p6"), H("p7", "p8")),
        )
        self.assertEqual(tree.root_digest(), expected)
        self.assertEqual(tree.root_digest(), ROOT_P1_P8)

    def test_accessors(self):
        tree = create_tree()
        self.assertEqual(tree.transactions, tuple(TRANSACTIONS))
        self.assertEqual(tree.height, 4)
        self.assertEqual(tree.leaf_count, 8)
        self.assertEqual(tree.node_count, 15)
        self.assertEqual(tree.algorithm, "sha256")
        self.assertIsNone(tree.build_error)
        self.assertFalse(tree.is_empty)
        self.assertEqual(len(tree), 8)
        self.assertIn("p5", tree)
        self.assertNotIn("p9", tree)

    def test_levels(self):
        levels = create_tree().levels()
        self.assertEqual([len(level) for level in levels], [8, 4, 2, 1])
        self.assertEqual(levels[0], [hash_leaf(tx) for tx in TRANSACTIONS])
        self.assertEqual(levels[-1], [ROOT_P1_P8])

    def test_input_list_is_copied(self):
        txs = list(TRANSACTIONS)
        tree = MerkleTree(txs)
        txs[0] = "changed"
        self.assertEqual(tree.transactions[0], "p1")
        self.assertEqual(tree.root_digest(), ROOT_P1_P8)

    def test_power_of_two_heights(self):
        for n in (1, 2, 4, 8, 16):
            with self.subTest(n=n):
                tree = MerkleTree([f"t{i}" for i in range(n)])
                self.assertFalse(tree.is_empty)
                self.assertEqual(tree.height, n.bit_length())

    def test_non_power_of_two_yields_empty_tree(self):
        tree = MerkleTree(["a", "b", "c"])
        self.assertEqual(tree.root_digest(), EMPTY_DIGEST)
        self.assertIsNone(tree.root)
        self.assertEqual(tree.build_error, MerkleError.NON_POWER_OF_TWO_LEAF_COUNT)
        self.assertEqual(tree.transactions, ("a", "b", "c"))
        self.assertEqual(tree.height, 0)
        self.assertEqual(tree.levels(), [])
        self.assertEqual(str(tree), "")

    def test_empty_list(self):
        tree = MerkleTree([])
        self.assertEqual(tree.root_digest(), EMPTY_DIGEST)
        self.assertEqual(tree.build_error, MerkleError.EMPTY_ROOT)
        self.assertEqual(tree.generate_proof("anything"), [])

    def test_str_dumps_digests_postorder(self):
        tree = MerkleTree(["a", "b"])
        self.assertEqual(
            str(tree).splitlines(),
            [hash_leaf("a"), hash_leaf("b"), H("a", "b")],
        )

    def test_equality(self):
        self.assertEqual(create_tree(), create_tree())
        self.assertEqual(hash(create_tree()), hash(create_tree()))
        self.assertNotEqual(create_tree(), create_tree(hasher=Hasher("sha512")))
        self.assertNotEqual(create_tree(), MerkleTree(list(reversed(TRANSACTIONS))))


class TestRootProperties(unittest.TestCase):

    def test_root_determinism(self):
        roots = {MerkleTree(TRANSACTIONS).root_digest() for _ in range(10)}
        self.assertEqual(len(roots), 1)

    def test_order_sensitivity(self):
        txs = ["a", "b", "c", "d"]
        roots = {MerkleTree(list(perm)).root_digest() for perm in itertools.permutations(txs)}
        self.assertEqual(len(roots), 24)

    def test_algorithm_changes_root(self):
        self.assertNotEqual(
            create_tree().root_digest(),
            create_tree(hasher=Hasher("sha3_256")).root_digest(),
        )


class TestProofGeneration(unittest.TestCase):

    def test_tree_proof(self):
        tree = create_tree()
        p3_proof = tree.generate_proof("p3")
        self.assertEqual(len(p3_proof), 3)
        self.assertEqual(p3_proof, [LEAF_P4, NODE_P1_P2, NODE_P5_P8])
        self.assertTrue(tree.verify_proof("p3", p3_proof))

    def test_round_trip_every_transaction(self):
        for n in (2, 4, 8, 16):
            tree = MerkleTree([f"tx-{i}" for i in range(n)])
            for tx in tree.transactions:
                with self.subTest(n=n, tx=tx):
                    proof = tree.generate_proof(tx)
                    self.assertEqual(len(proof), tree.height - 1)
                    self.assertTrue(tree.verify_proof(tx, proof))

    def test_round_trip_custom_hasher(self):
        tree = create_tree(hasher=Hasher("blake2s"))
        for tx in TRANSACTIONS:
            self.assertTrue(tree.verify_proof(tx, tree.generate_proof(tx)))

    def test_absent_transaction(self):
        tree = create_tree()
        self.assertEqual(tree.generate_proof("not-present"), [])
        outcome = tree.prove("not-present")
        self.assertFalse(outcome.ok)
        self.assertEqual(outcome.error, MerkleError.TRANSACTION_NOT_FOUND)

    def test_rejected_tree_has_no_proofs(self):
        tree = MerkleTree(["a", "b", "c"])
        self.assertEqual(tree.generate_proof("a"), [])
        self.assertEqual(tree.prove("a").error, MerkleError.EMPTY_ROOT)
        self.assertEqual(tree.prove_at(0).error, MerkleError.EMPTY_ROOT)

    def test_prove_reports_index(self):
        outcome = create_tree().prove("p6")
        self.assertTrue(outcome.ok)
        self.assertEqual(outcome.index, 5)

    def test_single_leaf_proof_is_empty(self):
        tree = MerkleTree(["only"])
        outcome = tree.prove("only")
        self.assertTrue(outcome.ok)
        self.assertEqual(outcome.proof, [])


class TestProofVerification(unittest.TestCase):

    def setUp(self):
        self.tree = create_tree()

    def test_absent_transaction(self):
        proof = self.tree.generate_proof("p1")
        self.assertFalse(self.tree.verify_proof("not-present", proof))
        self.assertEqual(
            self.tree.check("not-present", proof).error,
            MerkleError.TRANSACTION_NOT_FOUND,
        )

    def test_empty_proof_rejected(self):
        outcome = self.tree.check("p1", [])
        self.assertFalse(outcome)
        self.assertEqual(outcome.error, MerkleError.EMPTY_PROOF)

    def test_rejected_tree_cannot_verify(self):
        tree = MerkleTree(["a", "b", "c"])
        outcome = tree.check("a", [hash_leaf("b")])
        self.assertFalse(outcome.valid)
        self.assertEqual(outcome.error, MerkleError.EMPTY_ROOT)

    def test_flipped_digest_detected(self):
        for tx in TRANSACTIONS:
            proof = self.tree.generate_proof(tx)
            for i in range(len(proof)):
                with self.subTest(tx=tx, step=i):
                    tampered = list(proof)
                    last = "0" if tampered[i][-1] != "0" else "1"
                    tampered[i] = tampered[i][:-1] + last
                    outcome = self.tree.check(tx, tampered)
                    self.assertFalse(outcome.valid)
                    self.assertIsNone(outcome.error)

    def test_substituted_sibling_detected(self):
        proof = self.tree.generate_proof("p3")
        other = self.tree.generate_proof("p8")
        for i in range(len(proof)):
            with self.subTest(step=i):
                tampered = list(proof)
                tampered[i] = other[i]
                self.assertFalse(self.tree.verify_proof("p3", tampered))

    def test_proof_for_other_transaction_fails(self):
        self.assertFalse(self.tree.verify_proof("p3", self.tree.generate_proof("p5")))

    def test_truncated_or_extended_proof_fails(self):
        proof = self.tree.generate_proof("p2")
        self.assertFalse(self.tree.verify_proof("p2", proof[:-1]))
        self.assertFalse(self.tree.verify_proof("p2", proof + [LEAF_P4]))

    def test_malformed_digests_do_not_raise(self):
        self.assertFalse(self.tree.verify_proof("p1", ["zz", "not hex", ""]))


class TestSingleLeafTree(unittest.TestCase):

    def test_empty_proof_rejected_by_default(self):
        tree = MerkleTree(["only"])
        self.assertEqual(tree.root_digest(), hash_leaf("only"))
        outcome = tree.check("only", tree.generate_proof("only"))
        self.assertFalse(outcome.valid)
        self.assertEqual(outcome.error, MerkleError.EMPTY_PROOF)

    def test_empty_proof_accepted_when_enabled(self):
        tree = MerkleTree(["only"], accept_empty_proof=True)
        self.assertTrue(tree.verify_proof("only", []))
        self.assertTrue(tree.verify_proof_at(0, []))

    def test_acceptance_limited_to_single_leaf(self):
        tree = create_tree(accept_empty_proof=True)
        self.assertEqual(tree.check("p1", []).error, MerkleError.EMPTY_PROOF)


class TestDuplicateTransactions(unittest.TestCase):

    def setUp(self):
        self.tree = MerkleTree(["a", "dup", "b", "c", "d", "e", "dup", "f"])

    def test_value_proof_targets_first_occurrence(self):
        outcome = self.tree.prove("dup")
        self.assertEqual(outcome.index, 1)
        self.assertEqual(outcome.proof, self.tree.generate_proof_at(1))
        self.assertTrue(self.tree.verify_proof("dup", outcome.proof))

    def test_positional_proof_for_later_occurrence(self):
        proof = self.tree.generate_proof_at(6)
        self.assertTrue(self.tree.verify_proof_at(6, proof))
        # Value lookup indexes the first occurrence, so this proof does not match it
        self.assertFalse(self.tree.verify_proof("dup", proof))

    def test_positional_out_of_range(self):
        self.assertEqual(self.tree.generate_proof_at(8), [])
        self.assertEqual(self.tree.prove_at(-1).error, MerkleError.INDEX_OUT_OF_RANGE)
        self.assertEqual(self.tree.check_at(8, ["x"]).error, MerkleError.INDEX_OUT_OF_RANGE)


class TestConcurrentReads(unittest.TestCase):

    def test_shared_tree_across_threads(self):
        tree = MerkleTree([f"tx-{i}" for i in range(64)])
        failures = []

        def worker(offset):
            for i in range(offset, 64, 4):
                tx = f"tx-{i}"
                if not tree.verify_proof(tx, tree.generate_proof(tx)):
                    failures.append(tx)

        threads = [threading.Thread(target=worker, args=(k,)) for k in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(failures, [])


if __name__ == "__main__":
    unittest.main(verbosity=2)
