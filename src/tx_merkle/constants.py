"""
Merkle Tree Constants

This module contains the constants shared by the tree builder, the proof
functions and the outer service layer.
"""

import hashlib

# ====================
# Digest Primitive
# ====================

# Algorithm used when neither the caller nor the environment picks one
HASH_ALGORITHM_DEFAULT = "sha256"

# Fixed-size hashlib algorithms accepted as the digest primitive.
# Variable-length ones (shake_*) are excluded since hexdigest() needs a length.
SUPPORTED_HASH_ALGORITHMS = tuple(
    name
    for name in (
        "sha224",
        "sha256",
        "sha384",
        "sha512",
        "sha3_256",
        "sha3_512",
        "blake2b",
        "blake2s",
    )
    if name in hashlib.algorithms_available
)

# ====================
# Sentinels
# ====================

# Root digest reported when the tree has no root (empty or rejected input)
EMPTY_DIGEST = ""

# ====================
# Output
# ====================

OUTPUT_FORMATS = ("json", "table")
OUTPUT_FORMAT_DEFAULT = "json"

LOG_LEVEL_DEFAULT = "INFO"
