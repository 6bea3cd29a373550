"""
Hex String Utilities

This module provides helpers for handling the hexadecimal digest strings
that cross the library boundary (proof files, CLI arguments, snapshots).
"""

from typing import Optional

HEX_CHARS = frozenset("0123456789abcdefABCDEF")


def is_hex_digest(value: str, expected_length: Optional[int] = None) -> bool:
    """
    Check whether a string looks like a hex digest.

    Args:
        value: Candidate digest string (no '0x' prefix)
        expected_length: Optional expected number of hex characters

    Returns:
        True if the string is non-empty, of even length and only hex characters

    Examples:
        >>> is_hex_digest("ab12")
        True
        >>> is_hex_digest("0xab12")
        False
    """
    if not isinstance(value, str) or not value or len(value) % 2 == 1:
        return False
    if not all(c in HEX_CHARS for c in value):
        return False
    if expected_length is not None and len(value) != expected_length:
        return False
    return True


def normalize_digest(value: str) -> str:
    """
    Normalize a user supplied digest: strip whitespace and an optional
    '0x' prefix, lowercase the rest.

    Args:
        value: The digest string to normalize

    Returns:
        Normalized lowercase hex string

    Raises:
        ValueError: If the string contains non-hex characters

    Examples:
        >>> normalize_digest("0xABCD")
        "abcd"
    """
    digest = value.strip()
    if digest.startswith(("0x", "0X")):
        digest = digest[2:]
    if not is_hex_digest(digest):
        raise ValueError(f"Invalid hex digest: {value!r}")
    return digest.lower()


def shorten_digest(digest: str, keep: int = 8) -> str:
    """Shorten a digest for display, e.g. 'a1b2c3d4...e5f6a7b8'."""
    if len(digest) <= keep * 2 + 3:
        return digest
    return f"{digest[:keep]}...{digest[-keep:]}"
