"""
Utility Functions

Hex digest handling used by the models, the service layer and the CLI.
"""

from .hex_helpers import (
    is_hex_digest,
    normalize_digest,
    shorten_digest,
)

__all__ = [
    'is_hex_digest',
    'normalize_digest',
    'shorten_digest',
]
