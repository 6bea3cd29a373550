"""
Runtime Configuration

Settings are read from environment variables, optionally seeded from a
.env file through python-dotenv:

- TX_MERKLE_HASH_ALGORITHM: hashlib algorithm for the digest primitive (sha256)
- TX_MERKLE_LOG_LEVEL: logging level used by the CLI (INFO)
- TX_MERKLE_ACCEPT_EMPTY_PROOF: accept an empty proof for single-leaf trees (false)
- TX_MERKLE_OUTPUT_FORMAT: default CLI output format, json or table (json)
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .constants import (
    HASH_ALGORITHM_DEFAULT,
    LOG_LEVEL_DEFAULT,
    OUTPUT_FORMAT_DEFAULT,
    OUTPUT_FORMATS,
)
from .merkle import Hasher

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean (true/false), got {raw!r}")


@dataclass(frozen=True)
class Settings:
    """
    Configuration shared by the service layer and the CLI.

    Attributes:
        hash_algorithm: hashlib algorithm name for the digest primitive
        log_level: Logging level name
        accept_empty_proof: Accept an empty proof for a single-leaf tree
        output_format: Default CLI output format
    """
    hash_algorithm: str = HASH_ALGORITHM_DEFAULT
    log_level: str = LOG_LEVEL_DEFAULT
    accept_empty_proof: bool = False
    output_format: str = OUTPUT_FORMAT_DEFAULT

    def __post_init__(self) -> None:
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Output format must be one of {', '.join(OUTPUT_FORMATS)}, "
                f"got {self.output_format!r}"
            )
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log level {self.log_level!r}")
        # Fail early on an unknown algorithm
        Hasher(self.hash_algorithm)

    @property
    def hasher(self) -> Hasher:
        return Hasher(self.hash_algorithm)

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Settings":
        """
        Load settings from the environment.

        Args:
            env_file: Optional path to a .env file. Variables already set
                in the environment take precedence over the file.

        Returns:
            Settings instance

        Raises:
            ValueError: If a variable holds an invalid value
        """
        if env_file is not None:
            load_dotenv(env_file)
        else:
            load_dotenv()

        settings = cls(
            hash_algorithm=os.getenv("TX_MERKLE_HASH_ALGORITHM", HASH_ALGORITHM_DEFAULT),
            log_level=os.getenv("TX_MERKLE_LOG_LEVEL", LOG_LEVEL_DEFAULT),
            accept_empty_proof=_parse_bool(
                "TX_MERKLE_ACCEPT_EMPTY_PROOF",
                os.getenv("TX_MERKLE_ACCEPT_EMPTY_PROOF", "false"),
            ),
            output_format=os.getenv("TX_MERKLE_OUTPUT_FORMAT", OUTPUT_FORMAT_DEFAULT).lower(),
        )
        logger.debug(f"Loaded settings: {settings}")
        return settings
