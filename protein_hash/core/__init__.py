"""
Core module containing configuration and the exception hierarchy.
"""

from protein_hash.core.config import (
    Config,
    HasherConfig,
    FingerprintConfig,
    SimilarityConfig,
)
from protein_hash.core.exceptions import (
    ProteinHashError,
    InvalidInputError,
    ResourceLimitExceededError,
    ComputationError,
    InvalidArgumentError,
    LanguageNotSupportedError,
)

__all__ = [
    "Config",
    "HasherConfig",
    "FingerprintConfig",
    "SimilarityConfig",
    "ProteinHashError",
    "InvalidInputError",
    "ResourceLimitExceededError",
    "ComputationError",
    "InvalidArgumentError",
    "LanguageNotSupportedError",
]
