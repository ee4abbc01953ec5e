"""
Utility functions and helpers.

Provides common utilities used across the codebase.
"""

from protein_hash.utils.logging_config import setup_logging
from protein_hash.utils.validation import read_source_file, validate_source_file

__all__ = [
    "setup_logging",
    "read_source_file",
    "validate_source_file",
]
