"""
Input validation utilities.

Provides validation functions for source files.
"""

import os
from pathlib import Path
from typing import Optional, Tuple

from protein_hash.core.exceptions import InvalidInputError

# Source files larger than this are rejected before parsing
MAX_SOURCE_BYTES = 5 * 1024 * 1024


def validate_source_file(path: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a source file path.

    Args:
        path: Path to validate.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not path:
        return False, "Path cannot be empty"

    path_obj = Path(path)

    if not path_obj.exists():
        return False, f"File does not exist: {path}"

    if not path_obj.is_file():
        return False, f"Path is not a file: {path}"

    if not os.access(path_obj, os.R_OK):
        return False, f"File is not readable: {path}"

    if path_obj.stat().st_size > MAX_SOURCE_BYTES:
        return False, f"File is larger than {MAX_SOURCE_BYTES} bytes: {path}"

    return True, None


def read_source_file(path: str) -> str:
    """
    Read a source file as UTF-8 text.

    Raises:
        InvalidInputError: If the file is missing, unreadable or not UTF-8.
    """
    is_valid, error = validate_source_file(path)
    if not is_valid:
        raise InvalidInputError(error, details={"path": str(path)})

    try:
        return Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise InvalidInputError(
            f"File is not valid UTF-8: {path}", details={"path": str(path)}
        ) from e
