"""
Output formatting for hash results.
"""

from protein_hash.reporting.formatter import (
    ResultFormatter,
    JSONFormatter,
    TextFormatter,
    format_results,
    get_formatter,
)

__all__ = [
    "ResultFormatter",
    "JSONFormatter",
    "TextFormatter",
    "format_results",
    "get_formatter",
]
