"""
Fingerprint similarity, equivalence and clustering.
"""

from protein_hash.similarity.comparator import (
    FingerprintComparator,
    HashComparison,
    compare_hashes,
    group_by_similarity,
    is_equivalent,
    similarity,
)

__all__ = [
    "FingerprintComparator",
    "HashComparison",
    "compare_hashes",
    "group_by_similarity",
    "is_equivalent",
    "similarity",
]
