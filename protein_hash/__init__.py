"""
Protein Hash: structural fingerprints for source code.

Turns a parsed code fragment into a weighted logical graph and hashes
the spectrum of its Laplacian, so that fragments differing only in
naming or syntax style share a fingerprint while different logic does
not.
"""

__version__ = "2.0.0"
__author__ = "Protein Hash"

from protein_hash.engine import (
    HashResult,
    ProteinHasher,
    compute_similarity,
    create_hasher,
    generate_hybrid_id,
    group_sources,
    is_semantically_equivalent,
    parse_hybrid_id,
    quick_hash,
)
from protein_hash.spectral.analyzer import Fingerprint
from protein_hash.topology.analyzer import TopologyFeatures
from protein_hash.similarity.comparator import HashComparison

__all__ = [
    "HashResult",
    "ProteinHasher",
    "Fingerprint",
    "TopologyFeatures",
    "HashComparison",
    "compute_similarity",
    "create_hasher",
    "generate_hybrid_id",
    "group_sources",
    "is_semantically_equivalent",
    "parse_hybrid_id",
    "quick_hash",
]
