"""
Fingerprint comparison and clustering.

Scores fingerprints by cosine similarity of their quantized spectra,
decides equivalence against a threshold and groups collections greedily.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

import numpy as np

from protein_hash.core.config import SimilarityConfig
from protein_hash.core.exceptions import InvalidArgumentError
from protein_hash.spectral.analyzer import (
    FORMAT_VERSION,
    Fingerprint,
    parse_phash,
    spectral_distance,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class HashComparison:
    """Detailed comparison of two fingerprints."""

    hash1: str
    hash2: str
    similarity: float
    is_equivalent: bool
    eigen_distance: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "hash1": self.hash1,
            "hash2": self.hash2,
            "similarity": self.similarity,
            "is_equivalent": self.is_equivalent,
            "eigen_distance": self.eigen_distance,
        }


def _padded(a: Sequence[float], b: Sequence[float]):
    size = max(len(a), len(b))
    va = np.zeros(size, dtype=np.float64)
    vb = np.zeros(size, dtype=np.float64)
    va[:len(a)] = a
    vb[:len(b)] = b
    return va, vb


def validate_threshold(threshold: float) -> float:
    """Reject thresholds outside [0, 1]."""
    if (
        not isinstance(threshold, (int, float))
        or isinstance(threshold, bool)
        or math.isnan(threshold)
        or not 0.0 <= threshold <= 1.0
    ):
        raise InvalidArgumentError(
            f"Threshold must be within [0, 1], got {threshold!r}",
            details={"threshold": threshold},
        )
    return float(threshold)


class FingerprintComparator:
    """
    Compares spectral fingerprints.

    Similarity is the cosine of the eigenvalue vectors zero-padded to a
    common length, clamped to [0, 1].
    """

    def __init__(self, config: Optional[SimilarityConfig] = None):
        self.config = config or SimilarityConfig()
        self.config.validate()

    def similarity(self, first: Fingerprint, second: Fingerprint) -> float:
        """
        Compute the similarity of two fingerprints.

        Args:
            first: First fingerprint.
            second: Second fingerprint.

        Returns:
            Score in [0, 1]; identical spectra score exactly 1.0.

        Raises:
            InvalidArgumentError: For malformed or incompatible fingerprints.
        """
        self._check_compatible(first, second)

        va, vb = _padded(first.eigenvalues, second.eigenvalues)
        if np.array_equal(va, vb):
            return 1.0

        norm_a = float(np.linalg.norm(va))
        norm_b = float(np.linalg.norm(vb))
        if norm_a == 0.0 or norm_b == 0.0:
            return 0.0

        cosine = float(np.dot(va, vb)) / (norm_a * norm_b)
        return min(1.0, max(0.0, cosine))

    def is_equivalent(
        self,
        first: Fingerprint,
        second: Fingerprint,
        threshold: Optional[float] = None,
    ) -> bool:
        """True when similarity reaches the equivalence threshold."""
        if threshold is None:
            threshold = self.config.equivalence_threshold
        threshold = validate_threshold(threshold)
        return self.similarity(first, second) >= threshold

    def compare(self, first: Fingerprint, second: Fingerprint) -> HashComparison:
        """
        Detailed comparison of two fingerprints.

        Returns:
            HashComparison with similarity, equivalence and spectral distance.
        """
        score = self.similarity(first, second)
        return HashComparison(
            hash1=first.hash,
            hash2=second.hash,
            similarity=score,
            is_equivalent=score >= self.config.equivalence_threshold,
            eigen_distance=spectral_distance(first.eigenvalues, second.eigenvalues),
        )

    def group_by_similarity(
        self,
        items: Sequence[T],
        threshold: Optional[float] = None,
        key: Optional[Callable[[T], Fingerprint]] = None,
    ) -> List[List[T]]:
        """
        Greedy single-pass clustering.

        Each item joins the first existing group whose first member it is
        similar enough to; otherwise it opens a new group. The result
        depends on input order.

        Args:
            items: Fingerprints, or arbitrary items when key is given.
            threshold: Minimum similarity to join a group.
            key: Maps an item to its Fingerprint.

        Returns:
            Groups in order of creation, each preserving input order.
        """
        if threshold is None:
            threshold = self.config.grouping_threshold
        threshold = validate_threshold(threshold)
        key = key or (lambda item: item)

        groups: List[List[T]] = []
        leaders: List[Fingerprint] = []
        for item in items:
            fingerprint = key(item)
            for group, leader in zip(groups, leaders):
                if self.similarity(leader, fingerprint) >= threshold:
                    group.append(item)
                    break
            else:
                groups.append([item])
                leaders.append(fingerprint)

        logger.debug(f"Grouped {len(items)} items into {len(groups)} groups")
        return groups

    @staticmethod
    def _check_compatible(first: Fingerprint, second: Fingerprint) -> None:
        version1 = parse_phash(first.hash)[0]
        version2 = parse_phash(second.hash)[0]
        if version1 != version2:
            raise InvalidArgumentError(
                f"Fingerprint versions differ: v{version1} vs v{version2}",
                details={"hash1": first.hash, "hash2": second.hash},
            )
        if version1 != FORMAT_VERSION:
            raise InvalidArgumentError(
                f"Unsupported fingerprint version: v{version1}",
                details={"supported": FORMAT_VERSION},
            )


_default_comparator = None


def _comparator() -> FingerprintComparator:
    global _default_comparator
    if _default_comparator is None:
        _default_comparator = FingerprintComparator()
    return _default_comparator


def similarity(first: Fingerprint, second: Fingerprint) -> float:
    """Similarity of two fingerprints with default settings."""
    return _comparator().similarity(first, second)


def is_equivalent(first: Fingerprint, second: Fingerprint, threshold: float = 0.95) -> bool:
    """Equivalence check with default settings."""
    return _comparator().is_equivalent(first, second, threshold)


def compare_hashes(first: Fingerprint, second: Fingerprint) -> HashComparison:
    """Detailed comparison with default settings."""
    return _comparator().compare(first, second)


def group_by_similarity(
    items: Sequence[T],
    threshold: float = 0.80,
    key: Optional[Callable[[T], Fingerprint]] = None,
) -> List[List[T]]:
    """Greedy clustering with default settings."""
    return _comparator().group_by_similarity(items, threshold, key)
