"""
Spectral fingerprinting of logical graphs.

Builds the weighted graph Laplacian, takes its largest eigenvalues,
quantizes them and hashes the canonical text of the result. Two graphs
with the same weighted structure always receive the same fingerprint;
the eigenvalues are kept alongside the hash for graded comparison.
"""

import hashlib
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np
from scipy import linalg

from protein_hash.core.config import FingerprintConfig, SUPPORTED_ALGORITHMS
from protein_hash.core.exceptions import (
    ComputationError,
    InvalidArgumentError,
    ResourceLimitExceededError,
)
from protein_hash.graph.builder import CALL_LABEL
from protein_hash.graph.logical_graph import LogicalGraph

logger = logging.getLogger(__name__)

HASH_PREFIX = "phash"
FORMAT_VERSION = 2
DIGEST_LENGTH = 16
EMPTY_CANONICAL = "empty"

# Calls that count as pure arithmetic for the purity score
MATH_FUNCTIONS = frozenset({"abs", "min", "max", "round", "pow", "sum", "divmod"})
ASYNC_PURITY_FACTOR = 0.5
ASSIGNMENT_PURITY_FACTOR = 0.8
CALL_PURITY_FACTOR = 0.9


def parse_phash(text: str) -> Tuple[int, str, str]:
    """
    Split fingerprint text into its parts.

    Args:
        text: Hash text such as "phash:v2:sha256:0123456789abcdef".

    Returns:
        Tuple of (version, algorithm, hex digest).

    Raises:
        InvalidArgumentError: If the text is not a well-formed hash.
    """
    if not isinstance(text, str):
        raise InvalidArgumentError(f"Hash must be a string, got {type(text).__name__}")

    parts = text.split(":")
    if len(parts) != 4 or parts[0] != HASH_PREFIX:
        raise InvalidArgumentError(f"Malformed hash: {text!r}", details={"hash": text})

    _, version_text, algorithm, digest = parts
    if not version_text.startswith("v") or not version_text[1:].isdigit():
        raise InvalidArgumentError(f"Malformed hash version: {text!r}", details={"hash": text})

    if algorithm not in SUPPORTED_ALGORITHMS:
        raise InvalidArgumentError(
            f"Unsupported hash algorithm: {algorithm}", details={"hash": text}
        )

    if len(digest) != DIGEST_LENGTH or any(c not in "0123456789abcdef" for c in digest):
        raise InvalidArgumentError(f"Malformed hash digest: {text!r}", details={"hash": text})

    return int(version_text[1:]), algorithm, digest


def format_phash(canonical: str, algorithm: str = "sha256") -> str:
    """Digest a canonical string and render it as fingerprint text."""
    digest = hashlib.new(algorithm, canonical.encode("utf-8")).hexdigest()
    return f"{HASH_PREFIX}:v{FORMAT_VERSION}:{algorithm}:{digest[:DIGEST_LENGTH]}"


def quantize(values: Sequence[float], levels: int) -> Tuple[float, ...]:
    """Round values onto a 1/levels grid, normalizing negative zero."""
    return tuple(round(float(v) * levels) / levels + 0.0 for v in values)


def canonical_string(values: Sequence[float]) -> str:
    """Canonical text of a quantized spectrum."""
    return ",".join(repr(v) for v in values)


@dataclass(frozen=True)
class Fingerprint:
    """Spectral fingerprint of one logical graph."""

    hash: str
    eigenvalues: Tuple[float, ...]
    node_count: int = 0
    edge_count: int = 0
    complexity: float = 0.0
    purity: float = 1.0

    @property
    def version(self) -> int:
        return parse_phash(self.hash)[0]

    @property
    def algorithm(self) -> str:
        return parse_phash(self.hash)[1]

    @property
    def is_empty(self) -> bool:
        return self.node_count == 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "hash": self.hash,
            "eigenvalues": list(self.eigenvalues),
            "node_count": self.node_count,
            "edge_count": self.edge_count,
            "complexity": self.complexity,
            "purity": self.purity,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Fingerprint":
        return cls(
            hash=data["hash"],
            eigenvalues=tuple(float(v) for v in data.get("eigenvalues", [])),
            node_count=int(data.get("node_count", 0)),
            edge_count=int(data.get("edge_count", 0)),
            complexity=float(data.get("complexity", 0.0)),
            purity=float(data.get("purity", 1.0)),
        )


class SpectralAnalyzer:
    """
    Computes spectral fingerprints of logical graphs.

    Each edge contributes the weight of the node it flows into, so node
    weights (operators, calls, control constructs) shape the spectrum
    while the Laplacian stays symmetric and positive semi-definite.
    """

    def __init__(self, config: Optional[FingerprintConfig] = None):
        self.config = config or FingerprintConfig()
        self.config.validate()

    def fingerprint(self, graph: LogicalGraph) -> Fingerprint:
        """
        Compute the fingerprint of a graph.

        Args:
            graph: Logical graph from the builder.

        Returns:
            Fingerprint with hash, quantized spectrum and metrics.

        Raises:
            ResourceLimitExceededError: If the graph exceeds max_nodes.
            ComputationError: If the eigensolver fails.
        """
        n = graph.node_count
        if n == 0:
            return self.empty_fingerprint()

        spectrum = self.compute_spectrum(graph)
        eigenvalues = quantize(spectrum, self.config.quantization_levels)
        phash = format_phash(canonical_string(eigenvalues), self.config.algorithm)

        logger.debug(f"Fingerprint {phash} for graph with {n} nodes")

        return Fingerprint(
            hash=phash,
            eigenvalues=eigenvalues,
            node_count=n,
            edge_count=graph.edge_count,
            complexity=self.compute_complexity(graph),
            purity=self.compute_purity(graph),
        )

    def empty_fingerprint(self) -> Fingerprint:
        """Fixed fingerprint of the empty graph."""
        return Fingerprint(
            hash=format_phash(EMPTY_CANONICAL, self.config.algorithm),
            eigenvalues=(),
        )

    def laplacian(self, graph: LogicalGraph) -> np.ndarray:
        """
        Build the weighted Laplacian L = D - A.

        Nodes are indexed in insertion order. For each edge (u, v, w),
        A[u][v] and A[v][u] both receive w times the weight of v.

        Scaling by the target weight departs from a plain A = w matrix.
        Edge weights alone leave operator nodes out of the spectrum, so
        a + b and a * b would be cospectral.
        """
        n = graph.node_count
        if n > self.config.max_nodes:
            logger.warning(f"Graph has {n} nodes, limit is {self.config.max_nodes}")
            raise ResourceLimitExceededError(n, self.config.max_nodes)

        index = {node.id: i for i, node in enumerate(graph.iter_nodes())}
        adjacency = np.zeros((n, n), dtype=np.float64)

        for edge in graph.iter_edges():
            u = index[edge.source_id]
            v = index[edge.target_id]
            value = edge.weight * graph.get_node(edge.target_id).weight
            adjacency[u, v] += value
            if u != v:
                adjacency[v, u] += value

        if not np.isfinite(adjacency).all():
            raise ComputationError(
                "Adjacency matrix contains non-finite entries",
                details={"node_count": n},
            )

        degree = np.diag(adjacency.sum(axis=1))
        return degree - adjacency

    def compute_spectrum(self, graph: LogicalGraph) -> np.ndarray:
        """
        Largest eigenvalues of the graph Laplacian, descending.

        Returns:
            Array of at most eigenvalue_count eigenvalues.
        """
        matrix = self.laplacian(graph)
        n = matrix.shape[0]
        k = min(self.config.eigenvalue_count, n)

        try:
            values = linalg.eigh(
                matrix,
                eigvals_only=True,
                subset_by_index=[n - k, n - 1],
            )
        except (linalg.LinAlgError, ValueError) as e:
            logger.error(f"Eigensolver failed on {n}x{n} Laplacian: {e}")
            raise ComputationError(
                f"Eigenvalue computation failed: {e}",
                details={"node_count": n},
            ) from e

        if not np.isfinite(values).all():
            raise ComputationError("Eigensolver returned non-finite values")

        return values[::-1]

    @staticmethod
    def compute_complexity(graph: LogicalGraph) -> float:
        """Cyclomatic-style complexity (e - n + 2) / n, floored at 0."""
        n = graph.node_count
        if n == 0:
            return 0.0
        return max(0, graph.edge_count - n + 2) / n

    @staticmethod
    def compute_purity(graph: LogicalGraph) -> float:
        """
        Heuristic side-effect score in [0, 1].

        Starts at 1.0 and is multiplied down for each await or promise
        construction, assignment and non-arithmetic call.
        """
        score = 1.0
        for node in graph.iter_nodes():
            if node.label == "Await" or _is_promise_call(node.label, node.symbol):
                score *= ASYNC_PURITY_FACTOR
            elif node.label.startswith("Assignment:"):
                score *= ASSIGNMENT_PURITY_FACTOR
            elif node.label == CALL_LABEL and not _is_math_call(node.symbol):
                score *= CALL_PURITY_FACTOR
        return max(0.0, score)


def _is_promise_call(label: str, symbol: Optional[str]) -> bool:
    if label != CALL_LABEL or not symbol:
        return False
    return symbol == "Promise" or symbol.startswith("Promise.")


def _is_math_call(symbol: Optional[str]) -> bool:
    if not symbol:
        return False
    return symbol.startswith(("Math.", "math.")) or symbol in MATH_FUNCTIONS


def spectral_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Euclidean distance between two spectra, zero-padded to equal length."""
    size = max(len(a), len(b))
    va = np.zeros(size)
    vb = np.zeros(size)
    va[:len(a)] = a
    vb[:len(b)] = b
    return float(np.linalg.norm(va - vb))
