"""
Main engine for the Protein Hash system.

Provides a high-level interface tying parsing, graph construction,
spectral fingerprinting and topology analysis together.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from protein_hash.analysis import FrontendRegistry, SyntaxNode, compute_ast_hash
from protein_hash.core.config import Config, HasherConfig
from protein_hash.core.exceptions import InvalidArgumentError, LanguageNotSupportedError
from protein_hash.graph.builder import GraphBuilder
from protein_hash.similarity.comparator import FingerprintComparator, HashComparison
from protein_hash.spectral.analyzer import FORMAT_VERSION, Fingerprint, SpectralAnalyzer, parse_phash
from protein_hash.topology.analyzer import TopologyAnalyzer, TopologyFeatures
from protein_hash.utils.validation import read_source_file

logger = logging.getLogger(__name__)

HYBRID_SEPARATOR = "|"


@dataclass(frozen=True)
class HashResult:
    """Everything computed for one code fragment."""

    fingerprint: Fingerprint
    topology: TopologyFeatures
    ast_hash: str
    language: str
    version: int = FORMAT_VERSION

    @property
    def phash(self) -> str:
        return self.fingerprint.hash

    @property
    def eigenvalues(self) -> Tuple[float, ...]:
        return self.fingerprint.eigenvalues

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "phash": self.phash,
            "ast_hash": self.ast_hash,
            "language": self.language,
            "version": self.version,
            "fingerprint": self.fingerprint.to_dict(),
            "topology": self.topology.to_dict(),
        }


class ProteinHasher:
    """
    Structural fingerprinting engine.

    Holds only read-only configuration, so a single instance can hash any
    number of fragments.
    """

    def __init__(
        self,
        config: Optional[HasherConfig] = None,
        classifier=None,
        language: Optional[str] = None,
    ):
        self.config = config or Config.get()
        self.config.validate()
        self.language = language or self.config.default_language

        self.builder = GraphBuilder(
            classifier=classifier,
            max_nodes=self.config.fingerprint.max_nodes,
        )
        self.spectral = SpectralAnalyzer(self.config.fingerprint)
        self.topology = TopologyAnalyzer()
        self.comparator = FingerprintComparator(self.config.similarity)

    def compute_hash(self, code: str, language: Optional[str] = None) -> HashResult:
        """
        Fingerprint a source fragment.

        Args:
            code: Source text.
            language: Language identifier; defaults to the hasher's language.

        Returns:
            HashResult for the fragment.

        Raises:
            LanguageNotSupportedError: If no front-end handles the language.
            InvalidInputError: If the source does not parse.
        """
        language = language or self.language
        frontend = FrontendRegistry.get_frontend(language)
        if frontend is None:
            raise LanguageNotSupportedError(language)

        root = frontend.parse(code)
        return self.hash_tree(root, language)

    def hash_tree(self, root: SyntaxNode, language: str = "unknown") -> HashResult:
        """
        Fingerprint an already parsed syntax tree.

        Args:
            root: Root of the parse tree.
            language: Language recorded in the result.

        Returns:
            HashResult for the tree.
        """
        graph = self.builder.build(root)
        fingerprint = self.spectral.fingerprint(graph)
        topology = self.topology.analyze(graph)

        return HashResult(
            fingerprint=fingerprint,
            topology=topology,
            ast_hash=compute_ast_hash(root),
            language=language,
        )

    def hash_file(self, path: str, language: Optional[str] = None) -> HashResult:
        """
        Fingerprint a source file.

        Args:
            path: File to read.
            language: Language override; detected from the extension otherwise.

        Returns:
            HashResult for the file contents.
        """
        if language is None:
            language = FrontendRegistry.language_for_path(path)
            if language is None:
                raise LanguageNotSupportedError(Path(path).suffix or str(path))

        logger.info(f"Hashing {path} as {language}")
        return self.compute_hash(read_source_file(path), language)

    def compare_similarity(self, first: HashResult, second: HashResult) -> float:
        """Similarity of two results in [0, 1]."""
        return self.comparator.similarity(first.fingerprint, second.fingerprint)

    def compare(self, first: HashResult, second: HashResult) -> HashComparison:
        """Detailed comparison of two results."""
        return self.comparator.compare(first.fingerprint, second.fingerprint)

    def is_equivalent(self, first: HashResult, second: HashResult) -> bool:
        return self.comparator.is_equivalent(first.fingerprint, second.fingerprint)

    def group(
        self,
        items: Sequence[Any],
        threshold: Optional[float] = None,
        key: Optional[Callable[[Any], HashResult]] = None,
    ) -> List[List[Any]]:
        """
        Greedy grouping by fingerprint similarity.

        Items are HashResults, or arbitrary values when key maps each one
        to its HashResult. Groups preserve input order.
        """
        to_result = key or (lambda item: item)
        return self.comparator.group_by_similarity(
            items, threshold, key=lambda item: to_result(item).fingerprint
        )


def create_hasher(
    language: Optional[str] = None,
    config: Optional[HasherConfig] = None,
) -> ProteinHasher:
    """
    Create a configured hasher.

    Args:
        language: Default language for the hasher.
        config: Optional configuration.

    Returns:
        ProteinHasher instance.

    Raises:
        LanguageNotSupportedError: If no front-end handles the language.
    """
    if language is not None and not FrontendRegistry.has_frontend(language):
        raise LanguageNotSupportedError(language)
    return ProteinHasher(config=config, language=language)


def quick_hash(code: str, language: str = "javascript") -> str:
    """Fingerprint text of a source fragment."""
    return create_hasher(language).compute_hash(code).phash


def compute_similarity(code1: str, code2: str, language: str = "javascript") -> float:
    """Similarity of two source fragments."""
    hasher = create_hasher(language)
    return hasher.compare_similarity(hasher.compute_hash(code1), hasher.compute_hash(code2))


def is_semantically_equivalent(
    code1: str,
    code2: str,
    language: str = "javascript",
) -> bool:
    """True when two fragments reach the equivalence threshold."""
    hasher = create_hasher(language)
    return hasher.is_equivalent(hasher.compute_hash(code1), hasher.compute_hash(code2))


def group_sources(
    codes: Sequence[str],
    threshold: float = 0.80,
    language: str = "javascript",
) -> List[List[str]]:
    """
    Group source fragments by structural similarity.

    Args:
        codes: Source fragments.
        threshold: Minimum similarity to join a group.
        language: Language of every fragment.

    Returns:
        Groups of the original fragments.
    """
    hasher = create_hasher(language)
    hashed = [(code, hasher.compute_hash(code)) for code in codes]
    groups = hasher.group(hashed, threshold, key=lambda pair: pair[1])
    return [[code for code, _ in group] for group in groups]


def generate_hybrid_id(phash: str, cid: str) -> str:
    """
    Combine a fingerprint with a content identifier.

    Args:
        phash: Fingerprint text.
        cid: Content identifier such as a content hash or IPFS CID.

    Returns:
        "<phash>|<cid>".
    """
    parse_phash(phash)
    if not cid or HYBRID_SEPARATOR in cid:
        raise InvalidArgumentError(f"Invalid content identifier: {cid!r}")
    return f"{phash}{HYBRID_SEPARATOR}{cid}"


def parse_hybrid_id(hybrid_id: str) -> Tuple[str, str]:
    """
    Split a hybrid id into (phash, cid).

    Raises:
        InvalidArgumentError: If the id is not of the form "<phash>|<cid>".
    """
    parts = hybrid_id.split(HYBRID_SEPARATOR)
    if len(parts) != 2 or not parts[1]:
        raise InvalidArgumentError(f"Malformed hybrid id: {hybrid_id!r}")
    parse_phash(parts[0])
    return parts[0], parts[1]
