"""
Result formatters for different output formats.

Provides text and JSON renderings of hash results, pairwise
comparisons and similarity groups.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from protein_hash.engine import HashResult
from protein_hash.similarity.comparator import HashComparison

logger = logging.getLogger(__name__)

# (display name, result) pairs, usually file paths
LabeledResult = Tuple[str, HashResult]


class ResultFormatter(ABC):
    """Abstract base class for result formatters."""

    @abstractmethod
    def format(self, results: Sequence[LabeledResult]) -> str:
        """Format hash results to string."""
        pass

    @abstractmethod
    def format_comparison(self, first: str, second: str, comparison: HashComparison) -> str:
        """Format a pairwise comparison to string."""
        pass

    @abstractmethod
    def format_groups(self, groups: Sequence[Sequence[str]]) -> str:
        """Format similarity groups to string."""
        pass

    def save(self, results: Sequence[LabeledResult], path: Path) -> None:
        """Save formatted results to file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        content = self.format(results)
        with open(path, "w") as f:
            f.write(content)

        logger.info(f"Results saved to {path}")


class JSONFormatter(ResultFormatter):
    """Formats results as JSON for machine consumption."""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def format(self, results: Sequence[LabeledResult]) -> str:
        data = [{"source": label, **result.to_dict()} for label, result in results]
        return json.dumps(data, indent=self.indent)

    def format_comparison(self, first: str, second: str, comparison: HashComparison) -> str:
        data: Dict[str, Any] = {"first": first, "second": second, **comparison.to_dict()}
        return json.dumps(data, indent=self.indent)

    def format_groups(self, groups: Sequence[Sequence[str]]) -> str:
        return json.dumps([list(group) for group in groups], indent=self.indent)


class TextFormatter(ResultFormatter):
    """Formats results as human-readable text."""

    def __init__(self, width: int = 72):
        self.width = width
        self.section_char = "="
        self.subsection_char = "-"

    def format(self, results: Sequence[LabeledResult]) -> str:
        lines: List[str] = []
        for label, result in results:
            lines.extend(self._format_result(label, result))
        return "\n".join(lines)

    def _format_result(self, label: str, result: HashResult) -> List[str]:
        fingerprint = result.fingerprint
        topology = result.topology
        eigenvalues = ", ".join(f"{v:.3f}" for v in fingerprint.eigenvalues) or "(none)"

        return [
            self.subsection_char * self.width,
            label,
            self.subsection_char * self.width,
            f"  phash:       {result.phash}",
            f"  ast hash:    {result.ast_hash}",
            f"  language:    {result.language}",
            f"  eigenvalues: {eigenvalues}",
            f"  nodes/edges: {fingerprint.node_count}/{fingerprint.edge_count}",
            f"  complexity:  {fingerprint.complexity:.4f}",
            f"  purity:      {fingerprint.purity:.4f}",
            f"  topology:    {topology.signature}",
            f"  recursion:   {'yes' if topology.has_recursion else 'no'}",
            "",
        ]

    def format_comparison(self, first: str, second: str, comparison: HashComparison) -> str:
        verdict = "EQUIVALENT" if comparison.is_equivalent else "DIFFERENT"
        lines = [
            self.section_char * self.width,
            f"  {first}",
            f"  {comparison.hash1}",
            f"  {second}",
            f"  {comparison.hash2}",
            self.section_char * self.width,
            f"  Similarity:     {comparison.similarity:.4f} ({comparison.similarity * 100:.2f}%)",
            f"  Eigen distance: {comparison.eigen_distance:.4f}",
            self._format_score_bar("Similarity", comparison.similarity),
            f"  Verdict:        {verdict}",
        ]
        return "\n".join(lines)

    def format_groups(self, groups: Sequence[Sequence[str]]) -> str:
        lines = []
        for index, group in enumerate(groups, start=1):
            lines.append(f"Group {index} ({len(group)} members)")
            for member in group:
                lines.append(f"  {member}")
        return "\n".join(lines)

    def _format_score_bar(self, label: str, score: float) -> str:
        """Create a visual score bar."""
        bar_width = 40
        filled = int(score * bar_width)
        empty = bar_width - filled
        bar = "[" + "#" * filled + "." * empty + "]"
        return f"  {label:15} {bar} {score * 100:6.2f}%"


def get_formatter(format_type: str = "text") -> ResultFormatter:
    """Return the formatter for an output format name."""
    if format_type == "json":
        return JSONFormatter()
    return TextFormatter()


def format_results(
    results: Sequence[LabeledResult],
    format_type: str = "text",
    output_path: Optional[Path] = None,
) -> str:
    """
    Format and optionally save hash results.

    Args:
        results: (label, HashResult) pairs.
        format_type: Output format ("text", "json").
        output_path: Optional path to save the output.

    Returns:
        Formatted string.
    """
    formatter = get_formatter(format_type)
    formatted = formatter.format(results)

    if output_path:
        formatter.save(results, output_path)

    return formatted
