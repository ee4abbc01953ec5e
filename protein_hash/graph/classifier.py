"""
Operation classifier.

Maps operator nodes to a signature of category, subcategory and weight.
Weights are spread into bands per operator family so that swapping one
operator for another moves the spectrum far enough to be detected:
additive near 1-2, comparison 3.x, logical 4.x, bitwise 5.x,
multiplicative 8-10 and exponent 12.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from protein_hash.analysis.syntax import NodeKind, SyntaxNode
from protein_hash.graph.logical_graph import NodeCategory

logger = logging.getLogger(__name__)


class OperationCategory(Enum):
    """Operator families."""
    ARITHMETIC = "Arithmetic"
    COMPARISON = "Comparison"
    LOGICAL = "Logical"
    BITWISE = "Bitwise"
    ASSIGNMENT = "Assignment"
    TYPE_OPERATION = "TypeOperation"


@dataclass(frozen=True)
class OperationSignature:
    """Classification of one operator node."""

    category: OperationCategory
    subcategory: str
    weight: float

    @property
    def label(self) -> str:
        return f"{self.category.value}:{self.subcategory}"

    @property
    def node_category(self) -> NodeCategory:
        """Logical graph category for nodes carrying this operation."""
        if self.category == OperationCategory.ASSIGNMENT:
            return NodeCategory.DATA
        return NodeCategory.OPERATION


_Entry = Tuple[OperationCategory, str, float]

BINARY_OPERATIONS: Dict[str, _Entry] = {
    # Arithmetic
    "+": (OperationCategory.ARITHMETIC, "addition", 1.0),
    "-": (OperationCategory.ARITHMETIC, "subtraction", 2.0),
    "*": (OperationCategory.ARITHMETIC, "multiplication", 8.0),
    "@": (OperationCategory.ARITHMETIC, "matrix_multiplication", 8.5),
    "/": (OperationCategory.ARITHMETIC, "division", 9.0),
    "//": (OperationCategory.ARITHMETIC, "floor_division", 9.5),
    "%": (OperationCategory.ARITHMETIC, "modulo", 10.0),
    "**": (OperationCategory.ARITHMETIC, "exponentiation", 12.0),
    # Comparison
    "==": (OperationCategory.COMPARISON, "equality", 3.0),
    "!=": (OperationCategory.COMPARISON, "inequality", 3.1),
    "===": (OperationCategory.COMPARISON, "strict_equality", 3.2),
    "!==": (OperationCategory.COMPARISON, "strict_inequality", 3.3),
    "<": (OperationCategory.COMPARISON, "less_than", 3.4),
    "<=": (OperationCategory.COMPARISON, "less_equal", 3.5),
    ">": (OperationCategory.COMPARISON, "greater_than", 3.6),
    ">=": (OperationCategory.COMPARISON, "greater_equal", 3.7),
    "instanceof": (OperationCategory.COMPARISON, "instance_check", 3.75),
    "is": (OperationCategory.COMPARISON, "identity", 3.8),
    "in": (OperationCategory.COMPARISON, "membership", 3.85),
    "is not": (OperationCategory.COMPARISON, "non_identity", 3.9),
    "not in": (OperationCategory.COMPARISON, "non_membership", 3.95),
    # Logical
    "&&": (OperationCategory.LOGICAL, "and", 4.0),
    "and": (OperationCategory.LOGICAL, "and", 4.0),
    "||": (OperationCategory.LOGICAL, "or", 4.2),
    "or": (OperationCategory.LOGICAL, "or", 4.2),
    "??": (OperationCategory.LOGICAL, "nullish_coalescing", 4.4),
    # Bitwise
    "&": (OperationCategory.BITWISE, "and", 5.0),
    "|": (OperationCategory.BITWISE, "or", 5.1),
    "^": (OperationCategory.BITWISE, "xor", 5.2),
    "<<": (OperationCategory.BITWISE, "left_shift", 5.3),
    ">>": (OperationCategory.BITWISE, "right_shift", 5.4),
    ">>>": (OperationCategory.BITWISE, "unsigned_right_shift", 5.45),
}

UNARY_OPERATIONS: Dict[str, _Entry] = {
    "++": (OperationCategory.ARITHMETIC, "increment", 0.9),
    "--": (OperationCategory.ARITHMETIC, "decrement", 0.9),
    "+": (OperationCategory.ARITHMETIC, "unary_plus", 1.1),
    "-": (OperationCategory.ARITHMETIC, "negation", 1.2),
    "!": (OperationCategory.LOGICAL, "not", 1.5),
    "not": (OperationCategory.LOGICAL, "not", 1.5),
    "~": (OperationCategory.BITWISE, "not", 5.5),
    "typeof": (OperationCategory.TYPE_OPERATION, "typeof", 2.5),
    "void": (OperationCategory.TYPE_OPERATION, "void", 2.5),
    "delete": (OperationCategory.TYPE_OPERATION, "delete", 2.5),
}

ASSIGNMENT_WEIGHT = 0.5
COMPOUND_ASSIGNMENT_WEIGHT = 0.8


class OperationClassifier:
    """
    Default operator classification table.

    Subclasses may replace BINARY_OPERATIONS or UNARY_OPERATIONS; the
    graph builder accepts any object with a compatible classify().
    """

    BINARY_OPERATIONS = BINARY_OPERATIONS
    UNARY_OPERATIONS = UNARY_OPERATIONS

    def classify(self, node: SyntaxNode) -> Optional[OperationSignature]:
        """
        Classify an operator node.

        Args:
            node: Syntax node of kind BINARY, UNARY or ASSIGNMENT.

        Returns:
            OperationSignature, or None when the operator is unknown.
        """
        operator = node.operator
        if operator is None:
            return None

        if node.kind == NodeKind.BINARY:
            return self._lookup(self.BINARY_OPERATIONS, operator)

        if node.kind == NodeKind.UNARY:
            return self._lookup(self.UNARY_OPERATIONS, operator)

        if node.kind == NodeKind.ASSIGNMENT:
            return self._classify_assignment(operator)

        return None

    def _classify_assignment(self, operator: str) -> Optional[OperationSignature]:
        if operator in ("=", ":="):
            return OperationSignature(
                OperationCategory.ASSIGNMENT, "assignment", ASSIGNMENT_WEIGHT
            )

        # Compound forms such as += or **= reuse the base operator name
        if operator.endswith("="):
            base = self.BINARY_OPERATIONS.get(operator[:-1])
            if base is not None:
                return OperationSignature(
                    OperationCategory.ASSIGNMENT,
                    f"compound_{base[1]}",
                    COMPOUND_ASSIGNMENT_WEIGHT,
                )

        return None

    @staticmethod
    def _lookup(table: Dict[str, _Entry], operator: str) -> Optional[OperationSignature]:
        entry = table.get(operator)
        if entry is None:
            logger.debug(f"Unclassified operator: {operator}")
            return None
        return OperationSignature(*entry)
