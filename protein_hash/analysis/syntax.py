"""
Syntax tree contract consumed by the graph builder.

Front-ends wrap a third-party parse tree in SyntaxNode objects. The
builder only needs two capabilities: the node's structural children in
source order, and a shallow category tag from a closed set.
"""

from enum import Enum
from typing import List, Optional


class NodeKind(Enum):
    """Closed set of shallow syntax categories."""
    IDENTIFIER = "identifier"
    LITERAL = "literal"
    FUNCTION = "function"
    CONTROL = "control"
    LOOP = "loop"
    CALL = "call"
    RETURN = "return"
    BINARY = "binary"
    UNARY = "unary"
    ASSIGNMENT = "assignment"
    AWAIT = "await"
    OTHER = "other"


class SyntaxNode:
    """
    Read-only view of one parse tree node.

    Subclasses provide children() and whatever of kind, type, operator,
    symbol and construct their grammar can answer.
    """

    kind: NodeKind = NodeKind.OTHER

    # Raw grammar type, e.g. "binary_expression" or "BinOp"
    type: str = ""

    # Operator token for BINARY, UNARY and ASSIGNMENT nodes
    operator: Optional[str] = None

    # Declared function name, or callee text for CALL nodes
    symbol: Optional[str] = None

    # Control construct name for CONTROL and LOOP nodes
    construct: Optional[str] = None

    def children(self) -> List["SyntaxNode"]:
        """Structural children in source order."""
        raise NotImplementedError("Subclasses must implement children")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.value}:{self.type})"


class GenericSyntaxNode(SyntaxNode):
    """
    Plain in-memory syntax node.

    Useful for callers that bring their own parser and for tests.
    """

    def __init__(
        self,
        kind: NodeKind,
        type: str = "",
        children: Optional[List[SyntaxNode]] = None,
        operator: Optional[str] = None,
        symbol: Optional[str] = None,
        construct: Optional[str] = None,
    ):
        self.kind = kind
        self.type = type or kind.value
        self._children = list(children or [])
        self.operator = operator
        self.symbol = symbol
        self.construct = construct

    def children(self) -> List[SyntaxNode]:
        return list(self._children)
