"""
Python language front-end.

Provides parsing for Python source code using the AST module and
exposes the result through the SyntaxNode contract.
"""

import ast
import logging
from typing import List, Optional

from protein_hash.analysis.registry import FrontendRegistry, BaseLanguageFrontend
from protein_hash.analysis.syntax import NodeKind, SyntaxNode
from protein_hash.core.exceptions import InvalidInputError

logger = logging.getLogger(__name__)

# AST helper nodes that carry no structure of their own
_SKIPPED_NODE_CLASSES = (ast.expr_context, ast.operator, ast.unaryop, ast.boolop, ast.cmpop)

_KIND_BY_TYPE = {
    "Name": NodeKind.IDENTIFIER,
    "arg": NodeKind.IDENTIFIER,
    "alias": NodeKind.IDENTIFIER,
    "Constant": NodeKind.LITERAL,
    "FunctionDef": NodeKind.FUNCTION,
    "AsyncFunctionDef": NodeKind.FUNCTION,
    "Lambda": NodeKind.FUNCTION,
    "Call": NodeKind.CALL,
    "Return": NodeKind.RETURN,
    "BinOp": NodeKind.BINARY,
    "BoolOp": NodeKind.BINARY,
    "Compare": NodeKind.BINARY,
    "UnaryOp": NodeKind.UNARY,
    "Assign": NodeKind.ASSIGNMENT,
    "AugAssign": NodeKind.ASSIGNMENT,
    "AnnAssign": NodeKind.ASSIGNMENT,
    "NamedExpr": NodeKind.ASSIGNMENT,
    "Await": NodeKind.AWAIT,
}

CONTROL_CONSTRUCTS = {
    "If": "If",
    "Try": "Try",
    "TryStar": "Try",
    "Match": "Switch",
}

LOOP_CONSTRUCTS = {
    "For": "For",
    "AsyncFor": "For",
    "While": "While",
}

OPERATOR_SYMBOLS = {
    "Add": "+",
    "Sub": "-",
    "Mult": "*",
    "Div": "/",
    "FloorDiv": "//",
    "Mod": "%",
    "Pow": "**",
    "MatMult": "@",
    "LShift": "<<",
    "RShift": ">>",
    "BitOr": "|",
    "BitXor": "^",
    "BitAnd": "&",
    "And": "and",
    "Or": "or",
    "Eq": "==",
    "NotEq": "!=",
    "Lt": "<",
    "LtE": "<=",
    "Gt": ">",
    "GtE": ">=",
    "Is": "is",
    "IsNot": "is not",
    "In": "in",
    "NotIn": "not in",
    "UAdd": "+",
    "USub": "-",
    "Not": "not",
    "Invert": "~",
}


def _dotted_name(node: ast.AST) -> Optional[str]:
    """Render a Name/Attribute chain as dotted text, e.g. self.helper."""
    parts = []
    while isinstance(node, ast.Attribute):
        parts.append(node.attr)
        node = node.value
    if isinstance(node, ast.Name):
        parts.append(node.id)
        return ".".join(reversed(parts))
    return None


def _split_comparison(node: ast.Compare) -> ast.BoolOp:
    """
    Rewrite a chained comparison as the conjunction it evaluates to.

    a < b == c becomes (a < b) and (b == c), so every comparison operator
    gets its own BINARY node.
    """
    operands = [node.left] + node.comparators
    pairs = [
        ast.Compare(left=operands[i], ops=[op], comparators=[operands[i + 1]])
        for i, op in enumerate(node.ops)
    ]
    return ast.BoolOp(op=ast.And(), values=pairs)


class PythonSyntaxNode(SyntaxNode):
    """SyntaxNode view over a Python AST node."""

    def __init__(self, node: ast.AST, binding: Optional[str] = None):
        if isinstance(node, ast.Compare) and len(node.ops) > 1:
            node = _split_comparison(node)
        self._node = node
        self.type = type(node).__name__
        self.kind = self._classify()
        self.construct = CONTROL_CONSTRUCTS.get(self.type) or LOOP_CONSTRUCTS.get(self.type)
        self.operator = self._operator()
        self.symbol = self._symbol(binding)

    def _classify(self) -> NodeKind:
        if self.type in CONTROL_CONSTRUCTS:
            return NodeKind.CONTROL
        if self.type in LOOP_CONSTRUCTS:
            return NodeKind.LOOP
        return _KIND_BY_TYPE.get(self.type, NodeKind.OTHER)

    def _operator(self) -> Optional[str]:
        node = self._node
        if isinstance(node, (ast.BinOp, ast.BoolOp, ast.UnaryOp)):
            return OPERATOR_SYMBOLS.get(type(node.op).__name__)
        if isinstance(node, ast.Compare):
            # Single operator; chains are split on construction
            return OPERATOR_SYMBOLS.get(type(node.ops[0]).__name__)
        if isinstance(node, ast.AugAssign):
            return OPERATOR_SYMBOLS.get(type(node.op).__name__, "") + "="
        if isinstance(node, ast.NamedExpr):
            return ":="
        if isinstance(node, (ast.Assign, ast.AnnAssign)):
            return "="
        return None

    def _symbol(self, binding: Optional[str]) -> Optional[str]:
        node = self._node
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            return node.name
        if isinstance(node, ast.Lambda):
            return binding
        if isinstance(node, ast.Call):
            return _dotted_name(node.func)
        return None

    def _lambda_binding(self) -> Optional[str]:
        """Name a lambda is assigned to, for `f = lambda n: ...`."""
        node = self._node
        if isinstance(node, ast.Assign) and len(node.targets) == 1:
            target = node.targets[0]
        elif isinstance(node, (ast.AnnAssign, ast.NamedExpr)):
            target = node.target
        else:
            return None
        if isinstance(target, ast.Name) and isinstance(node.value, ast.Lambda):
            return target.id
        return None

    def children(self) -> List[SyntaxNode]:
        binding = self._lambda_binding()
        result = []
        for child in ast.iter_child_nodes(self._node):
            if isinstance(child, _SKIPPED_NODE_CLASSES):
                continue
            child_binding = binding if isinstance(child, ast.Lambda) else None
            result.append(PythonSyntaxNode(child, child_binding))
        return result


@FrontendRegistry.register
class PythonFrontend(BaseLanguageFrontend):
    """
    Front-end for Python source code.

    Uses Python's AST module, so no third-party grammar is needed.
    """

    LANGUAGE = "python"
    SUPPORTED_EXTENSIONS = [".py", ".pyw", ".pyi"]

    def parse(self, source: str) -> SyntaxNode:
        """
        Parse Python source text.

        Args:
            source: Source code content.

        Returns:
            Root SyntaxNode wrapping the ast.Module.

        Raises:
            InvalidInputError: On syntax errors.
        """
        if source is None:
            raise InvalidInputError("Source text is required")

        try:
            tree = ast.parse(source)
        except SyntaxError as e:
            raise InvalidInputError(
                f"Syntax error: {e.msg}",
                details={"language": self.LANGUAGE, "line": e.lineno},
            ) from e
        except ValueError as e:
            # Raised for source containing null bytes
            raise InvalidInputError(
                f"Unparseable source: {e}",
                details={"language": self.LANGUAGE},
            ) from e

        return PythonSyntaxNode(tree)
