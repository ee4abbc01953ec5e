"""
Base Tree-sitter Front-end Module.

Provides an abstract base class for language front-ends using tree-sitter
for AST-based parsing. Tree-sitter offers consistent, fast, and reliable
parsing across multiple programming languages, so each grammar only has
to describe which of its node types fall into which syntax category.
"""

import logging
from abc import abstractmethod
from typing import Dict, List, Optional, Set

from protein_hash.analysis.registry import BaseLanguageFrontend
from protein_hash.analysis.syntax import NodeKind, SyntaxNode
from protein_hash.core.exceptions import InvalidInputError

logger = logging.getLogger(__name__)


class TreeSitterSyntaxNode(SyntaxNode):
    """SyntaxNode view over a tree-sitter node."""

    def __init__(self, node, content_bytes: bytes, frontend: "BaseTreeSitterFrontend"):
        self._node = node
        self._content = content_bytes
        self._frontend = frontend
        self.type = node.type
        self.kind = frontend.kind_for(node)
        self.construct = frontend.CONSTRUCT_NAMES.get(node.type)
        self.operator = frontend.operator_for(node, self.kind)
        self.symbol = frontend.symbol_for(node, self.kind, content_bytes)

    def children(self) -> List[SyntaxNode]:
        # Literals are leaves: the text of a string or number is not structure
        if self.kind == NodeKind.LITERAL:
            return []
        return [
            TreeSitterSyntaxNode(child, self._content, self._frontend)
            for child in self._node.named_children
            if child.type not in self._frontend.COMMENT_NODE_TYPES
        ]


class BaseTreeSitterFrontend(BaseLanguageFrontend):
    """
    Abstract base class for tree-sitter based front-ends.

    Subclasses must implement:
        - _initialize_parser(): Configure the tree-sitter parser

    and fill in the node type tables below for their grammar.
    """

    LANGUAGE: str = "unknown"
    SUPPORTED_EXTENSIONS: List[str] = []

    # Tree-sitter node types for common constructs (override in subclasses)
    IDENTIFIER_NODE_TYPES: Set[str] = set()
    LITERAL_NODE_TYPES: Set[str] = set()
    FUNCTION_NODE_TYPES: Set[str] = set()
    CALL_NODE_TYPES: Set[str] = set()
    RETURN_NODE_TYPES: Set[str] = set()
    BINARY_NODE_TYPES: Set[str] = set()
    UNARY_NODE_TYPES: Set[str] = set()
    ASSIGNMENT_NODE_TYPES: Set[str] = set()
    AWAIT_NODE_TYPES: Set[str] = set()
    COMMENT_NODE_TYPES: Set[str] = {"comment", "line_comment", "block_comment"}

    # Control constructs: node type -> construct name
    CONTROL_NODE_TYPES: Dict[str, str] = {}
    LOOP_NODE_TYPES: Dict[str, str] = {}

    # Field holding the callee of a call node, by node type
    CALLEE_FIELDS: Dict[str, str] = {}

    # Parent node types that bind a name to an anonymous function: type -> field
    BINDING_FIELDS: Dict[str, str] = {}

    def __init__(self):
        self._parser = None
        self._language = None
        self._kind_table = self._build_kind_table()
        self.CONSTRUCT_NAMES = {**self.CONTROL_NODE_TYPES, **self.LOOP_NODE_TYPES}

    @abstractmethod
    def _initialize_parser(self) -> bool:
        """
        Initialize the tree-sitter parser with language grammar.

        Returns:
            True if initialization successful, False otherwise.
        """
        pass

    def _build_kind_table(self) -> Dict[str, NodeKind]:
        """Build the node type -> NodeKind lookup once per front-end."""
        table: Dict[str, NodeKind] = {}
        groups = (
            (self.IDENTIFIER_NODE_TYPES, NodeKind.IDENTIFIER),
            (self.LITERAL_NODE_TYPES, NodeKind.LITERAL),
            (self.FUNCTION_NODE_TYPES, NodeKind.FUNCTION),
            (self.CONTROL_NODE_TYPES, NodeKind.CONTROL),
            (self.LOOP_NODE_TYPES, NodeKind.LOOP),
            (self.CALL_NODE_TYPES, NodeKind.CALL),
            (self.RETURN_NODE_TYPES, NodeKind.RETURN),
            (self.BINARY_NODE_TYPES, NodeKind.BINARY),
            (self.UNARY_NODE_TYPES, NodeKind.UNARY),
            (self.ASSIGNMENT_NODE_TYPES, NodeKind.ASSIGNMENT),
            (self.AWAIT_NODE_TYPES, NodeKind.AWAIT),
        )
        for node_types, kind in groups:
            for node_type in node_types:
                table[node_type] = kind
        return table

    def parse(self, source: str) -> SyntaxNode:
        """
        Parse source text with tree-sitter.

        Args:
            source: Source code content as string.

        Returns:
            Root SyntaxNode of the parse tree.

        Raises:
            InvalidInputError: If the parser is unavailable or the source
                contains syntax errors.
        """
        if source is None:
            raise InvalidInputError("Source text is required")

        if not self._parser and not self._initialize_parser():
            raise InvalidInputError(
                f"Tree-sitter parser unavailable for {self.LANGUAGE}",
                details={"language": self.LANGUAGE},
            )

        content_bytes = source.encode("utf-8")
        tree = self._parser.parse(content_bytes)
        root = tree.root_node

        if root.has_error:
            error_node = self._first_error(root)
            line = error_node.start_point[0] + 1 if error_node is not None else None
            raise InvalidInputError(
                f"Syntax error in {self.LANGUAGE} source",
                details={"language": self.LANGUAGE, "line": line},
            )

        return TreeSitterSyntaxNode(root, content_bytes, self)

    def kind_for(self, node) -> NodeKind:
        """Shallow category of a tree-sitter node."""
        return self._kind_table.get(node.type, NodeKind.OTHER)

    def operator_for(self, node, kind: NodeKind) -> Optional[str]:
        """Operator token of an operator node, if any."""
        if kind not in (NodeKind.BINARY, NodeKind.UNARY, NodeKind.ASSIGNMENT):
            return None
        operator_node = node.child_by_field_name("operator")
        if operator_node is not None:
            return operator_node.type
        if kind == NodeKind.ASSIGNMENT:
            return "="
        return None

    def symbol_for(self, node, kind: NodeKind, content_bytes: bytes) -> Optional[str]:
        """Declared name of a function, or callee text of a call."""
        if kind == NodeKind.CALL:
            field = self.CALLEE_FIELDS.get(node.type)
            callee = node.child_by_field_name(field) if field else None
            if callee is None:
                return None
            return self._get_node_text(callee, content_bytes)

        if kind == NodeKind.FUNCTION:
            name_node = node.child_by_field_name("name")
            if name_node is not None:
                return self._get_node_text(name_node, content_bytes)
            parent = node.parent
            if parent is not None and parent.type in self.BINDING_FIELDS:
                target = parent.child_by_field_name(self.BINDING_FIELDS[parent.type])
                if target is not None and target.type in self.IDENTIFIER_NODE_TYPES:
                    return self._get_node_text(target, content_bytes)

        return None

    def _first_error(self, node):
        """Find the first ERROR or missing node in document order."""
        stack = [node]
        while stack:
            current = stack.pop()
            if current.type == "ERROR" or current.is_missing:
                return current
            stack.extend(reversed(current.children))
        return None

    def _get_node_text(self, node, content_bytes: bytes) -> str:
        """Extract text content from a tree-sitter node."""
        return content_bytes[node.start_byte:node.end_byte].decode("utf-8")
