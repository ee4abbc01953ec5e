"""
JavaScript and TypeScript Front-end Module.

Provides tree-sitter based parsing for JavaScript and TypeScript source
files. TSX gets its own front-end because the TypeScript grammar does
not accept JSX. The grammars share their expression and statement node
types, so the TypeScript front-ends only swap the grammar and add their
own identifier-like node types.
"""

import logging

import tree_sitter_javascript as ts_javascript
import tree_sitter_typescript as ts_typescript
from tree_sitter import Language, Parser

from protein_hash.analysis.registry import FrontendRegistry
from protein_hash.analysis.languages.base_treesitter_frontend import BaseTreeSitterFrontend

logger = logging.getLogger(__name__)


@FrontendRegistry.register
class JavaScriptFrontend(BaseTreeSitterFrontend):
    """
    Tree-sitter based front-end for JavaScript source code.

    Recognizes:
        - Functions (declarations, expressions, arrows, methods, generators)
        - Control flow (if, switch, try) and loops (for, for-in/of, while, do)
        - Calls and constructor calls
        - Binary, unary, update and assignment operators
    """

    LANGUAGE = "javascript"
    SUPPORTED_EXTENSIONS = [".js", ".jsx", ".mjs", ".cjs"]

    IDENTIFIER_NODE_TYPES = {
        "identifier",
        "property_identifier",
        "shorthand_property_identifier",
        "shorthand_property_identifier_pattern",
        "private_property_identifier",
        "statement_identifier",
        "type_identifier",
        "this",
        "super",
    }
    LITERAL_NODE_TYPES = {
        "number",
        "string",
        "template_string",
        "regex",
        "true",
        "false",
        "null",
        "undefined",
    }
    FUNCTION_NODE_TYPES = {
        "function_declaration",
        "function_expression",
        "function",
        "arrow_function",
        "method_definition",
        "generator_function_declaration",
        "generator_function",
    }
    CALL_NODE_TYPES = {"call_expression", "new_expression"}
    RETURN_NODE_TYPES = {"return_statement"}
    BINARY_NODE_TYPES = {"binary_expression"}
    UNARY_NODE_TYPES = {"unary_expression", "update_expression"}
    ASSIGNMENT_NODE_TYPES = {"assignment_expression", "augmented_assignment_expression"}
    AWAIT_NODE_TYPES = {"await_expression"}
    COMMENT_NODE_TYPES = {"comment", "html_comment", "hash_bang_line"}

    CONTROL_NODE_TYPES = {
        "if_statement": "If",
        "switch_statement": "Switch",
        "try_statement": "Try",
    }
    LOOP_NODE_TYPES = {
        "for_statement": "For",
        "for_in_statement": "ForIn",
        "while_statement": "While",
        "do_statement": "DoWhile",
    }

    CALLEE_FIELDS = {
        "call_expression": "function",
        "new_expression": "constructor",
    }
    BINDING_FIELDS = {
        "variable_declarator": "name",
        "assignment_expression": "left",
        "pair": "key",
    }

    def _initialize_parser(self) -> bool:
        """Initialize tree-sitter parser with JavaScript grammar."""
        try:
            self._language = Language(ts_javascript.language())
            self._parser = Parser(self._language)
            return True
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to initialize JavaScript parser: {e}")
            return False


@FrontendRegistry.register
class TypeScriptFrontend(JavaScriptFrontend):
    """
    Tree-sitter based front-end for TypeScript source code.

    Type names are treated like identifiers so that annotations naming
    different types do not change the structure.
    """

    LANGUAGE = "typescript"
    SUPPORTED_EXTENSIONS = [".ts", ".mts", ".cts"]

    IDENTIFIER_NODE_TYPES = JavaScriptFrontend.IDENTIFIER_NODE_TYPES | {
        "predefined_type",
        "nested_type_identifier",
    }

    def _initialize_parser(self) -> bool:
        """Initialize tree-sitter parser with TypeScript grammar."""
        try:
            self._language = Language(ts_typescript.language_typescript())
            self._parser = Parser(self._language)
            return True
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to initialize TypeScript parser: {e}")
            return False


@FrontendRegistry.register
class TsxFrontend(TypeScriptFrontend):
    """Tree-sitter based front-end for TypeScript with JSX."""

    LANGUAGE = "tsx"
    SUPPORTED_EXTENSIONS = [".tsx"]

    def _initialize_parser(self) -> bool:
        """Initialize tree-sitter parser with the TSX grammar."""
        try:
            self._language = Language(ts_typescript.language_tsx())
            self._parser = Parser(self._language)
            return True
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to initialize TSX parser: {e}")
            return False
