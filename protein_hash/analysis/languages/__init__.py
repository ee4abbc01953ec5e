"""
Language-specific front-ends.

This package contains pluggable front-ends that turn source text into
SyntaxNode trees for the graph builder.

Supported Languages:
    - Python: AST-based (native Python ast module)
    - JavaScript/TypeScript/TSX: Tree-sitter based
"""

# Base classes
from protein_hash.analysis.languages.base_treesitter_frontend import (
    BaseTreeSitterFrontend,
    TreeSitterSyntaxNode,
)

# Language front-ends - importing registers them with the registry
from protein_hash.analysis.languages import python_frontend
from protein_hash.analysis.languages import javascript_frontend

__all__ = [
    "BaseTreeSitterFrontend",
    "TreeSitterSyntaxNode",
    "python_frontend",
    "javascript_frontend",
]
