"""
Syntax layer with pluggable language front-ends.

Provides the SyntaxNode contract consumed by the graph builder and a
plugin-based registry where each language has its own front-end.
"""

from protein_hash.analysis.syntax import NodeKind, SyntaxNode, GenericSyntaxNode
from protein_hash.analysis.registry import FrontendRegistry, BaseLanguageFrontend
from protein_hash.analysis.ast_hash import compute_ast_hash

# Importing the languages package registers the built-in front-ends
from protein_hash.analysis import languages

__all__ = [
    "NodeKind",
    "SyntaxNode",
    "GenericSyntaxNode",
    "FrontendRegistry",
    "BaseLanguageFrontend",
    "compute_ast_hash",
    "languages",
]
