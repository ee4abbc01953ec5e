"""
Normalized syntax-tree hash.

A conventional structural hash reported alongside the spectral
fingerprint. Node types, operators and nesting are hashed; identifier text is
replaced by a fixed token, so renaming does not change the result but
any other syntax difference does.
"""

import hashlib
import json
from typing import List

from protein_hash.analysis.syntax import NodeKind, SyntaxNode
from protein_hash.core.exceptions import InvalidInputError

IDENTIFIER_TOKEN = "ID"


def normalize_tree(root: SyntaxNode) -> List[str]:
    """
    Flatten a syntax tree into a bracketed token stream.

    Args:
        root: Root of the parse tree.

    Returns:
        Tokens such as ["(", "program", "(", "identifier", "ID", ")", ")"].
    """
    if root is None:
        raise InvalidInputError("Cannot hash a missing syntax tree")

    tokens: List[str] = []
    stack = [root]
    while stack:
        item = stack.pop()
        if item is None:
            tokens.append(")")
            continue

        tokens.append("(")
        tokens.append(item.type)
        if item.kind == NodeKind.IDENTIFIER:
            tokens.append(IDENTIFIER_TOKEN)
        elif item.operator:
            tokens.append(item.operator)

        # None marks the closing bracket once all children are emitted
        stack.append(None)
        stack.extend(reversed(item.children()))

    return tokens


def compute_ast_hash(root: SyntaxNode) -> str:
    """
    Hash a syntax tree with identifiers normalized.

    Args:
        root: Root of the parse tree.

    Returns:
        First 16 hex characters of the SHA-256 digest.
    """
    canonical = json.dumps(normalize_tree(root), separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]
