"""
Custom exceptions for the Protein Hash engine.

Provides a hierarchy of exceptions for the fingerprinting stages,
enabling precise error handling and clear failure reporting.
"""


class ProteinHashError(Exception):
    """Base exception for all fingerprinting errors."""

    def __init__(self, message: str, stage: str = None, details: dict = None):
        super().__init__(message)
        self.stage = stage
        self.details = details or {}

    def __str__(self):
        base_msg = super().__str__()
        if self.stage:
            return f"[{self.stage}] {base_msg}"
        return base_msg


class InvalidInputError(ProteinHashError):
    """Raised when a parse tree is missing or structurally malformed."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, stage="GraphConstruction", details=details)


class ResourceLimitExceededError(ProteinHashError):
    """Raised when a graph grows past the configured node ceiling."""

    def __init__(self, node_count: int, max_nodes: int):
        super().__init__(
            f"Graph has {node_count} nodes, limit is {max_nodes}",
            stage="Resources",
            details={"node_count": node_count, "max_nodes": max_nodes},
        )
        self.node_count = node_count
        self.max_nodes = max_nodes


class ComputationError(ProteinHashError):
    """Raised when the eigensolver cannot produce a spectrum."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, stage="Spectral", details=details)


class InvalidArgumentError(ProteinHashError):
    """Raised when comparator inputs are malformed or incompatible."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, stage="Similarity", details=details)


class LanguageNotSupportedError(InvalidInputError):
    """Raised when no front-end is registered for a language."""

    def __init__(self, language: str):
        super().__init__(
            f"No front-end available for language: {language}",
            details={"language": language}
        )
        self.language = language
