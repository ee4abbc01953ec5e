"""
Logical graph construction.

Provides the weighted graph representation of a code fragment, the
operator classifier and the builder that turns syntax trees into graphs.
"""

from protein_hash.graph.logical_graph import LogicalGraph, GraphNode, GraphEdge, NodeCategory
from protein_hash.graph.classifier import OperationClassifier, OperationSignature, OperationCategory
from protein_hash.graph.builder import GraphBuilder, build_graph

__all__ = [
    "LogicalGraph",
    "GraphNode",
    "GraphEdge",
    "NodeCategory",
    "OperationClassifier",
    "OperationSignature",
    "OperationCategory",
    "GraphBuilder",
    "build_graph",
]
