"""
Graph builder for constructing logical graphs from syntax trees.

Walks a parse tree once in deterministic pre-order and emits one weighted
node per retained syntax node, connected to its nearest retained ancestor
by a dataflow edge. Identifier subtrees are elided so that names never
reach the graph.
"""

import logging
import math
from typing import Callable, Dict, List, Optional, Tuple

from protein_hash.analysis.syntax import NodeKind, SyntaxNode
from protein_hash.core.exceptions import InvalidInputError, ResourceLimitExceededError
from protein_hash.graph.classifier import OperationClassifier
from protein_hash.graph.logical_graph import GraphEdge, GraphNode, LogicalGraph, NodeCategory

logger = logging.getLogger(__name__)

DEFAULT_MAX_NODES = 2000

LITERAL_WEIGHT = 0.3
FUNCTION_WEIGHT = 0.5
CONTROL_WEIGHT = 10.0
CALL_WEIGHT = 15.0
RETURN_WEIGHT = 0.8
DEFAULT_WEIGHT = 1.0

FUNCTION_LABEL = "Function"
CALL_LABEL = "Call"
CONTROL_LABEL_PREFIX = "Control:"
LOOP_LABELS = frozenset({"Control:For", "Control:ForIn", "Control:While", "Control:DoWhile"})

# (category, label, weight) for one syntax node
NodePolicy = Tuple[NodeCategory, str, float]


class GraphBuilder:
    """
    Converts a syntax tree into a LogicalGraph.

    A builder holds only read-only settings, so one instance may be
    reused across requests.
    """

    def __init__(self, classifier=None, max_nodes: int = DEFAULT_MAX_NODES):
        self.classifier = classifier or OperationClassifier()
        self.max_nodes = max_nodes
        self._dispatch: Dict[NodeKind, Callable[[SyntaxNode], NodePolicy]] = {
            NodeKind.LITERAL: lambda n: (NodeCategory.DATA, "Literal", LITERAL_WEIGHT),
            NodeKind.FUNCTION: lambda n: (NodeCategory.PURE, FUNCTION_LABEL, FUNCTION_WEIGHT),
            NodeKind.CONTROL: self._control_policy,
            NodeKind.LOOP: self._control_policy,
            NodeKind.CALL: lambda n: (NodeCategory.OPERATION, CALL_LABEL, CALL_WEIGHT),
            NodeKind.RETURN: lambda n: (NodeCategory.OPERATION, "Return", RETURN_WEIGHT),
            NodeKind.BINARY: self._operator_policy,
            NodeKind.UNARY: self._operator_policy,
            NodeKind.ASSIGNMENT: self._operator_policy,
            NodeKind.AWAIT: lambda n: (NodeCategory.OPERATION, "Await", DEFAULT_WEIGHT),
            NodeKind.OTHER: lambda n: (NodeCategory.OPERATION, n.type or "Unknown", DEFAULT_WEIGHT),
        }

    def build(self, root: SyntaxNode, name: str = "") -> LogicalGraph:
        """
        Build a logical graph from a parse tree.

        Args:
            root: Root of the parse tree.
            name: Optional graph name for diagnostics.

        Returns:
            LogicalGraph with ids 0..n-1 in pre-order. A root without
            structural children yields an empty graph.

        Raises:
            InvalidInputError: If the tree is missing or malformed.
            ResourceLimitExceededError: If the graph grows past max_nodes.
        """
        if root is None:
            raise InvalidInputError("Cannot build a graph from a missing syntax tree")

        graph = LogicalGraph(name=name)
        root_children = self._children_of(root)
        if not root_children:
            logger.debug("Syntax tree has no structural children, graph is empty")
            return graph

        # Keep visited nodes referenced so their ids cannot be reused
        visited: Dict[int, SyntaxNode] = {}
        stack: List[Tuple[SyntaxNode, Optional[int]]] = [(root, None)]

        while stack:
            node, parent_id = stack.pop()

            if id(node) in visited:
                raise InvalidInputError(
                    "Syntax node reached twice, input is not a tree",
                    details={"node_type": getattr(node, "type", None)},
                )
            visited[id(node)] = node

            kind = self._kind_of(node)
            if kind == NodeKind.IDENTIFIER:
                continue

            node_id = graph.node_count
            if node_id >= self.max_nodes:
                logger.error(f"Graph exceeded node limit of {self.max_nodes}")
                raise ResourceLimitExceededError(node_id + 1, self.max_nodes)

            category, label, weight = self._dispatch[kind](node)
            symbol = node.symbol if kind in (NodeKind.FUNCTION, NodeKind.CALL) else None
            graph.add_node(GraphNode(
                id=node_id,
                category=category,
                label=label,
                weight=weight,
                symbol=symbol,
            ))
            if parent_id is not None:
                graph.add_edge(GraphEdge(source_id=parent_id, target_id=node_id))

            children = root_children if node is root else self._children_of(node)
            for child in reversed(children):
                stack.append((child, node_id))

        logger.debug(
            f"Built logical graph: {graph.node_count} nodes, {graph.edge_count} edges"
        )
        return graph

    def _control_policy(self, node: SyntaxNode) -> NodePolicy:
        construct = node.construct or node.type
        return NodeCategory.CONTROL, f"{CONTROL_LABEL_PREFIX}{construct}", CONTROL_WEIGHT

    def _operator_policy(self, node: SyntaxNode) -> NodePolicy:
        signature = self.classifier.classify(node)
        if signature is None:
            prefix = "UnaryOp" if node.kind == NodeKind.UNARY else "BinaryOp"
            return NodeCategory.OPERATION, f"{prefix}:{node.operator}", DEFAULT_WEIGHT

        weight = signature.weight
        if not isinstance(weight, (int, float)) or not math.isfinite(weight) or weight <= 0:
            raise InvalidInputError(
                f"Classifier weight must be finite and positive, got {weight!r}",
                details={"label": signature.label},
            )
        return signature.node_category, signature.label, float(weight)

    @staticmethod
    def _kind_of(node) -> NodeKind:
        kind = getattr(node, "kind", None)
        if not isinstance(kind, NodeKind):
            raise InvalidInputError(
                f"Syntax node has no valid kind: {node!r}",
                details={"kind": repr(kind)},
            )
        return kind

    def _children_of(self, node) -> List[SyntaxNode]:
        self._kind_of(node)
        children_fn = getattr(node, "children", None)
        if not callable(children_fn):
            raise InvalidInputError(f"Syntax node does not expose children(): {node!r}")
        children = children_fn()
        if children is None:
            return []
        return list(children)


def build_graph(root: SyntaxNode, classifier=None, max_nodes: int = DEFAULT_MAX_NODES) -> LogicalGraph:
    """Convenience wrapper building a graph with a one-off GraphBuilder."""
    return GraphBuilder(classifier=classifier, max_nodes=max_nodes).build(root)
