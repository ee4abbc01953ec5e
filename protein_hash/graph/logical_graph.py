"""
Logical graph data structures.

Defines the weighted, directed graph the fingerprinting stages work on:
typed operation nodes connected by parent -> child dataflow edges.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

import networkx as nx

from protein_hash.core.exceptions import InvalidInputError

logger = logging.getLogger(__name__)


class NodeCategory(Enum):
    """Coarse role of a node in the logical graph."""
    OPERATION = "operation"
    DATA = "data"
    CONTROL = "control"
    PURE = "pure"


@dataclass
class GraphNode:
    """
    Node in the logical graph.

    The symbol carries a declared function name or a callee name. It is
    used to resolve calls during recursion detection and never enters the
    fingerprint.
    """

    id: int
    category: NodeCategory
    label: str
    weight: float
    symbol: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = {
            "id": self.id,
            "category": self.category.value,
            "label": self.label,
            "weight": self.weight,
        }
        if self.symbol:
            data["symbol"] = self.symbol
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GraphNode":
        return cls(
            id=int(data["id"]),
            category=NodeCategory(data["category"]),
            label=data["label"],
            weight=float(data["weight"]),
            symbol=data.get("symbol"),
        )


@dataclass
class GraphEdge:
    """Directed structural edge from a parent node to a child node."""

    source_id: int
    target_id: int
    edge_type: str = "dataflow"
    weight: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "source_id": self.source_id,
            "target_id": self.target_id,
            "edge_type": self.edge_type,
            "weight": self.weight,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GraphEdge":
        return cls(
            source_id=int(data["source_id"]),
            target_id=int(data["target_id"]),
            edge_type=data.get("edge_type", "dataflow"),
            weight=float(data.get("weight", 1.0)),
        )


class LogicalGraph:
    """
    Weighted logical graph of one code fragment.

    Wraps a NetworkX directed graph and keeps nodes and edges in insertion
    order, which the spectral analyzer uses as its matrix index order.
    """

    def __init__(self, name: str = ""):
        self.name = name
        self._graph = nx.DiGraph()
        self._nodes: Dict[int, GraphNode] = {}
        self._edges: Dict[Tuple[int, int], GraphEdge] = {}

    @property
    def node_count(self) -> int:
        """Number of nodes in the graph."""
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        """Number of edges in the graph."""
        return len(self._edges)

    @property
    def nodes(self) -> List[GraphNode]:
        """Nodes in insertion order."""
        return list(self._nodes.values())

    @property
    def edges(self) -> List[GraphEdge]:
        """Edges in insertion order."""
        return list(self._edges.values())

    def add_node(self, node: GraphNode) -> None:
        """
        Add a node to the graph.

        Args:
            node: GraphNode to add.

        Raises:
            InvalidInputError: If a node with the same id already exists.
        """
        if node.id in self._nodes:
            raise InvalidInputError(
                f"Duplicate node id: {node.id}", details={"node_id": node.id}
            )

        self._nodes[node.id] = node
        self._graph.add_node(
            node.id,
            category=node.category.value,
            label=node.label,
            weight=node.weight,
        )

    def add_edge(self, edge: GraphEdge) -> None:
        """
        Add an edge to the graph.

        Args:
            edge: GraphEdge to add.

        Raises:
            InvalidInputError: If either endpoint is not in the graph.
        """
        for node_id in (edge.source_id, edge.target_id):
            if node_id not in self._nodes:
                raise InvalidInputError(
                    f"Edge references unknown node: {node_id}",
                    details={"source_id": edge.source_id, "target_id": edge.target_id},
                )

        self._edges[(edge.source_id, edge.target_id)] = edge
        self._graph.add_edge(
            edge.source_id,
            edge.target_id,
            edge_type=edge.edge_type,
            weight=edge.weight,
        )

    def get_node(self, node_id: int) -> Optional[GraphNode]:
        """Get a node by ID."""
        return self._nodes.get(node_id)

    def successors(self, node_id: int) -> List[int]:
        """Direct children of a node."""
        return list(self._graph.successors(node_id))

    def out_degree(self, node_id: int) -> int:
        return self._graph.out_degree(node_id)

    def get_nodes_by_category(self, category: NodeCategory) -> List[GraphNode]:
        """Get all nodes of a specific category."""
        return [node for node in self._nodes.values() if node.category == category]

    def get_nodes_by_label(self, label: str) -> List[GraphNode]:
        return [node for node in self._nodes.values() if node.label == label]

    def iter_nodes(self) -> Iterator[GraphNode]:
        """Iterate over all nodes."""
        yield from self._nodes.values()

    def iter_edges(self) -> Iterator[GraphEdge]:
        """Iterate over all edges."""
        yield from self._edges.values()

    def get_label_distribution(self) -> Dict[str, int]:
        """Count nodes per label."""
        distribution: Dict[str, int] = {}
        for node in self._nodes.values():
            distribution[node.label] = distribution.get(node.label, 0) + 1
        return distribution

    def get_statistics(self) -> Dict[str, Any]:
        """Get graph statistics."""
        if self.node_count == 0:
            return {
                "node_count": 0,
                "edge_count": 0,
                "label_distribution": {},
            }

        return {
            "node_count": self.node_count,
            "edge_count": self.edge_count,
            "label_distribution": self.get_label_distribution(),
            "density": nx.density(self._graph),
            "avg_degree": sum(d for _, d in self._graph.degree()) / self.node_count,
            "connected_components": (
                nx.number_weakly_connected_components(self._graph)
            ),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert graph to dictionary for serialization."""
        return {
            "name": self.name,
            "nodes": [node.to_dict() for node in self._nodes.values()],
            "edges": [edge.to_dict() for edge in self._edges.values()],
            "statistics": self.get_statistics(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LogicalGraph":
        """Rebuild a graph from its dictionary form."""
        graph = cls(name=data.get("name", ""))
        for node_data in data.get("nodes", []):
            graph.add_node(GraphNode.from_dict(node_data))
        for edge_data in data.get("edges", []):
            graph.add_edge(GraphEdge.from_dict(edge_data))
        return graph

    def save(self, path: Path) -> None:
        """
        Save graph to file.

        Args:
            path: Path to save the graph.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

        logger.info(f"Graph saved to {path}")

    @classmethod
    def load(cls, path: Path) -> "LogicalGraph":
        """
        Load graph from file.

        Args:
            path: Path to the graph file.

        Returns:
            Loaded LogicalGraph.
        """
        with open(path, "r") as f:
            data = json.load(f)

        graph = cls.from_dict(data)
        logger.info(f"Graph loaded from {path}")
        return graph

    def get_networkx_graph(self) -> nx.DiGraph:
        """Get the underlying NetworkX graph."""
        return self._graph
