"""
Topological analysis of logical graphs.

Extracts structural invariants that the spectrum alone does not expose:
cycles, recursion through the derived call graph, branching, nesting
depth, loop nesting and strongly connected components. Every traversal
uses an explicit stack so deep graphs never hit the recursion limit.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

import networkx as nx

from protein_hash.graph.builder import CALL_LABEL, FUNCTION_LABEL, LOOP_LABELS
from protein_hash.graph.logical_graph import LogicalGraph, NodeCategory

logger = logging.getLogger(__name__)

_WHITE, _GREY, _BLACK = 0, 1, 2

# Receivers that refer to the enclosing object or class
SELF_RECEIVERS = frozenset({"this", "self", "cls"})


def _callee_name(symbol: str) -> Optional[str]:
    """Function name a call resolves to, or None for calls on other objects."""
    receiver, _, name = symbol.rpartition(".")
    if not receiver or receiver in SELF_RECEIVERS:
        return name
    return None


@dataclass(frozen=True)
class TopologyFeatures:
    """Topological invariants of one logical graph."""

    has_cycles: bool
    has_recursion: bool
    branching_factor: float
    nesting_depth: int
    loop_complexity: int
    is_dag: bool
    scc_count: int
    signature: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "has_cycles": self.has_cycles,
            "has_recursion": self.has_recursion,
            "branching_factor": self.branching_factor,
            "nesting_depth": self.nesting_depth,
            "loop_complexity": self.loop_complexity,
            "is_dag": self.is_dag,
            "scc_count": self.scc_count,
            "signature": self.signature,
        }


class TopologyAnalyzer:
    """
    Analyzes the topology of logical graphs.

    Holds no per-request state; all traversal state is local to a call.
    """

    def analyze(self, graph: LogicalGraph) -> TopologyFeatures:
        """
        Compute all topological features of a graph.

        Args:
            graph: Any directed logical graph.

        Returns:
            TopologyFeatures for the graph.
        """
        has_cycles = self.detect_cycles(graph)
        branching_factor = self.branching_factor(graph)
        nesting_depth = self.nesting_depth(graph)
        loop_complexity = self.loop_complexity(graph)

        features = TopologyFeatures(
            has_cycles=has_cycles,
            has_recursion=self.detect_recursion(graph),
            branching_factor=branching_factor,
            nesting_depth=nesting_depth,
            loop_complexity=loop_complexity,
            is_dag=not has_cycles,
            scc_count=self.count_sccs(graph),
            signature=self.signature(graph, branching_factor, nesting_depth, loop_complexity),
        )
        logger.debug(f"Topology: {features.signature}")
        return features

    def detect_cycles(self, graph: LogicalGraph) -> bool:
        """True if any directed cycle exists (back edge into the DFS stack)."""
        color: Dict[int, int] = {node.id: _WHITE for node in graph.iter_nodes()}

        for start in color:
            if color[start] != _WHITE:
                continue

            color[start] = _GREY
            stack: List[Tuple[int, Iterator[int]]] = [(start, iter(graph.successors(start)))]
            while stack:
                node, successors = stack[-1]
                advanced = False
                for succ in successors:
                    if color[succ] == _GREY:
                        return True
                    if color[succ] == _WHITE:
                        color[succ] = _GREY
                        stack.append((succ, iter(graph.successors(succ))))
                        advanced = True
                        break
                if not advanced:
                    color[node] = _BLACK
                    stack.pop()

        return False

    def detect_recursion(self, graph: LogicalGraph) -> bool:
        """
        True if some function can reach itself through calls.

        Calls reachable from a function resolve by name to every function
        declaring that name. A dotted callee counts only when its receiver
        is this, self or cls, so items.push() inside push() is not a cycle.
        """
        functions = graph.get_nodes_by_label(FUNCTION_LABEL)
        if not functions:
            return False

        by_name: Dict[str, List[int]] = {}
        for function in functions:
            if function.symbol:
                by_name.setdefault(function.symbol, []).append(function.id)

        call_graph: Dict[int, Set[int]] = {}
        for function in functions:
            callees: Set[int] = set()
            for node_id in self._reachable(graph, function.id):
                node = graph.get_node(node_id)
                if node.label == CALL_LABEL and node.symbol:
                    callee_name = _callee_name(node.symbol)
                    if callee_name:
                        callees.update(by_name.get(callee_name, ()))
            call_graph[function.id] = callees

        for function_id, callees in call_graph.items():
            visited: Set[int] = set()
            stack = list(callees)
            while stack:
                current = stack.pop()
                if current == function_id:
                    return True
                if current in visited:
                    continue
                visited.add(current)
                stack.extend(call_graph.get(current, ()))

        return False

    @staticmethod
    def branching_factor(graph: LogicalGraph) -> float:
        """Mean out-degree over nodes with more than one child."""
        degrees = [
            graph.out_degree(node.id)
            for node in graph.iter_nodes()
            if graph.out_degree(node.id) > 1
        ]
        if not degrees:
            return 0.0
        return sum(degrees) / len(degrees)

    @staticmethod
    def nesting_depth(graph: LogicalGraph) -> int:
        """Largest BFS distance from a control or function node."""
        nx_graph = graph.get_networkx_graph()
        depth = 0
        for node in graph.iter_nodes():
            if node.category != NodeCategory.CONTROL and node.label != FUNCTION_LABEL:
                continue
            distances = nx.single_source_shortest_path_length(nx_graph, node.id)
            depth = max(depth, max(distances.values()))
        return depth

    @staticmethod
    def loop_complexity(graph: LogicalGraph) -> int:
        """Sum over loops of 1 + 2 x (other loops reachable from it)."""
        nx_graph = graph.get_networkx_graph()
        loops = {node.id for node in graph.iter_nodes() if node.label in LOOP_LABELS}
        total = 0
        for loop_id in loops:
            nested = nx.descendants(nx_graph, loop_id) & loops
            nested.discard(loop_id)
            total += 1 + 2 * len(nested)
        return total

    @staticmethod
    def count_sccs(graph: LogicalGraph) -> int:
        """Number of strongly connected components with more than one node (Tarjan)."""
        counter = 0
        indices: Dict[int, int] = {}
        lowlink: Dict[int, int] = {}
        on_stack: Set[int] = set()
        component_stack: List[int] = []
        count = 0

        for start in (node.id for node in graph.iter_nodes()):
            if start in indices:
                continue

            indices[start] = lowlink[start] = counter
            counter += 1
            component_stack.append(start)
            on_stack.add(start)
            work: List[Tuple[int, Iterator[int]]] = [(start, iter(graph.successors(start)))]

            while work:
                node, successors = work[-1]
                advanced = False
                for succ in successors:
                    if succ not in indices:
                        indices[succ] = lowlink[succ] = counter
                        counter += 1
                        component_stack.append(succ)
                        on_stack.add(succ)
                        work.append((succ, iter(graph.successors(succ))))
                        advanced = True
                        break
                    if succ in on_stack:
                        lowlink[node] = min(lowlink[node], indices[succ])
                if advanced:
                    continue

                work.pop()
                if work:
                    parent = work[-1][0]
                    lowlink[parent] = min(lowlink[parent], lowlink[node])

                if lowlink[node] == indices[node]:
                    size = 0
                    while True:
                        member = component_stack.pop()
                        on_stack.discard(member)
                        size += 1
                        if member == node:
                            break
                    if size > 1:
                        count += 1

        return count

    @staticmethod
    def signature(
        graph: LogicalGraph,
        branching_factor: float,
        nesting_depth: int,
        loop_complexity: int,
    ) -> str:
        """Compact text summary of the topology."""
        return (
            f"topo:{graph.node_count}:{graph.edge_count}:"
            f"{branching_factor:.2f}:{nesting_depth}:{loop_complexity}"
        )

    @staticmethod
    def _reachable(graph: LogicalGraph, start: int) -> Iterator[int]:
        """Breadth-first walk of nodes reachable from start, excluding it."""
        seen = {start}
        queue = deque(graph.successors(start))
        seen.update(queue)
        while queue:
            node_id = queue.popleft()
            yield node_id
            for succ in graph.successors(node_id):
                if succ not in seen:
                    seen.add(succ)
                    queue.append(succ)
