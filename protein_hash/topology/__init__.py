"""
Topological analysis of logical graphs.
"""

from protein_hash.topology.analyzer import TopologyAnalyzer, TopologyFeatures

__all__ = [
    "TopologyAnalyzer",
    "TopologyFeatures",
]
