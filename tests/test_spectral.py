"""
Unit tests for spectral fingerprinting.
"""

import math
import re
import unittest

import networkx as nx
import numpy as np

from protein_hash.core.config import FingerprintConfig
from protein_hash.core.exceptions import (
    ComputationError,
    InvalidArgumentError,
    ResourceLimitExceededError,
)
from protein_hash.graph.logical_graph import GraphEdge, GraphNode, LogicalGraph, NodeCategory
from protein_hash.spectral.analyzer import (
    Fingerprint,
    SpectralAnalyzer,
    canonical_string,
    format_phash,
    parse_phash,
    quantize,
    spectral_distance,
)

HASH_PATTERN = re.compile(r"^phash:v2:sha256:[0-9a-f]{16}$")


def make_graph(weights, edges, labels=None, symbols=None):
    graph = LogicalGraph()
    for i, weight in enumerate(weights):
        label = labels[i] if labels else "Node"
        symbol = symbols[i] if symbols else None
        graph.add_node(GraphNode(i, NodeCategory.OPERATION, label, weight, symbol))
    for source, target in edges:
        graph.add_edge(GraphEdge(source, target))
    return graph


def star(leaves=3):
    return make_graph([1.0] * (leaves + 1), [(0, i) for i in range(1, leaves + 1)])


class TestQuantization(unittest.TestCase):
    """Tests for spectrum quantization helpers."""

    def test_quantize_rounds_to_grid(self):
        self.assertEqual(quantize([3.65712, 0.00049], 1000), (3.657, 0.0))

    def test_negative_zero_normalized(self):
        values = quantize([-1e-12], 1000)
        self.assertEqual(math.copysign(1.0, values[0]), 1.0)

    def test_canonical_string(self):
        self.assertEqual(canonical_string((4.0, 1.0, 0.0)), "4.0,1.0,0.0")

    def test_format_and_parse(self):
        phash = format_phash("4.0,1.0", "sha256")

        self.assertRegex(phash, HASH_PATTERN)
        version, algorithm, digest = parse_phash(phash)
        self.assertEqual(version, 2)
        self.assertEqual(algorithm, "sha256")
        self.assertEqual(len(digest), 16)

    def test_parse_rejects_malformed(self):
        for text in (
            "",
            "phash:v2:sha256",
            "xhash:v2:sha256:0123456789abcdef",
            "phash:2:sha256:0123456789abcdef",
            "phash:v2:md5:0123456789abcdef",
            "phash:v2:sha256:0123",
            "phash:v2:sha256:0123456789abcdeg",
            None,
        ):
            with self.assertRaises(InvalidArgumentError):
                parse_phash(text)


class TestSpectralAnalyzer(unittest.TestCase):
    """Tests for Laplacian spectra and fingerprints."""

    def setUp(self):
        self.analyzer = SpectralAnalyzer()

    def test_star_spectrum(self):
        fingerprint = self.analyzer.fingerprint(star(3))

        self.assertEqual(fingerprint.eigenvalues, (4.0, 1.0, 1.0, 0.0))
        self.assertRegex(fingerprint.hash, HASH_PATTERN)
        self.assertEqual(fingerprint.node_count, 4)
        self.assertEqual(fingerprint.edge_count, 3)

    def test_node_weight_scales_edge(self):
        graph = make_graph([1.0, 3.0], [(0, 1)])
        self.assertEqual(self.analyzer.fingerprint(graph).eigenvalues, (6.0, 0.0))

    def test_top_k_only(self):
        fingerprint = self.analyzer.fingerprint(star(9))

        self.assertEqual(len(fingerprint.eigenvalues), 5)
        self.assertEqual(fingerprint.eigenvalues[0], 10.0)
        self.assertEqual(list(fingerprint.eigenvalues), sorted(fingerprint.eigenvalues, reverse=True))

    def test_determinism(self):
        graph = make_graph([1.0, 8.0, 0.3, 0.3, 15.0], [(0, 1), (1, 2), (1, 3), (0, 4)])

        self.assertEqual(self.analyzer.fingerprint(graph), self.analyzer.fingerprint(graph))

    def test_labels_and_symbols_do_not_matter(self):
        first = make_graph([1.0, 2.0], [(0, 1)], labels=["A", "B"], symbols=["f", None])
        second = make_graph([1.0, 2.0], [(0, 1)], labels=["C", "D"])

        self.assertEqual(
            self.analyzer.fingerprint(first).hash,
            self.analyzer.fingerprint(second).hash,
        )

    def test_weights_matter(self):
        first = make_graph([1.0, 1.0], [(0, 1)])
        second = make_graph([1.0, 8.0], [(0, 1)])

        self.assertNotEqual(
            self.analyzer.fingerprint(first).hash,
            self.analyzer.fingerprint(second).hash,
        )

    def test_empty_graph_sentinel(self):
        fingerprint = self.analyzer.fingerprint(LogicalGraph())

        self.assertEqual(fingerprint.hash, format_phash("empty"))
        self.assertEqual(fingerprint.eigenvalues, ())
        self.assertEqual(fingerprint.complexity, 0.0)
        self.assertTrue(fingerprint.is_empty)

    def test_single_node(self):
        fingerprint = self.analyzer.fingerprint(make_graph([1.0], []))
        self.assertEqual(fingerprint.eigenvalues, (0.0,))

    def test_alternative_algorithm(self):
        analyzer = SpectralAnalyzer(FingerprintConfig(algorithm="blake2b"))
        fingerprint = analyzer.fingerprint(star(3))

        self.assertTrue(fingerprint.hash.startswith("phash:v2:blake2b:"))
        self.assertEqual(fingerprint.algorithm, "blake2b")
        self.assertEqual(fingerprint.version, 2)

    def test_laplacian_matches_networkx(self):
        weights = [0.5, 1.0, 10.0, 0.8, 8.0, 0.3]
        edges = [(0, 1), (0, 2), (2, 3), (3, 4), (4, 5)]
        graph = make_graph(weights, edges)

        reference = nx.Graph()
        reference.add_nodes_from(range(len(weights)))
        for source, target in edges:
            reference.add_edge(source, target, weight=weights[target])
        expected = nx.laplacian_matrix(reference, nodelist=range(len(weights))).toarray()

        np.testing.assert_allclose(self.analyzer.laplacian(graph), expected)

    def test_node_limit(self):
        analyzer = SpectralAnalyzer(FingerprintConfig(max_nodes=3))
        with self.assertRaises(ResourceLimitExceededError):
            analyzer.fingerprint(star(3))

    def test_non_finite_weight(self):
        graph = make_graph([1.0, math.inf], [(0, 1)])
        with self.assertRaises(ComputationError):
            self.analyzer.fingerprint(graph)

    def test_complexity(self):
        self.assertEqual(self.analyzer.fingerprint(star(3)).complexity, 0.25)

    def test_purity(self):
        cases = [
            (["Call"], ["fetch"], 0.9),
            (["Call"], ["Math.max"], 1.0),
            (["Call"], ["abs"], 1.0),
            (["Call"], ["Promise.all"], 0.5),
            (["Await"], [None], 0.5),
            (["Assignment:assignment"], [None], 0.8),
            (["Literal"], [None], 1.0),
        ]
        for labels, symbols, expected in cases:
            graph = make_graph(
                [1.0, 1.0], [(0, 1)], labels=["Function"] + labels, symbols=[None] + symbols
            )
            self.assertAlmostEqual(
                self.analyzer.fingerprint(graph).purity, expected, msg=str(labels + symbols)
            )

    def test_fingerprint_round_trip_dict(self):
        fingerprint = self.analyzer.fingerprint(star(3))
        self.assertEqual(Fingerprint.from_dict(fingerprint.to_dict()), fingerprint)

    def test_spectral_distance_pads(self):
        self.assertEqual(spectral_distance((3.0, 4.0), ()), 5.0)
        self.assertEqual(spectral_distance((1.0,), (1.0, 0.0)), 0.0)


if __name__ == "__main__":
    unittest.main()
