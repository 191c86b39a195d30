"""Tests for out-degree coefficients."""

import pytest

from synset_rank import CoefStatus, KnowledgeGraph, NegativeWeightError, PersonalizationError, ppv_weights


@pytest.fixture
def weighted_graph():
    graph = KnowledgeGraph()
    a = graph.find_or_insert_synset("a")
    b = graph.find_or_insert_synset("b")
    c = graph.find_or_insert_synset("c")
    graph.find_or_insert_edge(a, b, 3.0)
    graph.find_or_insert_edge(a, c, 1.0)
    graph.find_or_insert_edge(b, c, 0.0)
    return graph


class TestCoefficients:

    def test_unweighted(self, weighted_graph):
        coefs = weighted_graph.weights.ensure(use_weight=False)
        assert list(coefs) == pytest.approx([0.5, 1.0, 0.0])
        assert weighted_graph.weights.status is CoefStatus.UNWEIGHTED

    def test_weighted(self, weighted_graph):
        coefs = weighted_graph.weights.ensure(use_weight=True)
        # b's only edge weighs 0, so b is dangling in weighted mode
        assert list(coefs) == pytest.approx([0.25, 0.0, 0.0])
        assert weighted_graph.weights.status is CoefStatus.WEIGHTED

    def test_transitions(self, weighted_graph):
        engine = weighted_graph.weights
        assert list(engine.transitions(False)) == pytest.approx([0.5, 0.5, 1.0])
        assert list(engine.transitions(True)) == pytest.approx([0.75, 0.25, 0.0])

    def test_dangling_mask(self, weighted_graph):
        assert list(weighted_graph.weights.dangling(False)) == [False, False, True]
        assert list(weighted_graph.weights.dangling(True)) == [False, True, True]

    def test_cached_until_mode_changes(self, weighted_graph):
        engine = weighted_graph.weights
        first = engine.ensure(use_weight=True)
        assert engine.ensure(use_weight=True) is first
        assert engine.ensure(use_weight=False) is not first

    def test_recomputed_after_mutation(self, weighted_graph):
        engine = weighted_graph.weights
        engine.ensure(use_weight=False)
        weighted_graph.find_or_insert_edge(2, 0, 1.0)
        assert engine.status is CoefStatus.UNCOMPUTED
        assert list(engine.ensure(use_weight=False)) == pytest.approx([0.5, 1.0, 1.0])

    def test_negative_weight_in_weighted_mode(self):
        graph = KnowledgeGraph()
        a = graph.find_or_insert_synset("a")
        graph.find_or_insert_edge(a, a, -1.0)
        with pytest.raises(NegativeWeightError):
            graph.weights.ensure(use_weight=True)


class TestPpvWeights:

    def test_forces_recomputation(self, weighted_graph):
        coefs = ppv_weights(weighted_graph, [1.0, 0.0, 0.0], use_weight=True)
        assert list(coefs) == pytest.approx([0.25, 0.0, 0.0])
        assert weighted_graph.weights.status is CoefStatus.WEIGHTED

    def test_length_mismatch(self, weighted_graph):
        with pytest.raises(PersonalizationError):
            ppv_weights(weighted_graph, [1.0])
