"""Tests for similarity scoring, TextRank ranking and sentence selection."""

import numpy as np
import pytest

from text_titler.datatypes import ORDER_BY_RANK
from text_titler.features import compute_similarity_matrix, sorensen_dice
from text_titler.graphing import build_graph, to_networkx, weight_matrix
from text_titler.preprocessing import parse_sentences
from text_titler.scoring import textrank_scores
from text_titler.summarize import SummarizerConfig, select_top, summarize

FRUIT_TEXT = (
    "Apples grow on trees. Rain falls on the city today. "
    "Apples and pears grow on trees. Pears and apples taste sweet."
)


class TestSorensenDice:
    def test_overlap(self):
        assert sorensen_dice(["a", "b"], ["b", "c"]) == pytest.approx(0.5)

    def test_symmetric(self):
        a, b = ["cats", "mammals", "pets"], ["dogs", "mammals"]
        assert sorensen_dice(a, b) == sorensen_dice(b, a)

    def test_self_similarity_is_one(self):
        assert sorensen_dice(["cats", "mammals"], ["cats", "mammals"]) == 1.0

    def test_empty_side_is_zero(self):
        assert sorensen_dice([], ["a"]) == 0.0
        assert sorensen_dice([], []) == 0.0

    def test_unique_tokens_only(self):
        assert sorensen_dice(["x", "x", "y"], ["x"]) == pytest.approx(2 / 3)


class TestSimilarityMatrix:
    def test_symmetric_zero_diagonal(self):
        M = compute_similarity_matrix(parse_sentences(FRUIT_TEXT))
        assert M.shape == (4, 4)
        assert np.allclose(M, M.T)
        assert np.all(np.diag(M) == 0.0)
        assert M[0, 2] == pytest.approx(6 / 7)
        assert M[1].sum() == 0.0

    def test_graph_omits_zero_edges(self):
        sentences = parse_sentences(FRUIT_TEXT)
        graph = build_graph(sentences, compute_similarity_matrix(sentences))
        pairs = {(e.i, e.j) for e in graph.edges}
        assert pairs == {(0, 2), (0, 3), (2, 3)}
        assert np.allclose(weight_matrix(graph), compute_similarity_matrix(sentences))
        assert to_networkx(graph).number_of_edges() == 3


class TestTextRank:
    def test_disconnected_graph_terminates(self):
        rank = textrank_scores(np.zeros((3, 3)))
        assert rank.converged
        assert rank.iterations == 2
        assert rank.scores == pytest.approx([0.15, 0.15, 0.15])

    def test_iteration_cap(self):
        rank = textrank_scores(np.zeros((3, 3)), max_iter=5, tolerance=0.0)
        assert rank.iterations == 5
        assert not rank.converged

    def test_pair_keeps_unit_scores(self):
        rank = textrank_scores(np.array([[0.0, 0.5], [0.5, 0.0]]))
        assert rank.scores == pytest.approx([1.0, 1.0])

    def test_hub_ranks_highest(self):
        W = np.array([[0, 1, 1], [1, 0, 0], [1, 0, 0]], dtype=float)
        scores = textrank_scores(W).scores
        assert scores[0] > scores[1]
        assert scores[1] == pytest.approx(scores[2])

    def test_isolated_node_gets_base_score(self):
        W = np.array([[0, 1, 0], [1, 0, 0], [0, 0, 0]], dtype=float)
        scores = textrank_scores(W, damping=0.85).scores
        assert scores[2] == pytest.approx(0.15)

    def test_empty(self):
        rank = textrank_scores(np.zeros((0, 0)))
        assert rank.scores == []


class TestSelection:
    def test_ties_break_by_position(self):
        sentences = parse_sentences("First plain sentence here. Second plain line there. Third odd words appear.")
        assert select_top(sentences, [0.15, 0.15, 0.15], 2, ordering=ORDER_BY_RANK) == [0, 1]

    def test_rank_ordering(self):
        result = summarize(FRUIT_TEXT, 2, cfg=SummarizerConfig(ordering=ORDER_BY_RANK))
        assert [s.position for s in result.sentences] == [2, 0]
        assert result.scores[0] > result.scores[1]

    def test_occurrence_ordering(self):
        result = summarize(FRUIT_TEXT, 2)
        assert [s.position for s in result.sentences] == [0, 2]

    def test_occurrence_ordering_is_monotone(self):
        result = summarize(FRUIT_TEXT, 3)
        positions = [s.position for s in result.sentences]
        assert positions == sorted(positions)

    def test_mammals_scenario(self, mammals_text):
        result = summarize(mammals_text, 2)
        assert result.texts == ["Cats are mammals.", "Dogs are mammals too."]

    def test_bound_respected(self, mammals_text):
        assert len(summarize(mammals_text, 10).sentences) == 4
        assert len(summarize(mammals_text, 1).sentences) == 1

    def test_deterministic(self):
        runs = [summarize(FRUIT_TEXT, 2, cfg=SummarizerConfig(ordering=ORDER_BY_RANK)).texts for _ in range(5)]
        assert all(r == runs[0] for r in runs)

    def test_empty_text(self):
        result = summarize("", 3)
        assert result.sentences == []

    @pytest.mark.parametrize("k", [0, -1, 1.5, True])
    def test_invalid_k(self, k):
        with pytest.raises(ValueError):
            summarize(FRUIT_TEXT, k)


class TestSummarizerConfig:
    def test_unknown_ordering(self):
        with pytest.raises(ValueError):
            SummarizerConfig(ordering="random")

    def test_damping_range(self):
        with pytest.raises(ValueError):
            SummarizerConfig(damping=1.5)
