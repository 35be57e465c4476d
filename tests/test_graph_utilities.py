# tests/test_graph_utilities.py
"""Tests for the node and edge dedup/merge helpers."""

import time

import pytest

from models.graph_models import GraphNode, GraphNodeData
from processing import graph_utilities
from processing.graph_utilities import GraphUtilities


def _node(node_id: str, label: str = "") -> GraphNode:
    return GraphNode(id=node_id, type="character", data=GraphNodeData(label=label or node_id))


class TestDeduplicateNodes:
    def test_keeps_first_occurrence(self):
        items = [_node("a", "first"), _node("b"), _node("a", "second")]

        result = graph_utilities.deduplicate_nodes(items)

        assert [n.id for n in result] == ["a", "b"]
        assert result[0].data.label == "first"

    def test_is_idempotent(self):
        items = [{"id": "a"}, {"id": "b"}, {"id": "a"}, {"id": "c"}, {"id": "b"}]

        once = graph_utilities.deduplicate_nodes(items)
        twice = graph_utilities.deduplicate_nodes(once)

        assert once == twice == [{"id": "a"}, {"id": "b"}, {"id": "c"}]

    def test_does_not_mutate_input(self):
        items = [{"id": "a"}, {"id": "a"}]

        graph_utilities.deduplicate_nodes(items)

        assert len(items) == 2

    def test_empty_input(self):
        assert graph_utilities.deduplicate_nodes([]) == []

    @pytest.mark.performance
    def test_thousand_items_under_a_millisecond(self):
        items = [_node(f"n{i % 500}") for i in range(1000)]

        best = float("inf")
        for _ in range(5):
            start = time.perf_counter()
            graph_utilities.deduplicate_nodes(items)
            best = min(best, time.perf_counter() - start)

        assert best < 0.001


class TestDeduplicateEdges:
    def test_by_id(self):
        edges = [
            {"id": "e1", "source": "a", "target": "b"},
            {"id": "e1", "source": "a", "target": "c"},
        ]

        assert graph_utilities.deduplicate_edges(edges) == [edges[0]]

    def test_by_pair_keeps_direction(self):
        edges = [
            {"id": "e1", "source": "a", "target": "b"},
            {"id": "e2", "source": "b", "target": "a"},
            {"id": "e3", "source": "a", "target": "b"},
        ]

        result = graph_utilities.deduplicate_edges_by_pair(edges)

        assert [e["id"] for e in result] == ["e1", "e2"]


class TestFilteringAndMerging:
    def test_filter_by_included_ids_preserves_order(self):
        items = [{"id": "c"}, {"id": "a"}, {"id": "b"}]

        result = graph_utilities.filter_by_included_ids(items, {"a", "c"})

        assert result == [{"id": "c"}, {"id": "a"}]

    def test_extract_ids(self):
        assert graph_utilities.extract_ids([_node("a"), _node("b"), _node("a")]) == {"a", "b"}

    def test_merge_and_deduplicate_across_arrays(self):
        result = graph_utilities.merge_and_deduplicate(
            [{"id": "a", "v": 1}],
            [{"id": "b"}, {"id": "a", "v": 2}],
            [],
        )

        assert result == [{"id": "a", "v": 1}, {"id": "b"}]

    def test_namespace_exposes_functions(self):
        assert GraphUtilities.deduplicate_nodes([{"id": "x"}, {"id": "x"}]) == [{"id": "x"}]
        assert GraphUtilities.extract_ids([{"id": "x"}]) == {"x"}
