# tests/test_filtering.py
"""Tests for depth-limited traversal and visible node resolution."""

from conftest import make_edge

from models.graph_models import GraphFilterState, GraphNode, GraphNodeData
from processing.filtering import (
    build_adjacency_map,
    build_visible_graph,
    filter_node_ids,
    filter_special_edges,
    get_nodes_within_depth,
    get_visible_node_ids,
    resolve_visible_node_ids,
)


def _node(node_id: str, node_type: str, label: str = "") -> GraphNode:
    return GraphNode(id=node_id, type=node_type, data=GraphNodeData(label=label or node_id))


class TestAdjacency:
    def test_edges_are_undirected(self):
        adjacency = build_adjacency_map([make_edge("a", "b")])

        assert adjacency == {"a": {"b"}, "b": {"a"}}

    def test_accepts_mappings(self):
        adjacency = build_adjacency_map([{"source": "a", "target": "b"}])

        assert adjacency["b"] == {"a"}


class TestNodesWithinDepth:
    def test_depth_one_from_c(self, chain_edges):
        assert get_nodes_within_depth("C", chain_edges, 1) == {"C", "B", "D", "E"}

    def test_depth_two_from_c(self, chain_edges):
        assert get_nodes_within_depth("C", chain_edges, 2) == {"A", "B", "C", "D", "E", "F"}

    def test_depth_zero_is_identity(self, chain_edges):
        assert get_nodes_within_depth("C", chain_edges, 0) == {"C"}

    def test_negative_depth_clamps_to_zero(self, chain_edges):
        assert get_nodes_within_depth("C", chain_edges, -3) == {"C"}

    def test_depth_is_monotonic(self, chain_edges):
        previous = set()
        for depth in range(5):
            current = get_nodes_within_depth("A", chain_edges, depth)
            assert previous <= current
            previous = current

    def test_isolated_focus(self, chain_edges):
        assert get_nodes_within_depth("Z", chain_edges, 3) == {"Z"}

    def test_empty_focus_stays_singleton(self, chain_edges):
        assert get_nodes_within_depth("", chain_edges, 2) == {""}

    def test_falsy_focus_id_is_not_traversed(self):
        assert get_nodes_within_depth(0, [{"source": 0, "target": 1}], 2) == {0}

    def test_infinite_depth_reaches_whole_component(self, chain_edges):
        assert get_nodes_within_depth("A", chain_edges, float("inf")) == {"A", "B", "C", "D", "E", "F"}

    def test_malformed_depth_is_zero(self, chain_edges):
        assert get_nodes_within_depth("C", chain_edges, float("nan")) == {"C"}
        assert get_nodes_within_depth("C", chain_edges, "deep") == {"C"}


class TestVisibleNodeIds:
    def test_pure_mode_returns_filtered(self, chain_edges):
        assert get_visible_node_ids("pure", {"C"}, chain_edges, "C", 3) == {"C"}

    def test_no_depth_returns_filtered(self, chain_edges):
        assert get_visible_node_ids("connected", {"C"}, chain_edges, None, None) == {"C"}
        assert get_visible_node_ids("focused", {"C"}, chain_edges, "C", 0) == {"C"}

    def test_unknown_mode_returns_filtered(self, chain_edges):
        assert get_visible_node_ids("sideways", {"C"}, chain_edges, "C", 2) == {"C"}

    def test_focused_without_focus_returns_filtered(self, chain_edges):
        assert get_visible_node_ids("focused", {"C", "D"}, chain_edges, None, 2) == {"C", "D"}

    def test_focused_ignoring_filters(self):
        edges = [make_edge("A", "B"), make_edge("B", "C"), make_edge("C", "D")]

        visible = get_visible_node_ids("focused", {"C", "D"}, edges, "B", 1, respect_filters=False)

        assert visible == {"A", "B", "C", "D"}

    def test_focused_respecting_filters_keeps_focus(self):
        edges = [make_edge("A", "B"), make_edge("B", "C"), make_edge("C", "D")]

        visible = get_visible_node_ids("focused", {"C", "D"}, edges, "B", 1, respect_filters=True)

        assert "B" in visible
        assert "A" not in visible

    def test_connected_respecting_filters_stays_in_filter(self, chain_edges):
        assert get_visible_node_ids("connected", {"C", "D"}, chain_edges, None, 2) == {"C", "D"}

    def test_connected_stays_in_filter_when_ignoring_filters(self, chain_edges):
        visible = get_visible_node_ids("connected", {"C", "D"}, chain_edges, None, 1, respect_filters=False)

        assert visible == {"C", "D"}

    def test_connected_expands_inside_filtered_subgraph(self, chain_edges):
        visible = get_visible_node_ids("connected", {"A", "B", "F"}, chain_edges, None, 3)

        assert visible == {"A", "B", "F"}

    def test_infinite_depth_is_unbounded(self, chain_edges):
        visible = get_visible_node_ids(
            "focused", {"A"}, chain_edges, "A", float("inf"), respect_filters=False
        )

        assert visible == {"A", "B", "C", "D", "E", "F"}

    def test_negative_infinite_depth_returns_filtered(self, chain_edges):
        assert get_visible_node_ids("connected", {"C"}, chain_edges, None, float("-inf")) == {"C"}

    def test_returns_new_set(self, chain_edges):
        filtered = {"C"}

        visible = get_visible_node_ids("pure", filtered, chain_edges)
        visible.add("X")

        assert filtered == {"C"}


class TestResolveVisibleNodeIds:
    def test_no_filter_shows_everything(self, chain_edges):
        state = GraphFilterState(visibility_mode="pure")

        assert resolve_visible_node_ids(state, {"A", "B", "C"}, chain_edges) == {"A", "B", "C"}

    def test_filter_narrows_default(self, chain_edges):
        state = GraphFilterState(visibility_mode="pure")

        assert resolve_visible_node_ids(state, {"A", "B", "C"}, chain_edges, {"B"}) == {"B"}

    def test_selection_neighbourhood_is_added(self, chain_edges):
        state = GraphFilterState(visibility_mode="pure", selected_node_id="F", connection_depth=1)

        visible = resolve_visible_node_ids(state, {"A", "B", "C", "D", "E", "F"}, chain_edges, {"A"})

        assert visible == {"A", "F", "D"}

    def test_focus_precedence_example(self):
        edges = [make_edge("A", "B"), make_edge("B", "C"), make_edge("C", "D")]
        state = GraphFilterState(
            visibility_mode="focused",
            focus_node_id="B",
            connection_depth=1,
            respect_filters=False,
        )

        visible = resolve_visible_node_ids(state, {"A", "B", "C", "D"}, edges, {"C", "D"})

        assert visible == {"A", "B", "C", "D"}


class TestFilterNodeIds:
    def test_entity_type_and_search(self):
        nodes = [
            _node("char-1", "character", "Alex"),
            _node("char-2", "character", "Sam"),
            _node("elem-1", "element", "Alexandrite"),
        ]
        state = GraphFilterState(search_term="alex", entity_visibility={"element": False})

        assert filter_node_ids(nodes, state) == {"char-1"}

    def test_search_matches_id(self):
        nodes = [_node("puz-safe", "puzzle", "Open it")]
        state = GraphFilterState(search_term="SAFE")

        assert filter_node_ids(nodes, state) == {"puz-safe"}


class TestSpecialEdges:
    def test_disabled_keeps_all(self):
        edges = [make_edge("c", "e", "association")]

        assert filter_special_edges(edges, [], filter_enabled=False) == edges

    def test_association_needs_only_characters_and_elements(self):
        edge = make_edge("c", "e", "association")
        chars_and_elements = [_node("c", "character"), _node("e", "element")]
        with_puzzle = [*chars_and_elements, _node("p", "puzzle")]

        assert filter_special_edges([edge], chars_and_elements, True) == [edge]
        assert filter_special_edges([edge], with_puzzle, True) == []

    def test_timeline_edges_prefer_elements(self):
        nodes = [_node("t1", "timeline"), _node("t2", "timeline"), _node("c", "character"), _node("e", "element")]
        to_element = make_edge("t1", "e", "timeline")
        to_character = make_edge("t1", "c", "timeline")
        to_timeline = make_edge("t1", "t2", "timeline")

        kept = filter_special_edges([to_element, to_character, to_timeline], nodes, True)

        assert kept == [to_element]

    def test_timeline_edges_fall_back_to_characters(self):
        nodes = [_node("t1", "timeline"), _node("c", "character"), _node("p", "puzzle")]
        to_character = make_edge("t1", "c", "timeline")
        to_puzzle = make_edge("t1", "p", "timeline")

        assert filter_special_edges([to_character, to_puzzle], nodes, True) == [to_character]

    def test_other_edges_pass_through(self):
        nodes = [_node("p", "puzzle"), _node("e", "element")]
        edge = make_edge("p", "e", "requirement")

        assert filter_special_edges([edge], nodes, True) == [edge]


class TestVisibleGraph:
    def test_marks_selection_and_drops_hidden_edges(self, chain_edges):
        nodes = [_node(n, "character") for n in "ABCDEF"]

        view = build_visible_graph(nodes, chain_edges, {"B", "C", "D"}, selected_node_id="C")

        assert [n.id for n in view.nodes] == ["B", "C", "D"]
        assert [n.data.metadata["is_selected"] for n in view.nodes] == [False, True, False]
        assert {(e.source, e.target) for e in view.edges} == {("B", "C"), ("C", "D")}
        assert "is_selected" not in nodes[2].data.metadata
