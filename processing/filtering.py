# processing/filtering.py
"""
Depth-limited visibility filtering over the relationship graph.

Every function here is pure and stateless: each call builds its own adjacency map,
never mutates its inputs and always returns a new set or list. Traversal is
breadth-first over an undirected view of the directed edges, so a hop follows an
edge in either direction.

Visibility modes:
- ``pure``: the filtered node set as-is, ignoring depth.
- ``focused``: the neighbourhood of the focus node up to the connection depth.
- ``connected``: the filtered node set expanded by the connection depth over the
  edges joining two filtered nodes.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Sequence
from typing import Any

import structlog

from models.extraction_utils import EntityFieldExtractor
from models.graph_models import GraphEdge, GraphFilterState, GraphNode, GraphView
from models.kg_constants import ASSOCIATION_EDGE_KIND, EntityKind, RelationshipKind, VisibilityMode, kind_value

logger = structlog.get_logger(__name__)


def _endpoints(edge: Any) -> tuple[Any, Any]:
    get = EntityFieldExtractor.get_field
    return get(edge, "source"), get(edge, "target")


def _relationship_type(edge: Any) -> Any:
    data = EntityFieldExtractor.get_field(edge, "data")
    relationship_type = EntityFieldExtractor.get_field(data, "relationship_type")
    return relationship_type if relationship_type is not None else EntityFieldExtractor.get_field(edge, "type")


def build_adjacency_map(edges: Iterable[Any]) -> dict[Any, set[Any]]:
    """Build an undirected adjacency map: each edge links source and target both ways."""
    adjacency: dict[Any, set[Any]] = {}
    for edge in edges:
        source, target = _endpoints(edge)
        adjacency.setdefault(source, set()).add(target)
        adjacency.setdefault(target, set()).add(source)
    return adjacency


def _bfs(adjacency: dict[Any, set[Any]], start: Any, max_depth: int | float) -> set[Any]:
    visited = {start}
    queue: deque[tuple[Any, int]] = deque([(start, 0)])
    while queue:
        node_id, depth = queue.popleft()
        if depth >= max_depth:
            continue
        for neighbor_id in adjacency.get(node_id, ()):
            if neighbor_id not in visited:
                visited.add(neighbor_id)
                queue.append((neighbor_id, depth + 1))
    return visited


def _clamp_depth(depth: Any) -> int | float:
    try:
        return max(int(depth), 0)
    except OverflowError:
        # Infinite depth: positive means unbounded traversal.
        return float("inf") if depth > 0 else 0
    except (TypeError, ValueError):
        return 0


def _expand(adjacency: dict[Any, set[Any]], focus_node_id: Any, depth: int | float) -> set[Any]:
    if not focus_node_id or depth == 0:
        return {focus_node_id}
    return _bfs(adjacency, focus_node_id, depth)


def get_nodes_within_depth(focus_node_id: Any, edges: Iterable[Any], max_depth: int | float | None) -> set[Any]:
    """Return the focus node plus every node within `max_depth` hops of it.

    Negative depths clamp to 0 and an infinite depth is unbounded. Depth 0, an empty
    focus id, or a focus node without edges all yield a set holding just the focus id.
    """
    return _expand(build_adjacency_map(edges), focus_node_id, _clamp_depth(max_depth))


def _edges_within(edges: Iterable[Any], node_ids: set[Any]) -> list[Any]:
    kept = []
    for edge in edges:
        source, target = _endpoints(edge)
        if source in node_ids and target in node_ids:
            kept.append(edge)
    return kept


def get_visible_node_ids(
    mode: VisibilityMode | str | None,
    filtered_node_ids: Iterable[Any],
    edges: Sequence[Any],
    focus_node_id: Any = None,
    connection_depth: int | float | None = None,
    respect_filters: bool = True,
) -> set[Any]:
    """Compute the visible node ids for one visibility mode.

    Falls back to `filtered_node_ids` for ``pure`` mode, for a missing or non-positive
    connection depth, for ``focused`` mode without a focus node, and for unknown modes.
    """
    filtered = set(filtered_node_ids)
    depth = _clamp_depth(connection_depth) if connection_depth is not None else 0
    if depth <= 0:
        return filtered

    try:
        visibility_mode = VisibilityMode(mode)
    except ValueError:
        logger.debug("Unknown visibility mode; showing filtered nodes", mode=mode)
        return filtered

    if visibility_mode is VisibilityMode.PURE:
        return filtered

    if visibility_mode is VisibilityMode.FOCUSED:
        if focus_node_id is None:
            return filtered
        traversal_edges = _edges_within(edges, filtered) if respect_filters else edges
        visible = get_nodes_within_depth(focus_node_id, traversal_edges, depth)
        visible.add(focus_node_id)
        if not respect_filters:
            visible |= filtered
        return visible

    # Connected: edges restricted to the filtered set, in every filter mode.
    adjacency = build_adjacency_map(_edges_within(edges, filtered))
    visible = set(filtered)
    for node_id in filtered:
        visible |= _expand(adjacency, node_id, depth)
    return visible


def filter_node_ids(nodes: Iterable[Any], filter_state: GraphFilterState) -> set[Any]:
    """Apply the keyword and entity-type filters, returning the ids that pass."""
    term = filter_state.search_term.strip().lower()
    kept: set[Any] = set()
    for node in nodes:
        node_id = EntityFieldExtractor.item_id(node)
        node_type = EntityFieldExtractor.get_field(node, "type")
        if node_type is not None and not filter_state.is_entity_visible(node_type):
            continue
        if term:
            data = EntityFieldExtractor.get_field(node, "data")
            label = EntityFieldExtractor.get_field(data, "label") or ""
            if term not in str(label).lower() and term not in str(node_id).lower():
                continue
        kept.add(node_id)
    return kept


def resolve_visible_node_ids(
    filter_state: GraphFilterState,
    all_node_ids: Iterable[Any],
    edges: Sequence[Any],
    filtered_node_ids: Iterable[Any] | None = None,
) -> set[Any]:
    """Combine the unfiltered default, the keyword/attribute filter and the selection.

    Precedence, lowest to highest: with no filter every node is visible; an active
    filter narrows that to `filtered_node_ids`; the selected node and its
    neighbourhood are always added on top, never removed by the filter.
    """
    base = set(all_node_ids) if filtered_node_ids is None else set(filtered_node_ids)
    depth = filter_state.connection_depth
    visible = get_visible_node_ids(
        filter_state.visibility_mode,
        base,
        edges,
        filter_state.focus_node_id,
        depth,
        filter_state.respect_filters,
    )
    if filter_state.selected_node_id is not None:
        visible |= get_nodes_within_depth(filter_state.selected_node_id, edges, depth or 0)

    logger.debug(
        "Resolved visible nodes",
        mode=kind_value(filter_state.visibility_mode),
        base=len(base),
        visible=len(visible),
        selected=filter_state.selected_node_id,
        active_filters=filter_state.has_active_filters,
        focus=filter_state.focus_node_id,
    )
    return visible


def filter_special_edges(edges: Sequence[Any], nodes: Sequence[Any], filter_enabled: bool = False) -> list[Any]:
    """Hide association and timeline edges that would clutter the current node mix.

    Association edges (character-element) only show when characters and elements are
    the only visible types. Timeline-to-timeline edges are always hidden. A timeline
    edge to an entity shows for elements when elements are visible, otherwise for
    characters, otherwise for puzzles. All other edges are kept.
    """
    if not filter_enabled:
        return list(edges)

    node_types = {
        EntityFieldExtractor.item_id(node): EntityFieldExtractor.get_field(node, "type") for node in nodes
    }
    present = set(node_types.values())
    has_elements = EntityKind.ELEMENT.value in present
    has_characters = EntityKind.CHARACTER.value in present
    has_puzzles = EntityKind.PUZZLE.value in present
    has_timeline = EntityKind.TIMELINE.value in present

    kept = []
    for edge in edges:
        relationship_type = _relationship_type(edge)
        if relationship_type == ASSOCIATION_EDGE_KIND:
            if has_characters and has_elements and not has_puzzles and not has_timeline:
                kept.append(edge)
            continue

        if relationship_type == RelationshipKind.TIMELINE.value:
            source, target = _endpoints(edge)
            source_type = node_types.get(source)
            target_type = node_types.get(target)
            if source_type == EntityKind.TIMELINE.value:
                if target_type == EntityKind.TIMELINE.value:
                    continue
                if has_elements and target_type == EntityKind.ELEMENT.value:
                    kept.append(edge)
                elif not has_elements and has_characters and target_type == EntityKind.CHARACTER.value:
                    kept.append(edge)
                elif (
                    not has_elements
                    and not has_characters
                    and has_puzzles
                    and target_type == EntityKind.PUZZLE.value
                ):
                    kept.append(edge)
                continue

        kept.append(edge)

    return kept


def build_visible_graph(
    filtered_nodes: Sequence[GraphNode],
    all_edges: Sequence[GraphEdge],
    visible_node_ids: set[Any],
    selected_node_id: Any = None,
) -> GraphView:
    """Materialize the visible nodes and the edges joining two visible nodes.

    Nodes keep their order from `filtered_nodes` and carry `metadata.is_selected`.
    """
    visible_nodes = []
    for node in filtered_nodes:
        if node.id not in visible_node_ids:
            continue
        metadata = {**node.data.metadata, "is_selected": node.id == selected_node_id}
        visible_nodes.append(node.model_copy(update={"data": node.data.model_copy(update={"metadata": metadata})}))

    visible_edges = [
        edge for edge in all_edges if edge.source in visible_node_ids and edge.target in visible_node_ids
    ]
    return GraphView(nodes=visible_nodes, edges=visible_edges)
