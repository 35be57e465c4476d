# processing/graph_builder.py
"""
End-to-end assembly of the relationship graph.

`GraphBuilder.build` wires the pieces together: a fresh relationship pass yields the
edges, the node collector yields the nodes, and graph utilities deduplicate both
before edges pointing at missing nodes are dropped.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

import config
from config.settings import GraphEngineSettings
from models.entities import EntityCollections
from models.graph_models import GraphView
from models.kg_constants import EntityKind

from . import graph_utilities
from .entity_transformer import DefaultEntityTransformer, EntityTransformer
from .node_collector import NodeCollector, get_collection
from .relationship_processor import RelationshipProcessor

logger = structlog.get_logger(__name__)


class GraphBuilder:
    def __init__(
        self,
        transformer: EntityTransformer | None = None,
        settings: GraphEngineSettings | None = None,
    ):
        self.transformer = transformer or DefaultEntityTransformer()
        self.settings = settings or config.settings

    def build(
        self,
        data: EntityCollections | Mapping[str, Any],
        included_node_ids: set[Any] | None = None,
    ) -> GraphView:
        """Build the graph for `data`, restricted to `included_node_ids` when given."""
        characters = get_collection(data, EntityKind.CHARACTER)
        elements = get_collection(data, EntityKind.ELEMENT)
        puzzles = get_collection(data, EntityKind.PUZZLE)
        timeline = get_collection(data, EntityKind.TIMELINE)

        processor = RelationshipProcessor(
            create_bidirectional=self.settings.CREATE_BIDIRECTIONAL,
            included_node_ids=included_node_ids,
            min_weight=self.settings.MIN_EDGE_WEIGHT,
        )
        edges = processor.process_all_relationships(characters, elements, puzzles, timeline)

        collector = NodeCollector(self.transformer, included_node_ids)
        if included_node_ids is None:
            nodes = collector.collect_specific_entities(characters, elements, puzzles, timeline)
        else:
            nodes = collector.collect_all(data)

        nodes = graph_utilities.deduplicate_nodes(nodes)
        edges = graph_utilities.deduplicate_edges(edges)

        node_ids = graph_utilities.extract_ids(nodes)
        connected_edges = [edge for edge in edges if edge.source in node_ids and edge.target in node_ids]

        logger.info(
            "Graph built",
            nodes=len(nodes),
            edges=len(connected_edges),
            dangling_edges=len(edges) - len(connected_edges),
            filtered=included_node_ids is not None,
        )
        return GraphView(nodes=nodes, edges=connected_edges)
