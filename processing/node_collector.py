# processing/node_collector.py
"""
Node collection for the entity graph.

Selects entities, optionally restricted to an inclusion set of ids, and converts them
into graph nodes through an injected `EntityTransformer`. The collector knows nothing
about node shape or labels.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import structlog

from models.extraction_utils import EntityFieldExtractor
from models.graph_models import GraphNode
from models.kg_constants import ENTITY_COLLECTION_FIELDS, ENTITY_COLLECTION_ORDER, EntityKind

from .entity_transformer import EntityTransformer

logger = structlog.get_logger(__name__)


def get_collection(all_data: Any, kind: EntityKind) -> list[Any]:
    """Return one entity collection from a bundle model or mapping, empty when missing."""
    entities = EntityFieldExtractor.get_field(all_data, ENTITY_COLLECTION_FIELDS[kind])
    return list(entities) if entities else []


class NodeCollector:
    """Collects graph nodes from entities through an injected transformer.

    Notes:
        - `included_node_ids=None` means no restriction; an empty set includes nothing.
        - Changing the inclusion set affects later calls only.
    """

    def __init__(self, transformer: EntityTransformer, included_node_ids: set[Any] | None = None):
        self.transformer = transformer
        self._included_node_ids = included_node_ids

    @property
    def included_node_ids(self) -> set[Any] | None:
        return self._included_node_ids

    def set_included_node_ids(self, included_node_ids: set[Any] | None) -> None:
        """Replace the inclusion filter; `None` clears it."""
        self._included_node_ids = included_node_ids

    def _filter_by_included_ids(self, entities: Sequence[Any]) -> list[Any]:
        if self._included_node_ids is None:
            return list(entities)
        return [entity for entity in entities if EntityFieldExtractor.item_id(entity) in self._included_node_ids]

    def _collect(self, entities: Sequence[Any] | None, kind: EntityKind) -> list[GraphNode]:
        entities = list(entities or [])
        filtered = self._filter_by_included_ids(entities)
        transform = {
            EntityKind.CHARACTER: self.transformer.transform_characters,
            EntityKind.ELEMENT: self.transformer.transform_elements,
            EntityKind.PUZZLE: self.transformer.transform_puzzles,
            EntityKind.TIMELINE: self.transformer.transform_timeline,
        }[kind]
        nodes = transform(filtered) if filtered else []
        logger.debug(
            "NodeCollector collected nodes",
            entity_type=kind.value,
            input_entities=len(entities),
            filtered_entities=len(filtered),
            output_nodes=len(nodes),
            filter_applied=self._included_node_ids is not None,
        )
        return nodes

    def collect_character_nodes(self, characters: Sequence[Any] | None) -> list[GraphNode]:
        return self._collect(characters, EntityKind.CHARACTER)

    def collect_element_nodes(self, elements: Sequence[Any] | None) -> list[GraphNode]:
        return self._collect(elements, EntityKind.ELEMENT)

    def collect_puzzle_nodes(self, puzzles: Sequence[Any] | None) -> list[GraphNode]:
        return self._collect(puzzles, EntityKind.PUZZLE)

    def collect_timeline_nodes(self, timeline: Sequence[Any] | None) -> list[GraphNode]:
        return self._collect(timeline, EntityKind.TIMELINE)

    def collect_from_ids(self, all_data: Any, ids: Sequence[Any] | None, entity_kind: EntityKind | str) -> list[GraphNode]:
        """Collect nodes for `ids` of one entity kind, in the order of `ids`.

        Ids that are not found, or that fail the inclusion filter, are dropped.
        """
        if not ids:
            return []
        try:
            kind = EntityKind(entity_kind)
        except ValueError:
            logger.warning(
                "NodeCollector.collect_from_ids: unknown entity type",
                unknown_type=entity_kind,
                available_types=[k.value for k in EntityKind],
            )
            return []

        target_ids = list(dict.fromkeys(ids))
        if self._included_node_ids is not None:
            target_ids = [entity_id for entity_id in target_ids if entity_id in self._included_node_ids]
        if not target_ids:
            return []

        by_id: dict[Any, Any] = {}
        for entity in get_collection(all_data, kind):
            by_id.setdefault(EntityFieldExtractor.item_id(entity), entity)
        entities = [by_id[entity_id] for entity_id in target_ids if entity_id in by_id]
        return self._collect(entities, kind)

    def collect_all(self, all_data: Any) -> list[GraphNode]:
        """Collect every entity that passes the inclusion filter.

        Without an inclusion filter nothing is collected, so a missing filter can never
        materialize the full graph by accident.
        """
        if self._included_node_ids is None:
            logger.warning(
                "NodeCollector.collect_all: no inclusion filter set; collecting nothing",
                characters=len(get_collection(all_data, EntityKind.CHARACTER)),
                elements=len(get_collection(all_data, EntityKind.ELEMENT)),
                puzzles=len(get_collection(all_data, EntityKind.PUZZLE)),
                timeline=len(get_collection(all_data, EntityKind.TIMELINE)),
            )
            return []

        nodes: list[GraphNode] = []
        for kind in ENTITY_COLLECTION_ORDER:
            nodes.extend(self._collect(get_collection(all_data, kind), kind))
        logger.debug("NodeCollector.collect_all complete", total_nodes=len(nodes), filter_size=len(self._included_node_ids))
        return nodes

    def collect_specific_entities(
        self,
        characters: Sequence[Any] | None = None,
        elements: Sequence[Any] | None = None,
        puzzles: Sequence[Any] | None = None,
        timeline: Sequence[Any] | None = None,
    ) -> list[GraphNode]:
        """Collect only the supplied collections, always characters, elements, puzzles, timeline."""
        supplied: Mapping[EntityKind, Sequence[Any] | None] = {
            EntityKind.CHARACTER: characters,
            EntityKind.ELEMENT: elements,
            EntityKind.PUZZLE: puzzles,
            EntityKind.TIMELINE: timeline,
        }
        nodes: list[GraphNode] = []
        for kind in ENTITY_COLLECTION_ORDER:
            entities = supplied[kind]
            if entities is not None:
                nodes.extend(self._collect(entities, kind))
        return nodes
