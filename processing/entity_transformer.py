# processing/entity_transformer.py
"""
Entity-to-node transformation.

`NodeCollector` depends on the `EntityTransformer` capability only; the transformer
owns label derivation and node payload shape. `DefaultEntityTransformer` is the
plain implementation used when no richer transformer is injected.
"""

from collections.abc import Sequence
from typing import Any, Protocol

from models.extraction_utils import EntityFieldExtractor
from models.graph_models import GraphNode, GraphNodeData
from models.kg_constants import EntityKind


class EntityTransformer(Protocol):
    """Protocol defining one pure mapping per entity variant."""

    def transform_characters(self, characters: Sequence[Any]) -> list[GraphNode]:
        """Map characters to graph nodes."""
        ...

    def transform_elements(self, elements: Sequence[Any]) -> list[GraphNode]:
        """Map elements to graph nodes."""
        ...

    def transform_puzzles(self, puzzles: Sequence[Any]) -> list[GraphNode]:
        """Map puzzles to graph nodes."""
        ...

    def transform_timeline(self, events: Sequence[Any]) -> list[GraphNode]:
        """Map timeline events to graph nodes."""
        ...


class DefaultEntityTransformer:
    """One node per entity, labelled with the entity name (or id)."""

    def _to_node(self, entity: Any, kind: EntityKind) -> GraphNode:
        return GraphNode(
            id=EntityFieldExtractor.item_id(entity),
            type=kind,
            data=GraphNodeData(
                label=EntityFieldExtractor.display_name(entity),
                entity=entity,
                metadata={"entity_type": kind.value},
            ),
        )

    def _transform(self, entities: Sequence[Any], kind: EntityKind) -> list[GraphNode]:
        return [self._to_node(entity, kind) for entity in entities if EntityFieldExtractor.item_id(entity) is not None]

    def transform_characters(self, characters: Sequence[Any]) -> list[GraphNode]:
        return self._transform(characters, EntityKind.CHARACTER)

    def transform_elements(self, elements: Sequence[Any]) -> list[GraphNode]:
        return self._transform(elements, EntityKind.ELEMENT)

    def transform_puzzles(self, puzzles: Sequence[Any]) -> list[GraphNode]:
        return self._transform(puzzles, EntityKind.PUZZLE)

    def transform_timeline(self, events: Sequence[Any]) -> list[GraphNode]:
        return self._transform(events, EntityKind.TIMELINE)
