# models/__init__.py
"""Export commonly used graph engine model types.

This package exposes a stable import surface for the entity models, the graph
primitives and the shared kind constants.
"""

from .entities import Character, Element, EntityCollections, Puzzle, TimelineEvent
from .extraction_utils import EntityFieldExtractor
from .graph_models import (
    GraphEdge,
    GraphEdgeData,
    GraphFilterState,
    GraphNode,
    GraphNodeData,
    GraphView,
    NodePosition,
    RelationshipRecord,
)
from .kg_constants import EntityKind, RelationshipKind, VisibilityMode

__all__ = [
    "Character",
    "Element",
    "Puzzle",
    "TimelineEvent",
    "EntityCollections",
    "EntityFieldExtractor",
    "RelationshipRecord",
    "GraphEdge",
    "GraphEdgeData",
    "GraphNode",
    "GraphNodeData",
    "NodePosition",
    "GraphView",
    "GraphFilterState",
    "EntityKind",
    "RelationshipKind",
    "VisibilityMode",
]
