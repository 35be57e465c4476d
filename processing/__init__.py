# processing/__init__.py
"""Graph engine processing: relationships, node collection, utilities and visibility."""

from .entity_transformer import DefaultEntityTransformer, EntityTransformer
from .graph_builder import GraphBuilder
from .graph_utilities import GraphUtilities
from .node_collector import NodeCollector
from .relationship_processor import ProcessingSession, RelationshipProcessor, relationship_processor

__all__ = [
    "DefaultEntityTransformer",
    "EntityTransformer",
    "GraphBuilder",
    "GraphUtilities",
    "NodeCollector",
    "ProcessingSession",
    "RelationshipProcessor",
    "relationship_processor",
]
