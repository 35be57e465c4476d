# models/graph_models.py
"""Define the graph primitives produced and consumed by the graph engine.

This module provides the in-memory representations used when moving data between:
- relationship extraction (`RelationshipRecord`),
- graph materialization (`GraphNode`, `GraphEdge`, `GraphView`), and
- the UI filter-state snapshot driving visibility (`GraphFilterState`).

Notes:
- Node positions belong to the rendering layer; nodes are created at `(0, 0)`.
- Edge ids are unique per `(type, source, target)` triple.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from core.exceptions import ConfigurationError, create_error_context
from models.kg_constants import VisibilityMode, kind_value


class RelationshipRecord(BaseModel):
    """A typed link between two entities, prior to edge materialization."""

    type: str
    source: Any
    target: Any
    label: str | None = None
    weight: float = 1
    bidirectional: bool = False
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("type", mode="before")
    @classmethod
    def _plain_kind(cls, value: Any) -> str:
        return kind_value(value)


class GraphEdgeData(BaseModel):
    """Payload carried by a graph edge."""

    relationship_type: str
    weight: float = 1
    label: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class GraphEdge(BaseModel):
    """A directed, weighted edge of the relationship graph."""

    id: str
    source: Any
    target: Any
    type: str
    data: GraphEdgeData

    @classmethod
    def from_record(cls, record: RelationshipRecord) -> GraphEdge:
        """Materialize an edge from a relationship record."""
        return cls(
            id=f"{record.type}-{record.source}-{record.target}",
            source=record.source,
            target=record.target,
            type=record.type,
            data=GraphEdgeData(
                relationship_type=record.type,
                weight=record.weight or 1,
                label=record.label,
                metadata=dict(record.metadata),
            ),
        )


class NodePosition(BaseModel):
    """Placeholder position; the rendering layer owns the real value."""

    x: float = 0
    y: float = 0


class GraphNodeData(BaseModel):
    """Payload carried by a graph node."""

    label: str
    entity: Any = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class GraphNode(BaseModel):
    """A node of the relationship graph wrapping one entity."""

    id: Any
    type: str
    data: GraphNodeData
    position: NodePosition = Field(default_factory=NodePosition)

    @field_validator("type", mode="before")
    @classmethod
    def _plain_kind(cls, value: Any) -> str:
        return kind_value(value)


class GraphView(BaseModel):
    """A set of nodes and edges: the full graph or its visible subset."""

    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)

    @property
    def node_ids(self) -> set[Any]:
        return {node.id for node in self.nodes}


class GraphFilterState(BaseModel):
    """Snapshot of the UI filter state driving visibility computation."""

    search_term: str = ""
    selected_node_id: Any = None
    focus_node_id: Any = None
    connection_depth: int | None = None
    visibility_mode: VisibilityMode | str = VisibilityMode.CONNECTED
    respect_filters: bool = True
    entity_visibility: dict[str, bool] = Field(default_factory=dict)

    @field_validator("entity_visibility", mode="before")
    @classmethod
    def _plain_entity_keys(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {kind_value(key): bool(visible) for key, visible in value.items()}
        return value

    @property
    def has_active_filters(self) -> bool:
        """True when a search term is set or any entity type is hidden."""
        return bool(self.search_term.strip()) or not all(self.entity_visibility.values())

    def is_entity_visible(self, entity_kind: str) -> bool:
        """Entity types absent from `entity_visibility` are visible."""
        return self.entity_visibility.get(kind_value(entity_kind), True)

    @classmethod
    def from_settings(cls, current_settings: Any = None, **overrides: Any) -> GraphFilterState:
        """Build a filter state seeded with the configured visibility defaults.

        Explicit `overrides` win over the defaults; the connection depth is capped at
        `MAX_CONNECTION_DEPTH`.

        Raises:
            ConfigurationError: If the configured default visibility mode is used and
                is not a known mode.
        """
        if current_settings is None:
            import config

            current_settings = config.settings

        values: dict[str, Any] = {
            "connection_depth": current_settings.DEFAULT_CONNECTION_DEPTH,
            "visibility_mode": current_settings.DEFAULT_VISIBILITY_MODE,
            "respect_filters": current_settings.RESPECT_FILTERS,
        }
        if "visibility_mode" not in overrides:
            try:
                values["visibility_mode"] = VisibilityMode(current_settings.DEFAULT_VISIBILITY_MODE)
            except ValueError as exc:
                raise ConfigurationError(
                    "DEFAULT_VISIBILITY_MODE is not a known visibility mode",
                    details=create_error_context(
                        value=current_settings.DEFAULT_VISIBILITY_MODE,
                        allowed=[mode.value for mode in VisibilityMode],
                    ),
                ) from exc
        values.update(overrides)
        if values["connection_depth"] is not None:
            values["connection_depth"] = min(values["connection_depth"], current_settings.MAX_CONNECTION_DEPTH)
        return cls(**values)
