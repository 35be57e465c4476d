# models/entities.py
"""Define the domain entities consumed by the graph engine.

The engine treats these models as read-only inputs supplied by the entity
repository. Relationship fields hold ids of other entities; those ids may point at
entities that do not exist yet (content is allowed to be incomplete while it is
being authored).

Notes:
    All models accept both snake_case field names and the camelCase keys used by
    the content API (`ownedElementIds`, `requiredForPuzzleIds`, ...).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

NodeId = str


class EntityModel(BaseModel):
    """Base class for the four entity variants."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: NodeId
    name: str = ""


class Character(EntityModel):
    """A playable or non-playable character."""

    type: str = "NPC"
    tier: str = "Tertiary"
    owned_element_ids: list[NodeId] = Field(default_factory=list)
    associated_element_ids: list[NodeId] = Field(default_factory=list)
    character_puzzle_ids: list[NodeId] = Field(default_factory=list)
    event_ids: list[NodeId] = Field(default_factory=list)
    # Characters who share timeline events with this one.
    connections: list[NodeId] = Field(default_factory=list)


class Element(EntityModel):
    """A game element: prop, document, memory token or set dressing."""

    basic_type: str | None = None
    status: str | None = None
    owner_id: NodeId | None = None
    container_id: NodeId | None = None
    contents_ids: list[NodeId] = Field(default_factory=list)
    timeline_event_id: NodeId | None = None
    required_for_puzzle_ids: list[NodeId] = Field(default_factory=list)
    rewarded_by_puzzle_ids: list[NodeId] = Field(default_factory=list)


class Puzzle(EntityModel):
    """A puzzle gating or rewarding elements."""

    timing: list[str] = Field(default_factory=list)
    owner_id: NodeId | None = None
    parent_item_id: NodeId | None = None
    sub_puzzle_ids: list[NodeId] = Field(default_factory=list)
    puzzle_element_ids: list[NodeId] = Field(default_factory=list)
    reward_ids: list[NodeId] = Field(default_factory=list)


class TimelineEvent(EntityModel):
    """A timeline event; `name` carries the event description."""

    date: str | None = None
    characters_involved_ids: list[NodeId] = Field(default_factory=list)
    memory_evidence_ids: list[NodeId] = Field(default_factory=list)


class EntityCollections(BaseModel):
    """The full set of entities supplied by the entity repository."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    characters: list[Character] = Field(default_factory=list)
    elements: list[Element] = Field(default_factory=list)
    puzzles: list[Puzzle] = Field(default_factory=list)
    timeline: list[TimelineEvent] = Field(default_factory=list)

    def all_ids(self) -> set[NodeId]:
        """Return the ids of every entity across all four collections."""
        return {entity.id for entity in [*self.characters, *self.elements, *self.puzzles, *self.timeline]}
