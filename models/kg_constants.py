# models/kg_constants.py
"""
Constants describing the canonical vocabulary of the relationship graph.

**Vocabulary policy (contract):**

- **Entity kinds (STRICT):** every graph node is one of the four entity kinds in
  [`EntityKind`](models/kg_constants.py:22). Node collection for an unknown kind is
  refused with a warning and an empty result rather than an exception.

- **Relationship kinds (PERMISSIVE weights):** [`RelationshipKind`](models/kg_constants.py:31)
  is the closed set of kinds the extractors emit, but weight lookup accepts any
  string. Kinds missing from [`RELATIONSHIP_WEIGHTS`](models/kg_constants.py:57) weigh
  [`DEFAULT_RELATIONSHIP_WEIGHT`](models/kg_constants.py:72).
"""

from __future__ import annotations

from enum import Enum


class EntityKind(str, Enum):
    """Entity variants understood by the graph engine."""

    CHARACTER = "character"
    ELEMENT = "element"
    PUZZLE = "puzzle"
    TIMELINE = "timeline"


class RelationshipKind(str, Enum):
    """Kinds of relationship records the graph engine can produce."""

    REQUIREMENT = "requirement"
    REWARD = "reward"
    OWNERSHIP = "ownership"
    RELATION = "relation"
    CHAIN = "chain"
    DEPENDENCY = "dependency"
    TIMELINE = "timeline"
    COLLABORATION = "collaboration"
    CONTAINER = "container"
    PUZZLE_GROUPING = "puzzle-grouping"
    VIRTUAL_DEPENDENCY = "virtual-dependency"


class VisibilityMode(str, Enum):
    """How connection depth and filters combine into the visible node set."""

    PURE = "pure"
    FOCUSED = "focused"
    CONNECTED = "connected"


# Edge weight per relationship kind. "owner" is not emitted by any extractor but
# is kept for records produced elsewhere.
RELATIONSHIP_WEIGHTS: dict[str, int] = {
    "requirement": 10,
    "reward": 8,
    "ownership": 6,
    "chain": 15,
    "timeline": 5,
    "collaboration": 4,
    "owner": 6,
    "container": 3,
    "dependency": 10,
    "relation": 4,
    "puzzle-grouping": 12,
    "virtual-dependency": 7,
}

DEFAULT_RELATIONSHIP_WEIGHT = 1

# Relationship labels emitted by the extractors.
RELATIONSHIP_LABELS: dict[RelationshipKind, str] = {
    RelationshipKind.OWNERSHIP: "owns",
    RelationshipKind.DEPENDENCY: "depends on",
    RelationshipKind.REQUIREMENT: "requires",
    RelationshipKind.REWARD: "rewards",
    RelationshipKind.TIMELINE: "involves",
}

# Separator used in relation labels between two character names.
RELATION_LABEL_SEPARATOR = " ↔ "

# Edge kind hidden by the special-edge filter unless only characters and
# elements are on screen.
ASSOCIATION_EDGE_KIND = "association"

# Collection order for batch node collection.
ENTITY_COLLECTION_ORDER: tuple[EntityKind, ...] = (
    EntityKind.CHARACTER,
    EntityKind.ELEMENT,
    EntityKind.PUZZLE,
    EntityKind.TIMELINE,
)

# Attribute names of each entity kind inside an EntityCollections bundle.
ENTITY_COLLECTION_FIELDS: dict[EntityKind, str] = {
    EntityKind.CHARACTER: "characters",
    EntityKind.ELEMENT: "elements",
    EntityKind.PUZZLE: "puzzles",
    EntityKind.TIMELINE: "timeline",
}


def kind_value(kind: str | Enum) -> str:
    """Return the plain string value of a relationship or entity kind."""
    return kind.value if isinstance(kind, Enum) else str(kind)
