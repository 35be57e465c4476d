# processing/relationship_processor.py
"""
Relationship extraction for the entity graph.

Walks the relationship fields of characters, puzzles, elements and timeline events,
emits typed relationship records with weights from the fixed weight table, prevents
duplicate or mirrored registration within a processing session, and converts the
records into graph edges. Also provides connected-component discovery and pairwise
relationship strength over a record list.

Dangling references (ids pointing at entities that do not exist) are skipped without
raising: content is allowed to be incomplete while it is being authored. Skips are
reported on the session counters and as debug-level log events.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog

import config
from core.exceptions import ProcessingSessionClosedError, create_error_context
from models.extraction_utils import EntityFieldExtractor
from models.graph_models import GraphEdge, RelationshipRecord
from models.kg_constants import (
    DEFAULT_RELATIONSHIP_WEIGHT,
    RELATION_LABEL_SEPARATOR,
    RELATIONSHIP_LABELS,
    RELATIONSHIP_WEIGHTS,
    RelationshipKind,
    kind_value,
)

logger = structlog.get_logger(__name__)

SKIP_FILTERED = "filtered"
SKIP_DUPLICATE = "duplicate"
SKIP_UNRESOLVED = "unresolved"


def relationship_key(source: Any, target: Any, kind: str | RelationshipKind) -> str:
    """Registry key of a `(type, source, target)` triple."""
    return f"{kind_value(kind)}:{source}:{target}"


@dataclass
class ProcessingSession:
    """Deduplication registry for one relationship-processing pass.

    The registry only grows while the pass runs. Once the pass is over the session is
    closed and any further registration raises `ProcessingSessionClosedError`, so a
    stale registry can never leak into an independent reprocessing.
    """

    processed: set[str] = field(default_factory=set)
    emitted: int = 0
    skipped: dict[str, int] = field(
        default_factory=lambda: {SKIP_FILTERED: 0, SKIP_DUPLICATE: 0, SKIP_UNRESOLVED: 0}
    )
    closed: bool = False

    def is_processed(self, key: str) -> bool:
        return key in self.processed

    def mark_processed(self, key: str) -> None:
        if self.closed:
            raise ProcessingSessionClosedError(
                "Cannot register relationships on a closed processing session",
                details=create_error_context(key=key, registered=len(self.processed)),
            )
        self.processed.add(key)
        self.emitted += 1

    def record_skip(self, reason: str) -> None:
        self.skipped[reason] = self.skipped.get(reason, 0) + 1

    def close(self) -> None:
        self.closed = True

    def stats(self) -> dict[str, Any]:
        return {"registered": len(self.processed), "emitted": self.emitted, **self.skipped}

    def __enter__(self) -> ProcessingSession:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def _index_by_id(entities: Iterable[Any] | Mapping[Any, Any] | None) -> Mapping[Any, Any]:
    if entities is None:
        return {}
    if isinstance(entities, Mapping):
        return entities
    index: dict[Any, Any] = {}
    for entity in entities:
        entity_id = EntityFieldExtractor.item_id(entity)
        # First occurrence wins, matching a linear find over the list
        if entity_id is not None and entity_id not in index:
            index[entity_id] = entity
    return index


class RelationshipProcessor:
    """Extracts relationship records from entities and materializes edges."""

    def __init__(
        self,
        create_bidirectional: bool | None = None,
        included_node_ids: set[Any] | None = None,
        min_weight: float | None = None,
    ):
        self.create_bidirectional = (
            config.settings.CREATE_BIDIRECTIONAL if create_bidirectional is None else create_bidirectional
        )
        self.included_node_ids = included_node_ids
        self.min_weight = config.settings.MIN_EDGE_WEIGHT if min_weight is None else min_weight
        self.session = ProcessingSession()

    def new_session(self) -> ProcessingSession:
        """Return a fresh session for a caller-managed processing pass."""
        return ProcessingSession()

    def clear_cache(self) -> None:
        """Discard the current registry and start a fresh session."""
        self.session.close()
        self.session = ProcessingSession()

    def _should_include_node(self, node_id: Any) -> bool:
        if self.included_node_ids is None:
            return True
        return node_id in self.included_node_ids

    def _is_processed(self, session: ProcessingSession, source: Any, target: Any, kind: RelationshipKind) -> bool:
        if session.is_processed(relationship_key(source, target, kind)):
            return True
        return self.create_bidirectional and session.is_processed(relationship_key(target, source, kind))

    def _admit(self, session: ProcessingSession, source: Any, target: Any, kind: RelationshipKind, filtered_id: Any) -> bool:
        """Apply the inclusion filter and dedup registry to a candidate record."""
        if not self._should_include_node(filtered_id):
            session.record_skip(SKIP_FILTERED)
            return False
        if self._is_processed(session, source, target, kind):
            session.record_skip(SKIP_DUPLICATE)
            return False
        return True

    def _build_record(
        self,
        session: ProcessingSession,
        kind: RelationshipKind,
        source: Any,
        target: Any,
        label: str | None = None,
        bidirectional: bool = False,
        metadata: dict[str, Any] | None = None,
    ) -> RelationshipRecord:
        record = RelationshipRecord(
            type=kind,
            source=source,
            target=target,
            label=label if label is not None else RELATIONSHIP_LABELS.get(kind),
            weight=self.calculate_edge_weight(kind),
            bidirectional=bidirectional,
            metadata=metadata or {},
        )
        session.mark_processed(relationship_key(source, target, kind))
        return record

    def calculate_edge_weight(self, kind: str | RelationshipKind) -> int:
        """Look up the edge weight for a relationship kind (1 for unknown kinds)."""
        return RELATIONSHIP_WEIGHTS.get(kind_value(kind), DEFAULT_RELATIONSHIP_WEIGHT)

    def process_character_relationships(
        self,
        character: Any,
        all_characters: Sequence[Any] | Mapping[Any, Any] | None,
        session: ProcessingSession | None = None,
    ) -> list[RelationshipRecord]:
        """Emit `relation` records for connections and `ownership` records for owned elements."""
        session = session or self.session
        characters_by_id = _index_by_id(all_characters)
        character_id = EntityFieldExtractor.item_id(character)
        relationships: list[RelationshipRecord] = []

        for target_id in EntityFieldExtractor.id_list_field(character, "connections"):
            if not self._admit(session, character_id, target_id, RelationshipKind.RELATION, target_id):
                continue
            target_character = characters_by_id.get(target_id)
            if target_character is None:
                session.record_skip(SKIP_UNRESOLVED)
                logger.debug(
                    "Skipping unresolved character connection",
                    source=character_id,
                    target=target_id,
                )
                continue
            label = (
                f"{EntityFieldExtractor.display_name(character)}"
                f"{RELATION_LABEL_SEPARATOR}"
                f"{EntityFieldExtractor.display_name(target_character)}"
            )
            relationships.append(
                self._build_record(
                    session,
                    RelationshipKind.RELATION,
                    character_id,
                    target_id,
                    label=label,
                    bidirectional=True,
                    metadata={"bidirectional": True},
                )
            )

        for element_id in EntityFieldExtractor.id_list_field(character, "owned_element_ids"):
            if not self._admit(session, character_id, element_id, RelationshipKind.OWNERSHIP, element_id):
                continue
            relationships.append(self._build_record(session, RelationshipKind.OWNERSHIP, character_id, element_id))

        return relationships

    def process_puzzle_relationships(
        self,
        puzzle: Any,
        session: ProcessingSession | None = None,
    ) -> list[RelationshipRecord]:
        """Emit dependency, requirement and reward records from a puzzle's own fields."""
        session = session or self.session
        puzzle_id = EntityFieldExtractor.item_id(puzzle)
        relationships: list[RelationshipRecord] = []

        for field_name, kind in (
            ("sub_puzzle_ids", RelationshipKind.DEPENDENCY),
            ("puzzle_element_ids", RelationshipKind.REQUIREMENT),
            ("reward_ids", RelationshipKind.REWARD),
        ):
            for target_id in EntityFieldExtractor.id_list_field(puzzle, field_name):
                if not self._admit(session, puzzle_id, target_id, kind, target_id):
                    continue
                relationships.append(self._build_record(session, kind, puzzle_id, target_id))

        return relationships

    def process_element_relationships(
        self,
        element: Any,
        all_puzzles: Sequence[Any] | Mapping[Any, Any] | None,
        session: ProcessingSession | None = None,
    ) -> list[RelationshipRecord]:
        """Emit requirement and reward records seen from the element side.

        The element's own fields become records sourced from the puzzle: requirement and
        reward edges always point from puzzle to element.
        """
        session = session or self.session
        puzzles_by_id = _index_by_id(all_puzzles)
        element_id = EntityFieldExtractor.item_id(element)
        relationships: list[RelationshipRecord] = []

        for field_name, kind in (
            ("required_for_puzzle_ids", RelationshipKind.REQUIREMENT),
            ("rewarded_by_puzzle_ids", RelationshipKind.REWARD),
        ):
            for puzzle_id in EntityFieldExtractor.id_list_field(element, field_name):
                if not self._admit(session, puzzle_id, element_id, kind, puzzle_id):
                    continue
                if puzzle_id not in puzzles_by_id:
                    session.record_skip(SKIP_UNRESOLVED)
                    logger.debug(
                        "Skipping unresolved puzzle reference",
                        element=element_id,
                        puzzle=puzzle_id,
                        relationship_type=kind.value,
                    )
                    continue
                relationships.append(self._build_record(session, kind, puzzle_id, element_id))

        return relationships

    def process_timeline_relationships(
        self,
        event: Any,
        session: ProcessingSession | None = None,
    ) -> list[RelationshipRecord]:
        """Emit `timeline` records from an event to each involved character."""
        session = session or self.session
        event_id = EntityFieldExtractor.item_id(event)
        relationships: list[RelationshipRecord] = []

        for character_id in EntityFieldExtractor.id_list_field(event, "characters_involved_ids"):
            if not self._admit(session, event_id, character_id, RelationshipKind.TIMELINE, character_id):
                continue
            relationships.append(self._build_record(session, RelationshipKind.TIMELINE, event_id, character_id))

        return relationships

    def create_edges_from_relationships(self, relationships: Iterable[RelationshipRecord]) -> list[GraphEdge]:
        """Convert records into graph edges, dropping those below the weight threshold."""
        edges: list[GraphEdge] = []
        for rel in relationships:
            if rel.weight and rel.weight < self.min_weight:
                continue
            edges.append(GraphEdge.from_record(rel))
        return edges

    def process_all_relationships(
        self,
        characters: Sequence[Any] | None = None,
        elements: Sequence[Any] | None = None,
        puzzles: Sequence[Any] | None = None,
        timeline: Sequence[Any] | None = None,
        session: ProcessingSession | None = None,
    ) -> list[GraphEdge]:
        """Run every extractor over the supplied collections and return the edges.

        Extractors run in the order character, puzzle, element, timeline. Without an
        explicit session the pass runs on a fresh one that is closed afterwards.
        """
        if session is None:
            with self.new_session() as pass_session:
                all_relationships = self._run_extractors(characters, elements, puzzles, timeline, pass_session)
        else:
            pass_session = session
            all_relationships = self._run_extractors(characters, elements, puzzles, timeline, pass_session)

        logger.debug(
            "Processed relationships",
            total=len(all_relationships),
            characters=len(characters or []),
            puzzles=len(puzzles or []),
            elements=len(elements or []),
            timeline=len(timeline or []),
            **pass_session.skipped,
        )

        return self.create_edges_from_relationships(all_relationships)

    def _run_extractors(
        self,
        characters: Sequence[Any] | None,
        elements: Sequence[Any] | None,
        puzzles: Sequence[Any] | None,
        timeline: Sequence[Any] | None,
        session: ProcessingSession,
    ) -> list[RelationshipRecord]:
        all_relationships: list[RelationshipRecord] = []
        characters_by_id = _index_by_id(characters)
        puzzles_by_id = _index_by_id(puzzles)

        for character in characters or []:
            all_relationships.extend(self.process_character_relationships(character, characters_by_id, session))
        for puzzle in puzzles or []:
            all_relationships.extend(self.process_puzzle_relationships(puzzle, session))
        for element in elements or []:
            all_relationships.extend(self.process_element_relationships(element, puzzles_by_id, session))
        for event in timeline or []:
            all_relationships.extend(self.process_timeline_relationships(event, session))
        return all_relationships

    def find_connected_components(
        self,
        node_ids: Iterable[Any],
        relationships: Iterable[RelationshipRecord],
    ) -> list[set[Any]]:
        """Group `node_ids` into connected components.

        Reverse adjacency is only added for bidirectional records, and traversal never
        leaves `node_ids`. Isolated nodes form singleton components.
        """
        ordered_ids = list(dict.fromkeys(node_ids))
        node_id_set = set(ordered_ids)
        adjacency: dict[Any, set[Any]] = {}
        for rel in relationships:
            adjacency.setdefault(rel.source, set()).add(rel.target)
            adjacency.setdefault(rel.target, set())
            if rel.bidirectional:
                adjacency[rel.target].add(rel.source)

        visited: set[Any] = set()
        components: list[set[Any]] = []
        for start in ordered_ids:
            if start in visited:
                continue
            component: set[Any] = set()
            stack = [start]
            visited.add(start)
            while stack:
                node = stack.pop()
                component.add(node)
                for neighbor in adjacency.get(node, ()):
                    if neighbor not in visited and neighbor in node_id_set:
                        visited.add(neighbor)
                        stack.append(neighbor)
            components.append(component)

        return components

    def calculate_relationship_strength(
        self,
        node_id_1: Any,
        node_id_2: Any,
        relationships: Iterable[RelationshipRecord],
    ) -> float:
        """Sum the weights of all records linking two nodes in either direction."""
        strength = 0
        for rel in relationships:
            if (rel.source == node_id_1 and rel.target == node_id_2) or (
                rel.source == node_id_2 and rel.target == node_id_1
            ):
                strength += rel.weight or DEFAULT_RELATIONSHIP_WEIGHT
        return strength


# Default instance for convenience
relationship_processor = RelationshipProcessor()
