# tests/conftest.py
import os
import sys

import pytest

# Ensure repository root is on PYTHONPATH for tests
repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if repo_root not in sys.path:
    sys.path.insert(0, repo_root)

from models.entities import Character, Element, EntityCollections, Puzzle, TimelineEvent  # noqa: E402
from models.graph_models import GraphEdge, GraphEdgeData  # noqa: E402


def pytest_addoption(parser: pytest.Parser) -> None:
    """Add custom CLI options for this repo.

    --fast: skip timing-sensitive tests so the suite stays hermetic on slow or
    heavily loaded CI runners.
    """
    parser.addoption(
        "--fast",
        action="store_true",
        default=False,
        help="Skip tests marked as performance.",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """When --fast is passed, skip tests marked `performance`."""
    if not config.getoption("--fast"):
        return

    skip_marker = pytest.mark.skip(reason="skipped by --fast")
    for item in items:
        if item.get_closest_marker("performance") is not None:
            item.add_marker(skip_marker)


def make_edge(source: str, target: str, relationship_type: str = "relation") -> GraphEdge:
    """Build a plain graph edge for traversal tests."""
    return GraphEdge(
        id=f"{relationship_type}-{source}-{target}",
        source=source,
        target=target,
        type=relationship_type,
        data=GraphEdgeData(relationship_type=relationship_type),
    )


@pytest.fixture
def chain_edges() -> list[GraphEdge]:
    """A-B, B-C, C-D, C-E, D-F."""
    return [
        make_edge("A", "B"),
        make_edge("B", "C"),
        make_edge("C", "D"),
        make_edge("C", "E"),
        make_edge("D", "F"),
    ]


@pytest.fixture
def sample_data() -> EntityCollections:
    """A small but fully linked entity set."""
    return EntityCollections(
        characters=[
            Character(id="char-alex", name="Alex", connections=["char-sam"], owned_element_ids=["elem-key"]),
            Character(id="char-sam", name="Sam", connections=["char-alex", "char-ghost"]),
        ],
        elements=[
            Element(
                id="elem-key",
                name="Brass Key",
                owner_id="char-alex",
                required_for_puzzle_ids=["puz-safe"],
            ),
            Element(id="elem-letter", name="Letter", rewarded_by_puzzle_ids=["puz-safe", "puz-missing"]),
        ],
        puzzles=[
            Puzzle(
                id="puz-safe",
                name="Open the Safe",
                puzzle_element_ids=["elem-key"],
                reward_ids=["elem-letter"],
                sub_puzzle_ids=["puz-code"],
            ),
            Puzzle(id="puz-code", name="Find the Code"),
        ],
        timeline=[
            TimelineEvent(id="evt-party", name="The party", characters_involved_ids=["char-alex", "char-sam"]),
        ],
    )
