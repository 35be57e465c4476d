# processing/graph_utilities.py
"""
Common set and list operations over graph nodes and edges.

All functions are pure: inputs are never mutated and input order is preserved.
Items may be Pydantic graph models or plain mappings with `id`, `source` and
`target` keys.
"""

from collections.abc import Iterable, Sequence
from typing import Any, TypeVar

import structlog

from models.extraction_utils import EntityFieldExtractor

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def _item_id(item: Any) -> Any:
    if isinstance(item, dict):
        return item.get("id")
    item_id = getattr(item, "id", None)
    if item_id is None:
        return EntityFieldExtractor.item_id(item)
    return item_id


def _dedupe_by(items: Sequence[T], key_of) -> list[T]:
    seen: set[Any] = set()
    result: list[T] = []
    for item in items:
        key = key_of(item)
        if key in seen:
            continue
        seen.add(key)
        result.append(item)
    return result


def deduplicate_nodes(items: Sequence[T]) -> list[T]:
    """Deduplicate items by `id`, keeping the first occurrence of each id."""
    result = _dedupe_by(items, _item_id)
    logger.debug(
        "GraphUtilities.deduplicate_nodes",
        input=len(items),
        output=len(result),
        duplicates_removed=len(items) - len(result),
    )
    return result


def deduplicate_edges(edges: Sequence[T]) -> list[T]:
    """Deduplicate edges by `id`, keeping the first occurrence of each id."""
    result = _dedupe_by(edges, _item_id)
    logger.debug(
        "GraphUtilities.deduplicate_edges",
        input=len(edges),
        output=len(result),
        duplicates_removed=len(edges) - len(result),
    )
    return result


def deduplicate_edges_by_pair(edges: Sequence[T]) -> list[T]:
    """Deduplicate edges by `(source, target)`.

    Direction matters: `a -> b` and `b -> a` are distinct pairs.
    """
    get = EntityFieldExtractor.get_field
    result = _dedupe_by(edges, lambda edge: (get(edge, "source"), get(edge, "target")))
    logger.debug(
        "GraphUtilities.deduplicate_edges_by_pair",
        input=len(edges),
        output=len(result),
        duplicates_removed=len(edges) - len(result),
    )
    return result


def filter_by_included_ids(items: Iterable[T], included_ids: set[Any]) -> list[T]:
    """Keep items whose `id` is in `included_ids`, in input order."""
    return [item for item in items if _item_id(item) in included_ids]


def extract_ids(items: Iterable[Any]) -> set[Any]:
    """Return the set of ids of `items`."""
    return {_item_id(item) for item in items}


def merge_and_deduplicate(*arrays: Iterable[T]) -> list[T]:
    """Concatenate arrays in argument order, then deduplicate by `id` across all of them."""
    merged = [item for array in arrays for item in array]
    return deduplicate_nodes(merged)


class GraphUtilities:
    """Namespace grouping the graph utility functions."""

    deduplicate_nodes = staticmethod(deduplicate_nodes)
    deduplicate_edges = staticmethod(deduplicate_edges)
    deduplicate_edges_by_pair = staticmethod(deduplicate_edges_by_pair)
    filter_by_included_ids = staticmethod(filter_by_included_ids)
    extract_ids = staticmethod(extract_ids)
    merge_and_deduplicate = staticmethod(merge_and_deduplicate)
