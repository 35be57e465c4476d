# models/extraction_utils.py
"""Utilities for reading fields from entities and graph items of mixed shape."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


class EntityFieldExtractor:
    """Utility class for safely extracting data from entities and graph items.

    Entities and graph items arrive either as Pydantic models or as plain mappings
    (for example raw API payloads using camelCase keys). Every accessor tolerates
    missing fields and never raises for shape problems.
    """

    @staticmethod
    def get_field(item: Any, name: str, default: Any = None) -> Any:
        """Read `name` from a model attribute or a mapping key.

        Mappings are checked for the snake_case key first, then its camelCase form.
        """
        if item is None:
            return default
        if isinstance(item, Mapping):
            if name in item:
                return item[name]
            return item.get(_camel_case(name), default)
        return getattr(item, name, default)

    @staticmethod
    def safe_id_list(value: Any) -> list[Any]:
        """Normalize a relationship field to a list of ids.

        Ids are opaque keys: they are returned as-is, never coerced to strings.
        """
        if value is None:
            return []
        if isinstance(value, (list, tuple, set, frozenset)):
            return [item for item in value if item is not None]
        if isinstance(value, (str, bytes)) or not hasattr(value, "__iter__"):
            return [value]
        return [item for item in value if item is not None]

    @staticmethod
    def id_list_field(item: Any, name: str) -> list[Any]:
        """Read a list-of-ids relationship field, empty when missing."""
        return EntityFieldExtractor.safe_id_list(EntityFieldExtractor.get_field(item, name))

    @staticmethod
    def item_id(item: Any) -> Any:
        """Return the `id` of an entity, node or edge."""
        return EntityFieldExtractor.get_field(item, "id")

    @staticmethod
    def display_name(item: Any) -> str:
        """Return the display name of an entity, falling back to its id."""
        name = EntityFieldExtractor.get_field(item, "name")
        if name:
            return str(name)
        item_id = EntityFieldExtractor.item_id(item)
        return str(item_id) if item_id is not None else ""
