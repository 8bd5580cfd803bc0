"""Read-only record lookup for the rules engine.

The engine never writes records. It receives a RecordCatalog holding the
characters, items, conditions and actions it may reference, keyed by id.
Batch lookups follow the record store's contract: results come back in
the order the ids were requested, and ids with no record are silently
dropped.

Catalogs can be loaded from a JSON document of the form::

    {"characters": [...], "items": [...], "conditions": [...], "actions": [...]}
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Mapping
from operator import attrgetter
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from statcraft.core.exceptions import CatalogLoadError, RecordNotFoundError
from statcraft.core.logging import get_logger
from statcraft.models.records import Action, Character, Condition, Item


logger = get_logger(__name__)

T = TypeVar("T")


def fetch_ordered(
    ids: Iterable[Hashable],
    fetched: Iterable[T],
    key: Callable[[T], Hashable],
) -> list[T]:
    """Restore request order over an unordered batch result.

    Args:
        ids: Requested ids, in the order the caller wants.
        fetched: Records returned by a batch read, in any order.
        key: Extracts a record's id.

    Returns:
        One record per requested id that was found, in request order.
        Missing ids are dropped; duplicate ids repeat the record.
    """
    by_id = {key(record): record for record in fetched}
    return [by_id[record_id] for record_id in ids if record_id in by_id]


# =============================================================================
# Document Schema
# =============================================================================


class CatalogDocument(BaseModel):
    """On-disk shape of a record catalog."""

    characters: list[Character] = Field(default_factory=list)
    items: list[Item] = Field(default_factory=list)
    conditions: list[Condition] = Field(default_factory=list)
    actions: list[Action] = Field(default_factory=list)


# =============================================================================
# Catalog
# =============================================================================


class RecordCatalog:
    """In-memory, read-only view of the records the engine may reference.

    Example:
        >>> catalog = RecordCatalog(items=[Item(id="plate", attributes={"armour": 20})])
        >>> [item.id for item in catalog.get_items(["missing", "plate"])]
        ['plate']
    """

    def __init__(
        self,
        *,
        characters: Iterable[Character] = (),
        items: Iterable[Item] = (),
        conditions: Iterable[Condition] = (),
        actions: Iterable[Action] = (),
    ) -> None:
        self.characters: dict[str, Character] = {c.id: c for c in characters}
        self.items: dict[str, Item] = {i.id: i for i in items}
        self.conditions: dict[str, Condition] = {c.id: c for c in conditions}
        self.actions: dict[str, Action] = {a.id: a for a in actions}

    @classmethod
    def from_document(cls, document: CatalogDocument) -> RecordCatalog:
        return cls(
            characters=document.characters,
            items=document.items,
            conditions=document.conditions,
            actions=document.actions,
        )

    @classmethod
    def from_json(cls, path: str | Path) -> RecordCatalog:
        """Load a catalog from a JSON file.

        Args:
            path: Path to the JSON document.

        Returns:
            The loaded catalog.

        Raises:
            CatalogLoadError: If the file cannot be read or does not
                match the catalog schema.
        """
        source = Path(path)
        try:
            raw = source.read_text(encoding="utf-8")
        except OSError as exc:
            raise CatalogLoadError(
                f"Cannot read record catalog: {exc}",
                source_file=str(source),
            ) from exc
        try:
            document = CatalogDocument.model_validate_json(raw)
        except PydanticValidationError as exc:
            raise CatalogLoadError(
                "Record catalog does not match the expected schema",
                source_file=str(source),
                details={"errors": exc.error_count()},
            ) from exc

        catalog = cls.from_document(document)
        logger.info(
            "Record catalog loaded",
            source_file=str(source),
            characters=len(catalog.characters),
            items=len(catalog.items),
            conditions=len(catalog.conditions),
            actions=len(catalog.actions),
        )
        return catalog

    # -------------------------------------------------------------------------
    # Single lookups
    # -------------------------------------------------------------------------

    def get_character(self, character_id: str | None) -> Character | None:
        return self.characters.get(character_id) if character_id else None

    def get_item(self, item_id: str | None) -> Item | None:
        return self.items.get(item_id) if item_id else None

    def get_condition(self, condition_id: str | None) -> Condition | None:
        return self.conditions.get(condition_id) if condition_id else None

    def get_action(self, action_id: str | None) -> Action | None:
        return self.actions.get(action_id) if action_id else None

    def require_character(self, character_id: str) -> Character:
        """Look up a character, raising when it does not exist."""
        return _require(self.characters, "character", character_id)

    def require_item(self, item_id: str) -> Item:
        """Look up an item, raising when it does not exist."""
        return _require(self.items, "item", item_id)

    def require_condition(self, condition_id: str) -> Condition:
        """Look up a condition, raising when it does not exist."""
        return _require(self.conditions, "condition", condition_id)

    def require_action(self, action_id: str) -> Action:
        """Look up an action, raising when it does not exist."""
        return _require(self.actions, "action", action_id)

    # -------------------------------------------------------------------------
    # Batch lookups
    # -------------------------------------------------------------------------

    def get_items(self, item_ids: Iterable[str]) -> list[Item]:
        """Items for the ids, in request order, missing ids dropped."""
        return _batch(self.items, item_ids, "item")

    def get_conditions(self, condition_ids: Iterable[str]) -> list[Condition]:
        """Conditions for the ids, in request order, missing ids dropped."""
        return _batch(self.conditions, condition_ids, "condition")

    def get_actions(self, action_ids: Iterable[str]) -> list[Action]:
        """Actions for the ids, in request order, missing ids dropped."""
        return _batch(self.actions, action_ids, "action")

    def get_characters(self, character_ids: Iterable[str]) -> list[Character]:
        """Characters for the ids, in request order, missing ids dropped."""
        return _batch(self.characters, character_ids, "character")


def _require(table: Mapping[str, T], record_type: str, record_id: str) -> T:
    record = table.get(record_id)
    if record is None:
        raise RecordNotFoundError(
            f"No {record_type} with id {record_id!r}",
            record_type=record_type,
            record_id=record_id,
        )
    return record


def _batch(table: Mapping[str, T], ids: Iterable[str], record_type: str) -> list[T]:
    requested = [record_id for record_id in ids if record_id]
    fetched = [table[record_id] for record_id in set(requested) if record_id in table]
    found = fetch_ordered(requested, fetched, key=attrgetter("id"))
    if len(found) < len(requested):
        logger.debug(
            "Dropped unknown ids from batch lookup",
            record_type=record_type,
            requested=len(requested),
            found=len(found),
        )
    return found


def load_catalog(path: str | Path) -> RecordCatalog:
    """Load a record catalog from a JSON file."""
    return RecordCatalog.from_json(path)


__all__ = [
    "fetch_ordered",
    "CatalogDocument",
    "RecordCatalog",
    "load_catalog",
]
