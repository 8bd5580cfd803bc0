"""Input records consumed by the rules engine.

Characters, items, conditions and actions are created and edited by an
external record store; the engine only reads them. Every model accepts
both snake_case field names and the camelCase wire names used by the
surrounding application, and serialises back to camelCase with
``model_dump(by_alias=True)`` so JSON round-trips are lossless.

Example:
    >>> character = Character.model_validate(
    ...     {
    ...         "id": "char-1",
    ...         "name": "Rook",
    ...         "attributes": {"armour": {"baseValue": 10, "isGrouped": True}},
    ...         "equippedItemIds": ["plate"],
    ...     }
    ... )
    >>> character.attribute("ARMOUR").value
    10.0
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from statcraft.models.enums import ConditionPolarity, DieSize, EffectType, TargetType


def _none_to_zero(value: Any) -> Any:
    """Coerce a missing numeric input to 0."""
    return 0.0 if value is None else value


def _upper(value: Any) -> Any:
    """Normalise enum spellings such as 'help' or 'trigger_action'."""
    return value.strip().upper() if isinstance(value, str) else value


class RecordModel(BaseModel):
    """Base configuration shared by all records."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


# =============================================================================
# Attributes
# =============================================================================


class AttributeDefinition(RecordModel):
    """Global classification of one attribute.

    Attributes:
        name: Attribute name, stored upper case.
        die: Die bound to the attribute, or ``DieSize.STATIC``.
    """

    name: str = Field(min_length=1)
    die: DieSize = DieSize.STATIC

    @field_validator("name", mode="before")
    @classmethod
    def normalise_name(cls, value: Any) -> Any:
        """Store names upper case so lookups are case-insensitive."""
        return _upper(value)

    @property
    def uses_dice(self) -> bool:
        """Whether the attribute is rolled."""
        return not self.die.is_static


class AttributeInstance(RecordModel):
    """One entity's value for one attribute.

    Attributes:
        value: Numeric base value. Missing values resolve to 0.
        is_grouped: Whether this value takes part in grouping.
    """

    value: float = Field(
        default=0.0,
        validation_alias=AliasChoices("value", "baseValue", "base_value", "attributeValue"),
    )
    is_grouped: bool = True

    @model_validator(mode="before")
    @classmethod
    def accept_bare_number(cls, data: Any) -> Any:
        """Allow ``{"strength": 10}`` as shorthand for a grouped value."""
        if data is None or isinstance(data, (int, float)):
            return {"value": data}
        return data

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value(cls, value: Any) -> Any:
        """Missing values resolve to 0."""
        return _none_to_zero(value)

    @field_validator("is_grouped", mode="before")
    @classmethod
    def default_grouped(cls, value: Any) -> Any:
        """An unspecified grouping flag means grouped."""
        return True if value is None else value


def _normalise_attribute_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(key).strip().lower(): item for key, item in value.items()}
    return value


class Condition(RecordModel):
    """A help or hinder applied to one attribute of a character.

    Attributes:
        id: Condition identifier.
        name: Display name.
        target_attribute: Attribute the condition modifies.
        polarity: HELP adds the amount, HINDER subtracts it.
        amount: Size of the modification.
    """

    id: str = Field(validation_alias=AliasChoices("id", "conditionId"))
    name: str = ""
    target_attribute: str = Field(
        validation_alias=AliasChoices("targetAttribute", "target_attribute", "conditionTarget")
    )
    polarity: ConditionPolarity = Field(
        validation_alias=AliasChoices("polarity", "conditionType")
    )
    amount: float = Field(
        default=0.0,
        validation_alias=AliasChoices("amount", "conditionAmount"),
    )

    @field_validator("polarity", mode="before")
    @classmethod
    def normalise_polarity(cls, value: Any) -> Any:
        return _upper(value)

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, value: Any) -> Any:
        return _none_to_zero(value)

    def targets(self, attribute_name: str) -> bool:
        """Whether this condition applies to ``attribute_name``."""
        return self.target_attribute.strip().lower() == attribute_name.strip().lower()

    @property
    def signed_amount(self) -> float:
        """Amount with the polarity applied."""
        return self.polarity.sign * self.amount


# =============================================================================
# Entities
# =============================================================================


class Item(RecordModel):
    """An object a character can equip or ready.

    Only attributes where the item meaningfully participates are listed.
    An item may itself carry equipment, which is grouped into the item's
    own value.

    Attributes:
        id: Item identifier.
        name: Display name.
        attributes: Per-attribute contributions keyed by lower-case name.
        equipped_item_ids: Items attached to this item.
    """

    id: str = Field(validation_alias=AliasChoices("id", "objectId", "itemId"))
    name: str = ""
    attributes: dict[str, AttributeInstance] = Field(default_factory=dict)
    equipped_item_ids: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("equippedItemIds", "equipped_item_ids", "equipmentIds"),
    )

    @field_validator("attributes", mode="before")
    @classmethod
    def normalise_keys(cls, value: Any) -> Any:
        return _normalise_attribute_keys(value)

    def attribute(self, name: str) -> AttributeInstance | None:
        """Look up an attribute case-insensitively."""
        return self.attributes.get(name.strip().lower())


class Character(RecordModel):
    """A character with base attributes, carried items and conditions.

    Attributes:
        id: Character identifier.
        name: Display name.
        attributes: Base attributes keyed by lower-case name.
        equipped_item_ids: Equipped items, in display order.
        ready_item_ids: Readied items, considered only in ready mode.
        active_condition_ids: Conditions currently affecting the character.
        fatigue: Legacy fatigue penalty, interpreted by the rule set.
    """

    id: str = Field(validation_alias=AliasChoices("id", "characterId"))
    name: str = ""
    attributes: dict[str, AttributeInstance] = Field(default_factory=dict)
    equipped_item_ids: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("equippedItemIds", "equipped_item_ids", "equipmentIds"),
    )
    ready_item_ids: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("readyItemIds", "ready_item_ids", "readyIds"),
    )
    active_condition_ids: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices(
            "activeConditionIds", "active_condition_ids", "conditionIds"
        ),
    )
    fatigue: float = 0.0

    @field_validator("attributes", mode="before")
    @classmethod
    def normalise_keys(cls, value: Any) -> Any:
        return _normalise_attribute_keys(value)

    @field_validator("fatigue", mode="before")
    @classmethod
    def coerce_fatigue(cls, value: Any) -> Any:
        return _none_to_zero(value)

    def attribute(self, name: str) -> AttributeInstance | None:
        """Look up an attribute case-insensitively."""
        return self.attributes.get(name.strip().lower())


# =============================================================================
# Actions
# =============================================================================


class Action(RecordModel):
    """An action a character can attempt.

    Attributes:
        id: Action identifier.
        name: Display name.
        category: Free-form grouping used by list views.
        source_attribute: Attribute of the acting character.
        target_attribute: Attribute of the target resisting the action.
        target_type: Whether the target is a character or an object.
        effect_type: Outcome of a success; TRIGGER_ACTION chains on.
        next_action_ids: Ordered actions triggered by TRIGGER_ACTION.
    """

    id: str = Field(validation_alias=AliasChoices("id", "actionId"))
    name: str = ""
    category: str = ""
    source_attribute: str = Field(min_length=1)
    target_attribute: str = Field(min_length=1)
    target_type: TargetType = TargetType.CHARACTER
    effect_type: EffectType = EffectType.DESTROY
    next_action_ids: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def fold_single_next_action(cls, data: Any) -> Any:
        """Accept the single ``nextActionId`` wire form."""
        if not isinstance(data, dict):
            return data
        if data.get("nextActionIds") or data.get("next_action_ids"):
            return data
        for key in ("nextActionId", "next_action_id", "triggersActionId"):
            single = data.get(key)
            if single:
                return {**data, "nextActionIds": [single]}
        return data

    @field_validator("target_type", "effect_type", mode="before")
    @classmethod
    def normalise_enum(cls, value: Any) -> Any:
        return _upper(value)

    @property
    def next_action_id(self) -> str | None:
        """First triggered action, if any."""
        return self.next_action_ids[0] if self.next_action_ids else None

    @property
    def triggers(self) -> bool:
        """Whether this action hands off to another action."""
        return self.effect_type is EffectType.TRIGGER_ACTION and bool(self.next_action_ids)


class ChainOverride(RecordModel):
    """Fixed values for one link of an action chain.

    A side left as None keeps the resolved value of the real entities.

    Attributes:
        source_value: Replaces the source's effective value for this link.
        target_value: Replaces the target's effective value for this link.
    """

    source_value: float | None = Field(
        default=None,
        validation_alias=AliasChoices("sourceValue", "source_value", "sourceOverrideValue"),
    )
    target_value: float | None = Field(
        default=None,
        validation_alias=AliasChoices("targetValue", "target_value", "targetOverrideValue"),
    )

    @property
    def is_empty(self) -> bool:
        return self.source_value is None and self.target_value is None


__all__ = [
    "RecordModel",
    "AttributeDefinition",
    "AttributeInstance",
    "Condition",
    "Item",
    "Character",
    "Action",
    "ChainOverride",
]
