"""Pydantic V2 schemas for the statcraft rules engine.

Submodules:
    enums: Enumeration types (DieSize, EntityKind, EffectType, ...)
    records: Input records (Character, Item, Condition, Action)
    results: Derived results (Contribution, AttributeResolution, ActionTestResult)

Example:
    >>> from statcraft.models import Character, Item
    >>> hero = Character(id="c1", name="Rook", attributes={"armour": 10})
    >>> plate = Item(id="i1", name="Plate", attributes={"armour": 20})
"""

from __future__ import annotations

# =============================================================================
# Enumerations
# =============================================================================
from statcraft.models.enums import (
    ChainState,
    ConditionPolarity,
    DieSize,
    EffectType,
    EntityKind,
    FatigueRule,
    GroupingMode,
    TargetType,
)

# =============================================================================
# Records
# =============================================================================
from statcraft.models.records import (
    Action,
    AttributeDefinition,
    AttributeInstance,
    ChainOverride,
    Character,
    Condition,
    Item,
)

# =============================================================================
# Results
# =============================================================================
from statcraft.models.results import (
    ActionChainNode,
    ActionTestResult,
    AttributeResolution,
    ConditionAdjustment,
    ContestResult,
    Contribution,
    ContributionSource,
    DiceRoll,
    GroupedValue,
    RollRange,
    RollRequirement,
    display_round,
    round_half_up,
)


__all__ = [
    # === Enumerations ===
    "DieSize",
    "EntityKind",
    "ConditionPolarity",
    "TargetType",
    "EffectType",
    "GroupingMode",
    "ChainState",
    "FatigueRule",
    # === Records ===
    "AttributeDefinition",
    "AttributeInstance",
    "Condition",
    "Item",
    "Character",
    "Action",
    "ChainOverride",
    # === Results ===
    "round_half_up",
    "display_round",
    "RollRange",
    "ContributionSource",
    "Contribution",
    "ConditionAdjustment",
    "GroupedValue",
    "AttributeResolution",
    "RollRequirement",
    "ActionChainNode",
    "ActionTestResult",
    "DiceRoll",
    "ContestResult",
]
