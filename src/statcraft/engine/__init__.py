"""Stat resolution and action-difficulty engine.

Submodules:
    rules: Injectable rule-set tables (dice, bands, fatigue, grouping)
    catalog: Dice-based versus static attribute classification
    modifiers: Conditions, fatigue and roll formatting
    grouping: Diminishing-returns fold with breakdown
    actions: Difficulty, band, roll requirement and success chance
    chain: TRIGGER_ACTION chain expansion
    dice: Attribute rolls and contests (d20 library)
    resolver: StatEngine facade

Example:
    >>> from statcraft.engine import StatEngine
    >>> engine = StatEngine(records)
    >>> engine.test_action(hit, hero, goblin).difficulty
    -9
"""

from __future__ import annotations

# =============================================================================
# Rules & Classification
# =============================================================================
from statcraft.engine.catalog import AttributeCatalog
from statcraft.engine.rules import DifficultyBand, RuleSet

# =============================================================================
# Components
# =============================================================================
from statcraft.engine.actions import ActionResolver, FixedView, SupportsEffective
from statcraft.engine.chain import ChainExpander, ChainLink, apply_override
from statcraft.engine.grouping import GroupingEngine, fold
from statcraft.engine.modifiers import ModifierResolver

# =============================================================================
# Dice Rolling
# =============================================================================
from statcraft.engine.dice import DiceRoller

# =============================================================================
# Facade
# =============================================================================
from statcraft.engine.resolver import (
    EntityView,
    StatEngine,
    resolve_attribute,
    test_action,
)


__all__ = [
    # === Rules & Classification ===
    "RuleSet",
    "DifficultyBand",
    "AttributeCatalog",
    # === Components ===
    "ModifierResolver",
    "GroupingEngine",
    "fold",
    "ActionResolver",
    "SupportsEffective",
    "FixedView",
    "ChainExpander",
    "ChainLink",
    "apply_override",
    # === Dice Rolling ===
    "DiceRoller",
    # === Facade ===
    "StatEngine",
    "EntityView",
    "resolve_attribute",
    "test_action",
]
