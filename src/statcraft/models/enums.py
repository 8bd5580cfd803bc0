"""Enumeration types for the statcraft rules engine."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class DieSize(IntEnum):
    """Die bound to an attribute.

    ``STATIC`` marks an attribute resolved as a fixed number rather than a
    roll; its value of 0 doubles as the "no die" range bound.
    """

    STATIC = 0
    D4 = 4
    D6 = 6
    D8 = 8
    D10 = 10
    D12 = 12
    D20 = 20
    D100 = 100

    @property
    def is_static(self) -> bool:
        """Whether this marks a static attribute."""
        return self is DieSize.STATIC

    @property
    def label(self) -> str:
        """Short notation, e.g. 'd8' or 'static'."""
        return "static" if self.is_static else f"d{self.value}"


class EntityKind(StrEnum):
    """Role an entity plays in a grouped attribute."""

    CHARACTER = "CHARACTER"
    EQUIPPED_ITEM = "EQUIPPED_ITEM"
    READY_ITEM = "READY_ITEM"
    OBJECT = "OBJECT"


class ConditionPolarity(StrEnum):
    """Direction in which a condition moves an attribute."""

    HELP = "HELP"
    HINDER = "HINDER"

    @property
    def sign(self) -> int:
        """+1 for HELP, -1 for HINDER."""
        return 1 if self is ConditionPolarity.HELP else -1


class TargetType(StrEnum):
    """What an action is aimed at."""

    CHARACTER = "CHARACTER"
    OBJECT = "OBJECT"


class EffectType(StrEnum):
    """What an action does once it succeeds."""

    DESTROY = "DESTROY"
    HELP = "HELP"
    HINDER = "HINDER"
    TRIGGER_ACTION = "TRIGGER_ACTION"


class GroupingMode(StrEnum):
    """Which carried items take part in attribute grouping.

    EQUIPMENT groups the character with its equipped items; READY also
    folds in the readied items.
    """

    EQUIPMENT = "equipment"
    READY = "ready"


class ChainState(StrEnum):
    """Position of an action inside a trigger chain."""

    ROOT = "ROOT"
    LINKED = "LINKED"
    TERMINAL = "TERMINAL"


class FatigueRule(StrEnum):
    """Rule-set version governing how fatigue affects dice attributes.

    IGNORE is the current rule. SUBTRACT_FROM_DICE reproduces the legacy
    behaviour where fatigue was subtracted from dice-based attributes,
    floored at zero.
    """

    IGNORE = "ignore"
    SUBTRACT_FROM_DICE = "subtract_dice"


__all__ = [
    "DieSize",
    "EntityKind",
    "ConditionPolarity",
    "TargetType",
    "EffectType",
    "GroupingMode",
    "ChainState",
    "FatigueRule",
]
