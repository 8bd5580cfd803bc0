"""Combine a base attribute value with condition modifiers and fatigue."""

from __future__ import annotations

from collections.abc import Iterable

from statcraft.core.logging import get_logger
from statcraft.engine.catalog import AttributeCatalog
from statcraft.engine.rules import RuleSet
from statcraft.models.enums import FatigueRule
from statcraft.models.records import Condition
from statcraft.models.results import ConditionAdjustment, RollRange, round_half_up


logger = get_logger(__name__)


class ModifierResolver:
    """Turns raw numbers into the value a character actually rolls with.

    Args:
        catalog: Attribute classification table.
        fatigue_rule: Rule-set version for fatigue handling.
    """

    def __init__(
        self,
        catalog: AttributeCatalog | None = None,
        *,
        fatigue_rule: FatigueRule = FatigueRule.IGNORE,
    ) -> None:
        self.catalog = catalog or AttributeCatalog()
        self.fatigue_rule = FatigueRule(fatigue_rule)

    @classmethod
    def from_rules(
        cls, rules: RuleSet, catalog: AttributeCatalog | None = None
    ) -> ModifierResolver:
        return cls(catalog or AttributeCatalog.from_rules(rules), fatigue_rule=rules.fatigue_rule)

    def effective_value(
        self,
        base_value: float | None,
        fatigue: float | None,
        attribute_name: str | None,
    ) -> int:
        """Rounded value of an attribute after the fatigue rule.

        Under the current rule fatigue is ignored. Under the legacy rule it
        is subtracted from dice-based attributes, never below zero. Static
        attributes are only rounded.

        Args:
            base_value: Base or grouped value; None counts as 0.
            fatigue: Fatigue penalty; None counts as 0.
            attribute_name: Attribute being resolved.

        Returns:
            The value rounded half up.
        """
        value = base_value or 0.0
        if self.fatigue_rule is FatigueRule.IGNORE or not self.catalog.uses_dice(attribute_name):
            return round_half_up(value)
        return round_half_up(max(0.0, value - (fatigue or 0.0)))

    def apply_conditions(
        self,
        base_value: float | None,
        attribute_name: str,
        conditions: Iterable[Condition],
    ) -> tuple[float, tuple[ConditionAdjustment, ...]]:
        """Add HELP and subtract HINDER conditions aimed at one attribute.

        Args:
            base_value: The character's base value; None counts as 0.
            attribute_name: Attribute being resolved.
            conditions: The character's active conditions.

        Returns:
            The adjusted value and one adjustment per applied condition.
        """
        value = base_value or 0.0
        adjustments: list[ConditionAdjustment] = []
        for condition in conditions:
            if not condition.targets(attribute_name):
                continue
            before = value
            value += condition.signed_amount
            adjustments.append(
                ConditionAdjustment(
                    condition_id=condition.id,
                    condition_name=condition.name,
                    polarity=condition.polarity,
                    amount=condition.amount,
                    value_before=before,
                    value_after=value,
                )
            )
        if adjustments:
            logger.debug(
                "Conditions applied",
                attribute=attribute_name,
                base=base_value,
                adjusted=value,
                count=len(adjustments),
            )
        return value, tuple(adjustments)

    def format_roll(self, attribute_name: str | None, modifier: int) -> str:
        """Display form of a roll, e.g. ``1d8+5`` or ``Static: 10``."""
        die = self.catalog.classify(attribute_name)
        if die.is_static:
            return f"Static: {modifier}"
        sign = "+" if modifier >= 0 else ""
        return f"1d{die.value}{sign}{modifier}"

    def range(self, attribute_name: str | None, modifier: int) -> RollRange:
        """Lowest and highest total of an attribute roll."""
        die = self.catalog.classify(attribute_name)
        if die.is_static:
            return RollRange(min=modifier, max=modifier)
        faces = self.catalog.die_range(die)
        return RollRange(min=faces.min + modifier, max=faces.max + modifier)


__all__ = [
    "ModifierResolver",
]
