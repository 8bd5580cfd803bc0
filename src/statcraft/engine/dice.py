"""Rolling attribute checks and opposed contests.

Rolls use the d20 library. Attribute rolls are ``1d{size}{+/-}{modifier}``
for dice attributes; static attributes are not rolled and report their
value as the total.
"""

from __future__ import annotations

import random

import d20

from statcraft.core.exceptions import DiceRollError
from statcraft.core.logging import get_logger
from statcraft.engine.catalog import AttributeCatalog
from statcraft.engine.modifiers import ModifierResolver
from statcraft.models.results import ContestResult, DiceRoll


logger = get_logger(__name__)


class DiceRoller:
    """Rolls attribute checks and source-versus-target contests.

    Example:
        >>> roller = DiceRoller(seed=7)
        >>> roller.roll_attribute("strength", 5).expression
        '1d8+5'
    """

    def __init__(
        self,
        catalog: AttributeCatalog | None = None,
        *,
        seed: int | None = None,
    ) -> None:
        """Initialize the dice roller.

        Args:
            catalog: Attribute classification table.
            seed: Optional random seed for reproducible rolls.
        """
        self.catalog = catalog or AttributeCatalog()
        self._formatter = ModifierResolver(self.catalog)
        self._seed = seed
        if seed is not None:
            random.seed(seed)
        logger.debug("DiceRoller initialized", seed=seed)

    def roll(self, expression: str) -> int:
        """Roll a dice expression and return its total.

        Args:
            expression: Dice expression (e.g. '1d8+5', '2d6-1').

        Returns:
            The rolled total.

        Raises:
            DiceRollError: If the expression is empty or invalid.
        """
        if not expression or not expression.strip():
            raise DiceRollError("Empty dice expression", expression=expression)
        try:
            result = d20.roll(expression)
        except d20.RollError as exc:
            raise DiceRollError(
                f"Invalid dice expression: {exc}",
                expression=expression,
            ) from exc
        logger.debug("Dice rolled", expression=expression, total=result.total)
        return result.total

    def roll_attribute(self, attribute_name: str | None, modifier: int) -> DiceRoll:
        """Roll one attribute with its effective value as modifier.

        Args:
            attribute_name: Attribute being rolled.
            modifier: Effective value of the attribute.

        Returns:
            The roll; ``face`` is None for static attributes.
        """
        expression = self._formatter.format_roll(attribute_name, modifier)
        if not self.catalog.uses_dice(attribute_name):
            return DiceRoll(expression=expression, total=modifier, modifier=modifier)
        total = self.roll(expression)
        return DiceRoll(
            expression=expression,
            total=total,
            face=total - modifier,
            modifier=modifier,
        )

    def contest(
        self,
        source_attribute: str | None,
        source_modifier: int,
        target_attribute: str | None,
        target_modifier: int,
    ) -> ContestResult:
        """Roll the source against the target; ties go to the target.

        Args:
            source_attribute: Attribute of the acting side.
            source_modifier: Effective value of the acting side.
            target_attribute: Attribute of the resisting side.
            target_modifier: Effective value of the resisting side.

        Returns:
            Both rolls, whether the source won, and the margin.
        """
        source = self.roll_attribute(source_attribute, source_modifier)
        target = self.roll_attribute(target_attribute, target_modifier)
        margin = source.total - target.total
        logger.info(
            "Contest rolled",
            source=source.expression,
            source_total=source.total,
            target=target.expression,
            target_total=target.total,
            success=margin > 0,
        )
        return ContestResult(source=source, target=target, success=margin > 0, margin=margin)


__all__ = [
    "DiceRoller",
]
