"""Difficulty, difficulty band and roll requirement of an action attempt.

Difficulty is the target's effective value of the action's target
attribute minus the source's effective value of its source attribute, so
positive numbers are hard and negative numbers are easy. Ties always go
to the target.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from statcraft.core.logging import get_logger
from statcraft.engine.catalog import AttributeCatalog
from statcraft.engine.rules import DifficultyBand, RuleSet
from statcraft.models.enums import DieSize
from statcraft.models.records import Action
from statcraft.models.results import RollRequirement, round_half_up


logger = get_logger(__name__)


@runtime_checkable
class SupportsEffective(Protocol):
    """Anything that can report an effective attribute value."""

    def effective(self, attribute_name: str) -> int:
        """Effective value of ``attribute_name``."""
        ...


class FixedView:
    """A side whose value is supplied by the caller for every attribute."""

    def __init__(self, value: float) -> None:
        self._value = round_half_up(value)

    def effective(self, attribute_name: str) -> int:
        return self._value


class ActionResolver:
    """Computes how hard an action is for a source against a target.

    Args:
        catalog: Attribute classification table.
        bands: Difficulty bands ordered by ascending ceiling.
    """

    def __init__(
        self,
        catalog: AttributeCatalog | None = None,
        bands: Sequence[DifficultyBand] | None = None,
    ) -> None:
        self.catalog = catalog or AttributeCatalog()
        self.bands = tuple(bands) if bands is not None else RuleSet.default().bands

    @classmethod
    def from_rules(cls, rules: RuleSet, catalog: AttributeCatalog | None = None) -> ActionResolver:
        return cls(catalog or AttributeCatalog.from_rules(rules), rules.bands)

    def difficulty(
        self,
        action: Action,
        source: SupportsEffective,
        target: SupportsEffective,
    ) -> int:
        """Target value minus source value for the action's attributes."""
        target_value = target.effective(action.target_attribute)
        source_value = source.effective(action.source_attribute)
        difficulty = target_value - source_value
        logger.debug(
            "Difficulty computed",
            action_id=action.id,
            source_value=source_value,
            target_value=target_value,
            difficulty=difficulty,
        )
        return difficulty

    def band(self, difficulty: float) -> str:
        """Qualitative label for a difficulty.

        Ceilings are inclusive. Anything above the last ceiling gets the
        last band's label.

        Example:
            >>> ActionResolver().band(-9)
            'Easy'
        """
        for band in self.bands:
            if difficulty <= band.ceiling:
                return band.label
        return self.bands[-1].label

    def roll_needed(self, action: Action, difficulty: int) -> RollRequirement:
        """Lowest face of the source die that beats the difficulty.

        The source has to roll strictly more than the difficulty. A static
        source attribute has no die: it succeeds outright when the
        difficulty is negative and never otherwise.

        Args:
            action: Action being attempted.
            difficulty: Target value minus source value.

        Returns:
            The roll requirement for display.
        """
        die = self.catalog.classify(action.source_attribute)
        if die.is_static:
            if difficulty < 0:
                return RollRequirement(die=die, guaranteed=True, label="Automatic success")
            return RollRequirement(die=die, impossible=True, label="Impossible")

        faces = self.catalog.die_range(die)
        min_face = max(1, difficulty + 1)
        if min_face > faces.max:
            return RollRequirement(die=die, impossible=True, label="Impossible")
        if min_face == 1:
            return RollRequirement(
                die=die, min_face=1, guaranteed=True, label="Automatic success"
            )
        return RollRequirement(
            die=die,
            min_face=min_face,
            label=f"{min_face}+ on {die.label}",
        )

    def success_probability(
        self,
        action: Action,
        source_modifier: int,
        target_modifier: int,
    ) -> float:
        """Exact chance that the source total beats the target total.

        Every face combination is enumerated; static sides contribute
        their modifier only.

        Args:
            action: Action being attempted.
            source_modifier: Effective source value.
            target_modifier: Effective target value.

        Returns:
            Probability between 0 and 1.
        """
        source_faces = _faces(self.catalog.classify(action.source_attribute))
        target_faces = _faces(self.catalog.classify(action.target_attribute))

        wins = 0
        for source_roll in source_faces:
            for target_roll in target_faces:
                if source_roll + source_modifier > target_roll + target_modifier:
                    wins += 1
        return wins / (len(source_faces) * len(target_faces))


def _faces(die: DieSize) -> range:
    # a static side rolls a single virtual 0
    if die.is_static:
        return range(0, 1)
    return range(1, die.value + 1)


__all__ = [
    "SupportsEffective",
    "FixedView",
    "ActionResolver",
]
