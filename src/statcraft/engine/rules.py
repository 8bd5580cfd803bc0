"""Immutable rule-set tables injected into every engine component.

A RuleSet bundles the attribute die table, the difficulty bands, the
fatigue rule version and the grouping constants. Components receive one at
construction time instead of reading module-level globals, so alternate
rule sets can be tested side by side.

Example:
    >>> rules = RuleSet.default()
    >>> legacy = RuleSet.legacy()
    >>> custom = rules.with_dice({"perception": 8})
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, model_validator

from statcraft.core.constants import (
    DEFAULT_ATTRIBUTE_DICE,
    DEFAULT_DIFFICULTY_BANDS,
    DEFAULT_GROUPING_SCALE,
    DEFAULT_MAX_CHAIN_LENGTH,
    DEFAULT_PLAUSIBILITY_TOLERANCE,
)
from statcraft.core.exceptions import ConfigurationError
from statcraft.models.enums import DieSize, FatigueRule
from statcraft.models.records import AttributeDefinition


if TYPE_CHECKING:
    from statcraft.core.config import Settings


class DifficultyBand(BaseModel):
    """Upper bound (inclusive) of a difficulty band and its label."""

    model_config = ConfigDict(frozen=True)

    ceiling: float
    label: str = Field(min_length=1)


def _default_definitions() -> tuple[AttributeDefinition, ...]:
    return tuple(
        AttributeDefinition(name=name, die=DieSize(size))
        for name, size in DEFAULT_ATTRIBUTE_DICE.items()
    )


def _default_bands() -> tuple[DifficultyBand, ...]:
    return tuple(
        DifficultyBand(ceiling=ceiling, label=label)
        for ceiling, label in DEFAULT_DIFFICULTY_BANDS
    )


class RuleSet(BaseModel):
    """Configuration tables for one version of the rules.

    Attributes:
        definitions: Attribute classification table.
        bands: Difficulty bands ordered by ascending ceiling.
        fatigue_rule: How fatigue affects dice-based attributes.
        grouping_scale: Constant term of the grouping fold.
        plausibility_tolerance: Accepted gap for precomputed grouped values.
        max_chain_length: Hard stop for trigger chains.
    """

    model_config = ConfigDict(frozen=True)

    definitions: tuple[AttributeDefinition, ...] = Field(default_factory=_default_definitions)
    bands: tuple[DifficultyBand, ...] = Field(default_factory=_default_bands)
    fatigue_rule: FatigueRule = FatigueRule.IGNORE
    grouping_scale: float = Field(default=DEFAULT_GROUPING_SCALE, gt=0, le=1)
    plausibility_tolerance: float = Field(default=DEFAULT_PLAUSIBILITY_TOLERANCE, ge=0)
    max_chain_length: int = Field(default=DEFAULT_MAX_CHAIN_LENGTH, ge=1)

    @model_validator(mode="after")
    def validate_tables(self) -> "RuleSet":
        """Reject duplicate attributes and unusable band tables.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If a table is malformed.
        """
        seen: set[str] = set()
        for definition in self.definitions:
            if definition.name in seen:
                raise ConfigurationError(
                    f"Attribute {definition.name} is defined more than once",
                    config_key="definitions",
                )
            seen.add(definition.name)

        if not self.bands:
            raise ConfigurationError(
                "Difficulty band table must not be empty",
                config_key="bands",
            )
        ceilings = [band.ceiling for band in self.bands]
        if any(math.isnan(c) for c in ceilings) or any(
            later <= earlier for earlier, later in zip(ceilings, ceilings[1:])
        ):
            raise ConfigurationError(
                "Difficulty band ceilings must be strictly ascending",
                config_key="bands",
                details={"ceilings": ceilings},
            )
        return self

    @classmethod
    def default(cls) -> RuleSet:
        """The current rule set."""
        return cls()

    @classmethod
    def legacy(cls) -> RuleSet:
        """The legacy rule set that subtracts fatigue from dice attributes."""
        return cls(fatigue_rule=FatigueRule.SUBTRACT_FROM_DICE)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> RuleSet:
        """Build a rule set from application settings.

        Args:
            settings: Settings to read; the cached singleton when omitted.

        Returns:
            A RuleSet carrying the configured tuning parameters.
        """
        if settings is None:
            from statcraft.core.config import get_settings

            settings = get_settings()
        rules = settings.rules
        return cls(
            fatigue_rule=FatigueRule(rules.fatigue_rule),
            grouping_scale=rules.grouping_scale,
            plausibility_tolerance=rules.plausibility_tolerance,
            max_chain_length=rules.max_chain_length,
        )

    def with_dice(self, overrides: Mapping[str, int | DieSize]) -> RuleSet:
        """Return a copy with some attributes re-bound to other dice.

        Args:
            overrides: Attribute name to die size; 0 makes it static.

        Returns:
            A new RuleSet; this one is left untouched.
        """
        table = {definition.name: definition.die for definition in self.definitions}
        for name, size in overrides.items():
            try:
                table[name.strip().upper()] = DieSize(size)
            except ValueError as exc:
                raise ConfigurationError(
                    f"Unsupported die size {size!r} for attribute {name}",
                    config_key="definitions",
                ) from exc
        definitions = tuple(
            AttributeDefinition(name=name, die=die) for name, die in table.items()
        )
        return self.model_copy(update={"definitions": definitions})

    def with_bands(self, bands: Mapping[float, str] | list[tuple[float, str]]) -> RuleSet:
        """Return a copy using a different difficulty band table."""
        pairs = bands.items() if isinstance(bands, Mapping) else bands
        table = tuple(DifficultyBand(ceiling=ceiling, label=label) for ceiling, label in pairs)
        return type(self)(**{**self.__dict__, "bands": table})


__all__ = [
    "DifficultyBand",
    "RuleSet",
]
