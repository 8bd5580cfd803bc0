"""Derived results produced by the rules engine.

Nothing in this module is persisted: every value is recomputed on each
resolution call. All models are frozen and serialise losslessly to JSON.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, computed_field

from statcraft.models.enums import (
    ChainState,
    ConditionPolarity,
    DieSize,
    EntityKind,
    GroupingMode,
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with ties going up.

    Ties go towards positive infinity, so ``10.5 -> 11`` and ``-2.5 -> -2``.

    Example:
        >>> round_half_up(13.75)
        14
        >>> round_half_up(10.4)
        10
    """
    return math.floor(value + 0.5)


def display_round(value: float) -> int:
    """Round half up, but never show a nonzero value as 0.

    Example:
        >>> display_round(0.4), display_round(-0.5), display_round(0)
        (1, -1, 0)
    """
    rounded = round_half_up(value)
    if rounded == 0 and value != 0:
        return 1 if value > 0 else -1
    return rounded


class ResultModel(BaseModel):
    """Base configuration shared by all results."""

    model_config = ConfigDict(frozen=True)


class RollRange(ResultModel):
    """Lowest and highest possible total of a roll."""

    min: int = 0
    max: int = 0


class ContributionSource(ResultModel):
    """One entry offered to the grouping fold.

    Attributes:
        entity_id: Identifier of the character or item.
        entity_name: Display name.
        kind: Role of the entity in this grouping.
        value: Raw value offered for the attribute.
        is_grouped: Whether the value may take part in grouping.
    """

    entity_id: str
    entity_name: str = ""
    kind: EntityKind
    value: float = 0.0
    is_grouped: bool = True


class Contribution(ResultModel):
    """One step of a grouping breakdown.

    Attributes:
        step: 1-based position in the breakdown.
        entity_id: Identifier of the contributing entity.
        entity_name: Display name of the contributing entity.
        entity_kind: Role of the entity.
        value: Raw value contributed.
        is_grouped: Grouping flag of the contribution.
        running_total: Full-precision value after this step.
        formula: Human-readable formula applied at this step.
    """

    step: int = Field(ge=1)
    entity_id: str
    entity_name: str = ""
    entity_kind: EntityKind
    value: float
    is_grouped: bool
    running_total: float
    formula: str

    @computed_field  # type: ignore[prop-decorator]
    @property
    def display_total(self) -> int:
        """Running total rounded for display."""
        return display_round(self.running_total)


class ConditionAdjustment(ResultModel):
    """A condition applied to a character's base value before grouping."""

    condition_id: str
    condition_name: str = ""
    polarity: ConditionPolarity
    amount: float
    value_before: float
    value_after: float


class GroupedValue(ResultModel):
    """Outcome of the grouping fold for one attribute.

    Attributes:
        attribute_name: Attribute that was grouped.
        value: Final value through ``display_round``.
        exact_value: Full-precision final value.
        breakdown: Ordered fold steps; the last running total is ``exact_value``.
        skipped: Contributions that did not participate.
        precomputed_discarded: True when a caller-supplied value was rejected.
    """

    attribute_name: str
    value: int
    exact_value: float
    breakdown: tuple[Contribution, ...] = ()
    skipped: tuple[ContributionSource, ...] = ()
    precomputed_discarded: bool = False


class AttributeResolution(ResultModel):
    """Effective value of one attribute of one entity, with its audit trail."""

    entity_id: str
    attribute_name: str
    mode: GroupingMode
    die: DieSize
    value: int
    exact_value: float
    roll: str
    breakdown: tuple[Contribution, ...] = ()
    adjustments: tuple[ConditionAdjustment, ...] = ()
    skipped: tuple[ContributionSource, ...] = ()
    precomputed_discarded: bool = False


class RollRequirement(ResultModel):
    """Minimum die face needed to overcome a difficulty.

    Attributes:
        die: Die rolled by the source attribute.
        min_face: Lowest face that succeeds, or None when impossible.
        guaranteed: Every possible roll succeeds.
        impossible: No possible roll succeeds.
        label: Short human-readable description.
    """

    die: DieSize
    min_face: int | None = None
    guaranteed: bool = False
    impossible: bool = False
    label: str = ""


class ActionChainNode(ResultModel):
    """One action in a trigger chain with its difficulty.

    Attributes:
        position: 0-based position in the chain.
        action_id: Action at this position.
        action_name: Display name of the action.
        state: ROOT, LINKED or TERMINAL.
        terminal: True on the node the chain ends at, including a lone root.
        difficulty: Target value minus source value for this link.
        overridden: True when a fixed value replaced either side.
    """

    position: int = Field(ge=0)
    action_id: str
    action_name: str = ""
    state: ChainState
    terminal: bool = False
    difficulty: int | None = None
    overridden: bool = False


class ActionTestResult(ResultModel):
    """Full outcome of testing an action against a target.

    Attributes:
        action_id: Action under test.
        source_value: Effective source attribute value.
        target_value: Effective target attribute value.
        difficulty: Target value minus source value.
        band: Qualitative difficulty label.
        roll_needed: Minimum roll descriptor.
        success_probability: Exact chance that the source beats the target.
        chain: Trigger chain with per-link difficulty.
    """

    action_id: str
    source_value: int
    target_value: int
    difficulty: int
    band: str
    roll_needed: RollRequirement
    success_probability: float = Field(ge=0.0, le=1.0)
    chain: tuple[ActionChainNode, ...] = ()


class DiceRoll(ResultModel):
    """A rolled attribute."""

    expression: str
    total: int
    face: int | None = None
    modifier: int = 0


class ContestResult(ResultModel):
    """Opposed roll of a source attribute against a target attribute."""

    source: DiceRoll
    target: DiceRoll
    success: bool
    margin: int


__all__ = [
    "round_half_up",
    "display_round",
    "ResultModel",
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
