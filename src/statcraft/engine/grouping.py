"""Diminishing-returns grouping of a character's and its items' values.

When several sources provide the same attribute (a character's own armour
plus a breastplate plus a shield), the values are not added. They are
folded pairwise, largest first::

    combined = (a + b * (scale + b / a)) / 2        with a >= b

so a second source shrinks in effect the smaller it is relative to the
running total. Full precision is kept between folds; only the reported
value is rounded. Every fold appends a Contribution so the result can be
explained step by step.

Example:
    >>> engine = GroupingEngine()
    >>> result = engine.grouped_value(
    ...     "armour",
    ...     [
    ...         ContributionSource(entity_id="c1", kind=EntityKind.CHARACTER, value=10),
    ...         ContributionSource(entity_id="i1", kind=EntityKind.EQUIPPED_ITEM, value=20),
    ...     ],
    ... )
    >>> result.value, result.exact_value
    (14, 13.75)
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

from statcraft.core.constants import DEFAULT_GROUPING_SCALE, DEFAULT_PLAUSIBILITY_TOLERANCE
from statcraft.core.logging import get_logger
from statcraft.engine.rules import RuleSet
from statcraft.models.enums import EntityKind
from statcraft.models.results import (
    Contribution,
    ContributionSource,
    GroupedValue,
    display_round,
)


logger = get_logger(__name__)

NOT_GROUPED = "Not grouped"


def _fmt(value: float) -> str:
    return f"{value:.6g}"


def fold(a: float, b: float, scale: float = DEFAULT_GROUPING_SCALE) -> tuple[float, str]:
    """Combine a running value with one more contribution.

    Args:
        a: Running value.
        b: Next contribution.
        scale: Constant term of the fold.

    Returns:
        The combined value and the formula used, for the breakdown.
    """
    if a < b:
        a, b = b, a
    if a == 0:
        # ratio term undefined; keep only the constant share
        return (a + b * scale) / 2, f"({_fmt(a)} + {_fmt(b)}*{_fmt(scale)}) / 2"
    combined = (a + b * (scale + b / a)) / 2
    formula = f"({_fmt(a)} + {_fmt(b)}*({_fmt(scale)}+{_fmt(b)}/{_fmt(a)})) / 2"
    return combined, formula


class GroupingEngine:
    """Folds contributions into one grouped attribute value.

    Args:
        scale: Constant term of the fold.
        tolerance: Largest accepted gap between a caller-supplied
            precomputed value and the local result.
    """

    def __init__(
        self,
        *,
        scale: float = DEFAULT_GROUPING_SCALE,
        tolerance: float = DEFAULT_PLAUSIBILITY_TOLERANCE,
    ) -> None:
        self.scale = scale
        self.tolerance = tolerance

    @classmethod
    def from_rules(cls, rules: RuleSet) -> GroupingEngine:
        return cls(scale=rules.grouping_scale, tolerance=rules.plausibility_tolerance)

    def grouped_value(
        self,
        attribute_name: str,
        contributions: Sequence[ContributionSource],
        *,
        precomputed: float | None = None,
    ) -> GroupedValue:
        """Group the contributions offered for one attribute.

        Only grouped, nonzero contributions participate; the rest are
        reported in ``skipped``. With no participant the value falls back
        to the owning entity's own value.

        Args:
            attribute_name: Attribute being grouped.
            contributions: Owner first, then equipped items, then ready items.
            precomputed: Value supplied by an external resolver, checked
                against the local result and never reported verbatim.

        Returns:
            The grouped value with its breakdown.
        """
        participants = [c for c in contributions if c.is_grouped and c.value != 0]
        skipped = tuple(c for c in contributions if not (c.is_grouped and c.value != 0))

        if not participants:
            result = self._ungrouped(attribute_name, contributions, skipped)
        else:
            result = self._fold(attribute_name, participants, skipped)

        if precomputed is not None and not self._plausible(precomputed, result, bool(participants)):
            logger.warning(
                "Discarding implausible precomputed grouped value",
                attribute=attribute_name,
                precomputed=precomputed,
                recomputed=result.exact_value,
            )
            result = result.model_copy(update={"precomputed_discarded": True})
        return result

    def combine(
        self,
        attribute_name: str,
        values: Iterable[tuple[str, str, float]],
        *,
        kind: EntityKind = EntityKind.CHARACTER,
    ) -> GroupedValue:
        """Group already-resolved values of several entities.

        Used when several characters act together, or several targets
        resist together. Only members with a positive value take part; a
        member who cannot contribute is skipped rather than dragging the
        group down. With no positive member the group value is 0.

        Args:
            attribute_name: Attribute being grouped.
            values: ``(entity_id, entity_name, value)`` triples.
            kind: Role recorded for each entity.
        """
        sources = [
            ContributionSource(entity_id=entity_id, entity_name=name, kind=kind, value=value)
            for entity_id, name, value in values
        ]
        members = [source for source in sources if source.value > 0]
        result = self.grouped_value(attribute_name, members)
        left_out = tuple(source for source in sources if source.value <= 0)
        if not left_out:
            return result
        return result.model_copy(update={"skipped": result.skipped + left_out})

    def _fold(
        self,
        attribute_name: str,
        participants: list[ContributionSource],
        skipped: tuple[ContributionSource, ...],
    ) -> GroupedValue:
        ordered = sorted(participants, key=lambda c: c.value, reverse=True)
        first = ordered[0]
        running = first.value
        breakdown = [
            Contribution(
                step=1,
                entity_id=first.entity_id,
                entity_name=first.entity_name,
                entity_kind=first.kind,
                value=first.value,
                is_grouped=first.is_grouped,
                running_total=running,
                formula=f"Start: {_fmt(running)}",
            )
        ]
        for step, source in enumerate(ordered[1:], start=2):
            running, formula = fold(running, source.value, self.scale)
            breakdown.append(
                Contribution(
                    step=step,
                    entity_id=source.entity_id,
                    entity_name=source.entity_name,
                    entity_kind=source.kind,
                    value=source.value,
                    is_grouped=source.is_grouped,
                    running_total=running,
                    formula=formula,
                )
            )

        logger.debug(
            "Attribute grouped",
            attribute=attribute_name,
            participants=len(ordered),
            skipped=len(skipped),
            value=running,
        )
        return GroupedValue(
            attribute_name=attribute_name,
            value=display_round(running),
            exact_value=running,
            breakdown=tuple(breakdown),
            skipped=skipped,
        )

    def _ungrouped(
        self,
        attribute_name: str,
        contributions: Sequence[ContributionSource],
        skipped: tuple[ContributionSource, ...],
    ) -> GroupedValue:
        owner = next(
            (c for c in contributions if c.kind in (EntityKind.CHARACTER, EntityKind.OBJECT)),
            contributions[0] if contributions else None,
        )
        if owner is None:
            return GroupedValue(attribute_name=attribute_name, value=0, exact_value=0.0)

        step = Contribution(
            step=1,
            entity_id=owner.entity_id,
            entity_name=owner.entity_name,
            entity_kind=owner.kind,
            value=owner.value,
            is_grouped=owner.is_grouped,
            running_total=owner.value,
            formula=NOT_GROUPED,
        )
        return GroupedValue(
            attribute_name=attribute_name,
            value=display_round(owner.value),
            exact_value=owner.value,
            breakdown=(step,),
            skipped=tuple(c for c in skipped if c is not owner),
        )

    def _plausible(self, precomputed: float, result: GroupedValue, has_participants: bool) -> bool:
        if not math.isfinite(precomputed):
            return False
        if has_participants and precomputed == 0:
            return False
        return abs(precomputed - result.exact_value) <= self.tolerance


__all__ = [
    "NOT_GROUPED",
    "fold",
    "GroupingEngine",
]
