"""Default rule constants for the statcraft rules engine.

These are the defaults that seed a RuleSet. The engine never reads them
directly at resolution time; they are copied into an immutable RuleSet
which is injected into each component.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Final


# =============================================================================
# Attribute Dice
# =============================================================================

STATIC_DIE: Final = 0
"""Die size used to mark a static (non-rolled) attribute."""

DEFAULT_ATTRIBUTE_DICE: Final = MappingProxyType(
    {
        # Static attributes
        "WEIGHT": STATIC_DIE,
        "SIZE": STATIC_DIE,
        "LETHALITY": STATIC_DIE,
        "ARMOUR": STATIC_DIE,
        "ARMOR": STATIC_DIE,
        "ENDURANCE": STATIC_DIE,
        "PERCEPTION": STATIC_DIE,
        "INTENSITY": STATIC_DIE,
        "MORALE": STATIC_DIE,
        "OBSCURITY": STATIC_DIE,
        # Dice-based attributes
        "SPEED": 4,
        "STRENGTH": 8,
        "DEXTERITY": 6,
        "AGILITY": 10,
        "CHARISMA": 100,
        "INTELLIGENCE": 20,
        "RESOLVE": 12,
    }
)
"""Attribute name (upper case) to die size; 0 marks a static attribute."""

# =============================================================================
# Difficulty Bands
# =============================================================================

DEFAULT_DIFFICULTY_BANDS: Final = (
    (-10.0, "Very Easy"),
    (-5.0, "Easy"),
    (4.0, "Normal"),
    (9.0, "Hard"),
    (19.0, "Very Hard"),
    (float("inf"), "Extremely Hard"),
)
"""Ordered (inclusive ceiling, label) pairs mapping difficulty to a band."""

# =============================================================================
# Grouping
# =============================================================================

DEFAULT_GROUPING_SCALE: Final = 0.25
"""Constant term of the diminishing-returns grouping fold."""

DEFAULT_PLAUSIBILITY_TOLERANCE: Final = 0.5
"""Largest accepted gap between a precomputed and a local grouped value."""

# =============================================================================
# Action Chains
# =============================================================================

DEFAULT_MAX_CHAIN_LENGTH: Final = 32
"""Hard stop for trigger chains, on top of the visited-action guard."""


__all__ = [
    "STATIC_DIE",
    "DEFAULT_ATTRIBUTE_DICE",
    "DEFAULT_DIFFICULTY_BANDS",
    "DEFAULT_GROUPING_SCALE",
    "DEFAULT_PLAUSIBILITY_TOLERANCE",
    "DEFAULT_MAX_CHAIN_LENGTH",
]
