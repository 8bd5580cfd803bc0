"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the statcraft test suite.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest


if TYPE_CHECKING:
    from collections.abc import Generator


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from statcraft.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "STATCRAFT_DEBUG": "true",
        "STATCRAFT_LOG_LEVEL": "DEBUG",
        "STATCRAFT_RULES__FATIGUE_RULE": "subtract_dice",
        "STATCRAFT_RULES__GROUPING_SCALE": "0.5",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Record Fixtures
# =============================================================================


@pytest.fixture
def plate() -> Any:
    """Equipped breastplate adding armour."""
    from statcraft.models import Item

    return Item(id="plate", name="Breastplate", attributes={"armour": 20})


@pytest.fixture
def shield() -> Any:
    """Readied shield adding armour and costing agility."""
    from statcraft.models import Item

    return Item(
        id="shield",
        name="Tower Shield",
        attributes={"armour": 8, "agility": {"value": -9, "isGrouped": False}},
    )


@pytest.fixture
def blessing() -> Any:
    """Condition helping dexterity."""
    from statcraft.models import Condition

    return Condition(
        id="blessed",
        name="Blessed",
        target_attribute="dexterity",
        polarity="HELP",
        amount=2,
    )


@pytest.fixture
def hero_data() -> dict[str, Any]:
    """Camel-case wire form of the acting character."""
    return {
        "id": "hero",
        "name": "Rook",
        "attributes": {
            "armour": {"baseValue": 10, "isGrouped": True},
            "dexterity": {"baseValue": 10, "isGrouped": True},
            "strength": {"baseValue": 6, "isGrouped": True},
            "agility": {"baseValue": 5, "isGrouped": True},
        },
        "equippedItemIds": ["plate"],
        "readyItemIds": ["shield"],
        "fatigue": 0,
    }


@pytest.fixture
def hero(hero_data: dict[str, Any]) -> Any:
    """The acting character."""
    from statcraft.models import Character

    return Character.model_validate(hero_data)


@pytest.fixture
def goblin() -> Any:
    """A nimble but flimsy target."""
    from statcraft.models import Character

    return Character(
        id="goblin",
        name="Goblin",
        attributes={"agility": 1, "armour": 3, "endurance": 2},
    )


@pytest.fixture
def troll() -> Any:
    """A target far beyond the hero's reach."""
    from statcraft.models import Character

    return Character(
        id="troll",
        name="Troll",
        attributes={"agility": 100, "armour": 40, "endurance": 60},
    )


@pytest.fixture
def hit_break_kill() -> list[Any]:
    """Hit triggers Break, which triggers Kill."""
    from statcraft.models import Action

    return [
        Action.model_validate(
            {
                "actionId": "hit",
                "name": "Hit",
                "sourceAttribute": "DEXTERITY",
                "targetAttribute": "AGILITY",
                "effectType": "TRIGGER_ACTION",
                "nextActionId": "break",
            }
        ),
        Action.model_validate(
            {
                "actionId": "break",
                "name": "Break",
                "sourceAttribute": "STRENGTH",
                "targetAttribute": "ARMOUR",
                "effectType": "TRIGGER_ACTION",
                "nextActionId": "kill",
            }
        ),
        Action.model_validate(
            {
                "actionId": "kill",
                "name": "Kill",
                "sourceAttribute": "STRENGTH",
                "targetAttribute": "ENDURANCE",
                "effectType": "DESTROY",
            }
        ),
    ]


@pytest.fixture
def records(
    plate: Any,
    shield: Any,
    blessing: Any,
    hero: Any,
    goblin: Any,
    troll: Any,
    hit_break_kill: list[Any],
) -> Any:
    """Record catalog holding every fixture record."""
    from statcraft.storage import RecordCatalog

    return RecordCatalog(
        characters=[hero, goblin, troll],
        items=[plate, shield],
        conditions=[blessing],
        actions=hit_break_kill,
    )


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def rules() -> Any:
    """The default rule set."""
    from statcraft.engine.rules import RuleSet

    return RuleSet.default()


@pytest.fixture
def catalog() -> Any:
    """Attribute catalog for the default rule set."""
    from statcraft.engine.catalog import AttributeCatalog

    return AttributeCatalog()


@pytest.fixture
def engine(records: Any) -> Any:
    """StatEngine over the fixture records with the default rules."""
    from statcraft.engine.resolver import StatEngine

    return StatEngine(records)


@pytest.fixture
def dice_roller() -> Any:
    """Create a DiceRoller with a fixed seed for reproducible tests.

    Returns:
        DiceRoller instance with fixed seed.
    """
    from statcraft.engine.dice import DiceRoller

    return DiceRoller(seed=42)
