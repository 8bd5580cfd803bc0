"""statcraft - character stat resolution and action-difficulty engine.

Given a character's base attributes, the items it carries and the
conditions affecting it, statcraft computes each attribute's effective
value, explains how that value was derived, and uses effective values to
resolve the difficulty and trigger chain of an action attempt.

Example:
    >>> from statcraft import Character, Item, RecordCatalog, StatEngine
    >>>
    >>> plate = Item(id="plate", name="Plate", attributes={"armour": 20})
    >>> hero = Character(
    ...     id="hero", name="Rook", attributes={"armour": 10}, equipped_item_ids=["plate"]
    ... )
    >>> engine = StatEngine(RecordCatalog(items=[plate]))
    >>> engine.resolve_attribute(hero, "armour").value
    14

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 records and results.
    engine: Grouping, modifiers, action tests, chains and dice.
    storage: Read-only record catalog.
"""

from __future__ import annotations

# Core
from statcraft.core.config import Settings, get_settings
from statcraft.core.exceptions import StatcraftError
from statcraft.core.logging import configure_logging, get_logger

# Engine
from statcraft.engine import (
    ActionResolver,
    AttributeCatalog,
    ChainExpander,
    DiceRoller,
    GroupingEngine,
    ModifierResolver,
    RuleSet,
    StatEngine,
    resolve_attribute,
    test_action,
)

# Models
from statcraft.models import (
    Action,
    ActionTestResult,
    AttributeResolution,
    Character,
    Condition,
    Item,
)

# Storage
from statcraft.storage import RecordCatalog, load_catalog


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "StatcraftError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Engine
    "RuleSet",
    "AttributeCatalog",
    "ModifierResolver",
    "GroupingEngine",
    "ActionResolver",
    "ChainExpander",
    "DiceRoller",
    "StatEngine",
    "resolve_attribute",
    "test_action",
    # Models
    "Character",
    "Item",
    "Condition",
    "Action",
    "AttributeResolution",
    "ActionTestResult",
    # Storage
    "RecordCatalog",
    "load_catalog",
]
