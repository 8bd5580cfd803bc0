"""Attribute classification: dice-based versus static attributes.

The catalog is a read-only view over a rule set's attribute table. It
fails open: an unknown attribute is treated as static, and an invalid die
descriptor yields an empty ``(0, 0)`` range, so callers never need to
special-case either.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from types import MappingProxyType

from statcraft.core.exceptions import ConfigurationError
from statcraft.core.logging import get_logger
from statcraft.engine.rules import RuleSet
from statcraft.models.enums import DieSize
from statcraft.models.records import AttributeDefinition
from statcraft.models.results import RollRange


logger = get_logger(__name__)

_DIE_NOTATION = re.compile(r"^\s*1?d(\d+)\s*$", re.IGNORECASE)


class AttributeCatalog:
    """Lookup table classifying attributes by the die they roll.

    Example:
        >>> catalog = AttributeCatalog()
        >>> catalog.classify("strength")
        <DieSize.D8: 8>
        >>> catalog.classify("armour").is_static
        True
        >>> catalog.die_range("d6")
        RollRange(min=1, max=6)
    """

    def __init__(self, definitions: Iterable[AttributeDefinition] | None = None) -> None:
        """Build the catalog.

        Args:
            definitions: Attribute definitions; the default rule set's when omitted.

        Raises:
            ConfigurationError: If an attribute is defined twice.
        """
        if definitions is None:
            definitions = RuleSet.default().definitions
        table: dict[str, AttributeDefinition] = {}
        for definition in definitions:
            if definition.name in table:
                raise ConfigurationError(
                    f"Attribute {definition.name} is defined more than once",
                    config_key="definitions",
                )
            table[definition.name] = definition
        self._table = MappingProxyType(table)

    @classmethod
    def from_rules(cls, rules: RuleSet) -> AttributeCatalog:
        """Build the catalog for a rule set."""
        return cls(rules.definitions)

    @property
    def definitions(self) -> tuple[AttributeDefinition, ...]:
        """All known definitions, in table order."""
        return tuple(self._table.values())

    @property
    def attribute_names(self) -> tuple[str, ...]:
        """All known attribute names, upper case."""
        return tuple(self._table)

    def definition(self, attribute_name: str | None) -> AttributeDefinition:
        """Definition for an attribute; unknown names get a static one."""
        key = (attribute_name or "").strip().upper()
        known = self._table.get(key)
        if known is not None:
            return known
        return AttributeDefinition(name=key or "UNKNOWN", die=DieSize.STATIC)

    def classify(self, attribute_name: str | None) -> DieSize:
        """Die rolled for an attribute, or ``DieSize.STATIC``.

        Lookup is case-insensitive; unknown and missing names are static.
        """
        if not attribute_name:
            return DieSize.STATIC
        definition = self._table.get(attribute_name.strip().upper())
        if definition is None:
            logger.debug("Unknown attribute classified as static", attribute=attribute_name)
            return DieSize.STATIC
        return definition.die

    def uses_dice(self, attribute_name: str | None) -> bool:
        """Whether an attribute is resolved by a roll."""
        return not self.classify(attribute_name).is_static

    @staticmethod
    def die_range(die: DieSize | int | str | None) -> RollRange:
        """Lowest and highest face of a die.

        Args:
            die: A DieSize, a face count, or notation such as ``"d8"``.

        Returns:
            ``RollRange(1, faces)``; ``RollRange(0, 0)`` for a static,
            missing or unparseable die.
        """
        faces = _faces(die)
        if faces <= 0:
            return RollRange(min=0, max=0)
        return RollRange(min=1, max=faces)


def _faces(die: DieSize | int | str | None) -> int:
    if die is None or isinstance(die, bool):
        return 0
    if isinstance(die, int):
        return int(die)
    if isinstance(die, str):
        match = _DIE_NOTATION.match(die)
        return int(match.group(1)) if match else 0
    return 0


__all__ = [
    "AttributeCatalog",
]
