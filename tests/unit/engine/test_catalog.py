"""Tests for attribute classification."""

from __future__ import annotations

import pytest

from statcraft.core.exceptions import ConfigurationError
from statcraft.engine.catalog import AttributeCatalog
from statcraft.models import AttributeDefinition, DieSize, RollRange


class TestClassify:
    """Tests for AttributeCatalog.classify."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("SPEED", DieSize.D4),
            ("strength", DieSize.D8),
            ("Dexterity", DieSize.D6),
            ("agility", DieSize.D10),
            ("charisma", DieSize.D100),
            ("intelligence", DieSize.D20),
            ("resolve", DieSize.D12),
        ],
    )
    def test_dice_attributes(self, catalog: AttributeCatalog, name: str, expected: DieSize) -> None:
        """Test dice attributes classify case-insensitively."""
        assert catalog.classify(name) is expected
        assert catalog.uses_dice(name) is True

    @pytest.mark.parametrize("name", ["armour", "ARMOR", "weight", "endurance", "obscurity"])
    def test_static_attributes(self, catalog: AttributeCatalog, name: str) -> None:
        """Test static attributes."""
        assert catalog.classify(name) is DieSize.STATIC
        assert catalog.uses_dice(name) is False

    @pytest.mark.parametrize("name", ["luck", "", None])
    def test_unknown_is_static(self, catalog: AttributeCatalog, name: str | None) -> None:
        """Test unknown or missing names fail open to static."""
        assert catalog.classify(name) is DieSize.STATIC

    def test_definition_lookup(self, catalog: AttributeCatalog) -> None:
        """Test definitions for known and unknown names."""
        assert catalog.definition("strength").die is DieSize.D8
        assert catalog.definition("luck") == AttributeDefinition(name="LUCK")
        assert "STRENGTH" in catalog.attribute_names
        assert len(catalog.definitions) == len(catalog.attribute_names)

    def test_duplicate_definitions(self) -> None:
        """Test duplicate names are a configuration error."""
        with pytest.raises(ConfigurationError):
            AttributeCatalog(
                [AttributeDefinition(name="speed", die=4), AttributeDefinition(name="Speed")]
            )


class TestDieRange:
    """Tests for AttributeCatalog.die_range."""

    @pytest.mark.parametrize(
        ("die", "expected"),
        [
            (DieSize.D8, RollRange(min=1, max=8)),
            (20, RollRange(min=1, max=20)),
            ("d6", RollRange(min=1, max=6)),
            ("1d100", RollRange(min=1, max=100)),
        ],
    )
    def test_valid_dice(self, die: DieSize | int | str, expected: RollRange) -> None:
        """Test faces of valid dice."""
        assert AttributeCatalog.die_range(die) == expected

    @pytest.mark.parametrize("die", [DieSize.STATIC, None, "banana", "2d6", -4, True])
    def test_invalid_dice(self, die: object) -> None:
        """Test invalid or missing dice give an empty range."""
        assert AttributeCatalog.die_range(die) == RollRange(min=0, max=0)  # type: ignore[arg-type]
