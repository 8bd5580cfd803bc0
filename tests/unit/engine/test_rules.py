"""Tests for rule-set tables."""

from __future__ import annotations

from pathlib import Path

import pytest

from statcraft.core.config import Settings
from statcraft.core.exceptions import ConfigurationError
from statcraft.engine.rules import DifficultyBand, RuleSet
from statcraft.models import AttributeDefinition, DieSize, FatigueRule


class TestRuleSetDefaults:
    """Tests for the default and legacy rule sets."""

    def test_default_tables(self, rules: RuleSet) -> None:
        """Test the default rule set carries the standard tables."""
        names = {definition.name: definition.die for definition in rules.definitions}

        assert names["STRENGTH"] is DieSize.D8
        assert names["CHARISMA"] is DieSize.D100
        assert names["ARMOUR"] is DieSize.STATIC
        assert [band.label for band in rules.bands] == [
            "Very Easy",
            "Easy",
            "Normal",
            "Hard",
            "Very Hard",
            "Extremely Hard",
        ]
        assert rules.fatigue_rule is FatigueRule.IGNORE
        assert rules.grouping_scale == 0.25

    def test_legacy_rule(self) -> None:
        """Test the legacy rule set subtracts fatigue."""
        assert RuleSet.legacy().fatigue_rule is FatigueRule.SUBTRACT_FROM_DICE

    def test_frozen(self, rules: RuleSet) -> None:
        """Test rule sets cannot be mutated in place."""
        with pytest.raises(ValueError):
            rules.grouping_scale = 0.5  # type: ignore[misc]


class TestRuleSetValidation:
    """Tests for table validation."""

    def test_duplicate_attribute(self) -> None:
        """Test an attribute defined twice is rejected."""
        with pytest.raises(ConfigurationError) as exc_info:
            RuleSet(
                definitions=(
                    AttributeDefinition(name="strength", die=8),
                    AttributeDefinition(name="STRENGTH", die=6),
                )
            )
        assert exc_info.value.details["config_key"] == "definitions"

    def test_empty_bands(self) -> None:
        """Test an empty band table is rejected."""
        with pytest.raises(ConfigurationError):
            RuleSet(bands=())

    def test_unsorted_bands(self) -> None:
        """Test band ceilings must ascend."""
        with pytest.raises(ConfigurationError, match="ascending"):
            RuleSet(
                bands=(
                    DifficultyBand(ceiling=5, label="Fine"),
                    DifficultyBand(ceiling=0, label="Tough"),
                )
            )


class TestRuleSetCopies:
    """Tests for derived rule sets."""

    def test_with_dice(self, rules: RuleSet) -> None:
        """Test re-binding an attribute leaves the original untouched."""
        custom = rules.with_dice({"perception": 8})

        assert {d.name: d.die for d in custom.definitions}["PERCEPTION"] is DieSize.D8
        assert {d.name: d.die for d in rules.definitions}["PERCEPTION"] is DieSize.STATIC

    def test_with_dice_invalid_size(self, rules: RuleSet) -> None:
        """Test an unsupported die size is a configuration error."""
        with pytest.raises(ConfigurationError):
            rules.with_dice({"perception": 7})

    def test_with_bands(self, rules: RuleSet) -> None:
        """Test replacing the band table."""
        custom = rules.with_bands({0: "Possible", 10: "Unlikely"})

        assert [band.label for band in custom.bands] == ["Possible", "Unlikely"]

    def test_with_bands_validated(self, rules: RuleSet) -> None:
        """Test replaced band tables are validated too."""
        with pytest.raises(ConfigurationError):
            rules.with_bands([(10, "Unlikely"), (0, "Possible")])

    def test_from_settings(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test building a rule set from settings."""
        monkeypatch.chdir(tmp_path)
        settings = Settings(
            rules={"fatigue_rule": "subtract_dice", "grouping_scale": 0.5, "max_chain_length": 3}
        )

        rules = RuleSet.from_settings(settings)

        assert rules.fatigue_rule is FatigueRule.SUBTRACT_FROM_DICE
        assert rules.grouping_scale == 0.5
        assert rules.max_chain_length == 3
