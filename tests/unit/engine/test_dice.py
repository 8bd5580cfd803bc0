"""Tests for dice rolling mechanics."""

from __future__ import annotations

import pytest

from statcraft.core.exceptions import DiceRollError
from statcraft.engine.dice import DiceRoller
from statcraft.models import ContestResult, DiceRoll


class TestRoll:
    """Tests for DiceRoller.roll."""

    def test_simple_roll(self, dice_roller: DiceRoller) -> None:
        """Test simple d20 roll."""
        assert 1 <= dice_roller.roll("1d20") <= 20

    def test_roll_with_negative_modifier(self, dice_roller: DiceRoller) -> None:
        """Test roll with negative modifier."""
        assert -2 <= dice_roller.roll("1d10-3") <= 7

    def test_multiple_dice(self, dice_roller: DiceRoller) -> None:
        """Test rolling multiple dice."""
        assert 3 <= dice_roller.roll("3d6") <= 18

    @pytest.mark.parametrize("expression", ["", "   "])
    def test_empty_expression(self, dice_roller: DiceRoller, expression: str) -> None:
        """Test empty expressions are rejected."""
        with pytest.raises(DiceRollError, match="Empty"):
            dice_roller.roll(expression)

    def test_invalid_expression(self, dice_roller: DiceRoller) -> None:
        """Test that invalid expressions raise DiceRollError."""
        with pytest.raises(DiceRollError) as exc_info:
            dice_roller.roll("invalid")

        assert exc_info.value.details["expression"] == "invalid"

    def test_seed_reproducible(self) -> None:
        """Test that the same seed reproduces the same rolls."""
        roller = DiceRoller(seed=7)
        first = [roller.roll("1d100") for _ in range(5)]
        roller = DiceRoller(seed=7)
        second = [roller.roll("1d100") for _ in range(5)]

        assert first == second


class TestRollAttribute:
    """Tests for DiceRoller.roll_attribute."""

    def test_dice_attribute(self, dice_roller: DiceRoller) -> None:
        """Test a dice attribute rolls 1d{size}+modifier."""
        result = dice_roller.roll_attribute("strength", 5)

        assert isinstance(result, DiceRoll)
        assert result.expression == "1d8+5"
        assert 6 <= result.total <= 13
        assert result.face is not None
        assert 1 <= result.face <= 8
        assert result.total == result.face + 5

    def test_negative_modifier(self, dice_roller: DiceRoller) -> None:
        """Test a negative modifier renders and rolls correctly."""
        result = dice_roller.roll_attribute("agility", -4)

        assert result.expression == "1d10-4"
        assert -3 <= result.total <= 6

    def test_static_attribute(self, dice_roller: DiceRoller) -> None:
        """Test a static attribute is not rolled."""
        result = dice_roller.roll_attribute("armour", 14)

        assert result == DiceRoll(expression="Static: 14", total=14, modifier=14)


class TestContest:
    """Tests for DiceRoller.contest."""

    def test_static_contest(self, dice_roller: DiceRoller) -> None:
        """Test a static contest has a fixed outcome."""
        result = dice_roller.contest("armour", 10, "endurance", 4)

        assert isinstance(result, ContestResult)
        assert result.success is True
        assert result.margin == 6

    def test_tie_goes_to_target(self, dice_roller: DiceRoller) -> None:
        """Test equal totals are a failure for the source."""
        result = dice_roller.contest("armour", 4, "endurance", 4)

        assert result.success is False
        assert result.margin == 0

    def test_dice_contest_consistent(self, dice_roller: DiceRoller) -> None:
        """Test the outcome agrees with the rolled totals."""
        for _ in range(20):
            result = dice_roller.contest("dexterity", 2, "agility", 1)

            assert result.margin == result.source.total - result.target.total
            assert result.success is (result.source.total > result.target.total)
