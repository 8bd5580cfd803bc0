"""Tests for input records and derived results."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError as PydanticValidationError

from statcraft.models import (
    Action,
    ActionChainNode,
    AttributeDefinition,
    AttributeInstance,
    ChainState,
    Character,
    Condition,
    ConditionPolarity,
    Contribution,
    DieSize,
    EffectType,
    EntityKind,
    Item,
    TargetType,
    round_half_up,
)


class TestRoundHalfUp:
    """Tests for the shared rounding rule."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(13.75, 14), (10.4, 10), (10.5, 11), (-2.5, -2), (-2.6, -3), (0.0, 0)],
    )
    def test_rounding(self, value: float, expected: int) -> None:
        """Test ties go towards positive infinity."""
        assert round_half_up(value) == expected


class TestAttributeRecords:
    """Tests for AttributeDefinition and AttributeInstance."""

    def test_definition_name_upper_case(self) -> None:
        """Test definition names are normalised to upper case."""
        definition = AttributeDefinition(name="strength", die=8)
        assert definition.name == "STRENGTH"
        assert definition.die is DieSize.D8
        assert definition.uses_dice is True

    def test_static_definition(self) -> None:
        """Test the default die is static."""
        definition = AttributeDefinition(name="armour")
        assert definition.die.is_static
        assert definition.uses_dice is False

    def test_unsupported_die_rejected(self) -> None:
        """Test a die size outside the table is rejected."""
        with pytest.raises(PydanticValidationError):
            AttributeDefinition(name="luck", die=7)

    def test_instance_wire_names(self) -> None:
        """Test camelCase wire names are accepted."""
        instance = AttributeInstance.model_validate({"baseValue": 12, "isGrouped": False})
        assert instance.value == 12
        assert instance.is_grouped is False

    def test_instance_none_values(self) -> None:
        """Test missing numerics resolve to 0 and grouping defaults on."""
        instance = AttributeInstance.model_validate({"value": None, "isGrouped": None})
        assert instance.value == 0
        assert instance.is_grouped is True

    def test_instance_bare_number(self) -> None:
        """Test a bare number is shorthand for a grouped value."""
        item = Item(id="i1", attributes={"Armour": 5})
        assert item.attribute("ARMOUR") == AttributeInstance(value=5, is_grouped=True)


class TestCondition:
    """Tests for Condition records."""

    def test_wire_form(self) -> None:
        """Test the original condition field names."""
        condition = Condition.model_validate(
            {
                "conditionId": "c1",
                "name": "Slowed",
                "conditionTarget": "AGILITY",
                "conditionType": "hinder",
                "conditionAmount": 3,
            }
        )
        assert condition.polarity is ConditionPolarity.HINDER
        assert condition.signed_amount == -3
        assert condition.targets("agility")

    def test_none_amount(self) -> None:
        """Test a missing amount counts as 0."""
        condition = Condition(id="c2", target_attribute="strength", polarity="HELP", amount=None)
        assert condition.amount == 0
        assert condition.signed_amount == 0


class TestCharacter:
    """Tests for Character records."""

    def test_from_wire(self, hero_data: dict[str, Any]) -> None:
        """Test a character built from camelCase input."""
        character = Character.model_validate(hero_data)

        assert character.equipped_item_ids == ["plate"]
        assert character.ready_item_ids == ["shield"]
        assert character.attribute("Armour").value == 10
        assert character.attribute("luck") is None

    def test_round_trip(self, hero: Character) -> None:
        """Test serialising by alias and back is lossless."""
        dumped = hero.model_dump(by_alias=True)

        assert "equippedItemIds" in dumped
        assert Character.model_validate(dumped) == hero
        assert Character.model_validate_json(hero.model_dump_json(by_alias=True)) == hero

    def test_frozen(self, hero: Character) -> None:
        """Test records cannot be mutated."""
        with pytest.raises(PydanticValidationError):
            hero.fatigue = 3  # type: ignore[misc]

    def test_none_fatigue(self) -> None:
        """Test a missing fatigue counts as 0."""
        assert Character(id="c", fatigue=None).fatigue == 0


class TestAction:
    """Tests for Action records."""

    def test_single_next_action_folded(self, hit_break_kill: list[Action]) -> None:
        """Test the single nextActionId form becomes the ordered list."""
        hit = hit_break_kill[0]

        assert hit.next_action_ids == ["break"]
        assert hit.next_action_id == "break"
        assert hit.triggers is True

    def test_terminal_action(self, hit_break_kill: list[Action]) -> None:
        """Test a DESTROY action does not trigger."""
        kill = hit_break_kill[2]

        assert kill.effect_type is EffectType.DESTROY
        assert kill.next_action_id is None
        assert kill.triggers is False

    def test_trigger_without_next(self) -> None:
        """Test a TRIGGER_ACTION naming nothing does not trigger."""
        action = Action(
            id="a",
            source_attribute="strength",
            target_attribute="armour",
            effect_type="trigger_action",
            target_type="object",
        )
        assert action.effect_type is EffectType.TRIGGER_ACTION
        assert action.target_type is TargetType.OBJECT
        assert action.triggers is False

    def test_missing_attributes_rejected(self) -> None:
        """Test source and target attributes are required."""
        with pytest.raises(PydanticValidationError):
            Action(id="a", source_attribute="", target_attribute="armour")


class TestResults:
    """Tests for derived result models."""

    def test_contribution_display_total(self) -> None:
        """Test the display total rounds the running total."""
        step = Contribution(
            step=2,
            entity_id="hero",
            entity_kind=EntityKind.CHARACTER,
            value=10,
            is_grouped=True,
            running_total=13.75,
            formula="(20 + 10*(0.25+10/20)) / 2",
        )
        assert step.display_total == 14
        assert step.model_dump()["display_total"] == 14

    def test_chain_node_position_non_negative(self) -> None:
        """Test chain positions start at 0."""
        with pytest.raises(PydanticValidationError):
            ActionChainNode(position=-1, action_id="a", state=ChainState.ROOT)
