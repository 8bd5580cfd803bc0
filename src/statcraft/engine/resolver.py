"""Stat resolution facade.

StatEngine wires the catalog, modifier, grouping, action and chain
components together over a RecordCatalog. It is the single entry point
used by every caller, so a value shown to a player and a value used in an
action test always come from the same computation.

Example:
    >>> engine = StatEngine(records)
    >>> resolution = engine.resolve_attribute(hero, "armour")
    >>> resolution.value
    14
    >>> result = engine.test_action(hit, hero, goblin)
    >>> result.band
    'Easy'
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from statcraft.core.exceptions import ActionTestError, ResolutionError, ValidationError
from statcraft.core.logging import action_context, get_logger
from statcraft.engine.actions import ActionResolver, FixedView, SupportsEffective
from statcraft.engine.catalog import AttributeCatalog
from statcraft.engine.chain import ChainExpander, apply_override
from statcraft.engine.dice import DiceRoller
from statcraft.engine.grouping import GroupingEngine
from statcraft.engine.modifiers import ModifierResolver
from statcraft.engine.rules import RuleSet
from statcraft.models.enums import EntityKind, GroupingMode
from statcraft.models.records import Action, AttributeInstance, ChainOverride, Character, Item
from statcraft.models.results import (
    ActionTestResult,
    AttributeResolution,
    ConditionAdjustment,
    ContestResult,
    ContributionSource,
    GroupedValue,
)
from statcraft.storage.catalog import RecordCatalog


logger = get_logger(__name__)

Entity = Character | Item


def _normalise_name(attribute_name: str | None, entity_id: str | None = None) -> str:
    if not attribute_name or not attribute_name.strip():
        raise ResolutionError(
            "Attribute name must not be empty",
            attribute_name=attribute_name,
            entity_id=entity_id,
        )
    return attribute_name.strip().lower()


def _parse_mode(mode: GroupingMode | str) -> GroupingMode:
    if isinstance(mode, GroupingMode):
        return mode
    try:
        return GroupingMode(str(mode).strip().lower())
    except ValueError as exc:
        raise ValidationError(
            f"Unknown grouping mode {mode!r}",
            field_name="mode",
            invalid_value=mode,
            details={"allowed": [m.value for m in GroupingMode]},
        ) from exc


def _ready_ids(character: Character, selected: str | None) -> list[str]:
    if selected is None:
        return list(character.ready_item_ids)
    return [selected] if selected in character.ready_item_ids else []


# =============================================================================
# Entity Views
# =============================================================================


class EntityView:
    """Effective values of one entity, memoised for a single call."""

    def __init__(
        self,
        engine: StatEngine,
        entity: Entity,
        mode: GroupingMode,
        selected_ready_item_id: str | None = None,
    ) -> None:
        self._engine = engine
        self._entity = entity
        self._mode = mode
        self._selected = selected_ready_item_id
        self._memo: dict[str, int] = {}

    @property
    def entity_id(self) -> str:
        return self._entity.id

    @property
    def name(self) -> str:
        return self._entity.name

    def effective(self, attribute_name: str) -> int:
        key = attribute_name.strip().lower()
        if key not in self._memo:
            self._memo[key] = self._engine.effective_value(
                self._entity, key, self._mode, selected_ready_item_id=self._selected
            )
        return self._memo[key]


class GroupView:
    """Several entities acting as one, combined with the grouping fold."""

    def __init__(self, engine: StatEngine, views: Sequence[EntityView], kind: EntityKind) -> None:
        self._engine = engine
        self._views = tuple(views)
        self._kind = kind
        self._memo: dict[str, int] = {}

    def effective(self, attribute_name: str) -> int:
        key = attribute_name.strip().lower()
        if key not in self._memo:
            combined = self._engine.grouping.combine(
                key,
                [(view.entity_id, view.name, view.effective(key)) for view in self._views],
                kind=self._kind,
            )
            self._memo[key] = combined.value
        return self._memo[key]


# =============================================================================
# Engine
# =============================================================================


class StatEngine:
    """Resolves effective attributes and tests actions.

    Args:
        records: Records the engine may reference by id.
        rules: Rule set; the default one when omitted.
    """

    def __init__(
        self,
        records: RecordCatalog | None = None,
        rules: RuleSet | None = None,
    ) -> None:
        self.records = records or RecordCatalog()
        self.rules = rules or RuleSet.default()
        self.catalog = AttributeCatalog.from_rules(self.rules)
        self.modifiers = ModifierResolver.from_rules(self.rules, self.catalog)
        self.grouping = GroupingEngine.from_rules(self.rules)
        self.actions = ActionResolver.from_rules(self.rules, self.catalog)
        self.chains = ChainExpander.from_rules(self.rules, self.records.get_action)

    # -------------------------------------------------------------------------
    # Attribute resolution
    # -------------------------------------------------------------------------

    def resolve_attribute(
        self,
        character: Character,
        attribute_name: str,
        mode: GroupingMode | str = GroupingMode.EQUIPMENT,
        *,
        precomputed: float | None = None,
        selected_ready_item_id: str | None = None,
    ) -> AttributeResolution:
        """Effective value of a character's attribute with its breakdown.

        The character's base value is adjusted by its active conditions,
        then grouped with its equipped items, and in ready mode also with
        its readied items. A readied item that is also equipped contributes
        twice, once per role. A missing attribute counts as a grouped 0.

        Args:
            character: Character to resolve.
            attribute_name: Attribute to resolve, any case.
            mode: ``"equipment"`` or ``"ready"``.
            precomputed: Grouped value from an external resolver, only
                checked for plausibility.
            selected_ready_item_id: In ready mode, fold only this readied
                item. An id the character has not readied folds none.

        Returns:
            The resolution, including the grouping breakdown.

        Raises:
            ResolutionError: If the attribute name is empty.
            ValidationError: If the mode is unknown.
        """
        name = _normalise_name(attribute_name, character.id)
        grouping_mode = _parse_mode(mode)

        base = character.attribute(name) or AttributeInstance()
        conditions = self.records.get_conditions(character.active_condition_ids)
        adjusted, adjustments = self.modifiers.apply_conditions(base.value, name, conditions)

        sources = [
            ContributionSource(
                entity_id=character.id,
                entity_name=character.name,
                kind=EntityKind.CHARACTER,
                value=adjusted,
                is_grouped=base.is_grouped,
            )
        ]
        sources.extend(
            self._item_sources(character.equipped_item_ids, name, EntityKind.EQUIPPED_ITEM, set())
        )
        if grouping_mode is GroupingMode.READY:
            ready_ids = _ready_ids(character, selected_ready_item_id)
            sources.extend(self._item_sources(ready_ids, name, EntityKind.READY_ITEM, set()))

        grouped = self.grouping.grouped_value(name, sources, precomputed=precomputed)
        logger.debug(
            "Attribute resolved",
            entity_id=character.id,
            attribute=name,
            mode=grouping_mode.value,
            value=grouped.value,
        )
        return self._resolution(character.id, name, grouping_mode, grouped, adjustments)

    def resolve_object_attribute(
        self,
        item: Item,
        attribute_name: str,
        *,
        precomputed: float | None = None,
    ) -> AttributeResolution:
        """Effective value of an object grouped with its own equipment."""
        name = _normalise_name(attribute_name, item.id)
        own = item.attribute(name) or AttributeInstance()
        sources = [
            ContributionSource(
                entity_id=item.id,
                entity_name=item.name,
                kind=EntityKind.OBJECT,
                value=own.value,
                is_grouped=own.is_grouped,
            )
        ]
        sources.extend(
            self._item_sources(item.equipped_item_ids, name, EntityKind.EQUIPPED_ITEM, {item.id})
        )
        grouped = self.grouping.grouped_value(name, sources, precomputed=precomputed)
        return self._resolution(item.id, name, GroupingMode.EQUIPMENT, grouped, ())

    def effective_value(
        self,
        entity: Entity,
        attribute_name: str,
        mode: GroupingMode | str = GroupingMode.EQUIPMENT,
        *,
        selected_ready_item_id: str | None = None,
    ) -> int:
        """Value an entity rolls with, after the fatigue rule.

        Objects have no fatigue; characters go through the rule set's
        fatigue rule, applied to the displayed value so a roll never
        disagrees with what the player was shown.
        """
        if isinstance(entity, Item):
            return self.resolve_object_attribute(entity, attribute_name).value
        resolution = self.resolve_attribute(
            entity, attribute_name, mode, selected_ready_item_id=selected_ready_item_id
        )
        return self.modifiers.effective_value(resolution.value, entity.fatigue, attribute_name)

    def view(
        self,
        entity: Entity,
        mode: GroupingMode | str = GroupingMode.EQUIPMENT,
        selected_ready_item_id: str | None = None,
    ) -> EntityView:
        """Memoising view of an entity for one call."""
        return EntityView(self, entity, _parse_mode(mode), selected_ready_item_id)

    # -------------------------------------------------------------------------
    # Action tests
    # -------------------------------------------------------------------------

    def test_action(
        self,
        action: Action,
        source: Character | None,
        target: Entity | None,
        *,
        mode: GroupingMode | str = GroupingMode.EQUIPMENT,
        target_override: float | None = None,
        source_override: float | None = None,
        selected_ready_item_id: str | None = None,
        chain_overrides: Mapping[int, ChainOverride] | None = None,
    ) -> ActionTestResult:
        """Test one source against one target.

        Args:
            action: Action being attempted.
            source: Acting character.
            target: Resisting character or object.
            mode: Grouping mode for every resolution in the test.
            target_override: Fixed target value replacing the target's
                resolved attributes.
            source_override: Fixed source value replacing the source's
                resolved attributes.
            selected_ready_item_id: Single readied item the source folds
                in ready mode.
            chain_overrides: Fixed values for individual links, keyed by
                chain position; position 0 is the tested action itself.

        Returns:
            Difficulty, band, roll requirement, chain and success chance.

        Raises:
            ActionTestError: If a side has neither an entity nor an override.
        """
        grouping_mode = _parse_mode(mode)
        sources = [source] if source is not None else []
        source_view = self._source_view(
            action, sources, grouping_mode, source_override, selected_ready_item_id
        )
        targets = [target] if target is not None else []
        target_view = self._target_view(action, targets, grouping_mode, target_override)
        return self._test(action, source_view, target_view, chain_overrides)

    def test_group_action(
        self,
        action: Action,
        sources: Sequence[Character],
        targets: Sequence[Entity] = (),
        *,
        mode: GroupingMode | str = GroupingMode.EQUIPMENT,
        target_override: float | None = None,
        source_override: float | None = None,
        selected_ready_item_id: str | None = None,
        chain_overrides: Mapping[int, ChainOverride] | None = None,
    ) -> ActionTestResult:
        """Test several sources acting together against one or more targets.

        Each side's effective values are combined with the grouping fold;
        members with no positive value are left out of their side.

        Raises:
            ActionTestError: If there are neither sources nor a source
                override, or neither targets nor a target override.
        """
        grouping_mode = _parse_mode(mode)
        source_view = self._source_view(
            action, sources, grouping_mode, source_override, selected_ready_item_id
        )
        target_view = self._target_view(action, targets, grouping_mode, target_override)
        return self._test(action, source_view, target_view, chain_overrides)

    def roll_action(
        self,
        action: Action,
        source: Character | None,
        target: Entity | None,
        roller: DiceRoller | None = None,
        *,
        mode: GroupingMode | str = GroupingMode.EQUIPMENT,
        target_override: float | None = None,
        source_override: float | None = None,
        selected_ready_item_id: str | None = None,
    ) -> ContestResult:
        """Roll the action's source attribute against its target attribute."""
        grouping_mode = _parse_mode(mode)
        roller = roller or DiceRoller(self.catalog)
        sources = [source] if source is not None else []
        source_view = self._source_view(
            action, sources, grouping_mode, source_override, selected_ready_item_id
        )
        targets = [target] if target is not None else []
        target_view = self._target_view(action, targets, grouping_mode, target_override)
        return roller.contest(
            action.source_attribute,
            source_view.effective(action.source_attribute),
            action.target_attribute,
            target_view.effective(action.target_attribute),
        )

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _test(
        self,
        action: Action,
        source: SupportsEffective,
        target: SupportsEffective,
        chain_overrides: Mapping[int, ChainOverride] | None = None,
    ) -> ActionTestResult:
        overrides = dict(chain_overrides or {})
        with action_context(action.id):
            root_source, root_target = apply_override(source, target, overrides.get(0))
            source_value = root_source.effective(action.source_attribute)
            target_value = root_target.effective(action.target_attribute)
            difficulty = target_value - source_value
            chain = self.chains.expand_with_difficulty(
                action, source, target, self.actions, overrides
            )
        result = ActionTestResult(
            action_id=action.id,
            source_value=source_value,
            target_value=target_value,
            difficulty=difficulty,
            band=self.actions.band(difficulty),
            roll_needed=self.actions.roll_needed(action, difficulty),
            success_probability=self.actions.success_probability(
                action, source_value, target_value
            ),
            chain=chain,
        )
        logger.info(
            "Action tested",
            action_id=action.id,
            difficulty=difficulty,
            band=result.band,
            chain_length=len(chain),
        )
        return result

    def _source_view(
        self,
        action: Action,
        sources: Sequence[Character],
        mode: GroupingMode,
        override: float | None,
        selected_ready_item_id: str | None,
    ) -> SupportsEffective:
        if override is not None:
            return FixedView(override)
        if not sources:
            raise ActionTestError(
                "An action test needs a source or a source override",
                action_id=action.id,
            )
        views = [self.view(source, mode, selected_ready_item_id) for source in sources]
        if len(views) == 1:
            return views[0]
        return GroupView(self, views, EntityKind.CHARACTER)

    def _target_view(
        self,
        action: Action,
        targets: Sequence[Entity],
        mode: GroupingMode,
        override: float | None,
    ) -> SupportsEffective:
        if override is not None:
            return FixedView(override)
        if not targets:
            raise ActionTestError(
                "An action test needs a target or a target override",
                action_id=action.id,
            )
        if len(targets) == 1:
            return self.view(targets[0], mode)
        objects = all(isinstance(target, Item) for target in targets)
        kind = EntityKind.OBJECT if objects else EntityKind.CHARACTER
        return GroupView(self, [self.view(target, mode) for target in targets], kind)

    def _item_sources(
        self,
        item_ids: Sequence[str],
        attribute_name: str,
        kind: EntityKind,
        visited: set[str],
    ) -> list[ContributionSource]:
        sources: list[ContributionSource] = []
        for item in self.records.get_items(item_ids):
            if item.id in visited:
                logger.warning("Item equipment cycle detected", item_id=item.id)
                continue
            source = self._item_source(item, attribute_name, kind, visited | {item.id})
            if source is not None:
                sources.append(source)
        return sources

    def _item_source(
        self,
        item: Item,
        attribute_name: str,
        kind: EntityKind,
        visited: set[str],
    ) -> ContributionSource | None:
        own = item.attribute(attribute_name)
        nested = self._item_sources(
            item.equipped_item_ids, attribute_name, EntityKind.EQUIPPED_ITEM, visited
        )
        if own is None and not nested:
            return None
        value = own.value if own is not None else 0.0
        if nested:
            inner = [
                ContributionSource(
                    entity_id=item.id,
                    entity_name=item.name,
                    kind=EntityKind.OBJECT,
                    value=value,
                    is_grouped=own.is_grouped if own is not None else True,
                ),
                *nested,
            ]
            value = self.grouping.grouped_value(attribute_name, inner).exact_value
        return ContributionSource(
            entity_id=item.id,
            entity_name=item.name,
            kind=kind,
            value=value,
            is_grouped=own.is_grouped if own is not None else True,
        )

    def _resolution(
        self,
        entity_id: str,
        attribute_name: str,
        mode: GroupingMode,
        grouped: GroupedValue,
        adjustments: tuple[ConditionAdjustment, ...],
    ) -> AttributeResolution:
        return AttributeResolution(
            entity_id=entity_id,
            attribute_name=attribute_name,
            mode=mode,
            die=self.catalog.classify(attribute_name),
            value=grouped.value,
            exact_value=grouped.exact_value,
            roll=self.modifiers.format_roll(attribute_name, grouped.value),
            breakdown=grouped.breakdown,
            adjustments=adjustments,
            skipped=grouped.skipped,
            precomputed_discarded=grouped.precomputed_discarded,
        )


# =============================================================================
# Convenience Functions
# =============================================================================


def resolve_attribute(
    character: Character,
    attribute_name: str,
    mode: GroupingMode | str = GroupingMode.EQUIPMENT,
    *,
    records: RecordCatalog | None = None,
    rules: RuleSet | None = None,
    precomputed: float | None = None,
    selected_ready_item_id: str | None = None,
) -> AttributeResolution:
    """Resolve one attribute with a throwaway engine."""
    return StatEngine(records, rules).resolve_attribute(
        character,
        attribute_name,
        mode,
        precomputed=precomputed,
        selected_ready_item_id=selected_ready_item_id,
    )


def test_action(
    action: Action,
    source: Character | None,
    target: Entity | None,
    *,
    records: RecordCatalog | None = None,
    rules: RuleSet | None = None,
    mode: GroupingMode | str = GroupingMode.EQUIPMENT,
    target_override: float | None = None,
    source_override: float | None = None,
    selected_ready_item_id: str | None = None,
    chain_overrides: Mapping[int, ChainOverride] | None = None,
) -> ActionTestResult:
    """Test one action with a throwaway engine."""
    return StatEngine(records, rules).test_action(
        action,
        source,
        target,
        mode=mode,
        target_override=target_override,
        source_override=source_override,
        selected_ready_item_id=selected_ready_item_id,
        chain_overrides=chain_overrides,
    )


# keep pytest from collecting this when imported into a test module
test_action.__test__ = False  # type: ignore[attr-defined]


__all__ = [
    "Entity",
    "EntityView",
    "GroupView",
    "FixedView",
    "StatEngine",
    "resolve_attribute",
    "test_action",
]
