"""Expansion of TRIGGER_ACTION links into an ordered action chain.

A successful TRIGGER_ACTION action hands off to the next action it names,
e.g. Hit -> Break -> Kill. Record data is edited by hand, so links may be
missing or form cycles; expansion walks the links iteratively with a
visited-id set and a length guard so it always terminates.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import NamedTuple

from statcraft.core.constants import DEFAULT_MAX_CHAIN_LENGTH
from statcraft.core.logging import get_logger
from statcraft.engine.actions import ActionResolver, FixedView, SupportsEffective
from statcraft.engine.rules import RuleSet
from statcraft.models.enums import ChainState
from statcraft.models.records import Action, ChainOverride
from statcraft.models.results import ActionChainNode


logger = get_logger(__name__)

ActionLookup = Callable[[str], Action | None]


class ChainLink(NamedTuple):
    """An action at its position in a chain."""

    position: int
    action: Action
    state: ChainState
    terminal: bool = False


class ChainExpander:
    """Follows trigger links from a root action.

    Args:
        actions: Mapping or callable resolving an action id to an Action.
        max_chain_length: Largest number of nodes a chain may hold.
    """

    def __init__(
        self,
        actions: Mapping[str, Action] | ActionLookup,
        *,
        max_chain_length: int = DEFAULT_MAX_CHAIN_LENGTH,
    ) -> None:
        self._lookup: ActionLookup = actions.get if isinstance(actions, Mapping) else actions
        self.max_chain_length = max_chain_length

    @classmethod
    def from_rules(
        cls,
        rules: RuleSet,
        actions: Mapping[str, Action] | ActionLookup,
    ) -> ChainExpander:
        return cls(actions, max_chain_length=rules.max_chain_length)

    def expand(self, root: Action) -> list[ChainLink]:
        """Walk the trigger links starting at ``root``.

        The root is always ROOT. Followed actions are LINKED, except the
        last one which is TERMINAL. The link the chain ends at, a lone root
        included, carries ``terminal=True``. Walking stops when an action does not
        trigger, names no resolvable next action, would revisit an action,
        or the chain reaches ``max_chain_length``.

        Args:
            root: Action that was invoked.

        Returns:
            The chain in order; never contains the same action twice.
        """
        chain = [root]
        visited = {root.id}
        current = root

        while current.triggers and len(chain) < self.max_chain_length:
            next_action = self._next(current)
            if next_action is None:
                logger.debug(
                    "Trigger link does not resolve",
                    action_id=current.id,
                    next_action_ids=current.next_action_ids,
                )
                break
            if next_action.id in visited:
                logger.warning(
                    "Action chain cycle detected",
                    root_id=root.id,
                    action_id=current.id,
                    revisited_id=next_action.id,
                )
                break
            visited.add(next_action.id)
            chain.append(next_action)
            current = next_action
        else:
            if current.triggers:
                logger.warning(
                    "Action chain truncated",
                    root_id=root.id,
                    max_chain_length=self.max_chain_length,
                )

        return [
            ChainLink(
                position=index,
                action=action,
                state=_state(index, len(chain)),
                terminal=index == len(chain) - 1,
            )
            for index, action in enumerate(chain)
        ]

    def expand_with_difficulty(
        self,
        root: Action,
        source: SupportsEffective,
        target: SupportsEffective,
        resolver: ActionResolver,
        overrides: Mapping[int, ChainOverride] | None = None,
    ) -> tuple[ActionChainNode, ...]:
        """Expand the chain and attach each link's difficulty.

        Every link is tested between the same source and target, each
        with its own source and target attributes, unless ``overrides``
        fixes a side for the link at that position.

        Args:
            root: Action that was invoked.
            source: Acting side.
            target: Resisting side.
            resolver: Computes each link's difficulty.
            overrides: Fixed values keyed by chain position.

        Returns:
            One node per link, in chain order.
        """
        overrides = overrides or {}
        nodes: list[ActionChainNode] = []
        for link in self.expand(root):
            override = overrides.get(link.position)
            link_source, link_target = apply_override(source, target, override)
            nodes.append(
                ActionChainNode(
                    position=link.position,
                    action_id=link.action.id,
                    action_name=link.action.name,
                    state=link.state,
                    terminal=link.terminal,
                    difficulty=resolver.difficulty(link.action, link_source, link_target),
                    overridden=override is not None and not override.is_empty,
                )
            )
        return tuple(nodes)

    def _next(self, action: Action) -> Action | None:
        for action_id in action.next_action_ids:
            found = self._lookup(action_id)
            if found is not None:
                return found
        return None


def apply_override(
    source: SupportsEffective,
    target: SupportsEffective,
    override: ChainOverride | None,
) -> tuple[SupportsEffective, SupportsEffective]:
    """Swap in fixed values for whichever sides ``override`` sets."""
    if override is None:
        return source, target
    if override.source_value is not None:
        source = FixedView(override.source_value)
    if override.target_value is not None:
        target = FixedView(override.target_value)
    return source, target


def _state(index: int, length: int) -> ChainState:
    if index == 0:
        return ChainState.ROOT
    if index == length - 1:
        return ChainState.TERMINAL
    return ChainState.LINKED


__all__ = [
    "ActionLookup",
    "ChainLink",
    "ChainExpander",
    "apply_override",
]
