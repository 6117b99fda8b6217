from __future__ import annotations

import logging

from esper import World

from goodsort.components.ability_budget import AbilityBudget
from goodsort.constants import ABILITY_RANDOM_MATCH, ABILITY_SHUFFLE
from goodsort.errors import AbilityUnavailable
from goodsort.events.bus import (
    EventBus,
    EVENT_ABILITY_ACTIVATE_REQUEST,
    EVENT_ABILITY_BUDGET_CHANGED,
    EVENT_ABILITY_REJECTED,
    EVENT_ABILITY_USED,
    EVENT_LEVEL_LOADED,
)
from goodsort.events.trace import ResolutionTrace
from goodsort.level import LevelConfig
from goodsort.systems.ability_system import AbilitySystem

logger = logging.getLogger(__name__)


class PowerBudgetSystem:
    """Tracks per-level ability uses and gates activation requests on them."""

    def __init__(self, world: World, event_bus: EventBus, abilities: AbilitySystem) -> None:
        self.world = world
        self.event_bus = event_bus
        self.abilities = abilities
        event_bus.subscribe(EVENT_LEVEL_LOADED, self.on_level_loaded)
        event_bus.subscribe(EVENT_ABILITY_ACTIVATE_REQUEST, self.on_activate_request)

    def budget(self) -> AbilityBudget:
        for _, budget in self.world.get_component(AbilityBudget):
            return budget
        budget = AbilityBudget()
        self.world.create_entity(budget)
        return budget

    def uses_left(self, ability: str) -> int:
        return self.budget().uses_left(ability)

    def on_level_loaded(self, sender, **payload) -> None:
        level: LevelConfig | None = payload.get("level")
        if level is None:
            return
        budget = self.budget()
        budget.remaining = {
            ABILITY_RANDOM_MATCH: max(0, int(level.random_match_uses)),
            ABILITY_SHUFFLE: max(0, int(level.shuffle_uses)),
        }
        for ability, remaining in sorted(budget.remaining.items()):
            self.event_bus.emit(EVENT_ABILITY_BUDGET_CHANGED, ability=ability, remaining=remaining)

    def on_activate_request(self, sender, **payload) -> None:
        ability = payload.get("ability")
        if not ability:
            return
        try:
            self.use(ability)
        except AbilityUnavailable as exc:
            # Already reported through EVENT_ABILITY_REJECTED.
            logger.debug("Ability request refused: %s", exc)

    def use(self, ability: str) -> ResolutionTrace:
        """Spend one use of ``ability`` if it resolves; nothing is spent on failure."""
        budget = self.budget()
        if budget.uses_left(ability) <= 0:
            self._reject(ability, "budget_exhausted")
            raise AbilityUnavailable(ability, "budget_exhausted")
        try:
            trace = self.abilities.activate(ability)
        except AbilityUnavailable as exc:
            self._reject(ability, exc.reason)
            raise
        budget.remaining[ability] = budget.uses_left(ability) - 1
        remaining = budget.remaining[ability]
        self.event_bus.emit(EVENT_ABILITY_BUDGET_CHANGED, ability=ability, remaining=remaining)
        self.event_bus.emit(EVENT_ABILITY_USED, ability=ability, remaining=remaining, trace=trace)
        return trace

    def _reject(self, ability: str, reason: str) -> None:
        logger.info("Ability %s rejected: %s", ability, reason)
        self.event_bus.emit(EVENT_ABILITY_REJECTED, ability=ability, reason=reason)
