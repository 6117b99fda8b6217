from __future__ import annotations

import logging
import random
from functools import partial
from typing import Dict

from esper import World

from goodsort.constants import ABILITY_RANDOM_MATCH, ABILITY_SHUFFLE
from goodsort.errors import AbilityUnavailable
from goodsort.events.bus import EventBus
from goodsort.events.trace import ResolutionTrace
from goodsort.systems.abilities import AbilityContext, AbilityResolver, create_resolver_registry
from goodsort.systems.match_resolution import MatchResolutionSystem

logger = logging.getLogger(__name__)


class AbilitySystem:
    """Runs special abilities through the resolution engine.

    Budgets are not checked here; see PowerBudgetSystem.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        engine: MatchResolutionSystem,
        rng: random.Random | None = None,
        resolvers: Dict[str, AbilityResolver] | None = None,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.engine = engine
        self.rng = rng or getattr(world, "random", None) or random.Random()
        self.resolvers = create_resolver_registry(resolvers)

    def available(self) -> list[str]:
        return sorted(self.resolvers)

    def activate(self, ability: str) -> ResolutionTrace:
        resolver = self.resolvers.get(ability)
        if resolver is None:
            raise AbilityUnavailable(ability, "unknown_ability")
        if self.engine.is_resolving:
            raise AbilityUnavailable(ability, "resolution_in_progress")
        ctx = AbilityContext(world=self.world, event_bus=self.event_bus, rng=self.rng)
        trace = self.engine.run_action(
            ability,
            partial(resolver.apply, ctx),
            from_promotion=resolver.from_promotion,
        )
        logger.info("%s resolved: %d tile(s) cleared", ability, trace.tiles_cleared)
        return trace

    def use_random_match(self) -> ResolutionTrace:
        return self.activate(ABILITY_RANDOM_MATCH)

    def use_shuffle(self) -> ResolutionTrace:
        return self.activate(ABILITY_SHUFFLE)
