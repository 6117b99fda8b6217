from __future__ import annotations

import random
from dataclasses import dataclass
from typing import ClassVar, Protocol

from esper import World

from goodsort.events.bus import EventBus
from goodsort.events.trace import ResolutionTrace


@dataclass(slots=True)
class AbilityContext:
    """Execution context shared by ability resolvers."""

    world: World
    event_bus: EventBus
    rng: random.Random


class AbilityResolver(Protocol):
    """Interface implemented by concrete ability resolvers.

    ``apply`` performs the ability's own board mutation and records its
    opening events on the trace. It must raise AbilityUnavailable before
    touching the board when the ability cannot run.
    """

    name: ClassVar[str]
    from_promotion: ClassVar[bool]

    def apply(self, ctx: AbilityContext, trace: ResolutionTrace) -> None:
        ...
