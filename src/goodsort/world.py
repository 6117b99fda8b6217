import random
from typing import Iterable

from esper import World
from goodsort.events.bus import EventBus
from goodsort.components.resolution_state import ResolutionState
from goodsort.components.tile_type_registry import TileTypeRegistry
from goodsort.components.tile_types import TileTypes
from goodsort.constants import DEFAULT_TILE_TYPES


def create_world(
    event_bus: EventBus,
    *,
    tile_types: Iterable[str] = DEFAULT_TILE_TYPES,
    rng: random.Random | None = None,
) -> World:
    """Create an empty world holding the shared resolution state and tile registry.

    The board itself is built by BoardSystem from a LevelConfig. ``event_bus``
    is accepted so every world factory shares the systems' signature.
    """
    world = World()
    setattr(world, "random", rng or random.Random())

    world.create_entity(ResolutionState())

    # Single registry entity with canonical goods
    world.create_entity(
        TileTypeRegistry(),
        TileTypes.from_names(tile_types),
    )
    return world
