from esper import World

from goodsort.components.resolution_state import ResolutionState


def get_or_create_resolution_state(world: World) -> ResolutionState:
    """Return the shared ResolutionState component, creating it if absent."""
    existing = list(world.get_component(ResolutionState))
    if existing:
        return existing[0][1]
    world.create_entity(ResolutionState())
    return list(world.get_component(ResolutionState))[0][1]


def is_resolving(world: World) -> bool:
    return get_or_create_resolution_state(world).cascade_active
