from __future__ import annotations

import random
from typing import Any, Dict, List, Sequence, Tuple

from esper import World

from goodsort.components.board_position import Layer
from goodsort.events.bus import EventBus
from goodsort.level import LevelConfig
from goodsort.systems.board import BoardSystem
from goodsort.systems.board_ops import get_board, tile_at
from goodsort.systems.match_resolution import MatchResolutionSystem
from goodsort.world import create_world


def make_level(
    front_rows: Sequence[str],
    back_rows: Sequence[str] | None = None,
    **options: Any,
) -> LevelConfig:
    """Level from text rows, top row first: 'A' is type 0, '-' is empty."""
    return LevelConfig.from_rows(front_rows, back_rows, **options)


def build_board(
    front_rows: Sequence[str],
    back_rows: Sequence[str] | None = None,
    *,
    bus: EventBus | None = None,
    rng: random.Random | None = None,
    **options: Any,
) -> Tuple[World, EventBus, MatchResolutionSystem]:
    """World with a loaded (unsettled) board and a resolution engine."""
    bus = bus or EventBus()
    world = create_world(bus, rng=rng or random.Random(0))
    BoardSystem(world, bus, make_level(front_rows, back_rows, **options))
    engine = MatchResolutionSystem(world, bus)
    return world, bus, engine


def layer_rows(world: World, layer: Layer = Layer.FRONT) -> List[str]:
    """Render one layer back into the text-row notation used by make_level."""
    board = get_board(world)
    rows = []
    for y in range(board.height):
        chars = []
        for x in range(board.width):
            type_id = tile_at(world, x, y, layer)
            chars.append("-" if type_id is None else chr(ord("A") + type_id))
        rows.append("".join(chars))
    return rows


def record_events(bus: EventBus, *names: str) -> List[Tuple[str, Dict[str, Any]]]:
    """Subscribe to ``names`` and collect (name, payload) pairs in emission order."""
    seen: List[Tuple[str, Dict[str, Any]]] = []
    for name in names:
        bus.subscribe(name, lambda sender, _name=name, **payload: seen.append((_name, payload)))
    return seen
