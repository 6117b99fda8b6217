from __future__ import annotations

import logging

from goodsort.components.board_position import Layer
from goodsort.constants import ABILITY_SHUFFLE
from goodsort.events.trace import ResolutionTrace, TilesShuffled
from goodsort.systems.abilities.base import AbilityContext
from goodsort.systems.board_ops import enabled_cells, front_tile_map, place_tile, remove_tile

logger = logging.getLogger(__name__)


class ShuffleResolver:
    """Redistributes every front tile across all enabled front cells.

    Tiles may land on previously empty cells, so a shuffle can both create
    matches and empty whole section-rows.
    """

    name = ABILITY_SHUFFLE
    from_promotion = False

    def apply(self, ctx: AbilityContext, trace: ResolutionTrace) -> None:
        tiles = front_tile_map(ctx.world)
        if len(tiles) < 2:
            logger.info("Shuffle skipped: %d front tile(s)", len(tiles))
            return
        occupied = sorted(tiles, key=lambda cell: (cell[1], cell[0]))
        types = [tiles[cell] for cell in occupied]
        coords = enabled_cells(ctx.world)
        ctx.rng.shuffle(types)
        ctx.rng.shuffle(coords)
        for x, y in occupied:
            remove_tile(ctx.world, x, y, Layer.FRONT)
        placements = sorted(zip(coords, types), key=lambda item: (item[0][1], item[0][0]))
        for (x, y), type_id in placements:
            place_tile(ctx.world, x, y, Layer.FRONT, type_id)
        logger.info("Shuffled %d tile(s) over %d cell(s)", len(types), len(coords))
        trace.append(TilesShuffled(placements=tuple(placements)))
