from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, List, Tuple

from goodsort.components.board_position import Layer
from goodsort.constants import ABILITY_RANDOM_MATCH, RANDOM_MATCH_SIZE
from goodsort.errors import AbilityUnavailable
from goodsort.events.trace import ResolutionTrace, TilesMatched
from goodsort.systems.abilities.base import AbilityContext
from goodsort.systems.board_ops import front_tile_map, get_tile_registry, remove_tile

logger = logging.getLogger(__name__)

Cell = Tuple[int, int]


def _row_major(cell: Cell) -> Tuple[int, int]:
    return cell[1], cell[0]


def qualifying_types(ctx: AbilityContext) -> Dict[int, List[Cell]]:
    """Front-layer cells per tile type, for types with enough tiles to force a match."""
    by_type: Dict[int, List[Cell]] = defaultdict(list)
    for cell, type_id in front_tile_map(ctx.world).items():
        by_type[type_id].append(cell)
    return {
        type_id: sorted(cells, key=_row_major)
        for type_id, cells in by_type.items()
        if len(cells) >= RANDOM_MATCH_SIZE
    }


class RandomMatchResolver:
    """Force-clears three same-type front tiles, ignoring contiguity."""

    name = ABILITY_RANDOM_MATCH
    # The forced clear already happened, so the cascade opens with promotion.
    from_promotion = True

    def apply(self, ctx: AbilityContext, trace: ResolutionTrace) -> None:
        candidates = qualifying_types(ctx)
        if not candidates:
            raise AbilityUnavailable(
                self.name,
                "no_qualifying_type",
                f"no tile type has {RANDOM_MATCH_SIZE} or more tiles on the front layer",
            )
        type_id = ctx.rng.choice(sorted(candidates))
        cells = sorted(ctx.rng.sample(candidates[type_id], RANDOM_MATCH_SIZE), key=_row_major)
        for x, y in cells:
            remove_tile(ctx.world, x, y, Layer.FRONT)
        logger.info("Random match cleared %s at %s", get_tile_registry(ctx.world).name_for(type_id), cells)
        trace.append(TilesMatched(type_id=type_id, cells=tuple(cells), forced=True))
