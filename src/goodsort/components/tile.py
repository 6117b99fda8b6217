from dataclasses import dataclass

from goodsort.constants import EMPTY_TILE

@dataclass(slots=True)
class TileType:
    """Per-cell tile type id.

    Occupancy is handled by ActiveSwitch; an inactive cell keeps EMPTY_TILE here.
    Type names live in the singleton entity with TileTypeRegistry + TileTypes.
    """
    type_id: int = EMPTY_TILE
