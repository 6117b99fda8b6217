from dataclasses import dataclass, field
from typing import Dict, Tuple

from goodsort.components.board_position import Layer

CellKey = Tuple[int, int, Layer]


@dataclass(slots=True)
class CellIndex:
    """Lookup from (x, y, layer) to the cell entity, stored on the board entity.

    Only cells of enabled sections have entities.
    """
    entities: Dict[CellKey, int] = field(default_factory=dict)
